"""Tests for revision resolution against a reference set."""

import pytest

from revclone.exceptions import CommitNotFound, RevisionNotFound
from revclone.git.resolver import (
    extract_version,
    find_reference,
    match_branch,
    resolve_revision,
)
from revclone.model import Reference

SHA_A = "a" * 40
SHA_B = "b" * 40
SHA_C = "c" * 40
SHA_TAG = "d" * 40


def refs(*names):
    return [Reference(name=name, object_id=SHA_A) for name in names]


@pytest.mark.short
class TestExtractVersion:
    @pytest.mark.parametrize(
        "revision, expected",
        [
            ("v2.14.1-release", "2.14.1"),
            ("2.14.1", "2.14.1"),
            ("release-1.2", "1.2"),
            ("v1.2-to-3.4", "1.2"),
            ("main", None),
            ("v2", None),
            ("", None),
        ],
    )
    def test_extract_version(self, revision, expected):
        assert extract_version(revision) == expected


@pytest.mark.short
class TestFindReference:
    def test_exact_match_takes_precedence(self):
        references = [
            Reference("release/v1.2.0", SHA_B),
            Reference("v1.2.0", SHA_A),
        ]
        assert find_reference("v1.2.0", references).name == "v1.2.0"

    def test_exact_match_precedence_is_order_independent(self):
        references = [
            Reference("v1.2.0", SHA_A),
            Reference("release/v1.2.0", SHA_B),
        ]
        assert find_reference("v1.2.0", references).name == "v1.2.0"

    def test_exact_match_by_short_tag_name(self):
        references = [
            Reference("refs/heads/release/v1.2.0", SHA_B),
            Reference("refs/tags/v1.2.0", SHA_A),
        ]
        assert find_reference("v1.2.0", references).name == "refs/tags/v1.2.0"

    def test_exact_match_by_full_name(self):
        references = refs("refs/heads/main", "refs/remotes/origin/main")
        ref = find_reference("refs/remotes/origin/main", references)
        assert ref.name == "refs/remotes/origin/main"

    def test_tag_wins_over_branch_with_same_short_name(self):
        references = refs("refs/heads/stable", "refs/tags/stable")
        assert find_reference("stable", references).name == "refs/tags/stable"

    def test_version_fragment_with_underscores(self):
        references = refs("refs/heads/main", "refs/tags/2_14_1")
        ref = find_reference("v2.14.1-final", references)
        assert ref.name == "refs/tags/2_14_1"

    def test_version_fragment_with_dots(self):
        references = refs("refs/heads/main", "refs/tags/release-2.14.1")
        ref = find_reference("v2.14.1-final", references)
        assert ref.name == "refs/tags/release-2.14.1"

    def test_version_fragment_ties_broken_by_name(self):
        references = refs("refs/tags/z-1.0", "refs/tags/a-1_0", "refs/tags/m-1.0")
        assert find_reference("v1.0-rc", references).name == "refs/tags/a-1_0"

    def test_only_first_version_fragment_is_used(self):
        references = refs("refs/tags/3.4")
        with pytest.raises(RevisionNotFound):
            find_reference("from-1.2-to-3.4", references)

    def test_branch_suffix_matches_remote_tracking_branch(self):
        references = refs("refs/remotes/origin/feature/login", "refs/tags/v1.0")
        ref = find_reference("login", references)
        assert ref.name == "refs/remotes/origin/feature/login"

    def test_branch_suffix_prefers_local_branch(self):
        references = refs("refs/remotes/origin/develop", "refs/heads/team/develop")
        assert find_reference("develop", references).name == "refs/heads/team/develop"

    def test_branch_suffix_ignores_other_namespaces(self):
        with pytest.raises(RevisionNotFound):
            find_reference("main", refs("refs/notes/main"))

    def test_suffix_must_be_a_whole_path_segment(self):
        with pytest.raises(RevisionNotFound):
            find_reference("main", refs("refs/heads/domain"))

    def test_no_match(self):
        references = refs("refs/heads/main", "refs/tags/v1.0", "HEAD")
        with pytest.raises(RevisionNotFound) as exc_info:
            find_reference("nonexistent-xyz", references)
        assert exc_info.value.revision == "nonexistent-xyz"

    def test_empty_reference_set(self):
        with pytest.raises(RevisionNotFound):
            find_reference("main", [])


@pytest.mark.short
class TestMatchBranch:
    def test_scoping(self):
        assert match_branch("main", refs("refs/notes/main")) is None
        assert match_branch("main", refs("refs/heads/main")).name == "refs/heads/main"
        assert (
            match_branch("main", refs("refs/remotes/origin/main")).name
            == "refs/remotes/origin/main"
        )


@pytest.mark.short
class TestResolveRevision:
    def test_annotated_tag_resolves_to_peeled_commit(self):
        references = [Reference("refs/tags/v1.2.0", SHA_TAG, peeled_id=SHA_C)]
        resolved = resolve_revision("v1.2.0", references)

        assert resolved.commit.hash == SHA_C[:7]
        assert resolved.object_id == SHA_C
        assert resolved.ref_name == "refs/tags/v1.2.0"

    def test_plain_reference_resolves_to_object_id(self):
        references = [Reference("refs/heads/main", SHA_B)]
        resolved = resolve_revision("main", references)

        assert resolved.commit.hash == SHA_B[:7]
        assert len(resolved.commit.hash) == 7
        assert resolved.object_id == SHA_B

    def test_reference_without_target(self):
        references = [Reference("refs/heads/main", None)]
        with pytest.raises(CommitNotFound):
            resolve_revision("main", references)

    def test_logs_matched_reference(self, capture_logs):
        resolve_revision("main", refs("refs/heads/main"))
        assert "Found revision refs/heads/main" in capture_logs.getvalue()
