"""
Resolution of loosely specified revisions against a cloned repository.

Callers name revisions the way humans do: "v2.14.1", "2.14.1-final",
"release", "main". Upstream repositories name their references however they
like: refs/tags/v2.14.1, refs/tags/2_14_1, refs/remotes/origin/release. The
resolver bridges the two with an ordered chain of matchers; the first one to
find a reference wins:

    1. exact      the revision names a reference, either fully
                  (refs/tags/v1.0) or by its short name (v1.0, main)
    2. version    the first dotted number in the revision ("2.14.1") is a
                  suffix of a reference name, with "." or "_" separators
    3. branch     the revision is the last path segment of a local or
                  remote-tracking branch

Matchers 2 and 3 are suffix matches and can hit more than one reference; the
references are walked in name order so that the pick is reproducible.
"""

import logging
import re
from typing import Callable, Iterable, List, Optional, Sequence

from revclone.exceptions import CommitNotFound, RevisionNotFound
from revclone.model import SHORT_COMMIT_LENGTH, Commit, Reference, ResolvedCommit

logger = logging.getLogger(__name__)

_VERSION_PATTERN = re.compile(r"(\d+(?:\.\d+)+)")

# Lookup order for short reference names, as `git rev-parse` does
_SHORT_NAME_PREFIXES = ("", "refs/", "refs/tags/", "refs/heads/", "refs/remotes/")

_BRANCH_NAMESPACES = ("refs/heads", "refs/remotes")

Matcher = Callable[[str, Sequence[Reference]], Optional[Reference]]


def extract_version(revision: str) -> Optional[str]:
    """
    Extract the first dotted numeric version from a revision string.

    Examples:
        "v2.14.1-release" -> "2.14.1"
        "release-1.2"     -> "1.2"
        "main"            -> None

    Args:
        revision: Free-form revision label

    Returns:
        The version string, or None if the revision holds no dotted number
    """
    if not revision:
        return None
    match = _VERSION_PATTERN.search(revision)
    return match.group(1) if match else None


def match_exact(revision: str, references: Sequence[Reference]) -> Optional[Reference]:
    by_name = {ref.name: ref for ref in references}
    for prefix in _SHORT_NAME_PREFIXES:
        ref = by_name.get(prefix + revision)
        if ref is not None:
            return ref
    return by_name.get(f"refs/remotes/{revision}/HEAD")


def match_version(
    revision: str, references: Sequence[Reference]
) -> Optional[Reference]:
    version = extract_version(revision)
    if version is None:
        return None
    alternative = version.replace(".", "_")
    return _first(
        references,
        lambda ref: ref.name.endswith(version) or ref.name.endswith(alternative),
    )


def match_branch(revision: str, references: Sequence[Reference]) -> Optional[Reference]:
    suffix = "/" + revision
    return _first(
        references,
        lambda ref: ref.name.endswith(suffix)
        and ref.name.startswith(_BRANCH_NAMESPACES),
    )


MATCHERS: List[Matcher] = [match_exact, match_version, match_branch]


def _first(
    references: Iterable[Reference], predicate: Callable[[Reference], bool]
) -> Optional[Reference]:
    return next((ref for ref in references if predicate(ref)), None)


def find_reference(revision: str, references: Iterable[Reference]) -> Reference:
    """
    Pick the reference a revision refers to.

    Args:
        revision: Free-form revision label
        references: All references of the cloned repository

    Returns:
        The first reference found by the matcher chain

    Raises:
        RevisionNotFound: If no matcher finds a reference
    """
    ordered = sorted(references, key=lambda ref: ref.name)
    for matcher in MATCHERS:
        ref = matcher(revision, ordered)
        if ref is not None:
            logger.debug(f"{matcher.__name__} matched {revision} to {ref.name}")
            return ref
    raise RevisionNotFound(revision)


def abbreviate(object_id: str, length: int = SHORT_COMMIT_LENGTH) -> str:
    return object_id[:length]


def resolve_revision(
    revision: str, references: Iterable[Reference]
) -> ResolvedCommit:
    """
    Resolve a revision to the commit it designates.

    Annotated tags resolve to the commit they point to, every other reference
    to its own object id.

    Args:
        revision: Free-form revision label
        references: All references of the cloned repository

    Returns:
        The abbreviated commit and the name of the matched reference

    Raises:
        RevisionNotFound: If no reference matches the revision
        CommitNotFound: If the matched reference points nowhere
    """
    ref = find_reference(revision, references)
    logger.info(f"Found revision {ref.name}")

    target = ref.target
    if not target:
        raise CommitNotFound(revision)

    return ResolvedCommit(
        commit=Commit(abbreviate(target)), ref_name=ref.name, object_id=target
    )
