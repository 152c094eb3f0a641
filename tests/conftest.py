import io
import logging
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

import pytest


def pytest_collection_modifyitems(config, items):
    """Integration tests build their repositories with git; skip them without it."""
    if shutil.which("git") is not None:
        return
    skip_git = pytest.mark.skip(reason="git executable not available")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_git)


@pytest.fixture
def capture_logs():
    """Fixture to capture log output during tests."""
    log_stream = io.StringIO()
    handler = logging.StreamHandler(log_stream)
    logger = logging.getLogger("revclone")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    yield log_stream  # Yield the stream to the test function

    # Cleanup after the test
    logger.removeHandler(handler)
    log_stream.close()


# git fixtures


_GIT_IDENTITY = [
    "-c",
    "user.name=revclone tests",
    "-c",
    "user.email=tests@revclone.invalid",
    "-c",
    "commit.gpgsign=false",
    "-c",
    "tag.gpgsign=false",
]


@dataclass
class SourceRepo:
    """A local repository standing in for a remote, built with the git CLI."""

    path: Path
    commits: Dict[str, str] = field(default_factory=dict)

    def git(self, *args: str) -> str:
        result = subprocess.run(
            ["git", *_GIT_IDENTITY, *args],
            cwd=self.path,
            check=True,
            capture_output=True,
            text=True,
        )
        return result.stdout.strip()

    def commit(self, label: str, content: str) -> str:
        """Write README with `content`, commit it and remember the hash as `label`."""
        (self.path / "README").write_text(content)
        self.git("add", "README")
        self.git("commit", "-m", label)
        sha = self.git("rev-parse", "HEAD")
        self.commits[label] = sha
        return sha

    @property
    def url(self) -> str:
        return str(self.path)


@pytest.fixture
def source_repo(tmp_path) -> SourceRepo:
    """
    Repository with this history on main:

        first   README "one"    annotated tag v1.2.0
        second  README "two"    lightweight tag 2_14_1, branch feature/login
        third   README "three"  (HEAD of main)
    """
    path = tmp_path / "source"
    path.mkdir()
    repo = SourceRepo(path)
    repo.git("init", "-q")
    repo.git("symbolic-ref", "HEAD", "refs/heads/main")

    repo.commit("first", "one")
    repo.git("tag", "-a", "v1.2.0", "-m", "release 1.2.0")
    repo.commit("second", "two")
    repo.git("tag", "2_14_1")
    repo.git("branch", "feature/login")
    repo.commit("third", "three")
    return repo


@pytest.fixture
def clone_base(tmp_path) -> Path:
    """Base directory for workspaces, created empty."""
    base = tmp_path / "clones"
    base.mkdir()
    return base
