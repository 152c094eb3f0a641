"""Value objects exchanged between the clone pipeline and its callers."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union


SHORT_COMMIT_LENGTH = 7


@dataclass(frozen=True)
class GitUrl:
    value: str

    def __post_init__(self):
        if not self.value or not self.value.strip():
            raise ValueError("Repository URL must be non-empty")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Revision:
    value: str

    def __post_init__(self):
        if not self.value or not self.value.strip():
            raise ValueError("Revision must be non-empty")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Commit:
    """A commit identifier, full or abbreviated."""

    hash: str

    def __post_init__(self):
        if not self.hash or not self.hash.strip():
            raise ValueError("Commit hash must be non-empty")

    def __str__(self) -> str:
        return self.hash


@dataclass(frozen=True)
class Reference:
    """
    One reference visible in a cloned repository.

    peeled_id is only set for annotated tags, where it names the commit the
    tag object points to.
    """

    name: str
    object_id: Optional[str]
    peeled_id: Optional[str] = None

    @property
    def target(self) -> Optional[str]:
        return self.peeled_id or self.object_id


@dataclass(frozen=True)
class ResolvedCommit:
    """An abbreviated commit, the reference it came from and its full id."""

    commit: Commit
    ref_name: Optional[str] = None
    object_id: Optional[str] = None


@dataclass(frozen=True)
class CloneResult:
    """
    Outcome of a successful clone.

    The directory belongs to the caller once this is returned.
    """

    commit: Commit
    directory: Path
    ref_name: Optional[str] = None


@dataclass(frozen=True)
class UsernameAndPassword:
    username: str
    password: str

    def __repr__(self) -> str:
        return f"UsernameAndPassword(username={self.username!r}, password='***')"


@dataclass(frozen=True)
class PersonalAccessToken:
    token: str

    def __repr__(self) -> str:
        return "PersonalAccessToken(token='***')"


Credentials = Union[UsernameAndPassword, PersonalAccessToken]
