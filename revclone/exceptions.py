"""
Exception classes for revclone.

Every failure that happens after a workspace has been allocated is surfaced
to callers as a single GitCloneFailed carrying the repository URL; the
step-level errors below are chained to it as the underlying cause.
"""

from pathlib import Path
from typing import Optional


class RevcloneError(Exception):
    """Base exception for all revclone errors."""

    pass


class WorkspaceError(RevcloneError):
    """Raised when a clone target directory cannot be allocated."""

    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(message)


class WorkspaceConflict(WorkspaceError):
    """Raised when a freshly generated workspace path already exists."""

    def __init__(self, path: Path):
        super().__init__(path, f"Clone dir already exists {path}")


class WorkspaceUnwritable(WorkspaceError):
    """Raised when the workspace directory cannot be created."""

    def __init__(self, path: Path, reason: str = ""):
        self.reason = reason
        message = f"Could not create {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(path, message)


class CloneStepError(RevcloneError):
    """Base exception for failures inside an allocated workspace."""

    pass


class CloneTransportFailure(CloneStepError):
    """Raised when the underlying clone call fails (network, auth, bad URL)."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Could not clone {url}: {reason}")


class RevisionNotFound(CloneStepError):
    """Raised when no reference matches the requested revision."""

    def __init__(self, revision: str):
        self.revision = revision
        super().__init__(f"Revision not found: {revision}")


class CommitNotFound(CloneStepError):
    """Raised when a reference or explicit commit has no resolvable commit."""

    def __init__(self, revision: str, commit: Optional[str] = None, reason: str = ""):
        self.revision = revision
        self.commit = commit
        if commit:
            message = f"Commit {commit} not found for revision {revision}"
        else:
            message = f"Commit not found for revision {revision}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class CheckoutFailure(CloneStepError):
    """Raised when checking out a resolved or explicit commit fails."""

    def __init__(self, commit: str, reason: str):
        self.commit = commit
        self.reason = reason
        super().__init__(f"Checkout of {commit} failed: {reason}")


class GitCloneFailed(RevcloneError):
    """Raised by CloningService for any failure after workspace allocation."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Git clone from {url} failed")


class ClientDisconnected(RevcloneError):
    """Raised by a progress dispatcher whose remote client went away."""

    pass
