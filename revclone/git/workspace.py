"""
Workspace allocation for clone attempts.

Each clone attempt gets its own freshly created directory under a configured
base path. The directory name is a random 32-character hex identifier, so
concurrent allocations against the same base never collide in practice; an
existing path is treated as fatal rather than retried.

A Workspace wraps one allocated directory as a scoped resource: leaving the
`with` block deletes the directory and everything in it unless ownership
has been handed to the caller with release().
"""

import logging
import shutil
import uuid
from pathlib import Path
from typing import Union

from revclone.exceptions import WorkspaceConflict, WorkspaceUnwritable

logger = logging.getLogger(__name__)


class WorkspaceAllocator:
    """Creates fresh, empty, collision-free directories under a base path."""

    def __init__(self, base_dir: Union[str, Path]):
        self.base_dir = Path(base_dir)

    def allocate(self) -> Path:
        """
        Create a new workspace directory.

        Returns:
            Path to the newly created, empty directory

        Raises:
            WorkspaceConflict: If the generated path already exists
            WorkspaceUnwritable: If the directory cannot be created
        """
        path = self.base_dir / uuid.uuid4().hex
        if path.exists():
            raise WorkspaceConflict(path)

        try:
            # exist_ok=False so a concurrent creator of the same name is caught
            path.mkdir(parents=True, exist_ok=False)
        except FileExistsError:
            raise WorkspaceConflict(path)
        except OSError as e:
            raise WorkspaceUnwritable(path, str(e)) from e

        logger.debug(f"Allocated workspace {path}")
        return path


def remove_workspace(path: Path) -> None:
    """Recursively delete a workspace directory, ignoring any errors."""
    shutil.rmtree(path, ignore_errors=True)
    if path.exists():
        logger.debug(f"Could not fully remove workspace {path}")


class Workspace:
    """
    Scoped ownership of an allocated workspace directory.

    Usage:
        with Workspace(allocator.allocate()) as ws:
            populate(ws.path)
            ws.release()   # caller now owns ws.path
    """

    def __init__(self, path: Path):
        self.path = path
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> Path:
        """Transfer ownership of the directory to the caller."""
        self._released = True
        return self.path

    def discard(self) -> None:
        if self.path.exists():
            logger.debug(f"Removing workspace {self.path}")
            remove_workspace(self.path)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if not self._released:
            self.discard()
        return False
