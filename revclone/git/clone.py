"""
Clone a repository and materialize one revision of it into a private workspace.

Each call walks the same steps:

    allocate workspace -> clone -> resolve revision -> checkout -> hand over

Resolution is skipped when the caller already knows the commit. Whatever goes
wrong after the workspace has been allocated, the workspace is deleted and
the caller sees a single GitCloneFailed naming the repository, with the step
that failed chained as its cause. On success the workspace directory belongs
to the caller.

Usage:
    service = CloningService(get_clone_base_dir(), credentials=get_credentials())
    result = service.clone(GitUrl("https://github.com/user/repo"), Revision("v1.2.0"))
    result.commit.hash   # "1faafa2"
    result.directory     # ~/.cache/revclone/clones/5f0c...
"""

import logging
from pathlib import Path
from typing import Optional, Union

from revclone.exceptions import CheckoutFailure, CommitNotFound, GitCloneFailed
from revclone.git.credentials import auth_kwargs
from revclone.git.progress import ProgressDispatcher, progress_stream
from revclone.git.resolver import abbreviate, resolve_revision
from revclone.git.transport import (
    checkout,
    clone_repository,
    find_commit,
    head_commit,
    list_references,
)
from revclone.git.workspace import Workspace, WorkspaceAllocator
from revclone.model import (
    CloneResult,
    Commit,
    Credentials,
    GitUrl,
    ResolvedCommit,
    Revision,
)

logger = logging.getLogger(__name__)


class CloningService:
    """Clones repositories into fresh workspaces under a base directory."""

    def __init__(
        self,
        base_clone_dir: Union[str, Path],
        credentials: Optional[Credentials] = None,
        progress_dispatcher: Optional[ProgressDispatcher] = None,
    ):
        self.allocator = WorkspaceAllocator(base_clone_dir)
        self.credentials = credentials
        self.progress_dispatcher = progress_dispatcher

    def clone(
        self, git_url: GitUrl, revision: Revision, commit: Optional[Commit] = None
    ) -> CloneResult:
        """
        Clone a repository and check out the requested revision.

        Args:
            git_url: Repository to clone
            revision: Tag, version fragment or branch name to check out
            commit: Explicit commit; when given, the revision is not resolved

        Returns:
            The checked out commit and the workspace holding it

        Raises:
            WorkspaceConflict: If the generated workspace path already exists
            WorkspaceUnwritable: If the workspace cannot be created
            GitCloneFailed: If anything fails once the workspace exists
        """
        # Nothing to clean up if this fails
        path = self.allocator.allocate()

        with Workspace(path) as workspace:
            try:
                resolved = self._clone_into(workspace.path, git_url, revision, commit)
            except Exception as e:
                logger.debug(f"Clone of {git_url} failed, discarding {workspace.path}")
                raise GitCloneFailed(git_url.value) from e

            workspace.release()

        logger.info(
            f"Checked out {git_url}@{resolved.commit.hash} to {workspace.path}"
        )
        return CloneResult(
            commit=resolved.commit,
            directory=workspace.path,
            ref_name=resolved.ref_name,
        )

    def _clone_into(
        self,
        target: Path,
        git_url: GitUrl,
        revision: Revision,
        commit: Optional[Commit],
    ) -> ResolvedCommit:
        with clone_repository(
            git_url.value,
            target,
            auth=auth_kwargs(self.credentials),
            errstream=progress_stream(self.progress_dispatcher),
        ) as repo:
            if commit is not None:
                resolved = self._explicit_commit(repo, revision, commit)
            else:
                resolved = resolve_revision(revision.value, list_references(repo))

            checkout(repo, resolved.object_id)

            actual = head_commit(repo)
            if actual != resolved.object_id:
                raise CheckoutFailure(
                    resolved.object_id, f"HEAD is at {actual} after checkout"
                )
            return resolved

    @staticmethod
    def _explicit_commit(repo, revision: Revision, commit: Commit) -> ResolvedCommit:
        object_id = find_commit(repo, commit.hash, revision=revision.value)
        if object_id is None:
            raise CommitNotFound(revision.value, commit=commit.hash)
        return ResolvedCommit(commit=Commit(abbreviate(object_id)), object_id=object_id)
