"""
dulwich-backed repository operations used by the clone pipeline.

Everything that touches git objects lives here: cloning into a workspace,
listing the references of the clone, looking up explicit commits (including
abbreviated hashes) and checking a commit out into the working tree.
"""

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional

from dulwich import porcelain
from dulwich.objects import Commit as CommitObject
from dulwich.objects import Tag
from dulwich.objectspec import parse_commit
from dulwich.repo import Repo

from revclone.exceptions import CheckoutFailure, CommitNotFound, CloneTransportFailure
from revclone.model import Reference

logger = logging.getLogger(__name__)

_HEX_PREFIX = re.compile(r"^[0-9a-f]{4,39}$", re.IGNORECASE)
_FULL_HASH = re.compile(r"^[0-9a-f]{40}$", re.IGNORECASE)


def clone_repository(
    url: str, target: Path, auth: Optional[Dict[str, str]] = None, errstream=None
) -> Repo:
    """
    Clone a repository into an existing, empty directory.

    Args:
        url: Repository URL or local path
        target: Workspace directory to clone into
        auth: Transport keyword arguments (username/password), if any
        errstream: Binary stream receiving remote progress output

    Returns:
        The opened clone; the caller must close it

    Raises:
        CloneTransportFailure: If dulwich cannot clone the repository
    """
    kwargs = dict(auth or {})
    if errstream is not None:
        kwargs["errstream"] = errstream

    logger.info(f"Cloning {url} to {target}")
    try:
        # Full clone, not bare: every ref and object of the remote is needed
        return porcelain.clone(source=url, target=str(target), checkout=True, **kwargs)
    except Exception as e:
        raise CloneTransportFailure(url, str(e)) from e
    finally:
        flush = getattr(errstream, "flush", None)
        if flush is not None:
            flush()


def list_references(repo: Repo) -> List[Reference]:
    """
    List every reference of a repository, with annotated tags peeled.

    Args:
        repo: Opened dulwich repository

    Returns:
        References in the order dulwich reports them
    """
    references = []
    for name, sha in repo.get_refs().items():
        object_id = sha.decode("ascii") if sha else None
        peeled_id = None
        if object_id is not None:
            peeled = _peel(repo, sha)
            if peeled and peeled != object_id:
                peeled_id = peeled
        references.append(
            Reference(
                name=name.decode("utf-8", errors="replace"),
                object_id=object_id,
                peeled_id=peeled_id,
            )
        )
    return references


def _peel(repo: Repo, sha: bytes) -> Optional[str]:
    """Follow tag objects down to the object they finally point to."""
    try:
        obj = repo[sha]
        while isinstance(obj, Tag):
            obj = repo[obj.object[1]]
    except KeyError:
        # Dangling reference, the object is not in the clone
        return None
    return obj.id.decode("ascii")


def _expand_short_hash(repo: Repo, prefix: str) -> List[str]:
    prefix = prefix.lower()
    matching_commits = []
    for obj_id in repo.object_store:
        obj_hex = obj_id.decode("ascii")
        if obj_hex.startswith(prefix) and isinstance(
            repo.object_store[obj_id], CommitObject
        ):
            matching_commits.append(obj_hex)
    return matching_commits


def find_commit(
    repo: Repo, committish: str, revision: Optional[str] = None
) -> Optional[str]:
    """
    Look up an explicit commit in a repository.

    Abbreviated hashes are expanded when they identify exactly one commit.

    Args:
        repo: Opened dulwich repository
        committish: Full or abbreviated commit hash
        revision: Revision the commit was requested for, for error messages

    Returns:
        The full commit hash, or None if the commit does not exist

    Raises:
        CommitNotFound: If an abbreviated hash matches several commits
    """
    if _HEX_PREFIX.match(committish):
        matching_commits = _expand_short_hash(repo, committish)
        if len(matching_commits) == 1:
            logger.debug(f"Expanded short hash {committish} to {matching_commits[0]}")
            return matching_commits[0]
        if len(matching_commits) > 1:
            raise CommitNotFound(
                revision or committish,
                commit=committish,
                reason=f"ambiguous, matches {len(matching_commits)} commits",
            )
        return None

    try:
        commit_obj = parse_commit(repo, committish.encode("ascii"))
    except (KeyError, ValueError, UnicodeEncodeError):
        return None
    return commit_obj.id.decode("ascii")


def checkout(repo: Repo, commit_hash: str) -> None:
    """
    Check a commit out into the working tree of a clone.

    HEAD is detached at the commit and the index and working tree are
    updated to its tree. Branches of the clone are left where they are.

    Args:
        repo: Opened dulwich repository
        commit_hash: Full hash of the commit to check out

    Raises:
        CheckoutFailure: If the working tree cannot be updated
    """
    if not _FULL_HASH.match(commit_hash):
        raise CheckoutFailure(commit_hash, "a full commit hash is required")

    logger.info(f"Checking out {commit_hash[:7]} in {repo.path}")
    try:
        # A commit id detaches HEAD, so the default branch is not moved
        porcelain.checkout(repo, commit_hash.encode("ascii"), force=True)
    except Exception as e:
        raise CheckoutFailure(commit_hash, str(e)) from e


def head_commit(repo: Repo) -> str:
    """Get the full hash HEAD points to."""
    head_bytes = repo.head()
    if len(head_bytes) == 20:
        return head_bytes.hex()
    return head_bytes.decode("ascii")
