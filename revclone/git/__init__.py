"""
Git operations for revclone.

This package clones remote repositories into private workspaces and turns
loose revision labels (tags, version fragments, branch names) into the
commit that gets checked out.

Layout:
    workspace    allocation and scoped cleanup of clone directories
    credentials  mapping of credentials to transport authentication
    progress     forwarding of clone progress to an external dispatcher
    resolver     the revision matching chain
    transport    dulwich clone, reference listing and checkout
    clone        CloningService, which ties the steps together
"""

from .clone import CloningService
from .progress import ProgressMessage, ProgressMessageType, ProgressRelay
from .resolver import extract_version, find_reference, resolve_revision
from .workspace import Workspace, WorkspaceAllocator

__all__ = [
    "CloningService",
    "ProgressMessage",
    "ProgressMessageType",
    "ProgressRelay",
    "Workspace",
    "WorkspaceAllocator",
    "extract_version",
    "find_reference",
    "resolve_revision",
]
