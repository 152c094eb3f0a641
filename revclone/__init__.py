"""Reproducible snapshots of remote git repositories at loosely named revisions."""

__version__ = "0.1.0"
