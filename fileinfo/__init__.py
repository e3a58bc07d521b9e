"""Resolve code host page locations to commit-pinned file descriptors."""

__version__ = "0.1.0"
