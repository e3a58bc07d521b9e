"""GitLab page extraction and base commit lookups."""

import os

import httpx

from fileinfo.config.models import GitLabConfig
from fileinfo.gitlab.api import GitLabBaseCommitLookup
from fileinfo.gitlab.base import BaseCommitLookup, PageExtractor
from fileinfo.gitlab.models import (
    CodeView,
    CommitPageInfo,
    DiffPageInfo,
    FilePageInfo,
    FilePaths,
    PageSnapshot,
)
from fileinfo.gitlab.scrape import GitLabPageExtractor, classify


def create_base_commit_lookup(
    config: GitLabConfig, client: httpx.AsyncClient | None = None
) -> BaseCommitLookup:
    """Create a base commit lookup from config.

    The token is read from the environment variable named in config.token_env;
    public projects work without one.
    """
    if not config.url:
        raise ValueError("GitLab URL is not configured.")
    token = os.environ.get(config.token_env) or None
    return GitLabBaseCommitLookup(
        url=config.url, token=token, timeout=config.timeout, client=client
    )


__all__ = [
    "BaseCommitLookup",
    "CodeView",
    "CommitPageInfo",
    "DiffPageInfo",
    "FilePageInfo",
    "FilePaths",
    "GitLabBaseCommitLookup",
    "GitLabPageExtractor",
    "PageExtractor",
    "PageSnapshot",
    "classify",
    "create_base_commit_lookup",
]
