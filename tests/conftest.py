"""Shared test fixtures for fileinfo."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from fileinfo.assembler import FileInfoAssembler
from fileinfo.config.models import FileInfoConfig, RetryConfig
from fileinfo.gitlab import GitLabPageExtractor
from fileinfo.gitlab.base import BaseCommitLookup
from fileinfo.gitlab.models import CodeView, PageSnapshot
from fileinfo.resolver.base import RevisionResolver

# Symbolic revisions the fake store knows; anything else resolves to itself.
DEFAULT_BRANCH_SHA = "f00dcafe" * 5
SYMBOLIC_REVISIONS = {"": DEFAULT_BRANCH_SHA, "main": DEFAULT_BRANCH_SHA}


@pytest.fixture
def mock_resolver():
    async def _resolve(repository, revision=""):
        return SYMBOLIC_REVISIONS.get(revision, revision)

    resolver = MagicMock(spec=RevisionResolver)
    resolver.resolve = AsyncMock(side_effect=_resolve)
    return resolver


@pytest.fixture
def mock_base_commits():
    lookup = MagicMock(spec=BaseCommitLookup)
    lookup.for_merge_request = AsyncMock(return_value="deadbeef")
    lookup.for_commit = AsyncMock(return_value="0000000")
    return lookup


@pytest.fixture
def extractor():
    return GitLabPageExtractor()


@pytest.fixture
def fast_retry():
    return RetryConfig(delay=0)


@pytest.fixture
def assembler(mock_resolver, mock_base_commits, extractor, fast_retry):
    return FileInfoAssembler(
        resolver=mock_resolver,
        base_commits=mock_base_commits,
        extractor=extractor,
        retry=fast_retry,
    )


@pytest.fixture
def diff_page():
    """Merge request diff for acme/widgets without a base commit in the URL."""
    return PageSnapshot(
        url="https://gitlab.com/acme/widgets/-/merge_requests/42/diffs?diff_id=7",
        code_view=CodeView(
            view_file_href="/acme/widgets/-/blob/cafef00d/src/app.py",
            file_title="src/app.py",
        ),
    )


@pytest.fixture
def commit_page():
    return PageSnapshot(
        url="https://gitlab.com/acme/widgets/-/commit/1111111",
        code_view=CodeView(
            view_file_href="/acme/widgets/-/blob/1111111/lib/util.py",
            file_title="lib/helpers.py → lib/util.py",
        ),
    )


@pytest.fixture
def sample_config():
    return FileInfoConfig()
