"""File-info assembly: page fields in, resolved FileInfo out."""

import httpx

from fileinfo.assembler.assembler import ASSUME_FILE_CONTENTS, FileInfoAssembler
from fileinfo.assembler.builder import FileInfoBuilder
from fileinfo.assembler.models import FileInfo
from fileinfo.config.models import FileInfoConfig
from fileinfo.gitlab import GitLabPageExtractor, create_base_commit_lookup
from fileinfo.resolver import create_resolver


def create_assembler(
    config: FileInfoConfig, client: httpx.AsyncClient | None = None
) -> FileInfoAssembler:
    """Wire the configured resolver, GitLab lookup and extractor together."""
    return FileInfoAssembler(
        resolver=create_resolver(config.resolver, client=client),
        base_commits=create_base_commit_lookup(config.gitlab, client=client),
        extractor=GitLabPageExtractor(),
        retry=config.retry,
    )


__all__ = [
    "ASSUME_FILE_CONTENTS",
    "FileInfo",
    "FileInfoAssembler",
    "FileInfoBuilder",
    "create_assembler",
]
