"""FileInfo assembly for file, diff and commit pages."""

from __future__ import annotations

import asyncio
import logging

from fileinfo.assembler.builder import FileInfoBuilder
from fileinfo.assembler.models import FileInfo
from fileinfo.config.models import RetryConfig
from fileinfo.errors import MissingPageData, ResolverError, RevisionUnresolvable
from fileinfo.gitlab.base import BaseCommitLookup, PageExtractor
from fileinfo.gitlab.models import PageSnapshot
from fileinfo.resolver.base import RevisionResolver
from fileinfo.resolver.retry import resolve_with_retry

logger = logging.getLogger(__name__)

# Known limitation: content availability is not checked on diff and commit
# pages, so both sides always claim to have contents. Consumers rely on the
# current value; change it together with them.
# https://github.com/sourcegraph/browser-extensions/issues/185
ASSUME_FILE_CONTENTS = True


def _require(info: object, fields: tuple[str, ...], repository: str | None) -> None:
    missing = [name for name in fields if not getattr(info, name)]
    if missing:
        raise MissingPageData(missing, repository=repository or None, stage="extract")


class FileInfoAssembler:
    """Turns scraped page fields into FileInfo with resolved commit IDs.

    Collaborators are injected so each assembler owns no global state; a
    single instance can serve any number of concurrent calls.
    """

    def __init__(
        self,
        resolver: RevisionResolver,
        base_commits: BaseCommitLookup,
        extractor: PageExtractor,
        retry: RetryConfig | None = None,
    ) -> None:
        self.resolver = resolver
        self.base_commits = base_commits
        self.extractor = extractor
        self.retry = retry or RetryConfig()

    async def _resolve(self, repository: str, revision: str, stage: str) -> str:
        """Resolve through the retry policy, tagging failures with the stage."""
        try:
            return await resolve_with_retry(self.resolver, repository, revision, self.retry)
        except ResolverError as e:
            raise RevisionUnresolvable(
                "Revision could not be confirmed in the store",
                repository=repository,
                revision=revision,
                stage=stage,
            ) from e

    async def resolve_file_info(self, page: PageSnapshot) -> FileInfo | None:
        """Resolve a single-file view (not a one-file diff).

        Returns None when the page shows no file.
        """
        info = self.extractor.get_file_page_info(page)
        if not info.file_path or not info.repository:
            logger.debug("No file on page %s", page.url)
            return None

        revision = info.revision or ""
        commit_id = await self._resolve(info.repository, revision, "resolve_head")
        return FileInfoBuilder(
            repository=info.repository,
            file_path=info.file_path,
            # An empty revision means the default branch; report what it resolved to.
            head_revision=revision or commit_id,
            head_commit_id=commit_id,
        ).build()

    async def resolve_diff_file_info(self, page: PageSnapshot) -> FileInfo:
        """Resolve one file of a merge request diff."""
        info = self.extractor.get_diff_page_info(page)
        _require(info, ("repository", "owner", "repo_name", "merge_request_id"), info.repository)
        builder = FileInfoBuilder(repository=info.repository)

        if info.base_commit_id:
            base_commit_id = info.base_commit_id
        else:
            logger.debug(
                "Fetching base commit for %s!%s (diff %s)",
                info.repository,
                info.merge_request_id,
                info.diff_id or "latest",
            )
            base_commit_id = await self.base_commits.for_merge_request(
                info.owner, info.repo_name, info.merge_request_id, info.diff_id
            )
        builder.set(base_revision=base_commit_id, base_commit_id=base_commit_id)

        # The URL has no head revision; the "View file @" control does. It may
        # name a branch, so the commit ID is settled when the revisions resolve.
        head = self.extractor.get_head_commit_id_from_code_view(page.code_view)
        builder.set(head_revision=head, head_commit_id=head)

        paths = self.extractor.get_file_paths_from_code_view(page.code_view)
        builder.set(
            file_path=paths.file_path,
            base_file_path=paths.base_file_path,
            head_has_file_contents=ASSUME_FILE_CONTENTS,
            base_has_file_contents=ASSUME_FILE_CONTENTS,
        )
        return await self.ensure_revisions_are_cloned(builder.build())

    async def resolve_commit_file_info(self, page: PageSnapshot) -> FileInfo:
        """Resolve one file of a commit view, compared against its parent."""
        info = self.extractor.get_commit_page_info(page)
        _require(info, ("repository", "owner", "repo_name", "commit_id"), info.repository)

        logger.debug("Fetching base commit for %s@%s", info.repository, info.commit_id)
        base_commit_id = await self.base_commits.for_commit(
            info.owner, info.repo_name, info.commit_id
        )

        paths = self.extractor.get_file_paths_from_code_view(page.code_view)
        builder = FileInfoBuilder(
            repository=info.repository,
            head_revision=info.commit_id,
            head_commit_id=info.commit_id,
            base_revision=base_commit_id,
            base_commit_id=base_commit_id,
            file_path=paths.file_path,
            base_file_path=paths.base_file_path,
            head_has_file_contents=ASSUME_FILE_CONTENTS,
            base_has_file_contents=ASSUME_FILE_CONTENTS,
        )
        return await self.ensure_revisions_are_cloned(builder.build())

    async def ensure_revisions_are_cloned(self, info: FileInfo) -> FileInfo:
        """Resolve head and base concurrently so both are known to be in the store.

        The revisions usually come from the code host, which says nothing
        about whether the backing store has cloned them yet, and a page can
        show a branch name where a commit belongs. The returned FileInfo keeps
        the page's revisions and carries the commit IDs the store resolved.
        """
        if not info.base_revision:
            raise ValueError("ensure_revisions_are_cloned needs a base revision")

        logger.debug(
            "Waiting for %s to have %s and %s",
            info.repository,
            info.head_revision,
            info.base_revision,
        )
        head = asyncio.ensure_future(
            self._resolve(info.repository, info.head_revision, "ensure_head")
        )
        base = asyncio.ensure_future(
            self._resolve(info.repository, info.base_revision, "ensure_base")
        )
        try:
            head_commit_id, base_commit_id = await asyncio.gather(head, base)
        except BaseException:
            # gather leaves the sibling running on failure
            head.cancel()
            base.cancel()
            raise
        if (head_commit_id, base_commit_id) == (info.head_commit_id, info.base_commit_id):
            return info
        return info.model_copy(
            update={"head_commit_id": head_commit_id, "base_commit_id": base_commit_id}
        )
