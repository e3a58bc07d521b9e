"""Abstract interfaces to the code host: page extraction and base commit lookup."""

from abc import ABC, abstractmethod

from fileinfo.gitlab.models import (
    CodeView,
    CommitPageInfo,
    DiffPageInfo,
    FilePageInfo,
    FilePaths,
    PageSnapshot,
)


class PageExtractor(ABC):
    """Reads raw identifiers off a rendered page.

    Implementations must not perform I/O and must return empty fields
    rather than raise when the page lacks the expected markup.
    """

    @abstractmethod
    def get_file_page_info(self, page: PageSnapshot) -> FilePageInfo:
        """Repository, file path and revision of a single-file view."""
        ...

    @abstractmethod
    def get_diff_page_info(self, page: PageSnapshot) -> DiffPageInfo:
        """Repository, merge request, diff version and base commit of a diff view."""
        ...

    @abstractmethod
    def get_commit_page_info(self, page: PageSnapshot) -> CommitPageInfo:
        """Repository and commit ID of a commit view."""
        ...

    @abstractmethod
    def get_file_paths_from_code_view(self, code_view: CodeView | None) -> FilePaths:
        """Head and base file paths shown in a diff file header."""
        ...

    @abstractmethod
    def get_head_commit_id_from_code_view(self, code_view: CodeView | None) -> str | None:
        """Head commit ID linked from the "View file @" control."""
        ...


class BaseCommitLookup(ABC):
    """Asks the code host which commit a diff is computed against."""

    @abstractmethod
    async def for_merge_request(
        self,
        owner: str,
        repo_name: str,
        merge_request_id: str,
        diff_id: str | None = None,
    ) -> str:
        """Base commit of a merge request diff version.

        Args:
            owner: Namespace of the project, may contain subgroups.
            repo_name: Project name.
            merge_request_id: Merge request number within the project.
            diff_id: Diff version ID. None means the latest version.

        Raises:
            BaseCommitLookupFailed: With reason "not_found", "unauthorized"
                or "error".
        """
        ...

    @abstractmethod
    async def for_commit(self, owner: str, repo_name: str, commit_id: str) -> str:
        """Base (first parent) commit of a single commit."""
        ...
