"""Error taxonomy for revision resolution and file-info assembly."""

from __future__ import annotations


class FileInfoError(Exception):
    """Base error carrying the repository, revision and stage it came from."""

    def __init__(
        self,
        message: str,
        *,
        repository: str | None = None,
        revision: str | None = None,
        stage: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.repository = repository
        self.revision = revision
        self.stage = stage
        context = ", ".join(
            f"{k}={v!r}"
            for k, v in (("repository", repository), ("revision", revision), ("stage", stage))
            if v is not None
        )
        super().__init__(f"{message} ({context})" if context else message)
        if cause is not None:
            self.__cause__ = cause


class MissingPageData(FileInfoError):
    """The page did not expose a field the workflow requires."""

    def __init__(self, fields: list[str], **kwargs) -> None:
        self.fields = list(fields)
        super().__init__(f"Missing page data: {', '.join(self.fields)}", **kwargs)


class ResolverError(FileInfoError):
    """The revision resolver could not turn a revision into a commit ID."""

    retryable = False


class CloneInProgressError(ResolverError):
    """The backing store is still cloning the repository."""

    retryable = True


class RepoNotFoundError(ResolverError):
    pass


class RevisionNotFoundError(ResolverError):
    pass


class BaseCommitLookupFailed(FileInfoError):
    """The code host could not report the base commit of a diff."""

    def __init__(self, message: str, reason: str = "error", **kwargs) -> None:
        self.reason = reason
        super().__init__(message, **kwargs)


class RevisionUnresolvable(FileInfoError):
    """A head or base revision could not be confirmed present in the store."""
