"""Pydantic model for the resolved file location."""

from pydantic import BaseModel, ConfigDict, Field


class FileInfo(BaseModel):
    """A file location with every revision resolved to a commit ID.

    Immutable once built; two descriptors are equal when their fields are.
    """

    model_config = ConfigDict(frozen=True)

    repository: str = Field(min_length=1, description="Repository identifier (host/owner/repo)")
    file_path: str = Field(min_length=1, description="Path of the file at the head revision")
    head_revision: str = Field(min_length=1, description="Revision as displayed, may be symbolic")
    head_commit_id: str = Field(min_length=1)
    base_file_path: str | None = Field(
        default=None, description="Path at the base revision, set only when the file was renamed"
    )
    base_revision: str | None = None
    base_commit_id: str | None = None
    # Hints for content fetchers, not guarantees.
    head_has_file_contents: bool | None = None
    base_has_file_contents: bool | None = None
