"""Incremental construction of FileInfo with a single validation step."""

from __future__ import annotations

from pydantic import BaseModel

from fileinfo.assembler.models import FileInfo
from fileinfo.errors import MissingPageData

_REQUIRED = ("repository", "file_path", "head_revision", "head_commit_id")
_BASE_PAIR = ("base_revision", "base_commit_id")


class FileInfoBuilder(BaseModel):
    """Collects FileInfo fields as a workflow discovers them.

    Every field is optional here; ``build()`` checks the required ones.
    """

    repository: str | None = None
    file_path: str | None = None
    head_revision: str | None = None
    head_commit_id: str | None = None
    base_file_path: str | None = None
    base_revision: str | None = None
    base_commit_id: str | None = None
    head_has_file_contents: bool | None = None
    base_has_file_contents: bool | None = None

    def set(self, **fields: object) -> FileInfoBuilder:
        for name, value in fields.items():
            if name not in type(self).model_fields:
                raise AttributeError(f"FileInfoBuilder has no field {name!r}")
            setattr(self, name, value)
        return self

    def missing_fields(self) -> list[str]:
        missing = [name for name in _REQUIRED if not getattr(self, name)]
        if any(getattr(self, name) for name in _BASE_PAIR):
            missing += [name for name in _BASE_PAIR if not getattr(self, name)]
        return missing

    def build(self) -> FileInfo:
        """Validate the collected fields and freeze them into a FileInfo.

        Raises:
            MissingPageData: A required field is empty, or only half of the
                base revision/commit pair is set.
        """
        missing = self.missing_fields()
        if missing:
            raise MissingPageData(
                missing,
                repository=self.repository or None,
                revision=self.head_revision or None,
                stage="build",
            )
        fields = self.model_dump()
        if fields["base_file_path"] == fields["file_path"]:
            fields["base_file_path"] = None
        return FileInfo(**fields)
