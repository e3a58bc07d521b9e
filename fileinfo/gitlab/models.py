"""Pydantic models for code host pages and the fields scraped from them."""

from pydantic import BaseModel


class CodeView(BaseModel):
    """The header of one file in a rendered diff or commit page."""

    # href of the "View file @ <sha>" control
    view_file_href: str | None = None
    # header text, "old/path → new/path" for renames
    file_title: str | None = None


class PageSnapshot(BaseModel):
    """What the extractor sees of a rendered page."""

    url: str
    code_view: CodeView | None = None


class FilePageInfo(BaseModel):
    repository: str = ""
    owner: str = ""
    repo_name: str = ""
    file_path: str | None = None
    revision: str | None = None


class DiffPageInfo(BaseModel):
    repository: str = ""
    owner: str = ""
    repo_name: str = ""
    merge_request_id: str | None = None
    diff_id: str | None = None
    base_commit_id: str | None = None


class CommitPageInfo(BaseModel):
    repository: str = ""
    owner: str = ""
    repo_name: str = ""
    commit_id: str | None = None


class FilePaths(BaseModel):
    """Head and base paths of a diffed file; base is set only for renames."""

    file_path: str | None = None
    base_file_path: str | None = None
