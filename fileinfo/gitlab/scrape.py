"""GitLab page extractor: reads identifiers from page URLs and diff headers."""

from __future__ import annotations

import re
from typing import Literal, NamedTuple
from urllib.parse import parse_qs, unquote, urlparse

from fileinfo.gitlab.base import PageExtractor
from fileinfo.gitlab.models import (
    CodeView,
    CommitPageInfo,
    DiffPageInfo,
    FilePageInfo,
    FilePaths,
    PageSnapshot,
)

PageKind = Literal["file", "diff", "commit"]

# Route segment that follows the project path -> page kind.
_ROUTES: dict[str, PageKind] = {
    "blob": "file",
    "merge_requests": "diff",
    "commit": "commit",
}

# GitLab renders renamed files as "old → new"; some versions use "->".
_RENAME_SEPARATOR = re.compile(r"\s+(?:→|->)\s+")


class _Route(NamedTuple):
    host: str
    owner: str
    repo_name: str
    kind: PageKind
    rest: list[str]
    query: dict[str, list[str]]

    @property
    def repository(self) -> str:
        return f"{self.host}/{self.owner}/{self.repo_name}" if self.host else f"{self.owner}/{self.repo_name}"


def _parse_route(url: str) -> _Route | None:
    """Split a GitLab URL into project, route kind and the trailing segments.

    Projects may live in nested groups, so the owner is everything before the
    repo name. The ``/-/`` separator is used when present; older URLs
    without it are matched on the first known route segment.
    """
    parsed = urlparse(url)
    segments = [unquote(s) for s in parsed.path.split("/") if s]

    if "-" in segments:
        sep = segments.index("-")
        project, route = segments[:sep], segments[sep + 1 :]
    else:
        idx = next((i for i, s in enumerate(segments) if s in _ROUTES and i >= 2), None)
        if idx is None:
            return None
        project, route = segments[:idx], segments[idx:]

    if len(project) < 2 or not route or route[0] not in _ROUTES:
        return None
    return _Route(
        host=parsed.netloc,
        owner="/".join(project[:-1]),
        repo_name=project[-1],
        kind=_ROUTES[route[0]],
        rest=route[1:],
        query=parse_qs(parsed.query),
    )


def classify(url: str) -> PageKind | None:
    """Return which workflow handles ``url``, or None for unsupported pages."""
    route = _parse_route(url)
    return route.kind if route else None


def _first(query: dict[str, list[str]], key: str) -> str | None:
    values = query.get(key)
    return values[0] if values and values[0] else None


class GitLabPageExtractor(PageExtractor):
    """Extracts page fields from GitLab URLs without any network access."""

    def get_file_page_info(self, page: PageSnapshot) -> FilePageInfo:
        route = _parse_route(page.url)
        if route is None:
            return FilePageInfo()
        info = FilePageInfo(
            repository=route.repository, owner=route.owner, repo_name=route.repo_name
        )
        if route.kind != "file" or not route.rest:
            return info
        revision, *path = route.rest
        info.revision = revision
        info.file_path = "/".join(path) or None
        return info

    def get_diff_page_info(self, page: PageSnapshot) -> DiffPageInfo:
        route = _parse_route(page.url)
        if route is None:
            return DiffPageInfo()
        info = DiffPageInfo(
            repository=route.repository, owner=route.owner, repo_name=route.repo_name
        )
        if route.kind != "diff":
            return info
        if route.rest and route.rest[0].isdigit():
            info.merge_request_id = route.rest[0]
        info.diff_id = _first(route.query, "diff_id")
        # start_sha is only in the URL when a specific version range is selected
        info.base_commit_id = _first(route.query, "start_sha")
        return info

    def get_commit_page_info(self, page: PageSnapshot) -> CommitPageInfo:
        route = _parse_route(page.url)
        if route is None:
            return CommitPageInfo()
        info = CommitPageInfo(
            repository=route.repository, owner=route.owner, repo_name=route.repo_name
        )
        if route.kind == "commit" and route.rest:
            info.commit_id = route.rest[0]
        return info

    def get_file_paths_from_code_view(self, code_view: CodeView | None) -> FilePaths:
        if code_view is None:
            return FilePaths()

        if code_view.file_title and code_view.file_title.strip():
            parts = _RENAME_SEPARATOR.split(code_view.file_title.strip(), maxsplit=1)
            if len(parts) == 2:
                base_path, head_path = parts
                return FilePaths(
                    file_path=head_path,
                    base_file_path=base_path if base_path != head_path else None,
                )
            return FilePaths(file_path=parts[0])

        # No header text: fall back to the path in the "View file @" link.
        route = _parse_route(code_view.view_file_href or "")
        if route and route.kind == "file" and len(route.rest) > 1:
            return FilePaths(file_path="/".join(route.rest[1:]))
        return FilePaths()

    def get_head_commit_id_from_code_view(self, code_view: CodeView | None) -> str | None:
        if code_view is None or not code_view.view_file_href:
            return None
        route = _parse_route(code_view.view_file_href)
        if route is None or route.kind != "file" or not route.rest:
            return None
        return route.rest[0]
