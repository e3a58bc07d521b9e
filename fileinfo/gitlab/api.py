"""GitLab REST client for base commit lookups."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from fileinfo.errors import BaseCommitLookupFailed
from fileinfo.gitlab.base import BaseCommitLookup

logger = logging.getLogger(__name__)


class GitLabBaseCommitLookup(BaseCommitLookup):
    """BaseCommitLookup over the GitLab v4 API.

    Pass ``client`` to share one connection pool across calls; otherwise a
    short-lived client is opened per request.
    """

    def __init__(
        self,
        url: str = "https://gitlab.com",
        token: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api = f"{url.rstrip('/')}/api/v4"
        self._token = token
        self._timeout = timeout
        self._client = client

    def _project_url(self, owner: str, repo_name: str) -> str:
        return f"{self._api}/projects/{quote(f'{owner}/{repo_name}', safe='')}"

    def _headers(self) -> dict[str, str]:
        if self._token:
            return {"PRIVATE-TOKEN": self._token}
        return {}

    async def _get(self, url: str) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(url, headers=self._headers(), timeout=self._timeout)
        async with httpx.AsyncClient() as client:
            return await client.get(url, headers=self._headers(), timeout=self._timeout)

    async def _get_json(self, url: str, repository: str) -> Any:
        try:
            resp = await self._get(url)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status in (401, 403):
                reason = "unauthorized"
            elif status == 404:
                reason = "not_found"
            else:
                reason = "error"
            logger.warning("GitLab API %s returned %d", url, status)
            raise BaseCommitLookupFailed(
                f"GitLab API returned {status}",
                reason=reason,
                repository=repository,
                stage="base_commit",
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("GitLab API request %s failed: %s", url, e)
            raise BaseCommitLookupFailed(
                f"GitLab API request failed: {e}",
                repository=repository,
                stage="base_commit",
            ) from e

    async def for_merge_request(
        self,
        owner: str,
        repo_name: str,
        merge_request_id: str,
        diff_id: str | None = None,
    ) -> str:
        repository = f"{owner}/{repo_name}"
        versions_url = (
            f"{self._project_url(owner, repo_name)}/merge_requests/{merge_request_id}/versions"
        )
        if diff_id:
            version = await self._get_json(f"{versions_url}/{diff_id}", repository)
        else:
            # Versions are listed newest first.
            versions = await self._get_json(versions_url, repository)
            version = versions[0] if isinstance(versions, list) and versions else None

        base = version.get("base_commit_sha") if isinstance(version, dict) else None
        if not base:
            raise BaseCommitLookupFailed(
                f"No base commit for merge request !{merge_request_id}",
                reason="not_found",
                repository=repository,
                stage="base_commit",
            )
        return base

    async def for_commit(self, owner: str, repo_name: str, commit_id: str) -> str:
        repository = f"{owner}/{repo_name}"
        commit = await self._get_json(
            f"{self._project_url(owner, repo_name)}/repository/commits/{quote(commit_id, safe='')}",
            repository,
        )
        parents = commit.get("parent_ids") if isinstance(commit, dict) else None
        if not parents:
            raise BaseCommitLookupFailed(
                f"Commit {commit_id} has no parent",
                reason="not_found",
                repository=repository,
                revision=commit_id,
                stage="base_commit",
            )
        return parents[0]
