"""Revision resolver backed by a Sourcegraph-compatible GraphQL API."""

from __future__ import annotations

import logging

import httpx

from fileinfo.errors import (
    CloneInProgressError,
    RepoNotFoundError,
    ResolverError,
    RevisionNotFoundError,
)
from fileinfo.resolver.base import RevisionResolver

logger = logging.getLogger(__name__)

RESOLVE_REV_QUERY = """\
query ResolveRev($repoPath: String!, $rev: String!) {
    repository(name: $repoPath) {
        mirrorInfo {
            cloneInProgress
        }
        commit(rev: $rev) {
            oid
        }
    }
}
"""


class GraphQLRevisionResolver(RevisionResolver):
    """Resolves revisions with the ``repository.commit`` GraphQL query.

    Pass ``client`` to share one connection pool across calls; otherwise a
    short-lived client is opened per request.
    """

    def __init__(
        self,
        url: str,
        token: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._endpoint = f"{url.rstrip('/')}/.api/graphql"
        self._token = token
        self._timeout = timeout
        self._client = client

    def _headers(self) -> dict[str, str]:
        if self._token:
            return {"Authorization": f"token {self._token}"}
        return {}

    async def _post(self, payload: dict) -> httpx.Response:
        if self._client is not None:
            return await self._client.post(
                self._endpoint, json=payload, headers=self._headers(), timeout=self._timeout
            )
        async with httpx.AsyncClient() as client:
            return await client.post(
                self._endpoint, json=payload, headers=self._headers(), timeout=self._timeout
            )

    async def resolve(self, repository: str, revision: str = "") -> str:
        payload = {
            "query": RESOLVE_REV_QUERY,
            "variables": {"repoPath": repository, "rev": revision},
        }
        try:
            resp = await self._post(payload)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("ResolveRev request for %s failed: %s", repository, e)
            raise ResolverError(
                "Revision resolver request failed",
                repository=repository,
                revision=revision,
            ) from e

        if not isinstance(data, dict):
            raise ResolverError(
                f"Revision resolver returned a {type(data).__name__}, expected an object",
                repository=repository,
                revision=revision,
            )
        if data.get("errors"):
            messages = "; ".join(err.get("message", "") for err in data["errors"])
            raise ResolverError(
                f"Revision resolver returned errors: {messages}",
                repository=repository,
                revision=revision,
            )

        repo = (data.get("data") or {}).get("repository")
        if not repo:
            raise RepoNotFoundError(
                "Repository not found", repository=repository, revision=revision
            )
        if (repo.get("mirrorInfo") or {}).get("cloneInProgress"):
            raise CloneInProgressError(
                "Repository clone in progress", repository=repository, revision=revision
            )
        commit = repo.get("commit")
        if not commit or not commit.get("oid"):
            raise RevisionNotFoundError(
                "Revision not found", repository=repository, revision=revision
            )
        return commit["oid"]
