"""Revision resolvers and the clone-readiness retry policy."""

import os

import httpx

from fileinfo.config.models import ResolverConfig
from fileinfo.resolver.base import RevisionResolver
from fileinfo.resolver.graphql import GraphQLRevisionResolver
from fileinfo.resolver.retry import resolve_with_retry, retry_when_clone_in_progress


def create_resolver(
    config: ResolverConfig, client: httpx.AsyncClient | None = None
) -> RevisionResolver:
    """Create a revision resolver from config.

    The access token is read from the environment variable named in
    config.token_env; without one the resolver makes anonymous requests.
    """
    if not config.url:
        raise ValueError("Revision resolver URL is not configured.")
    token = os.environ.get(config.token_env) or None
    return GraphQLRevisionResolver(
        url=config.url, token=token, timeout=config.timeout, client=client
    )


__all__ = [
    "GraphQLRevisionResolver",
    "RevisionResolver",
    "create_resolver",
    "resolve_with_retry",
    "retry_when_clone_in_progress",
]
