"""Retry policy for repositories that are still being cloned."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from fileinfo.config.models import RetryConfig
from fileinfo.errors import CloneInProgressError, RevisionUnresolvable
from fileinfo.resolver.base import RevisionResolver

logger = logging.getLogger(__name__)


async def retry_when_clone_in_progress(
    attempt: Callable[[], Awaitable[str]],
    config: RetryConfig | None = None,
    *,
    repository: str = "",
    revision: str = "",
) -> str:
    """Await ``attempt()`` again for as long as it reports a clone in progress.

    Other errors propagate on the first failure. With ``max_attempts`` unset
    the loop only ends on success, a different error, or cancellation.
    """
    config = config or RetryConfig()
    attempts = 0
    while True:
        attempts += 1
        try:
            return await attempt()
        except CloneInProgressError as e:
            if config.max_attempts is not None and attempts >= config.max_attempts:
                raise RevisionUnresolvable(
                    f"Clone still in progress after {attempts} attempts",
                    repository=repository,
                    revision=revision,
                    stage="clone_wait",
                ) from e
            logger.warning(
                "Clone in progress for %s@%s (attempt %d), retrying in %.1fs",
                repository,
                revision or "HEAD",
                attempts,
                config.delay,
            )
            await asyncio.sleep(config.delay)


async def resolve_with_retry(
    resolver: RevisionResolver,
    repository: str,
    revision: str = "",
    config: RetryConfig | None = None,
) -> str:
    """Resolve ``revision`` in ``repository``, waiting out in-progress clones."""
    return await retry_when_clone_in_progress(
        lambda: resolver.resolve(repository, revision),
        config,
        repository=repository,
        revision=revision,
    )
