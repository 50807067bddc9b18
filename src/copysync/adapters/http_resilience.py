"""Async httpx client with retries and a client-side rate limit."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from aiolimiter import AsyncLimiter
from httpx_retries import Retry, RetryTransport

from copysync.config.http_resilience import (
    TRANSIENT_ERRORS,
    TRANSIENT_STATUSES,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
)

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType

__all__ = [
    "RateLimit",
    "ResilienceConfig",
    "ResilientClient",
    "RetryPolicy",
    "build_limiter",
    "build_retry",
]


def build_limiter(limit: RateLimit | None) -> AsyncLimiter | None:
    if limit is None:
        return None
    return AsyncLimiter(limit.max_calls, limit.per_seconds)


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        backoff_jitter=policy.backoff_jitter,
        max_backoff_wait=policy.max_backoff_wait,
        respect_retry_after_header=True,
        allowed_methods=tuple(policy.methods),
        status_forcelist=tuple(TRANSIENT_STATUSES),
        retry_on_exceptions=TRANSIENT_ERRORS,
    )


class ResilientClient:
    """One ``httpx.AsyncClient`` behind a ``RetryTransport`` and an optional ``AsyncLimiter``.

    ``transport`` replaces the network transport underneath the retry layer.
    Pass a shared ``limiter`` when several short-lived clients must respect one
    rate limit.
    """

    def __init__(
        self,
        config: ResilienceConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        limiter: AsyncLimiter | None = None,
    ) -> None:
        self.config = config
        self._limiter = limiter if limiter is not None else build_limiter(config.rate_limit)
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            headers=dict(config.headers),
            timeout=config.timeout_seconds,
            transport=RetryTransport(transport=transport, retry=build_retry(config.retry)),
        )

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        json: object = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        if self._limiter is None:
            return await self._client.request(
                method, path, params=params, json=json, headers=headers
            )
        async with self._limiter:
            return await self._client.request(
                method, path, params=params, json=json, headers=headers
            )
