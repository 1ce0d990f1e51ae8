"""Shared HTTP helper for talking to the historical price provider."""

from __future__ import annotations

import logging
import os
from typing import Any, Mapping

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

TIMEOUT_ENV = "GOLD_API_TIMEOUT_SECONDS"
DEFAULT_TIMEOUT_SECONDS = 30.0
_DEFAULT_WAIT = wait_exponential(min=1, max=8)
_DEFAULT_STOP = stop_after_attempt(3)

Headers = Mapping[str, str] | None
Params = Mapping[str, Any] | None

logger = logging.getLogger(__name__)


def resolve_timeout(timeout: float | None = None) -> float:
    if timeout is not None:
        return timeout
    raw = os.getenv(TIMEOUT_ENV)
    if not raw:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r; using %ss.", TIMEOUT_ENV, raw, DEFAULT_TIMEOUT_SECONDS)
        return DEFAULT_TIMEOUT_SECONDS


@retry(
    wait=_DEFAULT_WAIT,
    stop=_DEFAULT_STOP,
    retry=retry_if_exception_type(httpx.TransportError),
    reraise=True,
)
async def fetch_json(
    url: str,
    *,
    headers: Headers = None,
    params: Params = None,
    timeout: float | None = None,
) -> Any:
    """GET ``url`` and return the decoded JSON payload.

    Connection-level failures are retried with exponential backoff. HTTP error
    statuses are raised immediately as ``httpx.HTTPStatusError``.
    """

    logger.debug("GET %s params=%s", url, dict(params or {}))
    async with httpx.AsyncClient(timeout=resolve_timeout(timeout)) as client:
        response = await client.get(url, headers=headers, params=params)

    response.raise_for_status()
    return response.json()


__all__ = ["fetch_json", "resolve_timeout", "DEFAULT_TIMEOUT_SECONDS", "TIMEOUT_ENV"]
