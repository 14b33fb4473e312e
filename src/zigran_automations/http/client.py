"""HTTP client factory for the Zigran backend.

The client carries everything transport-related (base URL, JSON headers,
bearer token, timeout) so the resolver and repositories only deal with
paths and bodies.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

from zigran_automations.config.schema import ApiSection

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


def build_headers(config: ApiSection) -> dict[str, str]:
    headers = dict(DEFAULT_HEADERS)
    if config.token:
        headers["Authorization"] = f"Bearer {config.token}"
    return headers


def create_async_client(
    config: ApiSection | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an ``httpx.AsyncClient`` bound to the backend base URL.

    The caller owns the client and must close it (``await client.aclose()``).
    ``transport`` lets tests plug in ``httpx.MockTransport``.
    """
    cfg = config or ApiSection()
    client = httpx.AsyncClient(
        base_url=cfg.base_url,
        headers=build_headers(cfg),
        timeout=httpx.Timeout(cfg.timeout),
        follow_redirects=True,
        transport=transport,
    )
    logger.debug("Created async HTTP client for %s (timeout=%ss)", cfg.base_url, cfg.timeout)
    return client


@asynccontextmanager
async def get_async_client(
    config: ApiSection | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[httpx.AsyncClient]:
    """Context-managed variant of :func:`create_async_client`.

    Example:
        async with get_async_client(config.api) as client:
            rules = await AutomationRepository(client).list()
    """
    client = create_async_client(config, transport=transport)
    try:
        yield client
    finally:
        await client.aclose()
