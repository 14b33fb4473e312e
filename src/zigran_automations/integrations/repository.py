"""
Integration Repository

Connect, disconnect, sync and inspect third-party providers. Every
operation is a candidate chain keyed by provider identifier.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from zigran_automations.http.envelope import normalize_integration_list
from zigran_automations.http.resolver import CandidateRequest, RequestResolver

logger = logging.getLogger(__name__)

LIST_CANDIDATES: tuple[CandidateRequest, ...] = (
    CandidateRequest("get", "/integrations"),
    CandidateRequest("get", "/integrations/list"),
    CandidateRequest("get", "/integrations/providers"),
    CandidateRequest("get", "/settings/integrations"),
    CandidateRequest("get", "/integration"),
)


def _clean_key(provider_key: Any) -> str:
    return str(provider_key or "").strip()


class IntegrationRepository:
    """
    Provider lifecycle over the backend REST API.

    A blank provider key short-circuits to ``None`` without issuing any
    request.
    """

    def __init__(self, client: httpx.AsyncClient, resolver: RequestResolver | None = None) -> None:
        self._resolver = resolver or RequestResolver(client)

    async def list(self) -> list[Any]:
        """
        List providers from whichever listing route the backend exposes.

        Returns:
            Provider objects; unknown shapes normalize to ``[]``
        """
        data = await self._resolver.resolve(list(LIST_CANDIDATES))
        return normalize_integration_list(data)

    async def connect(self, provider_key: str) -> Any:
        key = _clean_key(provider_key)
        if not key:
            return None
        logger.info("Connecting integration %s", key)
        return await self._resolver.resolve(
            [
                CandidateRequest("post", f"/integrations/{quote(key, safe='')}/connect"),
                CandidateRequest("post", "/integrations/connect", {"provider": key}),
                CandidateRequest("post", "/integrations/connect", {"key": key}),
            ]
        )

    async def disconnect(self, provider_key: str) -> Any:
        key = _clean_key(provider_key)
        if not key:
            return None
        logger.info("Disconnecting integration %s", key)
        return await self._resolver.resolve(
            [
                CandidateRequest("post", f"/integrations/{quote(key, safe='')}/disconnect"),
                CandidateRequest("delete", f"/integrations/{quote(key, safe='')}"),
                CandidateRequest("post", "/integrations/disconnect", {"provider": key}),
            ]
        )

    async def sync(self, provider_key: str) -> Any:
        key = _clean_key(provider_key)
        if not key:
            return None
        logger.info("Syncing integration %s", key)
        return await self._resolver.resolve(
            [
                CandidateRequest("post", f"/integrations/{quote(key, safe='')}/sync"),
                CandidateRequest("post", "/integrations/sync", {"provider": key}),
                CandidateRequest("post", f"/sync/{quote(key, safe='')}"),
            ]
        )

    async def status(self, provider_key: str) -> Any:
        key = _clean_key(provider_key)
        if not key:
            return None
        return await self._resolver.resolve(
            [
                CandidateRequest("get", f"/integrations/{quote(key, safe='')}/status"),
                CandidateRequest("get", "/integrations/status", params={"provider": key}),
            ]
        )
