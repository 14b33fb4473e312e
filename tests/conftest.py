"""Shared fixtures: a scripted backend behind ``httpx.MockTransport``."""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator, Callable, Iterator
from typing import Any

import httpx
import pytest
import pytest_asyncio

BASE_URL = "https://api.test"

Route = httpx.Response | int | Exception | Callable[[httpx.Request], httpx.Response]


class Backend:
    """Routes ``(METHOD, path)`` to canned responses and records every request.

    Unrouted requests answer 404, like a deployment without that endpoint.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Route] = {}
        self.requests: list[httpx.Request] = []

    def route(self, method: str, path: str, response: Route) -> None:
        self.routes[(method.upper(), path)] = response

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if isinstance(handler, Exception):
            raise handler
        if isinstance(handler, int):
            return httpx.Response(handler)
        if isinstance(handler, httpx.Response):
            return handler
        return handler(request)

    @property
    def calls(self) -> list[tuple[str, str]]:
        return [(r.method, r.url.path) for r in self.requests]

    def body(self, index: int) -> Any:
        content = self.requests[index].content
        return json.loads(content) if content else None


@pytest.fixture()
def backend() -> Backend:
    return Backend()


@pytest_asyncio.fixture()
async def client(backend: Backend) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(
        base_url=BASE_URL, transport=httpx.MockTransport(backend)
    ) as client:
        yield client


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    """Undo ``setup_logging`` so handlers never leak between tests."""
    yield
    logger = logging.getLogger("zigran_automations")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
