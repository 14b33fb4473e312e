"""Candidate request resolution.

One logical operation ("update a rule", "connect a provider") is expressed
as an ordered list of guesses at the real route and verb. The resolver
tries them one at a time and only moves on when the backend answers with a
status that means "this route does not exist here".
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import httpx

from zigran_automations.errors import NetworkError

logger = logging.getLogger(__name__)

# Not Found, Method Not Allowed, Not Implemented
FALLBACK_STATUSES: frozenset[int] = frozenset({404, 405, 501})


@dataclass(frozen=True)
class CandidateRequest:
    """A single request attempt."""

    method: str
    url: str
    body: Any = None
    params: Mapping[str, Any] | None = None

    def describe(self) -> str:
        return f"{self.method.upper()} {self.url}"


def decode_body(response: httpx.Response) -> Any:
    """Decoded JSON body, raw text when not JSON, ``None`` when empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _error_message(candidate: CandidateRequest, status: int, payload: Any) -> str:
    if isinstance(payload, Mapping):
        message = payload.get("message") or payload.get("error")
        if isinstance(message, str) and message.strip():
            return message
    return f"{candidate.describe()} failed with HTTP {status}"


class RequestResolver:
    """Executes candidate requests sequentially against an ``httpx.AsyncClient``.

    The client owns base URL, auth headers and timeouts; the resolver only
    decides which candidate answers.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        fallback_statuses: frozenset[int] = FALLBACK_STATUSES,
    ) -> None:
        self._client = client
        self._fallback_statuses = fallback_statuses

    async def request(self, candidate: CandidateRequest) -> Any:
        """Issue one request without fallback.

        Raises:
            NetworkError: non-2xx status or transport failure.
        """
        method = candidate.method.upper()
        try:
            response = await self._client.request(
                method,
                candidate.url,
                json=candidate.body,
                params=candidate.params,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            payload = decode_body(exc.response)
            raise NetworkError(
                _error_message(candidate, status, payload),
                method=method,
                url=candidate.url,
                status_code=status,
                payload=payload,
            ) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(
                f"{candidate.describe()} failed: {str(exc) or exc.__class__.__name__}",
                method=method,
                url=candidate.url,
            ) from exc
        return decode_body(response)

    async def resolve(self, candidates: Sequence[CandidateRequest]) -> Any:
        """Return the result of the first candidate that succeeds.

        A fallback-eligible status moves on to the next candidate; any other
        failure is raised immediately. When every candidate falls through,
        the last candidate's error is raised.

        Raises:
            ValueError: *candidates* is empty.
            NetworkError: see above.
        """
        if not candidates:
            raise ValueError("At least one candidate request is required")

        last_error: NetworkError | None = None
        for attempt, candidate in enumerate(candidates, start=1):
            try:
                return await self.request(candidate)
            except NetworkError as exc:
                if exc.status_code not in self._fallback_statuses:
                    logger.warning("%s aborted: %s", candidate.describe(), exc.message)
                    raise
                last_error = exc
                logger.debug(
                    "%s -> HTTP %s, trying next candidate (%d/%d)",
                    candidate.describe(),
                    exc.status_code,
                    attempt,
                    len(candidates),
                )

        assert last_error is not None
        logger.warning("All %d candidates fell through: %s", len(candidates), last_error.message)
        raise last_error
