"""HTTP layer: client factory, candidate resolver and envelope normalizers.

Usage:
    from zigran_automations.http import CandidateRequest, RequestResolver, get_async_client

    async with get_async_client(config.api) as client:
        data = await RequestResolver(client).resolve([
            CandidateRequest("patch", "/automations/42", body),
            CandidateRequest("post", "/automations/42", body),
        ])
"""

from zigran_automations.http.client import create_async_client, get_async_client
from zigran_automations.http.envelope import normalize_integration_list, normalize_list
from zigran_automations.http.resolver import FALLBACK_STATUSES, CandidateRequest, RequestResolver

__all__ = [
    "FALLBACK_STATUSES",
    "CandidateRequest",
    "RequestResolver",
    "create_async_client",
    "get_async_client",
    "normalize_integration_list",
    "normalize_list",
]
