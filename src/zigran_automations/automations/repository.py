"""Automation rules over the backend REST API.

Route shapes differ between backend deployments, so update and remove are
expressed as candidate chains resolved by :class:`RequestResolver`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

import httpx

from zigran_automations.automations.compiler import compile_rule, parse_json_text
from zigran_automations.automations.models import AutomationRule, RuleDraft
from zigran_automations.errors import ExecutePayloadJsonError, MissingTriggerTypeError
from zigran_automations.http.envelope import normalize_list
from zigran_automations.http.resolver import CandidateRequest, RequestResolver

logger = logging.getLogger(__name__)

COLLECTION = "/automations"
EXECUTE_PATH = "/automations/execute"


def _member(rule_id: Any) -> str:
    return f"{COLLECTION}/{quote(str(rule_id), safe='')}"


def _as_payload(data: AutomationRule | Mapping[str, Any] | None) -> dict[str, Any]:
    if isinstance(data, AutomationRule):
        return data.to_payload()
    return dict(data or {})


def _create_body(payload: Mapping[str, Any]) -> dict[str, Any]:
    actions = payload.get("actions")
    return {
        "name": payload.get("name"),
        "trigger": payload.get("trigger"),
        "actions": actions if isinstance(actions, list) else [],
        "active": payload.get("active"),
    }


def _can_create(payload: Mapping[str, Any]) -> bool:
    """True when *payload* carries enough to create the rule from scratch."""
    name = payload.get("name")
    return (
        isinstance(name, str)
        and bool(name.strip())
        and bool(payload.get("trigger"))
        and isinstance(payload.get("actions"), list)
    )


class AutomationRepository:
    """List, create, update, remove and manually execute automation rules."""

    def __init__(self, client: httpx.AsyncClient, resolver: RequestResolver | None = None) -> None:
        self._resolver = resolver or RequestResolver(client)

    async def list(self) -> list[Any]:
        """Return raw rule objects in backend order."""
        data = await self._resolver.request(CandidateRequest("get", COLLECTION))
        return normalize_list(data)

    async def list_rules(self) -> list[AutomationRule]:
        """Like :meth:`list`, parsed into :class:`AutomationRule` objects."""
        return [AutomationRule.from_payload(item) for item in await self.list()]

    async def get(self, rule_id: str) -> AutomationRule | None:
        """Find a rule by id in the listing (the backend has no single-read route)."""
        for rule in await self.list_rules():
            if rule.id == str(rule_id):
                return rule
        return None

    async def create(self, rule: AutomationRule | Mapping[str, Any]) -> Any:
        body = _create_body(_as_payload(rule))
        logger.info("Creating automation %r", body["name"])
        return await self._resolver.request(CandidateRequest("post", COLLECTION, body))

    async def update(self, rule_id: str, data: AutomationRule | Mapping[str, Any]) -> Any:
        """Update a rule with a full or partial payload.

        Tries ``PATCH /automations/{id}``, then ``POST /automations/{id}``, then
        re-creates through the collection when the payload is complete.
        """
        payload = _as_payload(data)
        member = _member(rule_id)
        if _can_create(payload):
            last = CandidateRequest("post", COLLECTION, _create_body(payload))
        else:
            last = CandidateRequest("post", member, payload)
        return await self._resolver.resolve(
            [
                CandidateRequest("patch", member, payload),
                CandidateRequest("post", member, payload),
                last,
            ]
        )

    async def remove(self, rule_id: str) -> Any:
        """Delete a rule, or deactivate it where the backend has no delete route."""
        member = _member(rule_id)
        logger.info("Removing automation %s", rule_id)
        return await self._resolver.resolve(
            [
                CandidateRequest("delete", member),
                CandidateRequest("patch", member, {"active": False}),
                CandidateRequest("post", member, {"active": False}),
            ]
        )

    async def execute(
        self,
        event_type: str,
        lead_id: str | None = None,
        payload: Any = None,
    ) -> Any:
        """Manually fire rules for an event type."""
        body: dict[str, Any] = {"type": event_type}
        if lead_id is not None:
            body["leadId"] = lead_id
        if payload is not None:
            body["payload"] = payload
        return await self._resolver.request(CandidateRequest("post", EXECUTE_PATH, body))

    # ------------------------------------------------------------------
    # Draft-level helpers
    # ------------------------------------------------------------------

    async def save(self, draft: RuleDraft) -> Any:
        """Compile *draft* and create or update it.

        Validation errors are raised before any request is issued.
        """
        rule = compile_rule(draft)
        if rule.id:
            return await self.update(rule.id, rule)
        return await self.create(rule)

    async def set_active(self, rule: AutomationRule, active: bool) -> Any:
        return await self.update(str(rule.id), {"active": active})

    async def duplicate(self, rule: AutomationRule) -> Any:
        copy = AutomationRule(
            name=f"{rule.name or 'Automation'} (copy)",
            active=rule.active,
            trigger=rule.trigger,
            actions=list(rule.actions),
        )
        return await self.create(copy)

    async def execute_draft(
        self,
        type_text: str,
        lead_id_text: str = "",
        payload_text: str = "",
    ) -> Any:
        """Validate raw form input, then :meth:`execute`.

        Raises:
            MissingTriggerTypeError: event type is blank.
            ExecutePayloadJsonError: payload text is not JSON.
        """
        event_type = str(type_text or "").strip()
        if not event_type:
            raise MissingTriggerTypeError("Event type is required.")
        try:
            payload = parse_json_text(payload_text)
        except ValueError as exc:
            raise ExecutePayloadJsonError(
                "Payload JSON is invalid.", field="payload_text", cause=exc
            ) from exc
        lead_id = str(lead_id_text or "").strip() or None
        return await self.execute(event_type, lead_id=lead_id, payload=payload or None)
