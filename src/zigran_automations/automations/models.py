"""Automation rule data models.

``AutomationRule`` and friends are the canonical shape exchanged with the
backend. ``RuleDraft`` is the editable text-based mirror used while a rule
is being composed; it only becomes canonical through the compiler.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any

CONDITION_KEYS: tuple[str, ...] = (
    "pipeline_stage_is",
    "form_id_is",
    "segment_id",
    "no_form_submission_since_minutes",
    "no_activity_since_minutes",
)
NUMERIC_CONDITION_KEYS = frozenset(
    {"no_form_submission_since_minutes", "no_activity_since_minutes"}
)

# Optional condition keys; an empty map is never stored.
ConditionMap = dict[str, str | int]


@dataclass
class TriggerConfig:
    """What starts an automation rule."""

    type: str  # "lead_created" | "lead_updated" | "form_submit" | ...
    params: Any = None
    conditions: ConditionMap | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"type": self.type}
        if self.params is not None:
            payload["params"] = self.params
        if self.conditions:
            payload["conditions"] = dict(self.conditions)
        return payload


@dataclass
class ActionConfig:
    """An action executed by the backend when the rule fires."""

    type: str  # see registry.ActionKind; unknown kinds pass through
    params: Any = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        return {"type": self.type, "params": self.params}


@dataclass
class AutomationRule:
    """A trigger -> conditions -> actions rule as stored by the backend."""

    name: str = ""
    trigger: TriggerConfig = field(default_factory=lambda: TriggerConfig(type="lead_created"))
    actions: list[ActionConfig] = field(default_factory=list)
    active: bool = True
    id: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Request body for create/update: ``{name, trigger, actions, active}``."""
        return {
            "name": self.name,
            "trigger": self.trigger.to_payload(),
            "actions": [a.to_payload() for a in self.actions],
            "active": self.active,
        }

    @classmethod
    def from_payload(cls, data: Any) -> AutomationRule:
        """Build a rule from a backend object. Never raises on bad shapes."""
        if not isinstance(data, Mapping):
            data = {}

        trigger_data = data.get("trigger")
        if not isinstance(trigger_data, Mapping):
            trigger_data = {}
        conditions = trigger_data.get("conditions")
        trigger = TriggerConfig(
            type=str(trigger_data.get("type") or ""),
            params=trigger_data.get("params"),
            conditions=dict(conditions) if isinstance(conditions, Mapping) and conditions else None,
        )

        raw_actions = data.get("actions")
        actions: list[ActionConfig] = []
        if isinstance(raw_actions, list):
            for item in raw_actions:
                if not isinstance(item, Mapping):
                    continue
                params = item.get("params")
                actions.append(
                    ActionConfig(
                        type=str(item.get("type") or ""),
                        params=params if params is not None else {},
                    )
                )

        rule_id = data.get("id")
        return cls(
            id=str(rule_id) if rule_id is not None else None,
            name=str(data.get("name") or ""),
            active=data.get("active") is not False,
            trigger=trigger,
            actions=actions,
        )


# ------------------------------------------------------------------
# Draft
# ------------------------------------------------------------------


def new_local_id() -> str:
    """Editor-local action id, independent of any backend id."""
    return f"act_{uuid.uuid4().hex[:16]}"


@dataclass
class ConditionDraft:
    """Raw text of the five optional trigger conditions."""

    pipeline_stage_is: str = ""
    form_id_is: str = ""
    segment_id: str = ""
    no_form_submission_since_minutes: str = ""
    no_activity_since_minutes: str = ""

    def is_blank(self) -> bool:
        return not any(getattr(self, f.name).strip() for f in fields(self))


@dataclass(frozen=True)
class ActionDraft:
    """One action being edited.

    ``fields`` holds raw strings keyed by draft field name (see
    ``registry.ParamSpec.field``).
    """

    type: str
    fields: dict[str, str] = field(default_factory=dict)
    local_id: str = field(default_factory=new_local_id)

    def get(self, name: str) -> str:
        value = self.fields.get(name)
        return "" if value is None else str(value)


@dataclass
class RuleDraft:
    """Editable mirror of an ``AutomationRule``."""

    id: str | None = None
    name: str = ""
    active: bool = True
    trigger_type: str = "lead_created"
    trigger_params_text: str = ""
    conditions: ConditionDraft = field(default_factory=ConditionDraft)
    actions: list[ActionDraft] = field(default_factory=list)
