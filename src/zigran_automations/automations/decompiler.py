"""Rule decompilation — canonical AutomationRule -> editable RuleDraft.

Total by construction: malformed upstream values degrade to blank text.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from zigran_automations.automations.models import (
    CONDITION_KEYS,
    ActionConfig,
    ActionDraft,
    AutomationRule,
    ConditionDraft,
    RuleDraft,
)
from zigran_automations.automations.registry import (
    DEFAULT_TRIGGER_TYPE,
    UNKNOWN_PARAMS_FIELD,
    ActionKind,
    ParamShape,
    ParamSpec,
    default_params_for,
    get_action_type,
)


def to_json_text(value: Any) -> str:
    """Pretty-print *value* the way the editor shows JSON fields."""
    try:
        return json.dumps(value, indent=2, ensure_ascii=False)
    except (TypeError, ValueError):
        return ""


def decompile_rule(rule: AutomationRule | Mapping[str, Any] | None) -> RuleDraft:
    """Build an editable draft from *rule*. ``None`` gives a new-rule draft."""
    if rule is None:
        return empty_draft()
    if not isinstance(rule, AutomationRule):
        rule = AutomationRule.from_payload(rule)

    trigger = rule.trigger
    conditions = trigger.conditions if isinstance(trigger.conditions, Mapping) else {}

    return RuleDraft(
        id=rule.id,
        name=str(rule.name or ""),
        active=rule.active is not False,
        trigger_type=str(trigger.type or DEFAULT_TRIGGER_TYPE),
        trigger_params_text=(
            to_json_text(trigger.params) if trigger.params is not None else ""
        ),
        conditions=ConditionDraft(
            **{key: _condition_text(conditions.get(key)) for key in CONDITION_KEYS}
        ),
        actions=[decompile_action(action) for action in rule.actions],
    )


def decompile_action(action: ActionConfig) -> ActionDraft:
    """Expand one canonical action into raw draft fields.

    Every call produces a fresh local id.
    """
    kind = str(action.type or ActionKind.SEND_EMAIL_TEMPLATE.value)
    params = action.params if isinstance(action.params, Mapping) else {}

    action_type = get_action_type(kind)
    if action_type is None:
        raw = action.params if action.params is not None else {}
        return ActionDraft(type=kind, fields={UNKNOWN_PARAMS_FIELD: to_json_text(raw)})

    return ActionDraft(
        type=kind,
        fields={spec.field: _param_text(spec, params.get(spec.name)) for spec in action_type.params},
    )


def empty_draft() -> RuleDraft:
    """Draft for a brand-new rule with one template e-mail action."""
    kind = ActionKind.SEND_EMAIL_TEMPLATE.value
    return RuleDraft(actions=[ActionDraft(type=kind, fields=default_params_for(kind))])


def _param_text(spec: ParamSpec, value: Any) -> str:
    if spec.shape is ParamShape.JSON:
        return to_json_text(value if value is not None else {})
    if spec.shape is ParamShape.LINES:
        if not isinstance(value, list):
            return ""
        return "\n".join(str(item) for item in value if item is not None)
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value)


def _condition_text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list, bool)):
        return ""
    return str(value)
