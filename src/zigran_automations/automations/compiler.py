"""Rule compilation — RuleDraft -> canonical AutomationRule.

Validation runs in a fixed order and the first failure is raised as a
``RuleValidationError`` subclass. Nothing here touches the network.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable
from typing import Any

from zigran_automations.automations.conditions import compile_conditions, parse_int_lenient
from zigran_automations.automations.models import (
    ActionConfig,
    ActionDraft,
    AutomationRule,
    RuleDraft,
    TriggerConfig,
)
from zigran_automations.automations.registry import (
    UNKNOWN_PARAMS,
    ParamShape,
    ParamSpec,
    get_action_type,
)
from zigran_automations.errors import (
    EmptyActionsError,
    JsonFieldError,
    MissingActionParamError,
    MissingNameError,
    MissingTriggerTypeError,
    TriggerParamsJsonError,
)

logger = logging.getLogger(__name__)

_LIST_SEPARATORS = re.compile(r"\r?\n|,")


def parse_json_text(text: str | None) -> Any:
    """Parse raw JSON text. Blank text parses to ``None``.

    Raises:
        ValueError: if the text is not valid JSON.
    """
    raw = str(text or "").strip()
    if not raw:
        return None
    return json.loads(raw)


def split_lines(text: str | None) -> list[str]:
    """Split on newlines or commas, trimming and dropping empties."""
    return [part.strip() for part in _LIST_SEPARATORS.split(str(text or "")) if part.strip()]


def compile_rule(draft: RuleDraft) -> AutomationRule:
    """Compile *draft* into a canonical rule.

    Raises:
        MissingNameError: name is blank.
        MissingTriggerTypeError: trigger type is blank.
        TriggerParamsJsonError: trigger params text is not JSON.
        JsonFieldError: an action's JSON field does not parse (subclass
            identifies the field).
        MissingActionParamError: a required action param is blank.
        EmptyActionsError: no action survived compilation.
    """
    name = str(draft.name or "").strip()
    if not name:
        raise MissingNameError()

    trigger_type = str(draft.trigger_type or "").strip()
    if not trigger_type:
        raise MissingTriggerTypeError()

    try:
        trigger_params = parse_json_text(draft.trigger_params_text)
    except ValueError as exc:
        raise TriggerParamsJsonError(
            "Trigger params JSON is invalid.", field="trigger_params_text", cause=exc
        ) from exc

    conditions = compile_conditions(draft.conditions)

    actions = compile_actions(draft.actions)
    if not actions:
        raise EmptyActionsError()

    return AutomationRule(
        id=draft.id,
        name=name,
        active=bool(draft.active),
        trigger=TriggerConfig(type=trigger_type, params=trigger_params, conditions=conditions),
        actions=actions,
    )


def compile_actions(actions: Iterable[ActionDraft]) -> list[ActionConfig]:
    """Compile drafted actions in order. Actions with a blank type are skipped.

    The first JSON failure aborts; later actions are never compiled.
    """
    compiled: list[ActionConfig] = []
    for action in actions:
        result = compile_action(action)
        if result is not None:
            compiled.append(result)
    return compiled


def compile_action(action: ActionDraft) -> ActionConfig | None:
    """Compile a single drafted action, or ``None`` if its type is blank."""
    kind = str(action.type or "").strip()
    if not kind:
        return None

    action_type = get_action_type(kind)
    if action_type is None:
        raw_params = _compile_json(action, UNKNOWN_PARAMS)
        logger.debug("Passing through unknown action kind %r", kind)
        return ActionConfig(type=kind, params=raw_params)

    params: dict[str, Any] = {}
    for spec in action_type.params:
        value = _compile_param(action, spec)
        if spec.required and not value:
            raise MissingActionParamError(
                param=spec.name, action_type=kind, local_id=action.local_id
            )
        if value is not None:
            params[spec.name] = value
    return ActionConfig(type=kind, params=params)


def _compile_param(action: ActionDraft, spec: ParamSpec) -> Any:
    """Return the compiled value of one param, or ``None`` to omit it."""
    if spec.shape is ParamShape.JSON:
        return _compile_json(action, spec)

    raw = action.get(spec.field).strip()
    if spec.shape is ParamShape.LINES:
        return split_lines(raw) or None
    if spec.shape is ParamShape.INTEGER:
        return parse_int_lenient(raw) if raw else None
    if spec.required:
        return raw
    return raw or None


def _compile_json(action: ActionDraft, spec: ParamSpec) -> Any:
    try:
        value = parse_json_text(action.get(spec.field))
    except ValueError as exc:
        error_cls = spec.error or JsonFieldError
        raise error_cls(field=spec.field, local_id=action.local_id, cause=exc) from exc
    # Empty lists and objects are real values; only scalar blanks fall back.
    if not value and not isinstance(value, (list, dict)):
        return dict(spec.blank_value) if spec.blank_value is not None else None
    if spec.blank_value is None and value == {}:
        return None
    return value
