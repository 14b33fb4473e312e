"""Draft editing operations.

Each function returns a new ``RuleDraft``; the action list of the input
draft is never modified in place.
"""

from __future__ import annotations

from dataclasses import replace

from zigran_automations.automations.decompiler import decompile_action
from zigran_automations.automations.models import ActionDraft, ConditionDraft, RuleDraft
from zigran_automations.automations.registry import default_params_for
from zigran_automations.automations.templates import FlowTemplate


def _index_of(draft: RuleDraft, local_id: str) -> int:
    for idx, action in enumerate(draft.actions):
        if action.local_id == local_id:
            return idx
    return -1


def add_action(draft: RuleDraft, kind: str) -> RuleDraft:
    """Append a blank action of *kind*."""
    action = ActionDraft(type=kind, fields=default_params_for(kind))
    return replace(draft, actions=[*draft.actions, action])


def remove_action(draft: RuleDraft, local_id: str) -> RuleDraft:
    return replace(draft, actions=[a for a in draft.actions if a.local_id != local_id])


def move_action(draft: RuleDraft, local_id: str, offset: int) -> RuleDraft:
    """Swap an action with its neighbour (``offset`` -1 = up, +1 = down).

    Moving past either end, or an unknown id, returns an unchanged copy.
    """
    idx = _index_of(draft, local_id)
    target = idx + offset
    actions = list(draft.actions)
    if idx < 0 or offset == 0 or not 0 <= target < len(actions):
        return replace(draft, actions=actions)
    actions[idx], actions[target] = actions[target], actions[idx]
    return replace(draft, actions=actions)


def change_action_type(draft: RuleDraft, local_id: str, kind: str) -> RuleDraft:
    """Switch an action to *kind*, resetting its fields but keeping its id."""
    actions = [
        ActionDraft(type=kind, fields=default_params_for(kind), local_id=a.local_id)
        if a.local_id == local_id
        else a
        for a in draft.actions
    ]
    return replace(draft, actions=actions)


def set_action_field(draft: RuleDraft, local_id: str, field: str, value: str) -> RuleDraft:
    actions = [
        replace(a, fields={**a.fields, field: value}) if a.local_id == local_id else a
        for a in draft.actions
    ]
    return replace(draft, actions=actions)


def apply_template(draft: RuleDraft, template: FlowTemplate) -> RuleDraft:
    """Overwrite name, trigger, conditions and actions from *template*.

    The draft's id and active flag are kept. Actions are replaced only when
    the template defines some.
    """
    actions = [decompile_action(action) for action in template.actions]
    return replace(
        draft,
        name=template.label or draft.name,
        trigger_type=template.trigger_type or draft.trigger_type,
        trigger_params_text=template.trigger_params_text,
        conditions=ConditionDraft(
            **{key: str(value) for key, value in template.conditions.items()}
        ),
        actions=actions or list(draft.actions),
    )
