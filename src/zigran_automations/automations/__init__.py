"""Automation workflow compiler — drafts, canonical rules and the rules API."""

from __future__ import annotations

from zigran_automations.automations.compiler import compile_actions, compile_rule
from zigran_automations.automations.conditions import compile_conditions
from zigran_automations.automations.decompiler import decompile_rule, empty_draft
from zigran_automations.automations.models import (
    ActionConfig,
    ActionDraft,
    AutomationRule,
    ConditionDraft,
    RuleDraft,
    TriggerConfig,
)
from zigran_automations.automations.repository import AutomationRepository

__all__ = [
    "ActionConfig",
    "ActionDraft",
    "AutomationRepository",
    "AutomationRule",
    "ConditionDraft",
    "RuleDraft",
    "TriggerConfig",
    "compile_actions",
    "compile_conditions",
    "compile_rule",
    "decompile_rule",
    "empty_draft",
]
