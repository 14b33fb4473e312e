"""Filtering and counting helpers over lists of rules."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass

from zigran_automations.automations.models import AutomationRule

STATUS_FILTERS = ("all", "active", "inactive")


@dataclass
class RuleStats:
    """Active/inactive counts for a rule list."""

    total: int
    active: int
    inactive: int


def summarize(rules: Iterable[AutomationRule]) -> RuleStats:
    rules = list(rules)
    active = sum(1 for rule in rules if rule.active is not False)
    return RuleStats(total=len(rules), active=active, inactive=len(rules) - active)


def filter_rules(
    rules: Iterable[AutomationRule],
    status: str = "all",
    trigger_type: str = "all",
    search: str = "",
) -> list[AutomationRule]:
    """Return rules matching the status, trigger and free-text filters.

    Search is case-insensitive over the name, trigger type and the
    serialized trigger params.
    """
    if status not in STATUS_FILTERS:
        raise ValueError(f"Unknown status filter: {status!r}")

    needle = str(search or "").strip().lower()
    matched: list[AutomationRule] = []
    for rule in rules:
        is_active = rule.active is not False
        if status == "active" and not is_active:
            continue
        if status == "inactive" and is_active:
            continue
        if trigger_type != "all" and rule.trigger.type != trigger_type:
            continue
        if needle:
            params = json.dumps(rule.trigger.params or {}, ensure_ascii=False)
            haystack = f"{rule.name} {rule.trigger.type} {params}".lower()
            if needle not in haystack:
                continue
        matched.append(rule)
    return matched
