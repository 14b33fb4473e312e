"""Trigger condition compilation — draft text fields to a ConditionMap."""

from __future__ import annotations

import re

from zigran_automations.automations.models import (
    CONDITION_KEYS,
    NUMERIC_CONDITION_KEYS,
    ConditionDraft,
    ConditionMap,
)

_LEADING_INT = re.compile(r"^[+-]?\d+")


def parse_int_lenient(value: object) -> int:
    """Parse the leading integer of *value*; anything unparsable becomes 0.

    "15" -> 15, "15min" -> 15, "abc" -> 0, "-3" -> 0 (negatives clamp to 0).
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    match = _LEADING_INT.match(str(value or "").strip())
    if match is None:
        return 0
    return max(int(match.group()), 0)


def compile_conditions(draft: ConditionDraft | None) -> ConditionMap | None:
    """Compile condition fields, omitting blanks.

    Returns ``None`` rather than an empty map when nothing is set.
    """
    if draft is None:
        return None

    compiled: ConditionMap = {}
    for key in CONDITION_KEYS:
        raw = str(getattr(draft, key) or "").strip()
        if not raw:
            continue
        compiled[key] = parse_int_lenient(raw) if key in NUMERIC_CONDITION_KEYS else raw

    return compiled or None
