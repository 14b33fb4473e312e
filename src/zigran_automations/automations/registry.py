"""Action and trigger catalogs.

Each known action kind declares its parameter schema once. The compiler and
decompiler walk that schema instead of switching on the action type.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from zigran_automations.errors import (
    JsonFieldError,
    TaskConditionsJsonError,
    UnknownActionParamsJsonError,
    VariablesJsonError,
    WebhookBodyJsonError,
)

DEFAULT_ICON = "flash-outline"
UNKNOWN_PARAMS_FIELD = "params_text"


class ActionKind(str, Enum):
    """Action kinds understood by the backend automation engine."""

    SEND_EMAIL_TEMPLATE = "send_email_template"
    SEND_EMAIL = "send_email"
    SEND_CONVERSION = "send_conversion"
    UPDATE_PIPELINE = "update_pipeline"
    ROUTE_TO_TEAM = "route_to_team"
    NOTIFY_SLACK = "notify_slack"
    ADD_CUSTOM_AUDIENCE = "add_custom_audience"
    SEND_WEBHOOK = "send_webhook"
    CREATE_TASK = "create_task"


class ParamShape(str, Enum):
    """How a parameter is held in the draft and on the wire."""

    TEXT = "text"  # trimmed string
    INTEGER = "integer"  # lenient non-negative int
    JSON = "json"  # raw JSON text in the draft
    LINES = "lines"  # one item per line (or comma separated)


@dataclass(frozen=True)
class ParamSpec:
    """One parameter of an action kind."""

    name: str  # wire key, e.g. "templateId"
    field: str  # draft field, e.g. "template_id"
    shape: ParamShape = ParamShape.TEXT
    required: bool = False
    default: str = ""
    error: type[JsonFieldError] | None = None
    # JSON value used when the text is blank; None means omit the param
    blank_value: dict | None = None


@dataclass(frozen=True)
class ActionType:
    """Catalog entry for an action kind."""

    kind: str
    label: str
    icon: str
    params: tuple[ParamSpec, ...]

    def param(self, field: str) -> ParamSpec | None:
        for spec in self.params:
            if spec.field == field:
                return spec
        return None


def _json(name: str, field: str, error: type[JsonFieldError], blank: dict | None) -> ParamSpec:
    return ParamSpec(
        name=name,
        field=field,
        shape=ParamShape.JSON,
        default="{}",
        error=error,
        blank_value=blank,
    )


ACTION_TYPES: dict[str, ActionType] = {
    t.kind: t
    for t in (
        ActionType(
            kind=ActionKind.SEND_EMAIL_TEMPLATE.value,
            label="Template Email",
            icon="mail-outline",
            params=(
                ParamSpec("templateId", "template_id", required=True, default="TEMPLATE_ID"),
                ParamSpec("to", "to"),
                _json("variables", "variables_text", VariablesJsonError, {}),
            ),
        ),
        ActionType(
            kind=ActionKind.SEND_EMAIL.value,
            label="Email",
            icon="send-outline",
            params=(
                ParamSpec("to", "to", required=True),
                ParamSpec("subject", "subject", required=True),
                ParamSpec("html", "html", required=True),
            ),
        ),
        ActionType(
            kind=ActionKind.SEND_CONVERSION.value,
            label="Conversion",
            icon="trending-up-outline",
            params=(ParamSpec("eventName", "event_name"),),
        ),
        ActionType(
            kind=ActionKind.UPDATE_PIPELINE.value,
            label="Update Pipeline",
            icon="swap-horizontal-outline",
            params=(ParamSpec("stage", "stage", required=True),),
        ),
        ActionType(
            kind=ActionKind.ROUTE_TO_TEAM.value,
            label="Route to Team",
            icon="people-outline",
            params=(ParamSpec("teamId", "team_id", required=True),),
        ),
        ActionType(
            kind=ActionKind.NOTIFY_SLACK.value,
            label="Slack Notification",
            icon="chatbubble-ellipses-outline",
            params=(
                ParamSpec("webhookUrl", "webhook_url", required=True),
                ParamSpec("text", "text", required=True),
            ),
        ),
        ActionType(
            kind=ActionKind.ADD_CUSTOM_AUDIENCE.value,
            label="Custom Audience",
            icon="people-circle-outline",
            params=(
                ParamSpec("adAccountId", "ad_account_id", required=True),
                ParamSpec("emails", "emails_text", shape=ParamShape.LINES),
            ),
        ),
        ActionType(
            kind=ActionKind.SEND_WEBHOOK.value,
            label="Webhook",
            icon="link-outline",
            params=(
                ParamSpec("url", "url", required=True),
                _json("body", "body_text", WebhookBodyJsonError, {}),
            ),
        ),
        ActionType(
            kind=ActionKind.CREATE_TASK.value,
            label="Create Task",
            icon="checkbox-outline",
            params=(
                ParamSpec("title", "title", required=True),
                ParamSpec("dueDate", "due_date"),
                ParamSpec("assignedTo", "assigned_to"),
                ParamSpec("delayMinutes", "delay_minutes", shape=ParamShape.INTEGER),
                ParamSpec("delaySeconds", "delay_seconds", shape=ParamShape.INTEGER),
                _json("conditions", "conditions_text", TaskConditionsJsonError, None),
            ),
        ),
    )
}

# Schema for kinds outside the catalog: the whole params object as raw JSON.
UNKNOWN_PARAMS = _json("params", UNKNOWN_PARAMS_FIELD, UnknownActionParamsJsonError, {})


def get_action_type(kind: str) -> ActionType | None:
    """Return the catalog entry for *kind*, or ``None`` for unknown kinds."""
    return ACTION_TYPES.get(kind)


def list_action_types() -> list[ActionType]:
    """Return all known action types in catalog order."""
    return list(ACTION_TYPES.values())


def is_known(kind: str) -> bool:
    return kind in ACTION_TYPES


def label_of(kind: str) -> str:
    action_type = ACTION_TYPES.get(kind)
    if action_type is not None:
        return action_type.label
    return str(kind) if kind else "Action"


def icon_of(kind: str) -> str:
    action_type = ACTION_TYPES.get(kind)
    return action_type.icon if action_type is not None else DEFAULT_ICON


def default_params_for(kind: str) -> dict[str, str]:
    """Blank-but-valid draft fields for *kind*.

    Used when an action switches type in the editor.
    """
    action_type = ACTION_TYPES.get(kind)
    if action_type is None:
        return {UNKNOWN_PARAMS_FIELD: UNKNOWN_PARAMS.default}
    return {spec.field: spec.default for spec in action_type.params}


# ------------------------------------------------------------------
# Triggers
# ------------------------------------------------------------------


@dataclass(frozen=True)
class TriggerType:
    """Catalog entry for a trigger event."""

    key: str
    label: str


DEFAULT_TRIGGER_TYPE = "lead_created"

TRIGGER_TYPES: tuple[TriggerType, ...] = (
    TriggerType("lead_created", "Lead Created"),
    TriggerType("lead_updated", "Lead Updated"),
    TriggerType("pipeline_stage_changed", "Pipeline Stage Changed"),
    TriggerType("form_submit", "Form Submitted"),
    TriggerType("meeting_booked", "Meeting Booked"),
    TriggerType("custom", "Custom"),
)


def trigger_label_of(kind: str) -> str:
    for trigger in TRIGGER_TYPES:
        if trigger.key == kind:
            return trigger.label
    return str(kind) if kind else "—"
