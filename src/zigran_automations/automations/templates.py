"""Ready-made flow templates offered in the rule editor."""

from __future__ import annotations

from dataclasses import dataclass, field

from zigran_automations.automations.models import ActionConfig


@dataclass(frozen=True)
class FlowTemplate:
    """A starting point for a new rule."""

    key: str
    label: str
    trigger_type: str
    actions: tuple[ActionConfig, ...] = ()
    trigger_params_text: str = ""
    conditions: dict[str, str] = field(default_factory=dict)


FLOW_TEMPLATES: tuple[FlowTemplate, ...] = (
    FlowTemplate(
        key="lead_welcome",
        label="New Lead → Welcome Email",
        trigger_type="lead_created",
        actions=(
            ActionConfig(
                type="send_email_template",
                params={"templateId": "TEMPLATE_ID", "to": "", "variables": {}},
            ),
            ActionConfig(
                type="create_task",
                params={"title": "Contact the new lead within 24 hours", "dueDate": ""},
            ),
        ),
    ),
    FlowTemplate(
        key="no_activity",
        label="No Activity → Slack Notification + Task",
        trigger_type="lead_updated",
        conditions={"no_activity_since_minutes": "1440"},
        actions=(
            ActionConfig(
                type="notify_slack",
                params={"webhookUrl": "", "text": "Lead has been inactive for a long time."},
            ),
            ActionConfig(type="create_task", params={"title": "Check inactive lead", "dueDate": ""}),
        ),
    ),
)


def get_template(key: str) -> FlowTemplate | None:
    for template in FLOW_TEMPLATES:
        if template.key == key:
            return template
    return None
