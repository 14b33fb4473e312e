"""Tests for the action and trigger catalogs."""

from __future__ import annotations

import json

import pytest

from zigran_automations.automations.registry import (
    ACTION_TYPES,
    DEFAULT_ICON,
    UNKNOWN_PARAMS_FIELD,
    ActionKind,
    ParamShape,
    default_params_for,
    get_action_type,
    icon_of,
    is_known,
    label_of,
    list_action_types,
    trigger_label_of,
)
from zigran_automations.errors import (
    TaskConditionsJsonError,
    VariablesJsonError,
    WebhookBodyJsonError,
)


class TestCatalog:
    """The catalog covers exactly the known action kinds."""

    def test_every_kind_registered(self) -> None:
        assert set(ACTION_TYPES) == {kind.value for kind in ActionKind}

    def test_list_preserves_catalog_order(self) -> None:
        kinds = [t.kind for t in list_action_types()]
        assert kinds[0] == "send_email_template"
        assert kinds[-1] == "create_task"
        assert len(kinds) == 9

    @pytest.mark.parametrize(
        ("kind", "required"),
        [
            ("send_email_template", {"templateId"}),
            ("send_email", {"to", "subject", "html"}),
            ("send_conversion", set()),
            ("update_pipeline", {"stage"}),
            ("route_to_team", {"teamId"}),
            ("notify_slack", {"webhookUrl", "text"}),
            ("add_custom_audience", {"adAccountId"}),
            ("send_webhook", {"url"}),
            ("create_task", {"title"}),
        ],
    )
    def test_required_params(self, kind: str, required: set[str]) -> None:
        action_type = get_action_type(kind)
        assert action_type is not None
        assert {p.name for p in action_type.params if p.required} == required

    def test_json_params_carry_specific_errors(self) -> None:
        errors = {
            (t.kind, p.name): p.error
            for t in list_action_types()
            for p in t.params
            if p.shape is ParamShape.JSON
        }
        assert errors == {
            ("send_email_template", "variables"): VariablesJsonError,
            ("send_webhook", "body"): WebhookBodyJsonError,
            ("create_task", "conditions"): TaskConditionsJsonError,
        }

    def test_param_lookup_by_field(self) -> None:
        action_type = get_action_type("add_custom_audience")
        spec = action_type.param("emails_text")
        assert spec is not None
        assert spec.name == "emails"
        assert spec.shape is ParamShape.LINES
        assert action_type.param("nope") is None


class TestLookups:
    """label_of / icon_of / is_known."""

    def test_is_known(self) -> None:
        assert is_known("send_webhook") is True
        assert is_known("send_fax") is False

    def test_label_known(self) -> None:
        assert label_of("notify_slack") == "Slack Notification"

    def test_label_unknown_falls_back_to_kind(self) -> None:
        assert label_of("send_fax") == "send_fax"

    def test_label_blank(self) -> None:
        assert label_of("") == "Action"

    def test_icon(self) -> None:
        assert icon_of("send_webhook") == "link-outline"
        assert icon_of("send_fax") == DEFAULT_ICON

    def test_trigger_labels(self) -> None:
        assert trigger_label_of("form_submit") == "Form Submitted"
        assert trigger_label_of("webinar_joined") == "webinar_joined"
        assert trigger_label_of("") == "—"


class TestDefaultParams:
    """Blank-but-valid draft fields when switching an action's type."""

    def test_template_email_defaults(self) -> None:
        assert default_params_for("send_email_template") == {
            "template_id": "TEMPLATE_ID",
            "to": "",
            "variables_text": "{}",
        }

    def test_task_defaults(self) -> None:
        defaults = default_params_for("create_task")
        assert defaults["title"] == ""
        assert defaults["delay_minutes"] == ""
        assert json.loads(defaults["conditions_text"]) == {}

    def test_unknown_kind_gets_raw_params(self) -> None:
        assert default_params_for("send_fax") == {UNKNOWN_PARAMS_FIELD: "{}"}

    def test_defaults_are_fresh_dicts(self) -> None:
        first = default_params_for("send_email")
        first["to"] = "changed"
        assert default_params_for("send_email")["to"] == ""
