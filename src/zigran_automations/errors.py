"""Zigran automation error hierarchy.

Validation errors are raised by the rule compiler before any request is
issued. ``NetworkError`` is raised by the request resolver.
"""

from __future__ import annotations

from typing import Any


class AutomationError(Exception):
    """Base error for all automation client exceptions."""

    code = "automation_error"

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Errors
class RuleValidationError(AutomationError):
    """A rule draft could not be compiled."""

    code = "validation"


class MissingNameError(RuleValidationError):
    """Rule name is blank."""

    code = "missing_name"

    def __init__(self, message: str = "Automation name is required."):
        super().__init__(message)


class MissingTriggerTypeError(RuleValidationError):
    """Trigger type is blank."""

    code = "missing_trigger_type"

    def __init__(self, message: str = "Trigger type is required."):
        super().__init__(message)


class EmptyActionsError(RuleValidationError):
    """The compiled action list is empty."""

    code = "empty_actions"

    def __init__(self, message: str = "Add at least one action."):
        super().__init__(message)


class MissingActionParamError(RuleValidationError):
    """A required parameter of an action is blank."""

    code = "missing_action_param"

    def __init__(
        self,
        message: str | None = None,
        param: str | None = None,
        action_type: str | None = None,
        local_id: str | None = None,
    ):
        super().__init__(
            message or f"{action_type or 'Action'} requires '{param}'.",
            {"param": param, "action_type": action_type, "local_id": local_id},
        )
        self.param = param
        self.action_type = action_type
        self.local_id = local_id


class JsonFieldError(RuleValidationError):
    """A raw JSON text field of the draft does not parse."""

    code = "json"

    def __init__(
        self,
        message: str | None = None,
        field: str | None = None,
        local_id: str | None = None,
        cause: Exception | None = None,
    ):
        details: dict[str, Any] = {"field": field, "local_id": local_id}
        if cause:
            details["cause"] = str(cause)
        super().__init__(message or f"Invalid JSON in {field or 'field'}.", details)
        self.field = field
        self.local_id = local_id
        self.cause = cause


class TriggerParamsJsonError(JsonFieldError):
    """Trigger params text is not valid JSON."""

    code = "trigger_params_json"


class VariablesJsonError(JsonFieldError):
    """Template e-mail variables text is not valid JSON."""

    code = "variables_json"


class WebhookBodyJsonError(JsonFieldError):
    """Webhook body text is not valid JSON."""

    code = "body_json"


class TaskConditionsJsonError(JsonFieldError):
    """Task conditions text is not valid JSON."""

    code = "task_conditions_json"


class UnknownActionParamsJsonError(JsonFieldError):
    """Raw params of an unknown action kind are not valid JSON."""

    code = "params_json"


class ExecutePayloadJsonError(JsonFieldError):
    """Manual execution payload text is not valid JSON."""

    code = "payload_json"


# Network Errors
class NetworkError(AutomationError):
    """A backend request failed.

    ``status_code`` is ``None`` when the request never produced a response
    (connection refused, timeout, ...).
    """

    code = "network"

    def __init__(
        self,
        message: str,
        method: str | None = None,
        url: str | None = None,
        status_code: int | None = None,
        payload: Any = None,
    ):
        super().__init__(
            message,
            {"method": method, "url": url, "status_code": status_code},
        )
        self.method = method
        self.url = url
        self.status_code = status_code
        self.payload = payload
