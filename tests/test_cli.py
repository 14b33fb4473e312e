"""Tests for the zigran-automations CLI."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest
from typer.testing import CliRunner

import zigran_automations
from zigran_automations.cli import app
from zigran_automations.config import ConfigManager

runner = CliRunner()

RULES = [
    {
        "id": "r1",
        "name": "Welcome",
        "active": True,
        "trigger": {"type": "lead_created"},
        "actions": [{"type": "notify_slack", "params": {"webhookUrl": "u", "text": "t"}}],
    },
    {
        "id": "r2",
        "name": "Nurture",
        "active": False,
        "trigger": {"type": "form_submit", "params": {"formId": "f1"}},
        "actions": [{"type": "update_pipeline", "params": {"stage": "warm"}}],
    },
]


@pytest.fixture()
def cli_backend(tmp_path: Path, backend) -> Iterator:
    """Point the CLI at a temp config dir and the scripted backend."""

    @asynccontextmanager
    async def fake_client(config=None) -> AsyncIterator[httpx.AsyncClient]:
        transport = httpx.MockTransport(backend)
        async with httpx.AsyncClient(base_url="https://api.test", transport=transport) as client:
            yield client

    with (
        patch("zigran_automations.cli.ConfigManager", lambda: ConfigManager(config_dir=tmp_path)),
        patch("zigran_automations.cli.get_async_client", fake_client),
    ):
        yield backend


class TestVersion:
    def test_version(self, cli_backend) -> None:
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert zigran_automations.__version__ in result.output


class TestAutomationsCommands:
    """zigran-automations automations ..."""

    def test_list(self, cli_backend) -> None:
        cli_backend.route("GET", "/automations", httpx.Response(200, json={"data": RULES}))

        result = runner.invoke(app, ["automations", "list"])

        assert result.exit_code == 0
        assert "Welcome" in result.output
        assert "Nurture" in result.output
        assert "2 total, 1 active, 1 inactive" in result.output

    def test_list_filtered(self, cli_backend) -> None:
        cli_backend.route("GET", "/automations", httpx.Response(200, json=RULES))

        result = runner.invoke(app, ["automations", "list", "--status", "inactive"])

        assert result.exit_code == 0
        assert "Nurture" in result.output
        assert "Welcome" not in result.output

    def test_list_bad_status(self, cli_backend) -> None:
        cli_backend.route("GET", "/automations", httpx.Response(200, json=RULES))

        result = runner.invoke(app, ["automations", "list", "--status", "paused"])

        assert result.exit_code == 1
        assert "Unknown status filter" in result.output

    def test_backend_error_exits(self, cli_backend) -> None:
        cli_backend.route("GET", "/automations", httpx.Response(500, json={"message": "boom"}))

        result = runner.invoke(app, ["automations", "list"])

        assert result.exit_code == 1
        assert "boom" in result.output

    def test_show(self, cli_backend) -> None:
        cli_backend.route("GET", "/automations", httpx.Response(200, json=RULES))

        result = runner.invoke(app, ["automations", "show", "r2"])

        assert result.exit_code == 0
        assert "Nurture" in result.output
        assert "Form Submitted" in result.output

    def test_show_missing(self, cli_backend) -> None:
        cli_backend.route("GET", "/automations", httpx.Response(200, json=RULES))

        result = runner.invoke(app, ["automations", "show", "nope"])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_enable(self, cli_backend) -> None:
        cli_backend.route("PATCH", "/automations/r2", 200)

        result = runner.invoke(app, ["automations", "enable", "r2"])

        assert result.exit_code == 0
        assert "Done." in result.output
        assert cli_backend.body(0) == {"active": True}

    def test_disable(self, cli_backend) -> None:
        cli_backend.route("PATCH", "/automations/r1", 200)

        result = runner.invoke(app, ["automations", "disable", "r1"])

        assert result.exit_code == 0
        assert cli_backend.body(0) == {"active": False}

    def test_remove_confirmed(self, cli_backend) -> None:
        cli_backend.route("DELETE", "/automations/r1", 204)

        result = runner.invoke(app, ["automations", "remove", "r1", "--yes"])

        assert result.exit_code == 0
        assert cli_backend.calls == [("DELETE", "/automations/r1")]

    def test_remove_declined(self, cli_backend) -> None:
        result = runner.invoke(app, ["automations", "remove", "r1"], input="n\n")

        assert result.exit_code == 1
        assert cli_backend.calls == []

    def test_execute(self, cli_backend) -> None:
        cli_backend.route("POST", "/automations/execute", 204)

        result = runner.invoke(
            app,
            ["automations", "execute", "lead_created", "--lead-id", "l1", "--payload", '{"a": 1}'],
        )

        assert result.exit_code == 0
        assert "Execution triggered." in result.output
        assert cli_backend.body(0) == {"type": "lead_created", "leadId": "l1", "payload": {"a": 1}}

    def test_execute_bad_payload(self, cli_backend) -> None:
        result = runner.invoke(app, ["automations", "execute", "custom", "--payload", "{bad"])

        assert result.exit_code == 1
        assert "Payload JSON is invalid." in result.output
        assert cli_backend.calls == []

    def test_actions_catalog(self, cli_backend) -> None:
        result = runner.invoke(app, ["automations", "actions"])

        assert result.exit_code == 0
        assert "send_webhook" in result.output
        assert "Webhook" in result.output

    def test_templates(self, cli_backend) -> None:
        result = runner.invoke(app, ["automations", "templates"])

        assert result.exit_code == 0
        assert "lead_welcome" in result.output
        assert "no_activity" in result.output


class TestIntegrationsCommands:
    """zigran-automations integrations ..."""

    def test_list(self, cli_backend) -> None:
        cli_backend.route(
            "GET", "/integrations", httpx.Response(200, json={"hubspot": {"connected": True}})
        )

        result = runner.invoke(app, ["integrations", "list"])

        assert result.exit_code == 0
        assert "hubspot" in result.output

    def test_list_empty(self, cli_backend) -> None:
        cli_backend.route("GET", "/integrations", httpx.Response(200, json=[]))

        result = runner.invoke(app, ["integrations", "list"])

        assert result.exit_code == 0
        assert "No integrations" in result.output

    def test_connect(self, cli_backend) -> None:
        cli_backend.route(
            "POST", "/integrations/connect", httpx.Response(200, json={"connected": True})
        )

        result = runner.invoke(app, ["integrations", "connect", "hubspot"])

        assert result.exit_code == 0
        assert "connected" in result.output
        assert cli_backend.calls[0] == ("POST", "/integrations/hubspot/connect")

    def test_status(self, cli_backend) -> None:
        cli_backend.route("GET", "/integrations/slack/status", httpx.Response(200, json={"ok": 1}))

        result = runner.invoke(app, ["integrations", "status", "slack"])

        assert result.exit_code == 0
        assert '"ok"' in result.output


class TestConfigCommands:
    """zigran-automations config get / set."""

    def test_get_default(self, cli_backend) -> None:
        result = runner.invoke(app, ["config", "get", "api.base_url"])

        assert result.exit_code == 0
        assert "https://api.zigran.com/api" in result.output

    def test_set_and_get_masked_token(self, cli_backend, tmp_path: Path) -> None:
        result = runner.invoke(app, ["config", "set", "api.token", "secret-token-1234"])
        assert result.exit_code == 0
        assert (tmp_path / "config.toml").is_file()

        result = runner.invoke(app, ["config", "get", "api.token"])
        assert result.exit_code == 0
        assert "secr...1234" in result.output
        assert "secret-token-1234" not in result.output

    def test_set_coerces_numbers(self, cli_backend, tmp_path: Path) -> None:
        result = runner.invoke(app, ["config", "set", "api.timeout", "2.5"])

        assert result.exit_code == 0
        assert ConfigManager(config_dir=tmp_path).load().api.timeout == 2.5

    def test_set_coerces_bools(self, cli_backend, tmp_path: Path) -> None:
        runner.invoke(app, ["config", "set", "logging.log_to_file", "yes"])
        assert ConfigManager(config_dir=tmp_path).load().logging.log_to_file is True

    def test_set_bad_number(self, cli_backend) -> None:
        result = runner.invoke(app, ["config", "set", "api.timeout", "soon"])
        assert result.exit_code == 1

    @pytest.mark.parametrize("key", ["api", "api.token.extra", "nope.field"])
    def test_set_bad_key(self, cli_backend, key: str) -> None:
        result = runner.invoke(app, ["config", "set", key, "x"])
        assert result.exit_code == 1

    def test_get_unknown_key(self, cli_backend) -> None:
        result = runner.invoke(app, ["config", "get", "api.nope"])
        assert result.exit_code == 1
        assert "Key not found" in result.output
