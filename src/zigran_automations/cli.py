"""CLI entry points for the Zigran automations client.

Commands:
    zigran-automations automations list     — List rules (with filters)
    zigran-automations automations show     — Show one rule in detail
    zigran-automations automations enable   — Activate a rule
    zigran-automations automations disable  — Deactivate a rule
    zigran-automations automations remove   — Delete (or deactivate) a rule
    zigran-automations automations execute  — Manually fire rules for an event
    zigran-automations automations actions  — Show the action catalog
    zigran-automations automations templates — Show flow templates
    zigran-automations integrations ...     — list / connect / disconnect / sync / status
    zigran-automations config get|set       — Read or change config values
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import httpx
import typer
from rich.console import Console
from rich.table import Table

import zigran_automations
from zigran_automations.automations.query import filter_rules, summarize
from zigran_automations.automations.registry import (
    label_of,
    list_action_types,
    trigger_label_of,
)
from zigran_automations.automations.repository import AutomationRepository
from zigran_automations.automations.templates import FLOW_TEMPLATES
from zigran_automations.config import ConfigManager
from zigran_automations.errors import AutomationError
from zigran_automations.http.client import get_async_client
from zigran_automations.integrations.repository import IntegrationRepository
from zigran_automations.logging import setup_logging

T = TypeVar("T")

console = Console()
app = typer.Typer(
    name="zigran-automations",
    help="Compile, inspect and manage Zigran CRM automation rules.",
    no_args_is_help=True,
)
automations_app = typer.Typer(help="Manage automation rules.")
app.add_typer(automations_app, name="automations")

integrations_app = typer.Typer(help="Manage third-party integrations.")
app.add_typer(integrations_app, name="integrations")

config_app = typer.Typer(help="Get or set configuration values.")
app.add_typer(config_app, name="config")

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool = False) -> None:
    """Configure package logging for CLI output."""
    config = ConfigManager().load()
    setup_logging(
        log_file=config.get_log_path(),
        level="DEBUG" if verbose else config.logging.level,
        log_to_file=config.logging.log_to_file,
        console_level=logging.DEBUG if verbose else logging.WARNING,
    )


def _run(operation: Callable[[httpx.AsyncClient], Awaitable[T]]) -> T:
    """Run *operation* with a configured client; errors exit with code 1."""
    config = ConfigManager().load()

    async def _main() -> T:
        async with get_async_client(config.api) as client:
            return await operation(client)

    try:
        return asyncio.run(_main())
    except AutomationError as exc:
        console.print(f"[red]{exc.message}[/red]")
        raise typer.Exit(1) from None


def _print_result(result: Any) -> None:
    if result is None:
        console.print("[green]Done.[/green]")
    else:
        console.print_json(json.dumps(result, default=str))


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Zigran automations client."""
    _setup_logging(verbose)


@app.command()
def version() -> None:
    """Print the package version."""
    console.print(zigran_automations.__version__)


# ------------------------------------------------------------------
# zigran-automations automations ...
# ------------------------------------------------------------------


@automations_app.command("list")
def automations_list(
    status: str = typer.Option("all", help="all | active | inactive"),
    trigger: str = typer.Option("all", help="Trigger type, or 'all'"),
    search: str = typer.Option("", help="Case-insensitive text search"),
) -> None:
    """List automation rules."""
    rules = _run(lambda client: AutomationRepository(client).list_rules())
    try:
        visible = filter_rules(rules, status=status, trigger_type=trigger, search=search)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from None

    stats = summarize(rules)
    table = Table(title="Automation Rules", border_style="cyan")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Trigger")
    table.add_column("Actions")
    table.add_column("Active")

    for rule in visible:
        table.add_row(
            rule.id or "—",
            rule.name,
            trigger_label_of(rule.trigger.type),
            ", ".join(label_of(a.type) for a in rule.actions) or "—",
            "[green]yes[/green]" if rule.active else "[dim]no[/dim]",
        )

    console.print()
    console.print(table)
    console.print(
        f"[dim]{stats.total} total, {stats.active} active, {stats.inactive} inactive[/dim]"
    )
    console.print()


@automations_app.command("show")
def automations_show(rule_id: str = typer.Argument(help="Rule id")) -> None:
    """Show a rule's trigger, conditions and actions."""
    rule = _run(lambda client: AutomationRepository(client).get(rule_id))
    if rule is None:
        console.print(f"[red]Automation not found: {rule_id}[/red]")
        raise typer.Exit(1)

    state = "[green]active[/green]" if rule.active else "[dim]inactive[/dim]"
    console.print(f"\n[bold]{rule.name}[/bold] ({state})")
    console.print(f"Trigger: {trigger_label_of(rule.trigger.type)}")
    if rule.trigger.params is not None:
        console.print_json(json.dumps(rule.trigger.params))
    if rule.trigger.conditions:
        console.print("Conditions:")
        console.print_json(json.dumps(rule.trigger.conditions))

    table = Table(title="Actions", border_style="cyan")
    table.add_column("#", style="dim")
    table.add_column("Action", style="bold")
    table.add_column("Params")
    for idx, action in enumerate(rule.actions, start=1):
        table.add_row(str(idx), label_of(action.type), json.dumps(action.params, default=str))
    console.print(table)


@automations_app.command("enable")
def automations_enable(rule_id: str = typer.Argument(help="Rule id")) -> None:
    """Activate a rule."""
    _print_result(
        _run(lambda client: AutomationRepository(client).update(rule_id, {"active": True}))
    )


@automations_app.command("disable")
def automations_disable(rule_id: str = typer.Argument(help="Rule id")) -> None:
    """Deactivate a rule."""
    _print_result(
        _run(lambda client: AutomationRepository(client).update(rule_id, {"active": False}))
    )


@automations_app.command("remove")
def automations_remove(
    rule_id: str = typer.Argument(help="Rule id"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a rule (falls back to deactivation)."""
    if not yes:
        typer.confirm(f"Remove automation {rule_id}?", abort=True)
    _print_result(_run(lambda client: AutomationRepository(client).remove(rule_id)))


@automations_app.command("execute")
def automations_execute(
    event_type: str = typer.Argument(help="Trigger event type, e.g. lead_created"),
    lead_id: str = typer.Option("", "--lead-id", help="Lead to run against"),
    payload: str = typer.Option("", "--payload", help="Event payload as JSON"),
) -> None:
    """Manually fire rules for an event type."""
    result = _run(
        lambda client: AutomationRepository(client).execute_draft(event_type, lead_id, payload)
    )
    console.print("[green]Execution triggered.[/green]")
    if result is not None:
        _print_result(result)


@automations_app.command("actions")
def automations_actions() -> None:
    """Show the supported action kinds and their parameters."""
    table = Table(title="Action Types", border_style="cyan")
    table.add_column("Kind", style="bold")
    table.add_column("Label")
    table.add_column("Required")
    table.add_column("Optional", style="dim")
    for action_type in list_action_types():
        required = [p.name for p in action_type.params if p.required]
        optional = [p.name for p in action_type.params if not p.required]
        table.add_row(
            action_type.kind,
            action_type.label,
            ", ".join(required) or "—",
            ", ".join(optional) or "—",
        )
    console.print(table)


@automations_app.command("templates")
def automations_templates() -> None:
    """Show the built-in flow templates."""
    table = Table(title="Flow Templates", border_style="cyan")
    table.add_column("Key", style="bold")
    table.add_column("Label")
    table.add_column("Trigger")
    table.add_column("Actions")
    for template in FLOW_TEMPLATES:
        table.add_row(
            template.key,
            template.label,
            trigger_label_of(template.trigger_type),
            ", ".join(label_of(a.type) for a in template.actions),
        )
    console.print(table)


# ------------------------------------------------------------------
# zigran-automations integrations ...
# ------------------------------------------------------------------


@integrations_app.command("list")
def integrations_list() -> None:
    """List integration providers."""
    providers = _run(lambda client: IntegrationRepository(client).list())
    if not providers:
        console.print("[dim]No integrations reported by the backend.[/dim]")
        return
    table = Table(title="Integrations", border_style="cyan")
    table.add_column("Key", style="bold")
    table.add_column("Details")
    for provider in providers:
        if isinstance(provider, dict):
            key = provider.get("key") or provider.get("provider") or provider.get("id") or "—"
            table.add_row(str(key), json.dumps(provider, default=str))
        else:
            table.add_row("—", str(provider))
    console.print(table)


def _integration_command(name: str) -> None:
    def command(provider: str = typer.Argument(help="Provider key, e.g. hubspot")) -> None:
        result = _run(lambda client: getattr(IntegrationRepository(client), name)(provider))
        _print_result(result)

    command.__doc__ = f"{name.capitalize()} an integration provider."
    integrations_app.command(name)(command)


for _name in ("connect", "disconnect", "sync", "status"):
    _integration_command(_name)


# ------------------------------------------------------------------
# zigran-automations config get / set
# ------------------------------------------------------------------


@config_app.command("get")
def config_get(
    key: str = typer.Argument(help="Config key in dot notation (e.g., 'api.base_url')"),
) -> None:
    """Print a config value."""
    data = ConfigManager().load().model_dump()

    value: object = data
    for part in key.split("."):
        if not isinstance(value, dict) or part not in value:
            console.print(f"[red]Key not found: {key}[/red]")
            raise typer.Exit(1)
        value = value[part]

    if key.endswith("token") and isinstance(value, str) and value:
        value = value[:4] + "..." + value[-4:] if len(value) > 8 else "****"
    console.print(str(value))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key in dot notation (e.g., 'api.token')"),
    value: str = typer.Argument(help="Value to set"),
) -> None:
    """Update a single config value."""
    from zigran_automations.config.schema import ZigranConfig

    config_manager = ConfigManager()
    data = config_manager.load().model_dump()

    parts = key.split(".")
    if len(parts) != 2:
        console.print("[red]Key must be in 'section.field' format (e.g., 'api.token').[/red]")
        raise typer.Exit(1)

    section, field = parts
    if section not in data or field not in data[section]:
        console.print(f"[red]Unknown config key: {key}[/red]")
        raise typer.Exit(1)

    existing = data[section][field]
    if isinstance(existing, bool):
        coerced: object = value.lower() in ("true", "1", "yes")
    elif isinstance(existing, (int, float)):
        try:
            coerced = type(existing)(value)
        except ValueError:
            console.print(f"[red]Expected a number for {key}[/red]")
            raise typer.Exit(1) from None
    else:
        coerced = value

    data[section][field] = coerced
    config_manager.save(ZigranConfig(**data))
    console.print(f"[green]{key} = {coerced}[/green]")
