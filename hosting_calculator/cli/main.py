"""
CLI interface for the hosting cost calculator.

Provides command-line access to cost estimates and persistent sessions.
"""

import logging
import math
import sys
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from hosting_calculator.config.loader import Scenario, load_scenario, parse_scenario
from hosting_calculator.core.provider_config import ProviderConfig
from hosting_calculator.core.session import SessionController
from hosting_calculator.core.types import CostResult, UsageInputs
from hosting_calculator.providers import PROVIDERS, get_provider
from hosting_calculator.storage.db import DB_PATH_ENV_VAR
from hosting_calculator.storage.repository import get_store

app = typer.Typer(help="Usage-based hosting cost calculator.")
session_app = typer.Typer(help="Inspect and edit the saved calculator session.")
app.add_typer(session_app, name="session")
console = Console()

EXIT_CODE_OK = 0
EXIT_CODE_FAIL = 1

DB_OPTION_HELP = f"SQLite file holding session state (env: {DB_PATH_ENV_VAR})"


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Hosting Cost Calculator CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if ctx.invoked_subcommand is None:
        console.print("Hosting Cost Calculator - Use --help to see available commands")


@app.command()
def providers():
    """List supported providers and their plans."""
    table = Table(title="Providers")
    table.add_column("Provider")
    table.add_column("Plans")
    table.add_column("Per-seat")
    for key, config in PROVIDERS.items():
        table.add_row(
            f"{config.name} ({key})",
            ", ".join(config.plans),
            "yes" if config.supports_team else "no",
        )
    console.print(table)


@app.command()
def inputs(
    provider: str = typer.Argument(..., help="Provider name, e.g. cloudflare or vercel"),
    plan: Optional[str] = typer.Option(None, "--plan", "-p", help="Show this plan's preset values"),
):
    """List the usage inputs a provider accepts."""
    config = _get_provider_or_exit(provider)
    values = config.default_inputs
    if plan is not None:
        values = config.preset_for(plan)
        if values is None:
            console.print(f"[red]Error:[/] Unknown plan for {config.name}: {plan}")
            sys.exit(EXIT_CODE_FAIL)

    table = Table(title=f"{config.name} inputs")
    table.add_column("Key")
    table.add_column("Label")
    table.add_column("Group")
    table.add_column("Value", justify="right")
    table.add_column("Unit")
    for f in config.fields:
        table.add_row(f.key, f.label, f.group, _format_amount(values.get(f.key)), f.unit)
    console.print(table)


@app.command()
def estimate(
    provider: str = typer.Argument(..., help="Provider name, e.g. cloudflare or vercel"),
    plan: Optional[str] = typer.Option(None, "--plan", "-p", help="Plan to price against"),
    team_members: Optional[int] = typer.Option(
        None, "--team-members", "-t", min=1, help="Number of seats for per-seat plans"
    ),
    overrides: Optional[List[str]] = typer.Option(
        None, "--set", "-s", help="Override an input as key=value (repeatable)"
    ),
    scenario: Optional[str] = typer.Option(
        None, "--scenario", help="YAML scenario file; --plan, --team-members and --set override it"
    ),
    all_lines: bool = typer.Option(False, "--all-lines", "-a", help="Show zero-value breakdown lines"),
):
    """
    Estimate the monthly cost for one set of usage inputs.

    Starts from the plan's preset inputs (or a scenario file) and applies
    any --set overrides. Nothing is saved.
    """
    try:
        if scenario is not None:
            loaded = load_scenario(scenario)
            if loaded.provider is not get_provider(provider):
                raise ValueError(
                    f"Scenario is for {loaded.provider.name}, not {provider}"
                )
        else:
            loaded = parse_scenario({"provider": provider})

        config = loaded.provider
        base_plan = loaded.plan
        base_inputs = dict(loaded.inputs)
        if plan is not None and plan != base_plan:
            preset = config.preset_for(plan)
            if preset is None:
                raise ValueError(f"Unknown plan for {config.name}: {plan}")
            base_plan = plan
            base_inputs = preset
        base_inputs.update(_parse_overrides(config, overrides or []))

        final = Scenario(
            provider=config,
            plan=base_plan,
            team_members=team_members if team_members is not None else loaded.team_members,
            inputs=base_inputs,
        )
        _display_cost(config, final.plan, final.team_members, final.calculate(), all_lines)
    except Exception as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)


@app.command()
def init(
    db: Optional[str] = typer.Option(None, "--db", envvar=DB_PATH_ENV_VAR, help=DB_OPTION_HELP),
):
    """Initialize the session database."""
    try:
        store = get_store(db)
        store.initialize_schema()
        console.print(f"[green]✓[/] Database initialized at {store.db_path}")
        sys.exit(EXIT_CODE_OK)
    except Exception as e:
        console.print(f"[red]Error initializing database:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)


@session_app.command("show")
def session_show(
    provider: str = typer.Argument(..., help="Provider name"),
    db: Optional[str] = typer.Option(None, "--db", envvar=DB_PATH_ENV_VAR, help=DB_OPTION_HELP),
    all_lines: bool = typer.Option(False, "--all-lines", "-a", help="Show zero-value breakdown lines"),
):
    """Show the saved session and its cost."""
    controller = _open_session(provider, db)
    _display_session(controller, all_lines)


@session_app.command("set")
def session_set(
    provider: str = typer.Argument(..., help="Provider name"),
    assignments: List[str] = typer.Argument(..., help="Inputs to change as key=value"),
    db: Optional[str] = typer.Option(None, "--db", envvar=DB_PATH_ENV_VAR, help=DB_OPTION_HELP),
    all_lines: bool = typer.Option(False, "--all-lines", "-a", help="Show zero-value breakdown lines"),
):
    """Change saved inputs."""
    controller = _open_session(provider, db)
    try:
        changes = _parse_overrides(controller.config, assignments)
    except ValueError as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)
    controller.set_inputs(lambda previous: {**previous, **changes})
    _display_session(controller, all_lines)


@session_app.command("plan")
def session_plan(
    provider: str = typer.Argument(..., help="Provider name"),
    plan: str = typer.Argument(..., help="Plan to switch to"),
    db: Optional[str] = typer.Option(None, "--db", envvar=DB_PATH_ENV_VAR, help=DB_OPTION_HELP),
    all_lines: bool = typer.Option(False, "--all-lines", "-a", help="Show zero-value breakdown lines"),
):
    """
    Switch the saved plan.

    The plan's preset inputs replace any previously entered values.
    """
    controller = _open_session(provider, db)
    if plan not in controller.config.plan_presets:
        console.print(f"[red]Error:[/] Unknown plan for {controller.config.name}: {plan}")
        sys.exit(EXIT_CODE_FAIL)
    controller.set_plan(plan)
    _display_session(controller, all_lines)


@session_app.command("team")
def session_team(
    provider: str = typer.Argument(..., help="Provider name"),
    members: int = typer.Argument(..., min=1, help="Number of seats"),
    db: Optional[str] = typer.Option(None, "--db", envvar=DB_PATH_ENV_VAR, help=DB_OPTION_HELP),
    all_lines: bool = typer.Option(False, "--all-lines", "-a", help="Show zero-value breakdown lines"),
):
    """Change the saved team size."""
    controller = _open_session(provider, db)
    if not controller.config.supports_team:
        console.print(f"[red]Error:[/] {controller.config.name} does not bill per seat")
        sys.exit(EXIT_CODE_FAIL)
    controller.set_team_members(members)
    _display_session(controller, all_lines)


@session_app.command("reset")
def session_reset(
    provider: str = typer.Argument(..., help="Provider name"),
    db: Optional[str] = typer.Option(None, "--db", envvar=DB_PATH_ENV_VAR, help=DB_OPTION_HELP),
):
    """Restore default inputs and plan; the team size is kept."""
    controller = _open_session(provider, db)
    controller.reset()
    controller.persist()
    console.print(f"[green]✓[/] {controller.config.name} session reset")
    _display_session(controller, all_lines=False)


@session_app.command("clear")
def session_clear(
    provider: Optional[str] = typer.Argument(None, help="Provider name; omit with --all"),
    all_providers: bool = typer.Option(False, "--all", help="Remove every saved value"),
    db: Optional[str] = typer.Option(None, "--db", envvar=DB_PATH_ENV_VAR, help=DB_OPTION_HELP),
):
    """
    Delete saved session values.

    Unlike reset, nothing is written back; the next session starts from
    the provider's defaults.
    """
    if all_providers == (provider is not None):
        console.print("[red]Error:[/] Give a provider or --all, not both")
        sys.exit(EXIT_CODE_FAIL)

    store = get_store(db)
    if all_providers:
        keys = store.keys()
        label = "all providers"
    else:
        config = _get_provider_or_exit(provider)
        keys = config.persistence_keys.names()
        label = config.name

    removed = sum(1 for key in keys if store.delete(key))
    console.print(f"[green]✓[/] Cleared {removed} saved value(s) for {label}")


def _get_provider_or_exit(name: str) -> ProviderConfig:
    try:
        return get_provider(name)
    except ValueError as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)


def _open_session(provider: str, db: Optional[str]) -> SessionController:
    config = _get_provider_or_exit(provider)
    return SessionController(config, get_store(db))


def _parse_overrides(config: ProviderConfig, assignments: List[str]) -> UsageInputs:
    """Parse key=value strings into input values.

    Raises:
        ValueError: If an assignment is malformed, unknown or non-numeric
    """
    values: UsageInputs = {}
    for assignment in assignments:
        key, sep, raw = assignment.partition("=")
        key, raw = key.strip(), raw.strip()
        if not sep or not key:
            raise ValueError(f"Expected key=value, got '{assignment}'")
        field = config.get_field(key)
        if raw == "" and field.optional:
            values[key] = None
            continue
        values[key] = _parse_number(key, raw)
    return values


def _parse_number(key: str, raw: str) -> float:
    cleaned = raw.replace("_", "").replace(",", "")
    try:
        number = int(cleaned)
    except ValueError:
        try:
            number = float(cleaned)
        except ValueError:
            raise ValueError(f"Input '{key}' must be a number, got '{raw}'")
    if not math.isfinite(number):
        raise ValueError(f"Input '{key}' must be a finite number, got '{raw}'")
    if number < 0:
        raise ValueError(f"Input '{key}' must be >= 0")
    return number


def _format_currency(amount: float) -> str:
    """Format currency with proper symbols and formatting."""
    return f"${abs(amount):,.2f}"


def _format_amount(value: Optional[float]) -> str:
    if value is None:
        return "-"
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,}"


def _format_included(included: Optional[object]) -> str:
    if included is None:
        return ""
    if isinstance(included, (int, float)):
        return _format_amount(included)
    return str(included)


def _display_session(controller: SessionController, all_lines: bool) -> None:
    _display_cost(
        controller.config,
        controller.plan,
        controller.team_members,
        controller.cost,
        all_lines,
    )


def _display_cost(
    config: ProviderConfig,
    plan: str,
    team_members: int,
    result: CostResult,
    all_lines: bool = False,
) -> None:
    """Display a cost result as a summary and breakdown table."""
    heading = f"{config.name} - {plan}"
    if config.supports_team:
        heading += f" ({team_members} seat{'s' if team_members != 1 else ''})"
    console.print(f"\n[bold]{heading}[/bold]")
    console.print("-" * 40)
    console.print(f"Base:    {_format_currency(result.base_price)}")
    console.print(f"Usage:   {_format_currency(result.usage_charges)}")
    if result.credits_applied > 0:
        console.print(f"Credits: -{_format_currency(result.credits_applied)}")
    console.print(f"[bold]Total:   {_format_currency(result.total)}/mo[/bold]")

    lines = result.breakdown if all_lines else result.visible_lines()
    if not lines:
        console.print("\n[dim]No charges.[/]")
        return

    table = Table(title="Breakdown")
    table.add_column("Category")
    table.add_column("Item")
    table.add_column("Included", justify="right")
    table.add_column("Cost", justify="right")
    for item in lines:
        cost = _format_currency(item.value)
        if item.value < 0:
            cost = f"-{cost}"
        table.add_row(item.category, item.label, _format_included(item.included), cost)
    console.print(table)


if __name__ == "__main__":
    app()
