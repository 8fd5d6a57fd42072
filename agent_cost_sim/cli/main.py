"""
CLI interface for Agent Cost Simulator.

Builds a configuration from a scenario file and command-line overrides,
runs the cost engine and renders the results.
"""

import json
import logging
import sys
from dataclasses import asdict
from typing import List, Optional

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from agent_cost_sim.config.loader import (
    Scenario,
    load_pricing_catalog,
    load_scenario,
    parse_scale_factors,
)
from agent_cost_sim.core.engine import CostBreakdown, compute
from agent_cost_sim.core.pricing import DEFAULT_CATALOG, PricingCatalog, UnknownModel
from agent_cost_sim.core.projection import ProjectionPoint, project
from agent_cost_sim.utils.logging import setup_logging

app = typer.Typer()
console = Console()
logger = logging.getLogger(__name__)

EXIT_CODE_PASS = 0
EXIT_CODE_FAIL = 1

COMPONENT_LABELS = {
    "main_model": "LLM Model",
    "background_model": "Background Agent",
    "embeddings": "Vector Embeddings",
    "search_grounding": "Search Grounding",
    "compute": "Compute",
    "evaluation": "Evaluation",
    "registry_storage": "Artifact Registry",
    "db_storage": "Database Storage",
    "network_egress": "Network Egress",
}


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")
):
    """Agent Cost Simulator CLI."""
    setup_logging("DEBUG" if verbose else None)
    if ctx.invoked_subcommand is None:
        console.print("Agent Cost Simulator - Use --help to see available commands")


def _load_catalog(pricing: Optional[str]) -> PricingCatalog:
    if pricing is None:
        return DEFAULT_CATALOG
    return load_pricing_catalog(pricing)


def _load_scenario(config: Optional[str]) -> Scenario:
    if config is None:
        return Scenario()
    return load_scenario(config)


def _fail(message: str) -> None:
    console.print(f"[red]Error:[/] {escape(message)}")
    sys.exit(EXIT_CODE_FAIL)


@app.command()
def models(
    pricing: Optional[str] = typer.Option(
        None, "--pricing", "-p", help="YAML pricing file to use instead of built-in prices"
    )
):
    """List the models in the pricing catalog."""
    try:
        catalog = _load_catalog(pricing)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        _fail(str(e))

    table = Table(title="Pricing Catalog")
    table.add_column("Model")
    table.add_column("Label")
    table.add_column("Input $/1M", justify="right")
    table.add_column("Output $/1M", justify="right")
    table.add_column("Free grounding", justify="center")
    for model_id in catalog.model_ids():
        entry = catalog.lookup(model_id)
        table.add_row(
            entry.model_id,
            entry.display_label,
            f"{entry.input_price_per_million:,.2f}",
            f"{entry.output_price_per_million:,.2f}",
            "yes" if entry.search_grounding_free_tier else "no",
        )
    console.print(table)


@app.command()
def estimate(
    config: Optional[str] = typer.Option(
        None, "--config", "-c", help="YAML scenario file"
    ),
    pricing: Optional[str] = typer.Option(
        None, "--pricing", "-p", help="YAML pricing file to use instead of built-in prices"
    ),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Override the model id"),
    users: Optional[int] = typer.Option(None, "--users", "-u", help="Override active users"),
    traces: Optional[int] = typer.Option(
        None, "--traces", "-t", help="Override traces per user per day"
    ),
    days: Optional[int] = typer.Option(None, "--days", "-d", help="Override active days per month"),
    tokens: Optional[float] = typer.Option(None, "--tokens", help="Override tokens per trace"),
    budget: Optional[float] = typer.Option(
        None, "--budget", "-b", help="Monthly budget to check the estimate against"
    ),
    enforced: bool = typer.Option(
        False, "--enforced", "-e", help="Exit with error code if the estimate exceeds the budget"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the breakdown as JSON"),
):
    """
    Estimate the monthly cost of an agent configuration.

    Values from the scenario file are used first, then any overrides given
    on the command line.
    """
    try:
        catalog = _load_catalog(pricing)
        scenario = _load_scenario(config)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        _fail(str(e))

    overrides = {
        "model_id": model,
        "active_users": users,
        "traces_per_user_per_day": traces,
        "active_days_per_month": days,
        "tokens_per_trace": tokens,
    }
    configuration = scenario.configuration.with_changes(
        **{name: value for name, value in overrides.items() if value is not None}
    )
    logger.debug("Estimating %s", configuration)

    try:
        breakdown = compute(configuration, catalog)
    except UnknownModel as e:
        _fail(f"{e}. Run 'models' to list available models.")

    over_budget = budget is not None and breakdown.total_monthly_cost > budget

    if as_json:
        payload = asdict(breakdown)
        payload["model_cost"] = breakdown.model_cost
        payload["infra_total"] = breakdown.infra_total
        payload["configuration"] = configuration.as_dict()
        typer.echo(json.dumps(payload, indent=2))
    else:
        _display_breakdown(breakdown, configuration.model_id)
        if budget is not None:
            verdict = "FAIL" if over_budget else "PASS"
            color = "red" if over_budget else "green"
            console.print(
                f"\n[bold]Verdict:[/bold] [{color}]{verdict}[/] "
                f"({_format_currency(breakdown.total_monthly_cost)} against a "
                f"{_format_currency(budget)} monthly budget)"
            )

    if enforced and over_budget:
        sys.exit(EXIT_CODE_FAIL)
    sys.exit(EXIT_CODE_PASS)


@app.command(name="project")
def project_command(
    config: Optional[str] = typer.Option(
        None, "--config", "-c", help="YAML scenario file"
    ),
    pricing: Optional[str] = typer.Option(
        None, "--pricing", "-p", help="YAML pricing file to use instead of built-in prices"
    ),
    factors: Optional[str] = typer.Option(
        None, "--factors", "-f", help="Comma-separated user multipliers, e.g. 1,2,5,10"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the projection as JSON"),
):
    """Project monthly cost as the user base grows."""
    try:
        catalog = _load_catalog(pricing)
        scenario = _load_scenario(config)
        scale_factors = scenario.scale_factors
        if factors is not None:
            scale_factors = parse_scale_factors(_split_factors(factors))
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        _fail(str(e))

    try:
        points = project(
            scenario.configuration,
            catalog,
            scale_factors,
            scenario.scaling_rules,
        )
    except UnknownModel as e:
        _fail(f"{e}. Run 'models' to list available models.")

    if as_json:
        typer.echo(json.dumps([asdict(point) for point in points], indent=2))
    else:
        _display_projection(points)
    sys.exit(EXIT_CODE_PASS)


def _split_factors(factors: str) -> List[int]:
    try:
        return [int(part) for part in factors.split(",") if part.strip()]
    except ValueError:
        raise ValueError(f"Scale factors must be comma-separated integers, got {factors!r}")


def _format_currency(amount: float) -> str:
    """Format currency with proper symbols and formatting."""
    return f"${abs(amount):,.2f}"


def _display_breakdown(breakdown: CostBreakdown, model_id: str):
    """Display the breakdown in a clean, financial format."""
    console.print("\n[bold]Monthly Cost Estimate[/bold]")
    console.print("-" * 40)
    console.print(f"Model: {model_id}")
    console.print(f"Traces per month: {breakdown.traces_per_month:,.0f}")
    console.print(f"Total monthly cost: {_format_currency(breakdown.total_monthly_cost)}")
    console.print(f"Cost per user: {_format_currency(breakdown.cost_per_user)}")
    console.print(f"Cost per 1k traces: {_format_currency(breakdown.cost_per_thousand_traces)}")
    console.print(f"LLM share: {breakdown.share_of_total(breakdown.model_cost):.0f}%")

    table = Table(title="Detailed Breakdown")
    table.add_column("Component")
    table.add_column("Monthly", justify="right")
    table.add_column("Share", justify="right")
    for name, amount in breakdown.components().items():
        table.add_row(
            COMPONENT_LABELS[name],
            _format_currency(amount),
            f"{breakdown.share_of_total(amount):.1f}%",
        )
    console.print(table)


def _display_projection(points: List[ProjectionPoint]):
    table = Table(title="Growth Projection")
    table.add_column("Scale", justify="right")
    table.add_column("Users", justify="right")
    table.add_column("Monthly", justify="right")
    for point in points:
        table.add_row(
            f"{point.scale_factor}x",
            f"{point.scaled_users:,}",
            _format_currency(point.projected_total_cost),
        )
    console.print(table)

    if points:
        first = points[0]
        label = "Current" if first.scale_factor == 1 else f"{first.scale_factor}x scale"
        console.print(f"{label}: {_format_currency(first.projected_total_cost)}")
        console.print(
            f"{points[-1].scale_factor}x scale: "
            f"{_format_currency(points[-1].projected_total_cost)}"
        )


if __name__ == "__main__":
    app()
