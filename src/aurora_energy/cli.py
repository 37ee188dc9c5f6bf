"""Command-line interface for electricity billing and usage analytics."""

import json
import logging
from datetime import datetime
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import config
from .analysis import insights, summary, usage
from .models import INDUSTRY_TYPES, Industry, resolve_category
from .readings import parse_csv
from .tariffs import compute_bill, estimate_monthly_bill

console = Console()

SEVERITY_STYLES = {"alert": "red", "warning": "yellow", "success": "green", "info": "blue"}


@click.group()
@click.option("--config", "config_path", type=click.Path(exists=True), help="Path to tariffs.yaml")
@click.option("--verbose", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx, config_path, verbose):
    """Electricity billing and usage analytics."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config_path) if config_path else None


def load_category(ctx, category: str, industry_type: str | None):
    """Resolve the category, attaching configured bands for industry meters."""
    resolved = resolve_category(category, industry_type)
    if isinstance(resolved, Industry) and resolved.industry_type:
        bands = config.load_efficiency_bands(ctx.obj["config_path"]).get(resolved.industry_type)
        resolved = Industry(industry_type=resolved.industry_type, bands=bands)
    return resolved


def load_readings_stats(ctx, csv_path, category, industry_type, at, meter):
    """Shared path for the stats and insights commands."""
    reference = datetime.fromisoformat(at) if at else datetime.now().astimezone()
    resolved = load_category(ctx, category, industry_type)
    readings = parse_csv(Path(csv_path), meter_id=meter)
    return resolved, usage.aggregate(readings, reference, resolved)


def reading_options(f):
    """Options shared by commands that aggregate a CSV history."""
    f = click.option("--meter", help="Only use readings for this meter ID")(f)
    f = click.option("--at", help="Reference instant (ISO 8601), defaults to now")(f)
    f = click.option("--industry-type", type=click.Choice(INDUSTRY_TYPES), help="Industry sub-type")(f)
    f = click.option(
        "--category",
        type=click.Choice(["household", "SME", "industry"], case_sensitive=False),
        default="household",
        help="Subscriber category (default: household)",
    )(f)
    f = click.option("--csv", "csv_path", type=click.Path(exists=True), required=True, help="Reading export CSV")(f)
    return f


@cli.command()
@click.option("--kwh", type=float, help="Monthly consumption in kWh")
@click.option("--daily", type=float, help="Average daily consumption in kWh")
@click.option("--days", default=30, help="Billing days when using --daily (default: 30)")
@click.option("--solar", is_flag=True, help="Solar/self-generated supply (no levies or VAT)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def bill(ctx, kwh, daily, days, solar, as_json):
    """Calculate an itemized electricity bill."""
    if (kwh is None) == (daily is None):
        console.print("[red]Please specify exactly one of --kwh or --daily[/red]")
        ctx.exit(1)

    try:
        schedule = config.load_rate_schedule(ctx.obj["config_path"])
        if kwh is not None:
            breakdown = compute_bill(kwh, schedule, solar)
        else:
            breakdown = estimate_monthly_bill(daily, schedule, days, solar)
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        ctx.exit(1)

    if as_json:
        click.echo(json.dumps(summary.bill_to_dict(breakdown), indent=2))
    else:
        console.print(summary.format_bill_text(breakdown))


@cli.command()
@reading_options
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def stats(ctx, csv_path, category, industry_type, at, meter, as_json):
    """Aggregate a reading history into usage statistics."""
    try:
        _, result = load_readings_stats(ctx, csv_path, category, industry_type, at, meter)
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        ctx.exit(1)

    if as_json:
        click.echo(json.dumps(summary.stats_to_dict(result), indent=2))
        return

    console.print(summary.format_stats_text(result))

    if result.hourly_pattern:
        table = Table(title="Hourly Pattern (average per reading)")
        table.add_column("Hour", style="cyan")
        table.add_column("kWh", justify="right")
        table.add_column("Cost", justify="right")
        for h in result.hourly_pattern:
            table.add_row(f"{h.hour:02d}:00", f"{h.usage_kwh:.2f}", summary.format_kes(h.cost))
        console.print(table)


@cli.command("insights")
@reading_options
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def insights_cmd(ctx, csv_path, category, industry_type, at, meter, as_json):
    """Generate insights from a reading history."""
    try:
        resolved, result = load_readings_stats(ctx, csv_path, category, industry_type, at, meter)
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        ctx.exit(1)

    found = insights.generate(result, resolved)

    if as_json:
        click.echo(json.dumps([summary.insight_to_dict(i) for i in found], indent=2))
        return

    table = Table(title="Energy Insights")
    table.add_column("Severity")
    table.add_column("Insight", style="bold")
    table.add_column("Details")
    for insight in found:
        style = SEVERITY_STYLES[insight.severity]
        details = insight.description
        if insight.recommendation:
            details += f"\n[dim]{insight.recommendation}[/dim]"
        table.add_row(f"[{style}]{insight.severity}[/{style}]", insight.title, details)
    console.print(table)


# Tariff commands
@cli.group()
def tariff():
    """Tariff configuration commands."""
    pass


@tariff.command("show")
@click.pass_context
def tariff_show(ctx):
    """Show the configured rate schedule."""
    try:
        schedule = config.load_rate_schedule(ctx.obj["config_path"])
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        ctx.exit(1)

    table = Table(title="Rate Schedule")
    table.add_column("Component", style="cyan")
    table.add_column("Rate", justify="right")
    table.add_column("In VAT base", justify="center")

    for label, rate, taxed in [
        ("Energy charge", schedule.energy_rate_per_kwh, True),
        ("Fuel levy", schedule.fuel_levy_rate_per_kwh, True),
        ("Forex levy", schedule.forex_levy_rate_per_kwh, True),
        ("Inflation adjustment", schedule.inflation_adjustment_rate_per_kwh, True),
        ("EPRA levy", schedule.epra_levy_rate_per_kwh, False),
        ("WRA levy", schedule.wra_levy_rate_per_kwh, False),
        ("REP levy", schedule.rep_levy_rate_per_kwh, False),
    ]:
        table.add_row(label, f"{summary.format_kes(rate)}/kWh", "[green]✓[/green]" if taxed else "")

    table.add_row("VAT", f"{schedule.vat_rate * 100:g}%", "")
    console.print(table)


if __name__ == "__main__":
    cli()
