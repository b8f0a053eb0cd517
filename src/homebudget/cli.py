"""Command line interface for HomeBudget."""

from __future__ import annotations

import json
from datetime import date
from typing import Optional

import click

from .config import DevConfig
from .context import AppContext, create_app_context
from .logging_config import get_logger, setup_logging
from .services.annotate import AnnotatedSummary, to_payload
from .services.methodology import METHODOLOGIES, MethodologyCategory, preset_for

logger = get_logger("cli")


def format_cents(cents: int) -> str:
    sign = "-" if cents < 0 else ""
    return f"{sign}${abs(cents) / 100:,.2f}"


def _context(ctx: click.Context) -> AppContext:
    if ctx.obj is None:
        config = DevConfig()
        setup_logging(config)
        ctx.obj = create_app_context(config)
    return ctx.obj


def _echo_summary(annotated: AnnotatedSummary) -> None:
    summary = annotated.summary
    click.echo(summary.period.label)
    click.echo(f"  Income:        {format_cents(summary.income)}")
    click.echo(f"  Carryover:     {format_cents(summary.carryover)}")
    click.echo(f"  Budgeted:      {format_cents(summary.budgeted)}")
    click.echo(f"  Spent:         {format_cents(summary.spent)}")
    click.echo(f"  To be budgeted: {format_cents(summary.tbb)}")
    if summary.expected_income:
        click.echo(f"  Expected (not yet received): {format_cents(summary.expected_income)}")
    click.echo("")
    for item in annotated.rows:
        row = item.row
        if row.is_hidden:
            continue
        label = f"{item.icon} {item.display_name}" if item.icon else item.display_name
        if row.parent_category:
            label = f"{label} ({row.parent_category})"
        click.echo(
            f"  {label:<44} budgeted {format_cents(row.budgeted):>12}"
            f"  spent {format_cents(row.spent):>12}  available {format_cents(row.available):>12}"
        )
    if summary.methodology_sections:
        click.echo("")
        for section in summary.methodology_sections:
            target = f" of {format_cents(section.target)}" if section.percentage else ""
            click.echo(f"  [{section.name}] budgeted {format_cents(section.budgeted)}{target}")


def _echo_categories(categories: list[MethodologyCategory]) -> None:
    for category in categories:
        pct = f" {category.percentage:g}%" if category.percentage is not None else ""
        click.echo(f"{category.name}{pct}: {', '.join(category.underlying_categories)}")


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Household budget summaries."""


@cli.command("init-db")
@click.option("--seed/--no-seed", default=True, help="Insert the bundled category mappings")
@click.pass_context
def init_db(ctx: click.Context, seed: bool) -> None:
    """Create database tables."""

    app = _context(ctx)
    click.echo(f"Database ready: {app.config.DATABASE_URL}")
    if seed:
        added = app.ledger_repo.seed_default_mappings()
        click.echo(f"Category mappings added: {added}")


@cli.command("summary")
@click.option("--budget-id", required=True, help="Budget to summarize")
@click.option("--user-id", required=True, help="Viewing user")
@click.option(
    "--date",
    "anchor",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Any date within the period (defaults to today)",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print JSON instead of a table")
@click.pass_context
def summary(ctx: click.Context, budget_id: str, user_id: str, anchor, as_json: bool) -> None:
    """Print the budget summary for one period."""

    app = _context(ctx)
    day = anchor.date() if anchor else date.today()
    try:
        annotated = app.loader.summarize(budget_id, day, user_id)
    except ValueError as exc:
        logger.warning("Summary failed: %s", exc, extra={"budget_id": budget_id})
        raise click.ClickException(str(exc)) from exc
    if as_json:
        click.echo(json.dumps(to_payload(annotated), indent=2, ensure_ascii=False))
    else:
        _echo_summary(annotated)


@cli.command("carry-forward")
@click.option("--budget-id", required=True)
@click.option("--user-id", required=True)
@click.option("--date", "anchor", type=click.DateTime(formats=["%Y-%m-%d"]), required=True)
@click.pass_context
def carry_forward(ctx: click.Context, budget_id: str, user_id: str, anchor) -> None:
    """Roll the leftover of a month's last period into the next month."""

    app = _context(ctx)
    try:
        amount = app.loader.carry_forward(budget_id, anchor.date(), user_id)
    except ValueError as exc:
        logger.warning("Carry forward failed: %s", exc, extra={"budget_id": budget_id})
        raise click.ClickException(str(exc)) from exc
    if amount is None:
        click.echo("Carryover is disabled for this budget.")
    else:
        click.echo(f"Carried forward {format_cents(amount)}")


@cli.command("methodology")
@click.argument("name", type=click.Choice(METHODOLOGIES))
@click.option("--partnership-id", default=None, help="Show the partnership's customized grouping")
@click.option("--user-id", default=None)
@click.option("--reset", is_flag=True, default=False, help="Delete the stored customization")
@click.pass_context
def methodology(
    ctx: click.Context, name: str, partnership_id: Optional[str], user_id: Optional[str], reset: bool
) -> None:
    """Show a methodology preset, or a partnership's merged version of it."""

    if partnership_id is None:
        if reset:
            raise click.UsageError("--reset requires --partnership-id")
        _echo_categories(preset_for(name))
        return

    app = _context(ctx)
    if reset:
        _echo_categories(app.customizations.reset(partnership_id, name, user_id))
        return
    view = app.customizations.read(partnership_id, name, user_id)
    if view.customization is None:
        click.echo("(no customization stored; showing preset)")
    _echo_categories(view.merged)


def main() -> None:  # pragma: no cover
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
