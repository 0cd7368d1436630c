"""CLI for the ``order_analysis`` package.

Exposes a command handler (:func:`cmd_analyze_year`) and a Typer console
interface. Environment variables are loaded from a local ``.env`` with
``python-dotenv`` before any command runs. Analysis logic lives in
``order_analysis.aggregate``.
"""

from __future__ import annotations

import json
import sys
from dataclasses import replace
from datetime import date
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from .aggregate import analyze_year
from .config import Settings, load_settings
from .errors import OrderAnalysisError
from .logging_setup import configure_logging, get_logger, parse_level
from .report import format_report

_logger = get_logger("order_analysis.cli")


def _render_table(formatted: dict, console: Console) -> None:
    table = Table(title=f"Orders in {formatted['year']}", show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    most = formatted["mostExpensive"]
    least = formatted["cheapest"]
    busiest = formatted["monthWithMostOrders"]
    quietest = formatted["monthWithLeastOrders"]

    table.add_row("Total spent", formatted["totalSpent"])
    table.add_row("Orders", str(formatted["numberOfOrders"]))
    table.add_row("Average per order", formatted["averagePerOrder"])
    table.add_row("Most expensive", f"{most['value']} on {most['date']}")
    table.add_row("Cheapest", f"{least['value']} on {least['date']}")
    table.add_row("Average orders per month", formatted["averageOrdersPerMonth"])
    table.add_row("Busiest month", f"{busiest['month']} ({busiest['count']} orders)")
    table.add_row("Quietest month", f"{quietest['month']} ({quietest['count']} orders)")
    table.add_row("Average daily spending", formatted["averageDailySpending"])
    console.print(table)


def cmd_analyze_year(
    token: str | None,
    year: int,
    *,
    as_json: bool = False,
    locale: str | None = None,
    settings: Settings | None = None,
) -> int:
    """Analyze ``year`` for the credential and print the report to stdout.

    ``token`` falls back to ``OA_BEARER_TOKEN``. Errors are written to stderr
    as one line per failure category and the function returns ``1``; the
    technical detail goes to the log. Returns ``0`` on success.
    """

    if settings is None:
        try:
            settings = load_settings()
        except ValueError as e:
            print(f"Error: invalid configuration: {e}", file=sys.stderr)
            return 1

    credential = token if token is not None else settings.bearer_token

    try:
        report = analyze_year(credential, year, settings=settings)
    except OrderAnalysisError as e:
        _logger.error("analysis for %d failed: %s: %s", year, type(e).__name__, e)
        _logger.debug("analysis failure detail", exc_info=True)
        print(f"Error: {e.user_message}", file=sys.stderr)
        return 1

    formatted = format_report(report, locale=locale or settings.locale, tz=settings.timezone)
    if as_json:
        print(json.dumps(formatted, ensure_ascii=False, indent=2))
    else:
        _render_table(formatted, Console())
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Summarize a year of concluded orders from the orders history API. "
        "Loads OA_* settings from a local .env before running."
    ),
)


@app.command("analyze-year")
def analyze_year_cmd(
    ctx: typer.Context,
    token: str | None = typer.Option(
        None, help="Bearer token for the orders API (falls back to OA_BEARER_TOKEN)."
    ),
    year: int | None = typer.Option(None, help="Target calendar year (default: current year)."),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON."),
    locale: str | None = typer.Option(
        None, help="Date locale for the report, e.g. pt-BR or en-US (falls back to OA_LOCALE)."
    ),
) -> None:
    """Fetch the year's orders and print summary statistics."""

    code = cmd_analyze_year(
        token,
        year if year is not None else date.today().year,
        as_json=as_json,
        locale=locale,
        settings=ctx.obj,
    )
    if code:
        raise typer.Exit(code)


@app.callback()
def _root(
    ctx: typer.Context,
    log_level: str | None = typer.Option(
        None, help="Logging level (falls back to OA_LOG_LEVEL, then INFO)."
    ),
) -> None:
    """Root command: load ``.env``, resolve settings and set up logging.

    The resolved :class:`Settings` are handed to subcommands via ``ctx.obj``.
    """

    # override=False keeps already-set environment variables
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    try:
        settings = load_settings()
        if log_level is not None:
            settings = replace(settings, log_level=parse_level(log_level))
    except ValueError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        raise typer.Exit(1) from None

    configure_logging(settings.log_level)
    ctx.obj = settings


if __name__ == "__main__":  # pragma: no cover
    app()
