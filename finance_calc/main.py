"""Command‑line interface for the finance calculator.

This module uses the ``click`` library to expose the engines as a
multi‑command interface. Debts are described with options; allocation plans,
valuation series and portfolios are read from JSON files holding the records
a storage layer would hand over. Results are printed to the terminal or
exported to JSON.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import click

from .allocation import aggregate
from .amortization import compare_extra_payment, debt_progress
from .config import DEFAULT_CANVAS, ChartCanvas
from .data_models import RangeKey
from .errors import FinanceCalcError
from .formatter import print_allocation, print_payoff, print_performance, print_portfolio
from .performance import performance as compute_performance
from .performance import portfolio_summary
from .utils import (
    concepts_from_dicts,
    parse_amount,
    parse_datetime,
    positions_from_dicts,
    require_number,
    series_from_dicts,
    to_jsonable,
)

logger = logging.getLogger(__name__)


def _amount(value: Optional[str], name: str) -> Optional[float]:
    if value is None:
        return None
    try:
        return parse_amount(value)
    except FinanceCalcError as exc:
        raise click.BadParameter(str(exc), param_hint=name)


def _load_json(path: str) -> Any:
    try:
        with Path(path).open("r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"{path} is not valid JSON: {exc}")


def _export(path: Path, key: str, result: Any) -> None:
    if path.suffix.lower() != ".json":
        raise click.BadParameter("Export must use .json extension", param_hint="--output")
    with path.open("w", encoding="utf-8") as f:
        json.dump({key: to_jsonable(result)}, f, indent=2)
    click.echo(f"Result exported to {path}")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log debug details to stderr")
def cli(verbose: bool) -> None:
    """Personal finance calculator: debt payoff, income allocation and investment performance."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("--principal", "-p", "principal", required=True, help="Remaining balance")
@click.option("--rate", "-r", "rate", required=True, type=float, help="Annual interest rate (percent, TIN)")
@click.option("--payment", "payment", required=True, help="Monthly installment")
@click.option("--extra", "extra", default="0", show_default=True, help="Extra amount paid every month")
@click.option("--total", "total", help="Original debt amount, to report progress")
@click.option("--paid", "paid", help="Amount already repaid, if recorded")
@click.option("--output", "output", type=str, help="Output file path (.json)")
def payoff(
    principal: str,
    rate: float,
    payment: str,
    extra: str,
    total: Optional[str],
    paid: Optional[str],
    output: Optional[str],
) -> None:
    """Estimate the payoff time and the interest saved by paying extra."""
    principal_value = _amount(principal, "--principal")
    payment_value = _amount(payment, "--payment")
    extra_value = _amount(extra, "--extra")
    comparison = compare_extra_payment(principal_value, rate, payment_value, extra_value)
    progress = None
    if total is not None:
        progress = debt_progress(_amount(total, "--total"), principal_value, _amount(paid, "--paid"))
    if output:
        _export(Path(output), "payoff", {"comparison": comparison, "progress": progress})
    else:
        print_payoff(comparison, extra_value, progress)


@cli.command()
@click.option("--input", "input_path", required=True, type=click.Path(exists=True, dir_okay=False),
              help="JSON file with an allocation plan ({'income': ..., 'items': [...]}) or a list of concepts")
@click.option("--income", "income", help="Monthly income; overrides the plan's income")
@click.option("--output", "output", type=str, help="Output file path (.json)")
def allocate(input_path: str, income: Optional[str], output: Optional[str]) -> None:
    """Summarize how an allocation plan splits the monthly income."""
    data = _load_json(input_path)
    plan: Dict[str, Any] = data if isinstance(data, dict) else {"items": data}
    try:
        concepts = concepts_from_dicts(plan.get("items", []))
        income_value = _amount(income, "--income") if income is not None else require_number(
            plan.get("income", 0), "income"
        )
        summary = aggregate(income_value, concepts)
    except FinanceCalcError as exc:
        raise click.ClickException(str(exc))
    if output:
        _export(Path(output), "allocation", summary)
    else:
        print_allocation(summary)


@cli.command()
@click.option("--input", "input_path", required=True, type=click.Path(exists=True, dir_okay=False),
              help="JSON file with {'invested': ..., 'currentValue': ..., 'series': [...]}")
@click.option("--range", "range_key", type=click.Choice([k.value for k in RangeKey]), default="3m",
              show_default=True, help="Look-back window")
@click.option("--now", "now", help="End of the window (ISO date); defaults to the current time")
@click.option("--width", type=float, default=DEFAULT_CANVAS.width, envvar="FINANCE_CALC_CHART_WIDTH",
              show_default=True, help="Chart canvas width")
@click.option("--height", type=float, default=DEFAULT_CANVAS.height, envvar="FINANCE_CALC_CHART_HEIGHT",
              show_default=True, help="Chart canvas height")
@click.option("--pad-x", type=float, default=DEFAULT_CANVAS.pad_x, envvar="FINANCE_CALC_CHART_PAD_X",
              show_default=True, help="Horizontal padding")
@click.option("--pad-y", type=float, default=DEFAULT_CANVAS.pad_y, envvar="FINANCE_CALC_CHART_PAD_Y",
              show_default=True, help="Vertical padding")
@click.option("--output", "output", type=str, help="Output file path (.json)")
def performance(
    input_path: str,
    range_key: str,
    now: Optional[str],
    width: float,
    height: float,
    pad_x: float,
    pad_y: float,
    output: Optional[str],
) -> None:
    """Compute P&L, range deltas and chart geometry for one asset."""
    data = _load_json(input_path)
    if not isinstance(data, dict):
        raise click.ClickException("Performance input must be a JSON object")
    canvas = ChartCanvas(width=width, height=height, pad_x=pad_x, pad_y=pad_y)
    try:
        series = series_from_dicts(data.get("series", []))
        invested = require_number(data.get("invested", 0), "invested")
        current = data.get("currentValue", data.get("current_value"))
        # Without a valuation the asset is still worth what was put in.
        current_value = invested if current is None else require_number(current, "current_value")
        end = parse_datetime(now) if now else None
        result = compute_performance(invested, current_value, series, range_key, now=end, canvas=canvas)
    except FinanceCalcError as exc:
        raise click.ClickException(str(exc))
    logger.debug("Computed performance over %d valuations", len(series))
    if output:
        _export(Path(output), "performance", result)
    else:
        print_performance(result)


@cli.command()
@click.option("--input", "input_path", required=True, type=click.Path(exists=True, dir_okay=False),
              help="JSON file with a list of assets or {'assets': [...]}")
@click.option("--output", "output", type=str, help="Output file path (.json)")
def portfolio(input_path: str, output: Optional[str]) -> None:
    """Summarize a portfolio of investment assets."""
    data = _load_json(input_path)
    records = data.get("assets", []) if isinstance(data, dict) else data
    try:
        summary = portfolio_summary(positions_from_dicts(records))
    except FinanceCalcError as exc:
        raise click.ClickException(str(exc))
    if output:
        _export(Path(output), "portfolio", summary)
    else:
        print_portfolio(summary)


if __name__ == "__main__":
    cli()
