"""Output helpers for the finance calculator.

This module renders results as plain text tables. Amounts are printed as
bare numbers with two decimals; currency symbols and locale formatting are
left to whatever presents the figures to a user.
"""

from __future__ import annotations

from typing import Optional

from .allocation import concept_percentages
from .data_models import (
    AllocationSummary,
    Category,
    DebtProgress,
    ExtraPaymentComparison,
    PerformanceSnapshot,
    PortfolioSummary,
)


def print_payoff(comparison: ExtraPaymentComparison, extra_per_month: float,
                 progress: Optional[DebtProgress] = None) -> None:
    """Print the baseline and accelerated payoff projections."""
    print("Payoff")
    print("-" * 72)
    if progress is not None:
        print(f"Remaining          : {progress.remaining:.2f}")
        print(f"Paid               : {progress.paid:.2f} ({progress.percent_paid}%)")
    baseline = comparison.baseline
    if baseline is None:
        print("Baseline           : cannot estimate payoff")
    else:
        print(f"Baseline months    : {baseline.months} ({baseline.years:.1f} years)")
        print(f"Baseline interest  : {baseline.total_interest:.2f}")
    accelerated = comparison.accelerated
    if extra_per_month:
        if accelerated is None:
            print(f"With {extra_per_month:.2f}/month : cannot estimate payoff")
        else:
            print(f"Extra per month    : {extra_per_month:.2f}")
            print(f"Months             : {accelerated.months} ({accelerated.years:.1f} years)")
            print(f"Interest           : {accelerated.total_interest:.2f}")
        if comparison.interest_saved is not None and comparison.interest_saved > 0:
            print(f"Interest saved     : {comparison.interest_saved:.2f}")
        if comparison.months_saved:
            print(f"Term reduction     : {comparison.months_saved} months")
    print("-" * 72)


def print_allocation(summary: AllocationSummary) -> None:
    """Print category totals and each concept as a share of income."""
    print("Allocation")
    print("=" * 72)
    print(f"Income             : {summary.income:.2f}")
    print(f"{'Concept':30s} {'Amount':>15s} {'% income':>10s}")
    for category in Category:
        bucket = summary.by_category(category)
        print(f"{bucket.category.value.upper():30s} {bucket.total:15.2f} {bucket.percent_of_income:9.1f}%")
        shares = concept_percentages(summary.income, bucket.concepts)
        for concept in bucket.concepts:
            print(f"  {concept.name[:28]:28s} {concept.amount:15.2f} {shares[concept.id]:9.1f}%")
    print("-" * 72)
    print(f"Allocated          : {summary.allocated:.2f} ({summary.allocated_percent:.1f}%)")
    print(f"Remaining          : {summary.remaining:.2f}")
    if summary.remaining < 0:
        print("Over-allocated: the plan exceeds the income.")
    print("=" * 72)


def print_performance(result: PerformanceSnapshot) -> None:
    print("Performance")
    print("-" * 72)
    print(f"Invested           : {result.invested:.2f}")
    print(f"Current value      : {result.current_value:.2f}")
    print(f"P&L                : {result.pnl:.2f} ({result.pnl_pct:.2f}%)")
    chart = result.chart
    if chart is None:
        print(f"Range {result.range.value:4s}         : not enough data")
    else:
        print(f"Range {result.range.value:4s}         : {chart.range_delta:.2f} ({chart.range_delta_pct:.2f}%)")
        print(f"Last change        : {chart.last_delta:.2f} ({chart.last_delta_pct:.2f}%)")
        print(f"Max / Min          : {chart.max_value:.2f} / {chart.min_value:.2f}")
        print(f"Points             : {len(chart.points)}")
    print("-" * 72)


def print_portfolio(summary: PortfolioSummary) -> None:
    print("Portfolio")
    print("=" * 72)
    print(f"{'Asset':24s} {'Invested':>12s} {'Value':>12s} {'P&L':>12s} {'Share':>8s}")
    for asset in summary.assets:
        print(
            f"{asset.name[:24]:24s} {asset.invested:12.2f} {asset.current_value:12.2f} "
            f"{asset.pnl:12.2f} {asset.share * 100:7.1f}%"
        )
    print("-" * 72)
    print(f"Total invested     : {summary.total_invested:.2f}")
    print(f"Total value        : {summary.total_current_value:.2f}")
    print(f"Total P&L          : {summary.total_pnl:.2f} ({summary.pnl_pct:.2f}%)")
    print("=" * 72)
