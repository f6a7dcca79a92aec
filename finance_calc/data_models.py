"""Data models for the finance calculator.

This module defines the records exchanged with the three computation
engines: the debt amortization simulator, the income allocation aggregator
and the investment performance engine. Every record is a frozen dataclass so
that results can be shared freely between callers and compared for
equality in tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from .errors import InvalidCategoryError, InvalidRangeError


class Category(str, Enum):
    """Bucket an allocation concept belongs to."""

    EXPENSE = "expense"
    INVESTMENT = "investment"
    SAVINGS = "savings"

    @classmethod
    def parse(cls, value: object) -> "Category":
        """Return the category for ``value`` or raise ``InvalidCategoryError``.

        No coercion is applied: legacy or misspelled tags are rejected.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidCategoryError(value) from None


class RangeKey(str, Enum):
    """Trailing look-back window applied to a valuation series."""

    ONE_MONTH = "1m"
    THREE_MONTHS = "3m"
    SIX_MONTHS = "6m"
    ONE_YEAR = "1y"
    ALL = "all"

    @classmethod
    def parse(cls, value: object) -> "RangeKey":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidRangeError(value) from None


@dataclass(frozen=True)
class LoanState:
    """Outstanding debt to project.

    Attributes
    ----------
    principal: float
        Remaining balance.
    annual_rate_percent: float
        Nominal annual interest rate (TIN) in percent, e.g. ``5`` for 5 %.
    monthly_payment: float
        Baseline installment.
    extra_per_month: float
        Additional amount paid every month on top of the installment.
    """

    principal: float
    annual_rate_percent: float
    monthly_payment: float
    extra_per_month: float = 0.0


@dataclass(frozen=True)
class AmortizationResult:
    months: int
    years: float
    total_interest: float


@dataclass(frozen=True)
class ExtraPaymentComparison:
    """Baseline and accelerated payoff projections side by side.

    ``interest_saved`` and ``months_saved`` are only set when both
    projections are feasible.
    """

    baseline: Optional[AmortizationResult]
    accelerated: Optional[AmortizationResult]
    interest_saved: Optional[float]
    months_saved: Optional[int]


@dataclass(frozen=True)
class DebtProgress:
    total: float
    remaining: float
    paid: float
    percent_paid: int


@dataclass(frozen=True)
class AllocationConcept:
    """A budgeted line of an allocation plan (rent, index fund, emergency pot...)."""

    id: int
    category: Category
    name: str
    amount: float
    order: int = 0


@dataclass(frozen=True)
class CategorySummary:
    category: Category
    total: float
    percent_of_income: float
    concepts: Tuple[AllocationConcept, ...]


@dataclass(frozen=True)
class AllocationSummary:
    """Totals of an allocation plan relative to the monthly income.

    ``remaining`` is negative when the plan allocates more than the income.
    """

    income: float
    expense: CategorySummary
    investment: CategorySummary
    savings: CategorySummary
    allocated: float
    remaining: float
    allocated_percent: float
    allocated_ratio: float

    def by_category(self, category: Category) -> CategorySummary:
        return getattr(self, Category.parse(category).value)


@dataclass(frozen=True)
class SeriesPoint:
    date: datetime
    value: float
    currency: Optional[str] = None


@dataclass(frozen=True)
class ChartPoint:
    x: float
    y: float
    date: datetime
    value: float


@dataclass(frozen=True)
class ChartGeometry:
    """Chart-ready coordinates for a valuation series.

    ``path`` is a polyline through every point and ``area_path`` closes it
    down to the baseline (``height - pad_y``) for an optional fill.
    """

    width: float
    height: float
    pad_x: float
    pad_y: float
    min_value: float
    max_value: float
    points: Tuple[ChartPoint, ...]
    path: str
    area_path: str
    last_delta: float
    last_delta_pct: float
    range_delta: float
    range_delta_pct: float


@dataclass(frozen=True)
class PnL:
    invested: float
    current_value: float
    pnl: float
    pnl_pct: float


@dataclass(frozen=True)
class PerformanceSnapshot:
    invested: float
    current_value: float
    pnl: float
    pnl_pct: float
    range: RangeKey
    chart: Optional[ChartGeometry]
    range_delta: Optional[float]
    range_delta_pct: Optional[float]
    last_delta: Optional[float]
    last_delta_pct: Optional[float]


@dataclass(frozen=True)
class AssetPosition:
    """Latest known figures of one investment asset."""

    id: int
    name: str
    invested: float
    current_value: float


@dataclass(frozen=True)
class AssetSummary:
    id: int
    name: str
    invested: float
    current_value: float
    pnl: float
    pnl_pct: float
    share: float  # fraction of the portfolio's current value, 0..1


@dataclass(frozen=True)
class PortfolioSummary:
    total_invested: float
    total_current_value: float
    total_pnl: float
    pnl_pct: float
    assets: Tuple[AssetSummary, ...]
