"""Income allocation summary.

An allocation plan splits a monthly income into expense, investment and
savings concepts. ``aggregate`` recomputes the whole summary from the full
list of concepts each time it is called; it keeps no state between calls,
so callers simply re-run it after any concept or income change.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from .data_models import AllocationConcept, AllocationSummary, Category, CategorySummary
from .utils import require_number


def percent_of(part: float, base: float) -> float:
    """Return ``part`` as a percentage of ``base``; 0 when ``base`` is zero."""
    if not base:
        return 0.0
    return (part / base) * 100


def percent_of_income(part: float, income: float) -> float:
    """Return ``part`` as a percentage of ``income``.

    A zero or negative income yields 0 rather than an error.
    """
    if income <= 0:
        return 0.0
    return percent_of(part, income)


def allocated_ratio(allocated: float, income: float) -> float:
    """Share of the income already allocated, clamped to 0..1 for a progress bar."""
    if income <= 0:
        return 0.0
    return max(0.0, min(1.0, allocated / income))


def _sort_key(concept: AllocationConcept):
    return (-concept.amount, -concept.id)


def group_concepts(concepts: Iterable[AllocationConcept]) -> Dict[Category, List[AllocationConcept]]:
    """Group concepts by category, largest amount first.

    Ties on amount are broken by the higher ``id`` first. Every category is
    present in the result, possibly with an empty list.
    """
    grouped: Dict[Category, List[AllocationConcept]] = {c: [] for c in Category}
    for concept in concepts:
        category = Category.parse(concept.category)
        require_number(concept.amount, "amount")
        grouped[category].append(concept)
    for category in grouped:
        grouped[category].sort(key=_sort_key)
    return grouped


def _category_summary(
    category: Category, concepts: Sequence[AllocationConcept], income: float
) -> CategorySummary:
    total = 0.0
    for concept in concepts:
        total += require_number(concept.amount, "amount")
    return CategorySummary(
        category=category,
        total=total,
        percent_of_income=percent_of_income(total, income),
        concepts=tuple(concepts),
    )


def aggregate(income: float, concepts: Iterable[AllocationConcept]) -> AllocationSummary:
    """Summarize an allocation plan against ``income``.

    Raises
    ------
    InvalidCategoryError
        If a concept carries a category other than expense, investment or
        savings.
    InvalidRecordError
        If the income or an amount is not numeric.
    """
    income = require_number(income, "income")
    grouped = group_concepts(concepts)

    expense = _category_summary(Category.EXPENSE, grouped[Category.EXPENSE], income)
    investment = _category_summary(Category.INVESTMENT, grouped[Category.INVESTMENT], income)
    savings = _category_summary(Category.SAVINGS, grouped[Category.SAVINGS], income)

    allocated = expense.total + investment.total + savings.total
    return AllocationSummary(
        income=income,
        expense=expense,
        investment=investment,
        savings=savings,
        allocated=allocated,
        remaining=income - allocated,
        allocated_percent=percent_of_income(allocated, income),
        allocated_ratio=allocated_ratio(allocated, income),
    )


def concept_percentages(income: float, concepts: Iterable[AllocationConcept]) -> Dict[int, float]:
    """Map each concept id to its amount as a percentage of ``income``."""
    return {c.id: percent_of_income(require_number(c.amount, "amount"), income) for c in concepts}
