"""Debt payoff projection.

The simulator walks a loan month by month: each month the outstanding
balance accrues interest at the nominal monthly rate (annual TIN / 12) and
the fixed payment, plus any extra monthly amount, covers that interest first
and reduces the principal with the rest. The projection is bounded by
``MAX_MONTHS``; a payment that never reduces the balance, or a payoff that
would take longer than the cap, yields ``None`` instead of a result.

Arithmetic is carried out with ``Decimal`` and converted to ``float`` only in
the returned records, so repeated calls with the same inputs give identical
results.
"""

from __future__ import annotations

import logging
import math
from decimal import Decimal, getcontext
from typing import Optional

from .config import MAX_MONTHS
from .data_models import AmortizationResult, DebtProgress, ExtraPaymentComparison, LoanState
from .utils import decimal_from_number, require_number

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)


def simulate(
    principal: float,
    annual_rate_percent: float,
    base_monthly_payment: float,
    extra_per_month: float = 0.0,
) -> Optional[AmortizationResult]:
    """Project how long a debt takes to be repaid and the interest it costs.

    Parameters
    ----------
    principal: float
        Outstanding balance.
    annual_rate_percent: float
        Nominal annual rate in percent. Zero is valid (linear payoff).
    base_monthly_payment: float
        Regular installment.
    extra_per_month: float
        Additional amount paid every month.

    Returns
    -------
    AmortizationResult or None
        ``None`` when the payoff cannot be estimated: the payment is not
        positive, the principal is not positive, the rate is negative, the
        payment does not exceed the interest accrued in some month, or the
        balance is still positive after ``MAX_MONTHS`` months.
    """
    balance = decimal_from_number(principal, "principal")
    monthly_rate = decimal_from_number(annual_rate_percent, "annual_rate_percent") / Decimal(100) / Decimal(12)
    payment = decimal_from_number(base_monthly_payment, "monthly_payment") + decimal_from_number(
        extra_per_month, "extra_per_month"
    )

    if payment <= 0 or balance <= 0 or monthly_rate < 0:
        return None

    months = 0
    interest_paid = Decimal("0")
    while balance > 0 and months < MAX_MONTHS:
        interest = balance * monthly_rate
        principal_paid = payment - interest
        # A payment equal to the accrued interest never shrinks the balance.
        if principal_paid <= 0:
            logger.debug(
                "Payment %s does not cover interest %s after %d months", payment, interest, months
            )
            return None
        interest_paid += interest
        balance -= principal_paid
        months += 1

    if months >= MAX_MONTHS:
        logger.debug("Payoff exceeds %d months; balance left %s", MAX_MONTHS, balance)
        return None

    return AmortizationResult(
        months=months,
        years=months / 12,
        total_interest=float(interest_paid),
    )


def simulate_loan(state: LoanState) -> Optional[AmortizationResult]:
    """Run :func:`simulate` on a ``LoanState`` record."""
    return simulate(
        state.principal,
        state.annual_rate_percent,
        state.monthly_payment,
        state.extra_per_month,
    )


def compare_extra_payment(
    principal: float,
    annual_rate_percent: float,
    base_monthly_payment: float,
    extra_per_month: float,
) -> ExtraPaymentComparison:
    """Compare the regular payoff with one that adds ``extra_per_month``.

    The savings are only reported when both projections are feasible;
    otherwise they are ``None`` and the caller should show that the payoff
    cannot be estimated.
    """
    baseline = simulate(principal, annual_rate_percent, base_monthly_payment, 0)
    accelerated = simulate(principal, annual_rate_percent, base_monthly_payment, extra_per_month)

    interest_saved = None
    months_saved = None
    if baseline is not None and accelerated is not None:
        interest_saved = baseline.total_interest - accelerated.total_interest
        months_saved = baseline.months - accelerated.months

    return ExtraPaymentComparison(
        baseline=baseline,
        accelerated=accelerated,
        interest_saved=interest_saved,
        months_saved=months_saved,
    )


def debt_progress(total: float, remaining: float, paid: Optional[float] = None) -> DebtProgress:
    """Return how much of a debt has been repaid.

    ``paid`` is taken as recorded when available; otherwise it is derived
    from the original amount and the remaining balance. The percentage is
    rounded half up and kept within 0..100.
    """
    total = 0.0 if total is None else require_number(total, "total")
    remaining = max(0.0 if remaining is None else require_number(remaining, "remaining"), 0.0)

    if paid is not None:
        paid_amount = max(require_number(paid, "paid"), 0.0)
    elif total > 0:
        paid_amount = max(min(total, total - remaining), 0.0)
    else:
        paid_amount = 0.0

    if total > 0:
        percent = math.floor(paid_amount / total * 100 + 0.5)
        percent = min(100, max(0, percent))
    else:
        percent = 0

    return DebtProgress(total=total, remaining=remaining, paid=paid_amount, percent_paid=int(percent))
