# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import warnings
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from .products import FixedRate, Rate, VariableRate

__version__ = "0.1.0"


# =============================================================================
# LEVEL-PAYMENT AMORTIZATION
# =============================================================================
#
# Conventions used throughout this module:
#   - Rates are nominal ANNUAL percentages (3.5 for 3.5%); the monthly rate is
#     r = rate / 1200.
#   - Amounts are floats in minor units (cents). Rounding to whole cents is
#     left to the caller (see money.to_minor_units).
#   - Months are 1-indexed payment periods; period 0 is the initial state.
# =============================================================================

def monthly_rate(annual_rate_pct: float) -> float:
    """Convert a nominal annual percentage to a monthly decimal rate (C / 1200)."""
    return annual_rate_pct / 1200.0


def monthly_payment(
        principal: float,
        annual_rate_pct: float,
        term_months: int
) -> float:
    """
    Calculate the level monthly payment that amortizes `principal` to zero.

    Formula:
        PMT = P · r · (1 + r)^n / ((1 + r)^n - 1)

    Where:
        P = principal
        r = monthly rate (annual_rate_pct / 1200)
        n = term_months

    At r = 0 the closed form is 0/0, so the straight-line payment P / n is
    returned instead.

    Args:
        principal: Loan amount in minor units
        annual_rate_pct: Nominal annual rate as percentage (e.g., 3.5 for 3.5%)
        term_months: Number of monthly payments

    Returns:
        Monthly payment in minor units (unrounded)

    Raises:
        ValueError: If principal is not positive
        ValueError: If term_months is not positive
        ValueError: If annual_rate_pct is negative
        Warning: If annual_rate_pct is zero

    Example:
        >>> monthly_payment(30_000_000, 3.5, 300)   # €300k, 3.5%, 25 years
        150186.3...                                  # ≈ €1,501.86
    """
    if principal <= 0:
        raise ValueError(f"principal must be positive, got {principal}")
    if term_months <= 0:
        raise ValueError(f"term_months must be positive, got {term_months}")
    if annual_rate_pct < 0:
        raise ValueError(f"annual_rate_pct must be non-negative, got {annual_rate_pct}")
    if annual_rate_pct == 0.0:
        warnings.warn("annual rate is zero, returning straight-line payment")
        return principal / term_months
    r = monthly_rate(annual_rate_pct)
    growth = (1.0 + r) ** term_months
    return principal * r * growth / (growth - 1.0)


def balance_factor(
        annual_rate_pct: float,
        total_term_months: int,
        elapsed_months: int
) -> float:
    """
    Scheduled balance as a fraction of the original principal after
    `elapsed_months` level payments.

    Formula:
        BAL(e) = [1 - (1 + r)^-(n - e)] / [1 - (1 + r)^-n]

    This is the ratio of present-value annuity factors PVAF(n - e) / PVAF(n):
    the value of the payments still owed over the value of all payments.
    BAL(0) = 1 and BAL(n) = 0 exactly.

    Args:
        annual_rate_pct: Nominal annual rate as percentage
        total_term_months: Original term n
        elapsed_months: Payments made e, clamped to [0, n]

    Returns:
        Balance factor in [0, 1]

    Raises:
        ValueError: If total_term_months is not positive
        ValueError: If annual_rate_pct is negative
    """
    if total_term_months <= 0:
        raise ValueError(f"total_term_months must be positive, got {total_term_months}")
    if annual_rate_pct < 0:
        raise ValueError(f"annual_rate_pct must be non-negative, got {annual_rate_pct}")
    elapsed = min(max(elapsed_months, 0), total_term_months)
    if elapsed == total_term_months:
        return 0.0
    remaining = total_term_months - elapsed
    if annual_rate_pct == 0.0:
        return remaining / total_term_months
    r = monthly_rate(annual_rate_pct)
    return (1.0 - (1.0 + r) ** (-remaining)) / (1.0 - (1.0 + r) ** (-total_term_months))


def remaining_balance(
        principal: float,
        annual_rate_pct: float,
        total_term_months: int,
        elapsed_months: int
) -> float:
    """
    Outstanding balance after `elapsed_months` payments of a level-payment loan.

    `elapsed_months` is clamped to [0, total_term_months]; at the end of the
    term the balance is exactly 0.0.

    Args:
        principal: Original loan amount in minor units
        annual_rate_pct: Nominal annual rate as percentage
        total_term_months: Original term in months
        elapsed_months: Number of payments already made

    Returns:
        Remaining balance in minor units

    Raises:
        ValueError: If principal is not positive
    """
    if principal <= 0:
        raise ValueError(f"principal must be positive, got {principal}")
    return principal * balance_factor(annual_rate_pct, total_term_months, elapsed_months)


def split_payment(
        balance: float,
        annual_rate_pct: float,
        payment: float
) -> tuple[float, float]:
    """
    Split one month's payment into (interest, principal).

    Interest accrues on the beginning balance; the principal portion is capped
    at the balance so a final payment never overshoots.
    """
    interest = balance * monthly_rate(annual_rate_pct)
    principal = min(payment - interest, balance)
    return interest, principal


# =============================================================================
# FOLLOW-ON PERIOD AND TOTAL COST
# =============================================================================

def follow_on_ltv(
        principal: float,
        annual_rate_pct: float,
        total_term_months: int,
        fixed_term_months: int,
        original_ltv: float
) -> float:
    """
    LTV at the end of a fixed period, assuming the property value is unchanged.

    follow_on_ltv = original_ltv × BAL(fixed_term_months)
    """
    return original_ltv * balance_factor(annual_rate_pct, total_term_months, fixed_term_months)


def monthly_follow_on_payment(
        rate: Rate,
        follow_on: VariableRate | None,
        principal: float,
        total_term_months: int
) -> float | None:
    """
    Monthly payment once a fixed period ends and the follow-on rate applies.

    The balance left after the fixed period is re-amortized over the months
    remaining in the term at the follow-on rate.

    Returns:
        Follow-on payment in minor units, or None when there is no follow-on
        period (variable product, no follow-on resolved, or the fixed period
        covers the whole term).
    """
    if not isinstance(rate, FixedRate) or follow_on is None:
        return None
    remaining_months = total_term_months - rate.fixed_term_months
    if remaining_months <= 0:
        return None
    balance = remaining_balance(principal, rate.rate, total_term_months, rate.fixed_term_months)
    if balance <= 0:
        return None
    return monthly_payment(balance, follow_on.rate, remaining_months)


def total_repayable(
        rate: Rate,
        monthly_payment: float,
        monthly_follow_on: float | None,
        term_months: int
) -> float:
    """
    Total of all payments over the term.

    For a fixed rate with a follow-on payment:
        total = PMT_fixed × fixed_months + PMT_follow_on × (term - fixed_months)

    Otherwise (variable, or fixed with no resolvable follow-on) the initial
    payment is assumed to continue for the whole term. Callers surface that
    case with `uses_fixed_rate_for_whole_term`.
    """
    if isinstance(rate, FixedRate) and monthly_follow_on is not None:
        fixed_months = min(rate.fixed_term_months, term_months)
        return monthly_payment * fixed_months + monthly_follow_on * (term_months - fixed_months)
    return monthly_payment * term_months


def cost_of_credit_percent(total_repayable: float, principal: float) -> float:
    """Cost of credit as a percentage of the amount borrowed."""
    if principal <= 0:
        raise ValueError(f"principal must be positive, got {principal}")
    return (total_repayable - principal) / principal * 100.0


# =============================================================================
# SCHEDULE GENERATION
# =============================================================================
#
# The schedule recomputes the payment every period as
#
#     PMTₙ = BAL(ₙ₋₁) × AF(Mₙ₋₁, rₙ),   AF(M, r) = r / [1 - (1+r)^-M]
#
# where Mₙ₋₁ is the number of payments left at the start of period n. For a
# constant rate this reproduces the level payment; when the rate changes (end
# of a fixed period) it re-amortizes the balance over the remaining term at the
# new rate, which is how a follow-on rate is applied.
# =============================================================================

@dataclass
class AmortizationSchedule:
    """
    Month-by-month amortization arrays, index 0 = initial state.

    Flow fields (payment, interest, principal) are 0 at index 0; cumulative
    fields accumulate from month 1.
    """
    period: np.ndarray
    rate: np.ndarray                # nominal annual % applied in the period
    beginning_balance: np.ndarray
    payment: np.ndarray
    interest: np.ndarray
    principal: np.ndarray
    ending_balance: np.ndarray
    cumulative_interest: np.ndarray
    cumulative_principal: np.ndarray

    @property
    def horizon(self) -> int:
        return len(self.period) - 1


def rate_path(
        annual_rate_pct: float,
        term_months: int,
        fixed_term_months: int | None = None,
        follow_on_rate_pct: float | None = None
) -> np.ndarray:
    """
    Per-month nominal rate vector of length `term_months`.

    Months 1..fixed_term_months carry `annual_rate_pct`; later months carry
    `follow_on_rate_pct`. Without a follow-on rate the initial rate continues
    for the whole term.
    """
    path = np.full(term_months, float(annual_rate_pct))
    if fixed_term_months is not None and follow_on_rate_pct is not None:
        path[fixed_term_months:] = follow_on_rate_pct
    return path


def _annuity_factor(r: float, remaining: int) -> float:
    if remaining <= 0:
        return 0.0
    if r == 0.0:
        return 1.0 / remaining
    return r / (1.0 - (1.0 + r) ** (-remaining))


def amortization_schedule(
        principal: float,
        rates: float | Sequence[float] | np.ndarray,
        term_months: int,
        horizon_months: int | None = None
) -> AmortizationSchedule:
    """
    Generate the scheduled amortization of a capital-and-interest loan.

    Args:
        principal: Opening balance in minor units
        rates: Nominal annual % - a scalar for a constant rate, or a vector of
            length term_months (see rate_path) for a rate that changes
        term_months: Months over which the loan fully amortizes
        horizon_months: Months to generate (default term_months, capped at it)

    Returns:
        AmortizationSchedule with horizon_months + 1 rows

    Raises:
        ValueError: If principal or term_months is not positive
        ValueError: If the rate vector is shorter than the horizon or negative
    """
    if principal <= 0:
        raise ValueError(f"principal must be positive, got {principal}")
    if term_months <= 0:
        raise ValueError(f"term_months must be positive, got {term_months}")
    horizon = term_months if horizon_months is None else min(max(horizon_months, 0), term_months)

    if np.isscalar(rates):
        rate_vec = np.full(horizon, float(rates))
    else:
        rate_vec = np.asarray(rates, dtype=float)
        if len(rate_vec) < horizon:
            raise ValueError(
                f"rate vector has {len(rate_vec)} entries, need at least {horizon}"
            )
        rate_vec = rate_vec[:horizon]
    if np.any(rate_vec < 0):
        raise ValueError("rates must be non-negative")

    periods = horizon + 1
    period = np.arange(periods)
    rate = np.zeros(periods)
    beginning_balance = np.zeros(periods)
    payment = np.zeros(periods)
    interest = np.zeros(periods)
    principal_paid = np.zeros(periods)
    ending_balance = np.zeros(periods)

    ending_balance[0] = principal
    rate[1:] = rate_vec

    for i in range(1, periods):
        beginning_balance[i] = ending_balance[i - 1]
        remaining = term_months - i + 1
        r = monthly_rate(rate[i])
        interest[i] = beginning_balance[i] * r
        if remaining == 1:
            payment[i] = beginning_balance[i] + interest[i]
        else:
            payment[i] = beginning_balance[i] * _annuity_factor(r, remaining)
        principal_paid[i] = payment[i] - interest[i]
        ending_balance[i] = max(beginning_balance[i] - principal_paid[i], 0.0)

    return AmortizationSchedule(
        period=period,
        rate=rate,
        beginning_balance=beginning_balance,
        payment=payment,
        interest=interest,
        principal=principal_paid,
        ending_balance=ending_balance,
        cumulative_interest=np.cumsum(interest),
        cumulative_principal=np.cumsum(principal_paid),
    )
