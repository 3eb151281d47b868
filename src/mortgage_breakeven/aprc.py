# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import warnings
from dataclasses import dataclass

import numpy as np
from scipy.optimize import brentq

from . import payments as mb_pmt
from .money import to_minor_units
from .products import FixedRate, Rate, VariableRate

__version__ = "0.1.0"

# =============================================================================
# APRC: Annual Percentage Rate of Charge
# =============================================================================
#
# The APRC is the single periodic discount rate i at which the present value of
# every repayment equals the net amount drawn down:
#
#     (L - F_val) = Σ_{t=1..N} CFₜ / (1 + i)^t
#
# Where:
#     L      = reference loan amount (a standard figure, not the borrower's)
#     F_val  = valuation fee, deducted at drawdown
#     CFₜ    = repayment in month t, rounded to the cent; the last one carries
#              the security release fee
#
# The disclosed APRC is the EFFECTIVE annual rate, (1 + i)^12 - 1, to 2 dp.
# =============================================================================

APRC_REFERENCE_LOAN_AMOUNT = 10_000_000         # cents (€100,000)
APRC_REFERENCE_TERM_MONTHS = 240                # 20 years
APRC_RATE_BRACKET = (0.0, 30.0)                 # annual %, effective
APRC_MAX_ITERATIONS = 100
APRC_RESIDUAL_TOLERANCE = 1e-6                  # fraction of the loan amount

FOLLOW_ON_RATE_BRACKET = (0.01, 15.0)           # annual %, for inference


@dataclass(frozen=True)
class AprcFeeConfig:
    """Lender fees entering the APRC cashflows, in cents."""
    valuation_fee: int = 0              # deducted from the drawdown
    security_release_fee: int = 0       # added to the final repayment

    def __post_init__(self) -> None:
        if self.valuation_fee < 0:
            raise ValueError(f"valuation_fee must be non-negative, got {self.valuation_fee}")
        if self.security_release_fee < 0:
            raise ValueError(
                f"security_release_fee must be non-negative, got {self.security_release_fee}"
            )


DEFAULT_APRC_FEES = AprcFeeConfig(valuation_fee=18_500, security_release_fee=6_000)


@dataclass(frozen=True)
class AprcResult:
    aprc: float                 # effective annual %, 2 dp
    nominal_rate: float         # monthly rate x 12, as %
    monthly_rate: float         # decimal
    converged: bool
    iterations: int
    residual: float             # NPV at the returned rate, cents
    disclosed: bool = False     # True if taken verbatim from the product


# -----------------------------------------------------------------------------
# Cashflows and NPV
# -----------------------------------------------------------------------------

def aprc_cashflows(
        fixed_rate_pct: float,
        fixed_term_months: int,
        follow_on_rate_pct: float,
        fees: AprcFeeConfig = DEFAULT_APRC_FEES,
        loan_amount: int = APRC_REFERENCE_LOAN_AMOUNT,
        term_months: int = APRC_REFERENCE_TERM_MONTHS
) -> np.ndarray:
    """
    Build the APRC cashflow vector: index 0 is the (negative) net drawdown,
    indices 1..term_months are the monthly repayments.

    If the fixed period covers the whole term the fixed payment runs to the
    end and the follow-on rate is ignored. Otherwise the balance left after the
    fixed period is re-amortized at the follow-on rate over the months remaining.

    Args:
        fixed_rate_pct: Fixed nominal annual rate as percentage
        fixed_term_months: Length of the fixed period in months
        follow_on_rate_pct: Nominal annual rate after the fixed period
        fees: Valuation and security release fees
        loan_amount: Reference loan amount in cents
        term_months: Reference term in months

    Returns:
        Array of length term_months + 1
    """
    if loan_amount <= 0:
        raise ValueError(f"loan_amount must be positive, got {loan_amount}")
    if term_months <= 0:
        raise ValueError(f"term_months must be positive, got {term_months}")
    fixed_months = min(max(fixed_term_months, 0), term_months)
    variable_months = term_months - fixed_months

    cashflows = np.zeros(term_months + 1)
    cashflows[0] = -(loan_amount - fees.valuation_fee)

    if variable_months <= 0 or fixed_months == 0:
        rate_pct = fixed_rate_pct if variable_months <= 0 else follow_on_rate_pct
        cashflows[1:] = to_minor_units(mb_pmt.monthly_payment(loan_amount, rate_pct, term_months))
    else:
        fixed_payment = to_minor_units(
            mb_pmt.monthly_payment(loan_amount, fixed_rate_pct, term_months)
        )
        balance_after_fixed = mb_pmt.remaining_balance(
            loan_amount, fixed_rate_pct, term_months, fixed_months
        )
        variable_payment = to_minor_units(
            mb_pmt.monthly_payment(balance_after_fixed, follow_on_rate_pct, variable_months)
        )
        cashflows[1:fixed_months + 1] = fixed_payment
        cashflows[fixed_months + 1:] = variable_payment

    cashflows[-1] += fees.security_release_fee
    return cashflows


def npv(monthly_rate: float, cashflows: np.ndarray) -> float:
    """Net present value of monthly `cashflows` (index = month) at `monthly_rate`."""
    t = np.arange(len(cashflows))
    return float(np.sum(cashflows / (1.0 + monthly_rate) ** t))


# -----------------------------------------------------------------------------
# Solver
# -----------------------------------------------------------------------------

def _effective_annual_pct(monthly_rate: float) -> float:
    return ((1.0 + monthly_rate) ** 12 - 1.0) * 100.0


def _monthly_from_effective(annual_pct: float) -> float:
    return (1.0 + annual_pct / 100.0) ** (1.0 / 12.0) - 1.0


def solve_aprc(
        fixed_rate_pct: float,
        fixed_term_months: int,
        follow_on_rate_pct: float,
        fees: AprcFeeConfig = DEFAULT_APRC_FEES,
        loan_amount: int = APRC_REFERENCE_LOAN_AMOUNT,
        term_months: int = APRC_REFERENCE_TERM_MONTHS,
        max_iterations: int = APRC_MAX_ITERATIONS,
        tolerance: float = APRC_RESIDUAL_TOLERANCE
) -> AprcResult:
    """
    Solve for the APRC of a fixed rate that reverts to a follow-on rate.

    Uses Brent's method (scipy.optimize.brentq) on the monthly discount rate,
    bracketed by APRC_RATE_BRACKET (effective annual). Brent's method keeps the
    root bracketed at every step, so it cannot diverge the way an unguarded
    Newton iteration can.

    The solver never raises on a bad outcome and never returns NaN:
      - No sign change across the bracket: the bracket endpoint with the
        smaller |NPV| is returned.
      - Iteration cap reached: brentq's last estimate is returned.
    In both cases `converged` is False and a warning is issued. A result also
    counts as unconverged if |NPV| exceeds `tolerance` × loan_amount.

    Args:
        fixed_rate_pct: Fixed nominal annual rate as percentage
        fixed_term_months: Fixed period in months (>= term means no follow-on)
        follow_on_rate_pct: Follow-on nominal annual rate as percentage; pass
            the fixed rate again when no follow-on is known
        fees: APRC fee configuration (default DEFAULT_APRC_FEES)
        loan_amount: Reference loan amount in cents
        term_months: Reference term in months
        max_iterations: Iteration cap passed to brentq
        tolerance: Allowed |NPV| as a fraction of loan_amount

    Returns:
        AprcResult

    Raises:
        ValueError: If loan_amount or term_months is not positive, or a rate
            is negative
    """
    cashflows = aprc_cashflows(
        fixed_rate_pct, fixed_term_months, follow_on_rate_pct, fees, loan_amount, term_months
    )
    lo = _monthly_from_effective(APRC_RATE_BRACKET[0])
    hi = _monthly_from_effective(APRC_RATE_BRACKET[1])

    try:
        root, info = brentq(
            npv, lo, hi,
            args=(cashflows,),
            xtol=1e-14,
            maxiter=max_iterations,
            full_output=True,
            disp=False
        )
        monthly = float(root)
        iterations = info.iterations
        solver_converged = bool(info.converged)
    except ValueError:
        # f(lo) and f(hi) share a sign: no APRC inside the bracket
        monthly = lo if abs(npv(lo, cashflows)) <= abs(npv(hi, cashflows)) else hi
        iterations = 0
        solver_converged = False

    residual = npv(monthly, cashflows)
    converged = solver_converged and abs(residual) <= tolerance * loan_amount
    if not converged:
        warnings.warn(
            f"APRC solver did not converge (fixed {fixed_rate_pct}%, "
            f"follow-on {follow_on_rate_pct}%, residual {residual:.4f}); "
            f"returning best estimate"
        )

    return AprcResult(
        aprc=round(_effective_annual_pct(monthly), 2),
        nominal_rate=monthly * 1200.0,
        monthly_rate=monthly,
        converged=converged,
        iterations=iterations,
        residual=residual,
    )


def calculate_aprc(
        fixed_rate_pct: float,
        fixed_term_months: int,
        follow_on_rate_pct: float,
        fees: AprcFeeConfig = DEFAULT_APRC_FEES,
        loan_amount: int = APRC_REFERENCE_LOAN_AMOUNT,
        term_months: int = APRC_REFERENCE_TERM_MONTHS
) -> float:
    """APRC as an effective annual percentage rounded to 2 dp (see solve_aprc)."""
    return solve_aprc(
        fixed_rate_pct, fixed_term_months, follow_on_rate_pct, fees, loan_amount, term_months
    ).aprc


def resolve_aprc(
        rate: Rate,
        follow_on: VariableRate | None = None,
        fees: AprcFeeConfig | None = None,
        loan_amount: int = APRC_REFERENCE_LOAN_AMOUNT,
        term_months: int = APRC_REFERENCE_TERM_MONTHS
) -> AprcResult:
    """
    APRC for a catalog product.

    A disclosed `rate.apr` is returned verbatim (disclosed=True) and the solver
    is not run. Otherwise the APRC is solved with the product's fixed period
    and `follow_on`; a fixed rate with no follow-on is assumed to run for the
    whole reference term, and a variable rate is constant throughout.
    """
    if rate.apr is not None:
        monthly = _monthly_from_effective(rate.apr)
        return AprcResult(
            aprc=rate.apr,
            nominal_rate=monthly * 1200.0,
            monthly_rate=monthly,
            converged=True,
            iterations=0,
            residual=0.0,
            disclosed=True,
        )

    if isinstance(rate, FixedRate) and follow_on is not None:
        fixed_months = rate.fixed_term_months
        follow_on_pct = follow_on.rate
    else:
        fixed_months = term_months
        follow_on_pct = rate.rate

    return solve_aprc(
        rate.rate, fixed_months, follow_on_pct,
        fees if fees is not None else DEFAULT_APRC_FEES,
        loan_amount, term_months
    )


# -----------------------------------------------------------------------------
# Inverse problem
# -----------------------------------------------------------------------------

def infer_follow_on_rate(
        fixed_rate_pct: float,
        fixed_term_months: int,
        observed_aprc: float,
        fees: AprcFeeConfig = DEFAULT_APRC_FEES,
        loan_amount: int = APRC_REFERENCE_LOAN_AMOUNT,
        term_months: int = APRC_REFERENCE_TERM_MONTHS,
        tolerance: float = 1e-6,
        max_iterations: int = 100
) -> float:
    """
    Infer the follow-on rate a lender used to produce a published APRC.

    Lenders often publish the APRC of a fixed product without publishing the
    variable rate it reverts to. APRC rises monotonically with the follow-on
    rate, so Brent's method over FOLLOW_ON_RATE_BRACKET finds the follow-on
    rate whose (unrounded) APRC equals `observed_aprc`.

    Args:
        fixed_rate_pct: Fixed nominal annual rate as percentage
        fixed_term_months: Fixed period in months (must be shorter than the term)
        observed_aprc: Published APRC, effective annual %
        fees: APRC fee configuration used by the lender
        loan_amount: Reference loan amount in cents
        term_months: Reference term in months
        tolerance: xtol for the root finder, in rate percentage points
        max_iterations: Maximum iterations for Brent's method

    Returns:
        Follow-on nominal annual rate as percentage, rounded to 2 dp

    Raises:
        ValueError: If the fixed period covers the whole term, or no follow-on
            rate in the bracket reproduces the observed APRC
    """
    if fixed_term_months >= term_months:
        raise ValueError(
            f"fixed_term_months ({fixed_term_months}) must be shorter than "
            f"term_months ({term_months}) to infer a follow-on rate"
        )

    def objective(follow_on_pct: float) -> float:
        cashflows = aprc_cashflows(
            fixed_rate_pct, fixed_term_months, follow_on_pct, fees, loan_amount, term_months
        )
        monthly = brentq(npv, -0.5, 1.0, args=(cashflows,), xtol=1e-14)
        return _effective_annual_pct(monthly) - observed_aprc

    try:
        follow_on = brentq(
            objective,
            FOLLOW_ON_RATE_BRACKET[0], FOLLOW_ON_RATE_BRACKET[1],
            xtol=tolerance,
            maxiter=max_iterations
        )
    except ValueError as e:
        raise ValueError(
            f"Could not infer a follow-on rate for fixed {fixed_rate_pct}% over "
            f"{fixed_term_months} months with observed APRC {observed_aprc}%. "
            f"Original error: {e}"
        ) from e
    return round(follow_on, 2)
