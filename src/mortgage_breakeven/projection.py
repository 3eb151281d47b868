# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import TypeVar

import numpy as np

from . import payments as mb_pmt

__version__ = "0.1.0"

T = TypeVar("T")


# =============================================================================
# Scenario projections
# =============================================================================
#
# Every projection is a set of parallel numpy arrays indexed by month:
#   index 0      initial state (nothing paid yet, upfront amounts in place)
#   index 1..H   end of each month up to the horizon H
#
# Amounts are floats in cents. Yearly views are SAMPLES of the monthly rows
# at months 12, 24, ... (yearly_rows), never a separate computation, so a
# yearly figure always equals the monthly figure for the same month.
# =============================================================================

def yearly_rows(monthly_rows: Sequence[T]) -> tuple[T, ...]:
    """
    Yearly breakdown from a monthly one.

    `monthly_rows` starts at month 1. Returns the rows for months 12, 24, ...
    renumbered by year; a trailing partial year is dropped.
    """
    return tuple(
        replace(row, period=year)
        for year, row in enumerate(monthly_rows[11::12], start=1)
    )


def comparison_horizon(fixed_term_months: Sequence[int | None], term_months: int) -> int:
    """
    Horizon for comparing several products side by side.

    The shortest fixed period among the products; the full term when none of
    them is fixed. Fixed-rate figures are contractual only inside the fixed
    period, so the comparison stops where the first one ends.
    """
    if term_months <= 0:
        raise ValueError(f"term_months must be positive, got {term_months}")
    fixed = [m for m in fixed_term_months if m is not None]
    if not fixed:
        return term_months
    return min(min(fixed), term_months)


# -----------------------------------------------------------------------------
# Remortgage
# -----------------------------------------------------------------------------

@dataclass
class RemortgageProjection:
    """
    Staying on the current rate versus switching, month by month.

    monthly_savings = payment_current - payment_new
    net_savings     = cumulative_savings - switching_costs
    """
    period: np.ndarray
    payment_current: np.ndarray
    payment_new: np.ndarray
    monthly_savings: np.ndarray
    cumulative_savings: np.ndarray
    net_savings: np.ndarray
    balance_current: np.ndarray
    balance_new: np.ndarray
    interest_paid_current: np.ndarray   # cumulative
    interest_paid_new: np.ndarray       # cumulative
    interest_saved: np.ndarray          # cumulative
    switching_costs: float


def build_remortgage_projection(
        balance: float,
        current_rates: float | np.ndarray,
        new_rates: float | np.ndarray,
        term_months: int,
        switching_costs: float
) -> RemortgageProjection:
    """
    Project both paths of a switch decision over the remaining term.

    Args:
        balance: Outstanding balance in cents
        current_rates: Nominal annual % if staying (scalar or per-month vector)
        new_rates: Nominal annual % after switching (scalar or per-month
            vector, e.g. payments.rate_path for a fixed product and its follow-on)
        term_months: Remaining term in months
        switching_costs: Legal fees + ERC - cashback, floored at 0, in cents

    Returns:
        RemortgageProjection with term_months + 1 rows
    """
    current = mb_pmt.amortization_schedule(balance, current_rates, term_months)
    new = mb_pmt.amortization_schedule(balance, new_rates, term_months)

    monthly_savings = current.payment - new.payment
    cumulative_savings = np.cumsum(monthly_savings)

    return RemortgageProjection(
        period=current.period,
        payment_current=current.payment,
        payment_new=new.payment,
        monthly_savings=monthly_savings,
        cumulative_savings=cumulative_savings,
        net_savings=cumulative_savings - switching_costs,
        balance_current=current.ending_balance,
        balance_new=new.ending_balance,
        interest_paid_current=current.cumulative_interest,
        interest_paid_new=new.cumulative_interest,
        interest_saved=current.cumulative_interest - new.cumulative_interest,
        switching_costs=switching_costs,
    )


# -----------------------------------------------------------------------------
# Rent versus buy
# -----------------------------------------------------------------------------

@dataclass
class RentVsBuyProjection:
    """
    Renting versus buying the same home, month by month.

    Ownership cost includes the opportunity cost of the cash a buyer ties up:
    the renter is assumed to invest the upfront costs plus any month in which
    owning costs more than renting, and the growth of that portfolio is charged
    to the buyer.

    equity             = home_value - mortgage_balance
    sale_proceeds      = home_value - sale_costs - mortgage_balance
    net_ownership_cost = cumulative_ownership - equity
    """
    period: np.ndarray
    rent: np.ndarray
    cumulative_rent: np.ndarray
    home_value: np.ndarray
    maintenance: np.ndarray
    service_charge: np.ndarray
    mortgage_payment: np.ndarray
    ownership_cost: np.ndarray          # payment + maintenance + service charge
    opportunity_cost: np.ndarray        # renter portfolio growth this month
    cumulative_ownership: np.ndarray    # upfront + all monthly costs
    renter_investment: np.ndarray
    mortgage_balance: np.ndarray
    equity: np.ndarray
    sale_costs: np.ndarray
    sale_proceeds: np.ndarray
    net_ownership_cost: np.ndarray
    upfront_costs: float


def _annual_to_monthly_compound(annual_pct: float) -> float:
    return (1.0 + annual_pct / 100.0) ** (1.0 / 12.0) - 1.0


def build_rent_vs_buy_projection(
        property_value: float,
        mortgage_amount: float,
        mortgage_rate: float,
        term_months: int,
        monthly_rent: float,
        upfront_costs: float,
        rent_inflation: float,
        home_appreciation: float,
        maintenance_rate: float,
        opportunity_cost_rate: float,
        sale_cost_rate: float,
        service_charge: float = 0.0,
        service_charge_increase: float = 0.0
) -> RentVsBuyProjection:
    """
    Project renting against buying over the mortgage term.

    Rent and service charge step up once a year, at the start of months
    13, 25, 37, ... Home value and the renter's portfolio compound monthly at
    the monthly equivalent of their annual rates. Maintenance is charged on the
    current home value.

    Args:
        property_value: Purchase price in cents
        mortgage_amount: Amount borrowed in cents (0 for a cash purchase)
        mortgage_rate: Nominal annual % on the mortgage
        term_months: Mortgage term, which is also the projection horizon
        monthly_rent: Rent in month 1, in cents
        upfront_costs: Deposit + stamp duty + legal fees, in cents
        rent_inflation: Annual rent increase %
        home_appreciation: Annual home price growth %
        maintenance_rate: Yearly maintenance as % of home value
        opportunity_cost_rate: Annual return % on the renter's investments
        sale_cost_rate: Cost of selling as % of sale price
        service_charge: Monthly service charge in month 1, in cents
        service_charge_increase: Annual service charge increase %

    Returns:
        RentVsBuyProjection with term_months + 1 rows
    """
    if term_months <= 0:
        raise ValueError(f"term_months must be positive, got {term_months}")

    periods = term_months + 1
    if mortgage_amount > 0:
        schedule = mb_pmt.amortization_schedule(mortgage_amount, mortgage_rate, term_months)
        mortgage_payment = schedule.payment
        mortgage_balance = schedule.ending_balance
    else:
        mortgage_payment = np.zeros(periods)
        mortgage_balance = np.zeros(periods)

    appreciation = _annual_to_monthly_compound(home_appreciation)
    opportunity = _annual_to_monthly_compound(opportunity_cost_rate)

    period = np.arange(periods)
    rent = np.zeros(periods)
    home_value = np.zeros(periods)
    maintenance = np.zeros(periods)
    service = np.zeros(periods)
    ownership_cost = np.zeros(periods)
    opportunity_cost = np.zeros(periods)
    renter_investment = np.zeros(periods)

    home_value[0] = property_value
    renter_investment[0] = upfront_costs
    current_rent = monthly_rent
    current_service = service_charge

    for i in range(1, periods):
        if i > 1 and (i - 1) % 12 == 0:
            current_rent *= 1.0 + rent_inflation / 100.0
            current_service *= 1.0 + service_charge_increase / 100.0
        rent[i] = current_rent
        service[i] = current_service

        home_value[i] = home_value[i - 1] * (1.0 + appreciation)
        maintenance[i] = home_value[i] * maintenance_rate / 100.0 / 12.0
        ownership_cost[i] = mortgage_payment[i] + maintenance[i] + service[i]

        opportunity_cost[i] = renter_investment[i - 1] * opportunity
        renter_investment[i] = renter_investment[i - 1] + opportunity_cost[i]
        if rent[i] < ownership_cost[i]:
            renter_investment[i] += ownership_cost[i] - rent[i]

    cumulative_ownership = upfront_costs + np.cumsum(ownership_cost + opportunity_cost)
    equity = home_value - mortgage_balance
    sale_costs = home_value * sale_cost_rate / 100.0

    return RentVsBuyProjection(
        period=period,
        rent=rent,
        cumulative_rent=np.cumsum(rent),
        home_value=home_value,
        maintenance=maintenance,
        service_charge=service,
        mortgage_payment=mortgage_payment,
        ownership_cost=ownership_cost,
        opportunity_cost=opportunity_cost,
        cumulative_ownership=cumulative_ownership,
        renter_investment=renter_investment,
        mortgage_balance=mortgage_balance,
        equity=equity,
        sale_costs=sale_costs,
        sale_proceeds=home_value - sale_costs - mortgage_balance,
        net_ownership_cost=cumulative_ownership - equity,
        upfront_costs=upfront_costs,
    )


# -----------------------------------------------------------------------------
# Cashback comparison
# -----------------------------------------------------------------------------

@dataclass
class CashbackProjection:
    """
    N borrowing options over a common horizon.

    Arrays are 2D, shape (n_options, horizon + 1). Cashback is received at
    drawdown, so net_cost starts at -cashback in month 0.

    net_cost         = interest_paid - cashback
    adjusted_balance = balance - cashback
    """
    period: np.ndarray
    payment: np.ndarray
    balance: np.ndarray
    interest_paid: np.ndarray           # cumulative
    principal_paid: np.ndarray          # cumulative
    net_cost: np.ndarray
    adjusted_balance: np.ndarray
    cashback: np.ndarray                # shape (n_options,)

    @property
    def n_options(self) -> int:
        return self.payment.shape[0]


def build_cashback_projection(
        mortgage_amount: float,
        rates: Sequence[float],
        cashback: Sequence[float],
        term_months: int,
        horizon_months: int
) -> CashbackProjection:
    """
    Project each option's amortization over `horizon_months`.

    Args:
        mortgage_amount: Amount borrowed in cents, the same for every option
        rates: Nominal annual % per option
        cashback: Cashback per option in cents
        term_months: Mortgage term in months
        horizon_months: Months to project (capped at term_months)

    Returns:
        CashbackProjection
    """
    if len(rates) != len(cashback):
        raise ValueError(f"got {len(rates)} rates but {len(cashback)} cashback amounts")
    horizon = min(horizon_months, term_months)
    schedules = [
        mb_pmt.amortization_schedule(mortgage_amount, r, term_months, horizon)
        for r in rates
    ]
    cashback_arr = np.asarray(cashback, dtype=float)
    balance = np.vstack([s.ending_balance for s in schedules])
    interest_paid = np.vstack([s.cumulative_interest for s in schedules])

    return CashbackProjection(
        period=np.arange(horizon + 1),
        payment=np.vstack([s.payment for s in schedules]),
        balance=balance,
        interest_paid=interest_paid,
        principal_paid=np.vstack([s.cumulative_principal for s in schedules]),
        net_cost=interest_paid - cashback_arr[:, None],
        adjusted_balance=balance - cashback_arr[:, None],
        cashback=cashback_arr,
    )
