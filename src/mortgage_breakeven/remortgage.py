"""
Remortgage (switching) breakeven.

Compares staying on the current rate with switching to a new one over the
remaining term. Switching costs are paid up front:

    switching_costs = max(0, legal_fees + erc - cashback)

and the switch breaks even in the first month whose cumulative payment
savings cover them:

    cumulative_savings[m] >= switching_costs

A switch whose first payment is not lower than the current one never breaks
even through savings, so no search is run for it.

The new rate may be a catalog product. A fixed product rolls onto its
follow-on rate at the end of the fixed period (resolved at the LTV projected
for that date); when no follow-on matches, the fixed rate is assumed to run
for the whole term and the result is flagged.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np

from . import payments as mb_pmt
from .breakeven import breakeven_exceeds, find_breakeven
from .fees import ESTIMATED_REMORTGAGE_LEGAL_FEES
from .money import to_minor_units
from .products import BerRating, FixedRate, Rate, VariableRate
from .projection import RemortgageProjection, build_remortgage_projection, yearly_rows
from .rates import resolve_follow_on


@dataclass(frozen=True)
class RemortgageInputs:
    """Switching scenario. Amounts in cents, rates in annual %."""
    outstanding_balance: int
    current_rate: float
    new_rate: float
    remaining_term_months: int
    legal_fees: int = ESTIMATED_REMORTGAGE_LEGAL_FEES
    cashback: int = 0
    erc: int = 0                        # early repayment charge
    new_rate_id: str | None = None      # catalog product; its rate overrides new_rate
    property_value: int | None = None   # for the follow-on LTV of a product
    ber: BerRating | None = None

    def __post_init__(self) -> None:
        if self.outstanding_balance <= 0:
            raise ValueError(
                f"outstanding_balance must be positive, got {self.outstanding_balance}"
            )
        if self.remaining_term_months <= 0:
            raise ValueError(
                f"remaining_term_months must be positive, got {self.remaining_term_months}"
            )
        if self.current_rate < 0 or self.new_rate < 0:
            raise ValueError(
                f"rates must be non-negative, got {self.current_rate} and {self.new_rate}"
            )
        for name in ("legal_fees", "cashback", "erc"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")
        if self.property_value is not None and self.property_value <= 0:
            raise ValueError(f"property_value must be positive, got {self.property_value}")


@dataclass(frozen=True)
class RemortgageBreakevenDetails:
    """Values frozen at the breakeven month."""
    breakeven_month: int
    monthly_savings: int
    switching_costs: int
    cumulative_savings_at_breakeven: int


@dataclass(frozen=True)
class InterestSavingsDetails:
    total_interest_current: int
    total_interest_new: int
    interest_saved: int
    switching_costs: int
    net_benefit: int                    # interest_saved - switching_costs


@dataclass(frozen=True)
class RemortgageComparison:
    """One period of the projection, rounded to cents."""
    period: int                         # month or year number
    cumulative_savings: int
    net_savings: int
    remaining_balance_current: int
    remaining_balance_new: int
    interest_paid_current: int
    interest_paid_new: int
    interest_saved: int


@dataclass(frozen=True)
class RemortgageResult:
    breakeven_month: int | None         # None = never
    breakeven_details: RemortgageBreakevenDetails | None
    current_monthly_payment: int
    new_monthly_payment: int
    monthly_savings: int
    legal_fees: int
    cashback: int
    erc: int
    switching_costs: int
    year_one_savings: int
    total_savings_over_term: int
    interest_savings_details: InterestSavingsDetails
    monthly_breakdown: tuple[RemortgageComparison, ...]
    yearly_breakdown: tuple[RemortgageComparison, ...]
    new_rate_product: Rate | None = None
    follow_on: VariableRate | None = None
    follow_on_payment: int | None = None
    uses_fixed_rate_for_whole_term: bool = False
    breakeven_exceeds_fixed_period: bool | None = None  # None unless the new product is fixed


def _comparison(projection: RemortgageProjection, month: int, period: int) -> RemortgageComparison:
    p = projection
    return RemortgageComparison(
        period=period,
        cumulative_savings=to_minor_units(p.cumulative_savings[month]),
        net_savings=to_minor_units(p.net_savings[month]),
        remaining_balance_current=to_minor_units(p.balance_current[month]),
        remaining_balance_new=to_minor_units(p.balance_new[month]),
        interest_paid_current=to_minor_units(p.interest_paid_current[month]),
        interest_paid_new=to_minor_units(p.interest_paid_new[month]),
        interest_saved=to_minor_units(p.interest_saved[month]),
    )


def _lookup_rate(rate_id: str, catalog: tuple[Rate, ...]) -> Rate:
    for rate in catalog:
        if rate.id == rate_id:
            return rate
    raise ValueError(f"unknown rate id {rate_id!r}")


def calculate_remortgage_breakeven(
        inputs: RemortgageInputs,
        catalog: Iterable[Rate] = ()
) -> RemortgageResult:
    """
    Breakeven and savings of switching the outstanding balance to a new rate.

    Args:
        inputs: The switching scenario
        catalog: Rate catalog, required only when inputs.new_rate_id is set

    Returns:
        RemortgageResult. `breakeven_month` is None when the switch never pays
        for itself within the remaining term.

    Raises:
        ValueError: If inputs.new_rate_id is not in the catalog
    """
    catalog = tuple(catalog)
    term = inputs.remaining_term_months
    balance = inputs.outstanding_balance

    product: Rate | None = None
    follow_on: VariableRate | None = None
    uses_fixed_for_term = False
    new_rates: float | np.ndarray = inputs.new_rate

    if inputs.new_rate_id is not None:
        product = _lookup_rate(inputs.new_rate_id, catalog)
        new_rates = product.rate
        if isinstance(product, FixedRate):
            ltv = None
            if inputs.property_value is not None:
                ltv = balance / inputs.property_value * 100.0
            resolution = resolve_follow_on(
                product, catalog,
                mortgage_amount=balance, term_months=term, ltv=ltv, ber=inputs.ber
            )
            follow_on = resolution.follow_on
            uses_fixed_for_term = resolution.uses_fixed_rate_for_whole_term
            if follow_on is not None:
                new_rates = mb_pmt.rate_path(
                    product.rate, term, product.fixed_term_months, follow_on.rate
                )

    switching_costs = max(0, inputs.legal_fees + inputs.erc - inputs.cashback)
    projection = build_remortgage_projection(
        balance, inputs.current_rate, new_rates, term, switching_costs
    )

    monthly_savings = to_minor_units(projection.monthly_savings[1])
    breakeven_month = None
    details = None
    if monthly_savings > 0:
        breakeven_month = find_breakeven(projection.cumulative_savings, switching_costs)
    if breakeven_month is not None:
        details = RemortgageBreakevenDetails(
            breakeven_month=breakeven_month,
            monthly_savings=to_minor_units(projection.monthly_savings[max(breakeven_month, 1)]),
            switching_costs=switching_costs,
            cumulative_savings_at_breakeven=to_minor_units(
                projection.cumulative_savings[breakeven_month]
            ),
        )

    total_interest_current = projection.interest_paid_current[-1]
    total_interest_new = projection.interest_paid_new[-1]
    interest_saved = total_interest_current - total_interest_new

    follow_on_payment = None
    if follow_on is not None and isinstance(product, FixedRate) and product.fixed_term_months < term:
        follow_on_payment = to_minor_units(projection.payment_new[product.fixed_term_months + 1])
    exceeds_fixed_period = None
    if isinstance(product, FixedRate):
        exceeds_fixed_period = breakeven_exceeds(breakeven_month, product.fixed_term_months)

    monthly = tuple(_comparison(projection, m, m) for m in range(1, term + 1))
    yearly = yearly_rows(monthly)

    return RemortgageResult(
        breakeven_month=breakeven_month,
        breakeven_details=details,
        current_monthly_payment=to_minor_units(projection.payment_current[1]),
        new_monthly_payment=to_minor_units(projection.payment_new[1]),
        monthly_savings=monthly_savings,
        legal_fees=inputs.legal_fees,
        cashback=inputs.cashback,
        erc=inputs.erc,
        switching_costs=switching_costs,
        year_one_savings=to_minor_units(
            projection.cumulative_savings[min(12, term)] - switching_costs
        ),
        total_savings_over_term=to_minor_units(
            projection.cumulative_savings[term] - switching_costs
        ),
        interest_savings_details=InterestSavingsDetails(
            total_interest_current=to_minor_units(total_interest_current),
            total_interest_new=to_minor_units(total_interest_new),
            interest_saved=to_minor_units(interest_saved),
            switching_costs=switching_costs,
            net_benefit=to_minor_units(interest_saved - switching_costs),
        ),
        monthly_breakdown=monthly,
        yearly_breakdown=yearly,
        new_rate_product=product,
        follow_on=follow_on,
        follow_on_payment=follow_on_payment,
        uses_fixed_rate_for_whole_term=uses_fixed_for_term,
        breakeven_exceeds_fixed_period=exceeds_fixed_period,
    )
