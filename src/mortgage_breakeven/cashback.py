"""
Cashback versus rate comparison.

Each option is a rate with a cashback paid at drawdown. Options are compared
over a common horizon: the shortest fixed period among them, or the full term
when every option is variable.

Three independent rankings are made at the horizon:

    cheapest monthly        lowest monthly payment
    cheapest adjusted       lowest balance - cashback
    cheapest net cost       lowest interest paid - cashback

The adjusted balance treats cashback as a lump sum taken off the ending
balance rather than paid into the loan at drawdown and amortized. This is a
ranking heuristic, kept as is.

Every pair of options is also searched for the month at which the option
that started cheaper (more cashback) is overtaken on net cost.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

import numpy as np

from .breakeven import PairwiseBreakeven, pairwise_breakevens
from .money import percent_of, to_minor_units
from .projection import (
    CashbackProjection,
    build_cashback_projection,
    comparison_horizon,
    yearly_rows,
)


class CashbackType(Enum):
    FLAT = "flat"
    PERCENTAGE = "percentage"


@dataclass(frozen=True)
class CashbackOption:
    """
    One rate/cashback offer.

    cashback_value is cents for FLAT and a percentage of the mortgage amount
    for PERCENTAGE. cashback_cap (cents) limits a percentage cashback.
    fixed_term_months is None for a variable rate.
    """
    label: str
    rate: float
    cashback_type: CashbackType = CashbackType.FLAT
    cashback_value: float = 0
    cashback_cap: int | None = None
    fixed_term_months: int | None = None

    def __post_init__(self) -> None:
        if self.rate < 0:
            raise ValueError(f"rate must be non-negative, got {self.rate}")
        if self.cashback_value < 0:
            raise ValueError(f"cashback_value must be non-negative, got {self.cashback_value}")
        if self.cashback_cap is not None and self.cashback_cap < 0:
            raise ValueError(f"cashback_cap must be non-negative, got {self.cashback_cap}")
        if self.fixed_term_months is not None and self.fixed_term_months <= 0:
            raise ValueError(
                f"fixed_term_months must be positive, got {self.fixed_term_months}"
            )

    def cashback_amount(self, mortgage_amount: int) -> int:
        """Cashback in cents on a loan of `mortgage_amount`."""
        if self.cashback_type is CashbackType.FLAT:
            return to_minor_units(self.cashback_value)
        amount = percent_of(mortgage_amount, self.cashback_value)
        if self.cashback_cap is not None:
            amount = min(amount, self.cashback_cap)
        return to_minor_units(amount)


@dataclass(frozen=True)
class CashbackInputs:
    mortgage_amount: int
    mortgage_term_months: int
    options: tuple[CashbackOption, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", tuple(self.options))
        if self.mortgage_amount <= 0:
            raise ValueError(f"mortgage_amount must be positive, got {self.mortgage_amount}")
        if self.mortgage_term_months <= 0:
            raise ValueError(
                f"mortgage_term_months must be positive, got {self.mortgage_term_months}"
            )
        if not self.options:
            raise ValueError("at least one cashback option is required")


@dataclass(frozen=True)
class CashbackOptionResult:
    label: str
    rate: float
    cashback_amount: int
    monthly_payment: int
    monthly_payment_diff: int           # vs the cheapest monthly payment
    interest_paid: int                  # over the horizon
    principal_paid: int
    balance_at_end: int
    adjusted_balance: int               # balance_at_end - cashback_amount
    net_cost: int                       # interest_paid - cashback_amount


@dataclass(frozen=True)
class CashbackComparison:
    """All options at one period; tuples follow option order."""
    period: int                         # month or year number
    net_costs: tuple[int, ...]
    balances: tuple[int, ...]
    adjusted_balances: tuple[int, ...]
    interest_paid: tuple[int, ...]
    principal_paid: tuple[int, ...]


@dataclass(frozen=True)
class CashbackResult:
    options: tuple[CashbackOptionResult, ...]
    comparison_period_months: int
    cheapest_monthly_index: int
    cheapest_adjusted_balance_index: int
    cheapest_net_cost_index: int
    savings_vs_worst: int               # worst net cost - best net cost
    all_variable: bool
    breakevens: tuple[PairwiseBreakeven, ...]
    monthly_breakdown: tuple[CashbackComparison, ...]
    yearly_breakdown: tuple[CashbackComparison, ...]
    projection_year: CashbackComparison | None = None

    @property
    def comparison_period_years(self) -> float:
        return self.comparison_period_months / 12


def _row(values: np.ndarray) -> tuple[int, ...]:
    return tuple(to_minor_units(v) for v in values)


def _comparison(p: CashbackProjection, month: int, period: int) -> CashbackComparison:
    return CashbackComparison(
        period=period,
        net_costs=_row(p.net_cost[:, month]),
        balances=_row(p.balance[:, month]),
        adjusted_balances=_row(p.adjusted_balance[:, month]),
        interest_paid=_row(p.interest_paid[:, month]),
        principal_paid=_row(p.principal_paid[:, month]),
    )


def _argmin(values: Sequence[int]) -> int:
    # first index wins ties
    return int(np.argmin(np.asarray(values)))


def calculate_cashback_breakeven(inputs: CashbackInputs) -> CashbackResult:
    """
    Compare cashback offers over the shortest fixed period.

    Returns:
        CashbackResult with per-option figures at the horizon, the three
        rankings, every pairwise crossover, monthly and yearly breakdowns and,
        when the horizon ends before the term, a snapshot one year past it.
    """
    term = inputs.mortgage_term_months
    amount = inputs.mortgage_amount
    options = inputs.options

    horizon = comparison_horizon([o.fixed_term_months for o in options], term)
    cashback = [o.cashback_amount(amount) for o in options]
    rates = [o.rate for o in options]

    projection_month = (horizon // 12 + 1) * 12
    has_projection_year = horizon < term and projection_month <= term
    months = projection_month if has_projection_year else horizon

    full = build_cashback_projection(amount, rates, cashback, term, months)

    payments = [to_minor_units(v) for v in full.payment[:, 1]]
    cheapest_payment = min(payments)
    results = tuple(
        CashbackOptionResult(
            label=o.label,
            rate=o.rate,
            cashback_amount=cashback[i],
            monthly_payment=payments[i],
            monthly_payment_diff=payments[i] - cheapest_payment,
            interest_paid=to_minor_units(full.interest_paid[i, horizon]),
            principal_paid=to_minor_units(full.principal_paid[i, horizon]),
            balance_at_end=to_minor_units(full.balance[i, horizon]),
            adjusted_balance=to_minor_units(full.adjusted_balance[i, horizon]),
            net_cost=to_minor_units(full.net_cost[i, horizon]),
        )
        for i, o in enumerate(options)
    )

    net_costs = [r.net_cost for r in results]
    monthly = tuple(_comparison(full, m, m) for m in range(1, horizon + 1))

    return CashbackResult(
        options=results,
        comparison_period_months=horizon,
        cheapest_monthly_index=_argmin(payments),
        cheapest_adjusted_balance_index=_argmin([r.adjusted_balance for r in results]),
        cheapest_net_cost_index=_argmin(net_costs),
        savings_vs_worst=max(net_costs) - min(net_costs),
        all_variable=all(o.fixed_term_months is None for o in options),
        breakevens=tuple(pairwise_breakevens(full.net_cost[:, :horizon + 1])),
        monthly_breakdown=monthly,
        yearly_breakdown=yearly_rows(monthly),
        projection_year=(
            _comparison(full, projection_month, projection_month // 12)
            if has_projection_year else None
        ),
    )
