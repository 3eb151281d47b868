"""
Rent versus buy breakeven.

Three breakevens are searched independently over the same projection, since
each can fall in a different month and answers a different question:

    net worth   cumulative_rent > net_ownership_cost
                (renting has cost more than owning, net of equity built)
    sale        sale_proceeds > upfront_costs
                (selling would return more than the cash put in)
    equity      equity > upfront_costs
                (equity built exceeds the cash put in)

upfront_costs = deposit + stamp duty + legal fees.
"""

from __future__ import annotations

from dataclasses import dataclass

from .breakeven import find_breakeven
from .fees import ESTIMATED_LEGAL_FEES, stamp_duty
from .money import to_minor_units
from .projection import RentVsBuyProjection, build_rent_vs_buy_projection, yearly_rows

DEFAULT_RENT_INFLATION = 2.0            # % per year
DEFAULT_HOME_APPRECIATION = 4.0         # % per year
DEFAULT_MAINTENANCE_RATE = 1.0          # % of home value per year
DEFAULT_OPPORTUNITY_COST_RATE = 6.0     # % return per year
DEFAULT_SALE_COST_RATE = 3.0            # % of sale price
DEFAULT_SERVICE_CHARGE = 0              # cents per month
DEFAULT_SERVICE_CHARGE_INCREASE = 0.0   # % per year


@dataclass(frozen=True)
class RentVsBuyInputs:
    """Rent versus buy scenario. Amounts in cents, rates in %."""
    property_value: int
    deposit: int
    mortgage_term_months: int
    mortgage_rate: float
    monthly_rent: int
    legal_fees: int = ESTIMATED_LEGAL_FEES
    rent_inflation: float = DEFAULT_RENT_INFLATION
    home_appreciation: float = DEFAULT_HOME_APPRECIATION
    maintenance_rate: float = DEFAULT_MAINTENANCE_RATE
    opportunity_cost_rate: float = DEFAULT_OPPORTUNITY_COST_RATE
    sale_cost_rate: float = DEFAULT_SALE_COST_RATE
    service_charge: int = DEFAULT_SERVICE_CHARGE
    service_charge_increase: float = DEFAULT_SERVICE_CHARGE_INCREASE

    def __post_init__(self) -> None:
        if self.property_value <= 0:
            raise ValueError(f"property_value must be positive, got {self.property_value}")
        if not 0 <= self.deposit <= self.property_value:
            raise ValueError(
                f"deposit must lie in [0, property_value], got {self.deposit}"
            )
        if self.mortgage_term_months <= 0:
            raise ValueError(
                f"mortgage_term_months must be positive, got {self.mortgage_term_months}"
            )
        if self.mortgage_rate < 0:
            raise ValueError(f"mortgage_rate must be non-negative, got {self.mortgage_rate}")
        if self.monthly_rent < 0:
            raise ValueError(f"monthly_rent must be non-negative, got {self.monthly_rent}")

    @property
    def mortgage_amount(self) -> int:
        return self.property_value - self.deposit


@dataclass(frozen=True)
class NetWorthBreakevenDetails:
    cumulative_rent: int
    net_ownership_cost: int
    cumulative_ownership: int
    equity: int


@dataclass(frozen=True)
class SaleBreakevenDetails:
    home_value: int
    sale_costs: int
    mortgage_balance: int
    sale_proceeds: int
    upfront_costs: int


@dataclass(frozen=True)
class EquityBreakevenDetails:
    home_value: int
    mortgage_balance: int
    equity: int
    upfront_costs: int


@dataclass(frozen=True)
class RentVsBuyComparison:
    period: int                         # month or year number
    cumulative_rent: int
    cumulative_ownership: int
    home_value: int
    mortgage_balance: int
    equity: int
    net_ownership_cost: int
    sale_proceeds: int


@dataclass(frozen=True)
class RentVsBuyResult:
    breakeven_month: int | None                 # net worth; None = never
    breakeven_details: NetWorthBreakevenDetails | None
    sale_breakeven_month: int | None
    sale_breakeven_details: SaleBreakevenDetails | None
    equity_breakeven_month: int | None
    equity_breakeven_details: EquityBreakevenDetails | None
    monthly_mortgage_payment: int
    mortgage_amount: int
    deposit: int
    stamp_duty: int
    legal_fees: int
    purchase_costs: int                         # stamp duty + legal fees
    upfront_costs: int                          # deposit + purchase costs
    monthly_breakdown: tuple[RentVsBuyComparison, ...]
    yearly_breakdown: tuple[RentVsBuyComparison, ...]


def _comparison(p: RentVsBuyProjection, month: int) -> RentVsBuyComparison:
    return RentVsBuyComparison(
        period=month,
        cumulative_rent=to_minor_units(p.cumulative_rent[month]),
        cumulative_ownership=to_minor_units(p.cumulative_ownership[month]),
        home_value=to_minor_units(p.home_value[month]),
        mortgage_balance=to_minor_units(p.mortgage_balance[month]),
        equity=to_minor_units(p.equity[month]),
        net_ownership_cost=to_minor_units(p.net_ownership_cost[month]),
        sale_proceeds=to_minor_units(p.sale_proceeds[month]),
    )


def calculate_rent_vs_buy_breakeven(inputs: RentVsBuyInputs) -> RentVsBuyResult:
    """
    Compare renting with buying over the mortgage term.

    Returns:
        RentVsBuyResult with the net worth, sale and equity breakevens and a
        detail snapshot frozen at each. A breakeven month is None when it is
        not reached within the term.
    """
    duty = stamp_duty(inputs.property_value)
    purchase_costs = duty + inputs.legal_fees
    upfront_costs = inputs.deposit + purchase_costs
    mortgage_amount = inputs.mortgage_amount

    p = build_rent_vs_buy_projection(
        property_value=inputs.property_value,
        mortgage_amount=mortgage_amount,
        mortgage_rate=inputs.mortgage_rate,
        term_months=inputs.mortgage_term_months,
        monthly_rent=inputs.monthly_rent,
        upfront_costs=upfront_costs,
        rent_inflation=inputs.rent_inflation,
        home_appreciation=inputs.home_appreciation,
        maintenance_rate=inputs.maintenance_rate,
        opportunity_cost_rate=inputs.opportunity_cost_rate,
        sale_cost_rate=inputs.sale_cost_rate,
        service_charge=inputs.service_charge,
        service_charge_increase=inputs.service_charge_increase,
    )

    net_worth_month = find_breakeven(p.cumulative_rent, p.net_ownership_cost, strict=True)
    net_worth_details = None
    if net_worth_month is not None:
        m = net_worth_month
        net_worth_details = NetWorthBreakevenDetails(
            cumulative_rent=to_minor_units(p.cumulative_rent[m]),
            net_ownership_cost=to_minor_units(p.net_ownership_cost[m]),
            cumulative_ownership=to_minor_units(p.cumulative_ownership[m]),
            equity=to_minor_units(p.equity[m]),
        )

    sale_month = find_breakeven(p.sale_proceeds, upfront_costs, strict=True)
    sale_details = None
    if sale_month is not None:
        m = sale_month
        sale_details = SaleBreakevenDetails(
            home_value=to_minor_units(p.home_value[m]),
            sale_costs=to_minor_units(p.sale_costs[m]),
            mortgage_balance=to_minor_units(p.mortgage_balance[m]),
            sale_proceeds=to_minor_units(p.sale_proceeds[m]),
            upfront_costs=upfront_costs,
        )

    equity_month = find_breakeven(p.equity, upfront_costs, strict=True)
    equity_details = None
    if equity_month is not None:
        m = equity_month
        equity_details = EquityBreakevenDetails(
            home_value=to_minor_units(p.home_value[m]),
            mortgage_balance=to_minor_units(p.mortgage_balance[m]),
            equity=to_minor_units(p.equity[m]),
            upfront_costs=upfront_costs,
        )

    term = inputs.mortgage_term_months
    monthly = tuple(_comparison(p, m) for m in range(1, term + 1))
    yearly = yearly_rows(monthly)

    return RentVsBuyResult(
        breakeven_month=net_worth_month,
        breakeven_details=net_worth_details,
        sale_breakeven_month=sale_month,
        sale_breakeven_details=sale_details,
        equity_breakeven_month=equity_month,
        equity_breakeven_details=equity_details,
        monthly_mortgage_payment=to_minor_units(p.mortgage_payment[1]),
        mortgage_amount=mortgage_amount,
        deposit=inputs.deposit,
        stamp_duty=duty,
        legal_fees=inputs.legal_fees,
        purchase_costs=purchase_costs,
        upfront_costs=upfront_costs,
        monthly_breakdown=monthly,
        yearly_breakdown=yearly,
    )
