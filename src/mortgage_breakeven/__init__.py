# Requires Python 3.12+
"""
Mortgage breakeven - amortization, follow-on rates, APRC, and scenario breakevens.

Scenarios: remortgage switching, rent versus buy, cashback versus rate.
All amounts are integer cents at the API boundary; rates are annual percentages.
"""

from __future__ import annotations

__version__ = "0.1.0"

# Money
from mortgage_breakeven.money import (
    to_minor_units,
    to_minor_units_array,
    percent_of,
)

# Rate products
from mortgage_breakeven.products import (
    RateType,
    BuyerType,
    BerRating,
    BTL_BUYER_TYPES,
    MortgageRate,
    FixedRate,
    VariableRate,
    Rate,
    rate_from_dict,
)

# Amortization
from mortgage_breakeven.payments import (
    monthly_rate,
    monthly_payment,
    balance_factor,
    remaining_balance,
    split_payment,
    follow_on_ltv,
    monthly_follow_on_payment,
    total_repayable,
    cost_of_credit_percent,
    AmortizationSchedule,
    rate_path,
    amortization_schedule,
)

# APRC
from mortgage_breakeven.aprc import (
    AprcFeeConfig,
    AprcResult,
    DEFAULT_APRC_FEES,
    aprc_cashflows,
    npv,
    solve_aprc,
    calculate_aprc,
    resolve_aprc,
    infer_follow_on_rate,
)

# Rate catalog
from mortgage_breakeven.rates import (
    is_valid_follow_on,
    find_follow_on_rate,
    FollowOnResolution,
    resolve_follow_on,
    is_rate_eligible,
    eligible_rates,
    RateCostSummary,
    summarize_rate,
    summarize_rates,
)

# Fees
from mortgage_breakeven.fees import (
    ESTIMATED_LEGAL_FEES,
    ESTIMATED_REMORTGAGE_LEGAL_FEES,
    stamp_duty,
)

# Projections and breakeven search
from mortgage_breakeven.projection import (
    RemortgageProjection,
    RentVsBuyProjection,
    CashbackProjection,
    build_remortgage_projection,
    build_rent_vs_buy_projection,
    build_cashback_projection,
    comparison_horizon,
    yearly_rows,
)
from mortgage_breakeven.breakeven import (
    SHORT_HORIZON_MONTHS,
    Resolution,
    BreakevenPeriod,
    PairwiseBreakeven,
    first_crossing,
    find_breakeven,
    breakeven_exceeds,
    format_breakeven_period,
    pairwise_breakeven,
    pairwise_breakevens,
)

# Scenarios
from mortgage_breakeven.remortgage import (
    RemortgageInputs,
    RemortgageResult,
    RemortgageComparison,
    RemortgageBreakevenDetails,
    InterestSavingsDetails,
    calculate_remortgage_breakeven,
)
from mortgage_breakeven.rent_vs_buy import (
    RentVsBuyInputs,
    RentVsBuyResult,
    RentVsBuyComparison,
    NetWorthBreakevenDetails,
    SaleBreakevenDetails,
    EquityBreakevenDetails,
    calculate_rent_vs_buy_breakeven,
)
from mortgage_breakeven.cashback import (
    CashbackType,
    CashbackOption,
    CashbackInputs,
    CashbackOptionResult,
    CashbackComparison,
    CashbackResult,
    calculate_cashback_breakeven,
)

# Share tokens
from mortgage_breakeven.share import (
    encode_inputs,
    decode_inputs,
)

__all__ = [
    "__version__",
    # Money
    "to_minor_units",
    "to_minor_units_array",
    "percent_of",
    # Rate products
    "RateType",
    "BuyerType",
    "BerRating",
    "BTL_BUYER_TYPES",
    "MortgageRate",
    "FixedRate",
    "VariableRate",
    "Rate",
    "rate_from_dict",
    # Amortization
    "monthly_rate",
    "monthly_payment",
    "balance_factor",
    "remaining_balance",
    "split_payment",
    "follow_on_ltv",
    "monthly_follow_on_payment",
    "total_repayable",
    "cost_of_credit_percent",
    "AmortizationSchedule",
    "rate_path",
    "amortization_schedule",
    # APRC
    "AprcFeeConfig",
    "AprcResult",
    "DEFAULT_APRC_FEES",
    "aprc_cashflows",
    "npv",
    "solve_aprc",
    "calculate_aprc",
    "resolve_aprc",
    "infer_follow_on_rate",
    # Rate catalog
    "is_valid_follow_on",
    "find_follow_on_rate",
    "FollowOnResolution",
    "resolve_follow_on",
    "is_rate_eligible",
    "eligible_rates",
    "RateCostSummary",
    "summarize_rate",
    "summarize_rates",
    # Fees
    "ESTIMATED_LEGAL_FEES",
    "ESTIMATED_REMORTGAGE_LEGAL_FEES",
    "stamp_duty",
    # Projections and breakeven search
    "RemortgageProjection",
    "RentVsBuyProjection",
    "CashbackProjection",
    "build_remortgage_projection",
    "build_rent_vs_buy_projection",
    "build_cashback_projection",
    "comparison_horizon",
    "yearly_rows",
    "SHORT_HORIZON_MONTHS",
    "Resolution",
    "BreakevenPeriod",
    "PairwiseBreakeven",
    "first_crossing",
    "find_breakeven",
    "breakeven_exceeds",
    "format_breakeven_period",
    "pairwise_breakeven",
    "pairwise_breakevens",
    # Scenarios
    "RemortgageInputs",
    "RemortgageResult",
    "RemortgageComparison",
    "RemortgageBreakevenDetails",
    "InterestSavingsDetails",
    "calculate_remortgage_breakeven",
    "RentVsBuyInputs",
    "RentVsBuyResult",
    "RentVsBuyComparison",
    "NetWorthBreakevenDetails",
    "SaleBreakevenDetails",
    "EquityBreakevenDetails",
    "calculate_rent_vs_buy_breakeven",
    "CashbackType",
    "CashbackOption",
    "CashbackInputs",
    "CashbackOptionResult",
    "CashbackComparison",
    "CashbackResult",
    "calculate_cashback_breakeven",
    # Share tokens
    "encode_inputs",
    "decode_inputs",
]
