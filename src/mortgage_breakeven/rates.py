"""
Rate catalog resolution: follow-on rates, eligibility, and per-product cost summaries.

A fixed-rate product ends by rolling onto one of its lender's variable rates.
The catalog does not link the two explicitly, so the follow-on is resolved by
matching rules:

    candidate is a VariableRate
    candidate.lender_id == fixed.lender_id
    candidate.is_btl == fixed.is_btl
    projected LTV in [candidate.min_ltv, candidate.max_ltv]
        (no LTV given: the two LTV bands must overlap)
    candidate accepts the borrower's BER (when both are known)

Several candidates may match. The most specific wins: narrowest LTV band,
then lowest rate, then an existing-customer product (new_business False),
then rate id so the result never depends on catalog order.

No match is not an error. resolve_follow_on returns follow_on=None with
uses_fixed_rate_for_whole_term=True, and every downstream total is computed
as if the fixed rate ran for the whole term.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from . import payments as mb_pmt
from .aprc import AprcFeeConfig, AprcResult, DEFAULT_APRC_FEES, resolve_aprc
from .money import to_minor_units
from .products import BerRating, BuyerType, FixedRate, Rate, VariableRate


# =============================================================================
# FOLLOW-ON MATCHING
# =============================================================================

def is_valid_follow_on(
        fixed: FixedRate,
        candidate: Rate,
        ltv: float | None = None
) -> bool:
    """
    True if `candidate` could be the variable rate `fixed` rolls onto.

    With `ltv` the candidate's band must contain it. Without one the two
    products' LTV bands must overlap (touching at a single bound does not count).
    """
    if not isinstance(candidate, VariableRate):
        return False
    if candidate.lender_id != fixed.lender_id:
        return False
    if candidate.is_btl != fixed.is_btl:
        return False
    if ltv is not None:
        return candidate.covers_ltv(ltv)
    return fixed.max_ltv > candidate.min_ltv and fixed.min_ltv < candidate.max_ltv


def _specificity_key(rate: Rate) -> tuple[float, float, bool, str]:
    return (rate.ltv_band_width, rate.rate, rate.new_business is not False, rate.id)


def find_follow_on_rate(
        fixed: FixedRate,
        catalog: Iterable[Rate],
        ltv: float | None = None,
        ber: BerRating | None = None
) -> VariableRate | None:
    """
    Find the variable rate `fixed` rolls onto at the end of its fixed period.

    Args:
        fixed: The fixed-rate product
        catalog: Every available rate, custom rates included
        ltv: Projected LTV % at the end of the fixed period, if known
        ber: Borrower's BER, if known

    Returns:
        The most specific matching VariableRate, or None if nothing matches
    """
    matches = [
        r for r in catalog
        if is_valid_follow_on(fixed, r, ltv) and r.accepts_ber(ber)
    ]
    if not matches:
        return None
    return min(matches, key=_specificity_key)


@dataclass(frozen=True)
class FollowOnResolution:
    follow_on: VariableRate | None
    ltv: float | None                       # LTV % the match was made at
    uses_fixed_rate_for_whole_term: bool


def resolve_follow_on(
        rate: Rate,
        catalog: Iterable[Rate],
        *,
        mortgage_amount: float | None = None,
        term_months: int | None = None,
        ltv: float | None = None,
        ber: BerRating | None = None
) -> FollowOnResolution:
    """
    Resolve the follow-on for `rate` at the LTV the borrower will have when
    the fixed period ends.

    If `mortgage_amount`, `term_months` and the starting `ltv` are all given,
    the LTV is projected forward with payments.follow_on_ltv; otherwise `ltv`
    is used as-is. A VariableRate has no follow-on and is never flagged. A
    FixedRate whose fixed period covers the whole term needs no follow-on.
    """
    if not isinstance(rate, FixedRate):
        return FollowOnResolution(None, ltv, False)
    if term_months is not None and rate.fixed_term_months >= term_months:
        return FollowOnResolution(None, ltv, False)

    match_ltv = ltv
    if ltv is not None and mortgage_amount is not None and term_months is not None:
        match_ltv = mb_pmt.follow_on_ltv(
            mortgage_amount, rate.rate, term_months, rate.fixed_term_months, ltv
        )
    follow_on = find_follow_on_rate(rate, catalog, match_ltv, ber)
    return FollowOnResolution(follow_on, match_ltv, follow_on is None)


# =============================================================================
# ELIGIBILITY
# =============================================================================

def is_rate_eligible(rate: Rate, balance: int, property_value: int) -> bool:
    """True if a `balance` against `property_value` (cents) fits the product's LTV band and minimum loan."""
    if property_value <= 0:
        raise ValueError(f"property_value must be positive, got {property_value}")
    ltv = balance / property_value * 100.0
    if not rate.covers_ltv(ltv):
        return False
    return rate.min_loan is None or balance >= rate.min_loan


def eligible_rates(
        catalog: Iterable[Rate],
        *,
        ltv: float | None = None,
        buyer_type: BuyerType | None = None,
        ber: BerRating | None = None,
        loan_amount: int | None = None
) -> list[Rate]:
    """Filter `catalog` to the products open to a borrower; unset criteria are not applied."""
    return [
        r for r in catalog
        if (ltv is None or r.covers_ltv(ltv))
        and (buyer_type is None or buyer_type in r.buyer_types)
        and r.accepts_ber(ber)
        and (loan_amount is None or r.min_loan is None or loan_amount >= r.min_loan)
    ]


# =============================================================================
# COST SUMMARY
# =============================================================================

@dataclass(frozen=True)
class RateCostSummary:
    """What a product costs a specific borrower. Amounts in cents."""
    rate: Rate
    monthly_payment: int
    follow_on: VariableRate | None
    monthly_follow_on_payment: int | None
    follow_on_ltv: float | None
    total_repayable: int
    cost_of_credit: int
    cost_of_credit_percent: float
    aprc: AprcResult
    uses_fixed_rate_for_whole_term: bool


def summarize_rate(
        rate: Rate,
        catalog: Iterable[Rate],
        *,
        mortgage_amount: int,
        term_months: int,
        ltv: float,
        ber: BerRating | None = None,
        lender_fees: Mapping[str, AprcFeeConfig] | None = None
) -> RateCostSummary:
    """
    Summarize the cost of `rate` for a loan of `mortgage_amount` over `term_months`.

    The follow-on rate is resolved at the LTV projected to the end of the fixed
    period. With no follow-on the fixed payment is assumed to run for the whole
    term and the summary is flagged; the totals are still filled in.

    APRC fees come from `lender_fees[rate.lender_id]`, else DEFAULT_APRC_FEES.
    """
    catalog = tuple(catalog)
    resolution = resolve_follow_on(
        rate, catalog,
        mortgage_amount=mortgage_amount, term_months=term_months, ltv=ltv, ber=ber
    )
    payment = mb_pmt.monthly_payment(mortgage_amount, rate.rate, term_months)
    follow_on_payment = mb_pmt.monthly_follow_on_payment(
        rate, resolution.follow_on, mortgage_amount, term_months
    )
    total = mb_pmt.total_repayable(rate, payment, follow_on_payment, term_months)

    fees = (lender_fees or {}).get(rate.lender_id, DEFAULT_APRC_FEES)
    aprc = resolve_aprc(rate, resolution.follow_on, fees)

    return RateCostSummary(
        rate=rate,
        monthly_payment=to_minor_units(payment),
        follow_on=resolution.follow_on,
        monthly_follow_on_payment=(
            None if follow_on_payment is None else to_minor_units(follow_on_payment)
        ),
        follow_on_ltv=resolution.ltv if isinstance(rate, FixedRate) else None,
        total_repayable=to_minor_units(total),
        cost_of_credit=to_minor_units(total - mortgage_amount),
        cost_of_credit_percent=mb_pmt.cost_of_credit_percent(total, mortgage_amount),
        aprc=aprc,
        uses_fixed_rate_for_whole_term=resolution.uses_fixed_rate_for_whole_term,
    )


def summarize_rates(
        rates: Iterable[Rate],
        catalog: Iterable[Rate],
        *,
        mortgage_amount: int,
        term_months: int,
        ltv: float,
        ber: BerRating | None = None,
        lender_fees: Mapping[str, AprcFeeConfig] | None = None
) -> list[RateCostSummary]:
    """summarize_rate for each of `rates`, cheapest total repayable first."""
    catalog = tuple(catalog)
    summaries = [
        summarize_rate(
            r, catalog,
            mortgage_amount=mortgage_amount, term_months=term_months,
            ltv=ltv, ber=ber, lender_fees=lender_fees
        )
        for r in rates
    ]
    return sorted(summaries, key=lambda s: (s.total_repayable, s.rate.id))
