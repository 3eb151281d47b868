"""
Mortgage rate products - the catalog data model.

A lender product is either a FixedRate (locked for `fixed_term_months`) or a
VariableRate. Both share the MortgageRate base, so "does this product have a
fixed term" is answered by isinstance(rate, FixedRate) rather than by an
optional field.

Structure:
  (1) Enums - rate type, buyer category, BER energy rating
  (2) MortgageRate / FixedRate / VariableRate - frozen product records
  (3) rate_from_dict - parse a catalog record (camelCase JSON shape)

Conventions:
  - `rate`, `apr`, `min_ltv`, `max_ltv` are percentages (3.45 = 3.45%).
  - `min_loan` is in minor units (cents).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeAlias


# =============================================================================
# ENUMS
# =============================================================================

class RateType(Enum):
    """Rate product kind."""
    FIXED = "fixed"
    VARIABLE = "variable"


class BuyerType(Enum):
    """Buyer categories a product may be restricted to."""
    FIRST_TIME_BUYER = "ftb"
    MOVER = "mover"
    SWITCHER = "switcher-pdh"
    BUY_TO_LET = "btl"
    BUY_TO_LET_SWITCHER = "switcher-btl"


BTL_BUYER_TYPES: frozenset[BuyerType] = frozenset(
    {BuyerType.BUY_TO_LET, BuyerType.BUY_TO_LET_SWITCHER}
)


class BerRating(Enum):
    """Building Energy Rating bands (A1 best, G worst)."""
    A1 = "A1"
    A2 = "A2"
    A3 = "A3"
    B1 = "B1"
    B2 = "B2"
    B3 = "B3"
    C1 = "C1"
    C2 = "C2"
    C3 = "C3"
    D1 = "D1"
    D2 = "D2"
    E1 = "E1"
    E2 = "E2"
    F = "F"
    G = "G"
    EXEMPT = "Exempt"


# =============================================================================
# RATE PRODUCTS
# =============================================================================

@dataclass(frozen=True, kw_only=True)
class MortgageRate(ABC):
    """Fields shared by every lender product."""
    id: str
    name: str
    lender_id: str
    rate: float                                    # nominal annual %, e.g. 3.45
    max_ltv: float                                 # upper LTV bound %, inclusive
    buyer_types: frozenset[BuyerType]
    min_ltv: float = 0.0                           # lower LTV bound %, inclusive
    apr: float | None = None                       # disclosed APRC %, if published
    min_loan: int | None = None                    # cents (high-value mortgages)
    ber_eligible: frozenset[BerRating] | None = None   # None = every BER eligible
    new_business: bool | None = None               # True new only, False existing only
    perks: frozenset[str] = field(default_factory=frozenset)
    warning: str | None = None

    def __post_init__(self) -> None:
        """Validate the product and freeze collection fields."""
        object.__setattr__(self, "buyer_types", frozenset(self.buyer_types))
        object.__setattr__(self, "perks", frozenset(self.perks))
        if self.ber_eligible is not None:
            object.__setattr__(self, "ber_eligible", frozenset(self.ber_eligible))

        if self.rate < 0:
            raise ValueError(f"rate must be non-negative, got {self.rate}")
        if not 0 <= self.min_ltv <= 100 or not 0 <= self.max_ltv <= 100:
            raise ValueError(
                f"LTV bounds must lie in [0, 100], got [{self.min_ltv}, {self.max_ltv}]"
            )
        if self.min_ltv > self.max_ltv:
            raise ValueError(
                f"min_ltv ({self.min_ltv}) cannot exceed max_ltv ({self.max_ltv})"
            )
        if not self.buyer_types:
            raise ValueError(f"rate {self.id!r} must list at least one buyer type")
        if self.min_loan is not None and self.min_loan <= 0:
            raise ValueError(f"min_loan must be positive, got {self.min_loan}")

    @property
    @abstractmethod
    def rate_type(self) -> RateType:
        """FIXED or VARIABLE, fixed by the subclass."""
        ...

    @property
    def is_btl(self) -> bool:
        """True if any of the product's buyer types is a buy-to-let category."""
        return not self.buyer_types.isdisjoint(BTL_BUYER_TYPES)

    @property
    def ltv_band_width(self) -> float:
        return self.max_ltv - self.min_ltv

    def covers_ltv(self, ltv: float) -> bool:
        """True if `ltv` lies inside [min_ltv, max_ltv]."""
        return self.min_ltv <= ltv <= self.max_ltv

    def accepts_ber(self, ber: BerRating | None) -> bool:
        """True if the product is open to `ber` (unknown BER is never excluded)."""
        return ber is None or self.ber_eligible is None or ber in self.ber_eligible


@dataclass(frozen=True, kw_only=True)
class FixedRate(MortgageRate):
    """Product whose rate is locked for `fixed_term_months`."""
    fixed_term_months: int

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.fixed_term_months <= 0:
            raise ValueError(
                f"fixed_term_months must be positive, got {self.fixed_term_months}"
            )

    @property
    def rate_type(self) -> RateType:
        return RateType.FIXED


@dataclass(frozen=True, kw_only=True)
class VariableRate(MortgageRate):
    """Product whose rate may change at the lender's discretion."""

    @property
    def rate_type(self) -> RateType:
        return RateType.VARIABLE


Rate: TypeAlias = FixedRate | VariableRate


# =============================================================================
# CATALOG PARSING
# =============================================================================

def _enum_set(enum_cls: type[Enum], values: Iterable[str]) -> frozenset:
    try:
        return frozenset(enum_cls(v) for v in values)
    except ValueError as e:
        raise ValueError(f"invalid {enum_cls.__name__} value: {e}") from e


def rate_from_dict(record: Mapping[str, Any]) -> Rate:
    """
    Build a FixedRate or VariableRate from a catalog record.

    The record uses the published catalog shape: camelCase keys, `type` of
    "fixed" | "variable", `fixedTerm` in YEARS, `minLoan` in whole currency
    units. Both are converted (months, cents) on the way in.

    Args:
        record: Mapping with keys id, name, lenderId, type, rate, maxLtv,
            buyerTypes and optionally apr, fixedTerm, minLtv, minLoan,
            berEligible, newBusiness, perks, warning.

    Returns:
        FixedRate if type == "fixed", else VariableRate

    Raises:
        ValueError: If a required key is missing, the type is unknown, a fixed
            rate has no fixedTerm (or a variable rate has one), or any field
            fails product validation.
    """
    try:
        kind = RateType(record["type"])
        common: dict[str, Any] = {
            "id": str(record["id"]),
            "name": str(record["name"]),
            "lender_id": str(record["lenderId"]),
            "rate": float(record["rate"]),
            "max_ltv": float(record["maxLtv"]),
            "buyer_types": _enum_set(BuyerType, record["buyerTypes"]),
        }
    except KeyError as e:
        raise ValueError(f"rate record is missing required key {e}") from e

    common["min_ltv"] = float(record.get("minLtv", 0.0))
    if record.get("apr") is not None:
        common["apr"] = float(record["apr"])
    if record.get("minLoan") is not None:
        common["min_loan"] = int(round(float(record["minLoan"]) * 100))
    if record.get("berEligible") is not None:
        common["ber_eligible"] = _enum_set(BerRating, record["berEligible"])
    if record.get("newBusiness") is not None:
        common["new_business"] = bool(record["newBusiness"])
    common["perks"] = frozenset(record.get("perks", ()))
    common["warning"] = record.get("warning")

    fixed_term = record.get("fixedTerm")
    if kind is RateType.FIXED:
        if fixed_term is None:
            raise ValueError(f"fixed rate {common['id']!r} has no fixedTerm")
        return FixedRate(fixed_term_months=int(fixed_term) * 12, **common)
    if fixed_term is not None:
        raise ValueError(f"variable rate {common['id']!r} cannot have a fixedTerm")
    return VariableRate(**common)
