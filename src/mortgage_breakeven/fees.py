# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

__version__ = "0.1.0"

# =============================================================================
# Purchase and switching costs (cents)
# =============================================================================

ESTIMATED_LEGAL_FEES = 400_000              # conveyancing on a purchase
ESTIMATED_REMORTGAGE_LEGAL_FEES = 135_000   # conveyancing on a switch

# Residential stamp duty bands: (upper bound in cents or None, rate %).
# Each band applies only to the slice of value inside it.
STAMP_DUTY_BANDS: tuple[tuple[int | None, float], ...] = (
    (100_000_000, 1.0),     # up to €1,000,000
    (150_000_000, 2.0),     # €1,000,000 - €1,500,000
    (None, 6.0),            # above €1,500,000
)


def stamp_duty(property_value: int) -> int:
    """
    Residential stamp duty on a purchase at `property_value` (cents).

    Example:
        >>> stamp_duty(120_000_000)     # €1.2M: 1% of €1M + 2% of €200k
        1400000
    """
    if property_value < 0:
        raise ValueError(f"property_value must be non-negative, got {property_value}")
    duty = 0.0
    lower = 0
    for upper, rate_pct in STAMP_DUTY_BANDS:
        top = property_value if upper is None else min(property_value, upper)
        if top > lower:
            duty += (top - lower) * rate_pct / 100.0
        if upper is None or property_value <= upper:
            break
        lower = upper
    return round(duty)
