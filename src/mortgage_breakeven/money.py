# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import numpy as np

__version__ = "0.1.0"


# =============================================================================
# Minor-unit rounding
# =============================================================================
#
# Every currency amount crossing the package boundary is an integer number of
# minor units (cents). Interest math runs in floating point on cent amounts and
# is rounded back with the helpers below. Crossover tests round BOTH sides with
# the same helper so floating noise can never flip the sign of a comparison.
# =============================================================================

def to_minor_units(amount: float) -> int:
    """
    Round a floating amount of minor units to a whole number of minor units.

    Rounds half up (towards +inf), so 2.5 -> 3 and -2.5 -> -2.

    Args:
        amount: Amount in minor units (e.g. 1234.5 cents)

    Returns:
        Integer number of minor units
    """
    return int(np.floor(amount + 0.5))


def to_minor_units_array(amounts: np.ndarray) -> np.ndarray:
    """Vectorised to_minor_units; returns an int64 array."""
    return np.floor(np.asarray(amounts, dtype=float) + 0.5).astype(np.int64)


def percent_of(amount: float, percent: float) -> float:
    """Return `percent` % of `amount` (e.g. percent_of(30000000, 3.0) == 900000.0)."""
    return amount * percent / 100.0
