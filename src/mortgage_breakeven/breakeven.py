# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from itertools import combinations

import numpy as np

from .money import to_minor_units_array

__version__ = "0.1.0"

SHORT_HORIZON_MONTHS = 24

# =============================================================================
# Breakeven search
# =============================================================================
#
# A breakeven is the FIRST month index m at which a scenario's condition holds:
#
#     condition[m] is True  and  condition[k] is False for every k < m
#
# Month 0 is the initial state, so a condition already true before any payment
# is an immediate breakeven (m = 0). A condition never true inside the horizon
# is "never", represented as None everywhere in this package.
#
# Conditions compare amounts in cents. Both sides are rounded to whole cents
# with the same helper before comparing, so floating noise in the projection
# cannot move the crossover by a month.
# =============================================================================

def first_crossing(condition: np.ndarray) -> int | None:
    """Index of the first True in a boolean month series, or None if there is none."""
    condition = np.asarray(condition, dtype=bool)
    if not condition.any():
        return None
    return int(np.argmax(condition))


def find_breakeven(
        lhs: np.ndarray,
        rhs: np.ndarray | float,
        *,
        strict: bool = False
) -> int | None:
    """
    First month at which lhs >= rhs (or lhs > rhs if `strict`).

    Args:
        lhs: Monthly series in cents (index 0 = initial state)
        rhs: Monthly series or constant threshold in cents
        strict: Require lhs to exceed rhs rather than reach it

    Returns:
        Breakeven month, or None if the condition never holds
    """
    left = to_minor_units_array(lhs)
    right = to_minor_units_array(np.broadcast_to(rhs, np.shape(lhs)))
    return first_crossing(left > right if strict else left >= right)


def breakeven_exceeds(month: int | None, limit: int) -> bool:
    """True if a breakeven comes after `limit` months. "Never" exceeds every limit."""
    return month is None or month > limit


# -----------------------------------------------------------------------------
# Display
# -----------------------------------------------------------------------------

class Resolution(Enum):
    MONTH = "month"
    YEAR = "year"


@dataclass(frozen=True)
class BreakevenPeriod:
    """
    A breakeven month split into years and months for display.

    `month` stays the canonical value for comparisons; `resolution` says
    whether a short display should show months (near-term crossovers) or years.
    """
    month: int | None

    @property
    def is_never(self) -> bool:
        return self.month is None

    @property
    def years(self) -> int | None:
        return None if self.month is None else self.month // 12

    @property
    def months(self) -> int | None:
        return None if self.month is None else self.month % 12

    @property
    def resolution(self) -> Resolution:
        if self.month is not None and self.month < SHORT_HORIZON_MONTHS:
            return Resolution.MONTH
        return Resolution.YEAR


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}" if n == 1 else f"{n} {unit}s"


def format_breakeven_period(month: int | None) -> str:
    """
    Human-readable breakeven period.

    >>> format_breakeven_period(None)
    'Never'
    >>> format_breakeven_period(18)
    '1 year 6 months'
    """
    period = BreakevenPeriod(month)
    if period.is_never:
        return "Never"
    if period.years == 0:
        return _plural(period.months, "month")
    if period.months == 0:
        return _plural(period.years, "year")
    return f"{_plural(period.years, 'year')} {_plural(period.months, 'month')}"


# -----------------------------------------------------------------------------
# Pairwise comparison
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class PairwiseBreakeven:
    """
    Crossover between options `first` and `second` (first < second).

    `leader` is the option with the lower net cost at the start; `month` is the
    first month the other option (`challenger`) becomes strictly cheaper, or
    None if the leader stays at least as cheap throughout.
    """
    first: int
    second: int
    leader: int
    challenger: int
    month: int | None


def pairwise_breakeven(
        net_costs: np.ndarray,
        first: int,
        second: int
) -> PairwiseBreakeven:
    """Crossover between rows `first` and `second` of a (n_options, months) net cost array."""
    a = to_minor_units_array(net_costs[first])
    b = to_minor_units_array(net_costs[second])
    diff = a - b

    nonzero = np.flatnonzero(diff)
    if len(nonzero) == 0:
        # identical costs throughout: neither overtakes
        return PairwiseBreakeven(first, second, first, second, None)

    if diff[nonzero[0]] < 0:
        leader, challenger = first, second
        overtaken = diff > 0
    else:
        leader, challenger = second, first
        overtaken = diff < 0
    return PairwiseBreakeven(first, second, leader, challenger, first_crossing(overtaken))


def pairwise_breakevens(net_costs: np.ndarray | Sequence[np.ndarray]) -> list[PairwiseBreakeven]:
    """All N·(N-1)/2 pairwise crossovers, in (0,1), (0,2), ..., (1,2), ... order."""
    costs = np.atleast_2d(np.asarray(net_costs, dtype=float))
    return [
        pairwise_breakeven(costs, i, j)
        for i, j in combinations(range(costs.shape[0]), 2)
    ]
