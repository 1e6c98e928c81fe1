"""SQL helpers for the read-only statistics actions.

Statistics are computed in a single SELECT per table: each figure is a
conditional count or sum over the caller's rows, so the fan-out of
independent counts costs one round trip.
"""

import math

from sqlalchemy import case, func


def count_if(condition):
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


def sum_if(condition, column):
    return func.coalesce(func.sum(case((condition, column), else_=0)), 0)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like the UI does (2.5 -> 3), not banker's rounding."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def percent(part: float, whole: float) -> int:
    if not whole:
        return 0
    return int(round_half_up(part / whole * 100))
