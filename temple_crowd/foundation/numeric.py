"""Numeric helpers shared by the synthesis and estimation code."""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always rounding towards +inf.

    Python's built-in round() uses banker's rounding (round(12.5) == 12);
    dashboard figures use the conventional half-up rule instead.
    """
    return int(math.floor(value + 0.5))


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))
