"""Crowd synthesis: builds a plausible snapshot from temple capacity alone.

Used when no stored simulation record exists for a (temple, date) pair.

Hourly curve:
    base        = max(50, round(cap * 0.6))
    expected[h] = round(base * (0.6 + 0.8 * sin(pi * (h + 6) / 12)))

    A single smooth cycle: maximum at hour 0, minimum at hour 12.  Around
    the minimum (hours 10-14) the curve is negative; values are kept as
    computed.  The floor of 50 keeps the curve visible for temples with no
    configured capacity.

Current occupancy:
    actual = clamp(round(exp * 0.9 + jitter * exp), 0, cap or exp)
    where jitter is uniform in [-0.1, 0.1).

Areas:
    Six fixed zones; zone i has capacity 50 + 30i and occupancy drawn
    uniformly from [0.5, 1.5) of capacity, so zones may be overcrowded.

All randomness comes from the injected ``random.Random`` so seeded runs are
reproducible.  Rounding is half-up throughout.
"""

from __future__ import annotations

import math
import random
from datetime import datetime

from temple_crowd.domain.enums import DensityLevel
from temple_crowd.domain.snapshot import (
    Area,
    CrowdSnapshot,
    CurrentStatus,
    HourlyPoint,
    SnapshotTemple,
    WeatherImpact,
)
from temple_crowd.domain.temple import Temple
from temple_crowd.foundation.numeric import clamp, round_half_up

AREA_NAMES: tuple[str, ...] = (
    "Main Hall",
    "Queue Lane A",
    "Queue Lane B",
    "Prasad Counter",
    "Entry Gate",
    "Exit Gate",
)

BASE_FLOOR = 50
CAPACITY_RATIO = 0.6
AREA_BASE_CAPACITY = 50
AREA_CAPACITY_STEP = 30


def classify_density(occupancy_percentage: float) -> DensityLevel:
    """Map an occupancy percentage to its density tier (strict thresholds)."""
    if occupancy_percentage > 90:
        return DensityLevel.CRITICAL
    if occupancy_percentage > 70:
        return DensityLevel.HIGH
    if occupancy_percentage > 40:
        return DensityLevel.MEDIUM
    return DensityLevel.LOW


def base_visitors(max_visitors_per_slot: int) -> int:
    return max(BASE_FLOOR, round_half_up(max_visitors_per_slot * CAPACITY_RATIO))


def hourly_curve(base: int) -> list[HourlyPoint]:
    """Expected visitors for each hour of the day, 0 through 23."""
    return [
        HourlyPoint(
            hour=h,
            expected_visitors=round_half_up(base * (0.6 + 0.8 * math.sin((math.pi * (h + 6)) / 12))),
        )
        for h in range(24)
    ]


def jittered_actual(current_expected: int, cap: int, rng: random.Random) -> int:
    """Current occupancy: 90% of expected plus up to +/-10% noise, clamped.

    The upper bound is *cap*, or *current_expected* itself when the temple
    has no configured capacity.
    """
    noise = (rng.random() * 0.2 - 0.1) * current_expected
    raw = round_half_up(current_expected * 0.9 + noise)
    return int(clamp(raw, 0, cap or current_expected))


def synthesize_areas(rng: random.Random) -> list[Area]:
    areas = []
    for i, name in enumerate(AREA_NAMES):
        capacity = AREA_BASE_CAPACITY + i * AREA_CAPACITY_STEP
        occupancy = round_half_up(capacity * (0.5 + rng.random()))
        percentage = round_half_up(occupancy / capacity * 100)
        areas.append(
            Area(
                name=name,
                occupancy=occupancy,
                capacity=capacity,
                occupancy_percentage=percentage,
                density=classify_density(percentage).value,
            )
        )
    return areas


def synthesize_snapshot(temple: Temple, *, rng: random.Random, now: datetime) -> CrowdSnapshot:
    """Build a full snapshot for *temple* at local time *now*."""
    cap = temple.capacity.max_visitors_per_slot
    base = base_visitors(cap)
    hourly = hourly_curve(base)

    hour = now.hour
    current_expected = hourly[hour].expected_visitors if 0 <= hour < len(hourly) else base
    actual = jittered_actual(current_expected, cap, rng)

    return CrowdSnapshot(
        temple=SnapshotTemple.from_temple(temple),
        current_status=CurrentStatus(expected_visitors=current_expected, actual_visitors=actual),
        areas=synthesize_areas(rng),
        facilities=list(temple.facilities),
        alerts=[],
        weather_impact=WeatherImpact(),
        hourly_data=hourly,
        synthesized=True,
    )
