"""Wait-time estimator: queue wait from occupancy and slot throughput.

    slots_needed = current_visitors / (capacity_per_slot * lanes)
    minutes      = max(0, round(slots_needed * slot_duration_minutes))

Tiers (strict): minutes > 60 → high, minutes > 30 → medium, else low.

Pure functions.  Insufficient input yields ``None``, never an exception.
"""

from __future__ import annotations

import math
from typing import Optional

from temple_crowd.domain.enums import WaitLevel
from temple_crowd.domain.snapshot import CrowdSnapshot
from temple_crowd.domain.temple import DEFAULT_SLOT_DURATION_MINUTES
from temple_crowd.domain.wait import WaitEstimate
from temple_crowd.foundation.numeric import round_half_up

DEFAULT_LANES = 2
HIGH_WAIT_MINUTES = 60
MEDIUM_WAIT_MINUTES = 30


def classify_wait(minutes: int) -> WaitLevel:
    if minutes > HIGH_WAIT_MINUTES:
        return WaitLevel.HIGH
    if minutes > MEDIUM_WAIT_MINUTES:
        return WaitLevel.MEDIUM
    return WaitLevel.LOW


def estimate_wait(
    current_visitors: float,
    capacity_per_slot: Optional[float],
    slot_duration_minutes: float = DEFAULT_SLOT_DURATION_MINUTES,
    lanes: int = DEFAULT_LANES,
) -> Optional[WaitEstimate]:
    """Estimate the queue wait for *current_visitors*.

    Returns None when *capacity_per_slot* is absent or not positive, or when
    *lanes* leaves no positive throughput, or when the wait is too large to
    represent.
    """
    if not capacity_per_slot or capacity_per_slot <= 0:
        return None
    throughput = capacity_per_slot * lanes
    if throughput <= 0:
        return None

    raw_minutes = current_visitors / throughput * slot_duration_minutes
    if not math.isfinite(raw_minutes):
        return None
    minutes = max(0, round_half_up(raw_minutes))
    return WaitEstimate(minutes=minutes, level=classify_wait(minutes))


def estimate_for_snapshot(snapshot: CrowdSnapshot, lanes: int = DEFAULT_LANES) -> Optional[WaitEstimate]:
    """Estimate using the occupancy, capacity and slot length in *snapshot*."""
    return estimate_wait(
        current_visitors=snapshot.current_status.occupancy,
        capacity_per_slot=snapshot.temple.capacity.max_visitors_per_slot,
        slot_duration_minutes=snapshot.temple.timings.slot_duration or DEFAULT_SLOT_DURATION_MINUTES,
        lanes=lanes,
    )
