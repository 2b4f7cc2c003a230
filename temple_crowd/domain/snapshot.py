"""CrowdSnapshot: an immutable point-in-time crowd observation of a temple.

A snapshot is either normalised from a stored simulation record or
synthesised from temple capacity.  It is recomputed on every request and
never mutated after construction.
"""

from __future__ import annotations

from typing import Optional, Union

from pydantic import Field, NonNegativeFloat, NonNegativeInt

from temple_crowd.domain.base import CamelModel
from temple_crowd.domain.enums import DensityLevel, ImpactLevel
from temple_crowd.domain.temple import (
    Coordinates,
    DEFAULT_COORDINATES,
    Facility,
    Temple,
    TempleCapacity,
    TempleTimings,
)


# Stored records may carry fractional counts; they pass through unchanged.
Number = Union[int, float]


class SnapshotLocation(CamelModel):
    coordinates: Coordinates = DEFAULT_COORDINATES


class SnapshotTemple(CamelModel):
    """The slice of temple metadata echoed into every snapshot."""

    location: SnapshotLocation = Field(default_factory=SnapshotLocation)
    capacity: TempleCapacity = Field(default_factory=TempleCapacity)
    timings: TempleTimings = Field(default_factory=TempleTimings)

    @classmethod
    def from_temple(cls, temple: Temple) -> "SnapshotTemple":
        return cls(
            location=SnapshotLocation(coordinates=temple.coordinates),
            capacity=temple.capacity,
            timings=temple.timings,
        )


class CurrentStatus(CamelModel):
    # The synthetic daily curve dips below zero around midday
    expected_visitors: Number = 0
    actual_visitors: Optional[Union[NonNegativeInt, NonNegativeFloat]] = None

    @property
    def occupancy(self) -> Number:
        """Authoritative current occupancy: actual, else expected."""
        if self.actual_visitors is not None:
            return self.actual_visitors
        return self.expected_visitors


class Area(CamelModel):
    name: str
    occupancy: Number = 0
    capacity: Number = 0
    occupancy_percentage: Number = 0
    # Synthesis writes a DensityLevel value; stored records may use any label
    density: str = DensityLevel.LOW.value


class Alert(CamelModel):
    type: str = ""
    message: str = ""


class WeatherImpact(CamelModel):
    condition: str = "Clear"
    temperature: float = 30
    impact_level: str = ImpactLevel.LOW.value


class HourlyPoint(CamelModel):
    hour: int = Field(..., ge=0, le=23)
    expected_visitors: Number = 0
    actual_visitors: Optional[Number] = None


class CrowdSnapshot(CamelModel):
    """Canonical crowd-status snapshot for one temple on one date.

    Every sub-object is always present; a snapshot is never partially
    populated.
    """

    temple: SnapshotTemple
    current_status: CurrentStatus = Field(default_factory=CurrentStatus)
    areas: list[Area] = Field(default_factory=list)
    facilities: list[Facility] = Field(default_factory=list)
    alerts: list[Alert] = Field(default_factory=list)
    weather_impact: WeatherImpact = Field(default_factory=WeatherImpact)
    hourly_data: list[HourlyPoint] = Field(default_factory=list)
    synthesized: bool = Field(
        default=False,
        description="True when generated from capacity rather than a stored record",
    )
