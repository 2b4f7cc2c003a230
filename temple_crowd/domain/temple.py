"""Temple metadata: the read-only input to crowd synthesis.

Temple rows are owned by the external store.  ``Temple.from_row`` maps a raw
row onto this model, filling every missing sub-object with its default so
downstream code never has to re-check for absent fields.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import Field, field_validator

from temple_crowd.domain.base import CamelModel

DEFAULT_SLOT_DURATION_MINUTES = 30


# ── Location ─────────────────────────────────────────────────────────────────

class Coordinates(CamelModel):
    latitude: float
    longitude: float


# Central-India placeholder used when a temple has no geocode.
DEFAULT_COORDINATES = Coordinates(latitude=21.0, longitude=72.0)


class TempleLocation(CamelModel):
    city: str = ""
    state: str = ""
    coordinates: Optional[Coordinates] = None


# ── Timings & Capacity ───────────────────────────────────────────────────────

class TempleTimings(CamelModel):
    open_time: Optional[str] = None
    close_time: Optional[str] = None
    slot_duration: int = Field(
        default=DEFAULT_SLOT_DURATION_MINUTES,
        description="Length of one visiting slot in minutes",
    )

    @field_validator("slot_duration", mode="before")
    @classmethod
    def slot_duration_positive(cls, v: Any) -> int:
        # Absent, zero or malformed durations fall back to the default
        try:
            minutes = int(v)
        except (TypeError, ValueError):
            return DEFAULT_SLOT_DURATION_MINUTES
        return minutes if minutes > 0 else DEFAULT_SLOT_DURATION_MINUTES


class TempleCapacity(CamelModel):
    max_visitors_per_slot: int = Field(default=0, ge=0)
    total_daily_capacity: int = Field(default=0, ge=0)

    @field_validator("max_visitors_per_slot", "total_daily_capacity", mode="before")
    @classmethod
    def none_is_zero(cls, v: Any) -> Any:
        return 0 if v is None else v


# ── Facilities & Contacts ────────────────────────────────────────────────────

class Facility(CamelModel):
    type: str = "other"
    name: str = ""
    coordinates: Optional[Coordinates] = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Facility":
        """Map a stored facility entry, accepting ``lat``/``lng`` shorthand."""
        kind = row.get("type") or "other"
        coordinates = row.get("coordinates")
        if coordinates is None and row.get("lat") is not None and row.get("lng") is not None:
            coordinates = {"latitude": row["lat"], "longitude": row["lng"]}
        return cls(
            type=kind,
            name=row.get("name") or kind,
            coordinates=coordinates,
        )


class EmergencyContact(CamelModel):
    name: str = ""
    phone: str = ""


# ── Temple ───────────────────────────────────────────────────────────────────

class Temple(CamelModel):
    """A temple as consumed by the crowd engine.

    Every sub-object is always present; defaults are filled in at the
    boundary by ``from_row``.
    """

    id: str = Field(..., min_length=1)
    name: str = ""
    description: str = ""
    location: TempleLocation = Field(default_factory=TempleLocation)
    timings: TempleTimings = Field(default_factory=TempleTimings)
    capacity: TempleCapacity = Field(default_factory=TempleCapacity)
    facilities: list[Facility] = Field(default_factory=list)
    rules: list[str] = Field(default_factory=list)
    emergency_contacts: list[EmergencyContact] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    external_sources: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Temple":
        """Map a raw store row onto a Temple, substituting defaults for gaps.

        Raises:
            ValueError: If the row has no identifier or is otherwise invalid.
        """
        return cls(
            id=str(row.get("id") or row.get("_id") or ""),
            name=row.get("name") or "",
            description=row.get("description") or "",
            location=row.get("location") or {},
            timings=row.get("timings") or {},
            capacity=row.get("capacity") or {},
            facilities=[Facility.from_row(f) for f in row.get("facilities") or []],
            rules=row.get("rules") or [],
            emergency_contacts=row.get("emergencyContacts") or row.get("emergency_contacts") or [],
            images=row.get("images") or [],
            external_sources=row.get("externalSources") or row.get("external_sources") or {},
        )

    @property
    def coordinates(self) -> Coordinates:
        """Location coordinates, or the placeholder when none are recorded."""
        return self.location.coordinates or DEFAULT_COORDINATES

    def matches(self, query: str) -> bool:
        """Case-insensitive match of *query* against name, city and state."""
        q = query.strip().lower()
        if not q:
            return False
        return (
            q in self.name.lower()
            or q in self.location.city.lower()
            or q in self.location.state.lower()
        )
