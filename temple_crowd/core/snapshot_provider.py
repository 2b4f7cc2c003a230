"""SnapshotProvider: resolves a crowd snapshot for (temple, date).

Pipeline:
    1. Resolve temple metadata.  Failure is fatal: TempleNotFoundError.
    2. Fetch the stored simulation record.
         FOUND  → normalise it into a CrowdSnapshot (non-object records are
                  synthesised instead).
         ABSENT → synthesise from temple capacity.
         FAULT  → log a warning, then synthesise as if ABSENT.
    3. Return the snapshot.  Nothing is written back to storage.

A usable snapshot is always returned once temple metadata exists; storage
errors on the record path are never surfaced to callers.
"""

from __future__ import annotations

import logging
import random
from datetime import datetime
from typing import Any, Callable, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from temple_crowd.core.synthesis import synthesize_snapshot
from temple_crowd.domain.snapshot import (
    Alert,
    Area,
    CrowdSnapshot,
    CurrentStatus,
    HourlyPoint,
    SnapshotLocation,
    SnapshotTemple,
    WeatherImpact,
)
from temple_crowd.domain.temple import (
    Coordinates,
    Facility,
    Temple,
    TempleCapacity,
    TempleTimings,
)
from temple_crowd.foundation.clock import local_now
from temple_crowd.store.base import (
    FetchStatus,
    Row,
    SimulationRecordStore,
    TempleStore,
)

logger = logging.getLogger(__name__)

_M = TypeVar("_M", bound=BaseModel)


class TempleNotFoundError(Exception):
    """Raised when temple metadata cannot be resolved for a snapshot."""

    def __init__(self, temple_id: str, reason: str = "not found") -> None:
        self.temple_id = temple_id
        self.reason = reason
        super().__init__(f"Temple '{temple_id}' could not be loaded: {reason}")


def _field_key(name: Any) -> str:
    return str(name).replace("_", "").lower()


def _lenient(model: type[_M], data: Any) -> Optional[_M]:
    """Validate *data* as *model*, dropping fields that fail so defaults apply.

    Returns None when *data* is not a mapping or is still invalid without
    its bad fields (a required field is missing or unusable).
    """
    if not isinstance(data, dict):
        return None
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        bad = {_field_key(err["loc"][0]) for err in exc.errors() if err["loc"]}
    kept = {key: value for key, value in data.items() if _field_key(key) not in bad}
    try:
        return model.model_validate(kept)
    except ValidationError:
        return None


def _lenient_items(model: type[_M], items: Any) -> list[_M]:
    if not isinstance(items, list):
        return []
    parsed = (_lenient(model, item) for item in items)
    return [item for item in parsed if item is not None]


def _facilities(items: Any) -> list[Facility]:
    facilities = []
    for item in items if isinstance(items, list) else []:
        if not isinstance(item, dict):
            continue
        try:
            facilities.append(Facility.from_row(item))
        except ValidationError:
            logger.debug("Skipping unusable stored facility %r", item)
    return facilities


def normalize_record(record: Row, temple: Temple) -> CrowdSnapshot:
    """Map a stored simulation record onto the canonical snapshot shape.

    Stored values pass through as they are.  Missing or unusable fields fall
    back to values derived from *temple* or to the model defaults, and list
    entries that cannot be read at all are skipped.  Deterministic: the same
    inputs give an equal snapshot.
    """
    fallback = SnapshotTemple.from_temple(temple)
    stored_temple = record.get("temple")
    if not isinstance(stored_temple, dict):
        stored_temple = {}
    stored_location = stored_temple.get("location")
    if not isinstance(stored_location, dict):
        stored_location = {}
    snapshot_temple = SnapshotTemple(
        location=SnapshotLocation(
            coordinates=_lenient(Coordinates, stored_location.get("coordinates")) or temple.coordinates,
        ),
        capacity=(stored_temple.get("capacity") and _lenient(TempleCapacity, stored_temple["capacity"]))
        or fallback.capacity,
        timings=(stored_temple.get("timings") and _lenient(TempleTimings, stored_temple["timings"]))
        or fallback.timings,
    )

    current = record.get("current_status")
    return CrowdSnapshot(
        temple=snapshot_temple,
        current_status=(current and _lenient(CurrentStatus, current))
        or CurrentStatus(expected_visitors=0, actual_visitors=0),
        areas=_lenient_items(Area, record.get("areas")),
        facilities=_facilities(record.get("facilities")),
        alerts=_lenient_items(Alert, record.get("alerts")),
        weather_impact=_lenient(WeatherImpact, record.get("weather_impact")) or WeatherImpact(),
        hourly_data=_lenient_items(HourlyPoint, record.get("hourly_data")),
        synthesized=False,
    )


class SnapshotProvider:
    """Produces crowd snapshots from a temple store and a record store.

    Args:
        temples: Source of temple metadata.
        records: Source of stored simulation records.
        rng: Random source for synthesis.  Inject a seeded instance for
             reproducible output.
        clock: Returns local "now"; its hour selects the current bucket.
    """

    def __init__(
        self,
        temples: TempleStore,
        records: SimulationRecordStore,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = local_now,
    ) -> None:
        self._temples = temples
        self._records = records
        self._rng = rng or random.Random()
        self._clock = clock

    async def get_temple(self, temple_id: str) -> Temple:
        """Resolve and map temple metadata.

        Raises:
            TempleNotFoundError: If the temple is absent, the store faulted,
                or the row cannot be mapped.
        """
        result = await self._temples.fetch_temple(temple_id)
        if result.status is FetchStatus.ABSENT:
            raise TempleNotFoundError(temple_id)
        if result.status is FetchStatus.FAULT:
            logger.error("Failed to fetch details for temple %s: %s", temple_id, result.error)
            raise TempleNotFoundError(temple_id, reason=str(result.error)) from result.error
        try:
            return Temple.from_row(result.value or {})
        except ValidationError as exc:
            raise TempleNotFoundError(temple_id, reason="invalid temple row") from exc

    async def get_snapshot(self, temple_id: str, iso_date: str) -> CrowdSnapshot:
        """Return the snapshot for *temple_id* on *iso_date* (``YYYY-MM-DD``)."""
        temple = await self.get_temple(temple_id)

        result = await self._records.fetch_simulation_record(temple_id, iso_date)
        if result.status is FetchStatus.FAULT:
            logger.warning(
                "Error fetching simulation data for temple %s, date %s: %s, synthesising",
                temple_id, iso_date, result.error,
            )
        elif result.is_found:
            if isinstance(result.value, dict):
                return normalize_record(result.value, temple)
            logger.warning(
                "Stored simulation record for %s on %s is not an object, synthesising",
                temple_id, iso_date,
            )

        logger.debug("Synthesising snapshot for temple %s on %s", temple_id, iso_date)
        return synthesize_snapshot(temple, rng=self._rng, now=self._clock())
