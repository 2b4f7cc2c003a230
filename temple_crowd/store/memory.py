"""In-memory temple and simulation stores with async-safe access.

Design notes:
    - An asyncio.Lock guards all mutations so concurrent request handlers
      never observe a half-written row.
    - Rows are stored as plain dicts, exactly as a hosted table would return
      them, and copied on the way out.
    - ``DEMO_TEMPLES`` seeds the store for local runs and is the fallback
      listing when a remote store is unreachable.
"""

from __future__ import annotations

import asyncio
import copy
import logging

from temple_crowd.store.base import (
    FetchResult,
    Row,
    SimulationRecordStore,
    TempleStore,
)

logger = logging.getLogger(__name__)


DEMO_TEMPLES: list[Row] = [
    {"id": "akshardham-d", "name": "Akshardham Temple (Delhi)", "location": {"city": "Delhi", "state": "Delhi"}},
    {"id": "somnath", "name": "Somnath Temple", "location": {"city": "Prabhas Patan", "state": "Gujarat"}},
    {"id": "dwarka", "name": "Dwarkadhish Temple", "location": {"city": "Dwarka", "state": "Gujarat"}},
    {"id": "ambaji", "name": "Ambaji Temple", "location": {"city": "Ambaji", "state": "Gujarat"}},
    {"id": "pavagadh", "name": "Pavagadh Mahakali Temple", "location": {"city": "Pavagadh", "state": "Gujarat"}},
    {"id": "kashi", "name": "Kashi Vishwanath Temple", "location": {"city": "Varanasi", "state": "Uttar Pradesh"}},
    {"id": "ttd", "name": "Tirumala Tirupati (TTD)", "location": {"city": "Tirupati", "state": "Andhra Pradesh"}},
    {"id": "shirdi", "name": "Shirdi Sai Baba Temple", "location": {"city": "Shirdi", "state": "Maharashtra"}},
    {"id": "vaishno", "name": "Vaishno Devi Shrine", "location": {"city": "Katra", "state": "Jammu and Kashmir"}},
    {"id": "jagannath", "name": "Jagannath Temple (Puri)", "location": {"city": "Puri", "state": "Odisha"}},
    {"id": "golden", "name": "Golden Temple (Amritsar)", "location": {"city": "Amritsar", "state": "Punjab"}},
    {"id": "siddhi", "name": "Siddhivinayak (Mumbai)", "location": {"city": "Mumbai", "state": "Maharashtra"}},
    {"id": "meenakshi", "name": "Meenakshi Amman (Madurai)", "location": {"city": "Madurai", "state": "Tamil Nadu"}},
    {"id": "kamakhya", "name": "Kamakhya Temple (Assam)", "location": {"city": "Guwahati", "state": "Assam"}},
]


class InMemoryTempleStore(TempleStore, SimulationRecordStore):
    """Dict-backed store serving both temple rows and simulation records.

    Args:
        temples: Initial temple rows.  Defaults to an empty store; pass
            ``DEMO_TEMPLES`` for a populated local setup.
    """

    def __init__(self, temples: list[Row] | None = None) -> None:
        self._lock = asyncio.Lock()
        self._temples: dict[str, Row] = {}
        self._records: dict[tuple[str, str], Row] = {}
        for row in temples or []:
            self._temples[str(row["id"])] = copy.deepcopy(row)

    @property
    def backend_name(self) -> str:
        return "memory"

    # ── Writes (seeding / tests) ─────────────────────────────────────────

    async def put_temple(self, row: Row) -> None:
        async with self._lock:
            self._temples[str(row["id"])] = copy.deepcopy(row)

    async def put_simulation_record(self, temple_id: str, iso_date: str, record: Row) -> None:
        async with self._lock:
            self._records[(temple_id, iso_date)] = copy.deepcopy(record)
        logger.debug("Stored simulation record for %s on %s", temple_id, iso_date)

    # ── Reads ────────────────────────────────────────────────────────────

    async def fetch_temple(self, temple_id: str) -> FetchResult[Row]:
        async with self._lock:
            row = self._temples.get(temple_id)
        if row is None:
            return FetchResult.absent()
        return FetchResult.found(copy.deepcopy(row))

    async def list_temples(self) -> list[Row]:
        async with self._lock:
            rows = [copy.deepcopy(r) for r in self._temples.values()]
        return sorted(rows, key=lambda r: r.get("name") or "")

    async def fetch_simulation_record(self, temple_id: str, iso_date: str) -> FetchResult[Row]:
        async with self._lock:
            record = self._records.get((temple_id, iso_date))
        if record is None:
            return FetchResult.absent()
        return FetchResult.found(copy.deepcopy(record))
