"""PostgREST-backed store for a hosted temple database.

Reads the ``temples`` and ``temple_simulation`` tables over the PostgREST
HTTP interface.  Single-row reads request the object representation; when
no row matches, PostgREST answers 406 with error code ``PGRST116``, which
is mapped to ABSENT.  Every other HTTP or transport failure becomes a FAULT
(single-row reads) or a StoreError (listing).
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from temple_crowd.store.base import (
    FetchResult,
    Row,
    SimulationRecordStore,
    StoreError,
    TempleStore,
)

logger = logging.getLogger(__name__)

NO_ROWS_CODE = "PGRST116"
_SINGLE_OBJECT = "application/vnd.pgrst.object+json"


class PostgrestStore(TempleStore, SimulationRecordStore):
    """Async PostgREST client serving temple rows and simulation records.

    Args:
        base_url: Project URL, e.g. ``https://xyz.supabase.co``.
        api_key: Anonymous or service API key sent as ``apikey`` and bearer.
        timeout: Per-request timeout in seconds.
        client: Optional pre-built client (tests inject a MockTransport).
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("PostgREST base_url must be configured")
        self._client = client or httpx.AsyncClient(
            base_url=f"{base_url.rstrip('/')}/rest/v1",
            headers={"apikey": api_key, "Authorization": f"Bearer {api_key}"},
            timeout=timeout,
        )

    @property
    def backend_name(self) -> str:
        return "postgrest"

    async def aclose(self) -> None:
        await self._client.aclose()

    # ── Reads ────────────────────────────────────────────────────────────

    async def fetch_temple(self, temple_id: str) -> FetchResult[Row]:
        return await self._fetch_single("/temples", {"select": "*", "id": f"eq.{temple_id}"})

    async def fetch_simulation_record(self, temple_id: str, iso_date: str) -> FetchResult[Row]:
        return await self._fetch_single(
            "/temple_simulation",
            {"select": "*", "temple_id": f"eq.{temple_id}", "date": f"eq.{iso_date}"},
        )

    async def list_temples(self) -> list[Row]:
        try:
            response = await self._client.get("/temples", params={"select": "*", "order": "name.asc"})
            response.raise_for_status()
            rows = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise StoreError(f"Failed to list temples: {exc}") from exc
        if not isinstance(rows, list):
            raise StoreError("Unexpected temple listing payload")
        return rows

    # ── Internals ────────────────────────────────────────────────────────

    async def _fetch_single(self, path: str, params: dict[str, str]) -> FetchResult[Row]:
        try:
            response = await self._client.get(path, params=params, headers={"Accept": _SINGLE_OBJECT})
        except httpx.HTTPError as exc:
            logger.debug("Transport error on %s: %s", path, exc)
            return FetchResult.fault(exc)

        if response.status_code == 406 and _error_code(response) == NO_ROWS_CODE:
            return FetchResult.absent()

        try:
            response.raise_for_status()
            row = response.json()
        except (httpx.HTTPStatusError, ValueError) as exc:
            return FetchResult.fault(exc)

        if not isinstance(row, dict):
            return FetchResult.fault(ValueError(f"Expected a single row from {path}"))
        return FetchResult.found(row)


def _error_code(response: httpx.Response) -> str | None:
    try:
        body: Any = response.json()
    except ValueError:
        return None
    return body.get("code") if isinstance(body, dict) else None
