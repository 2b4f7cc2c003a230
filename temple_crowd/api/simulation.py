"""REST endpoints for temples, crowd snapshots and wait estimates.

Paths:
    GET  /api/temples                          list / search temples
    GET  /api/temples/{id}                     temple metadata
    GET  /api/temples/{id}/simulation          crowd snapshot for a date
    GET  /api/temples/{id}/wait-estimate       snapshot-derived wait estimate
    POST /api/wait-estimate                    direct estimator call
"""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Query

from temple_crowd.core.snapshot_provider import SnapshotProvider, TempleNotFoundError
from temple_crowd.core.temple_directory import TempleDirectory
from temple_crowd.core.wait_estimator import estimate_for_snapshot, estimate_wait
from temple_crowd.foundation.clock import local_today
from temple_crowd.models.estimate import WaitEstimateRequest, WaitEstimateResponse


def create_simulation_router(
    provider: SnapshotProvider,
    directory: TempleDirectory,
    default_lanes: int = 2,
) -> APIRouter:
    """Factory that wires the simulation endpoints to a provider + directory."""

    router = APIRouter(prefix="/api", tags=["simulation"])

    def _iso(day: Optional[date]) -> str:
        return (day or local_today()).isoformat()

    @router.get("/temples")
    async def list_temples(q: Optional[str] = None) -> dict[str, Any]:
        """All temples ordered by name, or those matching ``q``."""
        temples = await directory.search(q) if q else await directory.list_temples()
        return {"temples": [t.to_wire() for t in temples], "count": len(temples)}

    @router.get("/temples/{temple_id}")
    async def temple_details(temple_id: str) -> dict[str, Any]:
        try:
            temple = await provider.get_temple(temple_id)
        except TempleNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return temple.to_wire()

    @router.get("/temples/{temple_id}/simulation")
    async def temple_simulation(
        temple_id: str,
        day: Optional[date] = Query(default=None, alias="date"),
    ) -> dict[str, Any]:
        """Crowd snapshot for ``date`` (defaults to today)."""
        try:
            snapshot = await provider.get_snapshot(temple_id, _iso(day))
        except TempleNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return snapshot.to_wire()

    @router.get("/temples/{temple_id}/wait-estimate")
    async def temple_wait_estimate(
        temple_id: str,
        day: Optional[date] = Query(default=None, alias="date"),
        lanes: int = Query(default=default_lanes, ge=1),
    ) -> dict[str, Any]:
        iso_date = _iso(day)
        try:
            snapshot = await provider.get_snapshot(temple_id, iso_date)
        except TempleNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc

        response = WaitEstimateResponse(
            temple_id=temple_id,
            date=iso_date,
            current_visitors=snapshot.current_status.occupancy,
            estimate=estimate_for_snapshot(snapshot, lanes=lanes),
        )
        return response.model_dump(mode="json", by_alias=True)

    @router.post("/wait-estimate")
    async def direct_wait_estimate(body: WaitEstimateRequest) -> dict[str, Any]:
        estimate = estimate_wait(
            current_visitors=body.current_visitors,
            capacity_per_slot=body.capacity_per_slot,
            slot_duration_minutes=body.slot_duration_minutes,
            lanes=body.lanes,
        )
        response = WaitEstimateResponse(current_visitors=body.current_visitors, estimate=estimate)
        return response.model_dump(mode="json", by_alias=True)

    return router
