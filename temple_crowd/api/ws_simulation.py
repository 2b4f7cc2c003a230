"""Simulation WebSocket: pushes fresh crowd snapshots on a fixed interval.

Path: /ws/temples/{temple_id}/simulation[?date=YYYY-MM-DD&lanes=N]

The server sends a ``simulation_snapshot`` frame immediately on connect and
then once every interval.  Clients may send "ping" at any time and get
"pong" back.  An unknown temple gets an ``error`` frame and close code 4404.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect

from temple_crowd.core.snapshot_provider import SnapshotProvider, TempleNotFoundError
from temple_crowd.core.wait_estimator import estimate_for_snapshot
from temple_crowd.domain.snapshot import CrowdSnapshot
from temple_crowd.foundation.clock import local_today

logger = logging.getLogger(__name__)

TEMPLE_NOT_FOUND_CLOSE_CODE = 4404


def snapshot_frame(temple_id: str, iso_date: str, snapshot: CrowdSnapshot, lanes: int) -> dict[str, Any]:
    estimate = estimate_for_snapshot(snapshot, lanes=lanes)
    return {
        "type": "simulation_snapshot",
        "templeId": temple_id,
        "date": iso_date,
        "snapshot": snapshot.to_wire(),
        "waitEstimate": estimate.to_wire() if estimate else None,
    }


async def _idle_until_next_push(websocket: WebSocket, interval_seconds: float) -> None:
    """Answer pings until the interval elapses.  Raises WebSocketDisconnect.

    Binary frames are ignored.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + interval_seconds
    while True:
        remaining = deadline - loop.time()
        if remaining <= 0:
            return
        try:
            message = await asyncio.wait_for(websocket.receive(), timeout=remaining)
        except asyncio.TimeoutError:
            return
        if message["type"] == "websocket.disconnect":
            raise WebSocketDisconnect(message.get("code", 1000))
        text = message.get("text")
        if text is not None and text.strip().lower() == "ping":
            await websocket.send_text("pong")


def create_simulation_ws_router(
    provider: SnapshotProvider,
    interval_seconds: float = 10.0,
    default_lanes: int = 2,
) -> APIRouter:
    """Factory that creates the snapshot push endpoint."""

    router = APIRouter()

    @router.websocket("/ws/temples/{temple_id}/simulation")
    async def simulation_ws(
        websocket: WebSocket,
        temple_id: str,
        day: Optional[date] = Query(default=None, alias="date"),
        lanes: int = Query(default=default_lanes, ge=1),
    ) -> None:
        await websocket.accept()
        logger.info("Simulation client connected for temple %s", temple_id)
        try:
            while True:
                iso_date = (day or local_today()).isoformat()
                try:
                    snapshot = await provider.get_snapshot(temple_id, iso_date)
                except TempleNotFoundError as exc:
                    await websocket.send_json({"type": "error", "detail": str(exc)})
                    await websocket.close(code=TEMPLE_NOT_FOUND_CLOSE_CODE)
                    return

                await websocket.send_json(snapshot_frame(temple_id, iso_date, snapshot, lanes))
                await _idle_until_next_push(websocket, interval_seconds)
        except WebSocketDisconnect:
            logger.info("Simulation client disconnected from temple %s", temple_id)

    return router
