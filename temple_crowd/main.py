"""temple-crowd: crowd snapshots, wait estimates and the site assistant.

This is the application entry point.  It wires the temple/simulation store,
SnapshotProvider, TempleDirectory, AssistantService and the HTTP/WebSocket
endpoints together.
"""

from __future__ import annotations

import logging
import random
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from temple_crowd.api.assistant import create_assistant_router
from temple_crowd.api.simulation import create_simulation_router
from temple_crowd.api.ws_simulation import create_simulation_ws_router
from temple_crowd.assistant.service import AssistantService
from temple_crowd.config import settings
from temple_crowd.core.snapshot_provider import SnapshotProvider
from temple_crowd.core.temple_directory import TempleDirectory
from temple_crowd.store.base import SimulationRecordStore, TempleStore
from temple_crowd.store.memory import DEMO_TEMPLES, InMemoryTempleStore
from temple_crowd.store.postgrest import PostgrestStore

# ── Logging ──────────────────────────────────────────────────────────────────

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)

logger = logging.getLogger(__name__)


# ── Store ────────────────────────────────────────────────────────────────────

def build_store() -> TempleStore:
    """Create the configured store backend (serves temples and records)."""
    if settings.store_backend == "postgrest":
        logger.info("Using PostgREST store at %s", settings.postgrest_url)
        return PostgrestStore(
            base_url=settings.postgrest_url,
            api_key=settings.postgrest_api_key,
            timeout=settings.postgrest_timeout_seconds,
        )
    if settings.store_backend != "memory":
        raise ValueError(f"Unknown store backend: {settings.store_backend!r}")
    return InMemoryTempleStore(DEMO_TEMPLES)


# ── App ──────────────────────────────────────────────────────────────────────

def create_app(
    temple_store: Optional[TempleStore] = None,
    record_store: Optional[SimulationRecordStore] = None,
    assistant: Optional[AssistantService] = None,
    rng: Optional[random.Random] = None,
) -> FastAPI:
    """Assemble the FastAPI application.

    Both stores default to the configured backend; a single store object
    usually serves both roles.
    """
    temples = temple_store or build_store()
    records = record_store or temples
    if not isinstance(records, SimulationRecordStore):
        raise TypeError("record_store is required when the temple store has no simulation records")

    provider = SnapshotProvider(temples, records, rng=rng)
    directory = TempleDirectory(temples, search_limit=settings.temple_search_limit)
    assistant = assistant or AssistantService()

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        yield
        stores = [temples] if records is temples else [temples, records]
        for store in stores:
            if isinstance(store, PostgrestStore):
                await store.aclose()

    app = FastAPI(
        title=settings.app_name,
        description="Temple crowd snapshots, wait-time estimates and site assistant",
        version="0.1.0",
        lifespan=lifespan,
    )

    # ── Routes ───────────────────────────────────────────────────────────

    app.include_router(create_simulation_router(provider, directory, default_lanes=settings.default_lanes))
    app.include_router(create_simulation_ws_router(
        provider,
        interval_seconds=settings.dashboard_interval_seconds,
        default_lanes=settings.default_lanes,
    ))
    app.include_router(create_assistant_router(assistant))

    # ── Health ───────────────────────────────────────────────────────────

    @app.get("/health")
    async def health() -> dict:
        temples_listed = await directory.list_temples()
        return {
            "status": "ok",
            "store_backend": temples.backend_name,
            "temples": len(temples_listed),
        }

    return app


app = create_app()


def run() -> None:
    """Serve the app with uvicorn (``temple-crowd`` console script)."""
    import uvicorn

    uvicorn.run(
        "temple_crowd.main:app",
        host="0.0.0.0",
        port=8000,
        log_level=settings.log_level.lower(),
        reload=settings.debug,
    )
