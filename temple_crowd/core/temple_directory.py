"""TempleDirectory: temple listing and search for the dashboard picker."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from temple_crowd.domain.temple import Temple
from temple_crowd.store.base import Row, StoreError, TempleStore
from temple_crowd.store.memory import DEMO_TEMPLES

logger = logging.getLogger(__name__)


class TempleDirectory:
    """Lists temples from the store, falling back to the demo list on failure.

    Args:
        store: Temple store to read from.
        search_limit: Maximum number of results returned by ``search``.
    """

    def __init__(self, store: TempleStore, search_limit: int = 8) -> None:
        self._store = store
        self._search_limit = search_limit

    async def list_temples(self) -> list[Temple]:
        try:
            rows = await self._store.list_temples()
        except StoreError as exc:
            logger.warning("Failed to fetch temples, using demo list: %s", exc)
            rows = DEMO_TEMPLES
        return _map_rows(rows)

    async def search(self, query: str) -> list[Temple]:
        """Temples whose name, city or state contains *query*."""
        if not query.strip():
            return []
        temples = await self.list_temples()
        return [t for t in temples if t.matches(query)][: self._search_limit]


def _map_rows(rows: list[Row]) -> list[Temple]:
    temples = []
    for row in rows:
        try:
            temples.append(Temple.from_row(row))
        except ValidationError as exc:
            logger.warning("Skipping unmappable temple row %r: %s", row.get("id"), exc)
    return temples
