"""Abstract store contracts consumed by the crowd engine.

The engine reads two things from the outside world: temple rows and stored
simulation records.  Fetches return an explicit ``FetchResult`` so callers
branch on *what happened* (found / absent / fault) instead of inspecting
backend error codes.

Architectural rules:
    1. Stores are read-only from the engine's point of view.
    2. A missing row is ABSENT, never an exception.
    3. Any other backend failure on a single-row fetch is a FAULT carrying
       the original exception; it is never raised.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")

Row = dict[str, Any]


class FetchStatus(str, Enum):
    FOUND = "found"
    ABSENT = "absent"
    FAULT = "fault"


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Outcome of a single-row fetch."""

    status: FetchStatus
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @classmethod
    def found(cls, value: T) -> "FetchResult[T]":
        return cls(FetchStatus.FOUND, value=value)

    @classmethod
    def absent(cls) -> "FetchResult[T]":
        return cls(FetchStatus.ABSENT)

    @classmethod
    def fault(cls, error: BaseException) -> "FetchResult[T]":
        return cls(FetchStatus.FAULT, error=error)

    @property
    def is_found(self) -> bool:
        return self.status is FetchStatus.FOUND


class StoreError(Exception):
    """Raised by multi-row store operations that cannot complete."""


class TempleStore(ABC):
    """Read access to temple metadata rows."""

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Short name of the backing implementation, for health output."""
        ...

    @abstractmethod
    async def fetch_temple(self, temple_id: str) -> FetchResult[Row]:
        """Fetch one temple row by id."""
        ...

    @abstractmethod
    async def list_temples(self) -> list[Row]:
        """Return all temple rows ordered by name.

        Raises:
            StoreError: If the backend cannot be read.
        """
        ...


class SimulationRecordStore(ABC):
    """Read access to stored per-day simulation records."""

    @abstractmethod
    async def fetch_simulation_record(self, temple_id: str, iso_date: str) -> FetchResult[Row]:
        """Fetch the record keyed by (*temple_id*, *iso_date*)."""
        ...
