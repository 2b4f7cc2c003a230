"""WaitEstimate: estimated queue wait for the current occupancy."""

from __future__ import annotations

from pydantic import Field

from temple_crowd.domain.base import CamelModel
from temple_crowd.domain.enums import WaitLevel


class WaitEstimate(CamelModel):
    """Estimated wait in whole minutes plus its severity tier."""

    minutes: int = Field(..., ge=0)
    level: WaitLevel
