"""Pydantic models for the wait-estimate endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from temple_crowd.domain.temple import DEFAULT_SLOT_DURATION_MINUTES
from temple_crowd.domain.wait import WaitEstimate


class _CamelIO(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WaitEstimateRequest(_CamelIO):
    current_visitors: float = Field(..., ge=0)
    capacity_per_slot: Optional[float] = None
    slot_duration_minutes: float = Field(default=DEFAULT_SLOT_DURATION_MINUTES, gt=0)
    lanes: int = Field(default=2, ge=1)


class WaitEstimateResponse(_CamelIO):
    temple_id: Optional[str] = None
    date: Optional[str] = None
    current_visitors: float
    estimate: Optional[WaitEstimate] = None
