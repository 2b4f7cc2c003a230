"""Controlled enumerations for the temple-crowd domain.

Every categorical field in the domain MUST reference an enum defined here.
"""

from __future__ import annotations

from enum import Enum


class DensityLevel(str, Enum):
    """Crowd density tier of a single area, derived from occupancy percentage."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class WaitLevel(str, Enum):
    """Severity tier of an estimated queue wait."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ImpactLevel(str, Enum):
    """How strongly current weather is expected to affect turnout."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
