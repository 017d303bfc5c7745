# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""Sun position provider protocol interface and result type."""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, runtime_checkable

from aioknxmodel.support import clamp

__all__ = ["SunPosition", "SunPositionProviderProtocol"]


@dataclass(frozen=True, slots=True)
class SunPosition:
    """Sun position in degrees."""

    azimuth: float
    elevation: float

    @classmethod
    def create(cls, *, azimuth: float, elevation: float) -> SunPosition:
        """Return a position with azimuth normalized to [0, 360) and elevation clamped to [-90, 90]."""
        return cls(azimuth=azimuth % 360.0, elevation=clamp(value=elevation, minimum=-90.0, maximum=90.0))

    @property
    def is_above_horizon(self) -> bool:
        """Return True if the sun is above the horizon."""
        return self.elevation > 0


@runtime_checkable
class SunPositionProviderProtocol(Protocol):
    """Protocol for astronomical sun position calculation."""

    @abstractmethod
    def get_sun_position(self, *, latitude: float, longitude: float, date_time: datetime) -> SunPosition:
        """Return the sun position for a location and point in time."""
