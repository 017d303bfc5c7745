# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Address sets of the device types.

Each device type maps its capabilities to control and feedback addresses
derived from the device's sub group. The layout follows the installation's
group address plan:

    light    switch 1/1/X (+100)     lock 1/2/X (same address)
    dimmer   switch 2/1/X (+100)     brightness 2/2/X (+100)  lock 2/3/X (same address)
    shutter  movement 4/0/X (+100)   stop 4/1/X, status 4/1/X+100
             position 4/2/X (+100)   lock 4/3/X (+100)
             sun protection block 4/4/X (same address), status 4/4/X+100

Public API
----------
- LightAddresses, DimmerAddresses, ShutterAddresses, ClockAddresses,
  ThresholdSimulatorAddresses: Immutable address records with a
  for_sub_group() constructor for the default layout
"""

from __future__ import annotations

from dataclasses import dataclass

from aioknxmodel.bus.address import ControlFeedbackPair, make_pair
from aioknxmodel.const import (
    CLOCK_TIME_ADDRESS,
    DIMMER_BRIGHTNESS_GROUP,
    DIMMER_LOCK_GROUP,
    DIMMER_SWITCH_GROUP,
    LIGHT_LOCK_GROUP,
    LIGHT_SWITCH_GROUP,
    SHUTTER_LOCK_GROUP,
    SHUTTER_MOVEMENT_GROUP,
    SHUTTER_POSITION_GROUP,
    SHUTTER_STOP_GROUP,
    SHUTTER_SUN_PROTECTION_GROUP,
    THRESHOLD_MONITORING_BLOCK_ADDRESS,
    FeedbackOffset,
)
from aioknxmodel.model.capability.threshold import ThresholdAddresses

__all__ = [
    "ClockAddresses",
    "DimmerAddresses",
    "LightAddresses",
    "ShutterAddresses",
    "ThresholdSimulatorAddresses",
]


@dataclass(frozen=True, slots=True)
class LightAddresses:
    """Addresses of a switchable light."""

    switch: ControlFeedbackPair
    lock: ControlFeedbackPair

    @classmethod
    def for_sub_group(cls, *, sub_group: int | str) -> LightAddresses:
        """Return the default layout for a sub group."""
        return cls(
            switch=make_pair(group=LIGHT_SWITCH_GROUP, sub_group=sub_group),
            lock=make_pair(group=LIGHT_LOCK_GROUP, sub_group=sub_group, offset=FeedbackOffset.SAME),
        )


@dataclass(frozen=True, slots=True)
class DimmerAddresses:
    """Addresses of a dimmable light."""

    switch: ControlFeedbackPair
    brightness: ControlFeedbackPair
    lock: ControlFeedbackPair

    @classmethod
    def for_sub_group(cls, *, sub_group: int | str) -> DimmerAddresses:
        """Return the default layout for a sub group."""
        return cls(
            switch=make_pair(group=DIMMER_SWITCH_GROUP, sub_group=sub_group),
            brightness=make_pair(group=DIMMER_BRIGHTNESS_GROUP, sub_group=sub_group),
            lock=make_pair(group=DIMMER_LOCK_GROUP, sub_group=sub_group, offset=FeedbackOffset.SAME),
        )


@dataclass(frozen=True, slots=True)
class ShutterAddresses:
    """Addresses of a shutter."""

    movement: ControlFeedbackPair
    stop: ControlFeedbackPair
    position: ControlFeedbackPair
    lock: ControlFeedbackPair
    sun_protection: ControlFeedbackPair
    sun_protection_status: str
    thresholds: ThresholdAddresses

    @property
    def movement_status(self) -> str:
        """Return the moving/idle status address."""
        return self.stop.feedback

    @classmethod
    def for_sub_group(cls, *, sub_group: int | str) -> ShutterAddresses:
        """Return the default layout for a sub group."""
        sun_protection = make_pair(group=SHUTTER_SUN_PROTECTION_GROUP, sub_group=sub_group, offset=FeedbackOffset.SAME)
        return cls(
            movement=make_pair(group=SHUTTER_MOVEMENT_GROUP, sub_group=sub_group),
            stop=make_pair(group=SHUTTER_STOP_GROUP, sub_group=sub_group),
            position=make_pair(group=SHUTTER_POSITION_GROUP, sub_group=sub_group),
            lock=make_pair(group=SHUTTER_LOCK_GROUP, sub_group=sub_group),
            sun_protection=sun_protection,
            sun_protection_status=make_pair(group=SHUTTER_SUN_PROTECTION_GROUP, sub_group=sub_group).feedback,
            thresholds=ThresholdAddresses(),
        )


@dataclass(frozen=True, slots=True)
class ClockAddresses:
    """Address of the date/time broadcast."""

    time: str = CLOCK_TIME_ADDRESS


@dataclass(frozen=True, slots=True)
class ThresholdSimulatorAddresses:
    """Addresses written by the threshold simulator."""

    thresholds: ThresholdAddresses = ThresholdAddresses()
    monitoring_block: ControlFeedbackPair = ControlFeedbackPair(
        control=THRESHOLD_MONITORING_BLOCK_ADDRESS, feedback=THRESHOLD_MONITORING_BLOCK_ADDRESS
    )
