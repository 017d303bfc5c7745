# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Device model.

Public API
----------
- BaseDevice, LockableDevice: Device base classes
- LightDevice, DimmerDevice, ShutterDevice: Actuator channels
- ClockDevice: Date/time distribution
- ThresholdSimulatorDevice: Simulated weather thresholds
- DeviceFactory: Devices from a device definition
- ConfirmationEngine: Write and wait for feedback
- DeviceStateMachine: Device lifecycle
"""

from __future__ import annotations

from aioknxmodel.model.clock import ClockDevice
from aioknxmodel.model.device import BaseDevice, LockableDevice
from aioknxmodel.model.dimmer import DimmerDevice
from aioknxmodel.model.engine import ConfirmationEngine
from aioknxmodel.model.factory import DeviceFactory
from aioknxmodel.model.lifecycle import DeviceStateMachine
from aioknxmodel.model.light import LightDevice
from aioknxmodel.model.shutter import ShutterDevice
from aioknxmodel.model.threshold_simulator import ThresholdSimulatorDevice

__all__ = [
    "BaseDevice",
    "ClockDevice",
    "ConfirmationEngine",
    "DeviceFactory",
    "DeviceStateMachine",
    "DimmerDevice",
    "LightDevice",
    "LockableDevice",
    "ShutterDevice",
    "ThresholdSimulatorDevice",
]
