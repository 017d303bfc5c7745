# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Capabilities devices are composed of.

Public API
----------
- SwitchCapability: On/off
- LockCapability: Lock that gates the other commands of its device
- PercentageCapability: Value in [0, 100] with tolerant confirmation
- MovementCapability: Open/close/stop with cooldown
- ActivityCapability: Moving/idle status
- BlockCapability: Block flag, e.g. sun protection
- ThresholdCapability: Brightness and outdoor temperature threshold flags
- ThresholdWriterCapability: Threshold flags published by a simulator
"""

from __future__ import annotations

from aioknxmodel.model.capability.activity import ActivityCapability
from aioknxmodel.model.capability.base import BaseCapability, GatedCapability
from aioknxmodel.model.capability.binary import LockCapability, SwitchCapability
from aioknxmodel.model.capability.block import BlockCapability
from aioknxmodel.model.capability.movement import MovementCapability
from aioknxmodel.model.capability.percentage import PercentageCapability
from aioknxmodel.model.capability.threshold import (
    ThresholdAddresses,
    ThresholdCapability,
    ThresholdWriterCapability,
)

__all__ = [
    "ActivityCapability",
    "BaseCapability",
    "BlockCapability",
    "GatedCapability",
    "LockCapability",
    "MovementCapability",
    "PercentageCapability",
    "SwitchCapability",
    "ThresholdAddresses",
    "ThresholdCapability",
    "ThresholdWriterCapability",
]
