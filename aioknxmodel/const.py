# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""Constants used by aioknxmodel."""

from __future__ import annotations

from datetime import timedelta
from enum import IntEnum, StrEnum
from typing import Final

VERSION: Final = "2025.10.0"

DEFAULT_LOCALE: Final = "en"

# Command/confirmation timing
DEFAULT_TIMEOUT: Final = 5.0
DEFAULT_POLL_INTERVAL: Final = 0.05
DEFAULT_PERCENTAGE_TOLERANCE: Final = 1.0
DEFAULT_MOVEMENT_COOLDOWN: Final = 2.0

# Clock
DEFAULT_CLOCK_INTERVAL: Final = 30.0
CLOCK_WATCHDOG_FACTOR: Final = 2
CLOCK_PAYLOAD_LENGTH: Final = 8
CLOCK_YEAR_OFFSET: Final = 1900

# Rate limiting of the bus gateway
DEFAULT_RATE_LIMIT_WINDOW: Final = 2.0
DEFAULT_WRITE_RATE_LIMIT: Final = 2
DEFAULT_READ_RATE_LIMIT: Final = 10

# Percentages travel as one byte on the bus
PERCENT_MIN: Final = 0.0
PERCENT_MAX: Final = 100.0
PERCENT_RAW_MAX: Final = 255
PERCENT_RAW_FACTOR: Final = 2.55

# Group address limits
GROUP_ADDRESS_MAIN_MAX: Final = 31
GROUP_ADDRESS_MIDDLE_MAX: Final = 7
GROUP_ADDRESS_SUB_MAX: Final = 255

LATITUDE_MIN: Final = -90.0
LATITUDE_MAX: Final = 90.0
LONGITUDE_MIN: Final = -180.0
LONGITUDE_MAX: Final = 180.0
DEFAULT_LATITUDE: Final = 51.1079
DEFAULT_LONGITUDE: Final = 17.0385

# Shutter movement bits
MOVEMENT_UP: Final = False
MOVEMENT_DOWN: Final = True
STOP_PULSE: Final = True

ZERO_DELTA: Final = timedelta()


class FeedbackOffset(IntEnum):
    """Offset between control and feedback sub group."""

    SAME = 0
    STANDARD = 100


class SwitchState(StrEnum):
    """Enum with switch states."""

    OFF = "off"
    ON = "on"
    UNKNOWN = "unknown"


class LockState(StrEnum):
    """Enum with lock states."""

    OFF = "off"
    ON = "on"
    UNKNOWN = "unknown"


class ClockMode(StrEnum):
    """Enum with clock roles."""

    MASTER = "master"
    SLAVE = "slave"
    SLAVE_MASTER = "slave_master"


class DeviceState(StrEnum):
    """Enum with device lifecycle states."""

    CREATED = "created"
    DISPOSED = "disposed"
    FAILED = "failed"
    INITIALIZED = "initialized"
    INITIALIZING = "initializing"


class DeviceType(StrEnum):
    """Enum with the supported device types."""

    CLOCK = "clock"
    DIMMER = "dimmer"
    LIGHT = "light"
    SHUTTER = "shutter"
    THRESHOLD_SIMULATOR = "threshold_simulator"


class MessageType(StrEnum):
    """Enum with telegram message types."""

    READ = "read"
    RESPONSE = "response"
    WRITE = "write"


class MessagePriority(StrEnum):
    """Enum with telegram priorities."""

    ALARM = "alarm"
    HIGH = "high"
    LOW = "low"
    SYSTEM = "system"


class ConfigKey(StrEnum):
    """Keys used in device configuration mappings."""

    CLOCK = "clock"
    DEVICE_ID = "device_id"
    DIMMERS = "dimmers"
    INTERVAL = "interval"
    LIGHTS = "lights"
    MODE = "mode"
    NAME = "name"
    SHUTTERS = "shutters"
    SUB_GROUP = "sub_group"
    THRESHOLD_SIMULATOR = "threshold_simulator"


# Main/middle groups of the default address layout
LIGHT_SWITCH_GROUP: Final = (1, 1)
LIGHT_LOCK_GROUP: Final = (1, 2)
DIMMER_SWITCH_GROUP: Final = (2, 1)
DIMMER_BRIGHTNESS_GROUP: Final = (2, 2)
DIMMER_LOCK_GROUP: Final = (2, 3)
SHUTTER_MOVEMENT_GROUP: Final = (4, 0)
SHUTTER_STOP_GROUP: Final = (4, 1)
SHUTTER_POSITION_GROUP: Final = (4, 2)
SHUTTER_LOCK_GROUP: Final = (4, 3)
SHUTTER_SUN_PROTECTION_GROUP: Final = (4, 4)

# Shared addresses
CLOCK_TIME_ADDRESS: Final = "0/0/1"
BRIGHTNESS_THRESHOLD1_ADDRESS: Final = "0/2/3"
BRIGHTNESS_THRESHOLD2_ADDRESS: Final = "0/2/4"
OUTDOOR_TEMPERATURE_THRESHOLD_ADDRESS: Final = "0/2/8"
THRESHOLD_MONITORING_BLOCK_ADDRESS: Final = "0/2/12"

# Pause between the telegrams of a threshold scenario
DEFAULT_SCENARIO_TELEGRAM_DELAY: Final = 0.1
