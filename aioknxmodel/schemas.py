# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Validation schemas for aioknxmodel.

This module contains voluptuous schemas used for validating device
definitions and feedback telegram data.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import voluptuous as vol

from aioknxmodel import i18n
from aioknxmodel.bus.address import GroupAddress
from aioknxmodel.bus.feedback import FeedbackEvent
from aioknxmodel.const import (
    DEFAULT_CLOCK_INTERVAL,
    GROUP_ADDRESS_SUB_MAX,
    ClockMode,
    ConfigKey,
    FeedbackOffset,
    MessagePriority,
    MessageType,
)
from aioknxmodel.exceptions import KnxValidationException


def group_address(value: str) -> str:
    """Validate a group address in main/middle/sub notation."""
    try:
        return str(GroupAddress.parse(str(value)))
    except KnxValidationException as kve:
        raise vol.Invalid(str(kve)) from kve


def sub_group(value: int | str) -> str:
    """
    Validate a control sub group.

    The feedback sub group (control + 100) must still be a valid sub group.
    """
    try:
        number = int(value)
    except (TypeError, ValueError) as err:
        raise vol.Invalid(f"sub group must be a number: {value}") from err
    if not 0 <= number <= GROUP_ADDRESS_SUB_MAX - FeedbackOffset.STANDARD:
        raise vol.Invalid(f"sub group out of range: {value}")
    return str(number)


_DEVICE_SCHEMA = vol.Schema(
    {
        vol.Required(str(ConfigKey.NAME)): vol.All(str, vol.Length(min=1)),
        vol.Required(str(ConfigKey.SUB_GROUP)): sub_group,
    }
)

_DEVICES_SCHEMA = vol.Schema({vol.All(str, vol.Length(min=1)): _DEVICE_SCHEMA})

_CLOCK_SCHEMA = vol.Schema(
    {
        vol.Required(str(ConfigKey.DEVICE_ID)): vol.All(str, vol.Length(min=1)),
        vol.Optional(str(ConfigKey.NAME), default="Clock"): str,
        vol.Optional(str(ConfigKey.MODE), default=str(ClockMode.SLAVE)): vol.Coerce(ClockMode),
        vol.Optional(str(ConfigKey.INTERVAL), default=DEFAULT_CLOCK_INTERVAL): vol.All(
            vol.Coerce(float), vol.Range(min=0, min_included=False)
        ),
    }
)

_THRESHOLD_SIMULATOR_SCHEMA = vol.Schema(
    {
        vol.Required(str(ConfigKey.DEVICE_ID)): vol.All(str, vol.Length(min=1)),
        vol.Optional(str(ConfigKey.NAME), default="Threshold simulator"): str,
    }
)

DEVICE_CONFIG_SCHEMA = vol.Schema(
    {
        vol.Optional(str(ConfigKey.LIGHTS), default={}): _DEVICES_SCHEMA,
        vol.Optional(str(ConfigKey.DIMMERS), default={}): _DEVICES_SCHEMA,
        vol.Optional(str(ConfigKey.SHUTTERS), default={}): _DEVICES_SCHEMA,
        vol.Optional(str(ConfigKey.CLOCK)): _CLOCK_SCHEMA,
        vol.Optional(str(ConfigKey.THRESHOLD_SIMULATOR)): _THRESHOLD_SIMULATOR_SCHEMA,
    }
)

FEEDBACK_EVENT_SCHEMA = vol.Schema(
    {
        vol.Required("address"): group_address,
        vol.Required("value"): vol.Any(bool, int, float, bytes, str),
        vol.Optional("source"): vol.Any(str, None),
        vol.Optional("message_type", default=str(MessageType.WRITE)): vol.Coerce(MessageType),
        vol.Optional("priority", default=str(MessagePriority.LOW)): vol.Coerce(MessagePriority),
    }
)


def feedback_event_from_mapping(*, data: Mapping[str, Any]) -> FeedbackEvent:
    """Validate a telegram given as mapping, e.g. from a recorded bus log, and build the event."""
    try:
        validated = FEEDBACK_EVENT_SCHEMA(dict(data))
    except vol.Invalid as err:
        raise KnxValidationException(i18n.tr("exception.schemas.invalid_feedback_event", reason=err)) from err
    return FeedbackEvent(**validated)
