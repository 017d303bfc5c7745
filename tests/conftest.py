# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""Test support for aioknxmodel."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Generator
import logging
from unittest.mock import patch

import pytest

from aioknxmodel import i18n
from aioknxmodel.config import ModelConfig
from aioknxmodel.event_bus import EventBus
from aioknxmodel.model import DimmerDevice, LightDevice, ShutterDevice, ThresholdSimulatorDevice
from aioknxmodel_test_support import InMemoryGateway

logging.basicConfig(level=logging.INFO)

# pylint: disable=protected-access, redefined-outer-name


@pytest.fixture(autouse=True)
def teardown() -> Generator[None]:
    """Clean up."""
    yield
    patch.stopall()
    i18n.set_locale(locale="en")


@pytest.fixture
def model_config() -> ModelConfig:
    """Return a configuration with short timings."""
    return ModelConfig(
        default_timeout=0.5,
        poll_interval=0.01,
        percentage_tolerance=1.0,
        movement_cooldown=0.0,
        clock_interval=30.0,
    )


@pytest.fixture
def event_bus() -> EventBus:
    """Return an event bus."""
    return EventBus()


@pytest.fixture
def gateway() -> Generator[InMemoryGateway]:
    """Return an in-memory gateway and cancel its pending echoes afterwards."""
    in_memory_gateway = InMemoryGateway()
    yield in_memory_gateway
    in_memory_gateway.close()


@pytest.fixture
async def light(
    gateway: InMemoryGateway, model_config: ModelConfig, event_bus: EventBus
) -> AsyncGenerator[LightDevice]:
    """Return an initialized light on sub group 5 whose actuator echoes every write."""
    device = LightDevice(
        device_id="L1", name="Kitchen", sub_group="5", gateway=gateway, config=model_config, event_bus=event_bus
    )
    gateway.add_pair_echo(pair=device.addresses.switch)
    gateway.add_pair_echo(pair=device.addresses.lock)
    await device.initialize()
    yield device
    device.dispose()


@pytest.fixture
async def dimmer(
    gateway: InMemoryGateway, model_config: ModelConfig, event_bus: EventBus
) -> AsyncGenerator[DimmerDevice]:
    """Return an initialized dimmer on sub group 7 with one byte brightness echo."""
    device = DimmerDevice(
        device_id="D1", name="Living room", sub_group="7", gateway=gateway, config=model_config, event_bus=event_bus
    )
    gateway.add_pair_echo(pair=device.addresses.switch)
    gateway.add_pair_echo(pair=device.addresses.brightness, quantize=True)
    gateway.add_pair_echo(pair=device.addresses.lock)
    await device.initialize()
    yield device
    device.dispose()


@pytest.fixture
async def shutter(
    gateway: InMemoryGateway, model_config: ModelConfig, event_bus: EventBus
) -> AsyncGenerator[ShutterDevice]:
    """Return an initialized shutter on sub group 3 with a cooperating actuator."""
    device = ShutterDevice(
        device_id="S1", name="Office", sub_group="3", gateway=gateway, config=model_config, event_bus=event_bus
    )
    addresses = device.addresses
    gateway.add_pair_echo(pair=addresses.movement)
    gateway.add_pair_echo(pair=addresses.position, quantize=True)
    gateway.add_pair_echo(pair=addresses.lock)
    gateway.add_pair_echo(pair=addresses.sun_protection)
    # stop pulse is answered by the idle status
    gateway.add_echo(control=addresses.stop.control, feedback=addresses.movement_status, transform=lambda _: False)
    await device.initialize()
    yield device
    device.dispose()


@pytest.fixture
async def threshold_simulator(
    gateway: InMemoryGateway, model_config: ModelConfig, event_bus: EventBus
) -> AsyncGenerator[ThresholdSimulatorDevice]:
    """Return an initialized threshold simulator without pauses between telegrams."""
    device = ThresholdSimulatorDevice(
        device_id="TS", name="Weather", gateway=gateway, telegram_delay=0.0, config=model_config, event_bus=event_bus
    )
    thresholds = device.addresses.thresholds
    for address in (
        thresholds.brightness_threshold1,
        thresholds.brightness_threshold2,
        thresholds.outdoor_temperature_threshold,
        device.addresses.monitoring_block.control,
    ):
        gateway.add_echo(control=address)
    await device.initialize()
    yield device
    device.dispose()
