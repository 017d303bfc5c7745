# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Device factory.

Builds devices from a validated device definition (see
aioknxmodel.config.load_device_config). All devices created by one factory
share its gateway, model configuration and event bus.

Public API
----------
- DeviceFactory: Create single devices by id or all devices of a type
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final

from aioknxmodel import i18n
from aioknxmodel.config import DEFAULT_MODEL_CONFIG, ModelConfig, load_device_config, validate_device_config
from aioknxmodel.const import ConfigKey, DeviceType
from aioknxmodel.event_bus import EventBus
from aioknxmodel.exceptions import KnxValidationException
from aioknxmodel.model.clock import ClockDevice
from aioknxmodel.model.dimmer import DimmerDevice
from aioknxmodel.model.light import LightDevice
from aioknxmodel.model.shutter import ShutterDevice
from aioknxmodel.model.threshold_simulator import ThresholdSimulatorDevice

if TYPE_CHECKING:
    from aioknxmodel.interfaces import BusGatewayProtocol, SunPositionProviderProtocol
    from aioknxmodel.model.device import BaseDevice

__all__ = ["DeviceFactory"]

_LOGGER: Final = logging.getLogger(__name__)

_SUB_GROUP_DEVICES: Final = {
    DeviceType.LIGHT: (ConfigKey.LIGHTS, LightDevice),
    DeviceType.DIMMER: (ConfigKey.DIMMERS, DimmerDevice),
    DeviceType.SHUTTER: (ConfigKey.SHUTTERS, ShutterDevice),
}


class DeviceFactory:
    """Create devices from a device definition."""

    __slots__ = ("_config", "_definition", "_event_bus", "_gateway", "_sun_position_provider")

    def __init__(
        self,
        *,
        gateway: BusGatewayProtocol,
        definition: dict[str, Any] | None = None,
        config: ModelConfig = DEFAULT_MODEL_CONFIG,
        event_bus: EventBus | None = None,
        sun_position_provider: SunPositionProviderProtocol | None = None,
    ) -> None:
        """Initialize the factory and apply the configured locale."""
        self._gateway: Final = gateway
        self._definition: Final = validate_device_config(data=definition or {})
        self._config: Final = config
        self._event_bus: Final = event_bus or EventBus()
        self._sun_position_provider: Final = sun_position_provider
        i18n.set_locale(locale=config.locale)

    @classmethod
    def from_file(
        cls,
        *,
        path: Path | str,
        gateway: BusGatewayProtocol,
        config: ModelConfig = DEFAULT_MODEL_CONFIG,
        event_bus: EventBus | None = None,
        sun_position_provider: SunPositionProviderProtocol | None = None,
    ) -> DeviceFactory:
        """Create a factory from a JSON device definition file."""
        return cls(
            gateway=gateway,
            definition=load_device_config(path=path),
            config=config,
            event_bus=event_bus,
            sun_position_provider=sun_position_provider,
        )

    @property
    def event_bus(self) -> EventBus:
        """Return the event bus shared by the created devices."""
        return self._event_bus

    def create_all(self) -> list[BaseDevice]:
        """Create every defined device."""
        devices: list[BaseDevice] = []
        for device_type in _SUB_GROUP_DEVICES:
            devices.extend(self._create_all_of(device_type=device_type))
        if ConfigKey.CLOCK in self._definition:
            devices.append(self.create_clock())
        if ConfigKey.THRESHOLD_SIMULATOR in self._definition:
            devices.append(self.create_threshold_simulator())
        _LOGGER.debug("CREATE_ALL: Created %i devices", len(devices))
        return devices

    def create_all_dimmers(self) -> list[DimmerDevice]:
        """Create every defined dimmer."""
        return self._create_all_of(device_type=DeviceType.DIMMER)  # type: ignore[return-value]

    def create_all_lights(self) -> list[LightDevice]:
        """Create every defined light."""
        return self._create_all_of(device_type=DeviceType.LIGHT)  # type: ignore[return-value]

    def create_all_shutters(self) -> list[ShutterDevice]:
        """Create every defined shutter."""
        return self._create_all_of(device_type=DeviceType.SHUTTER)  # type: ignore[return-value]

    def create_clock(self) -> ClockDevice:
        """Create the defined clock."""
        if (definition := self._definition.get(ConfigKey.CLOCK)) is None:
            raise KnxValidationException(i18n.tr("exception.model.factory.not_defined", device_type=DeviceType.CLOCK))
        return ClockDevice(
            device_id=definition[ConfigKey.DEVICE_ID],
            name=definition[ConfigKey.NAME],
            gateway=self._gateway,
            mode=definition[ConfigKey.MODE],
            interval=definition[ConfigKey.INTERVAL],
            sun_position_provider=self._sun_position_provider,
            config=self._config,
            event_bus=self._event_bus,
        )

    def create_dimmer(self, *, device_id: str) -> DimmerDevice:
        """Create the dimmer defined under device_id."""
        return self._create(device_type=DeviceType.DIMMER, device_id=device_id)  # type: ignore[return-value]

    def create_light(self, *, device_id: str) -> LightDevice:
        """Create the light defined under device_id."""
        return self._create(device_type=DeviceType.LIGHT, device_id=device_id)  # type: ignore[return-value]

    def create_shutter(self, *, device_id: str) -> ShutterDevice:
        """Create the shutter defined under device_id."""
        return self._create(device_type=DeviceType.SHUTTER, device_id=device_id)  # type: ignore[return-value]

    def create_threshold_simulator(self) -> ThresholdSimulatorDevice:
        """Create the defined threshold simulator."""
        if (definition := self._definition.get(ConfigKey.THRESHOLD_SIMULATOR)) is None:
            raise KnxValidationException(
                i18n.tr("exception.model.factory.not_defined", device_type=DeviceType.THRESHOLD_SIMULATOR)
            )
        return ThresholdSimulatorDevice(
            device_id=definition[ConfigKey.DEVICE_ID],
            name=definition[ConfigKey.NAME],
            gateway=self._gateway,
            config=self._config,
            event_bus=self._event_bus,
        )

    def get_available_ids(self, *, device_type: DeviceType) -> tuple[str, ...]:
        """Return the defined device ids of a light, dimmer or shutter type."""
        key, _ = _SUB_GROUP_DEVICES[device_type]
        return tuple(self._definition[key])

    def _create(self, *, device_type: DeviceType, device_id: str) -> BaseDevice:
        key, device_class = _SUB_GROUP_DEVICES[device_type]
        if (definition := self._definition[key].get(device_id)) is None:
            raise KnxValidationException(
                i18n.tr("exception.model.factory.unknown_device", device_type=device_type, device_id=device_id)
            )
        return device_class(
            device_id=device_id,
            name=definition[ConfigKey.NAME],
            sub_group=definition[ConfigKey.SUB_GROUP],
            gateway=self._gateway,
            config=self._config,
            event_bus=self._event_bus,
        )

    def _create_all_of(self, *, device_type: DeviceType) -> list[BaseDevice]:
        return [
            self._create(device_type=device_type, device_id=device_id)
            for device_id in self.get_available_ids(device_type=device_type)
        ]
