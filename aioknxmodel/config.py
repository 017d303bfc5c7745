# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Model configuration.

ModelConfig carries the timing parameters shared by all devices created from
one configuration. Device definitions (which lights, dimmers, shutters and
clocks exist) are plain mappings validated by the schemas in
aioknxmodel.schemas and may be loaded from a JSON file.

Public API
----------
- ModelConfig: Timeouts, intervals, tolerance and cooldown
- DEFAULT_MODEL_CONFIG: ModelConfig with default values
- load_device_config: Read and validate a device definition file
- validate_device_config: Validate a device definition mapping
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Any, Final

import orjson
import voluptuous as vol

from aioknxmodel import i18n
from aioknxmodel.const import (
    DEFAULT_CLOCK_INTERVAL,
    DEFAULT_LOCALE,
    DEFAULT_MOVEMENT_COOLDOWN,
    DEFAULT_PERCENTAGE_TOLERANCE,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_TIMEOUT,
)
from aioknxmodel.exceptions import KnxValidationException
from aioknxmodel.schemas import DEVICE_CONFIG_SCHEMA

__all__ = ["DEFAULT_MODEL_CONFIG", "ModelConfig", "load_device_config", "validate_device_config"]

_LOGGER: Final = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ModelConfig:
    """Timing parameters of the device model."""

    default_timeout: float = DEFAULT_TIMEOUT
    poll_interval: float = DEFAULT_POLL_INTERVAL
    percentage_tolerance: float = DEFAULT_PERCENTAGE_TOLERANCE
    movement_cooldown: float = DEFAULT_MOVEMENT_COOLDOWN
    clock_interval: float = DEFAULT_CLOCK_INTERVAL
    locale: str = DEFAULT_LOCALE

    def __post_init__(self) -> None:
        """Validate the parameters."""
        for name in ("default_timeout", "poll_interval", "clock_interval"):
            if getattr(self, name) <= 0:
                raise KnxValidationException(
                    i18n.tr("exception.config.not_positive", name=name, value=getattr(self, name))
                )
        for name in ("percentage_tolerance", "movement_cooldown"):
            if getattr(self, name) < 0:
                raise KnxValidationException(
                    i18n.tr("exception.config.negative", name=name, value=getattr(self, name))
                )
        if self.poll_interval >= self.default_timeout:
            raise KnxValidationException(
                i18n.tr(
                    "exception.config.poll_interval_exceeds_timeout",
                    poll_interval=self.poll_interval,
                    default_timeout=self.default_timeout,
                )
            )


DEFAULT_MODEL_CONFIG: Final = ModelConfig()


def validate_device_config(*, data: Any) -> dict[str, Any]:
    """Validate a device definition mapping and return it with defaults applied."""
    try:
        return dict(DEVICE_CONFIG_SCHEMA(data))
    except vol.Invalid as err:
        raise KnxValidationException(i18n.tr("exception.config.invalid_device_config", reason=err)) from err


def load_device_config(*, path: Path | str) -> dict[str, Any]:
    """Read a JSON device definition file and validate it."""
    file_path = Path(path)
    try:
        data = orjson.loads(file_path.read_bytes())
    except OSError as oerr:
        raise KnxValidationException(
            i18n.tr("exception.config.file_not_readable", path=file_path, reason=oerr)
        ) from oerr
    except orjson.JSONDecodeError as jerr:
        raise KnxValidationException(i18n.tr("exception.config.invalid_json", path=file_path, reason=jerr)) from jerr
    _LOGGER.debug("LOAD_DEVICE_CONFIG: Loaded %s", file_path)
    return validate_device_config(data=data)
