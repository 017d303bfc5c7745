# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""Tests for the model configuration and the validation schemas."""

from __future__ import annotations

from pathlib import Path

import orjson
import pytest

from aioknxmodel.config import DEFAULT_MODEL_CONFIG, ModelConfig, load_device_config, validate_device_config
from aioknxmodel.const import ClockMode, MessagePriority, MessageType
from aioknxmodel.exceptions import KnxValidationException
from aioknxmodel.schemas import feedback_event_from_mapping

_DEVICE_CONFIG = {
    "lights": {"L1": {"name": "Kitchen", "sub_group": "5"}},
    "dimmers": {"D1": {"name": "Living room", "sub_group": 7}},
    "shutters": {"S1": {"name": "Office", "sub_group": "3"}},
    "clock": {"device_id": "C1", "mode": "slave_master"},
}


class TestModelConfig:
    """Tests for ModelConfig."""

    def test_defaults(self) -> None:
        """The default configuration is valid."""
        assert DEFAULT_MODEL_CONFIG.default_timeout == 5.0
        assert DEFAULT_MODEL_CONFIG.movement_cooldown == 2.0
        assert DEFAULT_MODEL_CONFIG.locale == "en"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"default_timeout": 0},
            {"poll_interval": -0.1},
            {"clock_interval": 0},
            {"percentage_tolerance": -1.0},
            {"movement_cooldown": -0.5},
            {"default_timeout": 0.1, "poll_interval": 0.1},
        ],
    )
    def test_invalid(self, kwargs: dict[str, float]) -> None:
        """Non positive durations, negative tolerances and a poll interval above the timeout are rejected."""
        with pytest.raises(KnxValidationException):
            ModelConfig(**kwargs)  # type: ignore[arg-type]

    def test_zero_cooldown_allowed(self) -> None:
        """A cooldown of zero disables it."""
        assert ModelConfig(movement_cooldown=0.0).movement_cooldown == 0.0


class TestDeviceConfig:
    """Tests for validate_device_config and load_device_config."""

    def test_defaults_applied(self) -> None:
        """Missing sections default to empty, sub groups are normalized to strings."""
        config = validate_device_config(data=_DEVICE_CONFIG)

        assert config["dimmers"]["D1"]["sub_group"] == "7"
        assert config["clock"]["mode"] == ClockMode.SLAVE_MASTER
        assert config["clock"]["interval"] == 30.0
        assert config["clock"]["name"] == "Clock"
        assert "threshold_simulator" not in config

        assert validate_device_config(data={}) == {"lights": {}, "dimmers": {}, "shutters": {}}

    @pytest.mark.parametrize(
        "data",
        [
            {"lights": {"L1": {"name": "Kitchen", "sub_group": "200"}}},
            {"lights": {"L1": {"name": "Kitchen", "sub_group": "abc"}}},
            {"lights": {"L1": {"name": "", "sub_group": "1"}}},
            {"lights": {"L1": {"sub_group": "1"}}},
            {"clock": {"device_id": "C1", "mode": "primary"}},
            {"clock": {"device_id": "C1", "interval": 0}},
            {"heaters": {}},
        ],
    )
    def test_invalid(self, data: dict[str, object]) -> None:
        """Invalid definitions raise KnxValidationException."""
        with pytest.raises(KnxValidationException):
            validate_device_config(data=data)

    def test_load_from_file(self, tmp_path: Path) -> None:
        """JSON files are read with orjson and validated."""
        path = tmp_path / "devices.json"
        path.write_bytes(orjson.dumps(_DEVICE_CONFIG))

        config = load_device_config(path=path)

        assert config["lights"]["L1"]["name"] == "Kitchen"
        assert config["shutters"]["S1"]["sub_group"] == "3"

    def test_load_invalid_json(self, tmp_path: Path) -> None:
        """Malformed files are reported as validation errors."""
        path = tmp_path / "devices.json"
        path.write_text("{not json")

        with pytest.raises(KnxValidationException):
            load_device_config(path=path)

    def test_load_missing_file(self, tmp_path: Path) -> None:
        """A missing file is reported as validation error."""
        with pytest.raises(KnxValidationException):
            load_device_config(path=tmp_path / "missing.json")


class TestFeedbackEventSchema:
    """Tests for feedback_event_from_mapping."""

    def test_valid(self) -> None:
        """Addresses are normalized and defaults applied."""
        event = feedback_event_from_mapping(data={"address": "01/1/105", "value": True, "source": "1.1.5"})

        assert event.address == "1/1/105"
        assert event.value is True
        assert event.source == "1.1.5"
        assert event.message_type == MessageType.WRITE
        assert event.priority == MessagePriority.LOW

    @pytest.mark.parametrize(
        "data",
        [
            {"address": "32/0/0", "value": True},
            {"address": "1/1/1"},
            {"address": "1/1/1", "value": None},
            {"address": "1/1/1", "value": True, "message_type": "broadcast"},
        ],
    )
    def test_invalid(self, data: dict[str, object]) -> None:
        """Invalid telegrams raise KnxValidationException."""
        with pytest.raises(KnxValidationException):
            feedback_event_from_mapping(data=data)
