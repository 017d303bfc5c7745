# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""Tests for bus value conversion."""

from __future__ import annotations

import pytest

from aioknxmodel.bus.value import (
    as_bool,
    as_bytes,
    as_percentage,
    percent_to_raw,
    quantize_percentage,
    raw_to_percent,
)
from aioknxmodel.exceptions import KnxValidationException


class TestPercentageQuantization:
    """Tests for the one byte percentage representation."""

    def test_endpoints(self) -> None:
        """0 % and 100 % map to 0 and 255."""
        assert percent_to_raw(0) == 0
        assert percent_to_raw(100) == 255
        assert raw_to_percent(0) == 0.0
        assert raw_to_percent(255) == 100.0

    def test_out_of_range(self) -> None:
        """Values outside their range are rejected."""
        with pytest.raises(KnxValidationException):
            percent_to_raw(100.5)
        with pytest.raises(KnxValidationException):
            percent_to_raw(-1)
        with pytest.raises(KnxValidationException):
            raw_to_percent(256)

    def test_quantization_stays_within_one_step(self) -> None:
        """A quantized value deviates from the requested one by at most half a step."""
        for percentage in (0.0, 1.0, 33.3, 50.0, 66.7, 99.9, 100.0):
            assert abs(quantize_percentage(percentage) - percentage) <= 100 / 255 / 2 + 1e-9

    def test_rounds_to_nearest(self) -> None:
        """Raw values are rounded, not truncated."""
        assert percent_to_raw(33.3) == 85
        assert quantize_percentage(33.3) == pytest.approx(33.333, abs=0.001)


class TestAsBool:
    """Tests for as_bool."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (True, True),
            (False, False),
            (1, True),
            (0, False),
            (0.5, True),
            (b"\x01", True),
            (b"\x00", False),
            (b"\x00\x03", True),
            (b"", False),
            ("on", True),
            (" False ", False),
        ],
    )
    def test_conversion(self, value: object, expected: bool) -> None:
        """Supported payloads convert to a boolean."""
        assert as_bool(value) is expected

    @pytest.mark.parametrize("value", ["maybe", None, [1]])
    def test_not_convertible(self, value: object) -> None:
        """Unsupported payloads raise KnxValidationException."""
        with pytest.raises(KnxValidationException):
            as_bool(value)


class TestAsPercentage:
    """Tests for as_percentage."""

    def test_bool_and_numbers(self) -> None:
        """Booleans map to the endpoints, numbers are clamped."""
        assert as_percentage(True) == 100.0
        assert as_percentage(False) == 0.0
        assert as_percentage(42) == 42.0
        assert as_percentage(120.0) == 100.0
        assert as_percentage(-3) == 0.0

    def test_raw_byte_and_string(self) -> None:
        """A single byte is a raw bus value, strings are parsed."""
        assert as_percentage(b"\xff") == 100.0
        assert as_percentage(b"\x00") == 0.0
        assert as_percentage("12.5") == 12.5

    @pytest.mark.parametrize("value", ["abc", b"\x00\x01", None])
    def test_not_convertible(self, value: object) -> None:
        """Unsupported payloads raise KnxValidationException."""
        with pytest.raises(KnxValidationException):
            as_percentage(value)


class TestAsBytes:
    """Tests for as_bytes."""

    def test_conversion(self) -> None:
        """Bytes, bytearrays and integer sequences are accepted."""
        assert as_bytes(b"\x01\x02") == b"\x01\x02"
        assert as_bytes(bytearray(b"\x03")) == b"\x03"
        assert as_bytes([125, 6]) == b"\x7d\x06"
        assert as_bytes((1,)) == b"\x01"

    @pytest.mark.parametrize("value", ["0102", 5, [256], [1, "a"]])
    def test_not_convertible(self, value: object) -> None:
        """Other payloads raise KnxValidationException."""
        with pytest.raises(KnxValidationException):
            as_bytes(value)
