# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""Tests for group addresses and feedback address derivation."""

from __future__ import annotations

import pytest

from aioknxmodel.bus import ControlFeedbackPair, GroupAddress, derive_feedback_address, make_pair
from aioknxmodel.const import LIGHT_SWITCH_GROUP, FeedbackOffset
from aioknxmodel.exceptions import KnxValidationException
from aioknxmodel.model.addresses import DimmerAddresses, LightAddresses, ShutterAddresses


class TestGroupAddress:
    """Tests for GroupAddress."""

    def test_level_out_of_range(self) -> None:
        """Levels above their maximum are rejected."""
        with pytest.raises(KnxValidationException):
            GroupAddress(main=32, middle=0, sub=0)
        with pytest.raises(KnxValidationException):
            GroupAddress(main=0, middle=8, sub=0)
        with pytest.raises(KnxValidationException):
            GroupAddress(main=0, middle=0, sub=256)

    @pytest.mark.parametrize("address", ["1/2", "1/2/3/4", "a/b/c", "", "1/-1/3"])
    def test_parse_invalid_format(self, address: str) -> None:
        """Malformed addresses raise KnxValidationException."""
        with pytest.raises(KnxValidationException):
            GroupAddress.parse(address)

    def test_parse_and_str(self) -> None:
        """Parsing and formatting are inverse."""
        address = GroupAddress.parse(" 4/2/17 ")
        assert address == GroupAddress(main=4, middle=2, sub=17)
        assert str(address) == "4/2/17"

    def test_with_offset(self) -> None:
        """The offset is applied to the sub group only."""
        assert str(GroupAddress.parse("1/1/5").with_offset(offset=100)) == "1/1/105"


class TestDerivation:
    """Tests for feedback address derivation."""

    def test_derive_feedback_address(self) -> None:
        """The standard offset is 100."""
        assert derive_feedback_address(control="4/2/5") == "4/2/105"
        assert derive_feedback_address(control="1/2/5", offset=FeedbackOffset.SAME) == "1/2/5"

    def test_derive_overflow_raises(self) -> None:
        """A derived sub group above 255 is invalid."""
        with pytest.raises(KnxValidationException):
            derive_feedback_address(control="1/1/200")

    def test_make_pair(self) -> None:
        """make_pair accepts the sub group as int or str."""
        pair = make_pair(group=LIGHT_SWITCH_GROUP, sub_group="12")
        assert pair == ControlFeedbackPair(control="1/1/12", feedback="1/1/112")
        assert pair.is_self_reporting is False
        assert make_pair(group=LIGHT_SWITCH_GROUP, sub_group=12) == pair

    def test_make_pair_invalid_sub_group(self) -> None:
        """A non numeric sub group is rejected."""
        with pytest.raises(KnxValidationException):
            make_pair(group=LIGHT_SWITCH_GROUP, sub_group="x")


class TestAddressLayouts:
    """Tests for the default address layouts of the device types."""

    def test_dimmer_layout(self) -> None:
        """Dimmer brightness reports on +100, the lock on the same address."""
        addresses = DimmerAddresses.for_sub_group(sub_group=7)
        assert addresses.switch == ControlFeedbackPair(control="2/1/7", feedback="2/1/107")
        assert addresses.brightness == ControlFeedbackPair(control="2/2/7", feedback="2/2/107")
        assert addresses.lock.is_self_reporting

    def test_light_layout(self) -> None:
        """Light switch reports on +100, the lock on the same address."""
        addresses = LightAddresses.for_sub_group(sub_group=5)
        assert addresses.switch == ControlFeedbackPair(control="1/1/5", feedback="1/1/105")
        assert addresses.lock == ControlFeedbackPair(control="1/2/5", feedback="1/2/5")

    def test_shutter_layout(self) -> None:
        """Shutter addresses follow the installation plan."""
        addresses = ShutterAddresses.for_sub_group(sub_group=3)
        assert addresses.movement == ControlFeedbackPair(control="4/0/3", feedback="4/0/103")
        assert addresses.stop.control == "4/1/3"
        assert addresses.movement_status == "4/1/103"
        assert addresses.position == ControlFeedbackPair(control="4/2/3", feedback="4/2/103")
        assert addresses.lock == ControlFeedbackPair(control="4/3/3", feedback="4/3/103")
        assert addresses.sun_protection == ControlFeedbackPair(control="4/4/3", feedback="4/4/3")
        assert addresses.sun_protection_status == "4/4/103"
        assert addresses.thresholds.brightness_threshold1 == "0/2/3"
        assert addresses.thresholds.brightness_threshold2 == "0/2/4"
        assert addresses.thresholds.outdoor_temperature_threshold == "0/2/8"
