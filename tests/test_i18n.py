# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""Tests for the translation helper."""

from __future__ import annotations

from aioknxmodel import i18n


class TestTranslation:
    """Tests for tr and set_locale."""

    def test_english(self) -> None:
        """Placeholders are filled from the keyword arguments."""
        assert i18n.tr("exception.model.device.disposed", device="light:L1 (Kitchen)") == (
            "light:L1 (Kitchen) is disposed"
        )

    def test_german(self) -> None:
        """The active locale overrides the base catalog."""
        i18n.set_locale(locale="de")

        assert i18n.get_locale() == "de"
        assert i18n.tr("exception.model.device.disposed", device="L1") == "L1 wurde freigegeben"

    def test_unknown_locale_falls_back(self) -> None:
        """Locales without a catalog use the base strings."""
        i18n.set_locale(locale="fr")
        assert i18n.tr("exception.model.device.disposed", device="L1") == "L1 is disposed"

    def test_empty_locale(self) -> None:
        """An empty locale selects the default."""
        i18n.set_locale(locale=" ")
        assert i18n.get_locale() == "en"

    def test_unknown_key(self) -> None:
        """Unknown keys are returned unchanged."""
        assert i18n.tr("exception.does.not.exist", value=1) == "exception.does.not.exist"

    def test_missing_placeholder(self) -> None:
        """Placeholders without a value are left as is."""
        assert i18n.tr("exception.model.device.disposed") == "{device} is disposed"
