# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Localized exception and log messages.

Messages live in packaged JSON catalogs: translations/strings.json holds the
English base, translations/<locale>.json overrides single keys. The device
factory activates the locale of its ModelConfig; set_locale(locale="de") may
also be called directly.

tr("exception.model.device.disposed", device="light:L1") renders a message
with str.format_map. A key missing from both catalogs renders as the key, a
placeholder without value stays in the text.
"""

from __future__ import annotations

import json
import logging
import pkgutil
from threading import RLock
from typing import Any, Final

from aioknxmodel.const import DEFAULT_LOCALE

__all__ = ["get_locale", "set_locale", "tr"]

_BASE_RESOURCE: Final = "strings.json"
_PACKAGE: Final = "aioknxmodel"

_LOGGER: Final = logging.getLogger(__name__)


class _KeepMissing(dict[str, str]):
    """Format map that renders unknown placeholders unchanged."""

    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


class _CatalogStore:
    """Lazily loaded, merged catalogs per locale."""

    __slots__ = ("_base", "_lock", "_merged")

    def __init__(self) -> None:
        self._lock: Final = RLock()
        self._base: dict[str, str] | None = None
        self._merged: dict[str, dict[str, str]] = {}

    def get(self, *, locale: str) -> dict[str, str]:
        """Return the base catalog overridden by the catalog of locale."""
        if (catalog := self._merged.get(locale)) is not None:
            return catalog
        with self._lock:
            if (catalog := self._merged.get(locale)) is None:
                if self._base is None:
                    self._base = _read_catalog(resource=_BASE_RESOURCE)
                catalog = {**self._base, **_read_catalog(resource=f"{locale}.json")}
                self._merged[locale] = catalog
            return catalog


def _read_catalog(*, resource: str) -> dict[str, str]:
    """Read one packaged catalog. A missing catalog is empty."""
    try:
        raw = pkgutil.get_data(_PACKAGE, f"translations/{resource}")
    except OSError as oerr:
        _LOGGER.debug("I18N: No catalog translations/%s: %s", resource, oerr)
        return {}
    if not raw:
        return {}
    return {str(key): str(text) for key, text in json.loads(raw.decode(encoding="utf-8")).items()}


_STORE: Final = _CatalogStore()
_locale: str = DEFAULT_LOCALE


def get_locale() -> str:
    """Return the active locale, e.g. "en" or "de"."""
    return _locale


def set_locale(*, locale: str | None) -> None:
    """Activate a locale. None or blank selects the default locale."""
    global _locale  # noqa: PLW0603  # pylint: disable=global-statement
    _locale = (locale or "").strip() or DEFAULT_LOCALE


def tr(key: str, /, **kwargs: Any) -> str:
    """Render the message of key in the active locale."""
    template = _STORE.get(locale=_locale).get(key, key)
    try:
        return template.format_map(_KeepMissing({name: str(value) for name, value in kwargs.items()}))
    except (ValueError, IndexError):
        return template
