"""
Module to support aioknxmodel testing with an in-memory bus gateway.

This support package is version-locked to the main aioknxmodel package.
The version is sourced from aioknxmodel.const.VERSION.
"""

from __future__ import annotations

from aioknxmodel.const import VERSION as _AIOKNXMODEL_VERSION
from aioknxmodel_test_support.gateway import EchoRule, InMemoryGateway, WriteRecord

# Public version of this package, intentionally identical to aioknxmodel
__version__ = _AIOKNXMODEL_VERSION

__all__ = ["EchoRule", "InMemoryGateway", "WriteRecord", "__version__"]
