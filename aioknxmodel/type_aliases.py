# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Shared typing aliases for callbacks and common callable shapes.

This module centralizes `Callable[...]` type aliases to avoid repeating
signatures across the code base.
"""

from __future__ import annotations

from collections.abc import Callable, Coroutine
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from aioknxmodel.bus.feedback import FeedbackEvent

ZeroArgHandler: TypeAlias = Callable[[], None]

UnsubscribeHandler: TypeAlias = ZeroArgHandler

Predicate: TypeAlias = Callable[[], bool]

FeedbackHandler: TypeAlias = Callable[["FeedbackEvent"], None]

EventHandler: TypeAlias = Callable[[Any], None] | Callable[[Any], Coroutine[Any, Any, None]]
