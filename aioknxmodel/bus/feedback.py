# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""Feedback telegram as delivered by a bus gateway."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from aioknxmodel.const import MessagePriority, MessageType

__all__ = ["FeedbackEvent"]


@dataclass(frozen=True, slots=True)
class FeedbackEvent:
    """One telegram received from the bus."""

    address: str
    value: Any
    source: str | None = None
    timestamp: datetime = field(default_factory=datetime.now)
    message_type: MessageType = MessageType.WRITE
    priority: MessagePriority = MessagePriority.LOW
