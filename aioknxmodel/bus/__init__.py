# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Bus side building blocks.

Public API
----------
- FeedbackEvent: One received telegram
- FeedbackRouter: Per device subscription on the gateway's feedback stream
- GroupAddress, ControlFeedbackPair: Group addresses and their derivation
- RateLimitedGateway: Gateway wrapper limiting writes and reads per time window
"""

from __future__ import annotations

from aioknxmodel.bus.address import ControlFeedbackPair, GroupAddress, derive_feedback_address, make_pair
from aioknxmodel.bus.feedback import FeedbackEvent
from aioknxmodel.bus.rate_limiter import RateLimitedGateway, SlidingWindowRateLimiter
from aioknxmodel.bus.router import FeedbackRouter

__all__ = [
    "ControlFeedbackPair",
    "FeedbackEvent",
    "FeedbackRouter",
    "GroupAddress",
    "RateLimitedGateway",
    "SlidingWindowRateLimiter",
    "derive_feedback_address",
    "make_pair",
]
