# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""Collection of context variables."""

from __future__ import annotations

from contextvars import ContextVar

# context var for storing if call is running within a device operation
IN_SERVICE_VAR: ContextVar[bool] = ContextVar("in_service_var", default=False)


def is_in_service() -> bool:
    """Return True if the current call runs inside a decorated device operation."""
    return IN_SERVICE_VAR.get()
