# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""Decorators for device operations."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from functools import wraps
import inspect
import logging
import time
from typing import Any, Final

from aioknxmodel.context import IN_SERVICE_VAR
from aioknxmodel.exceptions import BaseKnxException
from aioknxmodel.support import extract_exc_args

__all__ = ["get_device_operations", "inspector"]

_LOGGER: Final = logging.getLogger(__name__)
_OPERATION_MARKER: Final = "knx_operation"


@contextmanager
def _service_context() -> Iterator[bool]:
    """Mark the current context as running a device operation. Yields True for the outermost call."""
    if IN_SERVICE_VAR.get():
        yield False
        return
    token = IN_SERVICE_VAR.set(True)
    try:
        yield True
    finally:
        IN_SERVICE_VAR.reset(token)


def inspector(
    func: Callable[..., Any] | None = None,
    *,
    log_level: int = logging.ERROR,
    re_raise: bool = True,
    no_raise_return: Any = None,
    measure_performance: bool = False,
) -> Any:
    """
    Wrap a device operation with error logging and optional timing.

    Works for sync and async functions, bare (@inspector) or with arguments
    (@inspector(re_raise=False)). Library exceptions are logged once, by the
    outermost decorated call, then re-raised unless re_raise is False, in
    which case no_raise_return is returned. Other exceptions pass through
    untouched.

    Args:
        func: The function when used without arguments.
        log_level: Level library exceptions are logged with.
        re_raise: Whether library exceptions are re-raised.
        no_raise_return: Return value when a library exception is swallowed.
        measure_performance: Log the execution time at debug level.

    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        measure = measure_performance and _LOGGER.isEnabledFor(logging.DEBUG)

        def _handle(*, outermost: bool, args: tuple[Any, ...], bke: BaseKnxException) -> Any:
            if outermost and log_level > logging.NOTSET:
                logger = logging.getLogger(args[0].__module__) if args else _LOGGER
                logger.log(log_level, "%s failed: %s", func.__name__.upper(), extract_exc_args(exc=bke))
            if re_raise:
                raise bke
            return no_raise_return

        def _log_duration(*, start: float, args: tuple[Any, ...]) -> None:
            _LOGGER.debug(
                "Execution of %s took %ss from %s",
                func.__name__.upper(),
                round(time.monotonic() - start, 3),
                args[0] if args else "",
            )

        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                start = time.monotonic()
                with _service_context() as outermost:
                    try:
                        return await func(*args, **kwargs)
                    except BaseKnxException as bke:
                        outer_bke = bke
                    finally:
                        if measure:
                            _log_duration(start=start, args=args)
                return _handle(outermost=outermost, args=args, bke=outer_bke)

            setattr(async_wrapper, _OPERATION_MARKER, True)
            return async_wrapper

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            start = time.monotonic()
            with _service_context() as outermost:
                try:
                    return func(*args, **kwargs)
                except BaseKnxException as bke:
                    outer_bke = bke
                finally:
                    if measure:
                        _log_duration(start=start, args=args)
            return _handle(outermost=outermost, args=args, bke=outer_bke)

        setattr(sync_wrapper, _OPERATION_MARKER, True)
        return sync_wrapper

    if func is not None:
        return decorator(func)
    return decorator


def get_device_operations(obj: object) -> dict[str, Callable[..., Any]]:
    """Return the public methods of obj that are wrapped by inspector."""
    operations: dict[str, Callable[..., Any]] = {}
    for name in dir(obj):
        if name.startswith("_"):
            continue
        if callable(member := getattr(obj, name, None)) and getattr(member, _OPERATION_MARKER, False):
            operations[name] = member
    return operations
