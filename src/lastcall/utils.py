"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: utils.py.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Callable
from typing import Any


async def resolve_value(value: Any) -> Any:
    """Await `value` when it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


def transfer_outcome(source: asyncio.Future[Any], target: asyncio.Future[Any]) -> None:
    """Copy the settled outcome of `source` onto a pending `target`."""
    if source.cancelled():
        if not target.done():
            target.cancel()
        return
    # Retrieved even when the target is already done.
    exc = source.exception()
    if target.done():
        return
    if exc is not None:
        target.set_exception(exc)
    else:
        target.set_result(source.result())


def callable_name(func: Callable[..., Any]) -> str:
    return getattr(func, "__qualname__", None) or repr(func)
