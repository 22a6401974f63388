"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Resolution gate: only the most recent call's future may settle.

Earlier futures are superseded as soon as a newer call is made and then stay
pending forever, whether their underlying work resolves or fails.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Any, Generic, TypeVar

from .utils import transfer_outcome

T = TypeVar("T")


class InvocationState(str, Enum):
    PENDING = "pending"
    SUPERSEDED = "superseded"
    SETTLED = "settled"


@dataclass(slots=True)
class _Invocation:
    outer: asyncio.Future[Any]
    state: InvocationState = InvocationState.PENDING


class GatedFunction(Generic[T]):
    """Wrap a future-returning function so only its latest future settles."""

    def __init__(self, func: Callable[..., Awaitable[T]]) -> None:
        self._func = func
        self._current: _Invocation | None = None

    @property
    def current_state(self) -> InvocationState | None:
        """State of the most recent invocation, or None before the first call."""
        if self._current is None:
            return None
        return self._current.state

    def __call__(self, *args: Any, **kwargs: Any) -> asyncio.Future[T]:
        previous = self._current
        if previous is not None and previous.state is InvocationState.PENDING:
            previous.state = InvocationState.SUPERSEDED

        inner = asyncio.ensure_future(self._func(*args, **kwargs))
        invocation = _Invocation(outer=inner.get_loop().create_future())
        self._current = invocation
        inner.add_done_callback(partial(self._on_inner_done, invocation))
        return invocation.outer

    @staticmethod
    def _on_inner_done(invocation: _Invocation, inner: asyncio.Future[Any]) -> None:
        if invocation.state is not InvocationState.PENDING:
            if not inner.cancelled():
                inner.exception()
            return
        invocation.state = InvocationState.SETTLED
        transfer_outcome(inner, invocation.outer)


def only_resolves_last(func: Callable[..., Awaitable[T]]) -> GatedFunction[T]:
    """Return a wrapper whose earlier futures never settle once superseded."""
    return GatedFunction(func)
