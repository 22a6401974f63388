"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Debounce timer primitive: coalesce a burst of calls into one execution.

Every call made while a burst is open receives the same future, which
settles to the outcome of the single execution the burst triggers.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Generic, TypeAlias, TypeVar

from .contracts import TimerOptions, build_timer_options, validate_wait
from .errors import DebounceConfigError
from .utils import callable_name, resolve_value, transfer_outcome

T = TypeVar("T")

logger = logging.getLogger("lastcall.timer")

WaitSpec: TypeAlias = float | Callable[[], float]
_Call: TypeAlias = tuple[tuple[Any, ...], dict[str, Any]]


@dataclass(slots=True)
class _Burst:
    """Calls collected during one quiet period and their shared future."""

    future: asyncio.Future[Any]
    started_at: float
    calls: list[_Call] = field(default_factory=list)
    handle: asyncio.TimerHandle | None = None

    def add(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> int:
        self.calls.append((args, kwargs))
        return len(self.calls) - 1


class DebouncedFunction(Generic[T]):
    """
    Trailing-edge debouncer returning one shared future per burst.

    `func` is invoked synchronously when a burst executes: from the timer
    callback on the trailing edge, or inside the call itself for a cold
    call with `leading=True`. Its awaitable result is then awaited in a task.
    A synchronous exception from `func` settles the burst future with it.

    Args:
        func: Function to run once per burst. May be async or return a
            plain value.
        wait_s: Quiet period in seconds, or a zero-argument callable
            evaluated on every call.
        options: Edge and batching options.
    """

    def __init__(
        self,
        func: Callable[..., Any],
        wait_s: WaitSpec,
        options: TimerOptions | None = None,
    ) -> None:
        if not callable(func):
            raise DebounceConfigError("func must be callable")
        validate_wait(wait_s)
        self._func = func
        self._wait_s = wait_s
        self._options = options or TimerOptions()
        self._name = callable_name(func)
        self._last_call_at: float | None = None
        self._burst: _Burst | None = None
        self._running: set[asyncio.Task[Any]] = set()

    @property
    def options(self) -> TimerOptions:
        return self._options

    @property
    def pending(self) -> bool:
        """True while a burst is waiting for its quiet period to elapse."""
        return self._burst is not None

    def __call__(self, *args: Any, **kwargs: Any) -> asyncio.Future[T]:
        if self._options.accumulate and kwargs:
            raise TypeError("keyword arguments are not supported with accumulate=True")

        loop = asyncio.get_running_loop()
        now = loop.time()
        wait_s = self._current_wait()
        is_cold = self._last_call_at is None or now - self._last_call_at > wait_s
        self._last_call_at = now

        if is_cold and self._options.leading:
            burst = _Burst(future=loop.create_future(), started_at=now)
            position = burst.add(args, kwargs)
            self._execute(burst)
            return self._caller_future(burst, position)

        burst = self._burst
        if burst is None:
            burst = _Burst(future=loop.create_future(), started_at=now)
            self._burst = burst
        elif burst.handle is not None:
            burst.handle.cancel()

        position = burst.add(args, kwargs)
        burst.handle = loop.call_later(self._delay(now, wait_s, burst), self._flush)
        return self._caller_future(burst, position)

    def _current_wait(self) -> float:
        if callable(self._wait_s):
            return max(0.0, float(self._wait_s()))
        return float(self._wait_s)

    def _delay(self, now: float, wait_s: float, burst: _Burst) -> float:
        max_wait_s = self._options.max_wait_s
        if max_wait_s is None:
            return wait_s
        remaining = burst.started_at + max_wait_s - now
        return max(0.0, min(wait_s, remaining))

    def _flush(self) -> None:
        burst = self._burst
        self._burst = None
        if burst is not None:
            self._execute(burst)

    def _execute(self, burst: _Burst) -> None:
        burst.handle = None
        logger.debug("Executing %s for a burst of %d call(s)", self._name, len(burst.calls))
        try:
            value = self._invoke(burst.calls)
        except Exception as exc:  # noqa: BLE001
            burst.future.set_exception(exc)
            return
        task = burst.future.get_loop().create_task(self._collect(burst.calls, value))
        self._running.add(task)
        task.add_done_callback(partial(self._settle, burst))

    def _invoke(self, calls: list[_Call]) -> Any:
        if not self._options.accumulate:
            args, kwargs = calls[-1]
            return self._func(*args, **kwargs)
        return self._func([args for args, _ in calls])

    async def _collect(self, calls: list[_Call], value: Any) -> Any:
        result = await resolve_value(value)
        if not self._options.accumulate:
            return result

        results = list(result)
        if len(results) != len(calls):
            raise ValueError(
                f"{self._name} returned {len(results)} result(s) for {len(calls)} accumulated call(s)"
            )
        return results

    def _settle(self, burst: _Burst, task: asyncio.Task[Any]) -> None:
        self._running.discard(task)
        transfer_outcome(task, burst.future)

    def _caller_future(self, burst: _Burst, position: int) -> asyncio.Future[Any]:
        if not self._options.accumulate:
            return burst.future

        picked: asyncio.Future[Any] = burst.future.get_loop().create_future()

        def _pick(source: asyncio.Future[Any]) -> None:
            if source.cancelled() or source.exception() is not None:
                transfer_outcome(source, picked)
            elif not picked.done():
                picked.set_result(source.result()[position])

        burst.future.add_done_callback(_pick)
        return picked


def debounce_promise(
    func: Callable[..., Any],
    wait_s: WaitSpec,
    options: TimerOptions | Mapping[str, Any] | None = None,
    **option_fields: Any,
) -> DebouncedFunction[Any]:
    """Build a debounced function; `options` and keyword fields are merged."""
    resolved = TimerOptions()
    if options is not None:
        resolved = build_timer_options(resolved, options)
    if option_fields:
        resolved = build_timer_options(resolved, option_fields)
    return DebouncedFunction(func, wait_s, resolved)
