"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Public entry points building keyed, last-call-wins debounced wrappers.
"""

from __future__ import annotations

import asyncio
import functools
import types
import weakref
from collections.abc import Callable, Mapping
from threading import Lock
from typing import Any

from .contracts import DebounceConfig, merge_config, validate_wait
from .errors import DebounceConfigError
from .router import DebounceCache, TimerFactory
from .timer import WaitSpec

DEFAULT_CONFIG = DebounceConfig()


class KeyedDebounced:
    """
    Call-compatible wrapper routing each call to its key's debounced instance.

    Calling it returns an `asyncio.Future`, so it must be called from inside a
    running event loop. With `only_resolves_last` enabled, futures of calls
    that were superseded on the same key never settle.

    Used as a method decorator, each object gets its own wrapper, bound to
    that object and with its own cache; the key function then receives the
    call arguments without `self`. The object must support weak references.
    """

    def __init__(self, func: Callable[..., Any], cache: DebounceCache) -> None:
        self._cache = cache
        self._bound: weakref.WeakKeyDictionary[Any, KeyedDebounced] = (
            weakref.WeakKeyDictionary()
        )
        self._bind_lock = Lock()
        functools.update_wrapper(self, func)

    @property
    def cache(self) -> DebounceCache:
        return self._cache

    @property
    def config(self) -> DebounceConfig:
        return self._cache.config

    def __get__(self, obj: Any, objtype: type | None = None) -> Any:
        if obj is None:
            return self
        with self._bind_lock:
            bound = self._bound.get(obj)
            if bound is None:
                method = types.MethodType(self._cache.func, obj)
                cache = DebounceCache(
                    method,
                    self._cache.wait_s,
                    self._cache.config,
                    timer_factory=self._cache.timer_factory,
                )
                bound = KeyedDebounced(method, cache)
                self._bound[obj] = bound
            return bound

    def __call__(self, *args: Any, **kwargs: Any) -> asyncio.Future[Any]:
        instance = self._cache.resolve(args, kwargs)
        return instance.call(*args, **kwargs)


def debounce(
    func: Callable[..., Any],
    wait_s: WaitSpec,
    options: DebounceConfig | Mapping[str, Any] | None = None,
    *,
    timer_factory: TimerFactory | None = None,
    **overrides: Any,
) -> KeyedDebounced:
    """
    Wrap `func` so bursts of calls are debounced per routing key.

    Args:
        func: Async function (or any callable returning an awaitable) to wrap.
        wait_s: Quiet period in seconds, or a callable returning it.
        options: `DebounceConfig` or mapping with `key`, `only_resolves_last`,
            `timer` and/or individual timer option fields.
        timer_factory: Replacement for the built-in debounce timer primitive.
        **overrides: Same fields as `options`, applied after it.

    Raises:
        DebounceConfigError: If the configuration is invalid.
    """
    if not callable(func):
        raise DebounceConfigError("func must be callable")
    validate_wait(wait_s)

    config = merge_config(merge_config(DEFAULT_CONFIG, options), overrides or None)
    cache = DebounceCache(func, wait_s, config, timer_factory=timer_factory)
    return KeyedDebounced(func, cache)


def debounced(
    wait_s: WaitSpec,
    options: DebounceConfig | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> Callable[[Callable[..., Any]], KeyedDebounced]:
    """Decorator form of `debounce`."""

    def decorator(func: Callable[..., Any]) -> KeyedDebounced:
        return debounce(func, wait_s, options, **overrides)

    return decorator
