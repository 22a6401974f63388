"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Key router: one lazily built debounced instance per routing key.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from threading import Lock
from typing import Any, Protocol

from .contracts import NO_KEY, DebounceConfig, RouteKey, TimerOptions
from .gate import GatedFunction, only_resolves_last
from .timer import WaitSpec, debounce_promise
from .utils import callable_name

logger = logging.getLogger("lastcall.router")


class TimerFactory(Protocol):
    """Builds the debounce timer primitive wrapped by each instance."""

    def __call__(
        self,
        func: Callable[..., Any],
        wait_s: WaitSpec,
        options: TimerOptions,
    ) -> Callable[..., asyncio.Future[Any]]: ...


@dataclass(frozen=True, slots=True)
class Instance:
    """Debounced execution unit bound to one routing key."""

    key: RouteKey
    debounced: Callable[..., asyncio.Future[Any]]
    gated: GatedFunction[Any] | None = None

    def call(self, *args: Any, **kwargs: Any) -> asyncio.Future[Any]:
        if self.gated is not None:
            return self.gated(*args, **kwargs)
        return self.debounced(*args, **kwargs)


class DebounceCache:
    """
    Route calls to per-key debounced instances of one function.

    Instances are created on first use and kept for the cache's lifetime.
    Calls whose key is `NO_KEY` share a single default instance that lives
    outside the keyed table.
    """

    def __init__(
        self,
        func: Callable[..., Any],
        wait_s: WaitSpec,
        config: DebounceConfig | None = None,
        *,
        timer_factory: TimerFactory | None = None,
    ) -> None:
        self._func = func
        self._wait_s = wait_s
        self._config = config or DebounceConfig()
        self._timer_factory: TimerFactory = timer_factory or debounce_promise
        self._instances: dict[RouteKey, Instance] = {}
        self._default: Instance | None = None
        self._lock = Lock()

    @property
    def func(self) -> Callable[..., Any]:
        return self._func

    @property
    def wait_s(self) -> WaitSpec:
        return self._wait_s

    @property
    def timer_factory(self) -> TimerFactory:
        return self._timer_factory

    @property
    def config(self) -> DebounceConfig:
        return self._config

    @property
    def has_default(self) -> bool:
        return self._default is not None

    def __len__(self) -> int:
        return len(self._instances) + (1 if self._default is not None else 0)

    def __contains__(self, key: object) -> bool:
        if key is NO_KEY:
            return self._default is not None
        return key in self._instances

    def keys(self) -> Iterator[RouteKey]:
        """Iterate keyed routes in creation order; the default is not listed."""
        return iter(list(self._instances))

    def resolve(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Instance:
        """Return the instance for the key derived from the call arguments."""
        key = self._config.key(*args, **kwargs)
        if key is NO_KEY:
            return self._default_instance()

        existing = self._instances.get(key)
        if existing is not None:
            return existing
        with self._lock:
            existing = self._instances.get(key)
            if existing is None:
                existing = self._build(key)
                self._instances[key] = existing
            return existing

    def _default_instance(self) -> Instance:
        if self._default is not None:
            return self._default
        with self._lock:
            if self._default is None:
                self._default = self._build(NO_KEY)
            return self._default

    def _build(self, key: RouteKey) -> Instance:
        debounced = self._timer_factory(self._func, self._wait_s, self._config.timer)
        gated = only_resolves_last(debounced) if self._config.only_resolves_last else None
        logger.debug(
            "Created debounced instance for %s (key=%r, only_resolves_last=%s)",
            callable_name(self._func),
            key,
            self._config.only_resolves_last,
        )
        return Instance(key=key, debounced=debounced, gated=gated)
