"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Typed configuration for keyed debounced wrappers.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Hashable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Final, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import DebounceConfigError


class _NoKey(Enum):
    NO_KEY = "NO_KEY"

    def __repr__(self) -> str:
        return "NO_KEY"


NO_KEY: Final = _NoKey.NO_KEY
"""Key value routing a call to the wrapper's shared default instance."""

RouteKey: TypeAlias = Hashable
KeyFn: TypeAlias = Callable[..., RouteKey]


def validate_wait(wait_s: Any, *, name: str = "wait_s") -> None:
    """Reject quiet periods that are not finite, non-negative numbers."""
    if callable(wait_s):
        return
    if isinstance(wait_s, bool) or not isinstance(wait_s, (int, float)):
        raise DebounceConfigError(
            f"{name} must be a number or a callable, got {type(wait_s).__name__}"
        )
    if not math.isfinite(wait_s) or wait_s < 0:
        raise DebounceConfigError(f"{name} must be a finite, non-negative number, got {wait_s!r}")


def default_key(*args: Any, **kwargs: Any) -> RouteKey:
    """Route every call to the shared instance."""
    _ = args
    _ = kwargs
    return NO_KEY


class TimerOptions(BaseModel):
    """Options forwarded to the debounce timer primitive."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    leading: bool = False
    accumulate: bool = False
    max_wait_s: float | None = Field(default=None, gt=0)


@dataclass(frozen=True, slots=True)
class DebounceConfig:
    """
    Routing and resolution policy for one debounced wrapper.

    Attributes:
        key: Pure function of the call arguments returning the routing key,
            or `NO_KEY` to use the shared default instance.
        only_resolves_last: When true, only the most recent call's future on
            a given instance ever settles; earlier ones stay pending.
        timer: Options for the underlying debounce timer.
    """

    key: KeyFn = default_key
    only_resolves_last: bool = True
    timer: TimerOptions = field(default_factory=TimerOptions)

    def __post_init__(self) -> None:
        if not callable(self.key):
            raise DebounceConfigError("key must be callable")
        if not isinstance(self.only_resolves_last, bool):
            raise DebounceConfigError("only_resolves_last must be a bool")
        if not isinstance(self.timer, TimerOptions):
            raise DebounceConfigError("timer must be a TimerOptions instance")


def build_timer_options(
    base: TimerOptions,
    updates: TimerOptions | Mapping[str, Any],
) -> TimerOptions:
    """Overlay timer option fields on `base`, validating the result."""
    if isinstance(updates, TimerOptions):
        return updates
    if not isinstance(updates, Mapping):
        raise DebounceConfigError(
            f"timer options must be a mapping or TimerOptions, got {type(updates).__name__}"
        )
    try:
        return TimerOptions.model_validate({**base.model_dump(), **dict(updates)})
    except ValidationError as exc:
        raise DebounceConfigError(f"Invalid timer options: {exc}") from exc


def merge_config(
    base: DebounceConfig,
    options: DebounceConfig | Mapping[str, Any] | None,
) -> DebounceConfig:
    """
    Apply `options` on top of `base` field by field.

    A `DebounceConfig` replaces `base` outright. A mapping overrides only the
    fields it names; `None` values count as unspecified. Fields other than
    `key`, `only_resolves_last` and `timer` are timer options.
    """
    if options is None:
        return base
    if isinstance(options, DebounceConfig):
        return options
    if not isinstance(options, Mapping):
        raise DebounceConfigError(
            f"options must be a mapping or DebounceConfig, got {type(options).__name__}"
        )

    values = {name: value for name, value in options.items() if value is not None}
    changes: dict[str, Any] = {}
    if "key" in values:
        changes["key"] = values.pop("key")
    if "only_resolves_last" in values:
        changes["only_resolves_last"] = values.pop("only_resolves_last")

    timer = base.timer
    if "timer" in values:
        timer = build_timer_options(timer, values.pop("timer"))
    if values:
        timer = build_timer_options(timer, values)
    changes["timer"] = timer
    return replace(base, **changes)
