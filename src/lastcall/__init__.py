"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Keyed async debouncing where only the last call's future resolves.
"""

from .contracts import NO_KEY, DebounceConfig, TimerOptions, default_key
from .errors import DebounceConfigError
from .facade import KeyedDebounced, debounce, debounced
from .gate import GatedFunction, InvocationState, only_resolves_last
from .router import DebounceCache, Instance
from .settings import DebounceSettings
from .timer import DebouncedFunction, debounce_promise

__all__ = [
    "NO_KEY",
    "DebounceConfig",
    "TimerOptions",
    "default_key",
    "DebounceConfigError",
    "KeyedDebounced",
    "debounce",
    "debounced",
    "GatedFunction",
    "InvocationState",
    "only_resolves_last",
    "DebounceCache",
    "Instance",
    "DebounceSettings",
    "DebouncedFunction",
    "debounce_promise",
]
