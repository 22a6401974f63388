"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Debounce defaults and explicit config loading.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .contracts import DebounceConfig, TimerOptions, validate_wait
from .errors import DebounceConfigError

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise DebounceConfigError(f"{name} must be a boolean, got {raw!r}")


def _env_float(name: str, default: float) -> float:
    value = _env_optional_float(name)
    return default if value is None else value


def _env_optional_float(name: str) -> float | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise DebounceConfigError(f"{name} must be a number, got {raw!r}") from exc


@dataclass(frozen=True, slots=True)
class DebounceSettings:
    """Process-level defaults for debounced wrappers."""

    wait_s: float = 0.3
    only_resolves_last: bool = True
    leading: bool = False
    accumulate: bool = False
    max_wait_s: float | None = None

    def __post_init__(self) -> None:
        validate_wait(self.wait_s)

    @staticmethod
    def from_env() -> "DebounceSettings":
        """Load settings from environment variables."""
        return DebounceSettings(
            wait_s=_env_float("LASTCALL_WAIT_S", 0.3),
            only_resolves_last=_env_bool("LASTCALL_ONLY_RESOLVES_LAST", True),
            leading=_env_bool("LASTCALL_LEADING", False),
            accumulate=_env_bool("LASTCALL_ACCUMULATE", False),
            max_wait_s=_env_optional_float("LASTCALL_MAX_WAIT_S"),
        )

    def to_config(self) -> DebounceConfig:
        """Adapt settings into a `DebounceConfig` with the default key."""
        try:
            timer = TimerOptions(
                leading=self.leading,
                accumulate=self.accumulate,
                max_wait_s=self.max_wait_s,
            )
        except ValueError as exc:
            raise DebounceConfigError(f"Invalid timer settings: {exc}") from exc
        return DebounceConfig(only_resolves_last=self.only_resolves_last, timer=timer)
