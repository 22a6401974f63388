"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: errors.py.
"""

from __future__ import annotations


class DebounceConfigError(ValueError):
    """Raised when a debounced wrapper is built from invalid configuration."""
