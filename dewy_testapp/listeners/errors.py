"""Project-native typed exceptions for listening socket acquisition failures."""

from __future__ import annotations


class ListenerError(RuntimeError):
    """Base exception for listener acquisition failures."""


class ListenerHandoffError(ListenerError, ValueError):
    """Supervisor handoff value is missing, malformed, or names unusable descriptors."""


class ListenerBindError(ListenerError, OSError):
    """Self-bound fallback socket could not be opened."""
