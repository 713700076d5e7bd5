"""Listener acquisition package for supervisor handoff and fallback binding."""

from .acquisition import listeners_acquire
from .errors import ListenerBindError, ListenerError, ListenerHandoffError
from .interfaces import AcquiredListener, ListenerAcquisition, ListenTarget
from .server_starter import listeners_adopt_target, listeners_listen_all, listeners_parse_server_starter_targets
from .standalone import listeners_bind_standalone

__all__ = [
    "AcquiredListener",
    "ListenTarget",
    "ListenerAcquisition",
    "ListenerBindError",
    "ListenerError",
    "ListenerHandoffError",
    "listeners_acquire",
    "listeners_adopt_target",
    "listeners_bind_standalone",
    "listeners_listen_all",
    "listeners_parse_server_starter_targets",
]
