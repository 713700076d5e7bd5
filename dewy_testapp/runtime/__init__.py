"""Runtime package for per-listener serving and graceful shutdown."""

from .coordinator import (
    SHUTDOWN_SIGNALS,
    ShutdownCoordinator,
    runtime_run,
    runtime_serve_all,
    runtime_serve_listener,
)
from .server import ListenerServer, runtime_create_server

__all__ = [
    "SHUTDOWN_SIGNALS",
    "ListenerServer",
    "ShutdownCoordinator",
    "runtime_create_server",
    "runtime_run",
    "runtime_serve_all",
    "runtime_serve_listener",
]
