"""Typed domain models shared across runtime layers.

Every model here is immutable once constructed at startup. Handlers only read
them, so the serving tasks share them without locking.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class ServingMode(str, Enum):
    """How the process obtained its listening sockets."""

    SERVER_STARTER = "server-starter"
    STANDALONE = "standalone"


@dataclass(frozen=True)
class BuildInfo:
    """Static build metadata for runtime identification.

    Attributes:
        application_name: Human-readable app name.
        version: Semantic version string.
        commit: Source commit the build was produced from.
        build_date: Build date label.
    """

    application_name: str
    version: str
    commit: str
    build_date: str


@dataclass(frozen=True)
class ServingContext:
    """Read-only state injected into the handlers of one listener.

    Attributes:
        build_info: Build metadata shared by all listeners.
        start_time: Wall-clock process start time (UTC).
        start_monotonic_ns: Monotonic clock reading taken with `start_time`.
        listener_addresses: Display addresses of every served listener.
        endpoints: Mapping of `port_<N>` labels to local URLs.
        mode: Socket acquisition mode.
        current_address: Display address of the listener owning this context.
        fallback_port: Port used for standalone binding.
        server_starter_env: Raw supervisor handoff value, empty when unset.
    """

    build_info: BuildInfo
    start_time: datetime
    start_monotonic_ns: int
    listener_addresses: tuple[str, ...]
    endpoints: dict[str, str] = field(hash=False)
    mode: ServingMode
    current_address: str
    fallback_port: int
    server_starter_env: str = ""


@dataclass(frozen=True)
class AppStatus:
    """Health snapshot computed per request.

    Attributes:
        version: Semantic version string.
        commit: Build commit.
        build_date: Build date label.
        start_time: Process start time in RFC 3339 form.
        uptime: Elapsed time since start as a duration string.
        listeners: Display addresses of every served listener.
        endpoints: Mapping of port labels to local URLs.
        mode: Socket acquisition mode tag.
    """

    version: str
    commit: str
    build_date: str
    start_time: str
    uptime: str
    listeners: list[str]
    endpoints: dict[str, str]
    mode: str

    def status_to_payload(self) -> dict[str, object]:
        """Return the JSON-serializable health payload.

        Returns:
            dict[str, object]: Health payload keyed by wire field names.
        """

        return {
            "version": self.version,
            "commit": self.commit,
            "build_date": self.build_date,
            "start_time": self.start_time,
            "uptime": self.uptime,
            "listeners": list(self.listeners),
            "endpoints": dict(self.endpoints),
            "mode": self.mode,
        }
