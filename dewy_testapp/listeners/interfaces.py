"""Typed contracts for listener acquisition results."""

from __future__ import annotations

import socket
from dataclasses import dataclass
from typing import Literal

from dewy_testapp.domain import ServingMode

ListenKind = Literal["tcp", "unix"]


@dataclass(frozen=True)
class ListenTarget:
    """One `address=fd` entry of a supervisor handoff value.

    Attributes:
        address: Host and port, bare port, or UNIX socket path as written by the supervisor.
        fd: Inherited file descriptor number.
        kind: Socket kind implied by the address.
    """

    address: str
    fd: int
    kind: ListenKind


@dataclass(frozen=True)
class AcquiredListener:
    """Listening socket ready to be served.

    Attributes:
        sock: Bound, listening socket object owned by this process.
        address: Display address reported by diagnostic endpoints.
        port: TCP port number, or None for UNIX sockets.
    """

    sock: socket.socket
    address: str
    port: int | None


@dataclass(frozen=True)
class ListenerAcquisition:
    """Outcome of the socket acquisition policy.

    Attributes:
        mode: `server-starter` when supervisor sockets were adopted, else `standalone`.
        listeners: Acquired listening sockets, never empty.
        server_starter_env: Raw handoff value, empty when unset.
    """

    mode: ServingMode
    listeners: tuple[AcquiredListener, ...]
    server_starter_env: str
