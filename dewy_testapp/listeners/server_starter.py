"""Supervisor socket handoff compatible with the server-starter protocol.

A supervisor such as `start_server` opens the listening sockets itself and
execs the worker with `SERVER_STARTER_PORT` describing them, for example
`0.0.0.0:8080=3;8081=4;/tmp/app.sock=5`. The worker adopts the descriptors
instead of binding, so connections survive worker restarts.
"""

from __future__ import annotations

import os
import socket

from .errors import ListenerHandoffError
from .interfaces import AcquiredListener, ListenTarget
from .sockets import listeners_describe_socket


def listeners_parse_server_starter_targets(raw_value: str) -> tuple[ListenTarget, ...]:
    """Parse a supervisor handoff value into listen targets.

    Args:
        raw_value: Value of the handoff environment variable.

    Returns:
        tuple[ListenTarget, ...]: Targets in handoff order.

    Raises:
        ListenerHandoffError: Raised when the value is empty or an entry is malformed.
    """

    if not raw_value or not raw_value.strip():
        raise ListenerHandoffError("no listening target found in supervisor handoff value")

    targets: list[ListenTarget] = []
    for pair_text in raw_value.split(";"):
        if not pair_text.strip():
            continue
        address_text, separator, fd_text = pair_text.partition("=")
        address = address_text.strip()
        fd_text = fd_text.strip()
        if not separator or not address:
            raise ListenerHandoffError(f"failed to parse '{pair_text}' as listen target: expected address=fd")
        try:
            fd = int(fd_text)
        except ValueError as error:
            raise ListenerHandoffError(f"failed to parse '{pair_text}' as listen target: invalid fd") from error
        if fd < 0:
            raise ListenerHandoffError(f"failed to parse '{pair_text}' as listen target: negative fd")
        targets.append(ListenTarget(address=address, fd=fd, kind="unix" if address.startswith("/") else "tcp"))

    if not targets:
        raise ListenerHandoffError("no listening target found in supervisor handoff value")
    return tuple(targets)


def listeners_adopt_target(target: ListenTarget) -> AcquiredListener:
    """Wrap one inherited descriptor in a socket object owned by this process.

    The descriptor is duplicated, so closing the returned socket leaves the
    inherited descriptor untouched.

    Args:
        target: Parsed handoff entry.

    Returns:
        AcquiredListener: Listening socket with its display address.

    Raises:
        ListenerHandoffError: Raised when the descriptor is not a usable stream socket.
    """

    try:
        duplicated_fd = os.dup(target.fd)
    except OSError as error:
        raise ListenerHandoffError(f"cannot use fd {target.fd} for {target.address}: {error}") from error

    try:
        sock = socket.socket(fileno=duplicated_fd)
    except OSError as error:
        os.close(duplicated_fd)
        raise ListenerHandoffError(f"fd {target.fd} for {target.address} is not a socket: {error}") from error

    expected_unix = target.kind == "unix"
    is_unix = sock.family == getattr(socket, "AF_UNIX", None)
    if sock.type != socket.SOCK_STREAM or expected_unix != is_unix:
        sock.close()
        raise ListenerHandoffError(f"fd {target.fd} for {target.address} is not a {target.kind} stream socket")

    accept_option = getattr(socket, "SO_ACCEPTCONN", None)
    if accept_option is not None and not sock.getsockopt(socket.SOL_SOCKET, accept_option):
        sock.close()
        raise ListenerHandoffError(f"fd {target.fd} for {target.address} is not a listening socket")

    address, port = listeners_describe_socket(sock)
    return AcquiredListener(sock=sock, address=address, port=port)


def listeners_listen_all(raw_value: str) -> tuple[AcquiredListener, ...]:
    """Adopt every socket named by a supervisor handoff value.

    Args:
        raw_value: Value of the handoff environment variable.

    Returns:
        tuple[AcquiredListener, ...]: Adopted listeners in handoff order.

    Raises:
        ListenerHandoffError: Raised when parsing fails or any descriptor is unusable.
            Sockets adopted before the failure are closed.
    """

    targets = listeners_parse_server_starter_targets(raw_value)
    acquired: list[AcquiredListener] = []
    try:
        for target in targets:
            acquired.append(listeners_adopt_target(target))
    except ListenerHandoffError:
        for listener in acquired:
            listener.sock.close()
        raise
    return tuple(acquired)
