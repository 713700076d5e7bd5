"""Self-bound fallback listener used when no supervisor sockets are available."""

from __future__ import annotations

import socket

from .errors import ListenerBindError
from .interfaces import AcquiredListener
from .sockets import listeners_describe_socket


def listeners_bind_standalone(host: str, port: int, backlog: int = 2048) -> AcquiredListener:
    """Bind and listen on one TCP address.

    Args:
        host: Interface to bind; IPv6 literals select an IPv6 socket.
        port: TCP port, or 0 for an ephemeral port.
        backlog: Listen queue length.

    Returns:
        AcquiredListener: Listening socket with its display address.

    Raises:
        ListenerBindError: Raised when the socket cannot be bound or put into listening state.
    """

    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.listen(backlog)
    except OSError as error:
        sock.close()
        raise ListenerBindError(f"failed to bind {host}:{port}: {error}") from error

    address, bound_port = listeners_describe_socket(sock)
    return AcquiredListener(sock=sock, address=address, port=bound_port)
