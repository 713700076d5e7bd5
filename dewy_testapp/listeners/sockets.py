"""Socket address rendering shared by inherited and self-bound listeners."""

from __future__ import annotations

import socket


def listeners_describe_socket(sock: socket.socket) -> tuple[str, int | None]:
    """Return the display address and TCP port of a listening socket.

    Args:
        sock: Bound socket.

    Returns:
        tuple[str, int | None]: `host:port` (IPv6 hosts bracketed) and port for TCP
        sockets, or the filesystem path and None for UNIX sockets.
    """

    local_address = sock.getsockname()
    if sock.family == socket.AF_INET:
        host, port = local_address
        return f"{host}:{port}", port
    if sock.family == socket.AF_INET6:
        host, port = local_address[0], local_address[1]
        return f"[{host}]:{port}", port
    if isinstance(local_address, bytes):
        local_address = local_address.decode("utf-8", errors="replace")
    return str(local_address), None
