"""uvicorn server bound to one pre-acquired listening socket."""

from __future__ import annotations

import contextlib
from typing import Iterator

import uvicorn
from fastapi import FastAPI

from dewy_testapp.config import AppSettings
from dewy_testapp.listeners import AcquiredListener


class ListenerServer(uvicorn.Server):
    """uvicorn server that serves exactly one handed-in socket.

    Signal handling is left to `ShutdownCoordinator`, which stops every server
    of the process together.

    Attributes:
        listener: Socket served by this instance.
    """

    def __init__(self, config: uvicorn.Config, listener: AcquiredListener):
        super().__init__(config)
        self.listener = listener

    @contextlib.contextmanager
    def capture_signals(self) -> Iterator[None]:
        yield

    @property
    def listener_address(self) -> str:
        return self.listener.address

    async def server_serve_listener(self) -> None:
        """Serve the owned socket until `should_exit` is set.

        Raises:
            OSError: Raised when the event loop rejects the socket.
        """

        await self.serve(sockets=[self.listener.sock])


def runtime_create_server(application: FastAPI, listener: AcquiredListener, settings: AppSettings) -> ListenerServer:
    """Create a uvicorn server for one listener.

    uvicorn's own logging configuration is disabled so its records reach the
    root handler installed by `logs_configure`.

    Args:
        application: FastAPI application built for this listener.
        listener: Acquired listening socket.
        settings: Validated runtime settings.

    Returns:
        ListenerServer: Server ready to be awaited.
    """

    config = uvicorn.Config(
        application,
        host=settings.fallback_host,
        port=listener.port if listener.port is not None else settings.fallback_port,
        log_config=None,
        access_log=settings.access_log_enabled,
        timeout_graceful_shutdown=settings.shutdown_grace_seconds,
        lifespan="off",
    )
    return ListenerServer(config=config, listener=listener)
