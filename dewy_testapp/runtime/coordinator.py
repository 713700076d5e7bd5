"""Signal-driven shutdown coordination and serving task supervision."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
from typing import Sequence

from .server import ListenerServer

logger = logging.getLogger(__name__)

SHUTDOWN_SIGNALS: tuple[signal.Signals, ...] = tuple(
    signal_number
    for signal_number in (
        signal.SIGINT,
        signal.SIGTERM,
        getattr(signal, "SIGHUP", None),
    )
    if signal_number is not None
)

# Extra time past the grace period before a server is forced down.
_FORCE_EXIT_MARGIN_SECONDS = 1.0
_STARTUP_POLL_SECONDS = 0.05


class ShutdownCoordinator:
    """One-shot shutdown notification shared by every listener server.

    The first request (signal or programmatic) asks each server to stop
    accepting connections. uvicorn then gives in-flight requests up to the
    grace period; servers still running past it are forced down.
    """

    def __init__(self, servers: Sequence[ListenerServer], grace_seconds: float):
        if grace_seconds <= 0:
            raise ValueError("grace_seconds must be > 0")
        self._servers = tuple(servers)
        self._grace_seconds = grace_seconds
        self._shutdown_event = asyncio.Event()
        self._installed_signals: list[signal.Signals] = []

    @property
    def shutdown_requested(self) -> bool:
        return self._shutdown_event.is_set()

    def coordinator_install_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        """Route SIGINT, SIGTERM and SIGHUP to `coordinator_request_shutdown`.

        Args:
            loop: Running event loop.
        """

        for signal_number in SHUTDOWN_SIGNALS:
            try:
                loop.add_signal_handler(signal_number, self.coordinator_request_shutdown, signal_number)
            except NotImplementedError:
                signal.signal(
                    signal_number,
                    lambda received, _frame: loop.call_soon_threadsafe(self.coordinator_request_shutdown, received),
                )
            self._installed_signals.append(signal_number)

    def coordinator_remove_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        for signal_number in self._installed_signals:
            try:
                loop.remove_signal_handler(signal_number)
            except NotImplementedError:
                signal.signal(signal_number, signal.SIG_DFL)
        self._installed_signals.clear()

    def coordinator_request_shutdown(self, signal_number: int | None = None) -> None:
        """Trigger shutdown once; later requests are ignored.

        Args:
            signal_number: Received signal, or None for a programmatic request.
        """

        if self._shutdown_event.is_set():
            return
        signal_name = signal.Signals(signal_number).name if signal_number is not None else "none"
        logger.info("Received signal, shutting down servers", extra={"signal": signal_name})
        self._shutdown_event.set()

    async def coordinator_wait_and_stop(self, serving_tasks: Sequence[asyncio.Task[None]]) -> None:
        """Wait for the shutdown request, then stop every server within the grace period.

        Args:
            serving_tasks: Tasks running `runtime_serve_listener`, aligned with the servers.
        """

        await self._shutdown_event.wait()
        if not serving_tasks:
            return
        await self._coordinator_wait_until_started(serving_tasks)
        for server in self._servers:
            server.should_exit = True

        _, pending = await asyncio.wait(serving_tasks, timeout=self._grace_seconds + _FORCE_EXIT_MARGIN_SECONDS)
        for server_index, (server, task) in enumerate(zip(self._servers, serving_tasks)):
            if task in pending:
                logger.error(
                    "Server shutdown error",
                    extra={
                        "server_index": server_index,
                        "address": server.listener_address,
                        "error": f"graceful shutdown exceeded {self._grace_seconds}s",
                    },
                )
                server.force_exit = True

    async def _coordinator_wait_until_started(self, serving_tasks: Sequence[asyncio.Task[None]]) -> None:
        # uvicorn skips its shutdown sequence when should_exit is set before startup completes
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._grace_seconds
        while loop.time() < deadline and any(
            not server.started and not task.done() for server, task in zip(self._servers, serving_tasks)
        ):
            await asyncio.sleep(_STARTUP_POLL_SECONDS)


async def runtime_serve_listener(server: ListenerServer, mode: str) -> bool:
    """Serve one listener and log failures instead of propagating them.

    Args:
        server: Listener server to run.
        mode: Acquisition mode tag used in log attributes.

    Returns:
        bool: False when serving raised, True otherwise.
    """

    logger.info("Starting HTTP server", extra={"address": server.listener_address, "mode": mode})
    try:
        await server.server_serve_listener()
    except Exception:
        logger.exception("Server failed", extra={"address": server.listener_address})
        return False
    return True


async def runtime_serve_all(servers: Sequence[ListenerServer], coordinator: ShutdownCoordinator, mode: str) -> bool:
    """Run every listener server and return once all of them have stopped.

    Args:
        servers: Listener servers, one per acquired socket.
        coordinator: Shutdown coordinator owning the same servers.
        mode: Acquisition mode tag used in log attributes.

    Returns:
        bool: True when a shutdown request stopped servers that were serving;
            False when every server failed or they stopped on their own.
    """

    serving_tasks = [
        asyncio.create_task(runtime_serve_listener(server, mode), name=f"serve:{server.listener_address}")
        for server in servers
    ]
    stop_task = asyncio.create_task(coordinator.coordinator_wait_and_stop(serving_tasks), name="shutdown")
    try:
        served = await asyncio.gather(*serving_tasks)
    finally:
        if not stop_task.done():
            stop_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await stop_task

    if not any(served):
        logger.error("No servers could be started", extra={"servers_count": len(servers)})
        return False
    if not coordinator.shutdown_requested:
        logger.warning("All servers stopped without a shutdown request")
        return False
    logger.info("All servers stopped gracefully")
    return True


async def _runtime_main(servers: Sequence[ListenerServer], grace_seconds: float, mode: str) -> bool:
    coordinator = ShutdownCoordinator(servers=servers, grace_seconds=grace_seconds)
    loop = asyncio.get_running_loop()
    coordinator.coordinator_install_signal_handlers(loop)
    try:
        return await runtime_serve_all(servers, coordinator, mode)
    finally:
        coordinator.coordinator_remove_signal_handlers(loop)


def runtime_run(servers: Sequence[ListenerServer], grace_seconds: float, mode: str) -> bool:
    """Serve all listeners in a fresh event loop until a shutdown signal arrives.

    Args:
        servers: Listener servers, one per acquired socket.
        grace_seconds: Bound for in-flight requests during shutdown.
        mode: Acquisition mode tag used in log attributes.

    Returns:
        bool: True after a graceful shutdown, False when nothing was served
            or servers stopped without a shutdown request.
    """

    return asyncio.run(_runtime_main(servers, grace_seconds, mode))
