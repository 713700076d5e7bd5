"""Application bootstrap wiring from acquired listeners to runnable servers."""

from __future__ import annotations

import time
from datetime import datetime, timezone

from fastapi import FastAPI

from dewy_testapp.api import create_api_application
from dewy_testapp.config import AppSettings
from dewy_testapp.domain import ServingContext, ServingMode, domain_build_endpoint_map
from dewy_testapp.listeners import ListenerAcquisition
from dewy_testapp.runtime import ListenerServer, runtime_create_server


def bootstrap_build_serving_contexts(
    settings: AppSettings,
    acquisition: ListenerAcquisition,
    start_time: datetime | None = None,
    start_monotonic_ns: int | None = None,
) -> tuple[ServingContext, ...]:
    """Build one read-only serving context per acquired listener.

    Supervisor listeners report their own socket addresses. The standalone
    listener reports its bound address in the listener list and `:<port>` as
    its current address.

    Args:
        settings: Validated runtime settings.
        acquisition: Result of the socket acquisition policy.
        start_time: Process start wall-clock time; defaults to now (UTC).
        start_monotonic_ns: Monotonic reading paired with `start_time`; defaults to now.

    Returns:
        tuple[ServingContext, ...]: Contexts aligned with `acquisition.listeners`.

    Raises:
        ValueError: Raised when the acquisition carries no listeners.
    """

    if not acquisition.listeners:
        raise ValueError("acquisition must carry at least one listener")

    resolved_start_time = start_time or datetime.now(timezone.utc)
    resolved_start_monotonic_ns = start_monotonic_ns if start_monotonic_ns is not None else time.monotonic_ns()
    build_info = settings.settings_build_info()
    listener_addresses = tuple(listener.address for listener in acquisition.listeners)
    endpoints = domain_build_endpoint_map(
        listener.port for listener in acquisition.listeners if listener.port is not None
    )

    contexts: list[ServingContext] = []
    for listener in acquisition.listeners:
        if acquisition.mode is ServingMode.STANDALONE:
            current_address = f":{listener.port}"
        else:
            current_address = listener.address
        contexts.append(
            ServingContext(
                build_info=build_info,
                start_time=resolved_start_time,
                start_monotonic_ns=resolved_start_monotonic_ns,
                listener_addresses=listener_addresses,
                endpoints=dict(endpoints),
                mode=acquisition.mode,
                current_address=current_address,
                fallback_port=settings.fallback_port,
                server_starter_env=acquisition.server_starter_env,
            )
        )
    return tuple(contexts)


def bootstrap_create_application(context: ServingContext) -> FastAPI:
    """Assemble the HTTP application for one listener context.

    Args:
        context: Read-only serving context.

    Returns:
        FastAPI: Application exposing the diagnostic path table.
    """

    return create_api_application(context=context)


def bootstrap_create_servers(
    settings: AppSettings,
    acquisition: ListenerAcquisition,
    contexts: tuple[ServingContext, ...],
) -> list[ListenerServer]:
    """Create one uvicorn server per listener, each with its own application.

    Args:
        settings: Validated runtime settings.
        acquisition: Result of the socket acquisition policy.
        contexts: Serving contexts aligned with `acquisition.listeners`.

    Returns:
        list[ListenerServer]: Servers ready for `runtime_run`.

    Raises:
        ValueError: Raised when contexts and listeners are not aligned.
    """

    if len(contexts) != len(acquisition.listeners):
        raise ValueError("contexts must align with acquired listeners")

    return [
        runtime_create_server(
            application=bootstrap_create_application(context),
            listener=listener,
            settings=settings,
        )
        for listener, context in zip(acquisition.listeners, contexts)
    ]
