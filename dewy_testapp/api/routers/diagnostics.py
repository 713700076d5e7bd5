"""Diagnostic endpoint router for version, listener, mode and greeting surfaces."""

import os

from fastapi import APIRouter
from fastapi.responses import JSONResponse, PlainTextResponse

from dewy_testapp.domain import ServingContext, ServingMode


def api_create_diagnostics_router(context: ServingContext) -> APIRouter:
    """Create router for the fixed diagnostic path table.

    Args:
        context: Read-only serving context of the owning listener.

    Returns:
        APIRouter: Router exposing `/version`, `/listener`, `/mode` and `/`.

    Raises:
        ValueError: Raised when context is None.
    """

    if context is None:
        raise ValueError("context must not be None")

    router = APIRouter(tags=["diagnostics"])
    build_info = context.build_info

    @router.get("/version", response_class=PlainTextResponse)
    def api_version() -> PlainTextResponse:
        """Return the configured version string followed by a newline."""

        return PlainTextResponse(f"{build_info.version}\n")

    @router.get("/listener")
    def api_listener() -> JSONResponse:
        """Return the current listener, all listeners and handoff details.

        Returns:
            JSONResponse: Listener payload including the raw handoff value and process id.
        """

        payload = {
            "current_listener": context.current_address,
            "all_listeners": list(context.listener_addresses),
            "version": build_info.version,
            "mode": context.mode.value,
            "server_starter_env": context.server_starter_env,
            "pid": os.getpid(),
        }
        return JSONResponse(content=payload)

    @router.get("/mode")
    def api_mode() -> JSONResponse:
        """Return socket acquisition mode details.

        Returns:
            JSONResponse: Mode, fallback port, supervisor flag and listener count.
        """

        payload = {
            "mode": context.mode.value,
            "fallback_port": str(context.fallback_port),
            "server_starter_active": context.mode is ServingMode.SERVER_STARTER,
            "listeners_count": len(context.listener_addresses),
        }
        return JSONResponse(content=payload)

    @router.get("/", response_class=PlainTextResponse)
    def api_greeting() -> PlainTextResponse:
        return PlainTextResponse(
            f"{build_info.application_name} v{build_info.version} "
            f"running on {context.current_address} ({context.mode.value} mode)\n"
        )

    return router
