"""FastAPI application factory for one served listener.

Each listener gets its own application so `/listener` and `/` can report the
address the request actually arrived on.
"""

from fastapi import FastAPI

from dewy_testapp.domain import ServingContext

from .routers import api_create_diagnostics_router, api_create_echo_router, api_create_health_router


def create_api_application(context: ServingContext) -> FastAPI:
    """Create the FastAPI application instance for one listener.

    Interactive docs and the OpenAPI schema are disabled so the served path
    table is exactly the diagnostic endpoints.

    Args:
        context: Read-only serving context shared by every handler of the listener.

    Returns:
        FastAPI: Framework application instance with diagnostic routes.

    Raises:
        ValueError: Raised when context is None.
    """

    if context is None:
        raise ValueError("context must not be None")

    application = FastAPI(
        title=context.build_info.application_name,
        version=context.build_info.version,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    application.include_router(api_create_health_router(context=context))
    application.include_router(api_create_diagnostics_router(context=context))
    application.include_router(api_create_echo_router())
    return application
