"""Health endpoint router composition for build and listener status."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from dewy_testapp.domain import ServingContext, domain_build_app_status


def api_create_health_router(context: ServingContext) -> APIRouter:
    """Create health-check router reporting build metadata, uptime and listeners.

    Args:
        context: Read-only serving context of the owning listener.

    Returns:
        APIRouter: Router exposing `/health` endpoint.

    Raises:
        ValueError: Raised when context is None.
    """

    if context is None:
        raise ValueError("context must not be None")

    router = APIRouter(tags=["health"])

    @router.get("/health")
    def api_health_status() -> JSONResponse:
        """Return the health snapshot recomputed for this request.

        Returns:
            JSONResponse: Build metadata, start time, uptime, listeners, endpoints and mode.
        """

        app_status = domain_build_app_status(context)
        return JSONResponse(content=app_status.status_to_payload(), status_code=status.HTTP_200_OK)

    return router
