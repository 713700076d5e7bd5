"""Domain models used across application layer boundaries."""

from .models import AppStatus, BuildInfo, ServingContext, ServingMode
from .status import domain_build_app_status, domain_build_endpoint_map, domain_format_duration

__all__ = [
    "AppStatus",
    "BuildInfo",
    "ServingContext",
    "ServingMode",
    "domain_build_app_status",
    "domain_build_endpoint_map",
    "domain_format_duration",
]
