"""Health snapshot and endpoint map construction helpers."""

from __future__ import annotations

import time
from typing import Iterable

from .models import AppStatus, ServingContext

_NANOSECONDS_PER_MICROSECOND = 1_000
_NANOSECONDS_PER_MILLISECOND = 1_000_000
_NANOSECONDS_PER_SECOND = 1_000_000_000
_NANOSECONDS_PER_MINUTE = 60 * _NANOSECONDS_PER_SECOND
_NANOSECONDS_PER_HOUR = 60 * _NANOSECONDS_PER_MINUTE


def domain_build_endpoint_map(ports: Iterable[int]) -> dict[str, str]:
    """Build the `port_<N>` to local URL mapping reported by `/health`.

    Args:
        ports: TCP port numbers of the served listeners.

    Returns:
        dict[str, str]: Mapping such as `{"port_3333": "http://localhost:3333"}`.
    """

    return {f"port_{port}": f"http://localhost:{port}" for port in ports}


def domain_format_duration(total_nanoseconds: int) -> str:
    """Render a nanosecond count the way Go's `time.Duration.String` does.

    Args:
        total_nanoseconds: Duration in nanoseconds.

    Returns:
        str: Duration text such as `"1h2m3.5s"`, `"150ms"` or `"0s"`.
    """

    if total_nanoseconds == 0:
        return "0s"

    sign = "-" if total_nanoseconds < 0 else ""
    remaining = abs(total_nanoseconds)

    if remaining < _NANOSECONDS_PER_SECOND:
        if remaining < _NANOSECONDS_PER_MICROSECOND:
            return f"{sign}{remaining}ns"
        if remaining < _NANOSECONDS_PER_MILLISECOND:
            return f"{sign}{_format_fraction(remaining, _NANOSECONDS_PER_MICROSECOND)}µs"
        return f"{sign}{_format_fraction(remaining, _NANOSECONDS_PER_MILLISECOND)}ms"

    hours, remaining = divmod(remaining, _NANOSECONDS_PER_HOUR)
    minutes, remaining = divmod(remaining, _NANOSECONDS_PER_MINUTE)
    seconds_text = f"{_format_fraction(remaining, _NANOSECONDS_PER_SECOND)}s"
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds_text}"
    if minutes:
        return f"{sign}{minutes}m{seconds_text}"
    return f"{sign}{seconds_text}"


def _format_fraction(value: int, unit: int) -> str:
    whole, fraction = divmod(value, unit)
    if not fraction:
        return str(whole)
    # unit is a power of ten, so its digit count minus one is the fraction width
    fraction_text = str(fraction).rjust(len(str(unit)) - 1, "0").rstrip("0")
    return f"{whole}.{fraction_text}"


def domain_build_app_status(context: ServingContext, now_monotonic_ns: int | None = None) -> AppStatus:
    """Compute the health snapshot for one request.

    Args:
        context: Read-only serving context of the listener handling the request.
        now_monotonic_ns: Optional monotonic clock reading; read from the clock when omitted.

    Returns:
        AppStatus: Snapshot with uptime derived from the monotonic clock.
    """

    if now_monotonic_ns is None:
        now_monotonic_ns = time.monotonic_ns()
    elapsed_ns = max(0, now_monotonic_ns - context.start_monotonic_ns)
    build_info = context.build_info
    return AppStatus(
        version=build_info.version,
        commit=build_info.commit,
        build_date=build_info.build_date,
        start_time=context.start_time.isoformat(),
        uptime=domain_format_duration(elapsed_ns),
        listeners=list(context.listener_addresses),
        endpoints=dict(context.endpoints),
        mode=context.mode.value,
    )
