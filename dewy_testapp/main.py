"""Main module entrypoint for local runtime execution.

This module validates startup configuration, acquires listening sockets and
serves the diagnostic endpoints until a shutdown signal arrives.
"""

import argparse
import logging
import time
from datetime import datetime, timezone

from dewy_testapp.bootstrap import bootstrap_build_serving_contexts, bootstrap_create_servers
from dewy_testapp.config import SettingsLoadError, config_load_settings, config_load_version
from dewy_testapp.listeners import ListenerBindError, listeners_acquire
from dewy_testapp.logs import logs_configure
from dewy_testapp.runtime import runtime_run

logger = logging.getLogger(__name__)


def main_build_argument_parser() -> argparse.ArgumentParser:
    """Build the command-line parser.

    Returns:
        argparse.ArgumentParser: Parser for `--json` and `--version`/`-v`.
    """

    argument_parser = argparse.ArgumentParser(description="Diagnostic HTTP test server for socket handoff")
    argument_parser.add_argument(
        "--json",
        dest="json_log",
        action="store_true",
        help="Output logs in JSON format",
    )
    argument_parser.add_argument(
        "--version",
        "-v",
        dest="show_version",
        action="store_true",
        help="Show version information",
    )
    return argument_parser


def main(argv: list[str] | None = None) -> None:
    """Run the test server with validated startup configuration.

    Args:
        argv: Optional argument list; defaults to `sys.argv[1:]`.

    Returns:
        None: Returns after every server stopped gracefully.

    Raises:
        SystemExit: Raised with code 1 when configuration is invalid, no listener can be
            started, or servers stop without a shutdown request.
    """

    parsed_arguments = main_build_argument_parser().parse_args(argv)
    logs_configure(json_output=parsed_arguments.json_log)

    if parsed_arguments.show_version:
        print(config_load_version())
        return

    try:
        settings = config_load_settings()
    except SettingsLoadError as error:
        logger.error("Invalid configuration", extra={"error": str(error)})
        raise SystemExit(1) from error

    start_time = datetime.now(timezone.utc)
    start_monotonic_ns = time.monotonic_ns()
    logger.info("%s starting", settings.application_name, extra={"version": settings.app_version})

    try:
        acquisition = listeners_acquire(settings)
    except ListenerBindError as error:
        logger.error("No servers could be started", extra={"error": str(error)})
        raise SystemExit(1) from error

    contexts = bootstrap_build_serving_contexts(
        settings=settings,
        acquisition=acquisition,
        start_time=start_time,
        start_monotonic_ns=start_monotonic_ns,
    )
    servers = bootstrap_create_servers(settings=settings, acquisition=acquisition, contexts=contexts)
    logger.info(
        "All servers started successfully",
        extra={"servers_count": len(servers), "mode": acquisition.mode.value},
    )

    if not runtime_run(servers, grace_seconds=settings.shutdown_grace_seconds, mode=acquisition.mode.value):
        raise SystemExit(1)


if __name__ == "__main__":
    main()
