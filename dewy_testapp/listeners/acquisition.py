"""Socket acquisition policy: supervisor handoff first, self-bound fallback second."""

from __future__ import annotations

import logging
import os
from typing import Mapping

from dewy_testapp.config import AppSettings
from dewy_testapp.domain import ServingMode

from .errors import ListenerHandoffError
from .interfaces import ListenerAcquisition
from .server_starter import listeners_listen_all
from .standalone import listeners_bind_standalone

logger = logging.getLogger(__name__)


def listeners_acquire(settings: AppSettings, environ: Mapping[str, str] | None = None) -> ListenerAcquisition:
    """Acquire listening sockets according to the supervisor environment.

    When the handoff variable is present and non-empty its sockets are adopted.
    A failed handoff is logged and recovered by binding the fallback address,
    which is also what happens when the variable is absent.

    Args:
        settings: Validated runtime settings.
        environ: Environment mapping; defaults to `os.environ`.

    Returns:
        ListenerAcquisition: Mode, listeners and raw handoff value.

    Raises:
        ListenerBindError: Raised when the fallback address cannot be bound.
    """

    if environ is None:
        environ = os.environ
    server_starter_env = environ.get(settings.server_starter_env_name, "")

    if server_starter_env:
        try:
            inherited = listeners_listen_all(server_starter_env)
        except ListenerHandoffError as error:
            logger.error(
                "Failed to get listeners from server-starter",
                extra={"error": str(error), "env_name": settings.server_starter_env_name},
            )
            logger.info("Falling back to standalone mode", extra={"port": settings.fallback_port})
        else:
            logger.info("Server-starter mode", extra={"listeners_count": len(inherited)})
            return ListenerAcquisition(
                mode=ServingMode.SERVER_STARTER,
                listeners=inherited,
                server_starter_env=server_starter_env,
            )

    logger.info("Standalone mode starting", extra={"port": settings.fallback_port})
    fallback = listeners_bind_standalone(
        host=settings.fallback_host,
        port=settings.fallback_port,
        backlog=settings.listen_backlog,
    )
    return ListenerAcquisition(
        mode=ServingMode.STANDALONE,
        listeners=(fallback,),
        server_starter_env=server_starter_env,
    )
