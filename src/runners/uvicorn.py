"""Uvicorn runner."""

import logging

import uvicorn

from log import resolve_log_level
from models.config import ServiceConfiguration

logger = logging.getLogger(__name__)


def start_uvicorn(configuration: ServiceConfiguration) -> None:
    """Start Uvicorn-based REST API service.

    Each worker process builds its own application by calling the factory,
    which reads the configuration file named in the environment.

    Parameters:
        configuration (ServiceConfiguration): Host, port, worker count and
        logging switches of the service.
    """
    logger.info("Starting Uvicorn")

    log_level = resolve_log_level()

    uvicorn.run(
        "app.main:app_factory",
        factory=True,
        host=configuration.host,
        port=configuration.port,
        workers=configuration.workers,
        log_level=log_level,
        use_colors=configuration.color_log,
        access_log=configuration.access_log,
    )
