"""Route loguru output according to the logging section of the configuration."""

from __future__ import annotations

import sys

from loguru import logger

from point_aligner.config import LoggingConfig

_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"


def configure_logging(config: LoggingConfig) -> int:
    """Replace the default sink with the configured one and return its handler id."""
    logger.remove()
    output = config.output.strip()
    if output.lower() == "stdout":
        sink = sys.stdout
    elif output.lower() == "stderr":
        sink = sys.stderr
    else:
        sink = output
    handler_id = logger.add(sink, level=config.level, format=_FORMAT)
    logger.debug(f"Logging configured at {config.level} to {output}")
    return handler_id
