"""Logging configuration."""

import logging
from pathlib import Path
import sys
from typing import Literal, Optional

from pydantic import BaseModel, Field

PACKAGE_LOGGER = "claims_risk"


class LoggingConfig(BaseModel):
    """Logging configuration.

    Controls logging behavior including level, output destinations,
    and message formatting.
    """

    enabled: bool = Field(default=True, description="Enable logging")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging level"
    )
    log_file: Optional[str] = Field(
        default=None, description="Log file path (None=no file logging)"
    )
    console_output: bool = Field(default=True, description="Log to console")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )


def configure_logging(config: LoggingConfig) -> logging.Logger:
    """Configure the package logger from settings.

    Sets up handlers for console and/or file output. Calling it again
    replaces previously installed handlers.

    Args:
        config: Logging settings.

    Returns:
        The configured ``claims_risk`` logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.handlers.clear()
    if not config.enabled:
        logger.addHandler(logging.NullHandler())
        return logger

    logger.setLevel(getattr(logging, config.level))
    formatter = logging.Formatter(config.format)

    if config.console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
