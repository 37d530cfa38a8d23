"""Configuration management using Pydantic v2 models.

This package provides the configuration classes for the claims risk engine.
Pydantic models give validation, type safety and YAML round-tripping for the
options that policy owners change without code edits: the development axis,
the approaching window, the state limitation table and the review
thresholds.

Sub-modules:
    constants: Default axis, alert window, markers and state limitation table.
    core: Master Config class that composes all sub-configs.
    reporting: Logging configuration and handler setup.
    review: Executive review thresholds and the prefix calendar.
    sol: Statute-of-limitations evaluation options.
    triangle: Triangle axis and factor precision.

Examples:
    Quick start with defaults::

        from claims_risk.config import Config

        config = Config()
        config.setup_logging()

    Loading from file::

        config = Config.from_yaml(Path("policy.yaml"))
        config.validate_config()
"""

from .constants import (
    DEFAULT_APPROACHING_WINDOW_DAYS,
    DEFAULT_DEVELOPMENT_AXIS,
    DEFAULT_LARGE_LOSS_MARKERS,
    DEFAULT_REACTIVE_SPEND_THRESHOLD,
    DEFAULT_STATE_SOL_YEARS,
    STATE_ABBREVIATIONS,
)
from .core import Config
from .reporting import LoggingConfig, configure_logging
from .review import ExecutiveReviewConfig, PrefixBucket, PrefixCalendar, ScoreThresholds
from .sol import SOLConfig
from .triangle import TriangleConfig
from .utils import deep_merge, normalize_state

__all__ = [
    # Constants
    "DEFAULT_APPROACHING_WINDOW_DAYS",
    "DEFAULT_DEVELOPMENT_AXIS",
    "DEFAULT_LARGE_LOSS_MARKERS",
    "DEFAULT_REACTIVE_SPEND_THRESHOLD",
    "DEFAULT_STATE_SOL_YEARS",
    "STATE_ABBREVIATIONS",
    # Core
    "Config",
    # Sections
    "ExecutiveReviewConfig",
    "LoggingConfig",
    "PrefixBucket",
    "PrefixCalendar",
    "SOLConfig",
    "ScoreThresholds",
    "TriangleConfig",
    # Helpers
    "configure_logging",
    "deep_merge",
    "normalize_state",
]
