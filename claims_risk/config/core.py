"""Master configuration class composing all sub-configurations.

Contains the top-level ``Config`` class that aggregates the triangle, SOL,
executive review and logging settings into one object with loading, saving,
override and validation capabilities.
"""

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field
import yaml

from ..exceptions import ConfigurationError
from .reporting import LoggingConfig, configure_logging
from .review import ExecutiveReviewConfig
from .sol import SOLConfig
from .triangle import TriangleConfig
from .utils import deep_merge


class Config(BaseModel):
    """Complete configuration for the claims risk engine.

    All sub-configs have sensible defaults, so ``Config()`` with no arguments
    reproduces the reporting dashboard's behaviour: the 12-96 month axis, a
    90-day approaching window, the 15/30/50 review thresholds and the
    built-in state limitation table.

    Examples:
        Minimal usage::

            config = Config()

        Override one option::

            config = Config(sol=SOLConfig(approaching_window_days=60))

        From a policy file, with runtime overrides::

            base = Config.from_yaml(Path("policy.yaml"))
            config = Config.from_dict({"sol": {"approaching_window_days": 30}}, base)
    """

    triangle: TriangleConfig = Field(default_factory=TriangleConfig)
    sol: SOLConfig = Field(default_factory=SOLConfig)
    review: ExecutiveReviewConfig = Field(default_factory=ExecutiveReviewConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> "Config":
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file.

        Returns:
            Config object with validated parameters.

        Raises:
            FileNotFoundError: If config file doesn't exist.
            ValidationError: If configuration is invalid.
        """
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        # Remove private anchors if present
        data = {k: v for k, v in data.items() if not k.startswith("_")}

        return cls(**data)

    @classmethod
    def from_dict(cls, data: dict, base_config: Optional["Config"] = None) -> "Config":
        """Create config from dictionary, optionally overriding base config.

        Args:
            data: Dictionary with configuration parameters.
            base_config: Optional base configuration to override.

        Returns:
            Config object with validated parameters.
        """
        if base_config is None:
            return cls(**data)

        merged = deep_merge(base_config.model_dump(), data)
        return cls(**merged)

    def to_yaml(self, path: Path) -> None:
        """Save configuration to YAML file.

        Args:
            path: Path where to save the configuration.
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                self.model_dump(mode="json"), f, default_flow_style=False, sort_keys=False
            )

    def validate_completeness(self) -> List[str]:
        """Collect configuration issues that make an evaluation unusable.

        Returns:
            List of issues; empty when the configuration is usable.
        """
        issues = []

        if len(self.triangle.development_axis) < 2:
            issues.append("Development axis needs at least two periods to derive factors")
        if not self.sol.state_limits:
            issues.append("No state limitation periods configured")
        if not self.sol.actionable_statuses:
            issues.append("No actionable statuses configured for SOL evaluation")

        calendar = self.review.prefix_calendar
        if calendar is not None and calendar.buckets:
            last_origin = calendar.buckets[-1].origin_year
            if calendar.fallback_year < last_origin:
                issues.append(
                    f"Prefix calendar {calendar.version}: fallback year {calendar.fallback_year} "
                    f"is older than the last bucket ({last_origin})"
                )

        return issues

    def validate_config(self) -> None:
        """Raise if the configuration has critical issues.

        Raises:
            ConfigurationError: Listing every issue found.
        """
        issues = self.validate_completeness()
        if issues:
            raise ConfigurationError(issues)

    def setup_logging(self) -> None:
        """Configure logging based on settings.

        Sets up the package logger handlers for console and/or file output
        described by the logging section.
        """
        configure_logging(self.logging)
