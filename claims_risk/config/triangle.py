"""Loss development triangle configuration."""

from typing import List

from pydantic import BaseModel, Field, field_validator

from ..claims_types import MetricType
from .constants import DEFAULT_DEVELOPMENT_AXIS


class TriangleConfig(BaseModel):
    """Configuration for triangle building and factor derivation.

    Attributes:
        development_axis: Ordered development months forming the triangle's
            column axis. Periods absent from the data are treated as missing.
        canonical_metric: Metric used for factor derivation when the caller
            does not name one.
        factor_places: Decimal places kept in reported factors.
    """

    development_axis: List[int] = Field(
        default_factory=lambda: list(DEFAULT_DEVELOPMENT_AXIS),
        description="Development months, strictly increasing",
    )
    canonical_metric: MetricType = Field(
        default=MetricType.LOSS_RATIO, description="Metric used for factor derivation"
    )
    factor_places: int = Field(
        default=4, ge=4, le=12, description="Decimal places in reported factors"
    )

    @field_validator("development_axis")
    @classmethod
    def validate_axis(cls, v: List[int]) -> List[int]:
        """Ensure the development axis is positive and strictly increasing.

        Args:
            v: Development months to validate.

        Returns:
            Validated axis.

        Raises:
            ValueError: If the axis is empty, non-positive or not increasing.
        """
        if not v:
            raise ValueError("Development axis cannot be empty")
        if any(month <= 0 for month in v):
            raise ValueError(f"Development months must be positive, got {v}")
        if any(b <= a for a, b in zip(v, v[1:])):
            raise ValueError(f"Development axis must be strictly increasing, got {v}")
        return v
