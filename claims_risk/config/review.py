"""Executive review scoring configuration.

Holds the classification thresholds, the large-loss markers and the optional
claim-number prefix calendar used as a last-resort claim-age estimator.
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from .constants import DEFAULT_LARGE_LOSS_MARKERS, DEFAULT_REACTIVE_SPEND_THRESHOLD


class ScoreThresholds(BaseModel):
    """Minimum scores for each review level above NONE."""

    watch: int = Field(default=15, ge=0, description="Minimum score for WATCH")
    required: int = Field(default=30, ge=0, description="Minimum score for REQUIRED")
    critical: int = Field(default=50, ge=0, description="Minimum score for CRITICAL")

    @model_validator(mode="after")
    def validate_ordering(self):
        """Ensure thresholds are strictly increasing.

        Raises:
            ValueError: If watch < required < critical does not hold.
        """
        if not self.watch < self.required < self.critical:
            raise ValueError(
                "Score thresholds must satisfy watch < required < critical, got "
                f"{self.watch}/{self.required}/{self.critical}"
            )
        return self


class PrefixBucket(BaseModel):
    """Claim-number prefixes up to ``max_prefix`` were opened in ``origin_year``."""

    max_prefix: int = Field(ge=0, description="Inclusive upper bound of the prefix range")
    origin_year: int = Field(description="Year claims in this range were opened")


class PrefixCalendar(BaseModel):
    """Versioned mapping from claim-number prefix to origin year.

    Prefix numbering drifts as new claim series are issued, so a calendar is
    always supplied by the caller with an explicit version and never baked
    into scoring logic. Buckets are matched in ascending ``max_prefix``
    order; prefixes above every bucket fall in ``fallback_year``.

    Examples:
        A calendar effective for 2025 reporting::

            calendar = PrefixCalendar(
                version="2025-01",
                buckets=[
                    PrefixBucket(max_prefix=39, origin_year=2017),
                    PrefixBucket(max_prefix=55, origin_year=2018),
                ],
                fallback_year=2024,
            )
    """

    version: str = Field(description="Calendar version identifier")
    buckets: List[PrefixBucket] = Field(default_factory=list)
    fallback_year: int = Field(description="Origin year for prefixes above every bucket")

    @field_validator("buckets")
    @classmethod
    def validate_buckets(cls, v: List[PrefixBucket]) -> List[PrefixBucket]:
        """Require strictly increasing bucket bounds.

        Raises:
            ValueError: If two buckets share or reverse a bound.
        """
        bounds = [bucket.max_prefix for bucket in v]
        if any(b <= a for a, b in zip(bounds, bounds[1:])):
            raise ValueError(f"Prefix bucket bounds must be strictly increasing, got {bounds}")
        return v

    def origin_year(self, prefix: int) -> int:
        """Return the origin year for a numeric prefix."""
        for bucket in self.buckets:
            if prefix <= bucket.max_prefix:
                return bucket.origin_year
        return self.fallback_year


class ExecutiveReviewConfig(BaseModel):
    """Configuration for the executive review composite scorer.

    Attributes:
        score_thresholds: Level boundaries applied to the composite score.
        large_loss_markers: Case-insensitive expense-category substrings that
            mark a large-loss or complex matter.
        reactive_spend_threshold: Reactive spend strictly above this amount,
            with no expert spend, indicates a reactive posture.
        prefix_calendar: Optional calendar for the prefix age heuristic.
    """

    score_thresholds: ScoreThresholds = Field(default_factory=ScoreThresholds)
    large_loss_markers: Tuple[str, ...] = Field(default=DEFAULT_LARGE_LOSS_MARKERS)
    reactive_spend_threshold: float = Field(default=DEFAULT_REACTIVE_SPEND_THRESHOLD, ge=0)
    prefix_calendar: Optional[PrefixCalendar] = Field(
        default=None, description="Calendar for prefix-based claim age estimates"
    )

    @field_validator("large_loss_markers")
    @classmethod
    def validate_markers(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        """Upper-case markers and drop blanks, which would match everything."""
        return tuple(marker.strip().upper() for marker in v if marker and marker.strip())
