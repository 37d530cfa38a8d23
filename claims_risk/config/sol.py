"""Statute-of-limitations evaluation configuration."""

from typing import Dict, List

from pydantic import BaseModel, Field, field_validator

from ..claims_types import ClaimStatus
from .constants import DEFAULT_APPROACHING_WINDOW_DAYS, DEFAULT_STATE_SOL_YEARS
from .utils import normalize_state


class SOLConfig(BaseModel):
    """Configuration for the limitation-deadline evaluator.

    Attributes:
        approaching_window_days: A claim whose deadline is this many days
            away or fewer (and not yet passed) is flagged as approaching.
        state_limits: Limitation period in years per jurisdiction. Keys are
            normalized to upper case on load.
        actionable_statuses: Statuses evaluated by portfolio runs when the
            caller does not supply its own predicate.
    """

    approaching_window_days: int = Field(
        default=DEFAULT_APPROACHING_WINDOW_DAYS, ge=0, description="Alert window in days"
    )
    state_limits: Dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_STATE_SOL_YEARS),
        description="Limitation period in years by state",
    )
    actionable_statuses: List[ClaimStatus] = Field(
        default_factory=lambda: [ClaimStatus.IN_PROGRESS, ClaimStatus.SETTLED],
        description="Statuses included in default portfolio evaluations",
    )

    @field_validator("state_limits")
    @classmethod
    def validate_state_limits(cls, v: Dict[str, float]) -> Dict[str, float]:
        """Normalize state keys and require positive limitation periods.

        Raises:
            ValueError: If a key is blank or a period is not positive.
        """
        normalized: Dict[str, float] = {}
        for state, years in v.items():
            key = normalize_state(state)
            if not key:
                raise ValueError("State names in state_limits cannot be blank")
            if years <= 0:
                raise ValueError(f"Limitation period for {key} must be positive, got {years}")
            normalized[key] = years
        return normalized
