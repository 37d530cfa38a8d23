"""Executive review composite scoring for litigated claims.

A claim earns points from independent rule groups evaluated in a fixed
order; each rule that fires adds points and a human-readable reason, so an
analyst can always see why a score was assigned:

====================================================  ======
Condition                                             Points
====================================================  ======
age >= 7 / >= 5 / >= 3 years (highest tier only)      40/25/10
stage Late or Very Late with no expert spend          20
reactive spend above threshold with no expert spend   15
pain escalation >= 4 / >= 2 levels (highest only)     20/10
max pain >= 9 / >= 8 (highest only)                   15/10
expense category contains a large-loss marker         15
====================================================  ======

The total maps to NONE / WATCH / REQUIRED / CRITICAL through configurable
thresholds (15 / 30 / 50 by default). Scoring is a total function: absent or
zero inputs simply do not trigger rules.

Claim age should come from a real date (:func:`claim_age_from_date`). The
claim-number prefix heuristic (:func:`claim_age_from_prefix`) is a
last-resort fallback driven by a caller-supplied, versioned
:class:`~claims_risk.config.review.PrefixCalendar`.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from functools import partial
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union
import warnings

from ._warnings import ConfigurationWarning
from .batch import BatchResult, run_batch
from .claims_types import LitigationStage, ReviewLevel
from .config.review import ExecutiveReviewConfig, PrefixCalendar, ScoreThresholds
from .decimal_utils import to_decimal

logger = logging.getLogger(__name__)

Number = Union[int, float, Decimal]


@dataclass(frozen=True)
class ExecutiveReviewResult:
    """Review level, composite score and the reasons, in rule order."""

    level: ReviewLevel
    score: int
    reasons: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        """Plain-value dictionary for export layers."""
        return {"level": self.level.value, "score": self.score, "reasons": list(self.reasons)}


def _fmt(value: Number) -> str:
    """Format a number without a trailing ``.0`` when it is integral."""
    number = float(value)
    return str(int(number)) if number.is_integer() else f"{number:g}"


def classify(score: int, thresholds: Optional[ScoreThresholds] = None) -> ReviewLevel:
    """Map a composite score to a review level."""
    thresholds = thresholds or ScoreThresholds()
    if score >= thresholds.critical:
        return ReviewLevel.CRITICAL
    if score >= thresholds.required:
        return ReviewLevel.REQUIRED
    if score >= thresholds.watch:
        return ReviewLevel.WATCH
    return ReviewLevel.NONE


def score(
    claim_age_years: Optional[Number],
    litigation_stage: Optional[Union[LitigationStage, str]],
    expert_spend: Optional[Number],
    reactive_spend: Optional[Number],
    pain_escalation: Optional[Number],
    max_pain: Optional[Number],
    expense_category: Optional[str],
    config: Optional[ExecutiveReviewConfig] = None,
) -> ExecutiveReviewResult:
    """Score a claim for executive review.

    Args:
        claim_age_years: Claim age in years; None skips the age rules.
        litigation_stage: Stage label or enum member.
        expert_spend: Spend on expert strategy; None is treated as zero.
        reactive_spend: Reactive (defence) spend; None is treated as zero.
        pain_escalation: Pain levels gained since the claim opened.
        max_pain: Current pain level on a 0-10 scale.
        expense_category: Free-text expense category.
        config: Scoring configuration; defaults to :class:`ExecutiveReviewConfig`.

    Returns:
        The review result; reasons follow rule evaluation order.
    """
    config = config or ExecutiveReviewConfig()
    stage = LitigationStage.from_label(litigation_stage)
    expert = float(expert_spend or 0)
    reactive = float(reactive_spend or 0)
    escalation = float(pain_escalation or 0)
    pain = float(max_pain or 0)

    points = 0
    reasons: List[str] = []

    # Age tiers
    if claim_age_years is not None:
        age = float(claim_age_years)
        if age >= 7:
            points += 40
            reasons.append(f"{_fmt(age)}yr old claim - requires closure strategy")
        elif age >= 5:
            points += 25
            reasons.append(f"{_fmt(age)}yr in litigation - duration drift")
        elif age >= 3:
            points += 10
            reasons.append(f"{_fmt(age)}yr litigation cycle")

    # Stage mismatch: late stage with no expert strategy
    if stage in (LitigationStage.LATE, LitigationStage.VERY_LATE) and expert == 0:
        points += 20
        reasons.append(f"{stage.value} stage with $0 expert spend")

    # Reactive posture
    if reactive > config.reactive_spend_threshold and expert == 0:
        points += 15
        thousands = (to_decimal(reactive_spend) / 1000).quantize(Decimal(1), rounding=ROUND_HALF_UP)
        reasons.append(f"${thousands}K reactive, no expert strategy")

    # Pain escalation tiers
    if escalation >= 4:
        points += 20
        reasons.append(f"Pain escalated {_fmt(escalation)}+ levels")
    elif escalation >= 2:
        points += 10
        reasons.append(f"Pain increased {_fmt(escalation)} levels")

    # Pain ceiling tiers
    if pain >= 9:
        points += 15
        reasons.append(f"Pain level {_fmt(pain)}/10 - max exposure")
    elif pain >= 8:
        points += 10
        reasons.append(f"Pain level {_fmt(pain)}/10")

    category = (expense_category or "").upper()
    if any(marker in category for marker in config.large_loss_markers):
        points += 15
        reasons.append("Large loss / complex matter")

    return ExecutiveReviewResult(classify(points, config.score_thresholds), points, tuple(reasons))


def litigation_stage_from_pain(pain_level: Number) -> LitigationStage:
    """Derive the litigation stage from a 0-10 pain level."""
    if pain_level <= 2:
        return LitigationStage.EARLY
    if pain_level <= 5:
        return LitigationStage.MID
    if pain_level <= 7:
        return LitigationStage.LATE
    return LitigationStage.VERY_LATE


def pain_band(pain_level: Number) -> str:
    """Dashboard pain band: low (<=2), medium (3-5), high (6-7) or critical (>=8)."""
    if pain_level <= 2:
        return "low"
    if pain_level <= 5:
        return "medium"
    if pain_level <= 7:
        return "high"
    return "critical"


def expert_type(expense_category: Optional[str]) -> str:
    """Classify the expert behind an expense category by keyword."""
    category = (expense_category or "").upper()
    if not category:
        return "Other"
    if "MEDICAL" in category or "MED" in category:
        return "Medical"
    if "LEGAL" in category or "ATTORNEY" in category:
        return "Legal"
    if "EXPERT" in category or "CONSULT" in category:
        return "Consultant"
    if "ENGINEER" in category:
        return "Engineering"
    if "ACCOUNT" in category or "ECON" in category:
        return "Economic"
    return "Other"


class AgeMethod(Enum):
    """How a claim age was obtained."""

    DATE = "date"
    PREFIX = "prefix"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ClaimAgeEstimate:
    """Claim age in whole years and the estimator that produced it."""

    years: Optional[int]
    method: AgeMethod
    calendar_version: Optional[str] = None


def claim_age_from_date(opened: date, as_of: date) -> int:
    """Whole years elapsed from ``opened`` to ``as_of`` (0 if in the future)."""
    years = as_of.year - opened.year
    if (as_of.month, as_of.day) < (opened.month, opened.day):
        years -= 1
    return max(years, 0)


def claim_age_from_prefix(
    prefix: Union[str, int, None], calendar: PrefixCalendar, as_of_year: int
) -> Optional[int]:
    """Estimate claim age from a numeric claim-number prefix.

    Args:
        prefix: Leading digits of the claim number.
        calendar: Versioned prefix-to-year calendar.
        as_of_year: Year the age is measured in.

    Returns:
        Age in whole years, or None if the prefix is not numeric.
    """
    try:
        number = int(str(prefix).strip())
    except (TypeError, ValueError):
        return None
    return max(as_of_year - calendar.origin_year(number), 0)


def estimate_claim_age(
    as_of: date,
    opened: Optional[date] = None,
    prefix: Union[str, int, None] = None,
    calendar: Optional[PrefixCalendar] = None,
) -> ClaimAgeEstimate:
    """Estimate claim age, preferring a real date over the prefix heuristic.

    Falling back to the prefix calendar emits a :class:`ConfigurationWarning`
    naming the calendar version, since prefix numbering drifts over time.

    Returns:
        The estimate; ``years`` is None when neither source is usable.
    """
    if opened is not None:
        return ClaimAgeEstimate(claim_age_from_date(opened, as_of), AgeMethod.DATE)

    if calendar is not None and prefix is not None:
        years = claim_age_from_prefix(prefix, calendar, as_of.year)
        if years is not None:
            logger.info(f"Claim age for prefix {prefix} estimated from calendar {calendar.version}")
            warnings.warn(
                f"Claim age estimated from prefix calendar {calendar.version}; "
                "supply an opening date for an exact age",
                ConfigurationWarning,
                stacklevel=2,
            )
            return ClaimAgeEstimate(years, AgeMethod.PREFIX, calendar.version)

    return ClaimAgeEstimate(None, AgeMethod.UNKNOWN)


@dataclass(frozen=True)
class ReviewInput:
    """Scoring inputs for one claim."""

    claim_id: str
    claim_age_years: Optional[float]
    litigation_stage: Optional[LitigationStage]
    expert_spend: Decimal
    reactive_spend: Decimal
    pain_escalation: float
    max_pain: float
    expense_category: str = ""

    @classmethod
    def from_pain_levels(
        cls,
        claim_id: str,
        start_pain: Number,
        end_pain: Number,
        expert_spend: Number,
        reactive_spend: Number,
        expense_category: str = "",
        claim_age_years: Optional[float] = None,
    ) -> "ReviewInput":
        """Build inputs from opening and current pain levels.

        The stage follows the current pain level, escalation is the change
        since opening, and the current level is the pain ceiling.
        """
        return cls(
            claim_id=claim_id,
            claim_age_years=claim_age_years,
            litigation_stage=litigation_stage_from_pain(end_pain),
            expert_spend=Decimal(str(expert_spend)),
            reactive_spend=Decimal(str(reactive_spend)),
            pain_escalation=float(end_pain) - float(start_pain),
            max_pain=float(end_pain),
            expense_category=expense_category,
        )


def review_claim(
    claim: ReviewInput, config: Optional[ExecutiveReviewConfig] = None
) -> ExecutiveReviewResult:
    """Score one :class:`ReviewInput`."""
    return score(
        claim.claim_age_years,
        claim.litigation_stage,
        claim.expert_spend,
        claim.reactive_spend,
        claim.pain_escalation,
        claim.max_pain,
        claim.expense_category,
        config,
    )


def review_portfolio(
    claims: Iterable[ReviewInput],
    config: Optional[ExecutiveReviewConfig] = None,
    n_workers: Optional[int] = None,
) -> BatchResult[Tuple[str, ExecutiveReviewResult]]:
    """Score many claims, isolating per-claim failures.

    Returns:
        ``(claim_id, result)`` pairs plus failures.
    """
    batch = run_batch(
        ((claim.claim_id, claim) for claim in claims),
        partial(_review_with_id, config=config),
        n_workers=n_workers,
    )
    logger.info(
        f"Executive review: {len(batch.results)} scored, {batch.excluded_count} excluded"
    )
    return batch


def _review_with_id(
    claim: ReviewInput, config: Optional[ExecutiveReviewConfig] = None
) -> Tuple[str, ExecutiveReviewResult]:
    return claim.claim_id, review_claim(claim, config)
