"""Enumerations shared across the claims risk engine.

Provides the standardised vocabularies used by the triangle engine, the
statute-of-limitations evaluator and the executive review scorer. Labels
coming from spreadsheets or the data store are mapped onto these members by
:mod:`claims_risk.adapters`.
"""

from enum import Enum
from typing import Optional


class MetricType(Enum):
    """Financial metrics recorded per accident year and development month."""

    LOSS_RATIO = "loss_ratio"
    NET_PAID_LOSS = "net_paid_loss"
    EARNED_PREMIUM = "earned_premium"
    CLAIM_RESERVES = "claim_reserves"
    BULK_IBNR = "bulk_ibnr"
    GROSS_PAID = "gross_paid"
    WRITTEN_PREMIUM = "written_premium"
    REPORTED_LOSS_RATIO = "reported_loss_ratio"
    PAID_ALAE = "paid_alae"
    SALVAGE_SUBRO = "salvage_subro"
    DCCE_RESERVES = "dcce_reserves"

    @property
    def is_cumulative_paid(self) -> bool:
        """Whether the metric is a cumulative paid amount.

        Cumulative paid amounts cannot decrease as an accident year develops,
        so a decrease is reported as a data-quality signal.
        """
        return self in (MetricType.NET_PAID_LOSS, MetricType.GROSS_PAID, MetricType.PAID_ALAE)


class ClaimStatus(Enum):
    """Bodily-injury status of a claim exposure."""

    IN_PROGRESS = "In Progress"
    SETTLED = "Settled"
    DECISIONS_PENDING = "Decisions Pending"
    OTHER = "Other"

    @classmethod
    def from_label(cls, label: Optional[str]) -> "ClaimStatus":
        """Map a free-text status label onto a member.

        Matching ignores case, surrounding whitespace and internal spacing,
        so ``"in progress "`` and ``"InProgress"`` both resolve to
        ``IN_PROGRESS``. Unrecognised labels map to ``OTHER``.
        """
        key = "".join(str(label or "").split()).lower()
        for member in cls:
            if "".join(member.value.split()).lower() == key:
                return member
        return cls.OTHER


class SOLCategory(Enum):
    """Classification of a limitation deadline relative to the as-of date."""

    BREACHED = "breached"
    APPROACHING = "approaching"
    NONE = "none"


class LitigationStage(Enum):
    """Litigation stage derived from the claimant's current pain level."""

    EARLY = "Early"
    MID = "Mid"
    LATE = "Late"
    VERY_LATE = "Very Late"

    @classmethod
    def from_label(cls, label: "Optional[str | LitigationStage]") -> Optional["LitigationStage"]:
        """Resolve a stage label such as ``"Very Late"``; None if unknown."""
        if isinstance(label, LitigationStage):
            return label
        key = " ".join((label or "").split()).lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        return None


class ReviewLevel(Enum):
    """Executive review classification, ordered by urgency."""

    NONE = "NONE"
    WATCH = "WATCH"
    REQUIRED = "REQUIRED"
    CRITICAL = "CRITICAL"
