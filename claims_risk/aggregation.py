"""Portfolio reductions over per-claim SOL and review results.

Every summary here is built from a :class:`~claims_risk.batch.BatchResult`
and carries the number of units the batch excluded, so partial coverage is
never mistaken for complete coverage. Summaries combine with ``merge``,
which is associative, so shards evaluated separately (for example one per
state) reduce to the same totals as a single pass.
"""

from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from .batch import BatchResult
from .claims_types import ReviewLevel, SOLCategory
from .decimal_utils import ZERO
from .executive_review import ExecutiveReviewResult
from .statute_of_limitations import SOLRecord


@dataclass(frozen=True)
class StateExposure:
    """Claim count and reserves for one jurisdiction."""

    state: str
    count: int = 0
    reserves: Decimal = ZERO

    def merge(self, other: "StateExposure") -> "StateExposure":
        """Add another exposure for the same state.

        Raises:
            ValueError: If the states differ.
        """
        if other.state != self.state:
            raise ValueError(f"Cannot merge exposure for {other.state} into {self.state}")
        return StateExposure(self.state, self.count + other.count, self.reserves + other.reserves)


def _merge_states(
    left: Mapping[str, StateExposure], right: Mapping[str, StateExposure]
) -> Dict[str, StateExposure]:
    merged = dict(left)
    for state, exposure in right.items():
        merged[state] = merged[state].merge(exposure) if state in merged else exposure
    return merged


def aggregate_by_state(
    records: Iterable[SOLRecord], categories: Optional[Iterable[SOLCategory]] = None
) -> Dict[str, StateExposure]:
    """Group SOL records by state, counting claims and summing reserves.

    Args:
        records: Evaluated records.
        categories: Categories to include; defaults to all.

    Returns:
        Exposure per state, keyed by state.
    """
    wanted = frozenset(categories) if categories is not None else None
    totals: Dict[str, StateExposure] = {}
    for record in records:
        if wanted is not None and record.category not in wanted:
            continue
        single = StateExposure(record.state, 1, record.reserves)
        totals[record.state] = (
            totals[record.state].merge(single) if record.state in totals else single
        )
    return totals


@dataclass(frozen=True)
class SOLPortfolioSummary:
    """Breach and approaching totals for a portfolio.

    ``by_state`` covers breached claims, the jurisdictions whose exposure
    needs immediate attention.
    """

    breached_count: int = 0
    approaching_count: int = 0
    breached_reserves: Decimal = ZERO
    approaching_reserves: Decimal = ZERO
    evaluated_count: int = 0
    excluded_count: int = 0
    by_state: Mapping[str, StateExposure] = field(default_factory=dict)

    @property
    def total_pending_count(self) -> int:
        """Breached plus approaching claims."""
        return self.breached_count + self.approaching_count

    @property
    def combined_reserves(self) -> Decimal:
        """Breached plus approaching reserves."""
        return self.breached_reserves + self.approaching_reserves

    @property
    def is_complete(self) -> bool:
        """False when some claims could not be evaluated."""
        return self.excluded_count == 0

    def top_states(self, n: int = 5) -> List[StateExposure]:
        """States with the largest breached reserves, largest first."""
        ranked = sorted(self.by_state.values(), key=lambda s: (-s.reserves, -s.count, s.state))
        return ranked[:n]

    def merge(self, other: "SOLPortfolioSummary") -> "SOLPortfolioSummary":
        """Combine summaries of disjoint shards."""
        return SOLPortfolioSummary(
            breached_count=self.breached_count + other.breached_count,
            approaching_count=self.approaching_count + other.approaching_count,
            breached_reserves=self.breached_reserves + other.breached_reserves,
            approaching_reserves=self.approaching_reserves + other.approaching_reserves,
            evaluated_count=self.evaluated_count + other.evaluated_count,
            excluded_count=self.excluded_count + other.excluded_count,
            by_state=_merge_states(self.by_state, other.by_state),
        )

    def by_state_frame(self) -> pd.DataFrame:
        """Breached exposure by state as a DataFrame, largest reserves first."""
        rows = [
            {"state": s.state, "count": s.count, "reserves": float(s.reserves)}
            for s in self.top_states(len(self.by_state))
        ]
        return pd.DataFrame(rows, columns=["state", "count", "reserves"])


def summarize_sol(batch: BatchResult[SOLRecord]) -> SOLPortfolioSummary:
    """Reduce an SOL batch to portfolio totals."""
    breached = [r for r in batch.results if r.category is SOLCategory.BREACHED]
    approaching = [r for r in batch.results if r.category is SOLCategory.APPROACHING]
    return SOLPortfolioSummary(
        breached_count=len(breached),
        approaching_count=len(approaching),
        breached_reserves=sum((r.reserves for r in breached), ZERO),
        approaching_reserves=sum((r.reserves for r in approaching), ZERO),
        evaluated_count=len(batch.results),
        excluded_count=batch.excluded_count,
        by_state=aggregate_by_state(breached),
    )


@dataclass(frozen=True)
class ReviewSummary:
    """Count of scored claims per review level."""

    counts: Mapping[ReviewLevel, int] = field(default_factory=dict)
    excluded_count: int = 0

    @property
    def total(self) -> int:
        """Number of claims scored."""
        return sum(self.counts.values())

    @property
    def flagged(self) -> int:
        """Claims at any level above NONE."""
        return self.total - self.counts.get(ReviewLevel.NONE, 0)

    @property
    def is_complete(self) -> bool:
        """False when some claims could not be scored."""
        return self.excluded_count == 0

    def merge(self, other: "ReviewSummary") -> "ReviewSummary":
        """Combine summaries of disjoint shards."""
        counts = Counter(self.counts)
        counts.update(other.counts)
        return ReviewSummary(dict(counts), self.excluded_count + other.excluded_count)


def summarize_reviews(batch: BatchResult[Tuple[str, ExecutiveReviewResult]]) -> ReviewSummary:
    """Reduce a review batch to counts per level (every level present)."""
    counts = {level: 0 for level in ReviewLevel}
    for _, result in batch.results:
        counts[result.level] += 1
    return ReviewSummary(counts, batch.excluded_count)
