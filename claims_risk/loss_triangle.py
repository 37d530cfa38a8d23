"""Loss development triangles built from accident-year metric points.

The data store keeps one row per ``(accident_year, development_months,
metric_type)`` with the metric's amount at that evaluation age. This module
turns a sequence of such points into a triangle for a single metric: rows are
accident years, columns are development months, and cells that were never
reported stay missing rather than becoming zero.

Example:
    Build a paid triangle and inspect it::

        from claims_risk.loss_triangle import MetricPoint, build_triangle
        from claims_risk.claims_types import MetricType

        points = [
            MetricPoint(2022, 12, MetricType.NET_PAID_LOSS, 1_000),
            MetricPoint(2022, 24, MetricType.NET_PAID_LOSS, 1_500),
            MetricPoint(2023, 12, MetricType.NET_PAID_LOSS, 1_200),
        ]
        triangle = build_triangle(points, MetricType.NET_PAID_LOSS)
        triangle.value(2022, 24)  # Decimal('1500')
        triangle.value(2023, 24)  # None
"""

from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal
import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union
import warnings

import numpy as np
import pandas as pd

from ._warnings import DataQualityWarning
from .claims_types import MetricType
from .decimal_utils import ZERO, to_decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MetricPoint:
    """One reported amount for an accident year at a development age.

    ``metric_type`` accepts the enum or its string value, and ``amount`` any
    numeric type; both are normalized on construction.
    """

    accident_year: int
    development_months: int
    metric_type: MetricType
    amount: Decimal

    def __post_init__(self):
        """Normalize the metric type and amount.

        Raises:
            ValueError: If the metric type is unknown or the amount is not numeric.
        """
        if not isinstance(self.metric_type, MetricType):
            object.__setattr__(self, "metric_type", MetricType(self.metric_type))
        object.__setattr__(self, "amount", to_decimal(self.amount))
        if self.development_months <= 0:
            raise ValueError(
                f"Development months must be positive, got {self.development_months}"
            )


@dataclass(frozen=True)
class DuplicatePoint:
    """A point that overwrote an earlier point for the same cell."""

    accident_year: int
    development_months: int
    previous: Decimal
    replacement: Decimal


@dataclass(frozen=True)
class MonotonicViolation:
    """A decrease between consecutive observed periods of a cumulative metric."""

    accident_year: int
    from_month: int
    to_month: int
    from_value: Decimal
    to_value: Decimal


@dataclass(frozen=True)
class DevelopmentTriangle:
    """Accident year x development month matrix for a single metric.

    Attributes:
        metric_type: Metric the triangle was built for.
        cells: ``{accident_year: {development_months: amount}}``; only
            reported cells are present.
        duplicates: Points that were overwritten while building, in input order.
    """

    metric_type: MetricType
    cells: Mapping[int, Mapping[int, Decimal]]
    duplicates: Tuple[DuplicatePoint, ...] = field(default_factory=tuple)

    @property
    def accident_years(self) -> List[int]:
        """Accident years present, ascending."""
        return sorted(self.cells)

    @property
    def development_months(self) -> List[int]:
        """Every development month observed in any accident year, ascending."""
        return sorted({month for row in self.cells.values() for month in row})

    def __len__(self) -> int:
        return len(self.cells)

    def value(self, accident_year: int, development_months: int) -> Optional[Decimal]:
        """Return the cell amount, or None if it was never reported."""
        return self.cells.get(accident_year, {}).get(development_months)

    def row(self, accident_year: int) -> Dict[int, Decimal]:
        """Return the reported cells of one accident year, ordered by month."""
        return dict(sorted(self.cells.get(accident_year, {}).items()))

    def latest(self, accident_year: int) -> Optional[Tuple[int, Decimal]]:
        """Return ``(development_months, amount)`` of the most mature cell.

        Returns:
            Latest diagonal entry for the year, or None if the year is absent.
        """
        row = self.cells.get(accident_year)
        if not row:
            return None
        month = max(row)
        return month, row[month]

    def monotonic_violations(self) -> List[MonotonicViolation]:
        """Report decreases in cumulative paid development.

        Cumulative paid amounts cannot fall as a year matures, so each
        decrease between consecutive observed months is a data-quality
        signal. Cells are not altered. Metrics that legitimately move both
        ways (reserves, IBNR, ratios) never report violations.

        Returns:
            Violations ordered by accident year then month.
        """
        if not self.metric_type.is_cumulative_paid:
            return []

        violations = []
        for year in self.accident_years:
            ordered = sorted(self.cells[year].items())
            for (from_month, from_value), (to_month, to_value) in zip(ordered, ordered[1:]):
                if to_value < from_value:
                    violations.append(
                        MonotonicViolation(year, from_month, to_month, from_value, to_value)
                    )
        return violations

    def to_frame(self, axis: Optional[Sequence[int]] = None) -> pd.DataFrame:
        """Convert the triangle to a DataFrame.

        Args:
            axis: Development months to use as columns. Defaults to every
                observed month.

        Returns:
            DataFrame indexed by accident year with one float column per
            development month; missing cells are NaN.
        """
        columns = list(axis) if axis is not None else self.development_months
        years = self.accident_years
        data = np.full((len(years), len(columns)), np.nan)
        for i, year in enumerate(years):
            for j, month in enumerate(columns):
                cell = self.value(year, month)
                if cell is not None:
                    data[i, j] = float(cell)
        frame = pd.DataFrame(data, index=pd.Index(years, name="accident_year"), columns=columns)
        frame.columns.name = "development_months"
        return frame


def build_triangle(
    points: Iterable[MetricPoint], metric_type: Union[MetricType, str]
) -> DevelopmentTriangle:
    """Build a development triangle for one metric.

    Points for other metrics are ignored. When the same ``(accident_year,
    development_months)`` cell appears more than once, the last point in
    input order wins; every overwrite is logged, recorded on the triangle
    and raised as a :class:`DataQualityWarning`. Missing cells are not
    interpolated.

    Args:
        points: Metric points in load order.
        metric_type: Metric to extract.

    Returns:
        Triangle for ``metric_type``; empty if no points match.
    """
    metric = metric_type if isinstance(metric_type, MetricType) else MetricType(metric_type)
    cells: Dict[int, Dict[int, Decimal]] = defaultdict(dict)
    duplicates: List[DuplicatePoint] = []

    for point in points:
        if point.metric_type is not metric:
            continue
        row = cells[point.accident_year]
        previous = row.get(point.development_months)
        if previous is not None:
            duplicates.append(
                DuplicatePoint(
                    point.accident_year, point.development_months, previous, point.amount
                )
            )
            logger.warning(
                f"Duplicate {metric.value} point for AY {point.accident_year} at "
                f"{point.development_months} months: {previous} replaced by {point.amount}"
            )
        row[point.development_months] = point.amount

    if duplicates:
        warnings.warn(
            f"{len(duplicates)} duplicate {metric.value} point(s) resolved last-write-wins",
            DataQualityWarning,
            stacklevel=2,
        )

    triangle = DevelopmentTriangle(
        metric_type=metric,
        cells={year: dict(row) for year, row in cells.items()},
        duplicates=tuple(duplicates),
    )

    violations = triangle.monotonic_violations()
    if violations:
        for v in violations:
            logger.warning(
                f"{metric.value} decreased for AY {v.accident_year}: "
                f"{v.from_value} at {v.from_month}m -> {v.to_value} at {v.to_month}m"
            )
        warnings.warn(
            f"{len(violations)} decrease(s) in cumulative {metric.value} development",
            DataQualityWarning,
            stacklevel=2,
        )

    logger.debug(
        f"Built {metric.value} triangle: {len(triangle)} accident years, "
        f"{len(duplicates)} duplicates"
    )
    return triangle


@dataclass(frozen=True)
class AccidentYearSummary:
    """Latest reported position of one accident year.

    Amounts are the value at the most mature development month reported for
    each metric; a metric never reported contributes zero. ``loss_ratio`` is
    a percentage and is None when neither a stored ratio nor earned premium
    is available.
    """

    accident_year: int
    development_age: int
    written_premium: Decimal
    earned_premium: Decimal
    gross_paid: Decimal
    salvage_subro: Decimal
    net_paid_loss: Decimal
    claim_reserves: Decimal
    bulk_ibnr: Decimal
    paid_alae: Decimal
    dcce_reserves: Decimal
    ultimate_incurred: Decimal
    loss_ratio: Optional[Decimal]
    reported_loss_ratio: Decimal


def summarize_accident_years(points: Iterable[MetricPoint]) -> List[AccidentYearSummary]:
    """Summarize every accident year at its latest development point.

    Net paid prefers the stored ``net_paid_loss`` and falls back to
    ``gross_paid - salvage_subro``. Ultimate incurred is net paid plus case
    reserves plus bulk IBNR. The stored (actuarially selected) loss ratio is
    preferred over ``ultimate_incurred / earned_premium``.

    Args:
        points: Metric points for any mix of metrics.

    Returns:
        One summary per accident year, most recent year first.
    """
    points = list(points)
    triangles = {metric: build_triangle(points, metric) for metric in MetricType}
    years = sorted({p.accident_year for p in points}, reverse=True)

    def latest(metric: MetricType, year: int) -> Decimal:
        entry = triangles[metric].latest(year)
        return entry[1] if entry is not None else ZERO

    summaries = []
    for year in years:
        earned = latest(MetricType.EARNED_PREMIUM, year)
        gross = latest(MetricType.GROSS_PAID, year)
        salvage = latest(MetricType.SALVAGE_SUBRO, year)
        stored_net = latest(MetricType.NET_PAID_LOSS, year)
        if stored_net > ZERO:
            net_paid = stored_net
        elif gross > ZERO:
            net_paid = gross - salvage
        else:
            net_paid = ZERO
        reserves = latest(MetricType.CLAIM_RESERVES, year)
        ibnr = latest(MetricType.BULK_IBNR, year)
        ultimate = net_paid + reserves + ibnr

        stored_ratio = latest(MetricType.LOSS_RATIO, year)
        loss_ratio: Optional[Decimal]
        if stored_ratio > ZERO:
            loss_ratio = stored_ratio
        elif earned > ZERO:
            loss_ratio = ultimate / earned * 100
        else:
            loss_ratio = None

        development_age = max(
            (p.development_months for p in points if p.accident_year == year), default=0
        )

        summaries.append(
            AccidentYearSummary(
                accident_year=year,
                development_age=development_age,
                written_premium=latest(MetricType.WRITTEN_PREMIUM, year),
                earned_premium=earned,
                gross_paid=gross,
                salvage_subro=salvage,
                net_paid_loss=net_paid,
                claim_reserves=reserves,
                bulk_ibnr=ibnr,
                paid_alae=latest(MetricType.PAID_ALAE, year),
                dcce_reserves=latest(MetricType.DCCE_RESERVES, year),
                ultimate_incurred=ultimate,
                loss_ratio=loss_ratio,
                reported_loss_ratio=latest(MetricType.REPORTED_LOSS_RATIO, year),
            )
        )
    return summaries
