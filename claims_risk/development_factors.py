"""Age-to-age and cumulative development factors.

Derives link ratios from a :class:`~claims_risk.loss_triangle.DevelopmentTriangle`
along a canonical development axis, selects one factor per period and
chains the selections into cumulative development factors (CDFs) to
ultimate, following the chain-ladder method (Friedland §3).

For each adjacent axis pair ``(from, to)`` and accident year ``y``::

    f(y) = C(y, to) / C(y, from)

defined only when both cells exist and ``C(y, from) > 0``. The period's
volume-weighted average is::

    LDF = sum(f(y) * C(y, from)) / sum(C(y, from))

over the years with a defined factor, which equals ``sum(C(y, to)) /
sum(C(y, from))``. It is never replaced by the simple mean: small accident
years with noisy ratios would otherwise dominate.

Example:
    Derive CDFs from a loss-ratio triangle::

        from claims_risk.development_factors import (
            compute_age_to_age, cumulative_to_ultimate, select_ata,
        )

        factors = compute_age_to_age(triangle)
        selected = select_ata(factors)
        cdfs = cumulative_to_ultimate(selected)
        cdfs[-1]  # Decimal('1.0000'), the ultimate sentinel
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd

from .claims_types import MetricType
from .config.constants import DEFAULT_DEVELOPMENT_AXIS
from .config.triangle import TriangleConfig
from .decimal_utils import FACTOR_PLACES, ONE, ZERO, quantize_factor, safe_divide, to_decimal
from .loss_triangle import DevelopmentTriangle, MetricPoint, build_triangle

logger = logging.getLogger(__name__)


class FactorSource(Enum):
    """Where a selected age-to-age factor came from."""

    WEIGHTED = "weighted"
    SIMPLE = "simple"
    UNSUPPORTED = "unsupported"  # 1.000 placeholder, no data behind it


@dataclass(frozen=True)
class AgeToAgeFactor:
    """Link ratios for one development period.

    Attributes:
        from_month: Development month at the start of the period.
        to_month: Development month at the end of the period.
        per_year: Factor per accident year; None where it cannot be computed.
        simple_avg: Arithmetic mean of defined factors, None if there are none.
        weighted_avg: Volume-weighted average, None if there are no defined factors.
        simple_exact: ``simple_avg`` before rounding.
        weighted_exact: ``weighted_avg`` before rounding.
    """

    from_month: int
    to_month: int
    per_year: Mapping[int, Optional[Decimal]]
    simple_avg: Optional[Decimal]
    weighted_avg: Optional[Decimal]
    simple_exact: Optional[Decimal] = field(default=None, repr=False, compare=False)
    weighted_exact: Optional[Decimal] = field(default=None, repr=False, compare=False)

    @property
    def period(self) -> str:
        """Period label such as ``"12-24"``."""
        return f"{self.from_month}-{self.to_month}"

    @property
    def n_years(self) -> int:
        """Number of accident years with a defined factor."""
        return sum(1 for f in self.per_year.values() if f is not None)


@dataclass(frozen=True)
class SelectedFactor:
    """Factor chosen for a development period, tagged with its source.

    ``value`` is rounded for reporting; ``exact`` keeps the unrounded average
    so chained products do not compound rounding error.
    """

    from_month: int
    to_month: int
    value: Decimal
    source: FactorSource
    exact: Optional[Decimal] = field(default=None, repr=False, compare=False)

    @property
    def is_observed(self) -> bool:
        """False when the value is the 1.000 placeholder."""
        return self.source is not FactorSource.UNSUPPORTED

    @property
    def full_precision(self) -> Decimal:
        """Unrounded factor when known, else the reported value."""
        return self.exact if self.exact is not None else self.value


@dataclass(frozen=True)
class CumulativeDevelopmentFactor:
    """Development from ``development_months`` to ultimate.

    ``supported`` is False when any factor in the product is a placeholder.
    ``is_tail`` marks the ultimate sentinel, which assumes no development
    beyond the last tracked period.
    """

    development_months: int
    value: Decimal
    supported: bool
    is_tail: bool = False


@dataclass(frozen=True)
class DataGap:
    """A period or accident year for which no value could be computed."""

    unit: str
    reason: str


def compute_age_to_age(
    triangle: DevelopmentTriangle,
    axis: Sequence[int] = DEFAULT_DEVELOPMENT_AXIS,
    places: int = FACTOR_PLACES,
) -> List[AgeToAgeFactor]:
    """Compute age-to-age factors for every adjacent pair of axis periods.

    Years missing either endpoint, or with a non-positive ``from`` value, get a None
    factor and are excluded from both the numerator and the denominator of
    the averages. A triangle with fewer than two accident years cannot
    produce link ratios and yields an empty list.

    Args:
        triangle: Triangle for a single metric.
        axis: Canonical development months, ascending.
        places: Decimal places kept in reported factors.

    Returns:
        One factor record per adjacent axis pair, in axis order.
    """
    years = triangle.accident_years
    if len(years) < 2:
        logger.info(
            f"{triangle.metric_type.value} triangle has {len(years)} accident year(s); "
            "no link ratios computed"
        )
        return []

    factors = []
    for from_month, to_month in zip(axis, axis[1:]):
        per_year: Dict[int, Optional[Decimal]] = {}
        defined: List[Tuple[Decimal, Decimal]] = []
        for year in years:
            from_value = triangle.value(year, from_month)
            to_value = triangle.value(year, to_month)
            if from_value is None or to_value is None:
                per_year[year] = None
                continue
            if from_value <= ZERO:
                logger.debug(
                    f"AY {year} excluded from {from_month}-{to_month} factors: "
                    f"non-positive base value {from_value}"
                )
                per_year[year] = None
                continue
            ratio = to_value / from_value
            per_year[year] = quantize_factor(ratio, places)
            defined.append((ratio, from_value))

        simple: Optional[Decimal] = None
        weighted: Optional[Decimal] = None
        if defined:
            simple = sum((ratio for ratio, _ in defined), ZERO) / len(defined)
            weight = sum((base for _, base in defined), ZERO)
            weighted = safe_divide(sum((ratio * base for ratio, base in defined), ZERO), weight)

        factors.append(
            AgeToAgeFactor(
                from_month=from_month,
                to_month=to_month,
                per_year=per_year,
                simple_avg=quantize_factor(simple, places) if simple is not None else None,
                weighted_avg=quantize_factor(weighted, places) if weighted is not None else None,
                simple_exact=simple,
                weighted_exact=weighted,
            )
        )
    return factors


def select_ata(factors: Iterable[AgeToAgeFactor]) -> List[SelectedFactor]:
    """Select one factor per period: weighted, else simple, else 1.000.

    The 1.000 fallback is a placeholder meaning "no development observed",
    tagged :attr:`FactorSource.UNSUPPORTED` so it is never mistaken for an
    observed trend.

    Args:
        factors: Output of :func:`compute_age_to_age`.

    Returns:
        Selected factors in period order.
    """
    selected = []
    for factor in factors:
        if factor.weighted_avg is not None:
            selected.append(
                SelectedFactor(
                    factor.from_month,
                    factor.to_month,
                    factor.weighted_avg,
                    FactorSource.WEIGHTED,
                    exact=factor.weighted_exact,
                )
            )
        elif factor.simple_avg is not None:
            selected.append(
                SelectedFactor(
                    factor.from_month,
                    factor.to_month,
                    factor.simple_avg,
                    FactorSource.SIMPLE,
                    exact=factor.simple_exact,
                )
            )
        else:
            logger.debug(f"No data supports {factor.period} development; using 1.000 placeholder")
            selected.append(
                SelectedFactor(
                    factor.from_month,
                    factor.to_month,
                    quantize_factor(ONE),
                    FactorSource.UNSUPPORTED,
                )
            )
    return selected


def select_ata_values(factors: Iterable[AgeToAgeFactor]) -> List[Decimal]:
    """Return the selected factor values without source tags."""
    return [s.value for s in select_ata(factors)]


def cumulative_to_ultimate(
    selected: Sequence[Union[SelectedFactor, Decimal, float, int]],
    places: int = FACTOR_PLACES,
) -> List[Decimal]:
    """Chain selected factors into cumulative development factors.

    ``CDF[i]`` is the product of ``selected[i:]``, followed by a final
    ``1.000`` sentinel for development from the last tracked period to
    ultimate (the tail is assumed fully developed). Products are built once,
    right to left, from unrounded factors where known; only the results are
    rounded.

    Args:
        selected: Selected factors (tagged or bare numbers) in period order.
        places: Decimal places kept in reported factors.

    Returns:
        ``len(selected) + 1`` factors; empty when ``selected`` is empty.
    """
    if not selected:
        return []

    values = [
        s.full_precision if isinstance(s, SelectedFactor) else to_decimal(s) for s in selected
    ]
    cdfs = [ONE] * (len(values) + 1)
    running = ONE
    for i in range(len(values) - 1, -1, -1):
        running = running * values[i]
        cdfs[i] = running
    return [quantize_factor(cdf, places) for cdf in cdfs]


def cumulative_factors(
    selected: Sequence[SelectedFactor], places: int = FACTOR_PLACES
) -> List[CumulativeDevelopmentFactor]:
    """Cumulative factors aligned to development months with support tags.

    Args:
        selected: Output of :func:`select_ata`.
        places: Decimal places kept in reported factors.

    Returns:
        One entry per period start month plus the tail sentinel at the last
        period's end month; empty when ``selected`` is empty.
    """
    values = cumulative_to_ultimate(selected, places)
    if not values:
        return []

    supported = [True] * (len(selected) + 1)
    for i in range(len(selected) - 1, -1, -1):
        supported[i] = supported[i + 1] and selected[i].is_observed

    entries = [
        CumulativeDevelopmentFactor(s.from_month, values[i], supported[i])
        for i, s in enumerate(selected)
    ]
    entries.append(
        CumulativeDevelopmentFactor(selected[-1].to_month, values[-1], True, is_tail=True)
    )
    return entries


def project_ultimate(
    triangle: DevelopmentTriangle, cdfs: Sequence[CumulativeDevelopmentFactor]
) -> Tuple[Dict[int, Decimal], List[DataGap]]:
    """Project chain-ladder ultimates from each year's latest diagonal.

    Args:
        triangle: Triangle the factors were derived from.
        cdfs: Output of :func:`cumulative_factors`.

    Returns:
        ``(ultimates, gaps)``: ultimate per accident year, and the years
        whose latest age has no factor on the axis.
    """
    by_month = {cdf.development_months: cdf for cdf in cdfs}
    ultimates: Dict[int, Decimal] = {}
    gaps: List[DataGap] = []
    for year in triangle.accident_years:
        latest = triangle.latest(year)
        if latest is None:
            continue
        month, amount = latest
        cdf = by_month.get(month)
        if cdf is None:
            gaps.append(DataGap(f"AY {year}", f"no development factor at {month} months"))
            continue
        ultimates[year] = amount * cdf.value
    return ultimates, gaps


def factors_to_frame(factors: Sequence[AgeToAgeFactor]) -> pd.DataFrame:
    """Lay out age-to-age factors as a table.

    Returns:
        DataFrame with one column per period, one row per accident year,
        and trailing ``simple_avg`` and ``weighted_avg`` rows. Undefined
        factors are NaN.
    """
    if not factors:
        return pd.DataFrame()

    years = sorted({year for f in factors for year in f.per_year})
    data = {}
    for f in factors:
        column = [f.per_year.get(year) for year in years] + [f.simple_avg, f.weighted_avg]
        data[f.period] = [float(v) if v is not None else float("nan") for v in column]
    return pd.DataFrame(data, index=[*years, "simple_avg", "weighted_avg"])


@dataclass(frozen=True)
class DevelopmentAnalysis:
    """Triangle, factors and CDFs for one metric, with the gaps found."""

    triangle: DevelopmentTriangle
    axis: Tuple[int, ...]
    factors: List[AgeToAgeFactor]
    selected: List[SelectedFactor]
    cdfs: List[CumulativeDevelopmentFactor]
    gaps: List[DataGap] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        """True when every period has an observed factor."""
        return bool(self.selected) and not self.gaps


def analyze_development(
    points: Iterable[MetricPoint],
    metric_type: Optional[Union[MetricType, str]] = None,
    config: Optional[TriangleConfig] = None,
) -> DevelopmentAnalysis:
    """Run the full triangle-to-CDF pipeline for one metric.

    Args:
        points: Metric points in load order.
        metric_type: Metric to analyze; defaults to the configured canonical metric.
        config: Triangle configuration; defaults to :class:`TriangleConfig`.

    Returns:
        Analysis with a :class:`DataGap` for every period without an
        observed factor (or one for the whole triangle when it has fewer
        than two accident years).
    """
    config = config or TriangleConfig()
    metric = metric_type if metric_type is not None else config.canonical_metric
    axis = tuple(config.development_axis)

    triangle = build_triangle(points, metric)
    factors = compute_age_to_age(triangle, axis, config.factor_places)
    selected = select_ata(factors)
    cdfs = cumulative_factors(selected, config.factor_places)

    gaps = [
        DataGap(f"{s.from_month}-{s.to_month}", "no accident year supports a factor")
        for s in selected
        if not s.is_observed
    ]
    if not factors:
        gaps.append(
            DataGap(
                triangle.metric_type.value,
                f"{len(triangle)} accident year(s); at least two are needed for link ratios",
            )
        )

    logger.info(
        f"Development analysis for {triangle.metric_type.value}: "
        f"{len(triangle)} accident years, {len(factors)} periods, {len(gaps)} gaps"
    )
    return DevelopmentAnalysis(triangle, axis, factors, selected, cdfs, gaps)
