"""Unit tests for loss development triangle building."""

from decimal import Decimal
import math
import warnings

import pytest

from claims_risk._warnings import DataQualityWarning
from claims_risk.claims_types import MetricType
from claims_risk.loss_triangle import (
    DevelopmentTriangle,
    MetricPoint,
    build_triangle,
    summarize_accident_years,
)


class TestMetricPoint:
    """Test MetricPoint normalization."""

    def test_amount_and_metric_normalized(self):
        """String metric and float amount are converted on construction."""
        point = MetricPoint(2021, 12, "loss_ratio", 65.5)
        assert point.metric_type is MetricType.LOSS_RATIO
        assert point.amount == Decimal("65.5")

    def test_unknown_metric_rejected(self):
        """Unknown metric names raise ValueError."""
        with pytest.raises(ValueError):
            MetricPoint(2021, 12, "not_a_metric", 1)

    def test_non_positive_month_rejected(self):
        """Development months must be positive."""
        with pytest.raises(ValueError, match="must be positive"):
            MetricPoint(2021, 0, MetricType.GROSS_PAID, 1)

    def test_points_are_immutable(self):
        """Points are frozen."""
        point = MetricPoint(2021, 12, MetricType.GROSS_PAID, 1)
        with pytest.raises(AttributeError):
            point.amount = Decimal("2")  # type: ignore[misc]


class TestBuildTriangle:
    """Test build_triangle."""

    def test_groups_by_year_and_month(self, paid_points):
        """Cells are keyed by accident year and development month."""
        triangle = build_triangle(paid_points, MetricType.NET_PAID_LOSS)
        assert triangle.accident_years == [2020, 2021, 2022]
        assert triangle.development_months == [12, 24, 36]
        assert triangle.value(2020, 36) == Decimal("1800")
        assert triangle.value(2021, 24) == Decimal("2600")

    def test_missing_cells_are_none_not_zero(self, paid_points):
        """Cells never reported stay missing."""
        triangle = build_triangle(paid_points, MetricType.NET_PAID_LOSS)
        assert triangle.value(2022, 24) is None
        assert triangle.value(2019, 12) is None

    def test_other_metrics_ignored(self, paid_points):
        """Only the requested metric is used."""
        points = paid_points + [MetricPoint(2020, 12, MetricType.LOSS_RATIO, 70)]
        triangle = build_triangle(points, MetricType.LOSS_RATIO)
        assert triangle.accident_years == [2020]
        assert triangle.value(2020, 12) == Decimal("70")

    def test_metric_accepts_string(self, paid_points):
        """The metric may be given by value."""
        triangle = build_triangle(paid_points, "net_paid_loss")
        assert triangle.metric_type is MetricType.NET_PAID_LOSS
        assert len(triangle) == 3

    def test_empty_input(self):
        """No matching points gives an empty triangle."""
        triangle = build_triangle([], MetricType.LOSS_RATIO)
        assert len(triangle) == 0
        assert triangle.accident_years == []
        assert triangle.latest(2020) is None

    def test_duplicates_last_write_wins_and_reported(self):
        """Duplicate cells keep the last value and are flagged."""
        points = [
            MetricPoint(2021, 12, MetricType.LOSS_RATIO, 60),
            MetricPoint(2021, 12, MetricType.LOSS_RATIO, 62),
        ]
        with pytest.warns(DataQualityWarning, match="duplicate"):
            triangle = build_triangle(points, MetricType.LOSS_RATIO)

        assert triangle.value(2021, 12) == Decimal("62")
        assert len(triangle.duplicates) == 1
        duplicate = triangle.duplicates[0]
        assert duplicate.previous == Decimal("60")
        assert duplicate.replacement == Decimal("62")

    def test_duplicates_logged(self, caplog):
        """Each duplicate is logged at WARNING."""
        points = [
            MetricPoint(2021, 12, MetricType.LOSS_RATIO, 60),
            MetricPoint(2021, 12, MetricType.LOSS_RATIO, 62),
        ]
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", DataQualityWarning)
            with caplog.at_level("WARNING", logger="claims_risk.loss_triangle"):
                build_triangle(points, MetricType.LOSS_RATIO)
        assert "Duplicate loss_ratio point for AY 2021" in caplog.text

    def test_latest_returns_most_mature_cell(self, paid_points):
        """latest() picks the highest development month."""
        triangle = build_triangle(paid_points, MetricType.NET_PAID_LOSS)
        assert triangle.latest(2020) == (36, Decimal("1800"))
        assert triangle.latest(2022) == (12, Decimal("500"))


class TestMonotonicValidation:
    """Test the non-decreasing development signal."""

    def test_decreasing_paid_reported(self):
        """A drop in cumulative paid is reported but kept."""
        points = [
            MetricPoint(2021, 12, MetricType.NET_PAID_LOSS, 1000),
            MetricPoint(2021, 24, MetricType.NET_PAID_LOSS, 900),
        ]
        with pytest.warns(DataQualityWarning, match="decrease"):
            triangle = build_triangle(points, MetricType.NET_PAID_LOSS)

        violations = triangle.monotonic_violations()
        assert len(violations) == 1
        assert violations[0].accident_year == 2021
        assert (violations[0].from_month, violations[0].to_month) == (12, 24)
        assert triangle.value(2021, 24) == Decimal("900")

    def test_non_cumulative_metrics_never_flagged(self):
        """Reserves may fall as claims are paid."""
        triangle = DevelopmentTriangle(
            MetricType.CLAIM_RESERVES, {2021: {12: Decimal("500"), 24: Decimal("200")}}
        )
        assert triangle.monotonic_violations() == []

    def test_well_formed_paid_triangle_has_no_violations(self, paid_points):
        """Increasing paid development is clean."""
        with warnings.catch_warnings():
            warnings.simplefilter("error", DataQualityWarning)
            triangle = build_triangle(paid_points, MetricType.NET_PAID_LOSS)
        assert triangle.monotonic_violations() == []


class TestToFrame:
    """Test DataFrame conversion."""

    def test_frame_layout(self, paid_points):
        """Years index rows, months index columns, missing cells are NaN."""
        frame = build_triangle(paid_points, MetricType.NET_PAID_LOSS).to_frame()
        assert list(frame.index) == [2020, 2021, 2022]
        assert list(frame.columns) == [12, 24, 36]
        assert frame.loc[2021, 24] == 2600.0
        assert math.isnan(frame.loc[2022, 24])

    def test_frame_uses_given_axis(self, paid_points):
        """An explicit axis adds empty columns."""
        frame = build_triangle(paid_points, MetricType.NET_PAID_LOSS).to_frame(
            axis=[12, 24, 36, 48]
        )
        assert list(frame.columns) == [12, 24, 36, 48]
        assert frame[48].isna().all()


class TestSummarizeAccidentYears:
    """Test the latest-position summary per accident year."""

    def test_derived_net_paid_and_loss_ratio(self):
        """Net paid falls back to gross less salvage; loss ratio is derived."""
        points = [
            MetricPoint(2021, 12, MetricType.EARNED_PREMIUM, 1000),
            MetricPoint(2021, 24, MetricType.EARNED_PREMIUM, 1200),
            MetricPoint(2021, 24, MetricType.GROSS_PAID, 500),
            MetricPoint(2021, 24, MetricType.SALVAGE_SUBRO, 50),
            MetricPoint(2021, 24, MetricType.CLAIM_RESERVES, 300),
            MetricPoint(2021, 24, MetricType.BULK_IBNR, 100),
        ]
        (summary,) = summarize_accident_years(points)
        assert summary.accident_year == 2021
        assert summary.development_age == 24
        assert summary.earned_premium == Decimal("1200")
        assert summary.net_paid_loss == Decimal("450")
        assert summary.ultimate_incurred == Decimal("850")
        assert float(summary.loss_ratio) == pytest.approx(70.8333, rel=1e-4)

    def test_stored_values_preferred(self):
        """Stored net paid and loss ratio win over derived values."""
        points = [
            MetricPoint(2020, 36, MetricType.NET_PAID_LOSS, 700),
            MetricPoint(2020, 36, MetricType.GROSS_PAID, 800),
            MetricPoint(2020, 36, MetricType.EARNED_PREMIUM, 1000),
            MetricPoint(2020, 36, MetricType.LOSS_RATIO, 65),
        ]
        (summary,) = summarize_accident_years(points)
        assert summary.net_paid_loss == Decimal("700")
        assert summary.loss_ratio == Decimal("65")

    def test_no_premium_gives_no_loss_ratio(self):
        """Without premium or stored ratio the loss ratio is unknown."""
        points = [MetricPoint(2022, 12, MetricType.NET_PAID_LOSS, 100)]
        (summary,) = summarize_accident_years(points)
        assert summary.loss_ratio is None
        assert summary.ultimate_incurred == Decimal("100")

    def test_newest_year_first(self, paid_points):
        """Summaries are ordered most recent accident year first."""
        summaries = summarize_accident_years(paid_points)
        assert [s.accident_year for s in summaries] == [2022, 2021, 2020]
