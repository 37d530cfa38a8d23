"""Pytest configuration and shared fixtures."""

from datetime import date

import pytest

from claims_risk.claims_types import ClaimStatus, MetricType
from claims_risk.loss_triangle import MetricPoint
from claims_risk.statute_of_limitations import SOLClaim, StateLimit


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: tests that start worker processes")


@pytest.fixture
def paid_points():
    """Net paid points for three accident years at decreasing maturity.

    AY 2020: 1000 -> 1500 -> 1800 (12, 24, 36 months)
    AY 2021: 2000 -> 2600          (12, 24 months)
    AY 2022: 500                   (12 months)
    """
    metric = MetricType.NET_PAID_LOSS
    return [
        MetricPoint(2020, 12, metric, 1000),
        MetricPoint(2020, 24, metric, 1500),
        MetricPoint(2020, 36, metric, 1800),
        MetricPoint(2021, 12, metric, 2000),
        MetricPoint(2021, 24, metric, 2600),
        MetricPoint(2022, 12, metric, 500),
    ]


@pytest.fixture
def tx_limits():
    """Two-year Texas limitation period."""
    return {"TX": StateLimit("TX", 2)}


@pytest.fixture
def as_of():
    """Evaluation date used across SOL tests."""
    return date(2022, 1, 5)


@pytest.fixture
def make_claim():
    """Factory for SOL claims with sensible defaults."""

    def _make(
        claim_number="C-1",
        state="TX",
        created=date(2020, 1, 10),
        status=ClaimStatus.IN_PROGRESS,
        reserves=10_000,
    ):
        return SOLClaim(claim_number, state, created, status, reserves)

    return _make
