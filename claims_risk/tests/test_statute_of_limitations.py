"""Tests for statute-of-limitations evaluation."""

from datetime import date
from decimal import Decimal

import pytest

from claims_risk.claims_types import ClaimStatus, SOLCategory
from claims_risk.config.sol import SOLConfig
from claims_risk.exceptions import ConfigurationError, DataGapError
from claims_risk.statute_of_limitations import (
    SOLClaim,
    StateLimit,
    actionable_statuses,
    add_years,
    classify_days,
    evaluate,
    evaluate_portfolio,
    resolve_limit,
)


class TestAddYears:
    """Test limitation deadline arithmetic."""

    def test_whole_years_keep_month_and_day(self):
        """Adding whole years keeps the calendar date."""
        assert add_years(date(2020, 1, 10), 2) == date(2022, 1, 10)

    def test_leap_day_clamped(self):
        """Feb 29 becomes Feb 28 in a non-leap target year."""
        assert add_years(date(2020, 2, 29), 1) == date(2021, 2, 28)
        assert add_years(date(2020, 2, 29), 2) == date(2022, 2, 28)

    def test_leap_day_kept_in_leap_year(self):
        """Feb 29 survives when the target year is a leap year."""
        assert add_years(date(2020, 2, 29), 4) == date(2024, 2, 29)

    def test_fractional_years(self):
        """A fractional remainder is added in days."""
        # round(0.5 * 365.25) = 183 days after 2021-01-01
        assert add_years(date(2020, 1, 1), 1.5) == date(2021, 7, 3)

    def test_zero_years(self):
        """Zero years is the identity."""
        assert add_years(date(2020, 5, 17), 0) == date(2020, 5, 17)

    @pytest.mark.parametrize("years", [-1, float("nan"), float("inf")])
    def test_invalid_years_rejected(self, years):
        """Negative or non-finite periods are rejected."""
        with pytest.raises(ValueError):
            add_years(date(2020, 1, 1), years)


class TestClassifyDays:
    """Test deadline classification boundaries."""

    @pytest.mark.parametrize(
        "days,expected",
        [
            (-1, SOLCategory.BREACHED),
            (0, SOLCategory.APPROACHING),
            (90, SOLCategory.APPROACHING),
            (91, SOLCategory.NONE),
        ],
    )
    def test_default_window(self, days, expected):
        """The window is 0 to 90 days inclusive."""
        assert classify_days(days) is expected

    def test_custom_window(self):
        """The window is configurable."""
        assert classify_days(30, approaching_window_days=30) is SOLCategory.APPROACHING
        assert classify_days(31, approaching_window_days=30) is SOLCategory.NONE


class TestResolveLimit:
    """Test jurisdiction lookup."""

    def test_abbreviation_against_full_name_table(self):
        """A postal code resolves against the default full-name table."""
        assert resolve_limit("tx", SOLConfig().state_limits) == ("TEXAS", 2)

    def test_full_name_against_abbreviation_table(self):
        """A full name resolves against a table keyed by postal code."""
        assert resolve_limit("Texas", {"TX": StateLimit("TX", 2)}) == ("TX", 2)

    def test_whitespace_and_case_ignored(self):
        """Lookup normalizes case and spacing."""
        assert resolve_limit("  new   york ", SOLConfig().state_limits) == ("NEW YORK", 3)

    def test_unknown_state(self):
        """An unknown jurisdiction is a configuration error."""
        with pytest.raises(ConfigurationError, match="ZZ") as excinfo:
            resolve_limit("ZZ", {"TX": 2})
        assert len(excinfo.value.issues) == 1

    @pytest.mark.parametrize("state", [None, "", "   "])
    def test_blank_state(self, state):
        """A claim without a jurisdiction cannot be evaluated."""
        with pytest.raises(ConfigurationError, match="no jurisdiction"):
            resolve_limit(state, {"TX": 2})


class TestEvaluate:
    """Test single-claim evaluation."""

    def test_approaching(self, make_claim, tx_limits, as_of):
        """Deadline five days away is approaching."""
        record = evaluate(make_claim(), tx_limits, as_of)
        assert record.limitation_trigger_date == date(2022, 1, 10)
        assert record.days_until_expiry == 5
        assert record.category is SOLCategory.APPROACHING
        assert record.is_flagged
        assert not record.is_breached

    def test_breached(self, make_claim, tx_limits):
        """Deadline passed 22 days ago is breached."""
        record = evaluate(make_claim(), tx_limits, date(2022, 2, 1))
        assert record.days_until_expiry == -22
        assert record.category is SOLCategory.BREACHED
        assert record.is_breached

    def test_far_deadline(self, make_claim, tx_limits, as_of):
        """A recent claim is not flagged."""
        record = evaluate(make_claim(created=date(2021, 6, 1)), tx_limits, as_of)
        assert record.category is SOLCategory.NONE
        assert not record.is_flagged

    def test_deadline_today_is_approaching(self, make_claim, tx_limits):
        """Zero days left is approaching, not breached."""
        record = evaluate(make_claim(), tx_limits, date(2022, 1, 10))
        assert record.days_until_expiry == 0
        assert record.category is SOLCategory.APPROACHING

    def test_record_carries_claim_fields(self, make_claim, tx_limits, as_of):
        """Reserves and status flow through to the record."""
        record = evaluate(make_claim(reserves="2500.50"), tx_limits, as_of)
        assert record.reserves == Decimal("2500.50")
        assert record.status is ClaimStatus.IN_PROGRESS
        assert record.limitation_years == 2

    def test_plain_number_limits(self, make_claim, as_of):
        """Limits may be given as plain numbers of years."""
        record = evaluate(make_claim(state="KY"), {"KENTUCKY": 1}, as_of)
        assert record.state == "KENTUCKY"
        assert record.limitation_trigger_date == date(2021, 1, 10)
        assert record.is_breached

    def test_unknown_state_raises(self, make_claim, tx_limits, as_of):
        """Unknown jurisdiction raises ConfigurationError."""
        with pytest.raises(ConfigurationError):
            evaluate(make_claim(state="ZZ"), tx_limits, as_of)

    def test_missing_date_raises(self, make_claim, tx_limits, as_of):
        """A missing creation date is a data gap."""
        with pytest.raises(DataGapError, match="exposure_create_date") as excinfo:
            evaluate(make_claim(created=None), tx_limits, as_of)
        assert excinfo.value.unit_id == "C-1"

    def test_to_dict(self, make_claim, tx_limits, as_of):
        """Export dictionary uses plain values."""
        data = evaluate(make_claim(), tx_limits, as_of).to_dict()
        assert data["category"] == "approaching"
        assert data["limitation_trigger_date"] == "2022-01-10"
        assert data["status"] == "In Progress"
        assert data["reserves"] == "10000"

    def test_evaluation_is_deterministic(self, make_claim, tx_limits, as_of):
        """The same inputs always give the same record."""
        claim = make_claim()
        assert evaluate(claim, tx_limits, as_of) == evaluate(claim, tx_limits, as_of)


class TestActionableStatuses:
    """Test the status predicate."""

    def test_predicate(self, make_claim):
        """Only the given statuses are accepted."""
        include = actionable_statuses(ClaimStatus.DECISIONS_PENDING)
        assert include(make_claim(status=ClaimStatus.DECISIONS_PENDING))
        assert not include(make_claim(status=ClaimStatus.IN_PROGRESS))


class TestEvaluatePortfolio:
    """Test batch evaluation."""

    def test_default_statuses_filter(self, make_claim, as_of):
        """By default only In Progress and Settled claims are evaluated."""
        claims = [
            make_claim("A", status=ClaimStatus.IN_PROGRESS),
            make_claim("B", status=ClaimStatus.SETTLED),
            make_claim("C", status=ClaimStatus.DECISIONS_PENDING),
            make_claim("D", status=ClaimStatus.OTHER),
        ]
        batch = evaluate_portfolio(claims, as_of)
        assert [r.claim_number for r in batch.results] == ["A", "B"]
        assert batch.is_complete

    def test_caller_predicate(self, make_claim, as_of):
        """A caller-supplied predicate replaces the default statuses."""
        claims = [
            make_claim("A", status=ClaimStatus.IN_PROGRESS),
            make_claim("C", status=ClaimStatus.DECISIONS_PENDING),
        ]
        batch = evaluate_portfolio(
            claims, as_of, include=actionable_statuses(ClaimStatus.DECISIONS_PENDING)
        )
        assert [r.claim_number for r in batch.results] == ["C"]

    def test_failures_isolated(self, make_claim, tx_limits, as_of):
        """Bad claims are reported and the rest still evaluated."""
        claims = [
            make_claim("A"),
            make_claim("B", state="ZZ"),
            make_claim("C", created=None),
            make_claim("D", created=date(2019, 12, 14)),
        ]
        batch = evaluate_portfolio(claims, as_of, state_limits=tx_limits)
        assert [r.claim_number for r in batch.results] == ["A", "D"]
        assert batch.failed_ids == ["B", "C"]
        assert [f.error_type for f in batch.failures] == ["ConfigurationError", "DataGapError"]
        assert batch.excluded_count == 2
        assert not batch.is_complete

    def test_window_override(self, make_claim, tx_limits, as_of):
        """An explicit window overrides the configured one."""
        batch = evaluate_portfolio(
            [make_claim()], as_of, state_limits=tx_limits, approaching_window_days=3
        )
        assert batch.results[0].category is SOLCategory.NONE

    def test_config_window(self, make_claim, tx_limits, as_of):
        """The configured window is used when none is given."""
        config = SOLConfig(approaching_window_days=3)
        batch = evaluate_portfolio([make_claim()], as_of, state_limits=tx_limits, config=config)
        assert batch.results[0].category is SOLCategory.NONE

    def test_empty_portfolio(self, as_of):
        """No claims gives an empty, complete batch."""
        batch = evaluate_portfolio([], as_of)
        assert batch.results == ()
        assert batch.is_complete

    @pytest.mark.slow
    def test_parallel_matches_serial(self, make_claim, tx_limits, as_of):
        """Sharded evaluation returns the same records in the same order."""
        claims = [
            make_claim(f"C-{i}", created=date(2019, 11, 1 + i % 28), state="ZZ" if i == 7 else "TX")
            for i in range(40)
        ]
        serial = evaluate_portfolio(claims, as_of, state_limits=tx_limits)
        parallel = evaluate_portfolio(claims, as_of, state_limits=tx_limits, n_workers=2)
        assert parallel.results == serial.results
        assert parallel.failed_ids == serial.failed_ids == ["C-7"]


class TestSOLClaim:
    """Test claim normalization."""

    def test_reserves_coerced(self):
        """Reserves accept any numeric input."""
        claim = SOLClaim("X", "TX", date(2020, 1, 1), reserves=1234.5)
        assert claim.reserves == Decimal("1234.5")
        assert claim.status is ClaimStatus.OTHER
