"""Tests for failure-isolated batch evaluation."""

from decimal import Decimal

import pytest

from claims_risk.batch import BatchResult, FailedUnit, run_batch
from claims_risk.decimal_utils import to_decimal
from claims_risk.exceptions import DataGapError


def _require_positive(value):
    if value is None:
        raise DataGapError("unit", "value")
    if value <= 0:
        raise ValueError(f"{value} is not positive")
    return value * 2


class TestRunBatch:
    """Test in-process batch evaluation."""

    def test_all_succeed(self):
        """Results keep input order."""
        batch = run_batch([("a", 1), ("b", 2), ("c", 3)], _require_positive)
        assert batch.results == (2, 4, 6)
        assert batch.is_complete
        assert batch.excluded_count == 0

    def test_unit_errors_isolated(self):
        """Data gaps and value errors exclude only the failing unit."""
        batch = run_batch([("a", 1), ("b", None), ("c", -1), ("d", 4)], _require_positive)
        assert batch.results == (2, 8)
        assert batch.failed_ids == ["b", "c"]
        assert batch.failures[0] == FailedUnit("b", "Missing value for unit", "DataGapError")
        assert batch.failures[1].error_type == "ValueError"
        assert not batch.is_complete

    def test_failures_logged(self, caplog):
        """Every excluded unit is logged."""
        with caplog.at_level("WARNING", logger="claims_risk.batch"):
            run_batch([("bad", -1)], _require_positive)
        assert "Excluded bad" in caplog.text

    def test_other_errors_propagate(self):
        """Unexpected exceptions are bugs and abort the batch."""
        with pytest.raises(TypeError):
            run_batch([("a", 1), ("b", "x")], _require_positive)

    def test_empty(self):
        """No units gives an empty, complete result."""
        batch = run_batch([], _require_positive)
        assert batch == BatchResult()
        assert batch.is_complete

    def test_single_unit_stays_in_process(self):
        """One unit never starts a pool."""
        batch = run_batch([("a", 1)], _require_positive, n_workers=4)
        assert batch.results == (2,)


class TestBatchResult:
    """Test BatchResult merging."""

    def test_merge_concatenates(self):
        """Merge keeps self first."""
        left = BatchResult((1,), (FailedUnit("x", "bad", "ValueError"),))
        right = BatchResult((2, 3))
        merged = left.merge(right)
        assert merged.results == (1, 2, 3)
        assert merged.failed_ids == ["x"]

    def test_merge_associative(self):
        """Grouping of merges does not matter."""
        a, b, c = BatchResult((1,)), BatchResult((2,)), BatchResult((3,))
        assert a.merge(b).merge(c) == a.merge(b.merge(c))


@pytest.mark.slow
class TestParallelBatch:
    """Test sharded evaluation in worker processes."""

    def test_parallel_matches_serial(self):
        """Worker processes give the same results and failures, in order."""
        units = [(f"u{i}", "oops" if i % 10 == 3 else str(i)) for i in range(50)]
        serial = run_batch(units, to_decimal)
        parallel = run_batch(units, to_decimal, n_workers=2, chunk_size=7)
        assert parallel == serial
        assert parallel.results[0] == Decimal("0")
        assert parallel.failed_ids == ["u3", "u13", "u23", "u33", "u43"]
