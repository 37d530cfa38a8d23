"""Failure-isolated batch evaluation over claims or accident years.

Per-unit evaluators are pure, so a portfolio run is embarrassingly parallel.
:func:`run_batch` evaluates each unit independently, records units that fail
with a :class:`~claims_risk.exceptions.ClaimsRiskError` (or a ``ValueError``
from malformed input) and carries on, so one bad claim never aborts a batch.
Any other exception is a bug and propagates.

With ``n_workers`` set, units are split into contiguous chunks processed by a
``ProcessPoolExecutor``; chunk results are merged back in input order with
:meth:`BatchResult.merge`, which is associative.
"""

from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
import logging
from typing import Any, Callable, Generic, Iterable, List, Optional, Sequence, Tuple, TypeVar

from .exceptions import ClaimsRiskError

logger = logging.getLogger(__name__)

T = TypeVar("T")

#: Exceptions treated as a failure of the unit rather than of the batch.
UNIT_ERRORS = (ClaimsRiskError, ValueError)


@dataclass(frozen=True)
class FailedUnit:
    """A unit excluded from a batch, with the reason."""

    unit_id: str
    reason: str
    error_type: str


@dataclass(frozen=True)
class BatchResult(Generic[T]):
    """Partial results of a batch plus the units that failed.

    Attributes:
        results: Successful results in input order.
        failures: Failed units in input order.
    """

    results: Tuple[T, ...] = field(default_factory=tuple)
    failures: Tuple[FailedUnit, ...] = field(default_factory=tuple)

    @property
    def excluded_count(self) -> int:
        """Number of units excluded because evaluation failed."""
        return len(self.failures)

    @property
    def is_complete(self) -> bool:
        """True when no unit failed."""
        return not self.failures

    @property
    def failed_ids(self) -> List[str]:
        """Identifiers of the failed units."""
        return [f.unit_id for f in self.failures]

    def merge(self, other: "BatchResult[T]") -> "BatchResult[T]":
        """Concatenate two batch results (self first)."""
        return BatchResult(self.results + other.results, self.failures + other.failures)


def _evaluate_chunk(
    evaluate: Callable[[Any], T], chunk: Sequence[Tuple[str, Any]]
) -> BatchResult[T]:
    """Evaluate one chunk of ``(unit_id, unit)`` pairs.

    Module-level function for ProcessPoolExecutor pickle compatibility.
    """
    results: List[T] = []
    failures: List[FailedUnit] = []
    for unit_id, unit in chunk:
        try:
            results.append(evaluate(unit))
        except UNIT_ERRORS as e:
            logger.warning(f"Excluded {unit_id}: {e}")
            failures.append(FailedUnit(unit_id, str(e), type(e).__name__))
    return BatchResult(tuple(results), tuple(failures))


def run_batch(
    units: Iterable[Tuple[str, Any]],
    evaluate: Callable[[Any], T],
    n_workers: Optional[int] = None,
    chunk_size: Optional[int] = None,
) -> BatchResult[T]:
    """Evaluate units with failure isolation.

    Args:
        units: ``(unit_id, unit)`` pairs.
        evaluate: Per-unit function. Must be picklable (a module-level
            function or a ``functools.partial`` of one) when ``n_workers``
            is greater than 1.
        n_workers: Worker processes; None or 1 evaluates in-process.
        chunk_size: Units per chunk in parallel mode. Defaults to an even
            split into ``4 * n_workers`` chunks.

    Returns:
        Successful results and failures, both in input order.
    """
    pairs = list(units)
    if not n_workers or n_workers <= 1 or len(pairs) < 2:
        return _evaluate_chunk(evaluate, pairs)

    size = chunk_size or max(1, -(-len(pairs) // (n_workers * 4)))
    chunks = [pairs[i : i + size] for i in range(0, len(pairs), size)]
    logger.info(f"Evaluating {len(pairs)} units in {len(chunks)} chunks on {n_workers} workers")

    chunk_results: List[Optional[BatchResult[T]]] = [None] * len(chunks)
    with ProcessPoolExecutor(max_workers=n_workers) as executor:
        futures = {
            executor.submit(_evaluate_chunk, evaluate, chunk): i for i, chunk in enumerate(chunks)
        }
        for future in as_completed(futures):
            chunk_results[futures[future]] = future.result()

    combined: BatchResult[T] = BatchResult()
    for result in chunk_results:
        if result is not None:
            combined = combined.merge(result)
    return combined
