"""Statute-of-limitations breach detection.

Each claim exposure starts a jurisdiction-specific limitation clock on its
creation date. This module computes the deadline, the whole days left until
it as of an evaluation date, and classifies the claim:

* ``BREACHED`` when the deadline has passed (negative days),
* ``APPROACHING`` when it falls within the alert window (0 to 90 days by
  default, inclusive),
* ``NONE`` otherwise.

An unknown jurisdiction is a :class:`~claims_risk.exceptions.ConfigurationError`
because guessing a limitation period has legal consequences. Which statuses
are evaluated is decided by the caller through a predicate, so the same
evaluator serves every status-subset view.

Example:
    Evaluate one claim::

        from datetime import date

        claim = SOLClaim("12-345", "TX", date(2020, 1, 10), ClaimStatus.IN_PROGRESS)
        record = evaluate(claim, {"TX": StateLimit("TX", 2)}, date(2022, 1, 5))
        record.days_until_expiry  # 5
        record.category  # SOLCategory.APPROACHING
"""

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from functools import partial
import logging
import math
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple, Union

from .batch import BatchResult, run_batch
from .claims_types import ClaimStatus, SOLCategory
from .config.constants import DEFAULT_APPROACHING_WINDOW_DAYS, STATE_ABBREVIATIONS
from .config.sol import SOLConfig
from .config.utils import normalize_state
from .decimal_utils import ZERO, to_decimal
from .exceptions import ConfigurationError, DataGapError

logger = logging.getLogger(__name__)

_FULL_NAMES = {full: abbr for abbr, full in STATE_ABBREVIATIONS.items()}

# Average days per year, used only for fractional limitation periods
DAYS_PER_YEAR = 365.25


@dataclass(frozen=True)
class StateLimit:
    """Limitation period for one jurisdiction, in (possibly fractional) years."""

    state: str
    years: float


@dataclass(frozen=True)
class SOLClaim:
    """Claim fields needed to evaluate a limitation deadline."""

    claim_number: str
    state: Optional[str]
    exposure_create_date: Optional[date]
    status: ClaimStatus = ClaimStatus.OTHER
    reserves: Decimal = ZERO
    type_group: str = ""
    exposure_category: str = ""

    def __post_init__(self):
        """Normalize reserves to Decimal."""
        object.__setattr__(self, "reserves", to_decimal(self.reserves))


@dataclass(frozen=True)
class SOLRecord:
    """Limitation position of one claim at an evaluation date.

    A pure projection of claim and jurisdiction-table state; recomputed on
    every evaluation pass.
    """

    claim_number: str
    state: str
    exposure_create_date: date
    status: ClaimStatus
    limitation_years: float
    limitation_trigger_date: date
    days_until_expiry: int
    category: SOLCategory
    reserves: Decimal = ZERO
    type_group: str = ""
    exposure_category: str = ""

    @property
    def is_breached(self) -> bool:
        """True when the deadline has passed."""
        return self.category is SOLCategory.BREACHED

    @property
    def is_flagged(self) -> bool:
        """True when breached or approaching."""
        return self.category is not SOLCategory.NONE

    def to_dict(self) -> Dict[str, Any]:
        """Plain-value dictionary for export layers."""
        return {
            "claim_number": self.claim_number,
            "state": self.state,
            "exposure_create_date": self.exposure_create_date.isoformat(),
            "status": self.status.value,
            "limitation_years": self.limitation_years,
            "limitation_trigger_date": self.limitation_trigger_date.isoformat(),
            "days_until_expiry": self.days_until_expiry,
            "category": self.category.value,
            "reserves": str(self.reserves),
            "type_group": self.type_group,
            "exposure_category": self.exposure_category,
        }


StateLimits = Mapping[str, Union[StateLimit, float, int]]


def add_years(start: date, years: float) -> date:
    """Add a number of years to a date.

    Whole years keep the month and day, clamping Feb 29 to Feb 28 when the
    target year is not a leap year. A fractional remainder is added as
    ``round(fraction * 365.25)`` days.

    Args:
        start: Date to add to.
        years: Years to add; may be fractional, must not be negative.

    Returns:
        The shifted date.

    Raises:
        ValueError: If ``years`` is negative or not finite.

    Example:
        >>> add_years(date(2020, 2, 29), 2)
        datetime.date(2022, 2, 28)
    """
    if not math.isfinite(years) or years < 0:
        raise ValueError(f"Years to add must be a non-negative number, got {years}")

    whole = int(years)
    target_year = start.year + whole
    day = start.day
    if start.month == 2 and day == 29 and not calendar.isleap(target_year):
        day = 28
    shifted = start.replace(year=target_year, day=day)

    fraction = years - whole
    if fraction:
        shifted += timedelta(days=round(fraction * DAYS_PER_YEAR))
    return shifted


def resolve_limit(state: Optional[str], state_limits: StateLimits) -> Tuple[str, float]:
    """Look up the limitation period for a jurisdiction.

    Lookup ignores case and extra whitespace, and accepts a postal
    abbreviation for a table keyed by full name (and vice versa).

    Args:
        state: Jurisdiction as supplied on the claim.
        state_limits: Limitation periods keyed by jurisdiction.

    Returns:
        ``(state_key, years)`` for the matching table entry.

    Raises:
        ConfigurationError: If the state is missing or not in the table.
    """
    key = normalize_state(state)
    if not key:
        raise ConfigurationError(["Claim has no jurisdiction; limitation period unknown"])

    table = {normalize_state(k): v for k, v in state_limits.items()}
    for candidate in (key, STATE_ABBREVIATIONS.get(key), _FULL_NAMES.get(key)):
        if candidate and candidate in table:
            entry = table[candidate]
            years = entry.years if isinstance(entry, StateLimit) else float(entry)
            return candidate, years

    raise ConfigurationError([f"No limitation period configured for jurisdiction '{key}'"])


def classify_days(
    days_until_expiry: int, approaching_window_days: int = DEFAULT_APPROACHING_WINDOW_DAYS
) -> SOLCategory:
    """Classify whole days remaining until a limitation deadline."""
    if days_until_expiry < 0:
        return SOLCategory.BREACHED
    if days_until_expiry <= approaching_window_days:
        return SOLCategory.APPROACHING
    return SOLCategory.NONE


def evaluate(
    claim: SOLClaim,
    state_limits: StateLimits,
    as_of_date: date,
    approaching_window_days: int = DEFAULT_APPROACHING_WINDOW_DAYS,
) -> SOLRecord:
    """Evaluate a claim's limitation deadline.

    Args:
        claim: Claim to evaluate.
        state_limits: Limitation periods keyed by jurisdiction.
        as_of_date: Evaluation date.
        approaching_window_days: Alert window in days.

    Returns:
        The claim's SOL record.

    Raises:
        ConfigurationError: If the claim's jurisdiction is missing or unknown.
        DataGapError: If the claim has no exposure creation date.
    """
    state, years = resolve_limit(claim.state, state_limits)
    if claim.exposure_create_date is None:
        raise DataGapError(claim.claim_number, "exposure_create_date")

    trigger = add_years(claim.exposure_create_date, years)
    days = (trigger - as_of_date).days
    return SOLRecord(
        claim_number=claim.claim_number,
        state=state,
        exposure_create_date=claim.exposure_create_date,
        status=claim.status,
        limitation_years=years,
        limitation_trigger_date=trigger,
        days_until_expiry=days,
        category=classify_days(days, approaching_window_days),
        reserves=claim.reserves,
        type_group=claim.type_group,
        exposure_category=claim.exposure_category,
    )


def actionable_statuses(*statuses: ClaimStatus) -> Callable[[SOLClaim], bool]:
    """Build a predicate accepting claims in the given statuses.

    Example:
        >>> include = actionable_statuses(ClaimStatus.DECISIONS_PENDING)
    """
    allowed = frozenset(statuses)

    def include(claim: SOLClaim) -> bool:
        return claim.status in allowed

    return include


def evaluate_portfolio(
    claims: Iterable[SOLClaim],
    as_of_date: date,
    state_limits: Optional[StateLimits] = None,
    include: Optional[Callable[[SOLClaim], bool]] = None,
    approaching_window_days: Optional[int] = None,
    config: Optional[SOLConfig] = None,
    n_workers: Optional[int] = None,
) -> BatchResult[SOLRecord]:
    """Evaluate many claims, isolating per-claim failures.

    Claims rejected by ``include`` are skipped (not failures). Claims with an
    unknown jurisdiction or missing date are reported in the result's
    failures and the rest are still evaluated.

    Args:
        claims: Claims to evaluate.
        as_of_date: Evaluation date.
        state_limits: Limitation table; defaults to ``config.state_limits``.
        include: Status predicate; defaults to ``config.actionable_statuses``.
        approaching_window_days: Alert window; defaults to the configured one.
        config: SOL configuration; defaults to :class:`SOLConfig`.
        n_workers: Worker processes for sharded evaluation.

    Returns:
        Records for evaluated claims plus failures.
    """
    config = config or SOLConfig()
    limits = dict(state_limits if state_limits is not None else config.state_limits)
    include = include or actionable_statuses(*config.actionable_statuses)
    window = (
        approaching_window_days
        if approaching_window_days is not None
        else config.approaching_window_days
    )

    selected = [(claim.claim_number, claim) for claim in claims if include(claim)]
    batch = run_batch(
        selected,
        partial(evaluate, state_limits=limits, as_of_date=as_of_date, approaching_window_days=window),
        n_workers=n_workers,
    )
    logger.info(
        f"SOL evaluation as of {as_of_date.isoformat()}: {len(batch.results)} evaluated, "
        f"{batch.excluded_count} excluded"
    )
    return batch
