"""Adapters from stored or spreadsheet rows to canonical records.

Claim rows arrive with many optional, renamed or padded column headers
(``"BI Status"`` vs ``"BI Status "``, ``"Claim#"`` vs ``"Claim"``). This
module is the only place those shapes are known: it maps rows onto
:class:`~claims_risk.statute_of_limitations.SOLClaim`,
:class:`~claims_risk.executive_review.ReviewInput` and
:class:`~claims_risk.loss_triangle.MetricPoint`, so the engines never look
up optional fields themselves.

Header matching ignores case, surrounding whitespace and the characters
``#``, ``.``, ``_`` and spaces, so ``"Exp. Create Date"`` matches
``"exp_create_date"``.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
import logging
import re
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple, TypeVar
import warnings

import pandas as pd

from ._warnings import DataQualityWarning
from .batch import BatchResult, run_batch
from .claims_types import ClaimStatus, MetricType
from .config.review import ExecutiveReviewConfig, PrefixCalendar
from .decimal_utils import ZERO
from .executive_review import ReviewInput, estimate_claim_age, litigation_stage_from_pain
from .exceptions import DataGapError
from .loss_triangle import MetricPoint
from .statute_of_limitations import SOLClaim

logger = logging.getLogger(__name__)

T = TypeVar("T")

_BLANKS = {"", "(blank)", "nan", "none", "null"}
_DATE_FORMATS = ("%m/%d/%y", "%m/%d/%Y", "%Y-%m-%d")

SOL_COLUMNS = {
    "claim_number": ("Claim#", "Claim", "Claim Number"),
    "state": ("Accident Location State", "State"),
    "exposure_create_date": ("Exp. Create Date", "Exposure Create Date"),
    "status": ("BI Status", "Status"),
    "reserves": ("Open Reserves", "Reserves"),
    "type_group": ("Type Group",),
    "exposure_category": ("Exposure Category",),
}

REVIEW_COLUMNS = {
    "claim_id": ("Claim", "Claim#", "Claim Number"),
    "prefix": ("Prefix",),
    "opened": ("Transfer Date", "Filing Date"),
    "start_pain": ("Start Pain Lvl", "Start Pain Level"),
    "end_pain": ("End Pain Lvl", "End Pain Level"),
    "expert_spend": ("Expert Spend",),
    "reactive_spend": ("Reactive Spend",),
    "expense_category": ("Exp Category", "Expense Category"),
}


def _header_key(name: Any) -> str:
    return re.sub(r"[\s#._]+", "", str(name)).lower()


def field_value(row: Mapping[str, Any], aliases: Sequence[str]) -> Any:
    """Return the first non-blank value among header aliases, else None."""
    keyed = {_header_key(k): v for k, v in row.items()}
    for alias in aliases:
        value = keyed.get(_header_key(alias))
        if value is None:
            continue
        if isinstance(value, float) and pd.isna(value):
            continue
        if isinstance(value, str) and value.strip().lower() in _BLANKS:
            continue
        return value
    return None


def parse_currency(value: Any) -> Decimal:
    """Parse a currency cell such as ``"$1,234.50"`` or ``"(500)"``.

    Blank cells are zero; parentheses denote a negative amount.

    Raises:
        ValueError: If a non-blank cell is not a number.
    """
    if value is None:
        return ZERO
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return Decimal(str(value))
    text = str(value).strip()
    if text.lower() in _BLANKS:
        return ZERO
    cleaned = re.sub(r"[$,\s]", "", text)
    negative = cleaned.startswith("(") and cleaned.endswith(")")
    if negative:
        cleaned = cleaned[1:-1]
    try:
        amount = Decimal(cleaned)
    except InvalidOperation as exc:
        raise ValueError(f"Cannot parse currency value {value!r}") from exc
    return -amount if negative else amount


def parse_date(value: Any) -> Optional[date]:
    """Parse a date cell in ``M/D/YY``, ``M/D/YYYY`` or ISO format.

    Returns:
        The date, or None for blank or unparseable cells.
    """
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if text.lower() in _BLANKS:
        return None
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    logger.warning(f"Unparseable date {value!r}")
    return None


def sol_claim_from_row(row: Mapping[str, Any]) -> SOLClaim:
    """Map a claim row onto an :class:`SOLClaim`.

    Raises:
        DataGapError: If the row has no claim number.
        ValueError: If the reserves cell is not a number.
    """
    claim_number = field_value(row, SOL_COLUMNS["claim_number"])
    if claim_number is None:
        raise DataGapError(None, "claim_number")
    state = field_value(row, SOL_COLUMNS["state"])
    return SOLClaim(
        claim_number=str(claim_number).strip(),
        state=str(state).strip().upper() if state is not None else None,
        exposure_create_date=parse_date(field_value(row, SOL_COLUMNS["exposure_create_date"])),
        status=ClaimStatus.from_label(field_value(row, SOL_COLUMNS["status"])),
        reserves=parse_currency(field_value(row, SOL_COLUMNS["reserves"])),
        type_group=str(field_value(row, SOL_COLUMNS["type_group"]) or "").strip(),
        exposure_category=str(field_value(row, SOL_COLUMNS["exposure_category"]) or "").strip(),
    )


def review_input_from_row(
    row: Mapping[str, Any],
    as_of: date,
    calendar: Optional[PrefixCalendar] = None,
    config: Optional[ExecutiveReviewConfig] = None,
) -> ReviewInput:
    """Map a litigation-matter row onto a :class:`ReviewInput`.

    Claim age comes from the transfer/filing date when present and falls
    back to the prefix calendar. An explicit ``calendar`` wins over the one
    configured in ``config.prefix_calendar``.

    Raises:
        DataGapError: If the row has no claim identifier.
        ValueError: If a pain level or spend cell is not a number.
    """
    claim_id = field_value(row, REVIEW_COLUMNS["claim_id"])
    if claim_id is None:
        raise DataGapError(None, "claim_id")

    if calendar is None and config is not None:
        calendar = config.prefix_calendar

    age = estimate_claim_age(
        as_of,
        opened=parse_date(field_value(row, REVIEW_COLUMNS["opened"])),
        prefix=field_value(row, REVIEW_COLUMNS["prefix"]),
        calendar=calendar,
    )
    start_pain = float(field_value(row, REVIEW_COLUMNS["start_pain"]) or 0)
    end_pain = float(field_value(row, REVIEW_COLUMNS["end_pain"]) or 0)
    return ReviewInput(
        claim_id=str(claim_id).strip(),
        claim_age_years=age.years,
        litigation_stage=litigation_stage_from_pain(end_pain),
        expert_spend=parse_currency(field_value(row, REVIEW_COLUMNS["expert_spend"])),
        reactive_spend=parse_currency(field_value(row, REVIEW_COLUMNS["reactive_spend"])),
        pain_escalation=end_pain - start_pain,
        max_pain=end_pain,
        expense_category=str(field_value(row, REVIEW_COLUMNS["expense_category"]) or "").strip(),
    )


def normalize_rows(
    rows: Iterable[Mapping[str, Any]], adapter: Callable[[Mapping[str, Any]], T]
) -> BatchResult[T]:
    """Apply an adapter to every row, isolating rows that fail.

    Failed rows are identified as ``row <index>``.
    """
    return run_batch(((f"row {i}", row) for i, row in enumerate(rows)), adapter)


def metric_points_from_frame(frame: pd.DataFrame) -> List[MetricPoint]:
    """Convert a triangle extract to metric points.

    The frame needs ``accident_year``, ``development_months``,
    ``metric_type`` and ``amount`` columns. Rows with an unknown metric type
    or a missing amount are skipped and reported as a
    :class:`DataQualityWarning`.

    Raises:
        KeyError: If a required column is missing.
    """
    required = ["accident_year", "development_months", "metric_type", "amount"]
    missing = [c for c in required if c not in frame.columns]
    if missing:
        raise KeyError(f"Triangle extract is missing columns: {missing}")

    known = {m.value for m in MetricType}
    points: List[MetricPoint] = []
    skipped: List[Tuple[Any, str]] = []
    for record in frame[required].itertuples(index=False):
        metric = str(record.metric_type).strip()
        if metric not in known:
            skipped.append((record.metric_type, "unknown metric type"))
            continue
        if pd.isna(record.amount):
            skipped.append((record.metric_type, "missing amount"))
            continue
        points.append(
            MetricPoint(
                int(record.accident_year),
                int(record.development_months),
                MetricType(metric),
                Decimal(str(record.amount)),
            )
        )

    if skipped:
        for metric, reason in skipped:
            logger.warning(f"Skipped triangle row ({metric}): {reason}")
        warnings.warn(
            f"{len(skipped)} triangle row(s) skipped", DataQualityWarning, stacklevel=2
        )
    return points
