"""Module-level defaults for the claims risk engine.

Centralizes the default development axis, alert window and limitation table
so a single source of truth backs every configuration class.
"""

from typing import Dict, Tuple

DEFAULT_DEVELOPMENT_AXIS: Tuple[int, ...] = (12, 24, 36, 48, 60, 72, 84, 96)
"""Canonical development months (column axis of the loss triangle)."""

DEFAULT_APPROACHING_WINDOW_DAYS: int = 90
"""Days before a limitation deadline at which a claim is flagged as approaching."""

DEFAULT_REACTIVE_SPEND_THRESHOLD: float = 10_000.0
"""Reactive spend above which a claim with no expert spend scores points."""

DEFAULT_LARGE_LOSS_MARKERS: Tuple[str, ...] = ("L3L", "LIM", "LARGE")
"""Expense-category substrings that mark a large-loss / complex matter."""

DEFAULT_STATE_SOL_YEARS: Dict[str, float] = {
    "ALABAMA": 2,
    "ALASKA": 2,
    "ARIZONA": 2,
    "ARKANSAS": 3,
    "CALIFORNIA": 2,
    "COLORADO": 3,
    "CONNECTICUT": 2,
    "DELAWARE": 2,
    "FLORIDA": 2,
    "GEORGIA": 2,
    "HAWAII": 2,
    "IDAHO": 2,
    "ILLINOIS": 2,
    "INDIANA": 2,
    "IOWA": 2,
    "KANSAS": 2,
    "KENTUCKY": 1,
    "LOUISIANA": 2,
    "MAINE": 6,
    "MARYLAND": 3,
    "MASSACHUSETTS": 3,
    "MICHIGAN": 3,
    "MINNESOTA": 2,
    "MISSISSIPPI": 3,
    "MISSOURI": 5,
    "MONTANA": 3,
    "NEBRASKA": 4,
    "NEVADA": 2,
    "NEW HAMPSHIRE": 3,
    "NEW JERSEY": 2,
    "NEW MEXICO": 3,
    "NEW YORK": 3,
    "NORTH CAROLINA": 3,
    "NORTH DAKOTA": 6,
    "OHIO": 2,
    "OKLAHOMA": 2,
    "OREGON": 2,
    "PENNSYLVANIA": 2,
    "RHODE ISLAND": 3,
    "SOUTH CAROLINA": 3,
    "SOUTH DAKOTA": 3,
    "TENNESSEE": 1,
    "TEXAS": 2,
    "UTAH": 4,
    "VERMONT": 3,
    "VIRGINIA": 2,
    "WASHINGTON": 3,
    "WEST VIRGINIA": 2,
    "WISCONSIN": 3,
    "WYOMING": 4,
    "WASHINGTON, D.C.": 3,
    "DC": 3,
    "DISTRICT OF COLUMBIA": 3,
}
"""Personal-injury limitation periods in years, keyed by upper-case state name."""

STATE_ABBREVIATIONS: Dict[str, str] = {
    "AL": "ALABAMA",
    "AK": "ALASKA",
    "AZ": "ARIZONA",
    "AR": "ARKANSAS",
    "CA": "CALIFORNIA",
    "CO": "COLORADO",
    "CT": "CONNECTICUT",
    "DE": "DELAWARE",
    "FL": "FLORIDA",
    "GA": "GEORGIA",
    "HI": "HAWAII",
    "ID": "IDAHO",
    "IL": "ILLINOIS",
    "IN": "INDIANA",
    "IA": "IOWA",
    "KS": "KANSAS",
    "KY": "KENTUCKY",
    "LA": "LOUISIANA",
    "ME": "MAINE",
    "MD": "MARYLAND",
    "MA": "MASSACHUSETTS",
    "MI": "MICHIGAN",
    "MN": "MINNESOTA",
    "MS": "MISSISSIPPI",
    "MO": "MISSOURI",
    "MT": "MONTANA",
    "NE": "NEBRASKA",
    "NV": "NEVADA",
    "NH": "NEW HAMPSHIRE",
    "NJ": "NEW JERSEY",
    "NM": "NEW MEXICO",
    "NY": "NEW YORK",
    "NC": "NORTH CAROLINA",
    "ND": "NORTH DAKOTA",
    "OH": "OHIO",
    "OK": "OKLAHOMA",
    "OR": "OREGON",
    "PA": "PENNSYLVANIA",
    "RI": "RHODE ISLAND",
    "SC": "SOUTH CAROLINA",
    "SD": "SOUTH DAKOTA",
    "TN": "TENNESSEE",
    "TX": "TEXAS",
    "UT": "UTAH",
    "VT": "VERMONT",
    "VA": "VIRGINIA",
    "WA": "WASHINGTON",
    "WV": "WEST VIRGINIA",
    "WI": "WISCONSIN",
    "WY": "WYOMING",
}
"""Postal abbreviations accepted as aliases of the full state names."""
