"""Custom warning classes for the claims_risk package.

These warning classes allow callers to programmatically filter, suppress,
or capture warnings using Python's standard ``warnings`` module.

Example:
    Suppress data-quality warnings while loading a noisy extract::

        import warnings
        from claims_risk._warnings import DataQualityWarning

        warnings.filterwarnings("ignore", category=DataQualityWarning)

    Capture them instead, e.g. to show alongside a triangle::

        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter("always", DataQualityWarning)
            triangle = build_triangle(points, MetricType.NET_PAID_LOSS)
            issues = [x for x in w if issubclass(x.category, DataQualityWarning)]
"""


class ClaimsRiskWarning(UserWarning):
    """Base class for all claims_risk warnings."""


class ConfigurationWarning(ClaimsRiskWarning):
    """Unusual or stale configuration.

    Raised when an evaluation falls back on a configured heuristic, such as
    estimating claim age from a claim-number prefix calendar instead of a
    real date.
    """


class DataQualityWarning(ClaimsRiskWarning):
    """Data anomalies found while building derived structures.

    Raised for duplicate ``(accident_year, development_months, metric)``
    points and for paid development that decreases between periods.
    """
