"""Claims Risk & Reserving Analytics"""

from ._version import __version__

# Use lazy imports to avoid import issues during test discovery
# Direct imports are defined but modules are imported only when accessed

__all__ = [
    "__version__",
    "AgeToAgeFactor",
    "BatchResult",
    "ClaimStatus",
    "ClaimsRiskError",
    "Config",
    "ConfigurationError",
    "CumulativeDevelopmentFactor",
    "DataGapError",
    "DevelopmentTriangle",
    "ExecutiveReviewResult",
    "MetricPoint",
    "MetricType",
    "ReviewLevel",
    "SOLCategory",
    "SOLClaim",
    "SOLRecord",
    "StateLimit",
    "analyze_development",
    "build_triangle",
    "compute_age_to_age",
    "cumulative_to_ultimate",
    "evaluate",
    "evaluate_portfolio",
    "score",
    "select_ata",
    "summarize_reviews",
    "summarize_sol",
]


def __getattr__(name):
    """Lazy import modules to avoid circular dependencies during test discovery."""
    if name in ["ClaimStatus", "MetricType", "ReviewLevel", "SOLCategory"]:
        from .claims_types import ClaimStatus, MetricType, ReviewLevel, SOLCategory

        return locals()[name]
    elif name in ["ClaimsRiskError", "ConfigurationError", "DataGapError"]:
        from .exceptions import ClaimsRiskError, ConfigurationError, DataGapError

        return locals()[name]
    elif name == "Config":
        from .config import Config

        return Config
    elif name == "BatchResult":
        from .batch import BatchResult

        return BatchResult
    elif name in ["DevelopmentTriangle", "MetricPoint", "build_triangle"]:
        from .loss_triangle import DevelopmentTriangle, MetricPoint, build_triangle

        return locals()[name]
    elif name in [
        "AgeToAgeFactor",
        "CumulativeDevelopmentFactor",
        "analyze_development",
        "compute_age_to_age",
        "cumulative_to_ultimate",
        "select_ata",
    ]:
        from .development_factors import (
            AgeToAgeFactor,
            CumulativeDevelopmentFactor,
            analyze_development,
            compute_age_to_age,
            cumulative_to_ultimate,
            select_ata,
        )

        return locals()[name]
    elif name in ["SOLClaim", "SOLRecord", "StateLimit", "evaluate", "evaluate_portfolio"]:
        from .statute_of_limitations import (
            SOLClaim,
            SOLRecord,
            StateLimit,
            evaluate,
            evaluate_portfolio,
        )

        return locals()[name]
    elif name in ["ExecutiveReviewResult", "score"]:
        from .executive_review import ExecutiveReviewResult, score

        return locals()[name]
    elif name in ["summarize_reviews", "summarize_sol"]:
        from .aggregation import summarize_reviews, summarize_sol

        return locals()[name]
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
