"""Exception hierarchy for the claims risk engine.

Two failure classes matter to callers:

* :class:`DataGapError` is *soft*: a triangle cell or claim field is missing
  and no value can be derived. Batch operations record it and move on.
* :class:`ConfigurationError` is *hard* for the unit being evaluated: an
  unknown jurisdiction, or a configuration that fails validation. Guessing a
  limitation period has legal consequences, so it is never defaulted.

Division by zero in a link ratio is not an error at all; the offending
accident year is excluded from the averages.
"""

from typing import List, Optional


class ClaimsRiskError(Exception):
    """Base class for errors raised by the claims risk engine."""


class ConfigurationError(ClaimsRiskError):
    """Raised when configuration is missing or invalid for an evaluation.

    Attributes:
        issues: List of specific configuration problems found.

    Examples:
        Catching and inspecting issues::

            try:
                config.validate_config()
            except ConfigurationError as e:
                for issue in e.issues:
                    print(f"  - {issue}")
    """

    def __init__(self, issues: List[str]) -> None:
        self.issues = issues
        bullet_list = "\n".join(f"  - {issue}" for issue in issues)
        super().__init__(
            f"Configuration has {len(issues)} critical "
            f"{'issue' if len(issues) == 1 else 'issues'}:\n{bullet_list}"
        )


class DataGapError(ClaimsRiskError):
    """Raised when a required input value is missing.

    Attributes:
        unit_id: Identifier of the claim or accident year with the gap.
        field: Name of the missing field.
    """

    def __init__(self, unit_id: Optional[str], field: str, detail: str = "") -> None:
        self.unit_id = unit_id
        self.field = field
        message = f"Missing {field}"
        if unit_id:
            message += f" for {unit_id}"
        if detail:
            message += f": {detail}"
        super().__init__(message)
