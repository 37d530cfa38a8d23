"""Shared configuration utilities."""

from typing import Any, Dict


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override dictionary into base dictionary.

    Creates a new dictionary with values from ``base`` updated by ``override``.
    Nested dictionaries are merged recursively rather than replaced wholesale.

    Args:
        base: Base dictionary providing default values.
        override: Override dictionary whose values take precedence.

    Returns:
        New merged dictionary (neither input is mutated).
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def normalize_state(state: Any) -> str:
    """Normalize a jurisdiction name for table lookups.

    Collapses internal whitespace and upper-cases, so ``" new  york"`` and
    ``"New York"`` share the key ``"NEW YORK"``.
    """
    if state is None:
        return ""
    return " ".join(str(state).split()).upper()
