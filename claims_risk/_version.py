"""Version information for claims_risk."""

__version__ = "0.4.0"
