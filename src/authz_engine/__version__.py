"""Version information for authz-engine."""

__version__ = "0.3.0"
