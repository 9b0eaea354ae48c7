"""
apigw_synth.routing.errors

Domain-specific exceptions raised while compiling gateway routes.

Responsibilities:
- Signal structural configuration errors (missing config objects, clashing routes).
"""

from __future__ import annotations


class ConfigurationError(ValueError):
    """
    Raised when the routing configuration itself is absent or inconsistent.
    Absent optional fields never raise; they are resolved through defaults.
    """


# --- Module Notes -----------------------------------------------------------
# Schema conversion failures use `DowngradeError` (see `routing.downgrade`) so callers
# can tell a bad input config apart from a synthesis bug.
