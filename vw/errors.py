"""
Base exception for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from VWUserError.

Programming errors and bugs should NOT inherit from VWUserError;
they will propagate with full tracebacks.
"""

from __future__ import annotations


class VWUserError(Exception):
    """
    Base class for all user-facing errors in view-weaver.

    These errors indicate problems that the user can fix:
    missing views, malformed templates, invalid configuration, etc.
    """
    pass


class ConfigError(VWUserError):
    """Invalid views.yaml content or environment override."""
    pass


__all__ = ["VWUserError", "ConfigError"]
