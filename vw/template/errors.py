"""
Errors raised by the view engine.

TemplateNotFoundError, ChainTooDeepError and BlockStackError are fatal for
the render in progress and propagate unchanged to the caller of
ViewEngine.fetch / ViewEngine.render.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from ..errors import VWUserError


class TemplateNotFoundError(VWUserError):
    """No view file exists for a logical template name."""

    def __init__(self, name: str, path: Optional[Path] = None, reason: str = ""):
        if path is not None:
            message = f"Template not found: '{name}' (looked for {path})"
        else:
            message = f"Template not found: '{name}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.name = name
        self.path = path


class ChainTooDeepError(VWUserError):
    """The extends/include chain exceeded the configured maximum."""

    def __init__(self, chain: Sequence[str], limit: int):
        shown = " -> ".join(chain[-(limit + 1):]) if chain else ""
        super().__init__(
            f"Template chain exceeds {limit} hops (cyclic or misconfigured extends?): {shown}"
        )
        self.chain = list(chain)
        self.limit = limit


class BlockStackError(VWUserError):
    """Unbalanced section/endsection: block stack integrity violation."""

    def __init__(self, message: str, template_name: str = ""):
        if template_name:
            message = f"{message} (in template '{template_name}')"
        super().__init__(message)
        self.template_name = template_name


class CaptureError(BlockStackError):
    """Output capture closed out of order or written with no destination."""
    pass


class UndefinedVariableError(VWUserError):
    """A ${...} placeholder referenced a name missing from the render data."""

    def __init__(self, path: str, template_name: str = ""):
        where = f" in template '{template_name}'" if template_name else ""
        super().__init__(f"Undefined variable '{path}'{where}")
        self.path = path
        self.template_name = template_name


class ScopeError(VWUserError):
    """Render data cannot be bound into a template scope."""
    pass


class TemplateProcessingError(VWUserError):
    """Unexpected failure while evaluating a template."""

    def __init__(self, message: str, template_name: str = "", cause: Optional[Exception] = None):
        super().__init__(f"Template processing error in '{template_name}': {message}")
        self.template_name = template_name
        self.cause = cause


__all__ = [
    "TemplateNotFoundError",
    "ChainTooDeepError",
    "BlockStackError",
    "CaptureError",
    "UndefinedVariableError",
    "ScopeError",
    "TemplateProcessingError",
]
