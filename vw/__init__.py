"""
view-weaver: server-side views with block/inheritance composition.
"""

from __future__ import annotations

from .engine import ViewEngine, create_engine
from .errors import ConfigError, VWUserError
from .mail import Mailable, MailContent, render_mail_body
from .template import (
    BlockStackError,
    ChainTooDeepError,
    TemplateNotFoundError,
    TemplateProcessingError,
    UndefinedVariableError,
)

__all__ = [
    "ViewEngine",
    "create_engine",
    "Mailable",
    "MailContent",
    "render_mail_body",
    "VWUserError",
    "ConfigError",
    "TemplateNotFoundError",
    "ChainTooDeepError",
    "BlockStackError",
    "TemplateProcessingError",
    "UndefinedVariableError",
]
