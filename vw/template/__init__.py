"""
Template layer: lexing, parsing, block capture and chain resolution.
"""

from __future__ import annotations

from .blocks import BlockManager
from .capture import Capture, CaptureStack
from .chain import CONTENT_BLOCK, InheritanceChainResolver
from .errors import (
    BlockStackError,
    CaptureError,
    ChainTooDeepError,
    ScopeError,
    TemplateNotFoundError,
    TemplateProcessingError,
    UndefinedVariableError,
)
from .evaluator import LoopInfo, TemplateEvaluator
from .processor import LoadedTemplate, TemplateProcessor
from .resolver import TemplateResolver
from .scope import Scope, bind
from .state import RenderState
from .tokens import LexerError, ParserError

__all__ = [
    "BlockManager",
    "Capture",
    "CaptureStack",
    "CONTENT_BLOCK",
    "InheritanceChainResolver",
    "LoopInfo",
    "TemplateEvaluator",
    "LoadedTemplate",
    "TemplateProcessor",
    "TemplateResolver",
    "RenderState",
    "Scope",
    "bind",
    "BlockStackError",
    "CaptureError",
    "ChainTooDeepError",
    "ScopeError",
    "TemplateNotFoundError",
    "TemplateProcessingError",
    "UndefinedVariableError",
    "LexerError",
    "ParserError",
]
