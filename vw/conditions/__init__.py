"""
Condition expressions for {% if %} / {% elif %} directives.
"""

from __future__ import annotations

from .errors import ConditionParseError
from .evaluator import ConditionEvaluator, EvaluationError
from .model import Condition, ConditionType
from .parser import ConditionParser

__all__ = [
    "Condition",
    "ConditionType",
    "ConditionParser",
    "ConditionParseError",
    "ConditionEvaluator",
    "EvaluationError",
]
