"""
AST of condition expressions.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ConditionType(Enum):
    VARIABLE = "variable"
    LITERAL = "literal"
    COMPARE = "compare"
    AND = "and"
    OR = "or"
    NOT = "not"
    GROUP = "group"


@dataclass
class Condition(ABC):
    """Base class of all condition nodes."""

    @abstractmethod
    def get_type(self) -> ConditionType:
        pass

    def __str__(self) -> str:
        return self._to_string()

    @abstractmethod
    def _to_string(self) -> str:
        pass


@dataclass
class VariableCondition(Condition):
    """
    Variable reference: user.is_admin

    Truthy when the resolved value is truthy; undefined paths are falsy.
    """
    path: str

    def get_type(self) -> ConditionType:
        return ConditionType.VARIABLE

    def _to_string(self) -> str:
        return self.path


@dataclass
class LiteralCondition(Condition):
    """String, number, true/false/none."""
    value: Any

    def get_type(self) -> ConditionType:
        return ConditionType.LITERAL

    def _to_string(self) -> str:
        if isinstance(self.value, str):
            return repr(self.value)
        if self.value is None:
            return "none"
        if isinstance(self.value, bool):
            return "true" if self.value else "false"
        return str(self.value)


@dataclass
class CompareCondition(Condition):
    """Equality test: left == right / left != right."""
    left: Condition
    right: Condition
    operator: str

    def get_type(self) -> ConditionType:
        return ConditionType.COMPARE

    def _to_string(self) -> str:
        return f"{self.left} {self.operator} {self.right}"


@dataclass
class GroupCondition(Condition):
    """Explicit grouping: (condition)"""
    condition: Condition

    def get_type(self) -> ConditionType:
        return ConditionType.GROUP

    def _to_string(self) -> str:
        return f"({self.condition})"


@dataclass
class NotCondition(Condition):
    """Negation: NOT condition"""
    condition: Condition

    def get_type(self) -> ConditionType:
        return ConditionType.NOT

    def _to_string(self) -> str:
        return f"NOT {self.condition}"


@dataclass
class BinaryCondition(Condition):
    """Logical AND / OR."""
    left: Condition
    right: Condition
    operator: ConditionType

    def get_type(self) -> ConditionType:
        return self.operator

    def _to_string(self) -> str:
        op = "AND" if self.operator == ConditionType.AND else "OR"
        return f"{self.left} {op} {self.right}"
