"""
Evaluator of condition ASTs against the current template scope.
"""

from __future__ import annotations

from typing import Any, Callable, cast

from .model import (
    BinaryCondition,
    CompareCondition,
    Condition,
    ConditionType,
    GroupCondition,
    LiteralCondition,
    NotCondition,
    VariableCondition,
)

# path -> value (None when undefined)
Resolver = Callable[[str], Any]


class EvaluationError(Exception):
    """Unknown condition node (programming error)."""
    pass


class ConditionEvaluator:
    """
    Evaluates a Condition AST to a boolean.

    Variables are looked up through the supplied resolver; undefined
    variables must resolve to None so that they read as false.
    """

    def __init__(self, resolve: Resolver):
        self.resolve = resolve

    def evaluate(self, condition: Condition) -> bool:
        condition_type = condition.get_type()

        if condition_type == ConditionType.AND:
            node = cast(BinaryCondition, condition)
            return self.evaluate(node.left) and self.evaluate(node.right)
        if condition_type == ConditionType.OR:
            node = cast(BinaryCondition, condition)
            return self.evaluate(node.left) or self.evaluate(node.right)
        if condition_type == ConditionType.NOT:
            return not self.evaluate(cast(NotCondition, condition).condition)
        if condition_type == ConditionType.GROUP:
            return self.evaluate(cast(GroupCondition, condition).condition)
        if condition_type == ConditionType.COMPARE:
            return self._evaluate_compare(cast(CompareCondition, condition))

        return bool(self.value_of(condition))

    def value_of(self, condition: Condition) -> Any:
        """Operand value of a primary node."""
        condition_type = condition.get_type()
        if condition_type == ConditionType.VARIABLE:
            return self.resolve(cast(VariableCondition, condition).path)
        if condition_type == ConditionType.LITERAL:
            return cast(LiteralCondition, condition).value
        if condition_type == ConditionType.GROUP:
            return self.evaluate(cast(GroupCondition, condition).condition)
        raise EvaluationError(f"Unknown condition type: {condition_type}")

    def _evaluate_compare(self, condition: CompareCondition) -> bool:
        left = self.value_of(condition.left)
        right = self.value_of(condition.right)
        if condition.operator == "==":
            return left == right
        if condition.operator == "!=":
            return left != right
        raise EvaluationError(f"Unknown comparison operator: {condition.operator}")
