"""
Recursive-descent parser for condition expressions.

Grammar:
expression → or_expression
or_expression  → and_expression ("OR" and_expression)*
and_expression → not_expression ("AND" not_expression)*
not_expression → "NOT" not_expression | comparison
comparison     → primary (("==" | "!=") primary)?
primary        → "(" expression ")" | STRING | NUMBER | CONSTANT | PATH
"""

from __future__ import annotations

import ast
from typing import List

from .errors import ConditionParseError
from .lexer import ConditionLexer, Token
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

_CONSTANTS = {"TRUE": True, "FALSE": False, "NONE": None}


class ConditionParser:
    """
    Builds a Condition AST from a condition string, honouring operator
    precedence and parenthesized grouping.
    """

    def __init__(self):
        self.lexer = ConditionLexer()
        self._tokens: List[Token] = []
        self._position = 0

    def parse(self, condition_str: str) -> Condition:
        """
        Parses a condition string.

        Raises:
            ConditionParseError: On a syntax error
        """
        self._tokens = self.lexer.tokenize(condition_str)
        self._position = 0

        if len(self._tokens) == 1:
            raise ConditionParseError("Empty condition", 0)

        result = self._parse_or_expression()

        if not self._is_at_end():
            current = self._current_token()
            raise ConditionParseError(f"Unexpected token '{current.value}'", current.position)

        return result

    def _parse_or_expression(self) -> Condition:
        left = self._parse_and_expression()
        while self._match('KEYWORD', "OR"):
            right = self._parse_and_expression()
            left = BinaryCondition(left=left, right=right, operator=ConditionType.OR)
        return left

    def _parse_and_expression(self) -> Condition:
        left = self._parse_not_expression()
        while self._match('KEYWORD', "AND"):
            right = self._parse_not_expression()
            left = BinaryCondition(left=left, right=right, operator=ConditionType.AND)
        return left

    def _parse_not_expression(self) -> Condition:
        if self._match('KEYWORD', "NOT"):
            # Right-associative
            return NotCondition(condition=self._parse_not_expression())
        return self._parse_comparison()

    def _parse_comparison(self) -> Condition:
        left = self._parse_primary()
        current = self._current_token()
        if current.type == 'OPERATOR':
            self._advance()
            right = self._parse_primary()
            return CompareCondition(left=left, right=right, operator=current.value)
        return left

    def _parse_primary(self) -> Condition:
        if self._match('SYMBOL', "("):
            expr = self._parse_or_expression()
            if not self._match('SYMBOL', ")"):
                raise ConditionParseError("Expected ')' after grouped expression", self._current_token().position)
            return GroupCondition(condition=expr)

        current = self._current_token()
        if current.type == 'PATH':
            self._advance()
            return VariableCondition(path=current.value)
        if current.type == 'STRING':
            self._advance()
            return LiteralCondition(value=ast.literal_eval(current.value))
        if current.type == 'NUMBER':
            self._advance()
            number = float(current.value) if "." in current.value else int(current.value)
            return LiteralCondition(value=number)
        if current.type == 'CONSTANT':
            self._advance()
            return LiteralCondition(value=_CONSTANTS[current.value])

        if current.type == 'EOF':
            raise ConditionParseError("Unexpected end of expression", current.position)
        raise ConditionParseError(f"Unexpected token '{current.value}'", current.position)

    # Token helpers

    def _current_token(self) -> Token:
        if self._position >= len(self._tokens):
            return self._tokens[-1]
        return self._tokens[self._position]

    def _is_at_end(self) -> bool:
        return self._current_token().type == 'EOF'

    def _advance(self) -> Token:
        current = self._current_token()
        if not self._is_at_end():
            self._position += 1
        return current

    def _match(self, token_type: str, value: str) -> bool:
        current = self._current_token()
        if current.type == token_type and current.value == value:
            self._advance()
            return True
        return False
