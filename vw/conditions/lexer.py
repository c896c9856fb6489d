"""
Lexer for {% if %} / {% elif %} condition expressions.

Token kinds:
- KEYWORD: AND, OR, NOT (any case, normalized to upper case)
- CONSTANT: true, false, none (any case)
- STRING: single- or double-quoted literal
- NUMBER: integer or decimal literal
- PATH: variable path (user.name, items.0)
- OPERATOR: ==, !=
- SYMBOL: (, )
- EOF
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

from .errors import ConditionParseError


@dataclass
class Token:
    """
    Token of a condition expression.

    Attributes:
        type: Token kind (see module docstring)
        value: Token text (keywords and constants normalized)
        position: Offset in the source string
    """
    type: str
    value: str
    position: int

    def __repr__(self):
        return f"Token({self.type}, '{self.value}', pos={self.position})"


class ConditionLexer:
    """
    Splits a condition string into tokens.
    """

    # (regex_pattern, token_type, ignore_flag)
    TOKEN_SPECS = [
        (r'\s+', 'WHITESPACE', True),
        (r'"(?:[^"\\]|\\.)*"', 'STRING', False),
        (r"'(?:[^'\\]|\\.)*'", 'STRING', False),
        (r'-?\d+(?:\.\d+)?(?![\w.])', 'NUMBER', False),
        (r'==|!=', 'OPERATOR', False),
        (r'[()]', 'SYMBOL', False),
        (r'[A-Za-z_]\w*(?:\.\w+)*', 'PATH', False),
        (r'.', 'UNKNOWN', False),
    ]

    KEYWORDS = {'AND', 'OR', 'NOT'}
    CONSTANTS = {'TRUE', 'FALSE', 'NONE'}

    def __init__(self):
        self._compiled_patterns = [
            (re.compile(pattern), token_type, ignore)
            for pattern, token_type, ignore in self.TOKEN_SPECS
        ]

    def tokenize(self, text: str) -> List[Token]:
        """
        Splits the string into tokens, EOF included.

        Raises:
            ConditionParseError: On an unexpected character
        """
        tokens: List[Token] = []
        position = 0

        while position < len(text):
            for pattern, token_type, ignore in self._compiled_patterns:
                match = pattern.match(text, position)
                if not match:
                    continue
                value = match.group(0)

                if not ignore:
                    if token_type == 'UNKNOWN':
                        raise ConditionParseError(f"Unexpected character '{value}'", position)

                    final_type = token_type
                    if token_type == 'PATH':
                        upper = value.upper()
                        if upper in self.KEYWORDS:
                            final_type, value = 'KEYWORD', upper
                        elif upper in self.CONSTANTS:
                            final_type, value = 'CONSTANT', upper

                    tokens.append(Token(type=final_type, value=value, position=position))

                position = match.end()
                break

        tokens.append(Token(type='EOF', value='', position=position))
        return tokens
