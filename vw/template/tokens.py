"""
Lexical types.

Token kinds produced by the template lexer and the errors shared by the
lexer and the parser.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from ..errors import VWUserError


class TokenType(enum.Enum):
    """Token kinds in a template."""

    # Literal content (also the raw inside of ${...}, {% ... %} and {# ... #})
    TEXT = "TEXT"

    PLACEHOLDER_START = "PLACEHOLDER_START"  # ${
    PLACEHOLDER_END = "PLACEHOLDER_END"      # }

    DIRECTIVE_START = "DIRECTIVE_START"      # {%
    DIRECTIVE_END = "DIRECTIVE_END"          # %}

    COMMENT_START = "COMMENT_START"          # {#
    COMMENT_END = "COMMENT_END"              # #}

    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """
    Token with position information for precise error diagnostics.
    """
    type: TokenType
    value: str
    position: int        # Offset in the source text
    line: int            # Line number (1-based)
    column: int          # Column number (1-based)

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


class LexerError(VWUserError):
    """Lexical analysis error."""

    def __init__(self, message: str, line: int, column: int, position: int):
        super().__init__(f"{message} at {line}:{column}")
        self.line = line
        self.column = column
        self.position = position


class ParserError(VWUserError):
    """Syntax analysis error."""

    def __init__(self, message: str, token: Token):
        super().__init__(f"{message} at {token.line}:{token.column} (token: {token.type.name})")
        self.token = token
        self.line = token.line
        self.column = token.column


__all__ = ["TokenType", "Token", "LexerError", "ParserError"]
