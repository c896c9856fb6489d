"""
Template lexer.

Splits template source into literal text and the three delimited
constructs: placeholders ${...}, directives {% ... %} and comments {# ... #}.
The inside of a construct is emitted as a single TEXT token; its grammar is
handled by the parser.
"""

from __future__ import annotations

import re
from typing import Dict, List, Tuple

from .tokens import LexerError, Token, TokenType


class TemplateLexer:
    """
    Template lexer.

    Only the opening sequences are special in literal text, so braces in
    HTML, CSS or inline scripts pass through untouched. Once a construct is
    opened, everything up to its closing sequence belongs to it.
    """

    _OPENERS = re.compile(r'\$\{|\{%|\{#')

    # opener -> (start token, closing sequence, end token)
    _CONSTRUCTS: Dict[str, Tuple[TokenType, str, TokenType]] = {
        "${": (TokenType.PLACEHOLDER_START, "}", TokenType.PLACEHOLDER_END),
        "{%": (TokenType.DIRECTIVE_START, "%}", TokenType.DIRECTIVE_END),
        "{#": (TokenType.COMMENT_START, "#}", TokenType.COMMENT_END),
    }

    def __init__(self, text: str):
        self.text = text
        self.position = 0
        self.line = 1
        self.column = 1
        self.length = len(text)

    def tokenize(self) -> List[Token]:
        """
        Tokenizes the whole source and returns the token list (ending with EOF).

        Raises:
            LexerError: On an unterminated construct
        """
        tokens: List[Token] = []

        while self.position < self.length:
            match = self._OPENERS.search(self.text, self.position)
            if match is None:
                tokens.append(self._take(TokenType.TEXT, self.length))
                break

            if match.start() > self.position:
                tokens.append(self._take(TokenType.TEXT, match.start()))

            opener = match.group(0)
            start_type, closer, end_type = self._CONSTRUCTS[opener]
            open_line, open_column, open_pos = self.line, self.column, self.position
            tokens.append(self._take(start_type, self.position + len(opener)))

            close = self.text.find(closer, self.position)
            if close < 0:
                raise LexerError(
                    f"Unterminated {opener!r} (expected {closer!r})",
                    open_line, open_column, open_pos
                )

            if close > self.position:
                tokens.append(self._take(TokenType.TEXT, close))
            tokens.append(self._take(end_type, close + len(closer)))

        tokens.append(Token(TokenType.EOF, "", self.position, self.line, self.column))
        return tokens

    def _take(self, token_type: TokenType, end: int) -> Token:
        """Emits text[position:end] as one token and advances past it."""
        token = Token(token_type, self.text[self.position:end], self.position, self.line, self.column)
        self._advance(end - self.position)
        return token

    def _advance(self, count: int) -> None:
        """
        Moves the position forward, keeping line and column numbers in sync.
        """
        for _ in range(count):
            if self.position < self.length:
                if self.text[self.position] == '\n':
                    self.line += 1
                    self.column = 1
                else:
                    self.column += 1
                self.position += 1


def tokenize_template(text: str) -> List[Token]:
    """
    Convenience wrapper around TemplateLexer.

    Args:
        text: Template source

    Returns:
        Token list

    Raises:
        LexerError: On a lexical error
    """
    lexer = TemplateLexer(text)
    return lexer.tokenize()


__all__ = ["TemplateLexer", "tokenize_template", "Token", "TokenType", "LexerError"]
