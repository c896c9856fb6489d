"""
Template parser.

Turns the lexer's token stream into an AST: literal text, placeholders,
comments and the directive set (extends, include, section/endsection and
friends, yield, if/elif/else, unless, isset, for/else).
"""

from __future__ import annotations

import ast
import re
from typing import List, Optional, Tuple

from .lexer import TemplateLexer
from .nodes import (
    CommentNode,
    ConditionalBlockNode,
    ElifBlockNode,
    ElseBlockNode,
    ExtendsNode,
    ForBlockNode,
    IncludeNode,
    JsonNode,
    SectionEnd,
    SectionEndNode,
    SectionStartNode,
    TemplateAST,
    TemplateNode,
    TextNode,
    VariableNode,
    YieldNode,
)
from .tokens import ParserError, Token, TokenType
from ..conditions import Condition, ConditionParseError, ConditionParser
from ..conditions.model import CompareCondition, GroupCondition, LiteralCondition, NotCondition, VariableCondition

# Logical view names: layouts.app, emails/welcome
_VIEW_NAME = re.compile(r'^/?[A-Za-z0-9_\-]+(?:[./][A-Za-z0-9_\-]+)*$')
# Block names: content, page-title, admin.sidebar
_BLOCK_NAME = re.compile(r'^[A-Za-z0-9_][A-Za-z0-9_\-.]*$')
# Variable paths: user, user.name, items.0
_VAR_PATH = re.compile(r'^[A-Za-z_]\w*(?:\.\w+)*$')
_FOR_HEAD = re.compile(r'^([A-Za-z_]\w*)\s+in\s+([A-Za-z_]\w*(?:\.\w+)*)$')
_YIELD_ARGS = re.compile(r'''^(\S+)(?:\s+("(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*'))?$''')
# ${path or "fallback"}
_OR_DEFAULT = re.compile(r'''^(.+?)\s+or\s+("(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')$''', re.S)

_SECTION_ENDS = {
    "endsection": SectionEnd.APPEND,
    "stop": SectionEnd.APPEND,
    "append": SectionEnd.APPEND,
    "overwrite": SectionEnd.OVERWRITE,
    "show": SectionEnd.SHOW,
}

# (keyword, arguments, directive start token)
Directive = Tuple[str, str, Token]


class TemplateParser:
    """
    Recursive parser for templates.

    Nested constructs (if/for) are parsed by collecting nodes until one of
    the expected closing directives is met.
    """

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.position = 0
        self.condition_parser = ConditionParser()

    def parse(self) -> TemplateAST:
        """
        Parses the whole token sequence.

        Raises:
            ParserError: On a syntax error
        """
        nodes, _ = self._parse_nodes(())
        return nodes

    def _parse_nodes(self, stop: Tuple[str, ...]) -> Tuple[List[TemplateNode], Optional[Directive]]:
        """
        Collects nodes until EOF or a directive whose keyword is in `stop`.

        Returns the nodes and the stopping directive (None at EOF).
        """
        nodes: List[TemplateNode] = []

        while not self._is_at_end():
            current = self._current_token()

            if current.type == TokenType.TEXT:
                self._advance()
                nodes.append(TextNode(text=current.value))
            elif current.type == TokenType.PLACEHOLDER_START:
                nodes.append(self._parse_placeholder())
            elif current.type == TokenType.COMMENT_START:
                nodes.append(self._parse_comment())
            elif current.type == TokenType.DIRECTIVE_START:
                directive = self._read_directive()
                if directive[0] in stop:
                    return nodes, directive
                nodes.append(self._parse_directive(directive))
            else:
                raise ParserError(f"Unexpected token {current.type.name}", current)

        return nodes, None

    # ---- placeholders and comments ----

    def _parse_placeholder(self) -> TemplateNode:
        """
        ${path}, ${raw:path}, ${json:path} or ${yield:name}.

        Variable and yield forms accept a fallback: ${path or "guest"}.
        """
        start = self._consume(TokenType.PLACEHOLDER_START)
        content = self._read_inner(TokenType.PLACEHOLDER_END).strip()

        if not content:
            raise ParserError("Empty placeholder", start)

        default: Optional[str] = None
        match = _OR_DEFAULT.match(content)
        if match:
            content = match.group(1).strip()
            default = self._string_literal(match.group(2), start)

        if ":" in content:
            kind, _, rest = content.partition(":")
            kind, rest = kind.strip(), rest.strip()
            if kind == "raw":
                return VariableNode(path=self._variable_path(rest, start), raw=True, default=default)
            if kind == "yield":
                return YieldNode(name=self._block_name(rest, start), default=default or "")
            if kind == "json":
                if default is not None:
                    raise ParserError("${json:...} does not take a fallback", start)
                return JsonNode(path=self._variable_path(rest, start))
            raise ParserError(f"Unknown placeholder kind '{kind}'", start)

        return VariableNode(path=self._variable_path(content, start), default=default)

    def _parse_comment(self) -> CommentNode:
        self._consume(TokenType.COMMENT_START)
        return CommentNode(text=self._read_inner(TokenType.COMMENT_END))

    # ---- directives ----

    def _read_directive(self) -> Directive:
        """Consumes {% ... %} and splits its content into keyword and arguments."""
        start = self._consume(TokenType.DIRECTIVE_START)
        content = self._read_inner(TokenType.DIRECTIVE_END).strip()
        if not content:
            raise ParserError("Empty directive", start)

        parts = content.split(None, 1)
        keyword = parts[0]
        args = parts[1].strip() if len(parts) > 1 else ""
        return keyword, args, start

    def _parse_directive(self, directive: Directive) -> TemplateNode:
        keyword, args, token = directive

        if keyword == "extends":
            return ExtendsNode(name=self._view_name(args, token))
        if keyword == "include":
            return IncludeNode(name=self._view_name(args, token))
        if keyword == "section":
            return SectionStartNode(name=self._block_name(args, token))
        if keyword in _SECTION_ENDS:
            self._expect_no_args(directive)
            return SectionEndNode(mode=_SECTION_ENDS[keyword])
        if keyword == "yield":
            return self._parse_yield(args, token)
        if keyword == "if":
            return self._parse_if(args, token)
        if keyword == "unless":
            condition = NotCondition(GroupCondition(self._parse_condition(args, token)))
            return self._parse_guarded(keyword, args, condition, token)
        if keyword == "isset":
            path = self._variable_path(args, token)
            condition = CompareCondition(VariableCondition(path), LiteralCondition(None), "!=")
            return self._parse_guarded(keyword, args, condition, token)
        if keyword == "for":
            return self._parse_for(args, token)

        if keyword in ("elif", "else", "endif", "endfor", "endunless", "endisset"):
            raise ParserError(f"Unexpected {{% {keyword} %}} without matching opener", token)
        raise ParserError(f"Unknown directive '{keyword}'", token)

    def _parse_yield(self, args: str, token: Token) -> YieldNode:
        match = _YIELD_ARGS.match(args)
        if not match:
            raise ParserError(f"Invalid yield arguments '{args}'", token)
        name = self._block_name(match.group(1), token)
        default = self._string_literal(match.group(2), token) if match.group(2) else ""
        return YieldNode(name=name, default=default)

    def _parse_guarded(self, keyword: str, args: str, condition: Condition,
                       token: Token) -> ConditionalBlockNode:
        """
        {% unless c %} / {% isset path %}: body [{% else %} body] {% end<keyword> %}
        """
        end = f"end{keyword}"
        body, terminator = self._parse_nodes(("else", end))
        else_block: Optional[ElseBlockNode] = None

        if terminator is not None and terminator[0] == "else":
            self._expect_no_args(terminator)
            else_body, terminator = self._parse_nodes((end,))
            else_block = ElseBlockNode(body=else_body)

        if terminator is None:
            raise ParserError(f"Missing {{% {end} %}} for {{% {keyword} %}}", token)
        self._expect_no_args(terminator)

        return ConditionalBlockNode(
            condition_text=f"{keyword} {args}",
            condition=condition,
            body=body,
            else_block=else_block,
        )

    def _parse_if(self, args: str, token: Token) -> ConditionalBlockNode:
        """
        {% if c %} body [{% elif c %} body]* [{% else %} body] {% endif %}
        """
        condition = self._parse_condition(args, token)
        body, terminator = self._parse_nodes(("elif", "else", "endif"))

        elif_blocks: List[ElifBlockNode] = []
        else_block: Optional[ElseBlockNode] = None

        while True:
            if terminator is None:
                raise ParserError("Missing {% endif %} for {% if %}", token)
            keyword, kw_args, kw_token = terminator

            if keyword == "elif":
                elif_condition = self._parse_condition(kw_args, kw_token)
                elif_body, terminator = self._parse_nodes(("elif", "else", "endif"))
                elif_blocks.append(ElifBlockNode(
                    condition_text=kw_args, condition=elif_condition, body=elif_body
                ))
                continue

            if keyword == "else":
                self._expect_no_args(terminator)
                else_body, terminator = self._parse_nodes(("endif",))
                else_block = ElseBlockNode(body=else_body)
                continue

            self._expect_no_args(terminator)
            break

        return ConditionalBlockNode(
            condition_text=args,
            condition=condition,
            body=body,
            elif_blocks=elif_blocks,
            else_block=else_block,
        )

    def _parse_for(self, args: str, token: Token) -> ForBlockNode:
        """
        {% for item in items %} body [{% else %} body] {% endfor %}
        """
        match = _FOR_HEAD.match(args)
        if not match:
            raise ParserError(f"Invalid for loop '{args}' (expected 'item in items')", token)
        target, iterable = match.group(1), match.group(2)
        if target == "loop":
            raise ParserError("'loop' is reserved and cannot be a loop variable", token)

        body, terminator = self._parse_nodes(("else", "endfor"))
        else_block: Optional[ElseBlockNode] = None

        if terminator is not None and terminator[0] == "else":
            self._expect_no_args(terminator)
            else_body, terminator = self._parse_nodes(("endfor",))
            else_block = ElseBlockNode(body=else_body)

        if terminator is None:
            raise ParserError("Missing {% endfor %} for {% for %}", token)
        self._expect_no_args(terminator)

        return ForBlockNode(target=target, iterable=iterable, body=body, else_block=else_block)

    # ---- argument helpers ----

    def _parse_condition(self, text: str, token: Token) -> Condition:
        if not text:
            raise ParserError("Missing condition", token)
        try:
            return self.condition_parser.parse(text)
        except ConditionParseError as e:
            raise ParserError(f"Invalid condition '{text}': {e.message}", token)

    @staticmethod
    def _string_literal(text: str, token: Token) -> str:
        """Decodes a quoted literal; bad escapes are syntax errors."""
        try:
            return ast.literal_eval(text)
        except (SyntaxError, ValueError) as e:
            raise ParserError(f"Invalid string literal {text}: {e}", token)

    @staticmethod
    def _view_name(args: str, token: Token) -> str:
        name = _unquote(args)
        if not name or not _VIEW_NAME.match(name):
            raise ParserError(f"Invalid view name '{args}'", token)
        return name

    @staticmethod
    def _block_name(args: str, token: Token) -> str:
        name = _unquote(args)
        if not name or not _BLOCK_NAME.match(name):
            raise ParserError(f"Invalid block name '{args}'", token)
        return name

    @staticmethod
    def _variable_path(text: str, token: Token) -> str:
        if not _VAR_PATH.match(text):
            raise ParserError(f"Invalid variable reference '{text}'", token)
        return text

    @staticmethod
    def _expect_no_args(directive: Directive) -> None:
        keyword, args, token = directive
        if args:
            raise ParserError(f"{{% {keyword} %}} takes no arguments, got '{args}'", token)

    # ---- token navigation ----

    def _read_inner(self, end_type: TokenType) -> str:
        """Reads the optional TEXT inside a construct and its closing token."""
        content = ""
        if self._current_token().type == TokenType.TEXT:
            content = self._advance().value
        self._consume(end_type)
        return content

    def _current_token(self) -> Token:
        if self.position >= len(self.tokens):
            last = self.tokens[-1] if self.tokens else None
            return Token(TokenType.EOF, "", last.position if last else 0,
                         last.line if last else 1, last.column if last else 1)
        return self.tokens[self.position]

    def _is_at_end(self) -> bool:
        return self._current_token().type == TokenType.EOF

    def _advance(self) -> Token:
        current = self._current_token()
        if self.position < len(self.tokens):
            self.position += 1
        return current

    def _consume(self, expected: TokenType) -> Token:
        current = self._current_token()
        if current.type != expected:
            raise ParserError(f"Expected {expected.name}, got {current.type.name}", current)
        return self._advance()


def _unquote(text: str) -> str:
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"":
        return text[1:-1].strip()
    return text


def parse_template(text: str) -> TemplateAST:
    """
    Lexes and parses template source.

    Raises:
        LexerError: On a lexical error
        ParserError: On a syntax error
    """
    tokens = TemplateLexer(text).tokenize()
    return TemplateParser(tokens).parse()


__all__ = ["TemplateParser", "ParserError", "parse_template"]
