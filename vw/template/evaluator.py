"""
AST interpreter.

Walks a parsed view and drives the render state: literal text and
placeholders go to the innermost capture, section directives open and
close blocks, extends queues an ancestor, include evaluates a partial in
place.
"""

from __future__ import annotations

import html
import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Type

from .errors import BlockStackError, ChainTooDeepError, TemplateProcessingError, UndefinedVariableError
from .nodes import (
    CommentNode,
    ConditionalBlockNode,
    ExtendsNode,
    ForBlockNode,
    IncludeNode,
    JsonNode,
    SectionEnd,
    SectionEndNode,
    SectionStartNode,
    TemplateNode,
    TextNode,
    VariableNode,
    YieldNode,
)
from .processor import LoadedTemplate, TemplateProcessor
from .scope import MISSING, Scope
from .state import RenderState
from ..conditions import ConditionEvaluator
from ..errors import VWUserError

logger = logging.getLogger(__name__)

_JSON_HTML_ESCAPES = {
    ord("<"): "\\u003c",
    ord(">"): "\\u003e",
    ord("&"): "\\u0026",
    ord("'"): "\\u0027",
}


@dataclass(frozen=True)
class LoopInfo:
    """The `loop` variable inside {% for %}."""
    index: int
    iteration: int
    first: bool
    last: bool
    count: int
    remaining: int
    depth: int
    parent: Optional[LoopInfo] = None


@dataclass(frozen=True)
class _Frame:
    """Template being evaluated and the block depth it started at."""
    name: str
    floor: int


Handler = Callable[[Any, Scope, _Frame], None]


class TemplateEvaluator:
    """
    Evaluates templates against one RenderState.
    """

    def __init__(
            self,
            processor: TemplateProcessor,
            state: RenderState,
            *,
            autoescape: bool = True,
            strict_variables: bool = False,
            max_include_depth: int = 32,
    ):
        self.processor = processor
        self.state = state
        self.autoescape = autoescape
        self.strict_variables = strict_variables
        self.max_include_depth = max_include_depth

        self._handlers: Dict[Type[TemplateNode], Handler] = {
            TextNode: self._eval_text,
            CommentNode: self._eval_comment,
            VariableNode: self._eval_variable,
            JsonNode: self._eval_json,
            YieldNode: self._eval_yield,
            ExtendsNode: self._eval_extends,
            IncludeNode: self._eval_include,
            SectionStartNode: self._eval_section_start,
            SectionEndNode: self._eval_section_end,
            ConditionalBlockNode: self._eval_conditional,
            ForBlockNode: self._eval_for,
        }

    def evaluate(self, template: LoadedTemplate, scope: Optional[Scope] = None) -> None:
        """
        Evaluates one template. Sections it opens must be closed by it.

        Raises:
            BlockStackError: On unbalanced section directives
            TemplateProcessingError: On unexpected failures (cause attached)
        """
        frame = _Frame(name=template.name, floor=self.state.blocks.depth)
        try:
            self._evaluate_nodes(template.ast, self.state.scope if scope is None else scope, frame)
        except VWUserError:
            raise
        except Exception as e:
            raise TemplateProcessingError(f"Failed to evaluate template: {e}", template.name, e)

        if self.state.blocks.depth != frame.floor:
            unclosed = self.state.blocks.open_names[frame.floor:]
            raise BlockStackError(f"Unclosed section(s): {', '.join(unclosed)}", template.name)

    def _evaluate_nodes(self, nodes: List[TemplateNode], scope: Scope, frame: _Frame) -> None:
        for node in nodes:
            handler = self._handlers.get(type(node))
            if handler is None:
                raise TemplateProcessingError(f"No processor for node type {type(node).__name__}", frame.name)
            handler(node, scope, frame)

    # ---- output ----

    def _write(self, text: str) -> None:
        self.state.captures.write(text)

    def _eval_text(self, node: TextNode, scope: Scope, frame: _Frame) -> None:
        self._write(node.text)

    def _eval_comment(self, node: CommentNode, scope: Scope, frame: _Frame) -> None:
        pass

    def _eval_variable(self, node: VariableNode, scope: Scope, frame: _Frame) -> None:
        value = scope.lookup(node.path)
        if node.default is not None and (value is MISSING or value is None):
            value = node.default
        if value is MISSING:
            if self.strict_variables:
                raise UndefinedVariableError(node.path, frame.name)
            logger.debug(f"Undefined variable '{node.path}' in '{frame.name}' rendered as empty")
            return
        self._write(self._to_text(value, raw=node.raw))

    def _eval_json(self, node: JsonNode, scope: Scope, frame: _Frame) -> None:
        value = scope.lookup(node.path)
        if value is MISSING:
            if self.strict_variables:
                raise UndefinedVariableError(node.path, frame.name)
            value = None
        text = json.dumps(value, ensure_ascii=False, default=str)
        # <, >, & and ' can only occur inside JSON strings
        self._write(text.translate(_JSON_HTML_ESCAPES))

    def _to_text(self, value: Any, *, raw: bool) -> str:
        if value is None:
            return ""
        # Objects that render themselves as safe HTML (markupsafe protocol)
        if hasattr(value, "__html__"):
            return value.__html__()
        text = str(value)
        if raw or not self.autoescape:
            return text
        return html.escape(text, quote=True)

    def _eval_yield(self, node: YieldNode, scope: Scope, frame: _Frame) -> None:
        self._write(self.state.blocks.block(node.name, node.default))

    # ---- composition ----

    def _eval_extends(self, node: ExtendsNode, scope: Scope, frame: _Frame) -> None:
        logger.debug(f"'{frame.name}' extends '{node.name}'")
        self.state.extend(node.name)

    def _eval_include(self, node: IncludeNode, scope: Scope, frame: _Frame) -> None:
        includes = self.state.includes
        if len(includes) >= self.max_include_depth:
            raise ChainTooDeepError([frame.name, *includes, node.name], self.max_include_depth)

        template = self.processor.load(node.name)
        includes.append(node.name)
        try:
            self.evaluate(template, scope)
        finally:
            includes.pop()

    def _eval_section_start(self, node: SectionStartNode, scope: Scope, frame: _Frame) -> None:
        self.state.blocks.begin_block(node.name)

    def _eval_section_end(self, node: SectionEndNode, scope: Scope, frame: _Frame) -> None:
        blocks = self.state.blocks
        if blocks.depth <= frame.floor:
            raise BlockStackError(f"{{% {node.mode.value} %}} without matching {{% section %}}", frame.name)

        name = blocks.end_block(overwrite=node.mode is SectionEnd.OVERWRITE)
        if node.mode is SectionEnd.SHOW:
            self._write(blocks.block(name))

    # ---- control flow ----

    def _eval_conditional(self, node: ConditionalBlockNode, scope: Scope, frame: _Frame) -> None:
        evaluator = ConditionEvaluator(lambda path: scope.lookup(path, None))

        if evaluator.evaluate(node.condition):
            self._evaluate_nodes(node.body, scope, frame)
            return
        for elif_block in node.elif_blocks:
            if evaluator.evaluate(elif_block.condition):
                self._evaluate_nodes(elif_block.body, scope, frame)
                return
        if node.else_block is not None:
            self._evaluate_nodes(node.else_block.body, scope, frame)

    def _eval_for(self, node: ForBlockNode, scope: Scope, frame: _Frame) -> None:
        iterable = scope.lookup(node.iterable)
        if iterable is MISSING:
            if self.strict_variables:
                raise UndefinedVariableError(node.iterable, frame.name)
            iterable = None

        if iterable is None:
            items: List[Any] = []
        elif isinstance(iterable, (str, bytes)) or not isinstance(iterable, Iterable):
            raise TemplateProcessingError(
                f"'{node.iterable}' is not iterable ({type(iterable).__name__})", frame.name
            )
        elif isinstance(iterable, Mapping):
            items = list(iterable.keys())
        else:
            items = list(iterable)

        if not items:
            if node.else_block is not None:
                self._evaluate_nodes(node.else_block.body, scope, frame)
            return

        outer = scope.lookup("loop", None)
        parent = outer if isinstance(outer, LoopInfo) else None
        depth = parent.depth + 1 if parent is not None else 1
        count = len(items)

        for index, item in enumerate(items):
            loop = LoopInfo(
                index=index,
                iteration=index + 1,
                first=index == 0,
                last=index == count - 1,
                count=count,
                remaining=count - index - 1,
                depth=depth,
                parent=parent,
            )
            self._evaluate_nodes(node.body, scope.child({node.target: item, "loop": loop}), frame)


__all__ = ["TemplateEvaluator", "LoopInfo"]
