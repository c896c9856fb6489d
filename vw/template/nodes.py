"""
Template AST nodes.

Immutable node classes produced by the parser and interpreted by the
evaluator. Section directives are flat nodes (begin/end markers) so that a
section may open and close in different branches, exactly like the block
stack they drive.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional

from ..conditions import Condition


@dataclass(frozen=True)
class TemplateNode:
    """Base class of all template AST nodes."""
    pass


@dataclass(frozen=True)
class TextNode(TemplateNode):
    """Literal text, emitted as is."""
    text: str


@dataclass(frozen=True)
class CommentNode(TemplateNode):
    """{# ... #}; emits nothing."""
    text: str


@dataclass(frozen=True)
class VariableNode(TemplateNode):
    """
    ${path}, ${raw:path} or ${path or "fallback"}.

    raw=True disables HTML escaping regardless of the autoescape setting.
    default replaces undefined and None values.
    """
    path: str
    raw: bool = False
    default: Optional[str] = None


@dataclass(frozen=True)
class JsonNode(TemplateNode):
    """${json:path}: the value as JSON, safe inside HTML and <script>."""
    path: str


@dataclass(frozen=True)
class YieldNode(TemplateNode):
    """${yield:name} / {% yield name "default" %}: reads a committed block."""
    name: str
    default: str = ""


@dataclass(frozen=True)
class ExtendsNode(TemplateNode):
    """{% extends name %}: appends an ancestor to the template queue."""
    name: str


@dataclass(frozen=True)
class IncludeNode(TemplateNode):
    """{% include name %}: evaluates another template inline."""
    name: str


@dataclass(frozen=True)
class SectionStartNode(TemplateNode):
    """{% section name %}: opens a block capture."""
    name: str


class SectionEnd(enum.Enum):
    """How a {% section %} is closed."""
    APPEND = "append"         # {% endsection %}, {% stop %}, {% append %}
    OVERWRITE = "overwrite"   # {% overwrite %}
    SHOW = "show"             # {% show %}: close, then emit the block


@dataclass(frozen=True)
class SectionEndNode(TemplateNode):
    """Closes the innermost open section."""
    mode: SectionEnd = SectionEnd.APPEND


@dataclass(frozen=True)
class ElifBlockNode(TemplateNode):
    """{% elif condition %} branch."""
    condition_text: str
    condition: Condition
    body: List[TemplateNode] = field(default_factory=list)


@dataclass(frozen=True)
class ElseBlockNode(TemplateNode):
    """{% else %} branch of an if or for block."""
    body: List[TemplateNode] = field(default_factory=list)


@dataclass(frozen=True)
class ConditionalBlockNode(TemplateNode):
    """{% if %} ... {% elif %} ... {% else %} ... {% endif %}"""
    condition_text: str
    condition: Condition
    body: List[TemplateNode] = field(default_factory=list)
    elif_blocks: List[ElifBlockNode] = field(default_factory=list)
    else_block: Optional[ElseBlockNode] = None


@dataclass(frozen=True)
class ForBlockNode(TemplateNode):
    """
    {% for target in iterable %} ... {% else %} ... {% endfor %}

    The else branch runs when the iterable is empty.
    """
    target: str
    iterable: str
    body: List[TemplateNode] = field(default_factory=list)
    else_block: Optional[ElseBlockNode] = None


# AST alias
TemplateAST = List[TemplateNode]


__all__ = [
    "TemplateNode",
    "TextNode",
    "CommentNode",
    "VariableNode",
    "YieldNode",
    "ExtendsNode",
    "IncludeNode",
    "SectionStartNode",
    "SectionEnd",
    "SectionEndNode",
    "ElifBlockNode",
    "ElseBlockNode",
    "ConditionalBlockNode",
    "ForBlockNode",
    "TemplateAST",
]
