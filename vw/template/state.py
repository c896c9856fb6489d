"""
Per-render mutable state.

One RenderState is created for every top-level fetch() and dropped when it
returns, so nothing leaks between renders and one engine can serve several
renders at once.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List

from .blocks import BlockManager
from .capture import CaptureStack
from .scope import Scope


@dataclass
class RenderState:
    scope: Scope
    captures: CaptureStack
    blocks: BlockManager
    # Pending templates; extends appends to the back
    queue: Deque[str] = field(default_factory=deque)
    # Templates evaluated so far, in order
    chain: List[str] = field(default_factory=list)
    # Active include nesting
    includes: List[str] = field(default_factory=list)

    @classmethod
    def start(cls, root_name: str, scope: Scope) -> RenderState:
        captures = CaptureStack()
        return cls(
            scope=scope,
            captures=captures,
            blocks=BlockManager(captures),
            queue=deque([root_name]),
        )

    def extend(self, name: str) -> None:
        self.queue.append(name)


__all__ = ["RenderState"]
