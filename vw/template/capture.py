"""
Output capture: a stack of in-memory diversions.

Text written while a capture is open lands in the innermost capture's
buffer; closing a capture returns its text and restores the previous
destination.
"""

from __future__ import annotations

import io
from contextlib import contextmanager
from typing import Iterator, List, Optional, TextIO

from .errors import CaptureError


class Capture:
    """Handle of one open diversion."""

    __slots__ = ("depth", "_buffer", "closed", "text")

    def __init__(self, depth: int):
        self.depth = depth
        self._buffer = io.StringIO()
        self.closed = False
        # Filled in by CaptureStack.close()
        self.text = ""

    def write(self, text: str) -> None:
        self._buffer.write(text)

    def getvalue(self) -> str:
        return self._buffer.getvalue()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"Capture(depth={self.depth}, {state})"


class CaptureStack:
    """
    Stack of captures with one primary sink underneath.

    The sink is optional: without one, writing while nothing is captured is
    an error rather than a silent leak.
    """

    def __init__(self, sink: Optional[TextIO] = None):
        self.sink = sink
        self._stack: List[Capture] = []

    @property
    def depth(self) -> int:
        return len(self._stack)

    def open(self) -> Capture:
        handle = Capture(depth=len(self._stack) + 1)
        self._stack.append(handle)
        return handle

    def close(self, handle: Capture) -> str:
        """
        Closes the innermost capture and returns its text.

        Raises:
            CaptureError: If handle is not the innermost open capture
        """
        if handle.closed:
            raise CaptureError(f"{handle!r} is already closed")
        if not self._stack or self._stack[-1] is not handle:
            raise CaptureError(
                f"{handle!r} closed out of order (innermost is depth {len(self._stack)})"
            )
        self._stack.pop()
        handle.closed = True
        handle.text = handle.getvalue()
        return handle.text

    def write(self, text: str) -> None:
        if not text:
            return
        if self._stack:
            self._stack[-1].write(text)
        elif self.sink is not None:
            self.sink.write(text)
        else:
            raise CaptureError("Output written with no open capture and no sink")

    @contextmanager
    def captured(self) -> Iterator[Capture]:
        """
        Scoped capture; the diversion is released on exit even on errors.
        The captured text is available as handle.text after the block.
        """
        handle = self.open()
        try:
            yield handle
        finally:
            if not handle.closed:
                # Anything opened inside and left open is dropped with it
                while self._stack and self._stack[-1] is not handle:
                    self._stack.pop().closed = True
                self.close(handle)

    def discard_all(self) -> None:
        """Drops every open capture (error-path cleanup)."""
        while self._stack:
            self._stack.pop().closed = True


__all__ = ["Capture", "CaptureStack"]
