"""
Named block captures and the committed block map of one render.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping

from .capture import Capture, CaptureStack
from .errors import BlockStackError


@dataclass(frozen=True)
class BlockFrame:
    """An open block: its name and the capture collecting its text."""
    name: str
    capture: Capture


class BlockManager:
    """
    LIFO of open blocks plus the name -> content map they commit into.

    end_block(overwrite=True) replaces a committed block; with
    overwrite=False the new text is appended to an existing entry.
    """

    def __init__(self, captures: CaptureStack):
        self.captures = captures
        self._stack: List[BlockFrame] = []
        self._blocks: Dict[str, str] = {}

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def open_names(self) -> List[str]:
        """Names of open blocks, outermost first."""
        return [frame.name for frame in self._stack]

    @property
    def committed(self) -> Mapping[str, str]:
        return MappingProxyType(self._blocks)

    def begin_block(self, name: str) -> None:
        self._stack.append(BlockFrame(name=name, capture=self.captures.open()))

    def end_block(self, overwrite: bool = False) -> str:
        """
        Closes the innermost block and commits its text.

        Returns:
            Name of the closed block

        Raises:
            BlockStackError: If no block is open
        """
        if not self._stack:
            raise BlockStackError("end_block() called with no open block")

        frame = self._stack.pop()
        text = self.captures.close(frame.capture)

        if overwrite or frame.name not in self._blocks:
            self._blocks[frame.name] = text
        else:
            self._blocks[frame.name] += text

        return frame.name

    def block(self, name: str, default: str = "") -> str:
        return self._blocks.get(name, default)


__all__ = ["BlockFrame", "BlockManager"]
