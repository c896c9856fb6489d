from __future__ import annotations

from ..errors import VWUserError


class ConditionParseError(VWUserError):
    """Syntax error in a condition expression."""

    def __init__(self, message: str, position: int):
        self.message = message
        self.position = position
        super().__init__(f"Condition parse error at position {position}: {message}")


__all__ = ["ConditionParseError"]
