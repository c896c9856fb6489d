"""
Mail body rendering on top of the view engine.

A message either names a view, rendered with its data through
ViewEngine.fetch, or carries bare data that is serialised to JSON as the
body.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

from .engine import ViewEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MailContent:
    """Body source of a message."""
    view: Optional[str] = None
    data: Any = None


def render_mail_body(engine: ViewEngine, content: MailContent) -> str:
    """
    Renders the body of a message.

    Without a view the data is serialised to JSON; anything other than a
    list or mapping is wrapped in a list first. With a view, non-mapping
    data is exposed to the template as `data`.
    """
    if not content.view:
        data = content.data
        if not isinstance(data, (list, Mapping)):
            data = [data]
        logger.debug("Mail body without a view: serialising data to JSON")
        return json.dumps(data, ensure_ascii=False, default=str)

    data = content.data
    if data is None:
        bound: Mapping[str, Any] = {}
    elif isinstance(data, Mapping):
        bound = data
    else:
        bound = {"data": data}
    return engine.fetch(content.view, bound)


class Mailable(ABC):
    """
    Base class for application messages.

    Subclasses override content() and usually subject().
    """

    def subject(self) -> str:
        return ""

    @abstractmethod
    def content(self) -> MailContent:
        pass

    def render_body(self, engine: ViewEngine) -> str:
        return render_mail_body(engine, self.content())


__all__ = ["MailContent", "Mailable", "render_mail_body"]
