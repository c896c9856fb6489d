"""
Loading and parsing of view files.

Parsed ASTs are cached per file and reused while the file's modification
time and size are unchanged.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Tuple

from .errors import TemplateProcessingError
from .lexer import TemplateLexer
from .nodes import TemplateAST
from .parser import TemplateParser
from .resolver import TemplateResolver
from .tokens import LexerError, ParserError

logger = logging.getLogger(__name__)

# (st_mtime_ns, st_size)
FileStamp = Tuple[int, int]


@dataclass(frozen=True)
class LoadedTemplate:
    """A resolved and parsed view."""
    name: str
    path: Path
    ast: TemplateAST


class TemplateProcessor:
    """
    Resolves, reads and parses views, with an in-memory AST cache.
    """

    def __init__(self, resolver: TemplateResolver, *, cache_enabled: bool = True):
        self.resolver = resolver
        self.cache_enabled = cache_enabled
        self._template_cache: Dict[Path, Tuple[FileStamp, TemplateAST]] = {}
        self._lock = threading.Lock()

    def load(self, name: str) -> LoadedTemplate:
        """
        Resolves and parses a view.

        Raises:
            TemplateNotFoundError: If the view does not exist
            TemplateProcessingError: If the view has a syntax error
        """
        path = self.resolver.resolve(name)
        stamp = _stamp(path)

        if self.cache_enabled:
            with self._lock:
                cached = self._template_cache.get(path)
            if cached is not None and cached[0] == stamp:
                return LoadedTemplate(name=name, path=path, ast=cached[1])

        ast = self.parse_text(path.read_text(encoding="utf-8"), name)

        if self.cache_enabled:
            with self._lock:
                self._template_cache[path] = (stamp, ast)

        return LoadedTemplate(name=name, path=path, ast=ast)

    def parse_text(self, template_text: str, template_name: str = "") -> TemplateAST:
        """
        Parses template source into an AST.

        Raises:
            TemplateProcessingError: On a lexical or syntax error (cause attached)
        """
        try:
            tokens = TemplateLexer(template_text).tokenize()
            ast = TemplateParser(tokens).parse()
        except (LexerError, ParserError) as e:
            raise TemplateProcessingError(f"Failed to parse template: {e}", template_name, e)

        logger.debug(f"Parsed template '{template_name}' -> {len(ast)} nodes")
        return ast

    def clear_cache(self) -> None:
        with self._lock:
            self._template_cache.clear()

    @property
    def cached_count(self) -> int:
        return len(self._template_cache)


def _stamp(path: Path) -> FileStamp:
    st = path.stat()
    return st.st_mtime_ns, st.st_size


__all__ = ["TemplateProcessor", "LoadedTemplate"]
