"""
Resolution of logical view names to files under the views root.

"layouts.app" -> <views_root>/layouts/app<extension>
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence

import pathspec

from .errors import TemplateNotFoundError

logger = logging.getLogger(__name__)


class TemplateResolver:
    """
    Maps dot-delimited view names to template files.

    Both '.' and '/' act as directory separators; a leading '/' is ignored.
    """

    def __init__(self, views_root: Path, extension: str, *, exclude: Sequence[str] = ()):
        self.views_root = Path(views_root)
        self.extension = extension
        self._exclude: Optional[pathspec.PathSpec] = (
            pathspec.PathSpec.from_lines("gitwildmatch", list(exclude)) if exclude else None
        )

    def split_name(self, name: str) -> List[str]:
        """
        Splits a logical name into path segments.

        Raises:
            TemplateNotFoundError: For empty names or empty segments ("a..b")
        """
        cleaned = name.strip().lstrip("/")
        if not cleaned:
            raise TemplateNotFoundError(name, reason="empty view name")
        segments = cleaned.replace("/", ".").split(".")
        if any(not seg for seg in segments):
            raise TemplateNotFoundError(name, reason="empty path segment")
        return segments

    def resolve(self, name: str) -> Path:
        """
        Logical name -> existing template file.

        Raises:
            TemplateNotFoundError: If the name is malformed or no file exists
        """
        segments = self.split_name(name)
        path = self.views_root.joinpath(*segments[:-1], segments[-1] + self.extension)
        if not path.is_file():
            raise TemplateNotFoundError(name, path)
        return path

    def load(self, name: str) -> str:
        """Reads the template source of a view."""
        path = self.resolve(name)
        return path.read_text(encoding="utf-8")

    def name_for(self, path: Path) -> str:
        """Template file -> logical dotted name."""
        rel = path.relative_to(self.views_root).as_posix()
        return rel[: -len(self.extension)].replace("/", ".")

    def list_views(self) -> List[str]:
        """
        All views under the root as logical names, sorted.

        Files matching the exclude patterns are skipped.
        """
        if not self.views_root.is_dir():
            logger.debug(f"Views root does not exist: {self.views_root}")
            return []

        names: List[str] = []
        for path in self.views_root.rglob("*" + self.extension):
            if not path.is_file():
                continue
            rel = path.relative_to(self.views_root).as_posix()
            if self._exclude is not None and self._exclude.match_file(rel):
                continue
            names.append(self.name_for(path))
        return sorted(names)


__all__ = ["TemplateResolver"]
