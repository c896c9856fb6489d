"""
Configuration model for the view engine.

Loaded from views.yaml (see load.py); every key is optional.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List

from ..errors import ConfigError
from ..paths import DEFAULT_EXTENSION, DEFAULT_VIEWS_DIR

DEFAULT_MAX_CHAIN_DEPTH = 32


@dataclass(frozen=True)
class ViewConfig:
    """
    Settings of one ViewEngine instance.

    views_dir         – views root, relative to the project root or absolute
    extension         – suffix appended to every resolved view name
    max_chain_depth   – maximum number of extends hops in one render
    autoescape        – HTML-escape ${...} output (${raw:...} is never escaped)
    strict_variables  – raise on undefined variables instead of rendering ""
    cache             – keep parsed templates in memory (invalidated by mtime)
    exclude           – gitignore-style patterns hidden from list/compile
    """
    views_dir: str = DEFAULT_VIEWS_DIR
    extension: str = DEFAULT_EXTENSION
    max_chain_depth: int = DEFAULT_MAX_CHAIN_DEPTH
    autoescape: bool = True
    strict_variables: bool = False
    cache: bool = True
    exclude: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ViewConfig:
        """Build from a YAML mapping, validating types of known keys."""
        known = {"views_dir", "extension", "max_chain_depth", "autoescape",
                 "strict_variables", "cache", "exclude"}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config key(s): {', '.join(unknown)}")

        cfg = cls()
        updates: Dict[str, Any] = {}
        for key in ("views_dir", "extension"):
            if key in data:
                value = data[key]
                if not isinstance(value, str) or not value.strip():
                    raise ConfigError(f"{key}: expected non-empty string, got {value!r}")
                updates[key] = value.strip()

        if "max_chain_depth" in data:
            updates["max_chain_depth"] = _as_depth(data["max_chain_depth"], "max_chain_depth")

        for key in ("autoescape", "strict_variables", "cache"):
            if key in data:
                value = data[key]
                if not isinstance(value, bool):
                    raise ConfigError(f"{key}: expected boolean, got {value!r}")
                updates[key] = value

        if "exclude" in data:
            value = data["exclude"] or []
            if not isinstance(value, list) or not all(isinstance(p, str) for p in value):
                raise ConfigError(f"exclude: expected list of strings, got {value!r}")
            updates["exclude"] = list(value)

        ext = updates.get("extension")
        if ext is not None and not ext.startswith("."):
            updates["extension"] = "." + ext

        return replace(cfg, **updates)

    def to_dict(self) -> Dict[str, Any]:
        """Serialization back to a YAML-friendly mapping."""
        return {
            "views_dir": self.views_dir,
            "extension": self.extension,
            "max_chain_depth": self.max_chain_depth,
            "autoescape": self.autoescape,
            "strict_variables": self.strict_variables,
            "cache": self.cache,
            "exclude": list(self.exclude),
        }


def _as_depth(value: Any, key: str) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool):
        raise ConfigError(f"{key}: expected positive integer, got {value!r}")
    try:
        depth = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{key}: expected positive integer, got {value!r}")
    if depth < 1:
        raise ConfigError(f"{key}: expected positive integer, got {value!r}")
    return depth


__all__ = ["ViewConfig", "DEFAULT_MAX_CHAIN_DEPTH"]
