"""
Path utilities for view-weaver.

Single source of truth for the project layout conventions.
"""

from __future__ import annotations

from pathlib import Path

# Project configuration file (optional)
CONFIG_FILE = "views.yaml"

# Defaults used when views.yaml does not override them
DEFAULT_VIEWS_DIR = "resources/views"
DEFAULT_EXTENSION = ".tpl.html"


def config_path(root: Path) -> Path:
    """Absolute path to views.yaml."""
    return (root / CONFIG_FILE).resolve()


def views_root(root: Path, views_dir: str) -> Path:
    """Absolute path to the views directory (views_dir may be absolute)."""
    p = Path(views_dir)
    if not p.is_absolute():
        p = root / p
    return p.resolve()


__all__ = ["CONFIG_FILE", "DEFAULT_VIEWS_DIR", "DEFAULT_EXTENSION", "config_path", "views_root"]
