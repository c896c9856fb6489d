from __future__ import annotations

import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .model import ViewConfig, _as_depth
from ..errors import ConfigError
from ..paths import config_path

logger = logging.getLogger(__name__)

_yaml = YAML(typ="safe")

_FALSY = {"0", "false", "no", "off", ""}


def _read_yaml_map(path: Path) -> dict:
    """Reads a YAML file that must contain a mapping (missing file → {})."""
    if not path.is_file():
        return {}
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}")
    if not isinstance(raw, dict):
        raise ConfigError(f"YAML must be a mapping: {path}")
    return raw


def _apply_env(cfg: ViewConfig, env: Mapping[str, str]) -> ViewConfig:
    """Environment overrides (VW_VIEWS_DIR, VW_CACHE, VW_MAX_CHAIN_DEPTH)."""
    updates: Dict[str, Any] = {}

    views_dir = env.get("VW_VIEWS_DIR")
    if views_dir:
        updates["views_dir"] = views_dir

    cache = env.get("VW_CACHE")
    if cache is not None:
        updates["cache"] = cache.strip().lower() not in _FALSY

    depth = env.get("VW_MAX_CHAIN_DEPTH")
    if depth:
        updates["max_chain_depth"] = _as_depth(depth.strip(), "VW_MAX_CHAIN_DEPTH")

    if updates:
        logger.debug(f"Config overrides from environment: {sorted(updates)}")
        cfg = replace(cfg, **updates)
    return cfg


def load_config(root: Path, *, env: Optional[Mapping[str, str]] = None) -> ViewConfig:
    """
    Load views.yaml from the project root.

    A missing file yields defaults. Environment variables override file values.

    Args:
        root: Project root path
        env: Environment mapping (defaults to os.environ)

    Returns:
        Effective ViewConfig
    """
    path = config_path(root)
    raw = _read_yaml_map(path)
    cfg = ViewConfig.from_dict(raw)
    if raw:
        logger.debug(f"Loaded config from {path}")
    return _apply_env(cfg, os.environ if env is None else env)


__all__ = ["load_config"]
