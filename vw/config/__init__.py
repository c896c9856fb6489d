from __future__ import annotations

from .load import load_config
from .model import ViewConfig, DEFAULT_MAX_CHAIN_DEPTH

__all__ = ["ViewConfig", "DEFAULT_MAX_CHAIN_DEPTH", "load_config"]
