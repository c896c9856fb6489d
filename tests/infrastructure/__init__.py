"""
Shared helpers for the test suite.
"""

from .cli_utils import jload, run_cli
from .file_utils import write
from .view_builders import make_engine, write_config, write_views

__all__ = ["write", "write_views", "write_config", "make_engine", "run_cli", "jload"]
