from __future__ import annotations

import logging
import os

_LOG = logging.getLogger("vw")


def setup_logging(verbose: bool = False) -> None:
    """
    One stderr handler on the "vw" logger.
    DEBUG when verbose or VW_DEBUG is set, WARNING otherwise.
    """
    level = logging.DEBUG if verbose or os.environ.get("VW_DEBUG") else logging.WARNING
    _LOG.setLevel(level)
    if getattr(setup_logging, "_inited", False):
        return
    setup_logging._inited = True  # type: ignore[attr-defined]
    if not _LOG.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        _LOG.addHandler(h)


__all__ = ["setup_logging"]
