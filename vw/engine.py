"""
Render entry point.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, List, Mapping, Optional, TextIO

from .config import ViewConfig, load_config
from .errors import VWUserError
from .paths import views_root
from .report_schema import CompiledView, CompileReport
from .template import InheritanceChainResolver, TemplateProcessor, TemplateResolver, bind

logger = logging.getLogger(__name__)


class ViewEngine:
    """
    Public API of the view engine.

    Holds configuration, the resolver and the parsed-template cache only.
    Every fetch() builds its own render state, so sequential and concurrent
    renders on one instance never see each other's blocks.
    """

    def __init__(self, config: ViewConfig, *, root: Optional[Path] = None, output: Optional[TextIO] = None):
        """
        Initialize engine.

        Args:
            config: Effective configuration
            root: Project root the views directory is relative to (cwd by default)
            output: Primary output stream for render() (sys.stdout by default)
        """
        self.config = config
        self.root = (root or Path.cwd()).resolve()
        self.output = output

        self.resolver = TemplateResolver(
            views_root(self.root, config.views_dir),
            config.extension,
            exclude=config.exclude,
        )
        self.processor = TemplateProcessor(self.resolver, cache_enabled=config.cache)
        self.chain = InheritanceChainResolver(
            self.processor,
            max_chain_depth=config.max_chain_depth,
            autoescape=config.autoescape,
            strict_variables=config.strict_variables,
        )

    def fetch(self, name: str, data: Optional[Mapping[str, Any]] = None) -> str:
        """
        Renders a view and returns the text.

        Raises:
            TemplateNotFoundError: If a view in the chain does not exist
            ChainTooDeepError: If the extends chain is too long or cyclic
            BlockStackError: If section directives are unbalanced
        """
        scope = bind(data)
        logger.debug(f"Fetching view '{name}'")
        return self.chain.resolve(name, scope)

    def render(self, name: str, data: Optional[Mapping[str, Any]] = None, return_only: bool = False) -> Optional[str]:
        """
        Renders a view; returns the text when return_only is set, otherwise
        writes it to the output stream and returns None.
        """
        text = self.fetch(name, data)
        if return_only:
            return text
        out = self.output if self.output is not None else sys.stdout
        out.write(text)
        return None

    def list_views(self) -> List[str]:
        return self.resolver.list_views()

    def compile_all(self) -> CompileReport:
        """
        Parses every view into the cache and reports per-view results.
        Parse and resolution failures are recorded, not raised.
        """
        views: List[CompiledView] = []
        for name in self.resolver.list_views():
            try:
                template = self.processor.load(name)
            except VWUserError as e:
                logger.debug(f"Compile failed for '{name}': {e}")
                views.append(CompiledView(name=name, ok=False, error=str(e)))
                continue
            views.append(CompiledView(name=name, ok=True, nodes=len(template.ast)))

        failed = sum(1 for v in views if not v.ok)
        return CompileReport(
            viewsRoot=str(self.resolver.views_root),
            total=len(views),
            failed=failed,
            views=views,
        )


def create_engine(root: Optional[Path] = None, *, output: Optional[TextIO] = None, **overrides: Any) -> ViewEngine:
    """
    Builds an engine from views.yaml under root (cwd by default).

    Keyword overrides replace individual ViewConfig fields.
    """
    root = (root or Path.cwd()).resolve()
    cfg = load_config(root)
    if overrides:
        unknown = sorted(set(overrides) - set(cfg.to_dict()))
        if unknown:
            raise ValueError(f"Unknown engine option(s): {', '.join(unknown)}")
        cfg = replace(cfg, **overrides)
    logger.debug(f"Engine config: {cfg.to_dict()}")
    return ViewEngine(cfg, root=root, output=output)


__all__ = ["ViewEngine", "create_engine"]
