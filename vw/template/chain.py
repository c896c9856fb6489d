"""
Inheritance chain resolution.

A render starts with a queue holding the requested view. Each view is
evaluated inside an implicit "content" block; {% extends %} appends its
ancestor to the queue. "content" is committed with overwrite, so the
final text is the literal output of the last (root-most) view, which
pulls descendant sections in by name.
"""

from __future__ import annotations

import logging

from .errors import BlockStackError, ChainTooDeepError
from .evaluator import TemplateEvaluator
from .processor import TemplateProcessor
from .scope import Scope
from .state import RenderState
from ..config.model import DEFAULT_MAX_CHAIN_DEPTH

logger = logging.getLogger(__name__)

CONTENT_BLOCK = "content"

class InheritanceChainResolver:
    """
    Drives the template queue of one render.
    """

    def __init__(
            self,
            processor: TemplateProcessor,
            *,
            max_chain_depth: int = DEFAULT_MAX_CHAIN_DEPTH,
            autoescape: bool = True,
            strict_variables: bool = False,
    ):
        self.processor = processor
        self.max_chain_depth = max_chain_depth
        self.autoescape = autoescape
        self.strict_variables = strict_variables

    def resolve(self, root_name: str, scope: Scope) -> str:
        """
        Renders root_name and its ancestors, returning the final text.

        Raises:
            TemplateNotFoundError: If a view in the chain does not exist
            ChainTooDeepError: If the chain exceeds max_chain_depth hops
            BlockStackError: If section directives are unbalanced
        """
        state = RenderState.start(root_name, scope)
        evaluator = TemplateEvaluator(
            self.processor,
            state,
            autoescape=self.autoescape,
            strict_variables=self.strict_variables,
            max_include_depth=self.max_chain_depth,
        )

        try:
            while state.queue:
                name = state.queue.popleft()
                state.chain.append(name)
                if len(state.chain) - 1 > self.max_chain_depth:
                    raise ChainTooDeepError(state.chain, self.max_chain_depth)

                template = self.processor.load(name)
                state.blocks.begin_block(CONTENT_BLOCK)
                evaluator.evaluate(template)
                state.blocks.end_block(overwrite=True)

            if state.blocks.depth:
                raise BlockStackError(
                    f"Block stack not empty after render: {', '.join(state.blocks.open_names)}",
                    root_name,
                )

            logger.debug(f"Rendered chain: {' -> '.join(state.chain)}")
            return state.blocks.block(CONTENT_BLOCK)
        finally:
            state.captures.discard_all()

__all__ = ["InheritanceChainResolver", "CONTENT_BLOCK"]
