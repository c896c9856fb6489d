# JSON report models printed by the CLI.

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CompiledView(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    ok: bool
    nodes: Optional[int] = Field(None, description="Top-level AST nodes of the parsed view")
    error: Optional[str] = None


class CompileReport(BaseModel):
    model_config = ConfigDict(extra="forbid")

    viewsRoot: str
    total: int
    failed: int
    views: List[CompiledView]


class ViewList(BaseModel):
    model_config = ConfigDict(extra="forbid")

    views: List[str]


__all__ = ["CompiledView", "CompileReport", "ViewList"]
