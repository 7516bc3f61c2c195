"""Pydantic schemas returned to callers of the interpreter."""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class ToolCallTrace(BaseModel):
    tool: str
    args: Dict[str, Any] = Field(default_factory=dict)
    is_fallback: bool = False


class ExecutionResult(BaseModel):
    """Best-effort outcome of one run or event emission."""

    variables: Dict[str, Any] = Field(default_factory=dict)
    output: List[Any] = Field(default_factory=list, description="Values produced by `say`, in order")
    errors: List[str] = Field(default_factory=list)
    tool_calls: List[ToolCallTrace] = Field(default_factory=list)
    return_value: Any = None

    @property
    def ok(self) -> bool:
        return not self.errors
