"""
Registry for host tools.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

# fn(args, context) -> result; may be sync or async.
HostTool = Callable[[Dict[str, Any], Any], Union[Any, Awaitable[Any]]]


class ToolTable:
    """
    Name -> host tool map plus an optional catch-all fallback.

    Dispatch asks `try_registered(name)` first and only then consults
    `fallback`, which receives the tool name merged into its arguments.
    """

    def __init__(self) -> None:
        self._tools: Dict[str, HostTool] = {}
        self._fallback: Optional[HostTool] = None

    def register(self, name: str, fn: HostTool) -> None:
        if not name:
            raise ValueError("Tool name must be a non-empty string")
        if not callable(fn):
            raise TypeError(f"Tool '{name}' must be callable")
        self._tools[name] = fn

    def unregister(self, name: str) -> None:
        self._tools.pop(name, None)

    def try_registered(self, name: str) -> Optional[HostTool]:
        return self._tools.get(name)

    @property
    def fallback(self) -> Optional[HostTool]:
        return self._fallback

    def set_fallback(self, fn: Optional[HostTool]) -> None:
        if fn is not None and not callable(fn):
            raise TypeError("Fallback tool handler must be callable")
        self._fallback = fn

    @property
    def tools(self) -> Dict[str, HostTool]:
        """Expose registered tools for inspection/testing."""
        return self._tools

    def list_names(self) -> List[str]:
        return list(self._tools.keys())
