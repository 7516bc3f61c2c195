"""
Tagged results of statement execution.

Blocks stop at the first outcome that is not CONTINUE and hand it to their
caller; handlers (and the top-level program) absorb it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Union


class Continue:
    __slots__ = ()

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return "CONTINUE"


CONTINUE = Continue()


@dataclass
class Return:
    value: Any = None


@dataclass
class DelegateTo:
    agent: str
    args: Dict[str, Any] = field(default_factory=dict)


Outcome = Union[Continue, Return, DelegateTo]
