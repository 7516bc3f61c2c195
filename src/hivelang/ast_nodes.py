"""
AST node definitions for the Hivelang bot scripting language.

Nodes are plain data. The parser builds them once; the interpreter only reads
them, so a parsed ``Program`` can be shared between runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass
class Span:
    """Location span for diagnostics."""

    line: int
    column: int


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


@dataclass
class Literal:
    """String, number, boolean or null literal."""

    value: Any
    raw: str = ""
    span: Optional[Span] = None


@dataclass
class Identifier:
    name: str
    span: Optional[Span] = None


@dataclass
class VariableAccess:
    """Dotted variable path such as user.profile.name."""

    parts: List[str] = field(default_factory=list)
    span: Optional[Span] = None


@dataclass
class MemberExpression:
    """obj.prop (computed=False) or obj[expr] (computed=True)."""

    object: "Expression"
    property: "Expression"
    computed: bool = False
    span: Optional[Span] = None


@dataclass
class ArrayLiteral:
    elements: List["Expression"] = field(default_factory=list)
    span: Optional[Span] = None


@dataclass
class ObjectLiteral:
    properties: Dict[str, "Expression"] = field(default_factory=dict)
    span: Optional[Span] = None


@dataclass
class BinaryExpression:
    operator: str
    left: "Expression"
    right: "Expression"
    span: Optional[Span] = None


@dataclass
class FString:
    """
    f"..." template. ``parts`` holds literal text and interpolation spans in
    source order; ``template`` keeps the raw text for tooling.
    """

    template: str
    parts: List[Union[str, "FStringSpan"]] = field(default_factory=list)
    span: Optional[Span] = None


@dataclass
class FStringSpan:
    """An interpolation span inside an f-string."""

    source: str
    expression: "Expression"


Expression = Union[
    Literal,
    Identifier,
    VariableAccess,
    MemberExpression,
    ArrayLiteral,
    ObjectLiteral,
    BinaryExpression,
    FString,
]


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------


@dataclass
class Block:
    statements: List["Statement"] = field(default_factory=list)
    span: Optional[Span] = None


@dataclass
class IfStatement:
    """if/elif/else chain. ``alternate`` is another IfStatement for elif."""

    condition: Expression
    consequent: Block
    alternate: Optional[Union["IfStatement", Block]] = None
    span: Optional[Span] = None


@dataclass
class CallStatement:
    """call tool.name with {...} as result"""

    tool: str
    arguments: Dict[str, Expression] = field(default_factory=dict)
    output_variable: Optional[str] = None
    span: Optional[Span] = None


@dataclass
class Assignment:
    variable: str
    value: Expression
    span: Optional[Span] = None


@dataclass
class SayStatement:
    message: Expression
    span: Optional[Span] = None


@dataclass
class DelegateStatement:
    target_agent: str
    params: Dict[str, Expression] = field(default_factory=dict)
    span: Optional[Span] = None


@dataclass
class ReturnStatement:
    value: Expression
    span: Optional[Span] = None


@dataclass
class ParallelBlock:
    statements: List["Statement"] = field(default_factory=list)
    span: Optional[Span] = None


@dataclass
class LoopStatement:
    """loop item in items"""

    variable: str
    iterable: Expression
    body: Block
    span: Optional[Span] = None


Statement = Union[
    IfStatement,
    CallStatement,
    Assignment,
    SayStatement,
    DelegateStatement,
    ReturnStatement,
    ParallelBlock,
    LoopStatement,
]


# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------


@dataclass
class OnInputHandler:
    """on input [when <expr>]. No condition means the handler always runs."""

    body: Block
    condition: Optional[Expression] = None
    span: Optional[Span] = None


@dataclass
class OnEventHandler:
    """on event "name\""""

    event: str
    body: Block
    span: Optional[Span] = None


Handler = Union[OnInputHandler, OnEventHandler]


@dataclass
class AgentDefinition:
    name: str
    description: Optional[str] = None
    body: List[Handler] = field(default_factory=list)
    span: Optional[Span] = None


@dataclass
class BotDefinition:
    name: str
    description: Optional[str] = None
    body: List[Union[AgentDefinition, OnInputHandler, OnEventHandler, Statement]] = field(default_factory=list)
    span: Optional[Span] = None


@dataclass
class Program:
    """Top-level program comprising bot definitions and bare statements."""

    body: List[Union[BotDefinition, Statement]] = field(default_factory=list)

    @property
    def bots(self) -> List[BotDefinition]:
        return [node for node in self.body if isinstance(node, BotDefinition)]
