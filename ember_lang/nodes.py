"""Syntax tree for Ember programs.

Statements and expressions are closed sets of frozen dataclasses. Consumers
dispatch on the variant class with isinstance instead of asking a node for
its kind.
"""

from dataclasses import dataclass
from typing import Tuple, Union

from .symbols import FunctionArgument


# --- Arithmetic trees ---

ADD = "add"
SUB = "sub"
MUL = "mul"
DIV = "div"
POW = "pow"


@dataclass(frozen=True)
class NumberLeaf:
    value: int


@dataclass(frozen=True)
class NameLeaf:
    name: str


@dataclass(frozen=True)
class CallLeaf:
    call: "FunctionCall"


@dataclass(frozen=True)
class Positive:
    operand: "ArithmeticNode"


@dataclass(frozen=True)
class Negative:
    operand: "ArithmeticNode"


@dataclass(frozen=True)
class BinaryNode:
    kind: str
    left: "ArithmeticNode"
    right: "ArithmeticNode"


ArithmeticNode = Union[NumberLeaf, NameLeaf, CallLeaf, Positive, Negative, BinaryNode]
ARITHMETIC_NODES = (NumberLeaf, NameLeaf, CallLeaf, Positive, Negative, BinaryNode)


# --- Expressions ---

@dataclass(frozen=True)
class Identifier:
    name: str


@dataclass(frozen=True)
class FunctionCall:
    name: str
    arguments: Tuple["Expression", ...] = ()


Expression = Union[Identifier, FunctionCall, ArithmeticNode]


# --- Statements ---

@dataclass(frozen=True)
class Return:
    value: Expression


@dataclass(frozen=True)
class VarDecl:
    name: str
    type_name: str
    value: Expression


@dataclass(frozen=True)
class VarReassign:
    name: str
    value: Expression


@dataclass(frozen=True)
class AddAssign:
    name: str
    value: Expression


@dataclass(frozen=True)
class FunctionDef:
    name: str
    arguments: Tuple[FunctionArgument, ...]
    return_type: str
    body: Tuple["Statement", ...]


Statement = Union[Return, VarDecl, VarReassign, AddAssign, FunctionDef, FunctionCall]


@dataclass(frozen=True)
class Program:
    statements: Tuple[Statement, ...]


def dump(node) -> str:
    """Render an expression as nested calls, e.g. ``add(1, mul(2, 3))``."""
    if isinstance(node, NumberLeaf):
        return str(node.value)
    if isinstance(node, (NameLeaf, Identifier)):
        return node.name
    if isinstance(node, CallLeaf):
        return dump(node.call)
    if isinstance(node, FunctionCall):
        return f"{node.name}({', '.join(dump(a) for a in node.arguments)})"
    if isinstance(node, Positive):
        return f"positive({dump(node.operand)})"
    if isinstance(node, Negative):
        return f"negative({dump(node.operand)})"
    if isinstance(node, BinaryNode):
        return f"{node.kind}({dump(node.left)}, {dump(node.right)})"
    raise TypeError(f"not an expression node: {node!r}")
