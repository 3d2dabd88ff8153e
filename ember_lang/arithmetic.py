"""Precedence-climbing parser for arithmetic expressions.

Each call parses one prefix operand and then keeps folding infix operators
whose precedence is strictly greater than the threshold it was given. The
right-hand side of an operator is parsed with that operator's own
precedence as the threshold, so operators of equal precedence group to the
left: ``2 ** 3 ** 2`` is ``pow(pow(2, 3), 2)``.
"""

from typing import TYPE_CHECKING

from . import tokens as tk
from .exceptions import ParseError, SemanticError
from .nodes import (
    ADD,
    DIV,
    MUL,
    POW,
    SUB,
    ArithmeticNode,
    BinaryNode,
    CallLeaf,
    NameLeaf,
    Negative,
    NumberLeaf,
    Positive,
)
from .symbols import INT

if TYPE_CHECKING:
    from .parser import Parser


MIN = 0
TERM = 1
FACTOR = 2
POWER = 3

PRECEDENCE = {
    tk.PLUS: TERM,
    tk.MINUS: TERM,
    tk.STAR: FACTOR,
    tk.SLASH: FACTOR,
    tk.POW: POWER,
}

INFIX_KINDS = {
    tk.PLUS: ADD,
    tk.MINUS: SUB,
    tk.STAR: MUL,
    tk.SLASH: DIV,
    tk.POW: POW,
}


def precedence_of(kind) -> int:
    return PRECEDENCE.get(kind, MIN)


class ArithmeticParser:
    def __init__(self, parser: "Parser"):
        self.parser = parser
        self.cursor = parser.cursor

    def parse(self) -> ArithmeticNode:
        return self._parse_expression(MIN)

    def _parse_expression(self, threshold: int) -> ArithmeticNode:
        left = self._parse_prefix()
        while True:
            operator = self.cursor.peek_kind(0)
            precedence = precedence_of(operator)
            if precedence == MIN or precedence <= threshold:
                return left
            self.cursor.advance()
            right = self._parse_expression(precedence)
            left = BinaryNode(INFIX_KINDS[operator], left, right)

    def _parse_prefix(self) -> ArithmeticNode:
        token = self.cursor.current()
        if token.kind == tk.NUMBER:
            self.cursor.advance()
            try:
                return NumberLeaf(int(token.value))
            except ValueError:
                raise SemanticError(
                    "number is too large", token.line, token.column
                ) from None
        if token.kind == tk.NAME:
            if self.cursor.peek_kind(1) == tk.LPAR:
                return self._parse_call_operand()
            self.cursor.advance()
            return NameLeaf(token.value)
        if token.kind == tk.LPAR:
            self.cursor.advance()
            inner = self._parse_expression(MIN)
            closing = self.cursor.current()
            if closing.kind != tk.RPAR:
                raise ParseError(
                    f"expected ')', found {closing.describe()}", closing.line, closing.column
                )
            self.cursor.advance()
            return inner
        if token.kind == tk.PLUS:
            self.cursor.advance()
            return Positive(self._parse_prefix())
        if token.kind == tk.MINUS:
            self.cursor.advance()
            return Negative(self._parse_prefix())
        raise ParseError(
            f"expected an operand, found {token.describe()}", token.line, token.column
        )

    def _parse_call_operand(self) -> CallLeaf:
        name_token = self.cursor.current()
        call = self.parser._parse_call()
        signature = self.parser.symbols.lookup(call.name)
        if signature.return_type != INT:
            raise SemanticError(
                f"cannot use function '{call.name}' with return type "
                f"{signature.return_type} in an arithmetic expression",
                name_token.line,
                name_token.column,
            )
        return CallLeaf(call)
