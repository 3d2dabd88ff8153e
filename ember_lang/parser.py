import logging
from typing import List, Optional, Sequence, Set

from . import tokens as tk
from .arithmetic import ArithmeticParser
from .cursor import TokenCursor
from .exceptions import ParseError, SemanticError
from .nodes import (
    AddAssign,
    Expression,
    FunctionCall,
    FunctionDef,
    Identifier,
    Program,
    Return,
    Statement,
    VarDecl,
    VarReassign,
)
from .symbols import VOID, FunctionArgument, FunctionSignature, SymbolTable
from .tokens import Token
from .types import TypeCanon

logger = logging.getLogger(__name__)

ARITHMETIC_STARTS = frozenset({tk.NUMBER, tk.PLUS, tk.MINUS, tk.LPAR})


class Parser:
    """Recursive-descent parser producing one ``Program`` per token stream.

    Function signatures are registered in ``symbols`` as soon as each
    definition has been parsed.
    """

    def __init__(self, tokens: Sequence[Token], symbols: Optional[SymbolTable] = None):
        self.cursor = TokenCursor(tokens)
        self.symbols = symbols if symbols is not None else SymbolTable()
        # Names declared in the function body being parsed; None at top level.
        self._declared: Optional[Set[str]] = None

    # --- Program & statements ---

    def parse_program(self) -> Program:
        statements: List[Statement] = []
        while not self.cursor.exhausted():
            statements.append(self.parse_statement())
        return Program(tuple(statements))

    def parse_statement(self) -> Statement:
        token = self.cursor.current()
        if token.kind == tk.RETURN:
            self.cursor.advance()
            return self._parse_return()
        if token.kind == tk.LET:
            self.cursor.advance()
            return self._parse_var_decl()
        if token.kind == tk.FUN:
            if self._declared is not None:
                raise self._semantic(
                    "cannot define function inside another function", token
                )
            self.cursor.advance()
            return self._parse_function_def()
        if token.kind == tk.NAME:
            following = self.cursor.peek_kind(1)
            if following == tk.ASSIGN:
                self.cursor.advance()
                self.cursor.advance()
                return self._parse_reassignment(token)
            if following == tk.PLUS:
                self.cursor.advance()
                self.cursor.advance()
                self._expect(tk.ASSIGN, "'=' after '+'")
                return self._parse_add_assign(token)
            if following == tk.LPAR:
                call = self._parse_call()
                self._expect(tk.SEMICOLON, "';'")
                return call
        raise self._error(f"could not identify statement starting with {token.describe()}", token)

    def _parse_return(self) -> Return:
        value = self.parse_expression()
        self._expect(tk.SEMICOLON, "';'")
        return Return(value)

    def _parse_var_decl(self) -> VarDecl:
        name_token = self._expect(tk.NAME, "identifier")
        type_token = self._expect(tk.NAME, "type")
        self._expect(tk.ASSIGN, "'='")
        value = self.parse_expression()
        self._expect(tk.SEMICOLON, "';'")
        if self._declared is not None:
            if name_token.value in self._declared:
                raise self._semantic(
                    f"cannot redeclare variable '{name_token.value}'", name_token
                )
            self._declared.add(name_token.value)
        return VarDecl(name_token.value, type_token.value, value)

    def _parse_reassignment(self, target: Token) -> VarReassign:
        value = self.parse_expression()
        self._expect(tk.SEMICOLON, "';'")
        return VarReassign(target.value, value)

    def _parse_add_assign(self, target: Token) -> AddAssign:
        value = self.parse_expression()
        self._expect(tk.SEMICOLON, "';'")
        return AddAssign(target.value, value)

    def _parse_function_def(self) -> FunctionDef:
        name_token = self._expect(tk.NAME, "function name")
        self._expect(tk.LPAR, "'('")
        arguments = self._parse_parameters()

        following = self.cursor.current()
        if following.kind == tk.NAME:
            return_type = following.value
            self.cursor.advance()
        elif following.kind == tk.LBRACE:
            return_type = VOID
        else:
            raise self._error(f"expected return type, found {following.describe()}", following)
        self._expect(tk.LBRACE, "'{'")

        self._declared = {a.name for a in arguments}
        try:
            body = self._parse_block()
        finally:
            self._declared = None

        try:
            TypeCanon.require_return_type(return_type)
            for argument in arguments:
                TypeCanon.require_value_type(argument.type_name)
            self.symbols.define(name_token.value, FunctionSignature(return_type, arguments))
        except SemanticError as e:
            raise self._semantic(e.message, name_token) from None
        logger.debug("parsed function %s (%d statements)", name_token.value, len(body))
        return FunctionDef(name_token.value, arguments, return_type, body)

    def _parse_parameters(self) -> tuple:
        arguments: List[FunctionArgument] = []
        if self.cursor.current().kind == tk.RPAR:
            self.cursor.advance()
            return ()
        while True:
            name_token = self._expect(tk.NAME, "argument name")
            type_token = self._expect(tk.NAME, "argument type")
            if any(a.name == name_token.value for a in arguments):
                raise self._semantic(
                    f"cannot redeclare variable '{name_token.value}'", name_token
                )
            arguments.append(FunctionArgument(name_token.value, type_token.value))
            separator = self.cursor.advance()
            if separator.kind == tk.RPAR:
                return tuple(arguments)
            if separator.kind != tk.COMMA:
                raise self._error(f"expected ',' or ')', found {separator.describe()}", separator)

    def _parse_block(self) -> tuple:
        statements: List[Statement] = []
        while self.cursor.current().kind != tk.RBRACE:
            statements.append(self.parse_statement())
        self.cursor.advance()
        return tuple(statements)

    # --- Expressions ---

    def parse_expression(self) -> Expression:
        """Parse one value, choosing between arithmetic, call and identifier.

        A call followed by an arithmetic operator is only an operand: the
        cursor goes back to the call's first token and the whole region is
        parsed again as arithmetic.
        """
        token = self.cursor.current()
        following = self.cursor.peek_kind(1)
        if token.kind in ARITHMETIC_STARTS or (
            token.kind == tk.NAME and following in tk.ARITHMETIC_OPERATORS
        ):
            return ArithmeticParser(self).parse()
        if (
            token.kind == tk.NAME
            and following == tk.LPAR
            and self.cursor.peek_kind(-1) != tk.FUN
        ):
            return self._parse_call_expression()
        if token.kind == tk.NAME:
            self.cursor.advance()
            return Identifier(token.value)
        raise self._error(f"expected an expression, found {token.describe()}", token)

    def _parse_call_expression(self) -> Expression:
        start = self.cursor.checkpoint()
        call = self._parse_call()
        if self.cursor.peek_kind(0) in tk.ARITHMETIC_OPERATORS:
            self.cursor.restore(start)
            return ArithmeticParser(self).parse()
        return call

    def _parse_call(self) -> FunctionCall:
        name_token = self._expect(tk.NAME, "function name")
        try:
            self.symbols.lookup(name_token.value)
        except SemanticError as e:
            raise self._semantic(e.message, name_token) from None
        self._expect(tk.LPAR, "'('")
        arguments: List[Expression] = []
        if self.cursor.current().kind == tk.RPAR:
            self.cursor.advance()
            return FunctionCall(name_token.value, ())
        while True:
            arguments.append(self.parse_expression())
            separator = self.cursor.advance()
            if separator.kind == tk.RPAR:
                return FunctionCall(name_token.value, tuple(arguments))
            if separator.kind != tk.COMMA:
                raise self._error(f"expected ',' or ')', found {separator.describe()}", separator)

    # --- Helpers ---

    def _expect(self, kind: str, what: str) -> Token:
        token = self.cursor.current()
        if token.kind != kind:
            raise self._error(f"expected {what}, found {token.describe()}", token)
        self.cursor.advance()
        return token

    @staticmethod
    def _error(message: str, token: Token) -> ParseError:
        return ParseError(message, token.line, token.column)

    @staticmethod
    def _semantic(message: str, token: Token) -> SemanticError:
        return SemanticError(message, token.line, token.column)


def parse(tokens: Sequence[Token], symbols: Optional[SymbolTable] = None) -> Program:
    return Parser(tokens, symbols).parse_program()
