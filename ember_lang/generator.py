import logging
import struct
from dataclasses import dataclass, field
from typing import Tuple

from . import opcodes as op
from .classfile import ClassModule
from .exceptions import SemanticError
from .nodes import (
    ADD,
    ARITHMETIC_NODES,
    DIV,
    MUL,
    POW,
    SUB,
    AddAssign,
    ArithmeticNode,
    BinaryNode,
    CallLeaf,
    Expression,
    FunctionCall,
    FunctionDef,
    Identifier,
    NameLeaf,
    Negative,
    NumberLeaf,
    Positive,
    Program,
    Return,
    Statement,
    VarDecl,
    VarReassign,
)
from .scope import LocalScope
from .symbols import INT, VOID, FunctionSignature, SymbolTable, Variable
from .types import TypeCanon

logger = logging.getLogger(__name__)

BINARY_OPCODES = {ADD: op.IADD, SUB: op.ISUB, MUL: op.IMUL, DIV: op.IDIV}

# Upper bound on one method's code; also bounds how far '**' may be unrolled.
MAX_CODE_LENGTH = 0xFFFF


@dataclass
class FunctionContext:
    """State owned by the generator while one function is lowered."""

    module: ClassModule
    definition: FunctionDef
    scope: LocalScope = field(default_factory=LocalScope)


class CodeGenerator:
    """Lowers each function definition into a method of ``module``."""

    def __init__(self, symbols: SymbolTable, module: ClassModule):
        self.symbols = symbols
        self.module = module

    def generate(self, program: Program) -> ClassModule:
        for statement in program.statements:
            if not isinstance(statement, FunctionDef):
                raise SemanticError(
                    f"{type(statement).__name__} statements are only allowed inside a function body"
                )
            self.generate_function(statement)
        return self.module

    def generate_function(self, definition: FunctionDef) -> bytes:
        context = FunctionContext(self.module, definition)
        for argument in definition.arguments:
            context.scope.declare(argument.name, argument.type_name)

        code = bytearray()
        for statement in definition.body:
            code.extend(self._statement(statement, context))
        if len(code) > MAX_CODE_LENGTH:
            raise SemanticError(f"function '{definition.name}' is too large to encode")

        signature = FunctionSignature(definition.return_type, definition.arguments)
        self.module.add_method(
            definition.name,
            TypeCanon.descriptor(signature),
            bytes(code),
            context.scope.max_locals,
        )
        logger.debug(
            "emitted method %s: %d bytes, max_locals=%d",
            definition.name,
            len(code),
            context.scope.max_locals,
        )
        return bytes(code)

    # --- Statements ---

    def _statement(self, statement: Statement, context: FunctionContext) -> bytes:
        if isinstance(statement, VarDecl):
            return self._var_decl(statement, context)
        if isinstance(statement, VarReassign):
            return self._reassign(statement, context)
        if isinstance(statement, AddAssign):
            return self._add_assign(statement, context)
        if isinstance(statement, Return):
            code, _ = self._value(statement.value, context)
            return code + bytes([op.IRETURN])
        if isinstance(statement, FunctionCall):
            code, _ = self._call(statement, context)
            return code
        if isinstance(statement, FunctionDef):
            raise SemanticError("cannot define function inside another function")
        raise SemanticError(f"unsupported statement {type(statement).__name__}")

    def _var_decl(self, statement: VarDecl, context: FunctionContext) -> bytes:
        TypeCanon.require_value_type(statement.type_name)
        if statement.name in context.scope:
            raise SemanticError(f"cannot redeclare variable '{statement.name}'")
        code, value_type = self._value(statement.value, context)
        if not TypeCanon.are_compatible(statement.type_name, value_type):
            raise SemanticError(
                f"cannot initialize variable '{statement.name}' of type "
                f"{statement.type_name} with a value of type {value_type}"
            )
        variable = context.scope.declare(statement.name, statement.type_name)
        return code + self._store(variable)

    def _reassign(self, statement: VarReassign, context: FunctionContext) -> bytes:
        variable = context.scope.get(statement.name)
        code, value_type = self._value(statement.value, context)
        if not TypeCanon.are_compatible(variable.type_name, value_type):
            raise SemanticError(
                f"cannot reassign a variable of type {variable.type_name} "
                f"with a value of type {value_type}"
            )
        return code + self._store(variable)

    def _add_assign(self, statement: AddAssign, context: FunctionContext) -> bytes:
        variable = context.scope.get(statement.name)
        code, value_type = self._value(statement.value, context)
        if not TypeCanon.are_compatible(variable.type_name, value_type):
            raise SemanticError(
                f"cannot add a value of type {value_type} "
                f"to a variable of type {variable.type_name}"
            )
        return code + self._load(variable) + bytes([op.IADD]) + self._store(variable)

    # --- Expressions ---

    def _value(self, expression: Expression, context: FunctionContext) -> Tuple[bytes, str]:
        if isinstance(expression, Identifier):
            variable = context.scope.get(expression.name)
            return self._load(variable), variable.type_name
        if isinstance(expression, FunctionCall):
            code, signature = self._call(expression, context)
            if signature.return_type == VOID:
                raise SemanticError(
                    f"cannot use the result of function '{expression.name}' "
                    "because it returns void"
                )
            return code, signature.return_type
        if isinstance(expression, ARITHMETIC_NODES):
            return self._arithmetic(expression, context), INT
        raise SemanticError(f"unsupported expression type {type(expression).__name__}")

    def _arithmetic(self, node: ArithmeticNode, context: FunctionContext) -> bytes:
        if isinstance(node, NumberLeaf):
            return self._push_constant(node.value)
        if isinstance(node, NameLeaf):
            variable = context.scope.get(node.name)
            if variable.type_name != INT:
                raise SemanticError(
                    f"cannot use variable '{node.name}' of type {variable.type_name} in arithmetic"
                )
            return self._load(variable)
        if isinstance(node, CallLeaf):
            signature = self.symbols.lookup(node.call.name)
            if signature.return_type != INT:
                raise SemanticError(
                    f"cannot use function '{node.call.name}' with return type "
                    f"{signature.return_type} in an arithmetic expression"
                )
            code, _ = self._call(node.call, context)
            return code
        if isinstance(node, Positive):
            return self._arithmetic(node.operand, context)
        if isinstance(node, Negative):
            operand = node.operand
            if isinstance(operand, NumberLeaf) and -operand.value in op.ICONSTS:
                return self._push_constant(-operand.value)
            return self._arithmetic(operand, context) + bytes([op.INEG])
        if isinstance(node, BinaryNode):
            if node.kind == POW:
                return self._power(node, context)
            opcode = BINARY_OPCODES.get(node.kind)
            if opcode is None:
                raise SemanticError(f"unsupported operator '{node.kind}'")
            return (
                self._arithmetic(node.left, context)
                + self._arithmetic(node.right, context)
                + bytes([opcode])
            )
        raise SemanticError(f"unsupported arithmetic node {type(node).__name__}")

    def _power(self, node: BinaryNode, context: FunctionContext) -> bytes:
        exponent = node.right
        if not isinstance(exponent, NumberLeaf):
            raise SemanticError("exponent of '**' must be a non-negative integer literal")
        if _contains_call(node.left):
            raise SemanticError("base of '**' cannot contain a function call")
        base = self._arithmetic(node.left, context)
        if exponent.value == 0:
            return bytes([op.ICONST_1])
        if len(base) * exponent.value > MAX_CODE_LENGTH:
            raise SemanticError(f"exponent {exponent.value} is too large to unroll")
        return base + (base + bytes([op.IMUL])) * (exponent.value - 1)

    def _call(self, call: FunctionCall, context: FunctionContext) -> Tuple[bytes, FunctionSignature]:
        signature = self.symbols.lookup(call.name)
        if len(call.arguments) != signature.arity:
            raise SemanticError(
                f"function '{call.name}' expects {signature.arity} argument(s), "
                f"got {len(call.arguments)}"
            )
        code = bytearray()
        for argument, parameter in zip(call.arguments, signature.arguments):
            argument_code, argument_type = self._value(argument, context)
            if not TypeCanon.are_compatible(parameter.type_name, argument_type):
                raise SemanticError(
                    f"argument '{parameter.name}' of '{call.name}' expects type "
                    f"{parameter.type_name}, got {argument_type}"
                )
            code.extend(argument_code)
        index = context.module.add_method_ref(call.name, TypeCanon.descriptor(signature))
        code.append(op.INVOKEVIRTUAL)
        code.extend(struct.pack(">H", index))
        return bytes(code), signature

    # --- Instruction selection ---

    @staticmethod
    def _push_constant(value: int) -> bytes:
        opcode = op.ICONSTS.get(value)
        if opcode is None:
            raise SemanticError(
                f"number {value} is too large: only -1 through 5 can be pushed"
            )
        return bytes([opcode])

    @staticmethod
    def _load(variable: Variable) -> bytes:
        return _slot_instruction(variable, op.ILOADS, op.ILOAD)

    @staticmethod
    def _store(variable: Variable) -> bytes:
        return _slot_instruction(variable, op.ISTORES, op.ISTORE)


def _slot_instruction(variable: Variable, compact: dict, generic: int) -> bytes:
    opcode = compact.get(variable.slot)
    if opcode is not None:
        return bytes([opcode])
    if variable.slot > op.MAX_SLOT_OPERAND:
        raise SemanticError(f"local slot {variable.slot} cannot be addressed")
    return bytes([generic, variable.slot])


def _contains_call(node: ArithmeticNode) -> bool:
    if isinstance(node, CallLeaf):
        return True
    if isinstance(node, (Positive, Negative)):
        return _contains_call(node.operand)
    if isinstance(node, BinaryNode):
        return _contains_call(node.left) or _contains_call(node.right)
    return False
