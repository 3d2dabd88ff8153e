from .grammar import EMBER_TOKENS
from .exceptions import (
    EmberError,
    LexicalError,
    ParseError,
    SemanticError,
    EncodingError,
)
from .tokens import Token
from .lexer import Lexer, tokenize
from .cursor import Checkpoint, TokenCursor
from .symbols import (
    FunctionArgument,
    FunctionSignature,
    SymbolTable,
    Variable,
)
from .scope import LocalScope
from .types import TypeCanon
from .parser import Parser, parse
from .arithmetic import ArithmeticParser
from .classfile import ClassModule, ConstantPool
from .generator import CodeGenerator
from .models import (
    CompilerOptions,
    CompileResult,
    Diagnostic,
    Success,
    Failure,
)
from .compiler import CompilationSession, EmberCompiler, compile_source
from .disassembler import disassemble, read_module

__all__ = [
    "EMBER_TOKENS",
    "EmberError",
    "LexicalError",
    "ParseError",
    "SemanticError",
    "EncodingError",
    "Token",
    "Lexer",
    "tokenize",
    "Checkpoint",
    "TokenCursor",
    "FunctionArgument",
    "FunctionSignature",
    "SymbolTable",
    "Variable",
    "LocalScope",
    "TypeCanon",
    "Parser",
    "parse",
    "ArithmeticParser",
    "ClassModule",
    "ConstantPool",
    "CodeGenerator",
    "CompilerOptions",
    "CompileResult",
    "Diagnostic",
    "Success",
    "Failure",
    "CompilationSession",
    "EmberCompiler",
    "compile_source",
    "disassemble",
    "read_module",
]
