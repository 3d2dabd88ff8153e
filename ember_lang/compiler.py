import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .classfile import ClassModule
from .exceptions import EmberError, ParseError, SemanticError
from .generator import CodeGenerator
from .lexer import Lexer
from .models import CompileResult, CompilerOptions, Diagnostic, Failure, Success
from .nodes import Program
from .parser import Parser
from .symbols import SymbolTable
from .tokens import Token

logger = logging.getLogger(__name__)


@dataclass
class CompilationSession:
    """Everything one compilation owns: the function table and the module."""

    options: CompilerOptions = field(default_factory=CompilerOptions)
    symbols: SymbolTable = field(default_factory=SymbolTable)
    module: Optional[ClassModule] = None

    def __post_init__(self):
        if self.module is None:
            self.module = ClassModule(self.options.class_name, self.options.super_class)

    def tokenize(self, source: str) -> List[Token]:
        return Lexer(source).tokenize()

    def parse(self, tokens: List[Token]) -> Program:
        try:
            return Parser(tokens, self.symbols).parse_program()
        except RecursionError:
            raise ParseError("program is nested too deeply to parse") from None

    def generate(self, program: Program) -> ClassModule:
        try:
            return CodeGenerator(self.symbols, self.module).generate(program)
        except RecursionError:
            raise SemanticError("expression is nested too deeply to generate") from None

    def run(self, source: str) -> bytes:
        tokens = self.tokenize(source)
        program = self.parse(tokens)
        module = self.generate(program)
        return module.to_bytes()


class EmberCompiler:
    """Compiles Ember source text into module bytes.

    Each ``compile`` call runs in a fresh session, so functions defined by one
    program are never visible to the next.
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options if options is not None else CompilerOptions()

    def new_session(self) -> CompilationSession:
        return CompilationSession(self.options)

    def compile(self, source: str) -> bytes:
        return self.new_session().run(source)


def compile_source(source: str, options: Optional[CompilerOptions] = None) -> CompileResult:
    """Compile ``source`` and report the outcome as a value instead of raising."""
    try:
        output = EmberCompiler(options).compile(source)
    except EmberError as e:
        logger.debug("compilation failed: %s", e)
        return Failure(Diagnostic.from_error(e))
    return Success(output)
