import os
from dataclasses import dataclass
from typing import Optional, Union

from .exceptions import EmberError


@dataclass
class CompilerOptions:
    class_name: str = "Main"
    super_class: str = "base/Object"

    @classmethod
    def from_env(cls) -> "CompilerOptions":
        defaults = cls()
        return cls(
            class_name=os.environ.get("EMBER_CLASS_NAME", defaults.class_name),
            super_class=os.environ.get("EMBER_SUPER_CLASS", defaults.super_class),
        )


@dataclass(frozen=True)
class Diagnostic:
    kind: str
    message: str
    line: Optional[int] = None
    column: Optional[int] = None

    @classmethod
    def from_error(cls, error: EmberError) -> "Diagnostic":
        return cls(error.kind, error.message, error.line, error.column)

    def __str__(self) -> str:
        where = ""
        if self.line is not None:
            where = f"{self.line}:{self.column}: " if self.column is not None else f"{self.line}: "
        return f"{where}{self.kind} error: {self.message}"


@dataclass(frozen=True)
class Success:
    output: bytes

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    diagnostic: Diagnostic

    @property
    def ok(self) -> bool:
        return False


CompileResult = Union[Success, Failure]
