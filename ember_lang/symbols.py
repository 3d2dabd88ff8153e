import logging
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

from .exceptions import SemanticError

logger = logging.getLogger(__name__)

INT = "int"
VOID = "void"


@dataclass(frozen=True)
class FunctionArgument:
    name: str
    type_name: str


@dataclass(frozen=True)
class FunctionSignature:
    return_type: str
    arguments: Tuple[FunctionArgument, ...] = ()

    @property
    def arity(self) -> int:
        return len(self.arguments)


@dataclass(frozen=True)
class Variable:
    slot: int
    type_name: str


BUILTINS: Dict[str, FunctionSignature] = {
    "println": FunctionSignature(VOID, (FunctionArgument("value", INT),)),
}


class SymbolTable:
    """Function signatures known to one compilation session.

    Entries are added in source order as definitions finish parsing, so a
    call can only target a function whose definition precedes it.
    """

    def __init__(self):
        self._functions: Dict[str, FunctionSignature] = dict(BUILTINS)

    def define(self, name: str, signature: FunctionSignature) -> None:
        if name in self._functions:
            raise SemanticError(
                f"cannot define a function with the name '{name}' "
                "(function with that name already exists)"
            )
        self._functions[name] = signature
        logger.debug("registered function %s%s", name, _format(signature))

    def lookup(self, name: str) -> FunctionSignature:
        signature = self._functions.get(name)
        if signature is None:
            raise SemanticError(f"cannot call undefined function '{name}'")
        return signature

    def get(self, name: str) -> Optional[FunctionSignature]:
        return self._functions.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._functions

    def __iter__(self) -> Iterator[str]:
        return iter(self._functions)

    def __len__(self) -> int:
        return len(self._functions)


def _format(signature: FunctionSignature) -> str:
    args = ", ".join(f"{a.name} {a.type_name}" for a in signature.arguments)
    return f"({args}) {signature.return_type}"
