from typing import Dict

from .exceptions import SemanticError
from .symbols import Variable


class LocalScope:
    """Variables of the function being generated, with their local slots.

    Slots are handed out in declaration order starting at 0 and are never
    reused, so ``max_locals`` is simply the next free slot.
    """

    def __init__(self):
        self.variables: Dict[str, Variable] = {}
        self._next_slot = 0

    @property
    def max_locals(self) -> int:
        return self._next_slot

    def declare(self, name: str, type_name: str) -> Variable:
        if name in self.variables:
            raise SemanticError(f"cannot redeclare variable '{name}'")
        variable = Variable(self._next_slot, type_name)
        self.variables[name] = variable
        self._next_slot += 1
        return variable

    def get(self, name: str) -> Variable:
        variable = self.variables.get(name)
        if variable is None:
            raise SemanticError(f"cannot use undeclared variable '{name}'")
        return variable

    def __contains__(self, name: str) -> bool:
        return name in self.variables
