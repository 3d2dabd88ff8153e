from dataclasses import dataclass
from typing import Optional


RETURN = "RETURN"
LET = "LET"
FUN = "FUN"
NAME = "NAME"
NUMBER = "NUMBER"
POW = "POW"
STAR = "STAR"
SLASH = "SLASH"
PLUS = "PLUS"
MINUS = "MINUS"
ASSIGN = "ASSIGN"
SEMICOLON = "SEMICOLON"
COMMA = "COMMA"
LPAR = "LPAR"
RPAR = "RPAR"
LBRACE = "LBRACE"
RBRACE = "RBRACE"

# Kinds whose source text is kept on the token.
VALUED_KINDS = frozenset({NAME, NUMBER})

ARITHMETIC_OPERATORS = frozenset({PLUS, MINUS, STAR, SLASH, POW})

SPELLING = {
    RETURN: "return",
    LET: "let",
    FUN: "fun",
    POW: "**",
    STAR: "*",
    SLASH: "/",
    PLUS: "+",
    MINUS: "-",
    ASSIGN: "=",
    SEMICOLON: ";",
    COMMA: ",",
    LPAR: "(",
    RPAR: ")",
    LBRACE: "{",
    RBRACE: "}",
}


@dataclass(frozen=True)
class Token:
    kind: str
    value: Optional[str] = None
    line: int = 0
    column: int = 0

    def describe(self) -> str:
        if self.value is not None:
            return f"{self.kind.lower()} '{self.value}'"
        return f"'{SPELLING.get(self.kind, self.kind)}'"

    def __repr__(self) -> str:
        if self.value is not None:
            return f"Token({self.kind}, {self.value!r})"
        return f"Token({self.kind})"
