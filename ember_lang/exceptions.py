from typing import Optional


class EmberError(Exception):
    """Base exception for every compilation fault."""

    kind = "internal"

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def __str__(self) -> str:
        if self.line is not None and self.column is not None:
            return f"{self.line}:{self.column}: {self.message}"
        if self.line is not None:
            return f"{self.line}: {self.message}"
        return self.message


class LexicalError(EmberError):
    """Raised when the source contains a character no token starts with."""

    kind = "lexical"


class ParseError(EmberError):
    """Raised when the token stream does not match the grammar."""

    kind = "syntactic"


class SemanticError(EmberError):
    """Raised when a well-formed program violates a naming or typing rule."""

    kind = "semantic"


class EncodingError(EmberError):
    """Raised when a module cannot be represented in the binary layout."""

    kind = "encoding"
