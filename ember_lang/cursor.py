from dataclasses import dataclass
from typing import List, Optional, Sequence

from .exceptions import ParseError
from .tokens import Token


@dataclass(frozen=True)
class Checkpoint:
    """A saved cursor position the parser may later rewind to."""

    position: int


class TokenCursor:
    """Positional reader over a token sequence.

    The parser never re-tokenizes; every lookahead and every backtrack is a
    read or a position change on this cursor.
    """

    def __init__(self, tokens: Sequence[Token]):
        self._tokens: List[Token] = list(tokens)
        self._position = 0

    @property
    def position(self) -> int:
        return self._position

    def __len__(self) -> int:
        return len(self._tokens)

    def exhausted(self) -> bool:
        return self._position >= len(self._tokens)

    def current(self) -> Token:
        return self.peek(0)

    def peek(self, offset: int) -> Token:
        index = self._position + offset
        if index < 0 or index >= len(self._tokens):
            raise self._end_of_input(index)
        return self._tokens[index]

    def peek_kind(self, offset: int = 0) -> Optional[str]:
        index = self._position + offset
        if 0 <= index < len(self._tokens):
            return self._tokens[index].kind
        return None

    def advance(self) -> Token:
        token = self.current()
        self._position += 1
        return token

    def unread(self, count: int = 1) -> None:
        if count < 0:
            raise ParseError(f"cannot unread {count} tokens")
        if self._position - count < 0:
            raise ParseError(
                f"cannot unread {count} tokens from position {self._position}"
            )
        self._position -= count

    def checkpoint(self) -> Checkpoint:
        return Checkpoint(self._position)

    def restore(self, checkpoint: Checkpoint) -> int:
        """Rewind to ``checkpoint`` and return how many tokens were unread."""
        distance = self._position - checkpoint.position
        if distance < 0:
            raise ParseError(
                f"checkpoint {checkpoint.position} is ahead of position {self._position}"
            )
        self.unread(distance)
        return distance

    def _end_of_input(self, index: int) -> ParseError:
        if self._tokens and index >= len(self._tokens):
            last = self._tokens[-1]
            return ParseError("unexpected end of input", last.line, last.column)
        if index < 0:
            return ParseError(f"no token before position {self._position}")
        return ParseError("unexpected end of input")
