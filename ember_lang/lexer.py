import logging
from functools import lru_cache
from typing import List

from lark import Lark
from lark.exceptions import UnexpectedCharacters

from .exceptions import LexicalError
from .grammar import EMBER_TOKENS
from .tokens import VALUED_KINDS, Token

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _token_lexer() -> Lark:
    return Lark(EMBER_TOKENS, parser="lalr", lexer="basic")


class Lexer:
    """Turns source text into the full token sequence in one pass.

    Matching is longest-first, so ``**`` wins over ``*`` and ``letter`` stays
    an identifier while ``let`` becomes the declaration keyword. The first
    character that starts no token aborts the run with a ``LexicalError``.
    """

    def __init__(self, source: str):
        self.source = source

    def tokenize(self) -> List[Token]:
        tokens: List[Token] = []
        try:
            for raw in _token_lexer().lex(self.source):
                value = str(raw) if raw.type in VALUED_KINDS else None
                tokens.append(Token(raw.type, value, raw.line, raw.column))
        except UnexpectedCharacters as e:
            raise LexicalError(
                f"unrecognized character {e.char!r}", e.line, e.column
            ) from None
        logger.debug("lexed %d tokens", len(tokens))
        return tokens


def tokenize(source: str) -> List[Token]:
    return Lexer(source).tokenize()
