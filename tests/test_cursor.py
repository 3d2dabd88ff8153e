import unittest

from ember_lang import ParseError, TokenCursor, tokenize
from ember_lang import tokens as tk


class TokenCursorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.cursor = TokenCursor(tokenize("let x int = 1;"))

    def test_reading_moves_forward(self) -> None:
        self.assertEqual(len(self.cursor), 6)
        self.assertEqual(self.cursor.current().kind, tk.LET)
        self.assertEqual(self.cursor.advance().kind, tk.LET)
        self.assertEqual(self.cursor.position, 1)
        self.assertEqual(self.cursor.current().value, "x")

    def test_peek_does_not_move(self) -> None:
        self.assertEqual(self.cursor.peek(2).value, "int")
        self.assertEqual(self.cursor.peek_kind(3), tk.ASSIGN)
        self.assertEqual(self.cursor.position, 0)

    def test_peek_kind_out_of_range_is_none(self) -> None:
        self.assertIsNone(self.cursor.peek_kind(-1))
        self.assertIsNone(self.cursor.peek_kind(6))

    def test_reading_past_the_end(self) -> None:
        for _ in range(6):
            self.cursor.advance()
        self.assertTrue(self.cursor.exhausted())
        with self.assertRaises(ParseError) as ctx:
            self.cursor.current()
        self.assertIn("unexpected end of input", ctx.exception.message)
        self.assertEqual((ctx.exception.line, ctx.exception.column), (1, 14))

    def test_peek_before_the_start(self) -> None:
        with self.assertRaises(ParseError):
            self.cursor.peek(-1)

    def test_empty_stream(self) -> None:
        cursor = TokenCursor([])
        self.assertTrue(cursor.exhausted())
        with self.assertRaises(ParseError):
            cursor.advance()

    def test_unread(self) -> None:
        self.cursor.advance()
        self.cursor.advance()
        self.cursor.unread()
        self.assertEqual(self.cursor.position, 1)
        self.cursor.unread(1)
        self.assertEqual(self.cursor.position, 0)
        with self.assertRaises(ParseError):
            self.cursor.unread()
        with self.assertRaises(ParseError):
            self.cursor.unread(-1)

    def test_checkpoint_and_restore(self) -> None:
        self.cursor.advance()
        mark = self.cursor.checkpoint()
        self.cursor.advance()
        self.cursor.advance()
        self.cursor.advance()
        self.assertEqual(self.cursor.restore(mark), 3)
        self.assertEqual(self.cursor.position, 1)
        self.assertEqual(self.cursor.restore(mark), 0)

    def test_restore_ahead_is_rejected(self) -> None:
        self.cursor.advance()
        self.cursor.advance()
        ahead = self.cursor.checkpoint()
        self.cursor.unread(2)
        with self.assertRaises(ParseError):
            self.cursor.restore(ahead)


if __name__ == "__main__":  # pragma: no cover
    unittest.main(verbosity=2)
