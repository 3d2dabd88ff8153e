import unittest

from ember_lang import (
    FunctionArgument,
    FunctionSignature,
    ParseError,
    Parser,
    SemanticError,
    SymbolTable,
    tokenize,
)
from ember_lang.arithmetic import FACTOR, MIN, POWER, TERM, precedence_of
from ember_lang import tokens as tk
from ember_lang.nodes import BinaryNode, CallLeaf, NumberLeaf, dump


def symbols_with_square() -> SymbolTable:
    symbols = SymbolTable()
    symbols.define("sq", FunctionSignature("int", (FunctionArgument("n", "int"),)))
    symbols.define("hello", FunctionSignature("void"))
    return symbols


def parse_expression(source, symbols=None):
    parser = Parser(tokenize(source), symbols)
    return parser.parse_expression(), parser


class PrecedenceTests(unittest.TestCase):
    def test_levels(self) -> None:
        self.assertEqual(precedence_of(tk.PLUS), TERM)
        self.assertEqual(precedence_of(tk.MINUS), TERM)
        self.assertEqual(precedence_of(tk.STAR), FACTOR)
        self.assertEqual(precedence_of(tk.SLASH), FACTOR)
        self.assertEqual(precedence_of(tk.POW), POWER)
        self.assertEqual(precedence_of(tk.SEMICOLON), MIN)
        self.assertEqual(precedence_of(None), MIN)


class ArithmeticParserTests(unittest.TestCase):
    def assertTree(self, source: str, expected: str) -> None:
        node, _ = parse_expression(source)
        self.assertEqual(dump(node), expected)

    def test_multiplication_binds_tighter(self) -> None:
        self.assertTree("1 + 2 * 3", "add(1, mul(2, 3))")
        self.assertTree("1 * 2 + 3", "add(mul(1, 2), 3)")

    def test_equal_precedence_groups_left(self) -> None:
        self.assertTree("1 - 2 - 3", "sub(sub(1, 2), 3)")
        self.assertTree("8 / 4 * 2", "mul(div(8, 4), 2)")
        self.assertTree("2 ** 3 ** 2", "pow(pow(2, 3), 2)")

    def test_power_binds_tighter_than_multiplication(self) -> None:
        self.assertTree("2 * 3 ** 2", "mul(2, pow(3, 2))")

    def test_parentheses(self) -> None:
        self.assertTree("(1 + 2) * 3", "mul(add(1, 2), 3)")
        self.assertTree("((4))", "4")

    def test_prefix_operators(self) -> None:
        self.assertTree("--3", "negative(negative(3))")
        self.assertTree("+x", "positive(x)")
        self.assertTree("-2 ** 2", "pow(negative(2), 2)")
        self.assertTree("1 - -1", "sub(1, negative(1))")

    def test_names_as_operands(self) -> None:
        self.assertTree("a * b + c", "add(mul(a, b), c)")

    def test_stops_at_first_non_operator(self) -> None:
        node, parser = parse_expression("1 + 2; 3")
        self.assertEqual(node, BinaryNode("add", NumberLeaf(1), NumberLeaf(2)))
        self.assertEqual(parser.cursor.current().kind, tk.SEMICOLON)

    def test_call_operand(self) -> None:
        node, _ = parse_expression("sq(2) + 1", symbols_with_square())
        self.assertEqual(dump(node), "add(sq(2), 1)")
        self.assertIsInstance(node.left, CallLeaf)

    def test_call_operand_restores_before_reparsing(self) -> None:
        node, parser = parse_expression("sq(2) * 3;", symbols_with_square())
        self.assertEqual(dump(node), "mul(sq(2), 3)")
        self.assertEqual(parser.cursor.position, 6)

    def test_call_arguments_may_be_arithmetic(self) -> None:
        node, _ = parse_expression("1 + sq(2 * 2)", symbols_with_square())
        self.assertEqual(dump(node), "add(1, sq(mul(2, 2)))")

    def test_void_call_is_not_an_operand(self) -> None:
        with self.assertRaises(SemanticError) as ctx:
            parse_expression("hello() + 1", symbols_with_square())
        self.assertIn("hello", ctx.exception.message)
        with self.assertRaises(SemanticError):
            parse_expression("1 + println(1)")

    def test_unclosed_parenthesis(self) -> None:
        with self.assertRaises(ParseError) as ctx:
            parse_expression("(1 + 2;")
        self.assertIn("expected ')'", ctx.exception.message)

    def test_missing_operand(self) -> None:
        with self.assertRaises(ParseError):
            parse_expression("1 + ;")


if __name__ == "__main__":  # pragma: no cover
    unittest.main(verbosity=2)
