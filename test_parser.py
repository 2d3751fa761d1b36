"""Tests for the Pratt parser."""

import unittest

from monkey_ast import (
    Identifier,
    IntegerLiteral,
    StringLiteral,
    BooleanLiteral,
    PrefixExpression,
    InfixExpression,
    IfExpression,
    FunctionLiteral,
    CallExpression,
    LetStatement,
    AssignStatement,
    ReturnStatement,
    ExpressionStatement,
    BlockStatement,
    Program,
)
from parser import parse_program


def parse_ok(source: str) -> Program:
    """Parse source, failing loudly on syntax errors."""
    program, errors = parse_program(source)
    if errors:
        raise AssertionError(f"parser errors: {errors}")
    return program


def single_expression(source: str):
    program = parse_ok(source)
    assert len(program.statements) == 1, program.statements
    stmt = program.statements[0]
    assert isinstance(stmt, ExpressionStatement), stmt
    return stmt.expression


class TestStatements(unittest.TestCase):
    """Test statement-level grammar."""

    def test_let_statements(self) -> None:
        """Test that let statements record name and value."""
        program = parse_ok("let x = 5;\nlet y = true;\nlet foobar = y;")
        self.assertEqual(program.statements, [
            LetStatement(Identifier("x"), IntegerLiteral(5)),
            LetStatement(Identifier("y"), BooleanLiteral(True)),
            LetStatement(Identifier("foobar"), Identifier("y")),
        ])

    def test_assign_statement(self) -> None:
        """Test that name = value parses as an assignment."""
        program = parse_ok("a = 3;")
        self.assertEqual(program.statements, [AssignStatement(Identifier("a"), IntegerLiteral(3))])

    def test_identifier_not_followed_by_assign_is_expression(self) -> None:
        """Test that a bare identifier parses as an expression statement."""
        program = parse_ok("a == 3;")
        self.assertEqual(program.statements, [
            ExpressionStatement(InfixExpression(Identifier("a"), "==", IntegerLiteral(3))),
        ])

    def test_return_statements(self) -> None:
        """Test that return statements carry their value."""
        program = parse_ok("return 5;\nreturn 10;\nreturn add(1);")
        self.assertEqual(len(program.statements), 3)
        for stmt in program.statements:
            self.assertIsInstance(stmt, ReturnStatement)
        self.assertEqual(program.statements[0], ReturnStatement(IntegerLiteral(5)))

    def test_semicolons_are_optional(self) -> None:
        """Test that statements parse with or without semicolons."""
        program = parse_ok("let x = 1 let y = 2 x")
        self.assertEqual(len(program.statements), 3)
        self.assertEqual(str(program), "let x = 1;let y = 2;x")

    def test_block_statement(self) -> None:
        """Test that braces at statement position form a block."""
        program = parse_ok("{ let x = 1; x }")
        self.assertEqual(program.statements, [
            BlockStatement([
                LetStatement(Identifier("x"), IntegerLiteral(1)),
                ExpressionStatement(Identifier("x")),
            ]),
        ])

    def test_program_string(self) -> None:
        """Test that a program renders back to source form."""
        program = Program([
            LetStatement(Identifier("myVar"), Identifier("anotherVar")),
        ])
        self.assertEqual(str(program), "let myVar = anotherVar;")


class TestExpressions(unittest.TestCase):
    """Test expression parsing."""

    def test_literals(self) -> None:
        """Test that each literal kind parses to its node."""
        self.assertEqual(single_expression("foobar;"), Identifier("foobar"))
        self.assertEqual(single_expression("5;"), IntegerLiteral(5))
        self.assertEqual(single_expression('"hello world";'), StringLiteral("hello world"))
        self.assertEqual(single_expression("true;"), BooleanLiteral(True))
        self.assertEqual(single_expression("false;"), BooleanLiteral(False))

    def test_prefix_expressions(self) -> None:
        """Test that ! and - parse as prefix operators."""
        cases = {
            "!5;": PrefixExpression("!", IntegerLiteral(5)),
            "-15;": PrefixExpression("-", IntegerLiteral(15)),
            "!true;": PrefixExpression("!", BooleanLiteral(True)),
            "!false;": PrefixExpression("!", BooleanLiteral(False)),
        }
        for source, expected in cases.items():
            self.assertEqual(single_expression(source), expected, source)

    def test_infix_expressions(self) -> None:
        """Test that each binary operator parses as an infix expression."""
        for operator in ["+", "-", "*", "/", ">", "<", ">=", "<=", "==", "!="]:
            source = f"5 {operator} 5;"
            expected = InfixExpression(IntegerLiteral(5), operator, IntegerLiteral(5))
            self.assertEqual(single_expression(source), expected, source)

        self.assertEqual(
            single_expression("true != false"),
            InfixExpression(BooleanLiteral(True), "!=", BooleanLiteral(False)),
        )

    def test_operator_precedence(self) -> None:
        """Test that precedence and associativity match the parenthesized form."""
        cases = {
            "-a * b": "((-a) * b)",
            "!-a": "(!(-a))",
            "a + b + c": "((a + b) + c)",
            "a + b - c": "((a + b) - c)",
            "a - b - c": "((a - b) - c)",
            "a * b * c": "((a * b) * c)",
            "a * b / c": "((a * b) / c)",
            "a + b / c": "(a + (b / c))",
            "a + b * c": "(a + (b * c))",
            "a + b * c + d / e - f": "(((a + (b * c)) + (d / e)) - f)",
            "3 + 4; -5 * 5": "(3 + 4)((-5) * 5)",
            "5 > 4 == 3 < 4": "((5 > 4) == (3 < 4))",
            "5 < 4 != 3 > 4": "((5 < 4) != (3 > 4))",
            "5 <= 4 == 3 >= 4": "((5 <= 4) == (3 >= 4))",
            "3 + 4 * 5 == 3 * 1 + 4 * 5": "((3 + (4 * 5)) == ((3 * 1) + (4 * 5)))",
            "true": "true",
            "false": "false",
            "3 > 5 == false": "((3 > 5) == false)",
            "3 < 5 == true": "((3 < 5) == true)",
            "1 + (2 + 3) + 4": "((1 + (2 + 3)) + 4)",
            "(5 + 5) * 2": "((5 + 5) * 2)",
            "2 / (5 + 5)": "(2 / (5 + 5))",
            "-(5 + 5)": "(-(5 + 5))",
            "!(true == true)": "(!(true == true))",
            "a + add(b * c) + d": "((a + add((b * c))) + d)",
            "add(a, b, 1, 2 * 3, 4 + 5, add(6, 7 * 8))":
                "add(a, b, 1, (2 * 3), (4 + 5), add(6, (7 * 8)))",
            "add(a + b + c * d / f + g)": "add((((a + b) + ((c * d) / f)) + g))",
            "add(a, b)(c)": "add(a, b)(c)",
        }
        for source, expected in cases.items():
            self.assertEqual(str(parse_ok(source)), expected, source)

    def test_if_expression(self) -> None:
        """Test that if without else parses."""
        expected = IfExpression(
            InfixExpression(Identifier("x"), "<", Identifier("y")),
            BlockStatement([ExpressionStatement(Identifier("x"))]),
        )
        self.assertEqual(single_expression("if (x < y) { x }"), expected)

    def test_if_else_expression(self) -> None:
        """Test that if with else keeps both branches."""
        expected = IfExpression(
            InfixExpression(Identifier("x"), "<", Identifier("y")),
            BlockStatement([ExpressionStatement(Identifier("x"))]),
            BlockStatement([ExpressionStatement(Identifier("y"))]),
        )
        expression = single_expression("if (x < y) { x } else { y }")
        self.assertEqual(expression, expected)
        self.assertEqual(str(expression), "if(x < y) xelse y")

    def test_function_literal(self) -> None:
        """Test that fn literals keep parameters and body."""
        expected = FunctionLiteral(
            [Identifier("x"), Identifier("y")],
            BlockStatement([
                ExpressionStatement(InfixExpression(Identifier("x"), "+", Identifier("y"))),
            ]),
        )
        expression = single_expression("fn(x, y) { x + y; }")
        self.assertEqual(expression, expected)
        self.assertEqual(str(expression), "fn(x, y) (x + y)")

    def test_function_parameters(self) -> None:
        """Test that zero, one and many parameters parse."""
        cases = {
            "fn() {};": [],
            "fn(x) {};": ["x"],
            "fn(x, y, z) {};": ["x", "y", "z"],
        }
        for source, expected in cases.items():
            expression = single_expression(source)
            assert isinstance(expression, FunctionLiteral)
            self.assertEqual([p.value for p in expression.parameters], expected, source)

    def test_call_expression(self) -> None:
        """Test that calls keep their callee and arguments."""
        expected = CallExpression(Identifier("add"), [
            IntegerLiteral(1),
            InfixExpression(IntegerLiteral(2), "*", IntegerLiteral(3)),
            InfixExpression(IntegerLiteral(4), "+", IntegerLiteral(5)),
        ])
        self.assertEqual(single_expression("add(1, 2 * 3, 4 + 5);"), expected)

    def test_call_on_call_result(self) -> None:
        """Test that a call can be applied to a call's result."""
        expected = CallExpression(
            CallExpression(Identifier("add"), [Identifier("a"), Identifier("b")]),
            [Identifier("c")],
        )
        self.assertEqual(single_expression("add(a, b)(c)"), expected)


class TestErrors(unittest.TestCase):
    """Test that syntax errors are collected rather than raised."""

    def test_let_errors(self) -> None:
        """Test the errors reported for malformed let statements."""
        __, errors = parse_program("let x 5;\nlet = 10;\nlet 838383;")
        self.assertEqual(errors, [
            "expected next token to be =, got INT instead",
            "expected next token to be IDENT, got = instead",
            "no prefix parse function for = found",
            "expected next token to be IDENT, got INT instead",
        ])

    def test_missing_prefix_parse_fn(self) -> None:
        """Test that a token with no prefix handler is reported."""
        program, errors = parse_program("+5")
        self.assertEqual(errors, ["no prefix parse function for + found"])
        # The operand is still parsed on its own after the error
        self.assertEqual(str(program), "5")

    def test_missing_closing_paren(self) -> None:
        """Test that an unclosed group is reported."""
        __, errors = parse_program("(1 + 2")
        self.assertEqual(errors, ["expected next token to be ), got EOF instead"])

    def test_if_requires_parenthesized_condition(self) -> None:
        """Test that an if condition without parentheses is an error."""
        __, errors = parse_program("if x { 1 }")
        self.assertEqual(errors[0], "expected next token to be (, got IDENT instead")

    def test_bad_parameter(self) -> None:
        """Test that a non-identifier parameter is reported."""
        __, errors = parse_program("fn(1) { 1 }")
        self.assertEqual(errors[0], "expected next token to be IDENT, got INT instead")

    def test_integer_out_of_range(self) -> None:
        """Test that an integer literal beyond 64 bits is reported."""
        __, errors = parse_program("99999999999999999999")
        self.assertEqual(errors, ['could not parse "99999999999999999999" as integer'])

    def test_illegal_token(self) -> None:
        """Test that an illegal character is reported by the parser."""
        __, errors = parse_program("let a = @;")
        self.assertEqual(errors, ["no prefix parse function for ILLEGAL found"])

    def test_unterminated_block_does_not_hang(self) -> None:
        """Test that a block missing its closing brace ends at EOF."""
        program, errors = parse_program("fn(x) { x")
        self.assertEqual(errors, [])
        self.assertEqual(str(program), "fn(x) x")

    def test_absent_expressions_render_as_empty(self) -> None:
        """Test that missing children render as empty text."""
        program, errors = parse_program("let a = ;")
        self.assertEqual(errors, ["no prefix parse function for ; found"])
        self.assertEqual(str(program), "let a = ;")


if __name__ == "__main__":
    unittest.main()
