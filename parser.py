"""Pratt parser for the Monkey language.

Expressions are parsed by precedence climbing: every token kind may have a
prefix handler (the token starts an expression) and an infix handler (the
token combines an already-parsed left expression with what follows). Syntax
errors are collected rather than raised, so one pass can report several.
"""

import logging
from enum import IntEnum
from typing import Callable

from lexer import Lexer
from monkey_ast import (
    Expression,
    Statement,
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
from monkey_token import Token, TokenType

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

INT64_MAX = 2**63 - 1


class Precedence(IntEnum):
    """Binding power of operators, lowest first."""

    LOWEST = 1
    EQUALS = 2
    LESSGREATER = 3
    SUM = 4
    PRODUCT = 5
    PREFIX = 6
    CALL = 7


PRECEDENCES: dict[TokenType, Precedence] = {
    TokenType.EQ: Precedence.EQUALS,
    TokenType.NOT_EQ: Precedence.EQUALS,
    TokenType.LT: Precedence.LESSGREATER,
    TokenType.GT: Precedence.LESSGREATER,
    TokenType.LT_EQ: Precedence.LESSGREATER,
    TokenType.GT_EQ: Precedence.LESSGREATER,
    TokenType.PLUS: Precedence.SUM,
    TokenType.MINUS: Precedence.SUM,
    TokenType.ASTERISK: Precedence.PRODUCT,
    TokenType.SLASH: Precedence.PRODUCT,
    TokenType.LPAREN: Precedence.CALL,
}

PrefixParseFn = Callable[[], "Expression | None"]
InfixParseFn = Callable[["Expression | None"], "Expression | None"]


class Parser:
    """Builds a Program from the tokens of a Lexer, keeping two tokens of lookahead."""

    def __init__(self, lexer: Lexer) -> None:
        self.lexer = lexer
        self.errors: list[str] = []

        self.prefix_parse_fns: dict[TokenType, PrefixParseFn] = {}
        self.infix_parse_fns: dict[TokenType, InfixParseFn] = {}

        self.register_prefix(TokenType.IDENT, self.parse_identifier)
        self.register_prefix(TokenType.INT, self.parse_integer_literal)
        self.register_prefix(TokenType.STRING, self.parse_string_literal)
        self.register_prefix(TokenType.TRUE, self.parse_boolean)
        self.register_prefix(TokenType.FALSE, self.parse_boolean)
        self.register_prefix(TokenType.BANG, self.parse_prefix_expression)
        self.register_prefix(TokenType.MINUS, self.parse_prefix_expression)
        self.register_prefix(TokenType.LPAREN, self.parse_grouped_expression)
        self.register_prefix(TokenType.IF, self.parse_if_expression)
        self.register_prefix(TokenType.FUNCTION, self.parse_function_literal)

        for token_type in PRECEDENCES:
            if token_type != TokenType.LPAREN:
                self.register_infix(token_type, self.parse_infix_expression)
        self.register_infix(TokenType.LPAREN, self.parse_call_expression)

        # Read two tokens so cur_token and peek_token are both set
        self.cur_token = Token(TokenType.EOF, "")
        self.peek_token = Token(TokenType.EOF, "")
        self.next_token()
        self.next_token()

    def register_prefix(self, token_type: TokenType, fn: PrefixParseFn) -> None:
        self.prefix_parse_fns[token_type] = fn

    def register_infix(self, token_type: TokenType, fn: InfixParseFn) -> None:
        self.infix_parse_fns[token_type] = fn

    def next_token(self) -> None:
        self.cur_token = self.peek_token
        self.peek_token = self.lexer.next_token()

    def cur_token_is(self, token_type: TokenType) -> bool:
        return self.cur_token.type == token_type

    def peek_token_is(self, token_type: TokenType) -> bool:
        return self.peek_token.type == token_type

    def expect_peek(self, token_type: TokenType) -> bool:
        """Advance if the next token has the given kind; otherwise record an error."""
        if self.peek_token_is(token_type):
            self.next_token()
            return True
        self.peek_error(token_type)
        return False

    def peek_error(self, token_type: TokenType) -> None:
        self.errors.append(
            f"expected next token to be {token_type}, got {self.peek_token.type} instead"
        )

    def no_prefix_parse_fn_error(self, token_type: TokenType) -> None:
        self.errors.append(f"no prefix parse function for {token_type} found")

    def peek_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.peek_token.type, Precedence.LOWEST)

    def cur_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.cur_token.type, Precedence.LOWEST)

    # Statements

    def parse_program(self) -> Program:
        """Parse statements until EOF. Statements that fail to parse are dropped."""
        statements: list[Statement] = []
        while not self.cur_token_is(TokenType.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.next_token()
        if self.errors:
            logger.debug("parsed program with %d error(s)", len(self.errors))
        return Program(statements)

    def parse_statement(self) -> Statement | None:
        if self.cur_token_is(TokenType.LET):
            return self.parse_let_statement()
        if self.cur_token_is(TokenType.RETURN):
            return self.parse_return_statement()
        if self.cur_token_is(TokenType.LBRACE):
            return self.parse_block_statement()
        if self.cur_token_is(TokenType.IDENT) and self.peek_token_is(TokenType.ASSIGN):
            return self.parse_assign_statement()
        return self.parse_expression_statement()

    def skip_optional_semicolon(self) -> None:
        if self.peek_token_is(TokenType.SEMICOLON):
            self.next_token()

    def parse_let_statement(self) -> LetStatement | None:
        if not self.expect_peek(TokenType.IDENT):
            return None
        name = Identifier(self.cur_token.literal)

        if not self.expect_peek(TokenType.ASSIGN):
            return None
        self.next_token()

        value = self.parse_expression(Precedence.LOWEST)
        self.skip_optional_semicolon()
        return LetStatement(name, value)

    def parse_assign_statement(self) -> AssignStatement:
        name = Identifier(self.cur_token.literal)
        self.next_token()  # onto '='
        self.next_token()  # onto the value

        value = self.parse_expression(Precedence.LOWEST)
        self.skip_optional_semicolon()
        return AssignStatement(name, value)

    def parse_return_statement(self) -> ReturnStatement:
        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)
        self.skip_optional_semicolon()
        return ReturnStatement(value)

    def parse_expression_statement(self) -> ExpressionStatement:
        expression = self.parse_expression(Precedence.LOWEST)
        self.skip_optional_semicolon()
        return ExpressionStatement(expression)

    def parse_block_statement(self) -> BlockStatement:
        """Parse from '{' through the matching '}' (or EOF)."""
        statements: list[Statement] = []
        self.next_token()
        while not self.cur_token_is(TokenType.RBRACE) and not self.cur_token_is(TokenType.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self.next_token()
        return BlockStatement(statements)

    # Expressions

    def parse_expression(self, precedence: Precedence) -> Expression | None:
        prefix = self.prefix_parse_fns.get(self.cur_token.type)
        if prefix is None:
            self.no_prefix_parse_fn_error(self.cur_token.type)
            return None
        left = prefix()

        while not self.peek_token_is(TokenType.SEMICOLON) and precedence < self.peek_precedence():
            infix = self.infix_parse_fns.get(self.peek_token.type)
            if infix is None:
                return left
            self.next_token()
            left = infix(left)

        return left

    def parse_identifier(self) -> Expression:
        return Identifier(self.cur_token.literal)

    def parse_integer_literal(self) -> Expression | None:
        literal = self.cur_token.literal
        if literal.isascii() and literal.isdigit() and int(literal) <= INT64_MAX:
            return IntegerLiteral(int(literal))
        self.errors.append(f'could not parse "{literal}" as integer')
        return None

    def parse_string_literal(self) -> Expression:
        return StringLiteral(self.cur_token.literal)

    def parse_boolean(self) -> Expression:
        return BooleanLiteral(self.cur_token_is(TokenType.TRUE))

    def parse_prefix_expression(self) -> Expression:
        operator = self.cur_token.literal
        self.next_token()
        right = self.parse_expression(Precedence.PREFIX)
        return PrefixExpression(operator, right)

    def parse_infix_expression(self, left: Expression | None) -> Expression:
        operator = self.cur_token.literal
        # Same precedence on the right stops the recursion: left associativity
        precedence = self.cur_precedence()
        self.next_token()
        right = self.parse_expression(precedence)
        return InfixExpression(left, operator, right)

    def parse_grouped_expression(self) -> Expression | None:
        self.next_token()
        expression = self.parse_expression(Precedence.LOWEST)
        if not self.expect_peek(TokenType.RPAREN):
            return None
        return expression

    def parse_if_expression(self) -> Expression | None:
        if not self.expect_peek(TokenType.LPAREN):
            return None
        self.next_token()
        condition = self.parse_expression(Precedence.LOWEST)
        if not self.expect_peek(TokenType.RPAREN):
            return None
        if not self.expect_peek(TokenType.LBRACE):
            return None
        consequence = self.parse_block_statement()

        alternative = None
        if self.peek_token_is(TokenType.ELSE):
            self.next_token()
            if not self.expect_peek(TokenType.LBRACE):
                return None
            alternative = self.parse_block_statement()

        return IfExpression(condition, consequence, alternative)

    def parse_function_literal(self) -> Expression | None:
        if not self.expect_peek(TokenType.LPAREN):
            return None
        parameters = self.parse_function_parameters()
        if parameters is None:
            return None
        if not self.expect_peek(TokenType.LBRACE):
            return None
        body = self.parse_block_statement()
        return FunctionLiteral(parameters, body)

    def parse_function_parameters(self) -> list[Identifier] | None:
        """Parse a comma-separated identifier list; cur_token is '(' on entry."""
        parameters: list[Identifier] = []
        if self.peek_token_is(TokenType.RPAREN):
            self.next_token()
            return parameters

        if not self.expect_peek(TokenType.IDENT):
            return None
        parameters.append(Identifier(self.cur_token.literal))

        while self.peek_token_is(TokenType.COMMA):
            self.next_token()
            if not self.expect_peek(TokenType.IDENT):
                return None
            parameters.append(Identifier(self.cur_token.literal))

        if not self.expect_peek(TokenType.RPAREN):
            return None
        return parameters

    def parse_call_expression(self, function: Expression | None) -> Expression | None:
        arguments = self.parse_call_arguments()
        if arguments is None:
            return None
        return CallExpression(function, arguments)

    def parse_call_arguments(self) -> list[Expression | None] | None:
        """Parse a comma-separated expression list; cur_token is '(' on entry."""
        arguments: list[Expression | None] = []
        if self.peek_token_is(TokenType.RPAREN):
            self.next_token()
            return arguments

        self.next_token()
        arguments.append(self.parse_expression(Precedence.LOWEST))

        while self.peek_token_is(TokenType.COMMA):
            self.next_token()
            self.next_token()
            arguments.append(self.parse_expression(Precedence.LOWEST))

        if not self.expect_peek(TokenType.RPAREN):
            return None
        return arguments


def parse_program(text: str) -> tuple[Program, list[str]]:
    """Parse a complete program from text, returning it with any syntax errors."""
    parser = Parser(Lexer(text))
    program = parser.parse_program()
    return program, parser.errors
