"""Lexer for the Monkey language."""

from monkey_token import Token, TokenType, lookup_ident


# Two-character operators, keyed by their first character
TWO_CHAR_OPERATORS: dict[str, dict[str, TokenType]] = {
    "=": {"=": TokenType.EQ},
    "!": {"=": TokenType.NOT_EQ},
    "<": {"=": TokenType.LT_EQ},
    ">": {"=": TokenType.GT_EQ},
}

SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "=": TokenType.ASSIGN,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "!": TokenType.BANG,
    "*": TokenType.ASTERISK,
    "/": TokenType.SLASH,
    "<": TokenType.LT,
    ">": TokenType.GT,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
}


def is_letter(char: str) -> bool:
    return char == "_" or ("a" <= char <= "z") or ("A" <= char <= "Z")


def is_digit(char: str) -> bool:
    return "0" <= char <= "9"


class Lexer:
    """Pull-based scanner turning source text into tokens one at a time."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def peek(self) -> str | None:
        """Peek at current character without consuming it."""
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def advance(self) -> str | None:
        """Consume and return current character."""
        if self.pos >= len(self.text):
            return None
        char = self.text[self.pos]
        self.pos += 1
        return char

    def skip_whitespace(self) -> None:
        char = self.peek()
        while char is not None and char in " \t\n\r":
            self.advance()
            char = self.peek()

    def read_while(self, predicate) -> str:
        start = self.pos
        char = self.peek()
        while char is not None and predicate(char):
            self.advance()
            char = self.peek()
        return self.text[start:self.pos]

    def read_string(self) -> str:
        """Read a string literal. An unterminated string runs to end of input."""
        self.advance()  # Skip opening quote
        start = self.pos
        while True:
            char = self.peek()
            if char is None:
                return self.text[start:self.pos]
            if char == '"':
                value = self.text[start:self.pos]
                self.advance()
                return value
            self.advance()

    def next_token(self) -> Token:
        """Return the next token. Keeps returning EOF once input is exhausted."""
        self.skip_whitespace()
        char = self.peek()

        if char is None:
            return Token(TokenType.EOF, "")

        if char in TWO_CHAR_OPERATORS:
            following = self.text[self.pos + 1:self.pos + 2]
            two_char = TWO_CHAR_OPERATORS[char].get(following)
            if two_char is not None:
                self.pos += 2
                return Token(two_char, char + following)

        if char in SINGLE_CHAR_TOKENS:
            self.advance()
            return Token(SINGLE_CHAR_TOKENS[char], char)

        if char == '"':
            return Token(TokenType.STRING, self.read_string())

        if is_letter(char):
            ident = self.read_while(lambda c: is_letter(c) or is_digit(c))
            return Token(lookup_ident(ident), ident)

        if is_digit(char):
            return Token(TokenType.INT, self.read_while(is_digit))

        self.advance()
        return Token(TokenType.ILLEGAL, char)


def tokenize(text: str) -> list[Token]:
    """Scan all of text, up to and including the first EOF token."""
    lexer = Lexer(text)
    tokens: list[Token] = []
    while True:
        token = lexer.next_token()
        tokens.append(token)
        if token.type == TokenType.EOF:
            return tokens
