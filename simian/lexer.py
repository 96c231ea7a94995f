"""
Simian Lexer
============
Tokenizes Simian source code into a lazy stream of typed tokens.
Handles operators, keywords, integer and string literals, and identifiers.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator


class TokenType(Enum):
    """All token types in the Simian language."""
    ILLEGAL     = auto()
    EOF         = auto()

    # Identifiers and literals
    IDENT       = auto()   # add, foo_bar
    INT         = auto()   # 1343456
    STRING      = auto()   # "..."

    # Operators
    ASSIGN      = auto()   # =
    PLUS        = auto()   # +
    MINUS       = auto()   # -
    BANG        = auto()   # !
    ASTERISK    = auto()   # *
    SLASH       = auto()   # /
    LT          = auto()   # <
    GT          = auto()   # >
    EQ          = auto()   # ==
    NOT_EQ      = auto()   # !=

    # Delimiters
    COMMA       = auto()   # ,
    SEMICOLON   = auto()   # ;
    COLON       = auto()   # :
    LPAREN      = auto()   # (
    RPAREN      = auto()   # )
    LBRACE      = auto()   # {
    RBRACE      = auto()   # }
    LBRACKET    = auto()   # [
    RBRACKET    = auto()   # ]
    ELLIPSIS    = auto()   # ...

    # Keywords
    FUNCTION    = auto()   # fn
    LET         = auto()
    TRUE        = auto()
    FALSE       = auto()
    IF          = auto()
    ELSE        = auto()
    RETURN      = auto()
    FOR         = auto()

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Token:
    """A single token from the Simian source."""
    type: TokenType
    literal: str
    line: int = 1
    col: int = 1

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.literal!r}, L{self.line}:{self.col})"


SINGLE_CHAR_TOKENS = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.ASTERISK,
    "/": TokenType.SLASH,
    "<": TokenType.LT,
    ">": TokenType.GT,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    ":": TokenType.COLON,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
}

KEYWORDS = {
    "fn": TokenType.FUNCTION,
    "let": TokenType.LET,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "return": TokenType.RETURN,
    "for": TokenType.FOR,
}

ESCAPES = {"t": "\t", "n": "\n", "r": "\r", '"': '"', "\\": "\\"}

WHITESPACE = (" ", "\t", "\n", "\r")


def is_letter(ch: str | None) -> bool:
    return ch is not None and (("a" <= ch <= "z") or ("A" <= ch <= "Z") or ch == "_")


def is_digit(ch: str | None) -> bool:
    return ch is not None and "0" <= ch <= "9"


class Lexer:
    """
    Tokenizes Simian source code on demand.

    Usage:
        lexer = Lexer(source_code)
        token = lexer.next_token()     # one token at a time
        tokens = lexer.tokenize()      # or everything up to EOF
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.col = 1

    def _current(self) -> str | None:
        if self.pos >= len(self.source):
            return None
        return self.source[self.pos]

    def _peek(self, offset: int = 1) -> str | None:
        idx = self.pos + offset
        if idx >= len(self.source):
            return None
        return self.source[idx]

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return ch

    def _skip_whitespace(self):
        while self._current() in WHITESPACE:
            self._advance()

    def _read_string(self) -> Token:
        """Read a double-quoted string literal, resolving escapes."""
        start_line, start_col = self.line, self.col
        start = self.pos
        self._advance()  # consume opening "
        chars = []
        while self.pos < len(self.source):
            ch = self._advance()
            if ch == '"':
                return Token(TokenType.STRING, "".join(chars), start_line, start_col)
            if ch == "\\" and self.pos < len(self.source):
                next_ch = self._advance()
                chars.append(ESCAPES.get(next_ch, "\\" + next_ch))
            else:
                chars.append(ch)
        return Token(TokenType.ILLEGAL, self.source[start:], start_line, start_col)

    def _read_number(self) -> Token:
        start_line, start_col = self.line, self.col
        chars = []
        while is_digit(self._current()):
            chars.append(self._advance())
        return Token(TokenType.INT, "".join(chars), start_line, start_col)

    def _read_identifier(self) -> Token:
        """Read an identifier or keyword."""
        start_line, start_col = self.line, self.col
        chars = []
        while is_letter(self._current()):
            chars.append(self._advance())
        word = "".join(chars)
        return Token(KEYWORDS.get(word, TokenType.IDENT), word, start_line, start_col)

    def _read_operator(self, first: str, second: str, pair_type: TokenType,
                       single_type: TokenType) -> Token:
        """Read a one- or two-character operator using one character of lookahead."""
        line, col = self.line, self.col
        self._advance()
        if self._current() == second:
            self._advance()
            return Token(pair_type, first + second, line, col)
        return Token(single_type, first, line, col)

    def next_token(self) -> Token:
        """Consume and return exactly one token. Returns EOF forever at end of input."""
        self._skip_whitespace()

        ch = self._current()
        line, col = self.line, self.col

        if ch is None:
            return Token(TokenType.EOF, "", line, col)

        if ch == "=":
            return self._read_operator("=", "=", TokenType.EQ, TokenType.ASSIGN)

        if ch == "!":
            return self._read_operator("!", "=", TokenType.NOT_EQ, TokenType.BANG)

        if ch == '"':
            return self._read_string()

        if ch == ".":
            if self._peek() == "." and self._peek(2) == ".":
                self._advance()
                self._advance()
                self._advance()
                return Token(TokenType.ELLIPSIS, "...", line, col)
            self._advance()
            return Token(TokenType.ILLEGAL, ch, line, col)

        if ch in SINGLE_CHAR_TOKENS:
            self._advance()
            return Token(SINGLE_CHAR_TOKENS[ch], ch, line, col)

        if is_letter(ch):
            return self._read_identifier()

        if is_digit(ch):
            return self._read_number()

        self._advance()
        return Token(TokenType.ILLEGAL, ch, line, col)

    def __iter__(self) -> Iterator[Token]:
        """Generate tokens lazily, ending with (and including) the first EOF."""
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return

    def tokenize(self) -> list[Token]:
        """Tokenize the remaining source into a list of tokens, EOF included."""
        return list(self)
