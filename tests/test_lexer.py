"""
Simian Lexer Tests
==================
Usage:
    python -m pytest tests/test_lexer.py -v
    python tests/test_lexer.py
"""
import sys
import os
import unittest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from simian.lexer import Lexer, Token, TokenType


def kinds(source: str) -> list[TokenType]:
    return [t.type for t in Lexer(source).tokenize()]


# ─────────────────────────────────────────────
#  Token Stream
# ─────────────────────────────────────────────

class TestNextToken(unittest.TestCase):

    def test_full_program(self):
        source = """let five = 5;
let add = fn(x, y) {
  x + y;
};
!-/*5;
5 < 10 > 5;
if (5 < 10) { return true; } else { return false; }
10 == 10; 10 != 9;
"foo bar"
[1, 2];
{"foo": "bar"}
for (...)
"""
        expected = [
            (TokenType.LET, "let"), (TokenType.IDENT, "five"), (TokenType.ASSIGN, "="),
            (TokenType.INT, "5"), (TokenType.SEMICOLON, ";"),
            (TokenType.LET, "let"), (TokenType.IDENT, "add"), (TokenType.ASSIGN, "="),
            (TokenType.FUNCTION, "fn"), (TokenType.LPAREN, "("), (TokenType.IDENT, "x"),
            (TokenType.COMMA, ","), (TokenType.IDENT, "y"), (TokenType.RPAREN, ")"),
            (TokenType.LBRACE, "{"), (TokenType.IDENT, "x"), (TokenType.PLUS, "+"),
            (TokenType.IDENT, "y"), (TokenType.SEMICOLON, ";"), (TokenType.RBRACE, "}"),
            (TokenType.SEMICOLON, ";"),
            (TokenType.BANG, "!"), (TokenType.MINUS, "-"), (TokenType.SLASH, "/"),
            (TokenType.ASTERISK, "*"), (TokenType.INT, "5"), (TokenType.SEMICOLON, ";"),
            (TokenType.INT, "5"), (TokenType.LT, "<"), (TokenType.INT, "10"),
            (TokenType.GT, ">"), (TokenType.INT, "5"), (TokenType.SEMICOLON, ";"),
            (TokenType.IF, "if"), (TokenType.LPAREN, "("), (TokenType.INT, "5"),
            (TokenType.LT, "<"), (TokenType.INT, "10"), (TokenType.RPAREN, ")"),
            (TokenType.LBRACE, "{"), (TokenType.RETURN, "return"), (TokenType.TRUE, "true"),
            (TokenType.SEMICOLON, ";"), (TokenType.RBRACE, "}"), (TokenType.ELSE, "else"),
            (TokenType.LBRACE, "{"), (TokenType.RETURN, "return"), (TokenType.FALSE, "false"),
            (TokenType.SEMICOLON, ";"), (TokenType.RBRACE, "}"),
            (TokenType.INT, "10"), (TokenType.EQ, "=="), (TokenType.INT, "10"),
            (TokenType.SEMICOLON, ";"), (TokenType.INT, "10"), (TokenType.NOT_EQ, "!="),
            (TokenType.INT, "9"), (TokenType.SEMICOLON, ";"),
            (TokenType.STRING, "foo bar"),
            (TokenType.LBRACKET, "["), (TokenType.INT, "1"), (TokenType.COMMA, ","),
            (TokenType.INT, "2"), (TokenType.RBRACKET, "]"), (TokenType.SEMICOLON, ";"),
            (TokenType.LBRACE, "{"), (TokenType.STRING, "foo"), (TokenType.COLON, ":"),
            (TokenType.STRING, "bar"), (TokenType.RBRACE, "}"),
            (TokenType.FOR, "for"), (TokenType.LPAREN, "("), (TokenType.ELLIPSIS, "..."),
            (TokenType.RPAREN, ")"),
            (TokenType.EOF, ""),
        ]
        tokens = Lexer(source).tokenize()
        self.assertEqual([(t.type, t.literal) for t in tokens], expected)

    def test_eof_is_repeated(self):
        lexer = Lexer("x")
        self.assertEqual(lexer.next_token().type, TokenType.IDENT)
        self.assertEqual(lexer.next_token().type, TokenType.EOF)
        self.assertEqual(lexer.next_token().type, TokenType.EOF)

    def test_iteration_stops_after_eof(self):
        tokens = list(Lexer("1 + 2"))
        self.assertEqual(tokens[-1].type, TokenType.EOF)
        self.assertEqual(len(tokens), 4)

    def test_empty_source(self):
        self.assertEqual(kinds(""), [TokenType.EOF])
        self.assertEqual(kinds(" \t\r\n "), [TokenType.EOF])


# ─────────────────────────────────────────────
#  Literals & Identifiers
# ─────────────────────────────────────────────

class TestLiterals(unittest.TestCase):

    def test_identifier_with_underscore(self):
        token = Lexer("find_media").next_token()
        self.assertEqual(token, Token(TokenType.IDENT, "find_media", 1, 1))

    def test_digits_end_identifier(self):
        self.assertEqual(kinds("abc1"), [TokenType.IDENT, TokenType.INT, TokenType.EOF])

    def test_keywords_are_case_sensitive(self):
        self.assertEqual(kinds("Let"), [TokenType.IDENT, TokenType.EOF])

    def test_minus_is_never_part_of_a_number(self):
        self.assertEqual(kinds("-5"), [TokenType.MINUS, TokenType.INT, TokenType.EOF])

    def test_string_escapes(self):
        token = Lexer(r'"a\tb\nc\r\"d\\"').next_token()
        self.assertEqual(token.type, TokenType.STRING)
        self.assertEqual(token.literal, 'a\tb\nc\r"d\\')

    def test_unknown_escape_kept_literally(self):
        token = Lexer(r'"a\qb"').next_token()
        self.assertEqual(token.literal, r"a\qb")

    def test_empty_string(self):
        token = Lexer('""').next_token()
        self.assertEqual((token.type, token.literal), (TokenType.STRING, ""))

    def test_unterminated_string_is_illegal(self):
        tokens = Lexer('"abc').tokenize()
        self.assertEqual(tokens[0].type, TokenType.ILLEGAL)
        self.assertEqual(tokens[0].literal, '"abc')
        self.assertEqual(tokens[1].type, TokenType.EOF)


# ─────────────────────────────────────────────
#  Illegal Input & Positions
# ─────────────────────────────────────────────

class TestIllegalAndPositions(unittest.TestCase):

    def test_unknown_character(self):
        token = Lexer("@").next_token()
        self.assertEqual((token.type, token.literal), (TokenType.ILLEGAL, "@"))

    def test_lone_dots_are_illegal(self):
        self.assertEqual(
            kinds(".."), [TokenType.ILLEGAL, TokenType.ILLEGAL, TokenType.EOF]
        )

    def test_line_and_column(self):
        tokens = Lexer("let x\n  = 10;").tokenize()
        self.assertEqual((tokens[0].line, tokens[0].col), (1, 1))
        self.assertEqual((tokens[1].line, tokens[1].col), (1, 5))
        self.assertEqual((tokens[2].line, tokens[2].col), (2, 3))
        self.assertEqual((tokens[3].line, tokens[3].col), (2, 5))

    def test_token_type_prints_its_name(self):
        self.assertEqual(str(TokenType.RBRACE), "RBRACE")


if __name__ == "__main__":
    unittest.main(verbosity=2)
