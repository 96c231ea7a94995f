"""
Simian Parser
=============
Pratt (precedence-climbing) parser that builds an Abstract Syntax Tree
from the token stream produced by the Lexer.

Supports:
  - let / return / for statements and free-standing blocks
  - Prefix, infix (including right-associative assignment), call and index expressions
  - if / else if / else chains with block or single-statement bodies
  - Function literals with an optional trailing variadic parameter
  - Array and hash literals
  - Error accumulation (collects all parse errors instead of failing fast)
"""
import json
import logging
from collections import deque
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable

from .lexer import Lexer, Token, TokenType
from .objects import INT64_MAX

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────
#  AST Node Types
# ─────────────────────────────────────────────────────────────

@dataclass
class ASTNode:
    """Base class for all AST nodes."""
    node_type: str = ""
    line: int = 0
    col: int = 0


@dataclass
class Program(ASTNode):
    """Root node containing all top-level statements."""
    statements: list[ASTNode] = field(default_factory=list)

    def __post_init__(self):
        self.node_type = "program"

    def __str__(self) -> str:
        return "".join(str(s) for s in self.statements)


@dataclass
class LetStatement(ASTNode):
    """let name = value"""
    name: str = ""
    value: ASTNode | None = None

    def __post_init__(self):
        self.node_type = "let_statement"

    def __str__(self) -> str:
        return f"let {self.name} = {self.value};"


@dataclass
class ReturnStatement(ASTNode):
    value: ASTNode | None = None

    def __post_init__(self):
        self.node_type = "return_statement"

    def __str__(self) -> str:
        return f"return {self.value};"


@dataclass
class ExpressionStatement(ASTNode):
    """An expression used in statement position."""
    expression: ASTNode | None = None

    def __post_init__(self):
        self.node_type = "expression_statement"

    def __str__(self) -> str:
        return f"{self.expression};"


@dataclass
class BlockStatement(ASTNode):
    """An ordered sequence of statements between braces."""
    statements: list[ASTNode] = field(default_factory=list)

    def __post_init__(self):
        self.node_type = "block_statement"

    def __str__(self) -> str:
        if not self.statements:
            return "{ }"
        return "{ " + " ".join(str(s) for s in self.statements) + " }"


@dataclass
class ForLoopStatement(ASTNode):
    """for (init; condition; step) body. Every header clause is optional."""
    init: ASTNode | None = None
    condition: ASTNode | None = None
    step: ASTNode | None = None
    body: BlockStatement | None = None

    def __post_init__(self):
        self.node_type = "for_loop_statement"

    def __str__(self) -> str:
        init = str(self.init) if self.init is not None else ";"
        condition = str(self.condition) if self.condition is not None else ""
        step = str(self.step) if self.step is not None else ""
        return f"for ({init} {condition}; {step}) {self.body}"


@dataclass
class Identifier(ASTNode):
    value: str = ""

    def __post_init__(self):
        self.node_type = "identifier"

    def __str__(self) -> str:
        return self.value


@dataclass
class IntegerLiteral(ASTNode):
    value: int = 0

    def __post_init__(self):
        self.node_type = "integer_literal"

    def __str__(self) -> str:
        return str(self.value)


@dataclass
class StringLiteral(ASTNode):
    value: str = ""

    def __post_init__(self):
        self.node_type = "string_literal"

    def __str__(self) -> str:
        return json.dumps(self.value)


@dataclass
class BooleanLiteral(ASTNode):
    value: bool = False

    def __post_init__(self):
        self.node_type = "boolean_literal"

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass
class PrefixExpression(ASTNode):
    """!x or -x"""
    operator: str = ""
    right: ASTNode | None = None

    def __post_init__(self):
        self.node_type = "prefix_expression"

    def __str__(self) -> str:
        return f"({self.operator}{self.right})"


@dataclass
class InfixExpression(ASTNode):
    """left <op> right, where <op> may also be the assignment operator."""
    operator: str = ""
    left: ASTNode | None = None
    right: ASTNode | None = None

    def __post_init__(self):
        self.node_type = "infix_expression"

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


@dataclass
class CallExpression(ASTNode):
    function: ASTNode | None = None
    arguments: list[ASTNode] = field(default_factory=list)

    def __post_init__(self):
        self.node_type = "call_expression"

    def __str__(self) -> str:
        return f"{self.function}({', '.join(str(a) for a in self.arguments)})"


@dataclass
class IndexExpression(ASTNode):
    left: ASTNode | None = None
    index: ASTNode | None = None

    def __post_init__(self):
        self.node_type = "index_expression"

    def __str__(self) -> str:
        return f"({self.left}[{self.index}])"


@dataclass
class ArrayLiteral(ASTNode):
    elements: list[ASTNode] = field(default_factory=list)

    def __post_init__(self):
        self.node_type = "array_literal"

    def __str__(self) -> str:
        return "[" + ", ".join(str(e) for e in self.elements) + "]"


@dataclass
class HashLiteral(ASTNode):
    """{key: value, ...} with pairs kept in source order."""
    pairs: list[tuple[ASTNode, ASTNode]] = field(default_factory=list)

    def __post_init__(self):
        self.node_type = "hash_literal"

    def __str__(self) -> str:
        return "{" + ", ".join(f"{k}: {v}" for k, v in self.pairs) + "}"


@dataclass
class FunctionParameter:
    """A named parameter; a variadic one collects the remaining arguments."""
    name: str
    is_variadic: bool = False

    def __str__(self) -> str:
        return f"...{self.name}" if self.is_variadic else self.name


@dataclass
class FunctionLiteral(ASTNode):
    parameters: list[FunctionParameter] = field(default_factory=list)
    body: BlockStatement | None = None

    def __post_init__(self):
        self.node_type = "function_literal"

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"fn({params}) {self.body}"


@dataclass
class IfClause:
    condition: ASTNode
    consequence: BlockStatement

    def __str__(self) -> str:
        return f"if ({self.condition}) {self.consequence}"


@dataclass
class IfExpression(ASTNode):
    """
    if (c1) { ... } else if (c2) { ... } else { ... }

    Clauses are tested in order; ``alternative`` runs when none match.
    """
    clauses: list[IfClause] = field(default_factory=list)
    alternative: BlockStatement | None = None

    def __post_init__(self):
        self.node_type = "if_expression"

    def __str__(self) -> str:
        text = " else ".join(str(c) for c in self.clauses)
        if self.alternative is not None:
            text += f" else {self.alternative}"
        return text


# ─────────────────────────────────────────────────────────────
#  Precedence
# ─────────────────────────────────────────────────────────────

class Precedence(IntEnum):
    LOWEST      = 1
    ASSIGN      = 2   # x = 1
    EQUALS      = 3   # ==
    LESSGREATER = 4   # < or >
    SUM         = 5   # +
    PRODUCT     = 6   # *
    PREFIX      = 7   # -x or !x
    CALL        = 8   # fn(x)
    INDEX       = 9   # array[index]


PRECEDENCES: dict[TokenType, Precedence] = {
    TokenType.ASSIGN: Precedence.ASSIGN,
    TokenType.EQ: Precedence.EQUALS,
    TokenType.NOT_EQ: Precedence.EQUALS,
    TokenType.LT: Precedence.LESSGREATER,
    TokenType.GT: Precedence.LESSGREATER,
    TokenType.PLUS: Precedence.SUM,
    TokenType.MINUS: Precedence.SUM,
    TokenType.SLASH: Precedence.PRODUCT,
    TokenType.ASTERISK: Precedence.PRODUCT,
    TokenType.LPAREN: Precedence.CALL,
    TokenType.LBRACKET: Precedence.INDEX,
}

RIGHT_ASSOCIATIVE = frozenset({TokenType.ASSIGN})


# ─────────────────────────────────────────────────────────────
#  Parse Error (for accumulation)
# ─────────────────────────────────────────────────────────────

@dataclass
class ParseError:
    """A single parse error with location."""
    message: str
    line: int
    col: int

    def __str__(self) -> str:
        return f"L{self.line}:{self.col}: {self.message}"


# ─────────────────────────────────────────────────────────────
#  Parser
# ─────────────────────────────────────────────────────────────

class Parser:
    """
    Pratt parser for Simian source.

    Usage:
        parser = Parser(Lexer(source))
        program = parser.parse_program()
        if parser.errors:
            ...

    Tokens are pulled from the lexer lazily; a small buffer provides the
    lookahead needed to tell a block statement from a hash literal.
    """

    PREFIX_RULES: dict[TokenType, str] = {
        TokenType.IDENT: "_parse_identifier",
        TokenType.INT: "_parse_integer_literal",
        TokenType.STRING: "_parse_string_literal",
        TokenType.TRUE: "_parse_boolean",
        TokenType.FALSE: "_parse_boolean",
        TokenType.BANG: "_parse_prefix_expression",
        TokenType.MINUS: "_parse_prefix_expression",
        TokenType.LPAREN: "_parse_grouped_expression",
        TokenType.LBRACKET: "_parse_array_literal",
        TokenType.LBRACE: "_parse_hash_literal",
        TokenType.IF: "_parse_if_expression",
        TokenType.FUNCTION: "_parse_function_literal",
    }

    INFIX_RULES: dict[TokenType, str] = {
        TokenType.ASSIGN: "_parse_infix_expression",
        TokenType.EQ: "_parse_infix_expression",
        TokenType.NOT_EQ: "_parse_infix_expression",
        TokenType.LT: "_parse_infix_expression",
        TokenType.GT: "_parse_infix_expression",
        TokenType.PLUS: "_parse_infix_expression",
        TokenType.MINUS: "_parse_infix_expression",
        TokenType.SLASH: "_parse_infix_expression",
        TokenType.ASTERISK: "_parse_infix_expression",
        TokenType.LPAREN: "_parse_call_expression",
        TokenType.LBRACKET: "_parse_index_expression",
    }

    def __init__(self, tokens: Iterable[Token]):
        self._tokens = iter(tokens)
        self._buffer: deque[Token] = deque()
        self._eof = Token(TokenType.EOF, "")
        self.errors: list[ParseError] = []

    def error_messages(self) -> list[str]:
        return [e.message for e in self.errors]

    # ─────────────────────────────────────────────────────────
    #  Token stream
    # ─────────────────────────────────────────────────────────

    def _fill(self, count: int):
        while len(self._buffer) < count:
            token = next(self._tokens, None)
            if token is None:
                token = self._eof
            elif token.type == TokenType.EOF:
                self._eof = token
            self._buffer.append(token)

    def _peek(self, offset: int = 0) -> Token:
        self._fill(offset + 1)
        return self._buffer[offset]

    def _current(self) -> Token:
        return self._peek(0)

    def _advance(self) -> Token:
        self._fill(1)
        return self._buffer.popleft()

    def _at(self, token_type: TokenType) -> bool:
        return self._current().type == token_type

    def _expect(self, token_type: TokenType) -> Token:
        token = self._current()
        if token.type != token_type:
            self._fail(f"expected next token to be {token_type}, got {token.type} instead")
        return self._advance()

    def _record_error(self, message: str):
        """Record a parse error at the current token, continue parsing."""
        token = self._current()
        self.errors.append(ParseError(message, token.line, token.col))

    def _fail(self, message: str):
        """Record a parse error and abandon the current statement."""
        self._record_error(message)
        raise SyntaxError(message)

    def _skip_semicolons(self):
        while self._at(TokenType.SEMICOLON):
            self._advance()

    def _synchronize(self):
        """Skip tokens until just past the next ';' (or EOF)."""
        while not self._at(TokenType.EOF):
            if self._advance().type == TokenType.SEMICOLON:
                return

    # ─────────────────────────────────────────────────────────
    #  Top-Level Parsing
    # ─────────────────────────────────────────────────────────

    def parse_program(self) -> Program:
        """Parse the token stream into a Program, collecting errors."""
        first = self._current()
        program = Program(line=first.line, col=first.col)

        while True:
            self._skip_semicolons()
            if self._at(TokenType.EOF):
                break
            try:
                program.statements.append(self._parse_statement())
            except SyntaxError:
                # Error already recorded; synchronize and continue
                self._synchronize()

        logger.debug(
            "parsed %d statement(s) with %d error(s)",
            len(program.statements), len(self.errors),
        )
        return program

    def _parse_statement(self) -> ASTNode:
        """Parse one statement and its optional trailing ';'."""
        token = self._current()

        if token.type == TokenType.FOR:
            stmt = self._parse_for_loop_statement()
        elif token.type == TokenType.RETURN:
            stmt = self._parse_return_statement()
        elif token.type == TokenType.LBRACE and self._brace_opens_block():
            stmt = self._parse_block_statement()
        else:
            stmt = self._parse_simple_statement()

        if self._at(TokenType.SEMICOLON):
            self._advance()
        return stmt

    def _parse_simple_statement(self) -> ASTNode:
        """A let or expression statement, without its terminator."""
        if self._at(TokenType.LET):
            return self._parse_let_statement()
        return self._parse_expression_statement()

    def _parse_let_statement(self) -> LetStatement:
        token = self._advance()
        name = self._expect(TokenType.IDENT)
        self._expect(TokenType.ASSIGN)
        value = self._parse_expression(Precedence.LOWEST)
        return LetStatement(name=name.literal, value=value, line=token.line, col=token.col)

    def _parse_return_statement(self) -> ReturnStatement:
        token = self._advance()
        value = self._parse_expression(Precedence.LOWEST)
        return ReturnStatement(value=value, line=token.line, col=token.col)

    def _parse_expression_statement(self) -> ExpressionStatement:
        token = self._current()
        expr = self._parse_expression(Precedence.LOWEST)
        return ExpressionStatement(expression=expr, line=token.line, col=token.col)

    def _parse_for_loop_statement(self) -> ForLoopStatement:
        """Parse: for (init?; condition?; step?) body."""
        token = self._advance()
        self._expect(TokenType.LPAREN)
        loop = ForLoopStatement(line=token.line, col=token.col)

        if not self._at(TokenType.SEMICOLON):
            loop.init = self._parse_simple_statement()
            if not self._at(TokenType.SEMICOLON):
                self._fail(
                    f"no semicolon after for loop initialization, found {self._current().type}."
                )
        self._advance()

        if not self._at(TokenType.SEMICOLON):
            loop.condition = self._parse_expression(Precedence.LOWEST)
        self._expect(TokenType.SEMICOLON)

        if not self._at(TokenType.RPAREN):
            loop.step = self._parse_expression(Precedence.LOWEST)
        self._expect(TokenType.RPAREN)

        loop.body = self._parse_body()
        return loop

    # ─────────────────────────────────────────────────────────
    #  Blocks
    # ─────────────────────────────────────────────────────────

    def _brace_opens_block(self) -> bool:
        """
        Decide whether a '{' in statement position opens a block.

        It is a hash literal when a ':' shows up at its own nesting level
        before anything that can only appear in a block. '{}' is an empty hash.
        """
        depth = 0
        offset = 1
        while True:
            token_type = self._peek(offset).type
            if token_type == TokenType.EOF:
                return True
            if depth == 0:
                if token_type == TokenType.COLON:
                    return False
                if token_type in (TokenType.SEMICOLON, TokenType.LET,
                                  TokenType.RETURN, TokenType.FOR):
                    return True
                if token_type == TokenType.RBRACE:
                    return offset > 1
            if token_type in (TokenType.LPAREN, TokenType.LBRACKET, TokenType.LBRACE):
                depth += 1
            elif token_type in (TokenType.RPAREN, TokenType.RBRACKET, TokenType.RBRACE):
                depth -= 1
            offset += 1

    def _parse_block_statement(self) -> BlockStatement:
        """Parse: { statement* }"""
        token = self._expect(TokenType.LBRACE)
        block = BlockStatement(line=token.line, col=token.col)

        while True:
            self._skip_semicolons()
            if self._at(TokenType.RBRACE) or self._at(TokenType.EOF):
                break
            block.statements.append(self._parse_statement())

        if self._at(TokenType.EOF):
            self._record_error("block statement not closed by RBRACE")
        else:
            self._advance()
        return block

    def _parse_body(self) -> BlockStatement:
        """A braced block, or a single statement wrapped as one."""
        if self._at(TokenType.LBRACE):
            return self._parse_block_statement()
        token = self._current()
        return BlockStatement(
            statements=[self._parse_statement()], line=token.line, col=token.col,
        )

    # ─────────────────────────────────────────────────────────
    #  Expressions
    # ─────────────────────────────────────────────────────────

    def _parse_expression(self, precedence: Precedence) -> ASTNode:
        token = self._current()
        rule = self.PREFIX_RULES.get(token.type)
        if rule is None:
            if token.type == TokenType.ILLEGAL:
                self._fail(f"illegal token {token.literal!r}")
            self._fail(f"no prefix parse function for {token.type} found.")
        left = getattr(self, rule)()

        while (not self._at(TokenType.SEMICOLON)
               and precedence < PRECEDENCES.get(self._current().type, Precedence.LOWEST)):
            left = getattr(self, self.INFIX_RULES[self._current().type])(left)

        return left

    def _parse_identifier(self) -> Identifier:
        token = self._advance()
        return Identifier(value=token.literal, line=token.line, col=token.col)

    def _parse_integer_literal(self) -> IntegerLiteral:
        token = self._current()
        value = int(token.literal)
        if value > INT64_MAX:
            self._fail(f'could not parse "{token.literal}" as integer')
        self._advance()
        return IntegerLiteral(value=value, line=token.line, col=token.col)

    def _parse_string_literal(self) -> StringLiteral:
        token = self._advance()
        return StringLiteral(value=token.literal, line=token.line, col=token.col)

    def _parse_boolean(self) -> BooleanLiteral:
        token = self._advance()
        return BooleanLiteral(
            value=token.type == TokenType.TRUE, line=token.line, col=token.col,
        )

    def _parse_prefix_expression(self) -> PrefixExpression:
        token = self._advance()
        right = self._parse_expression(Precedence.PREFIX)
        return PrefixExpression(
            operator=token.literal, right=right, line=token.line, col=token.col,
        )

    def _parse_infix_expression(self, left: ASTNode) -> InfixExpression:
        token = self._advance()
        precedence = PRECEDENCES[token.type]
        if token.type in RIGHT_ASSOCIATIVE:
            precedence = Precedence(precedence - 1)
        right = self._parse_expression(precedence)
        return InfixExpression(
            operator=token.literal, left=left, right=right, line=token.line, col=token.col,
        )

    def _parse_grouped_expression(self) -> ASTNode:
        self._advance()  # consume (
        expr = self._parse_expression(Precedence.LOWEST)
        self._expect(TokenType.RPAREN)
        return expr

    def _parse_expression_list(self, end: TokenType) -> list[ASTNode]:
        """Parse comma-separated expressions up to and including ``end``."""
        items: list[ASTNode] = []
        if self._at(end):
            self._advance()
            return items

        items.append(self._parse_expression(Precedence.LOWEST))
        while self._at(TokenType.COMMA):
            self._advance()
            items.append(self._parse_expression(Precedence.LOWEST))

        self._expect(end)
        return items

    def _parse_array_literal(self) -> ArrayLiteral:
        token = self._advance()  # consume [
        elements = self._parse_expression_list(TokenType.RBRACKET)
        return ArrayLiteral(elements=elements, line=token.line, col=token.col)

    def _parse_hash_literal(self) -> HashLiteral:
        token = self._advance()  # consume {
        hash_lit = HashLiteral(line=token.line, col=token.col)

        while not self._at(TokenType.RBRACE):
            key = self._parse_expression(Precedence.LOWEST)
            self._expect(TokenType.COLON)
            value = self._parse_expression(Precedence.LOWEST)
            hash_lit.pairs.append((key, value))
            if not self._at(TokenType.RBRACE):
                self._expect(TokenType.COMMA)

        self._advance()  # consume }
        return hash_lit

    def _parse_call_expression(self, function: ASTNode) -> CallExpression:
        token = self._advance()  # consume (
        arguments = self._parse_expression_list(TokenType.RPAREN)
        return CallExpression(
            function=function, arguments=arguments, line=token.line, col=token.col,
        )

    def _parse_index_expression(self, left: ASTNode) -> IndexExpression:
        token = self._advance()  # consume [
        index = self._parse_expression(Precedence.LOWEST)
        self._expect(TokenType.RBRACKET)
        return IndexExpression(left=left, index=index, line=token.line, col=token.col)

    def _parse_if_expression(self) -> IfExpression:
        """Parse: if (c) body [else if (c) body]* [else body]"""
        token = self._advance()
        expr = IfExpression(line=token.line, col=token.col)
        expr.clauses.append(self._parse_if_clause())

        while self._at(TokenType.ELSE):
            self._advance()
            if self._at(TokenType.IF):
                self._advance()
                expr.clauses.append(self._parse_if_clause())
            else:
                expr.alternative = self._parse_body()
                break

        return expr

    def _parse_if_clause(self) -> IfClause:
        self._expect(TokenType.LPAREN)
        condition = self._parse_expression(Precedence.LOWEST)
        self._expect(TokenType.RPAREN)
        return IfClause(condition=condition, consequence=self._parse_body())

    def _parse_function_literal(self) -> FunctionLiteral:
        """Parse: fn(a, b, ...rest) { body }"""
        token = self._advance()
        self._expect(TokenType.LPAREN)
        literal = FunctionLiteral(line=token.line, col=token.col)

        if self._at(TokenType.RPAREN):
            self._advance()
        else:
            while True:
                variadic = self._at(TokenType.ELLIPSIS)
                if variadic:
                    self._advance()
                name = self._expect(TokenType.IDENT)
                literal.parameters.append(FunctionParameter(name.literal, variadic))
                if not self._at(TokenType.COMMA):
                    break
                self._advance()
            self._expect(TokenType.RPAREN)

        if not self._at(TokenType.LBRACE):
            self._expect(TokenType.LBRACE)
        literal.body = self._parse_block_statement()
        return literal


def parse(source: str) -> tuple[Program, list[str]]:
    """Lex and parse ``source``; the returned error list must be checked."""
    parser = Parser(Lexer(source))
    program = parser.parse_program()
    return program, parser.error_messages()
