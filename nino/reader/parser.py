"""
  Nino Parser

Recursive descent over the token list produced by nino.reader.lexer.

Expression grammar, lowest to highest precedence; every binary level is left
associative:

    expression -> equality
    equality   -> comparison (("==" | "!=") comparison)*
    comparison -> term (("<" | "<=" | ">" | ">=") term)*
    term       -> factor (("+" | "-") factor)*
    factor     -> unary (("*" | "/" | "%" | "mod") unary)*
    unary      -> "-" unary | primary
    primary    -> atom ("?" "{" arms "}")?

A '(' is ambiguous: it opens either a parenthesised group or the parameter list
of a function literal `(p:T, ...):T => body`. The parser tries the group on a
cloned cursor first and only commits the clone's position if that succeeds, so
a failed attempt never consumes tokens from the live cursor.

No error recovery: the first failure aborts the parse with NinoParserError.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence, TypeVar

from nino.errors import NinoParserError
from nino.reader.lexer import OPERATORS, Token, TokenKind, tokenize
from nino.types.ast import (
    Array,
    BinaryOperation,
    BinaryOperator,
    Bool,
    BOOLEAN,
    Char,
    CHAR,
    Declaration,
    Expression,
    FUNCTION,
    FunctionCall,
    FunctionDeclaration,
    Identifier,
    Item,
    Match,
    Number,
    NUMBER,
    Parameter,
    Type,
    array_of,
    string_literal,
)

T = TypeVar("T")

TYPE_NAMES: dict[str, Type] = {
    "num": NUMBER,
    "char": CHAR,
    "bool": BOOLEAN,
    "fn": FUNCTION,
    "[num]": array_of(NUMBER),
    "[bool]": array_of(BOOLEAN),
    "[char]": array_of(CHAR),
    "[fn]": array_of(FUNCTION),
}

EQUALITY_OPERATORS = {
    TokenKind.EQUAL: BinaryOperator.EQUAL,
    TokenKind.NOT_EQUAL: BinaryOperator.NOT_EQUAL,
}

COMPARISON_OPERATORS = {
    TokenKind.LESS: BinaryOperator.LESS_THAN,
    TokenKind.LESS_EQUAL: BinaryOperator.LESS_EQUAL_THAN,
    TokenKind.GREATER: BinaryOperator.GREATER_THAN,
    TokenKind.GREATER_EQUAL: BinaryOperator.GREATER_EQUAL_THAN,
}

TERM_OPERATORS = {
    TokenKind.PLUS: BinaryOperator.ADD,
    TokenKind.MINUS: BinaryOperator.SUBTRACT,
}

FACTOR_OPERATORS = {
    TokenKind.STAR: BinaryOperator.MULTIPLY,
    TokenKind.SLASH: BinaryOperator.DIVIDE,
    TokenKind.MODULUS: BinaryOperator.MODULO,
}

_SPELLING = {kind: text for text, kind in OPERATORS.items()}
_SPELLING[TokenKind.LET] = "let"


def describe(token: Token) -> str:
    """Short human-readable form of a token for error messages."""
    if token.kind is TokenKind.EOF:
        return "end of input"
    if token.kind in _SPELLING:
        return f"'{_SPELLING[token.kind]}'"
    if token.kind is TokenKind.NUMBER:
        return f"number {token.value:g}"
    if token.kind is TokenKind.BOOLEAN:
        return "true" if token.value else "false"
    if token.kind is TokenKind.CHAR:
        return f"character '{chr(token.value)}'"
    if token.kind is TokenKind.STRING:
        return f'string "{token.value}"'
    if token.kind is TokenKind.TYPE:
        return f"type '{token.value}'"
    return f"identifier '{token.value}'"


class TokenStream:
    """Rewindable cursor over an immutable token list."""

    __slots__ = ("tokens", "pos")

    def __init__(self, tokens: Sequence[Token], pos: int = 0):
        if not tokens or tokens[-1].kind is not TokenKind.EOF:
            end = tokens[-1].end if tokens else 0
            tokens = list(tokens) + [Token(TokenKind.EOF, end, end)]
        self.tokens: Sequence[Token] = tokens
        self.pos = pos

    def peek(self, ahead: int = 0) -> Token:
        index = min(self.pos + ahead, len(self.tokens) - 1)
        return self.tokens[index]

    def advance(self) -> Token:
        token = self.peek()
        if token.kind is not TokenKind.EOF:
            self.pos += 1
        return token

    def check(self, kind: TokenKind) -> bool:
        return self.peek().kind is kind

    def accept(self, kind: TokenKind) -> Optional[Token]:
        """Consume and return the next token if it is of `kind`."""
        if self.check(kind):
            return self.advance()
        return None

    def expect(self, kind: TokenKind, what: str) -> Token:
        token = self.peek()
        if token.kind is not kind:
            raise NinoParserError(f"Expected {what}, found {describe(token)}", token)
        return self.advance()

    def at_end(self) -> bool:
        return self.check(TokenKind.EOF)

    # --- speculation support ---
    def snapshot(self) -> int:
        return self.pos

    def rewind(self, pos: int) -> None:
        self.pos = pos

    def clone(self) -> TokenStream:
        # Shares the token list; only the position is copied
        return TokenStream(self.tokens, self.pos)


class Parser:
    def __init__(self, stream: TokenStream):
        self.stream = stream

    # ------------------------
    # Speculative parsing
    # ------------------------
    def speculate(self, production: Callable[[Parser], T]) -> T:
        """Run `production` on a cloned cursor; commit its position only on success.

        Raises the production's NinoParserError with the live cursor untouched.
        """
        trial = Parser(self.stream.clone())
        result = production(trial)
        self.stream.rewind(trial.stream.snapshot())
        return result

    # ------------------------
    # Items
    # ------------------------
    def parse(self) -> list[Item]:
        items: list[Item] = []
        while not self.stream.at_end():
            if self.stream.check(TokenKind.LET):
                items.append(self.parse_declaration())
            else:
                expression = self.parse_expression()
                self.stream.expect(TokenKind.SEMICOLON, "';' after expression")
                items.append(expression)
        return items

    def parse_declaration(self) -> Declaration:
        self.stream.expect(TokenKind.LET, "'let'")
        name = self.stream.expect(TokenKind.IDENTIFIER, "a name after 'let'").value
        self.stream.expect(TokenKind.COLON, f"':' and a type after '{name}'")
        declared_type = self.parse_type()
        self.stream.expect(TokenKind.ASSIGN, f"'=' in declaration of '{name}'")
        expression = self.parse_expression()
        self.stream.expect(TokenKind.SEMICOLON, f"';' after declaration of '{name}'")
        return Declaration(name, declared_type, expression)

    def parse_type(self) -> Type:
        token = self.stream.expect(TokenKind.TYPE, "a type name")
        try:
            return TYPE_NAMES[token.value]
        except KeyError:
            if not token.value:
                raise NinoParserError("Expected a type name", token) from None
            raise NinoParserError(f"Unknown type '{token.value}'", token) from None

    # ------------------------
    # Expressions
    # ------------------------
    def parse_expression(self) -> Expression:
        return self.parse_equality()

    def _binary_level(
        self,
        operand: Callable[[], Expression],
        operators: dict[TokenKind, BinaryOperator],
    ) -> Expression:
        expression = operand()
        while self.stream.peek().kind in operators:
            operator = operators[self.stream.advance().kind]
            right = operand()
            expression = BinaryOperation(operator, expression, right)
        return expression

    def parse_equality(self) -> Expression:
        return self._binary_level(self.parse_comparison, EQUALITY_OPERATORS)

    def parse_comparison(self) -> Expression:
        return self._binary_level(self.parse_term, COMPARISON_OPERATORS)

    def parse_term(self) -> Expression:
        return self._binary_level(self.parse_factor, TERM_OPERATORS)

    def parse_factor(self) -> Expression:
        return self._binary_level(self.parse_unary, FACTOR_OPERATORS)

    def parse_unary(self) -> Expression:
        if self.stream.accept(TokenKind.MINUS):
            operand = self.parse_unary()
            if isinstance(operand, Number):
                return Number(-operand.value)
            return BinaryOperation(BinaryOperator.SUBTRACT, Number(0.0), operand)
        return self.parse_primary()

    def parse_primary(self) -> Expression:
        token = self.stream.peek()
        kind = token.kind

        if kind is TokenKind.IDENTIFIER:
            self.stream.advance()
            if self.stream.check(TokenKind.LPAREN):
                expression = FunctionCall(token.value, self._parse_list(
                    TokenKind.LPAREN, TokenKind.RPAREN, "')' after arguments"))
            else:
                expression = Identifier(token.value)

        elif kind is TokenKind.LPAREN:
            expression = self._parse_paren()

        elif kind is TokenKind.NUMBER:
            self.stream.advance()
            expression = Number(token.value)

        elif kind is TokenKind.CHAR:
            self.stream.advance()
            expression = Char(token.value)

        elif kind is TokenKind.BOOLEAN:
            self.stream.advance()
            expression = Bool(token.value)

        elif kind is TokenKind.STRING:
            self.stream.advance()
            expression = string_literal(token.value)

        elif kind is TokenKind.LBRACKET:
            # Literal arrays are always tagged Number
            expression = Array(NUMBER, self._parse_list(
                TokenKind.LBRACKET, TokenKind.RBRACKET, "']' after array elements"))

        else:
            raise NinoParserError(f"Expected an expression, found {describe(token)}", token)

        if self.stream.check(TokenKind.QUESTION):
            return self.parse_match(expression)
        return expression

    def _parse_list(self, open_kind: TokenKind, close_kind: TokenKind, what: str) -> tuple[Expression, ...]:
        """Comma separated, possibly empty list of full expressions."""
        self.stream.expect(open_kind, f"'{_SPELLING[open_kind]}'")
        items: list[Expression] = []
        if self.stream.accept(close_kind):
            return tuple(items)
        while True:
            items.append(self.parse_expression())
            if self.stream.accept(TokenKind.COMMA):
                continue
            self.stream.expect(close_kind, what)
            return tuple(items)

    def _parse_paren(self) -> Expression:
        try:
            return self.speculate(Parser.parse_group)
        except NinoParserError:
            if not self._looks_like_parameters():
                raise
        return self.parse_function()

    def _looks_like_parameters(self) -> bool:
        # '(' name ':'  or  '(' ')' ':'
        first, second = self.stream.peek(1).kind, self.stream.peek(2).kind
        return first in (TokenKind.IDENTIFIER, TokenKind.RPAREN) and second is TokenKind.COLON

    def parse_group(self) -> Expression:
        self.stream.expect(TokenKind.LPAREN, "'('")
        expression = self.parse_expression()
        self.stream.expect(TokenKind.RPAREN, "')' to close group")
        return expression

    def parse_function(self) -> FunctionDeclaration:
        self.stream.expect(TokenKind.LPAREN, "'(' to open parameter list")
        parameters: list[Parameter] = []
        if not self.stream.accept(TokenKind.RPAREN):
            while True:
                name = self.stream.expect(TokenKind.IDENTIFIER, "a parameter name").value
                self.stream.expect(TokenKind.COLON, f"':' and a type after parameter '{name}'")
                parameters.append(Parameter(name, self.parse_type()))
                if self.stream.accept(TokenKind.COMMA):
                    continue
                self.stream.expect(TokenKind.RPAREN, "')' after parameters")
                break
        self.stream.expect(TokenKind.COLON, "':' and a return type after parameters")
        return_type = self.parse_type()
        self.stream.expect(TokenKind.ARROW, "'=>' before function body")
        body = self.parse_expression()
        return FunctionDeclaration(tuple(parameters), return_type, body)

    def parse_match(self, scrutinee: Expression) -> Match:
        self.stream.expect(TokenKind.QUESTION, "'?'")
        self.stream.expect(TokenKind.LBRACE, "'{' after '?'")
        arms: list[tuple[Expression, Expression]] = []
        default: Optional[Expression] = None
        while True:
            candidate = self.parse_expression()
            if self.stream.accept(TokenKind.RBRACE):
                # A bare trailing value is the default arm
                default = candidate
                break
            self.stream.expect(TokenKind.ARROW, "'=>' after match pattern")
            arms.append((candidate, self.parse_expression()))
            if self.stream.accept(TokenKind.COMMA):
                continue
            self.stream.expect(TokenKind.RBRACE, "',' or '}' after match arm")
            break
        return Match(scrutinee, tuple(arms), default)


def _stream(tokens: Sequence[Token] | str) -> TokenStream:
    if isinstance(tokens, str):
        tokens = tokenize(tokens)
    return TokenStream(tokens)


def _run(production: Callable[[Parser], T], tokens: Sequence[Token] | str) -> T:
    try:
        return production(Parser(_stream(tokens)))
    except RecursionError:
        raise NinoParserError("Expression is nested too deeply") from None


def parse(tokens: Sequence[Token] | str) -> list[Item]:
    """Parse a whole program: a token list (or source text) -> list of Items."""
    return _run(Parser.parse, tokens)


def parse_declaration(tokens: Sequence[Token] | str) -> Declaration:
    return _run(Parser.parse_declaration, tokens)


def parse_expression(tokens: Sequence[Token] | str) -> Expression:
    return _run(Parser.parse_expression, tokens)
