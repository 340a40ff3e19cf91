"""
  Nino Lexer

- Eager, regex driven: source text -> list[Token]
- Token offsets (begin, end) are inclusive character positions into the source.
  They are only used for diagnostics, never by evaluation.
- After a ':' the lexer switches to reading a raw type name (num, [char], fn, ...);
  type names are validated by the parser, not here.
- The token list always ends with a single EOF token.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Iterator

from nino.errors import NinoLexerError


class TokenKind(Enum):
    # keywords
    LET = auto()

    # literals and names
    IDENTIFIER = auto()
    TYPE = auto()
    NUMBER = auto()
    CHAR = auto()
    STRING = auto()
    BOOLEAN = auto()

    # separators
    LPAREN = auto()
    RPAREN = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    LBRACE = auto()
    RBRACE = auto()
    COMMA = auto()
    COLON = auto()
    SEMICOLON = auto()
    PIPE = auto()

    # operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    MODULUS = auto()
    NOT = auto()
    ASSIGN = auto()
    ARROW = auto()
    QUESTION = auto()

    # equality and comparison
    EQUAL = auto()
    NOT_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()

    EOF = auto()


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    begin: int
    end: int
    value: Any = None

    def __str__(self) -> str:
        if self.value is None:
            return self.kind.name
        return f"{self.kind.name}({self.value!r})"


TOKEN_RE = re.compile(
    r"(?P<whitespace>\s+)"
    r"|(?P<comment>#[^\n]*)"  # single-line comment
    r"|(?P<number>[0-9][0-9.]*)"
    r"|(?P<word>[A-Za-z_][A-Za-z0-9_]*)"
    r"|(?P<char>'(?P<char_value>[^'\n])')"
    r'|(?P<string>"(?P<string_value>[^"]*)")'  # no escape sequences
    r"|(?P<operator>==|!=|<=|>=|=>|[=<>!+\-*/%?()\[\]{},;:|])"
)

# Raw type name read after a ':'
TYPE_RE = re.compile(r"\s*(?P<type>[a-z0-9_\[\]]*)")

KEYWORDS: dict[str, tuple[TokenKind, Any]] = {
    "let": (TokenKind.LET, None),
    "true": (TokenKind.BOOLEAN, True),
    "false": (TokenKind.BOOLEAN, False),
    "mod": (TokenKind.MODULUS, None),
}

OPERATORS: dict[str, TokenKind] = {
    "==": TokenKind.EQUAL,
    "!=": TokenKind.NOT_EQUAL,
    "<=": TokenKind.LESS_EQUAL,
    ">=": TokenKind.GREATER_EQUAL,
    "=>": TokenKind.ARROW,
    "=": TokenKind.ASSIGN,
    "<": TokenKind.LESS,
    ">": TokenKind.GREATER,
    "!": TokenKind.NOT,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "%": TokenKind.MODULUS,
    "?": TokenKind.QUESTION,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    ",": TokenKind.COMMA,
    ";": TokenKind.SEMICOLON,
    ":": TokenKind.COLON,
    "|": TokenKind.PIPE,
}


def _byte(ch: str, position: int) -> int:
    code = ord(ch)
    if code > 0xFF:
        raise NinoLexerError(f"Character {ch!r} does not fit in a byte", position)
    return code


def lex(source: str) -> Iterator[Token]:
    """Token generator: yields Token objects, ending with EOF."""
    pos = 0
    n = len(source)

    while pos < n:
        m = TOKEN_RE.match(source, pos)
        if not m:
            ch = source[pos]
            if ch == '"':
                raise NinoLexerError("Unterminated string literal", pos)
            if ch == "'":
                raise NinoLexerError("Invalid character literal", pos)
            raise NinoLexerError(f"Unexpected character: {ch!r}", pos)

        begin, end = m.start(), m.end() - 1
        group = m.lastgroup

        if group in ("whitespace", "comment"):
            pos = m.end()
            continue

        if group == "number":
            text = m.group("number")
            try:
                value = float(text)
            except ValueError:
                raise NinoLexerError(f"Malformed number: {text!r}", begin) from None
            yield Token(TokenKind.NUMBER, begin, end, value)

        elif group == "word":
            word = m.group("word")
            kind, value = KEYWORDS.get(word, (TokenKind.IDENTIFIER, word))
            yield Token(kind, begin, end, value)

        elif group == "char":
            yield Token(TokenKind.CHAR, begin, end, _byte(m.group("char_value"), begin + 1))

        elif group == "string":
            text = m.group("string_value")
            for offset, ch in enumerate(text):
                _byte(ch, begin + 1 + offset)
            yield Token(TokenKind.STRING, begin, end, text)

        else:
            kind = OPERATORS[m.group("operator")]
            yield Token(kind, begin, end)
            if kind is TokenKind.COLON:
                # A type name always follows a colon
                tm = TYPE_RE.match(source, m.end())
                type_begin = tm.start("type")
                type_end = max(tm.end("type") - 1, type_begin)
                yield Token(TokenKind.TYPE, type_begin, type_end, tm.group("type"))
                pos = tm.end()
                continue

        pos = m.end()

    last = max(n - 1, 0)
    yield Token(TokenKind.EOF, last, last)


def tokenize(source: str) -> list[Token]:
    return list(lex(source))
