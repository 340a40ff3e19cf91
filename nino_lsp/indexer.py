"""
Static indexer for Nino documents; nothing is evaluated.

The document is tokenized and parsed with the interpreter's own front end. We
keep:
- declarations: every `let name:type` (name, declared type, position)
- signatures of declarations bound to function literals
- the first lexer/parser error, as a span suitable for a diagnostic

On a lexer error the text up to the failure is still scanned for declarations,
so symbols stay available while a string literal is being typed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
import re

from nino.diagnostics import position_from_offset
from nino.errors import NinoLexerError, NinoParserError, NinoSyntaxError
from nino.reader.lexer import Token, TokenKind, tokenize
from nino.reader.parser import parse
from nino.types.ast import Declaration, FunctionDeclaration

WORD_REGEX = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


@dataclass
class SymbolDef:
    name: str
    kind: str  # "var" | "function"
    declared_type: str
    line: int
    col: int
    signature: Optional[str] = None


@dataclass
class SyntaxProblem:
    message: str
    start: Tuple[int, int]
    end: Tuple[int, int]


@dataclass
class DocumentIndex:
    symbols: Dict[str, SymbolDef] = field(default_factory=dict)
    error: Optional[SyntaxProblem] = None


def _problem(text: str, error: NinoSyntaxError) -> SyntaxProblem:
    span = error.span or (0, 0)
    begin = min(span[0], len(text))
    # Token spans are inclusive; LSP ranges are exclusive at the end
    end = min(span[1] + 1, len(text)) if text else 0
    return SyntaxProblem(
        message=error.message,
        start=position_from_offset(text, begin),
        end=position_from_offset(text, max(begin, end)),
    )


def _tokens(text: str, idx: DocumentIndex) -> List[Token]:
    try:
        return tokenize(text)
    except NinoLexerError as e:
        idx.error = _problem(text, e)
        try:
            return tokenize(text[:e.position])
        except NinoLexerError:
            return []


def _signature(name: str, fn: FunctionDeclaration) -> str:
    params = ", ".join(f"{p.name}:{p.type}" for p in fn.parameters)
    return f"{name}({params}):{fn.return_type}"


def build_index(text: str) -> DocumentIndex:
    idx = DocumentIndex()
    tokens = _tokens(text, idx)

    # let IDENTIFIER ':' TYPE
    for i, tok in enumerate(tokens[:-1]):
        if tok.kind is not TokenKind.LET:
            continue
        name_tok = tokens[i + 1]
        if name_tok.kind is not TokenKind.IDENTIFIER:
            continue
        declared = ""
        if i + 3 < len(tokens) and tokens[i + 3].kind is TokenKind.TYPE:
            declared = tokens[i + 3].value
        line, col = position_from_offset(text, name_tok.begin)
        kind = "function" if declared == "fn" else "var"
        idx.symbols[name_tok.value] = SymbolDef(
            name=name_tok.value, kind=kind, declared_type=declared, line=line, col=col
        )

    if idx.error is not None:
        return idx

    try:
        items = parse(tokens)
    except NinoParserError as e:
        idx.error = _problem(text, e)
        return idx

    for item in items:
        if isinstance(item, Declaration) and isinstance(item.expression, FunctionDeclaration):
            sdef = idx.symbols.get(item.name)
            if sdef is not None:
                sdef.kind = "function"
                sdef.signature = _signature(item.name, item.expression)
    return idx


# --- Text helpers shared by hover, completion and signature help ---

def get_line_prefix(text: str, line: int, character: int) -> str:
    lines = text.splitlines(True)
    if line >= len(lines):
        return ""
    return lines[line][:character]


def word_at(text: str, line: int, character: int) -> Optional[str]:
    lines = text.splitlines(True)
    if line >= len(lines):
        return None
    for m in WORD_REGEX.finditer(lines[line]):
        if m.start() <= character <= m.end():
            return m.group(0)
    return None


def call_context(prefix: str) -> Optional[Tuple[str, int]]:
    """(callee, active parameter index) for the innermost open call in `prefix`."""
    depth = 0
    commas = 0
    for i in range(len(prefix) - 1, -1, -1):
        ch = prefix[i]
        if ch == ")":
            depth += 1
        elif ch == "(":
            if depth == 0:
                m = re.search(r"([A-Za-z_][A-Za-z0-9_]*)\s*$", prefix[:i])
                if m is None:
                    return None
                return m.group(1), commas
            depth -= 1
        elif ch == "," and depth == 0:
            commas += 1
    return None


# Builtin signatures for hover/signature help without eval
BUILTIN_SIGNATURES: Dict[str, str] = {
    "print": "print(x) -> x",
    "debug_print": "debug_print(x) -> x",
    "time": "time():num",
    "sqrt": "sqrt(n:num):num",
    "head": "head(a:[T]) -> T",
    "tail": "tail(a:[T]):[T]",
    "last": "last(a:[T]) -> T",
    "len": "len(a:[T]):num",
}
