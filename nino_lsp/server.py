from __future__ import annotations

"""
A minimal pygls-based Language Server for Nino.

Features:
- Text synchronization (full document) and document store
- Diagnostics: the first lexer or parser error, at its token span
- Hover: builtin signatures and declared names with their type
- Completion: builtins and declared names
- Signature Help: builtins and declared functions
- Document Symbols: from indexer

Note: We never evaluate the buffer. We build a static index per document.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from pygls.server import LanguageServer
from lsprotocol.types import (
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DOCUMENT_SYMBOL,
    TEXT_DOCUMENT_HOVER,
    TEXT_DOCUMENT_SIGNATURE_HELP,
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionOptions,
    CompletionParams,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    DocumentSymbol,
    DocumentSymbolParams,
    Hover,
    HoverParams,
    MarkupContent,
    MarkupKind,
    ParameterInformation,
    Position,
    Range,
    SignatureHelp,
    SignatureHelpOptions,
    SignatureHelpParams,
    SignatureInformation,
    SymbolKind,
    TextDocumentSyncKind,
)

from nino import __version__
from nino_lsp.indexer import (
    BUILTIN_SIGNATURES,
    DocumentIndex,
    build_index,
    call_context,
    get_line_prefix,
    word_at,
)

logger = logging.getLogger(__name__)


@dataclass
class DocumentState:
    text: str
    index: DocumentIndex


class NinoLanguageServer(LanguageServer):
    CMD_NAME = "nino-ls"

    def __init__(self):
        super().__init__(
            self.CMD_NAME, __version__, text_document_sync_kind=TextDocumentSyncKind.Full
        )
        self.documents: Dict[str, DocumentState] = {}


ls = NinoLanguageServer()


def _update(uri: str, text: str) -> None:
    idx = build_index(text)
    ls.documents[uri] = DocumentState(text=text, index=idx)
    logger.debug("indexed %s: %d symbols", uri, len(idx.symbols))
    _publish_diagnostics(uri, idx)


# --- Text sync ---
@ls.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(params: DidOpenTextDocumentParams):
    logger.info("opened %s", params.text_document.uri)
    _update(params.text_document.uri, params.text_document.text or "")


@ls.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(params: DidChangeTextDocumentParams):
    uri = params.text_document.uri
    if params.content_changes:
        text = params.content_changes[-1].text
    else:
        state = ls.documents.get(uri)
        text = state.text if state else ""
    _update(uri, text)


@ls.feature(TEXT_DOCUMENT_DID_CLOSE)
def did_close(params: DidCloseTextDocumentParams):
    uri = params.text_document.uri
    logger.info("closed %s", uri)
    ls.documents.pop(uri, None)
    ls.publish_diagnostics(uri, [])


# --- Diagnostics ---
def diagnostics_for(idx: DocumentIndex) -> List[Diagnostic]:
    if idx.error is None:
        return []
    (start_line, start_col), (end_line, end_col) = idx.error.start, idx.error.end
    return [
        Diagnostic(
            range=Range(
                start=Position(line=start_line, character=start_col),
                end=Position(line=end_line, character=end_col),
            ),
            message=idx.error.message,
            severity=DiagnosticSeverity.Error,
            source=NinoLanguageServer.CMD_NAME,
        )
    ]


def _publish_diagnostics(uri: str, idx: DocumentIndex):
    ls.publish_diagnostics(uri, diagnostics_for(idx))


# --- Hover ---
@ls.feature(TEXT_DOCUMENT_HOVER)
def on_hover(params: HoverParams) -> Optional[Hover]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None

    word = word_at(state.text, params.position.line, params.position.character)
    if not word:
        return None

    if word in BUILTIN_SIGNATURES:
        contents = BUILTIN_SIGNATURES[word]
    elif word in state.index.symbols:
        sdef = state.index.symbols[word]
        shown = sdef.signature or f"{word}:{sdef.declared_type}"
        contents = f"{shown} (defined at {sdef.line + 1}:{sdef.col + 1})"
    else:
        return None
    return Hover(contents=MarkupContent(kind=MarkupKind.PlainText, value=contents))


# --- Completion ---
@ls.feature(TEXT_DOCUMENT_COMPLETION, CompletionOptions(trigger_characters=["("]))
def on_completion(params: CompletionParams) -> CompletionList:
    state = ls.documents.get(params.text_document.uri)
    items: List[CompletionItem] = []
    for name, sig in BUILTIN_SIGNATURES.items():
        items.append(CompletionItem(label=name, kind=CompletionItemKind.Function, detail=sig))
    if state:
        for name, sdef in state.index.symbols.items():
            kind = CompletionItemKind.Function if sdef.kind == "function" else CompletionItemKind.Variable
            items.append(CompletionItem(label=name, kind=kind, detail=sdef.declared_type))
    return CompletionList(is_incomplete=False, items=items)


# --- Signature Help ---
@ls.feature(TEXT_DOCUMENT_SIGNATURE_HELP, SignatureHelpOptions(trigger_characters=["(", ","]))
def on_signature_help(params: SignatureHelpParams) -> Optional[SignatureHelp]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None

    prefix = get_line_prefix(state.text, params.position.line, params.position.character)
    context = call_context(prefix)
    if context is None:
        return None
    callee, active = context

    label = BUILTIN_SIGNATURES.get(callee)
    if label is None:
        sdef = state.index.symbols.get(callee)
        label = sdef.signature if sdef else None
    if not label:
        return None

    params_text = label[label.find("(") + 1:label.find(")")]
    parameters = [ParameterInformation(label=p.strip()) for p in params_text.split(",") if p.strip()]
    return SignatureHelp(
        signatures=[SignatureInformation(label=label, parameters=parameters)],
        active_signature=0,
        active_parameter=active,
    )


# --- Document Symbols ---
@ls.feature(TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def on_document_symbols(params: DocumentSymbolParams) -> Optional[List[DocumentSymbol]]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None
    symbols: List[DocumentSymbol] = []
    for name, sdef in state.index.symbols.items():
        rng = Range(
            start=Position(line=sdef.line, character=sdef.col),
            end=Position(line=sdef.line, character=sdef.col + len(name)),
        )
        symbols.append(
            DocumentSymbol(
                name=name,
                detail=sdef.declared_type,
                kind=SymbolKind.Function if sdef.kind == "function" else SymbolKind.Variable,
                range=rng,
                selection_range=rng,
            )
        )
    return symbols


def main():
    # Run the language server over stdio
    ls.start_io()


if __name__ == "__main__":
    main()
