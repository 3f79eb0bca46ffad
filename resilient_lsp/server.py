from __future__ import annotations

"""
A minimal pygls-based Language Server for Resilient.

Features:
- Initialize/Shutdown/Exit
- Text synchronization and document store
- Diagnostics: lex errors, parse errors (all of them), type errors
- Hover: builtin signatures and top-level definitions
- Completion: keywords, builtins, top-level definitions
- Document Symbols: from indexer

Note: We never evaluate the buffer. live blocks could retry user code with
side effects; the index is built from the parser and type checker only.
"""

import logging
from typing import Dict, Optional, List
from dataclasses import dataclass

from pygls.server import LanguageServer
from lsprotocol.types import (
    InitializeParams,
    InitializeResult,
    TextDocumentSyncKind,
    DidOpenTextDocumentParams,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    Diagnostic,
    DiagnosticSeverity,
    Position,
    Range,
    Hover,
    MarkupContent,
    MarkupKind,
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionParams,
    HoverParams,
    DocumentSymbolParams,
    DocumentSymbol,
    SymbolKind,
)

from resilient.builtin.env_builtin import BUILTIN_SIGNATURES
from resilient.config import get_log_level
from resilient.reader.lexer import KEYWORDS
from resilient_lsp.indexer import build_index, completion_labels, hover_text, DocumentIndex, ERROR

logger = logging.getLogger(__name__)


@dataclass
class DocumentState:
    text: str
    index: DocumentIndex


class ResilientLanguageServer(LanguageServer):
    CMD_NAME = "resilient-ls"

    def __init__(self):
        super().__init__(self.CMD_NAME, "v0.1.0")
        self.documents: Dict[str, DocumentState] = {}


ls = ResilientLanguageServer()


@ls.feature("initialize")
def on_initialize(params: InitializeParams):
    return InitializeResult(
        capabilities={
            "textDocumentSync": TextDocumentSyncKind.Full,
            "hoverProvider": True,
            "completionProvider": {"resolveProvider": False},
            "documentSymbolProvider": True,
        }
    )


@ls.feature("shutdown")
def on_shutdown(*_):
    return None


@ls.feature("exit")
def on_exit(*_):
    return None


# --- Text sync ---
@ls.feature("textDocument/didOpen")
def did_open(params: DidOpenTextDocumentParams):
    uri = params.text_document.uri
    _update(uri, params.text_document.text or "")


@ls.feature("textDocument/didChange")
def did_change(params: DidChangeTextDocumentParams):
    uri = params.text_document.uri
    if params.content_changes:
        text = params.content_changes[-1].text
    else:
        state = ls.documents.get(uri)
        text = state.text if state else ""
    _update(uri, text)


@ls.feature("textDocument/didClose")
def did_close(params: DidCloseTextDocumentParams):
    uri = params.text_document.uri
    ls.documents.pop(uri, None)
    ls.publish_diagnostics(uri, [])


def _update(uri: str, text: str) -> None:
    idx = build_index(text)
    ls.documents[uri] = DocumentState(text=text, index=idx)
    logger.debug("indexed %s: %d symbols, %d diagnostics", uri, len(idx.symbols), len(idx.diagnostics))
    _publish_diagnostics(uri, idx)


# --- Diagnostics ---
def _mk_range(line: int, col: int, length: int = 1) -> Range:
    return Range(start=Position(line=line, character=col), end=Position(line=line, character=col + length))


def _publish_diagnostics(uri: str, idx: DocumentIndex):
    diags: List[Diagnostic] = [
        Diagnostic(
            range=_mk_range(d.line, d.col),
            message=d.message,
            severity=DiagnosticSeverity.Error if d.severity == ERROR else DiagnosticSeverity.Warning,
            source=f"resilient-{d.source}",
        )
        for d in idx.diagnostics
    ]
    ls.publish_diagnostics(uri, diags)


# --- Hover ---
@ls.feature("textDocument/hover")
def on_hover(params: HoverParams) -> Optional[Hover]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None
    word = _extract_word_at(state.text, params.position)
    if not word:
        return None
    contents = hover_text(state.index, word)
    if contents is None:
        return None
    return Hover(contents=MarkupContent(kind=MarkupKind.PlainText, value=contents))


# --- Completion ---
@ls.feature("textDocument/completion")
def on_completion(params: CompletionParams) -> CompletionList:
    state = ls.documents.get(params.text_document.uri)
    items: List[CompletionItem] = []
    if not state:
        return CompletionList(is_incomplete=False, items=items)

    for label in completion_labels(state.index):
        if label in KEYWORDS or label in ("true", "false"):
            items.append(CompletionItem(label=label, kind=CompletionItemKind.Keyword))
        elif label in BUILTIN_SIGNATURES:
            items.append(CompletionItem(label=label, kind=CompletionItemKind.Function,
                                        detail=BUILTIN_SIGNATURES[label]))
        else:
            sdef = state.index.symbols[label]
            kind = CompletionItemKind.Function if sdef.kind == "function" else CompletionItemKind.Variable
            items.append(CompletionItem(label=label, kind=kind, detail=sdef.detail or None))
    return CompletionList(is_incomplete=False, items=items)


# --- Document Symbols ---
@ls.feature("textDocument/documentSymbol")
def on_document_symbols(params: DocumentSymbolParams) -> Optional[List[DocumentSymbol]]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None
    symbols: List[DocumentSymbol] = []
    for name, sdef in state.index.symbols.items():
        rng = _mk_range(sdef.line, sdef.col, len(name))
        symbols.append(
            DocumentSymbol(
                name=name,
                detail=sdef.detail or None,
                kind=SymbolKind.Function if sdef.kind == "function" else SymbolKind.Variable,
                range=rng,
                selection_range=rng,
            )
        )
    return symbols


# --- Helpers ---

def _extract_word_at(text: str, pos: Position) -> Optional[str]:
    lines = text.splitlines(True)
    if pos.line >= len(lines):
        return None
    line = lines[pos.line]

    def is_word(ch: str) -> bool:
        return ch.isalnum() or ch == "_"

    start = min(pos.character, len(line))
    while start > 0 and is_word(line[start - 1]):
        start -= 1
    end = pos.character
    while end < len(line) and is_word(line[end]):
        end += 1
    return line[start:end] or None


def main() -> None:
    logging.basicConfig(level=get_log_level())
    # Run the language server over stdio
    ls.start_io()


if __name__ == "__main__":
    main()
