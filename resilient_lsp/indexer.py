from __future__ import annotations

"""
Static indexer for Resilient documents; never evaluates code.

Runs the lexer, parser and (when parsing succeeded) the type checker over a
buffer and collects:
- definitions: top-level `fn`, `let` and `static let` statements
- diagnostics: the lex error, every parse error, the first type error

Positions are 0-based (line, col), as the LSP wants them; the reader reports
1-based positions.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from resilient.builtin.env_builtin import BUILTIN_SIGNATURES
from resilient.checker.type_checker import TypeChecker
from resilient.errors import ResilientLexError, ResilientTypeError
from resilient.nodes import Function, LetStatement, Program
from resilient.reader.lexer import KEYWORDS
from resilient.reader.parser import parse_source

ERROR = "error"
WARNING = "warning"


@dataclass
class SymbolDef:
    name: str
    kind: str  # "function" | "var" | "static"
    line: int
    col: int
    detail: str = ""


@dataclass
class DiagnosticInfo:
    message: str
    line: int
    col: int
    severity: str = ERROR
    source: str = "parser"


@dataclass
class DocumentIndex:
    symbols: Dict[str, SymbolDef] = field(default_factory=dict)
    diagnostics: List[DiagnosticInfo] = field(default_factory=list)
    program: Optional[Program] = None


def _zero_based(line: int, col: int) -> tuple[int, int]:
    return max(line - 1, 0), max(col - 1, 0)


def _signature(fn: Function) -> str:
    params = ", ".join(f"{p.type_name} {p.name}" for p in fn.parameters)
    return f"fn {fn.name}({params})"


def _index_definitions(idx: DocumentIndex, program: Program) -> None:
    for stmt in program.statements:
        if isinstance(stmt, Function):
            line, col = _zero_based(stmt.line, stmt.column)
            idx.symbols[stmt.name] = SymbolDef(stmt.name, "function", line, col, _signature(stmt))
        elif isinstance(stmt, LetStatement):
            line, col = _zero_based(stmt.line, stmt.column)
            kind = "static" if stmt.is_static else "var"
            idx.symbols[stmt.name] = SymbolDef(stmt.name, kind, line, col)


def build_index(text: str, type_check: bool = True) -> DocumentIndex:
    idx = DocumentIndex()
    try:
        program, errors = parse_source(text)
    except ResilientLexError as err:
        line, col = _zero_based(err.line, err.column)
        idx.diagnostics.append(DiagnosticInfo(err.message, line, col, ERROR, "lexer"))
        return idx

    idx.program = program
    _index_definitions(idx, program)
    for err in errors:
        line, col = _zero_based(err.line, err.column)
        idx.diagnostics.append(DiagnosticInfo(err.message, line, col, ERROR, "parser"))

    # A partial tree would only produce follow-on type errors
    if type_check and not errors:
        try:
            TypeChecker().check_program(program)
        except ResilientTypeError as err:
            idx.diagnostics.append(DiagnosticInfo(str(err), 0, 0, WARNING, "typechecker"))
    return idx


def hover_text(idx: DocumentIndex, word: str) -> Optional[str]:
    if word in BUILTIN_SIGNATURES:
        return BUILTIN_SIGNATURES[word]
    sdef = idx.symbols.get(word)
    if sdef is None:
        return None
    label = sdef.detail or f"{sdef.kind} {word}"
    return f"{label} (defined at {sdef.line + 1}:{sdef.col + 1})"


def completion_labels(idx: DocumentIndex) -> List[str]:
    labels = sorted(set(KEYWORDS) | {"true", "false"})
    labels.extend(BUILTIN_SIGNATURES)
    labels.extend(name for name in idx.symbols if name not in BUILTIN_SIGNATURES)
    return labels
