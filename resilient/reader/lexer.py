"""
  Resilient Lexer

- Lazy: tokens are produced one at a time by `Lexer.next_token()`
- Whitespace and `//` line comments are skipped, never emitted
- Once the input is exhausted every further call returns the EOF token
- Any character the language does not know (including a bare `!`) raises
  ResilientLexError, which aborts the whole compilation
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Union

from resilient.errors import ResilientLexError

# Token types
IDENT = "ident"
INT = "int"
FLOAT = "float"
STRING = "string"
BOOL = "bool"
EOF = "eof"

KEYWORDS: dict[str, str] = {
    "fn": "fn",
    "let": "let",
    "static": "static",
    "live": "live",
    "assert": "assert",
    "if": "if",
    "else": "else",
    "return": "return",
}

# Statement-starting keywords; the parser synchronizes on these
STATEMENT_KEYWORDS = frozenset({"fn", "let", "static", "live", "assert", "if", "return"})

SINGLE_CHAR: dict[str, str] = {
    "+": "plus",
    "-": "minus",
    "*": "star",
    "/": "slash",
    "=": "assign",
    "<": "lt",
    ">": "gt",
    "(": "lparen",
    ")": "rparen",
    "{": "lbrace",
    "}": "rbrace",
    ",": "comma",
    ";": "semicolon",
}

# Two-character operators, recognized with one character of lookahead
DOUBLE_CHAR: dict[str, str] = {
    "==": "eq",
    "!=": "not_eq",
    "<=": "le",
    ">=": "ge",
}

ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "\\": "\\",
    '"': '"',
}

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

TokenValue = Union[str, int, float, bool, None]


@dataclass(frozen=True)
class Token:
    type: str
    value: TokenValue
    line: int = 0
    column: int = 0

    def __str__(self):
        if self.type == EOF:
            return "end of input"
        if self.type == STRING:
            return f'"{self.value}"'
        if self.type == BOOL:
            return "true" if self.value else "false"
        return str(self.value)


def _is_letter(ch: str) -> bool:
    return ch.isalpha() or ch == "_"


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


class Lexer:
    """Turns source text into Tokens on demand."""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

    def _peek(self, offset: int = 0) -> str:
        i = self.pos + offset
        return self.source[i] if i < len(self.source) else ""

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _skip_whitespace_and_comments(self) -> None:
        while self.pos < len(self.source):
            ch = self._peek()
            if ch.isspace():
                self._advance()
            elif ch == "/" and self._peek(1) == "/":
                while self.pos < len(self.source) and self._peek() != "\n":
                    self._advance()
            else:
                break

    def next_token(self) -> Token:
        self._skip_whitespace_and_comments()
        line, column = self.line, self.column
        if self.pos >= len(self.source):
            return Token(EOF, None, line, column)

        ch = self._peek()

        pair = ch + self._peek(1)
        if pair in DOUBLE_CHAR:
            self._advance()
            self._advance()
            return Token(DOUBLE_CHAR[pair], pair, line, column)

        if ch in SINGLE_CHAR:
            self._advance()
            return Token(SINGLE_CHAR[ch], ch, line, column)

        if ch == '"':
            return self._read_string(line, column)

        if _is_letter(ch):
            return self._read_identifier(line, column)

        if _is_digit(ch):
            return self._read_number(line, column)

        raise ResilientLexError(f"Unexpected character: {ch!r}", line, column)

    def _read_identifier(self, line: int, column: int) -> Token:
        start = self.pos
        while self.pos < len(self.source) and (_is_letter(self._peek()) or _is_digit(self._peek())):
            self._advance()
        word = self.source[start:self.pos]
        if word in KEYWORDS:
            return Token(KEYWORDS[word], word, line, column)
        if word in ("true", "false"):
            return Token(BOOL, word == "true", line, column)
        return Token(IDENT, word, line, column)

    def _read_number(self, line: int, column: int) -> Token:
        start = self.pos
        while _is_digit(self._peek()):
            self._advance()
        is_float = False
        if self._peek() == "." and _is_digit(self._peek(1)):
            is_float = True
            self._advance()
            while _is_digit(self._peek()):
                self._advance()
        text = self.source[start:self.pos]
        if is_float:
            return Token(FLOAT, float(text), line, column)
        value = int(text)
        if value > INT64_MAX:
            raise ResilientLexError(f"Integer literal out of range: {text}", line, column)
        return Token(INT, value, line, column)

    def _read_string(self, line: int, column: int) -> Token:
        self._advance()  # opening quote
        chars: list[str] = []
        while True:
            if self.pos >= len(self.source):
                raise ResilientLexError("Unterminated string literal", line, column)
            ch = self._advance()
            if ch == '"':
                break
            if ch == "\\":
                if self.pos >= len(self.source):
                    raise ResilientLexError("Unterminated string literal", line, column)
                esc = self._advance()
                # unknown escapes are kept verbatim, backslash included
                chars.append(ESCAPES.get(esc, "\\" + esc))
            else:
                chars.append(ch)
        return Token(STRING, "".join(chars), line, column)

    def __iter__(self) -> Iterator[Token]:
        while True:
            tok = self.next_token()
            yield tok
            if tok.type == EOF:
                return


def lex(source: str) -> Iterator[Token]:
    """Token generator: yields Tokens, ending with a single EOF token."""
    return iter(Lexer(source))
