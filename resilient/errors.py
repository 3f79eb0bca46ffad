from __future__ import annotations


class ResilientError(Exception):
    """ Base class for all Resilient errors"""
    pass


class ResilientSyntaxError(ResilientError):
    """ Raised when source text cannot be read"""

    kind = "Syntax error"

    def __init__(self, message: str, line: int = 0, column: int = 0):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def __str__(self):
        return f"{self.kind} at line {self.line}, column {self.column}: {self.message}"


class ResilientLexError(ResilientSyntaxError):
    """ Raised on an unrecognized character; aborts the whole compilation"""

    kind = "Lex error"


class ResilientParseError(ResilientError):
    """ A malformed statement. Collected by the parser, never fatal on its own"""

    def __init__(self, message: str, token=None, line: int = 0, column: int = 0):
        super().__init__(message)
        self.message = message
        self.token = token
        self.line = line
        self.column = column

    def __str__(self):
        return (f"Parse error at line {self.line}, column {self.column}: "
                f"{self.message} (token: {self.token})")


class ResilientParseErrors(ResilientError):
    """ Raised when a source text produced one or more parse errors"""

    def __init__(self, errors: list[ResilientParseError]):
        super().__init__("\n".join(str(e) for e in errors))
        self.errors = list(errors)


class ResilientUnboundName(ResilientError):
    """ Raised when a name is used before it is bound"""

    def __init__(self, name: str):
        super().__init__(f"Undefined name: {name}")
        self.name = name


class ResilientTypeError(ResilientError):
    """ Raised by the static type checker"""


# Message of the Failure that replaces a Python RecursionError
MAX_DEPTH_MESSAGE = "Maximum recursion depth exceeded"


class ResilientFailure(ResilientError):
    """ Runtime failure: unwinds to the nearest live block, or out of the run"""


class LiveBlockExhausted(ResilientFailure):
    """ Raised when a live block used up all of its attempts"""

    def __init__(self, attempts: int, cause: ResilientFailure):
        super().__init__(f"Live block failed after {attempts} attempts: {cause}")
        self.attempts = attempts
        self.cause = cause
