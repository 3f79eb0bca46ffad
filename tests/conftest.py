import pytest

from resilient.interpreter import Interpreter
from resilient.reader.parser import parse_source


# Each fixture call builds a fresh session: its own globals and statics.


@pytest.fixture
def interp():
    return Interpreter()


@pytest.fixture
def evaluate():
    """Evaluate source text in a fresh session and return the result."""
    def _evaluate(source, **kwargs):
        return Interpreter(**kwargs).eval(source)
    return _evaluate


@pytest.fixture
def parse_ok():
    """Parse source text, failing the test if the parser reported errors."""
    def _parse(source):
        program, errors = parse_source(source)
        assert errors == [], [str(e) for e in errors]
        return program
    return _parse
