from resilient.reader.lexer import Lexer, Token, lex
from resilient.reader.parser import Parser, parse, parse_source

__all__ = ["Lexer", "Token", "lex", "Parser", "parse", "parse_source"]
