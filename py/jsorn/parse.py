"""
JSORN Parser

Lexes JSORN text into tokens, assembles them into a JValue tree and resolves
back-references into shared nodes.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from .errors import LexError, StructuralError, UnterminatedLiteralError
from .literals import (
    DATE_DELIMITER, ESCAPE, QUOTE, REFERENCE_DELIMITER,
    evaluate_date, evaluate_reference, unescape_string,
)
from .numbers import NUMERIC_CHARS, parse_number
from .resolve import Placeholder, resolve_references
from .types import CodecOpts, JValue, default_codec_opts

logger = logging.getLogger(__name__)


# ============================================================
# Lexer
# ============================================================

class TokenType:
    EOF = "EOF"
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"
    COLON = ":"
    COMMA = ","
    BOOLEAN = "BOOLEAN"
    NULL = "NULL"
    UNDEFINED = "UNDEFINED"
    NUMBER = "NUMBER"
    INTEGER = "INTEGER"
    STRING = "STRING"
    DATE = "DATE"
    REFERENCE = "REFERENCE"


STRUCTURAL = frozenset("{}[]:,")

KEYWORDS: List[Tuple[str, str, Any]] = [
    ("true", TokenType.BOOLEAN, True),
    ("false", TokenType.BOOLEAN, False),
    ("null", TokenType.NULL, None),
    ("undefined", TokenType.UNDEFINED, None),
    ("Infinity", TokenType.NUMBER, math.inf),
    ("NaN", TokenType.NUMBER, math.nan),
    ("-Infinity", TokenType.NUMBER, -math.inf),
    ("-NaN", TokenType.NUMBER, math.nan),
]


@dataclass(frozen=True)
class Token:
    type: str
    value: Any
    line: int
    column: int


class Lexer:
    """Tokenizer for JSORN text."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.length = len(text)
        self.line = 0
        self.column = 0

    def _consume(self, n: int) -> str:
        """Advance over n characters, keeping line/column current."""
        chunk = self.text[self.pos:self.pos + n]
        for c in chunk:
            if c == "\n":
                self.line += 1
                self.column = 0
            else:
                self.column += 1
        self.pos += n
        return chunk

    def tokenize(self) -> List[Token]:
        sub_lexers: List[Callable[[], Optional[Token]]] = [
            self._lex_string,
            self._lex_keyword,
            self._lex_number,
            self._lex_date,
            self._lex_reference,
        ]
        tokens: List[Token] = []

        while self.pos < self.length:
            for sub_lexer in sub_lexers:
                tok = sub_lexer()
                if tok is not None:
                    tokens.append(tok)
                    break
            else:
                c = self.text[self.pos]
                if c.isspace():
                    self._consume(1)
                elif c in STRUCTURAL:
                    tokens.append(Token(c, c, self.line, self.column))
                    self._consume(1)
                else:
                    raise LexError(f"unexpected character {c!r}", self.line, self.column)

        tokens.append(Token(TokenType.EOF, None, self.line, self.column))
        return tokens

    def _read_delimited(self, delimiter: str, what: str) -> Optional[str]:
        """
        Read the raw body of a delimited literal, or None if the input does
        not start with the delimiter. A backslash protects the next character
        from ending the literal; escapes are left for the evaluator.
        """
        if self.text[self.pos] != delimiter:
            return None

        i = self.pos + 1
        while i < self.length:
            c = self.text[i]
            if c == ESCAPE:
                i += 2
                continue
            if c == delimiter:
                body = self.text[self.pos + 1:i]
                self._consume(i + 1 - self.pos)
                return body
            i += 1

        raise UnterminatedLiteralError(f"expected end of {what}", self.line, self.column)

    def _lex_string(self) -> Optional[Token]:
        line, column = self.line, self.column
        raw = self._read_delimited(QUOTE, "string quote")
        if raw is None:
            return None
        return Token(TokenType.STRING, unescape_string(raw, line, column + 1), line, column)

    def _lex_keyword(self) -> Optional[Token]:
        for spelling, token_type, value in KEYWORDS:
            if self.text.startswith(spelling, self.pos):
                tok = Token(token_type, value, self.line, self.column)
                self._consume(len(spelling))
                return tok
        return None

    def _lex_number(self) -> Optional[Token]:
        end = self.pos
        while end < self.length and self.text[end] in NUMERIC_CHARS:
            end += 1
        if end == self.pos:
            return None

        literal = self.text[self.pos:end]
        value = parse_number(literal, self.line, self.column)
        token_type = TokenType.INTEGER if isinstance(value, int) else TokenType.NUMBER
        tok = Token(token_type, value, self.line, self.column)
        self._consume(len(literal))
        return tok

    def _lex_date(self) -> Optional[Token]:
        line, column = self.line, self.column
        raw = self._read_delimited(DATE_DELIMITER, "date delimiter")
        if raw is None:
            return None
        return Token(TokenType.DATE, evaluate_date(raw, line, column + 1), line, column)

    def _lex_reference(self) -> Optional[Token]:
        line, column = self.line, self.column
        raw = self._read_delimited(REFERENCE_DELIMITER, "reference delimiter")
        if raw is None:
            return None
        return Token(TokenType.REFERENCE, evaluate_reference(raw, line, column + 1), line, column)


def lex(text: str) -> List[Token]:
    """Tokenize a whole document."""
    return Lexer(text).tokenize()


# ============================================================
# Parser
# ============================================================

_SCALARS = {
    TokenType.BOOLEAN: JValue.boolean,
    TokenType.NUMBER: JValue.number,
    TokenType.INTEGER: JValue.integer,
    TokenType.STRING: JValue.string,
    TokenType.DATE: JValue.date,
}


class Parser:
    """Recursive descent parser over a JSORN token list."""

    def __init__(self, tokens: List[Token], opts: Optional[CodecOpts] = None):
        self.tokens = tokens
        self.pos = 0
        self.opts = opts or default_codec_opts()
        self.placeholders: List[Placeholder] = []

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if tok.type != TokenType.EOF:
            self.pos += 1
        return tok

    def expect(self, token_type: str, what: str) -> Token:
        if self.current.type != token_type:
            raise self._error(f"expected {what}, got {self._describe(self.current)}")
        return self.advance()

    def _error(self, description: str, tok: Optional[Token] = None) -> StructuralError:
        tok = tok or self.current
        return StructuralError(description, tok.line, tok.column)

    @staticmethod
    def _describe(tok: Token) -> str:
        if tok.type == TokenType.EOF:
            return "end of input"
        if tok.type in STRUCTURAL:
            return f"'{tok.type}'"
        return tok.type.lower()

    def parse(self) -> JValue:
        """Parse the whole token list into one document root."""
        root = self._parse_value(None, None, 0)
        if self.current.type != TokenType.EOF:
            raise self._error(f"unexpected {self._describe(self.current)} after document")
        return root

    def _parse_value(self, container: Optional[JValue], slot: Any, depth: int) -> JValue:
        """Parse a single value destined for container[slot]."""
        tok = self.current

        if tok.type in _SCALARS:
            self.advance()
            return _SCALARS[tok.type](tok.value)

        if tok.type == TokenType.NULL:
            self.advance()
            return JValue.null()

        if tok.type == TokenType.UNDEFINED:
            self.advance()
            return JValue.undefined()

        if tok.type == TokenType.REFERENCE:
            self.advance()
            node = JValue.reference_from(tok.value)
            self.placeholders.append(Placeholder(node, container, slot, tok.line, tok.column))
            return node

        if tok.type in (TokenType.LBRACE, TokenType.LBRACKET):
            if depth >= self.opts.max_depth:
                raise self._error(f"nesting deeper than {self.opts.max_depth} levels")
            if tok.type == TokenType.LBRACE:
                return self._parse_object(depth + 1)
            return self._parse_array(depth + 1)

        if tok.type in (TokenType.RBRACE, TokenType.RBRACKET):
            raise self._error(f"unmatched '{tok.type}'")

        raise self._error(f"expected value, got {self._describe(tok)}")

    def _parse_object(self, depth: int) -> JValue:
        """Parse an object {...}"""
        opening = self.expect(TokenType.LBRACE, "'{'")
        obj = JValue.object()

        if self.current.type == TokenType.RBRACE:
            self.advance()
            return obj

        while True:
            key_tok = self.current
            if key_tok.type == TokenType.RBRACE:
                raise self._error("trailing ',' before '}'")
            if key_tok.type == TokenType.EOF:
                raise self._error("unmatched '{'", opening)
            if key_tok.type != TokenType.STRING:
                raise self._error(f"expected string key, got {self._describe(key_tok)}")
            self.advance()

            key = key_tok.value
            if obj.get(key) is not None:
                raise self._error(f"duplicate key {key!r}", key_tok)

            self.expect(TokenType.COLON, "':' after key")
            obj.set(key, self._parse_value(obj, key, depth))

            if self.current.type == TokenType.COMMA:
                self.advance()
                continue
            if self.current.type == TokenType.RBRACE:
                self.advance()
                return obj
            if self.current.type == TokenType.EOF:
                raise self._error("unmatched '{'", opening)
            raise self._error(f"expected ',' or '}}', got {self._describe(self.current)}")

    def _parse_array(self, depth: int) -> JValue:
        """Parse an array [...]"""
        opening = self.expect(TokenType.LBRACKET, "'['")
        arr = JValue.array()

        if self.current.type == TokenType.RBRACKET:
            self.advance()
            return arr

        while True:
            if self.current.type == TokenType.RBRACKET:
                raise self._error("trailing ',' before ']'")
            if self.current.type == TokenType.EOF:
                raise self._error("unmatched '['", opening)
            arr.append(self._parse_value(arr, len(arr), depth))

            if self.current.type == TokenType.COMMA:
                self.advance()
                continue
            if self.current.type == TokenType.RBRACKET:
                self.advance()
                return arr
            if self.current.type == TokenType.EOF:
                raise self._error("unmatched '['", opening)
            raise self._error(f"expected ',' or ']', got {self._describe(self.current)}")


# ============================================================
# Public API
# ============================================================

def parse(text: str, opts: Optional[CodecOpts] = None) -> JValue:
    """Parse JSORN text into a JValue with all references resolved."""
    if not isinstance(text, str):
        raise TypeError(f"expected str, got {type(text).__name__}")

    tokens = lex(text)
    parser = Parser(tokens, opts)
    root = parser.parse()
    root = resolve_references(root, parser.placeholders)
    logger.debug("parsed %d tokens, resolved %d references", len(tokens), len(parser.placeholders))
    return root
