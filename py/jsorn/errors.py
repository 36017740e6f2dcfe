"""
JSORN Errors

Every failure is fatal to the enclosing parse or stringify call. Positions
are 0-based line and column of the place the problem was detected.
"""

from __future__ import annotations
from typing import Optional, Sequence


class JsornError(ValueError):
    """Base class for all codec errors."""

    def __init__(self, description: str, line: Optional[int] = None, column: Optional[int] = None):
        self.description = description
        self.line = line
        self.column = column
        if line is None:
            msg = f"Invalid JSORN: {description}"
        else:
            msg = f"Invalid JSORN: {description} at line {line}, column {column}"
        super().__init__(msg)


class UnterminatedLiteralError(JsornError):
    """String, date or reference literal missing its closing delimiter."""


class NumberFormatError(JsornError):
    """Malformed numeric literal."""


class DateFormatError(JsornError):
    """Date literal that does not resolve to a valid instant."""


class ReferenceFormatError(JsornError):
    """Malformed quoting around a reference literal."""


class StructuralError(JsornError):
    """Token sequence does not form a valid document."""


class LexError(StructuralError):
    """
    Unexpected character in the input; no token can start here.

    A stray character breaks the document structure, so this is also a
    StructuralError (`{a: 1}` can be caught as either). Characters that can
    start a literal are not covered: `{e: 1}` lexes `e` as a number and
    raises NumberFormatError.
    """


class ReferenceResolutionError(JsornError):
    """Reference path does not lead to an existing object or array."""

    def __init__(self, keys: Sequence[str], reason: str,
                 line: Optional[int] = None, column: Optional[int] = None):
        self.keys = tuple(keys)
        path = ", ".join(repr(k) for k in self.keys) or "<root>"
        super().__init__(f"cannot resolve reference [{path}]: {reason}", line, column)
