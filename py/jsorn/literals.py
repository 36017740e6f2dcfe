"""
JSORN Literal Evaluators

Turns the raw text between a pair of delimiters into a domain value:
strings are unescaped, `@...@` dates become UTC datetimes and `#...#`
references become key paths.
"""

from __future__ import annotations
from datetime import datetime, timedelta, timezone
from fractions import Fraction
from typing import List, Optional

from .errors import DateFormatError, LexError, ReferenceFormatError
from .types import Reference


QUOTE = '"'
DATE_DELIMITER = "@"
REFERENCE_DELIMITER = "#"
ESCAPE = "\\"
KEY_SEPARATOR = '","'

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_SIMPLE_ESCAPES = {
    'n': '\n',
    'r': '\r',
    't': '\t',
    'b': '\b',
    'f': '\f',
}


# ============================================================
# Strings
# ============================================================

def escape_string(s: str, extra: str = "") -> str:
    """Escape a string for JSORN output. Characters in `extra` get a backslash too."""
    result = []
    for c in s:
        if c == '"':
            result.append('\\"')
        elif c == '\\':
            result.append('\\\\')
        elif c == '\n':
            result.append('\\n')
        elif c == '\r':
            result.append('\\r')
        elif c == '\t':
            result.append('\\t')
        elif ord(c) < 32:
            result.append(f"\\u{ord(c):04x}")
        elif c in extra:
            result.append('\\' + c)
        else:
            result.append(c)
    return ''.join(result)


def _hex4(raw: str, pos: int, line: int, column: int) -> int:
    hex_str = raw[pos:pos + 4]
    if len(hex_str) != 4 or any(h not in "0123456789abcdefABCDEF" for h in hex_str):
        raise LexError("invalid unicode escape", line, column)
    return int(hex_str, 16)


def unescape_string(raw: str, line: int = 0, column: int = 0) -> str:
    """
    Decode backslash escapes. Unknown escapes stand for the escaped character.

    `\\uXXXX` surrogate pairs combine into one code point; a lone surrogate
    raises LexError.
    """
    if ESCAPE not in raw:
        return raw

    result = []
    i = 0
    while i < len(raw):
        c = raw[i]
        if c != ESCAPE:
            result.append(c)
            i += 1
            continue

        if i + 1 >= len(raw):
            raise LexError("unterminated escape sequence", line, column + i)
        esc = raw[i + 1]
        if esc in _SIMPLE_ESCAPES:
            result.append(_SIMPLE_ESCAPES[esc])
            i += 2
        elif esc == 'u':
            start = i
            code = _hex4(raw, i + 2, line, column + i)
            i += 6
            # UTF-16 surrogate pairs join into one code point
            if 0xD800 <= code <= 0xDBFF and raw[i:i + 2] == '\\u':
                low = _hex4(raw, i + 2, line, column + i)
                if 0xDC00 <= low <= 0xDFFF:
                    code = 0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00)
                    i += 6
            if 0xD800 <= code <= 0xDFFF:
                raise LexError("unpaired surrogate in unicode escape", line, column + start)
            result.append(chr(code))
        else:
            result.append(esc)
            i += 2

    return ''.join(result)


# ============================================================
# Dates
# ============================================================

_OFFSET_CHARS = frozenset("0123456789+-.eE")


def _epoch_offset(text: str) -> Optional[Fraction]:
    # Decimal or exponent text only; Fraction would also take "1/2"
    body = text.strip()
    if not body or any(c not in _OFFSET_CHARS for c in body):
        return None
    try:
        return Fraction(body)
    except (ValueError, ZeroDivisionError):
        return None


def evaluate_date(text: str, line: int = 0, column: int = 0) -> datetime:
    """
    Interpret a date literal body.

    Numeric text is a millisecond offset from the Unix epoch; anything else
    must be an ISO-8601 calendar string. Naive calendar times are UTC.
    """
    offset = _epoch_offset(text)
    try:
        if offset is not None:
            return EPOCH + timedelta(microseconds=round(offset * 1000))
        parsed = datetime.fromisoformat(text.strip())
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        raise DateFormatError(
            f"expected valid date between columns {column} and {column + len(text)}",
            line, column,
        ) from None


def epoch_millis(t: datetime) -> str:
    """Render a datetime as its exact millisecond offset from the epoch."""
    if t.tzinfo is None:
        t = t.replace(tzinfo=timezone.utc)
    delta = t - EPOCH
    micros = (delta.days * 86400 + delta.seconds) * 1_000_000 + delta.microseconds
    sign = "-" if micros < 0 else ""
    millis, rest = divmod(abs(micros), 1000)
    if rest:
        return f"{sign}{millis}.{rest:03d}".rstrip("0")
    return f"{sign}{millis}"


# ============================================================
# References
# ============================================================

def _split_keys(text: str, line: int, column: int) -> List[str]:
    """Split a quoted reference body on unescaped `","`, keeping escapes raw."""
    segments = []
    current = []
    end = len(text) - 1
    i = 1
    while i < end:
        if text[i] == ESCAPE:
            current.append(text[i:i + 2])
            i += 2
        elif text.startswith(KEY_SEPARATOR, i, end):
            segments.append("".join(current))
            current = []
            i += len(KEY_SEPARATOR)
        else:
            current.append(text[i])
            i += 1

    if i != end:
        # the closing quote was escaped
        raise ReferenceFormatError(
            f"expected reference delimiters on columns {column} and {column + len(text)}",
            line, column,
        )
    segments.append("".join(current))
    return segments


def evaluate_reference(text: str, line: int = 0, column: int = 0) -> Reference:
    """
    Interpret a reference literal body.

    `#"a","b"#` is the path ["a", "b"]; an empty body (or a single
    character) is the document root.
    """
    if len(text) <= 1:
        return Reference(())

    if text[0] != QUOTE or text[-1] != QUOTE:
        raise ReferenceFormatError(
            f"expected reference delimiters on columns {column} and {column + len(text)}",
            line, column,
        )

    return Reference(tuple(
        unescape_string(segment, line, column)
        for segment in _split_keys(text, line, column)
    ))


def canon_reference(ref: Reference) -> str:
    """Render a key path as a reference literal."""
    if not ref.keys:
        return REFERENCE_DELIMITER * 2
    body = KEY_SEPARATOR.join(escape_string(k, REFERENCE_DELIMITER) for k in ref.keys)
    return f"{REFERENCE_DELIMITER}{QUOTE}{body}{QUOTE}{REFERENCE_DELIMITER}"
