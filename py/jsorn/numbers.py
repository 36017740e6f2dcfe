"""
JSORN Numeric Literals

Numbers are spelled with digits, an optional leading minus, a fractional
delimiter, an exponent marker and a trailing arbitrary-precision suffix:

    123      -> 123.0
    123n     -> 123 (exact int)
    1.5      -> 1.5
    2e3      -> 2000.0
    2e-3     -> 0.002   (the minus after `e` divides instead of multiplying)

The exponent has no sign of its own; `-` directly after `e` is the
reciprocal marker.
"""

from __future__ import annotations
import math
from fractions import Fraction
from typing import Union

from .errors import NumberFormatError


UNARY_MINUS = "-"
FRACTIONAL_DELIMITER = "."
EXPONENT_MARKER = "e"
RECIPROCAL_MARKER = "-"
BIGINT_SUFFIX = "n"

NUMERIC_CHARS = frozenset("0123456789-.en")

# Past this many decimal orders beyond the literal's own length the result is
# outside the double range regardless of the mantissa digits.
_SATURATION_MARGIN = 400


def _fail(line: int, column: int) -> NumberFormatError:
    return NumberFormatError("expected numerical value", line, column)


def parse_number(literal: str, line: int = 0, column: int = 0) -> Union[float, int]:
    """
    Parse a maximal run of numeric characters.

    Returns a float, or an int when the literal carries the `n` suffix.
    `column` is the column of the literal's first character; errors report
    the column of the offending character.
    """
    text = literal
    offset = 0
    negative = False

    if text.startswith(UNARY_MINUS):
        negative = True
        text = text[1:]
        offset = 1

    if not text:
        raise _fail(line, column + offset)

    big = False
    if text.endswith(BIGINT_SUFFIX):
        big = True
        text = text[:-1]
        if not text:
            raise _fail(line, column + offset)

    integer = 0
    numerator = 0
    denominator = 1
    exponent = 0
    exponent_index = -1
    decimal_index = -1
    reciprocal = False
    mantissa_digits = 0
    exponent_digits = 0

    for i, c in enumerate(text):
        here = column + offset + i

        if c == EXPONENT_MARKER:
            if big or exponent_index > -1 or (decimal_index > -1 and decimal_index + 1 == i):
                raise _fail(line, here)
            exponent_index = i
        elif c == FRACTIONAL_DELIMITER:
            if big or decimal_index > -1 or exponent_index > -1:
                raise _fail(line, here)
            decimal_index = i
        elif c == BIGINT_SUFFIX:
            raise _fail(line, here)
        elif c == RECIPROCAL_MARKER:
            if big or reciprocal or exponent_index == -1 or i != exponent_index + 1:
                raise _fail(line, here)
            reciprocal = True
        elif "0" <= c <= "9":
            digit = ord(c) - ord("0")
            if exponent_index > -1:
                exponent = exponent * 10 + digit
                exponent_digits += 1
            elif decimal_index > -1:
                numerator = numerator * 10 + digit
                denominator *= 10
                mantissa_digits += 1
            else:
                integer = integer * 10 + digit
                mantissa_digits += 1
        else:
            raise _fail(line, here)

    if mantissa_digits == 0:
        raise _fail(line, column + offset)
    if exponent_index > -1 and exponent_digits == 0:
        raise _fail(line, column + len(literal))

    if big:
        return -integer if negative else integer

    mantissa = integer + Fraction(numerator, denominator)
    return _to_float(mantissa, exponent, reciprocal, negative, len(literal))


def _to_float(mantissa: Fraction, exponent: int, reciprocal: bool,
              negative: bool, width: int) -> float:
    sign = -1.0 if negative else 1.0

    if mantissa == 0:
        return math.copysign(0.0, sign)

    if exponent > width + _SATURATION_MARGIN:
        return math.copysign(0.0 if reciprocal else math.inf, sign)

    scale = 10 ** exponent
    value = mantissa / scale if reciprocal else mantissa * scale
    try:
        return math.copysign(float(value), sign)
    except OverflowError:
        return math.copysign(math.inf, sign)
