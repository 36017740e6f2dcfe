"""
JSORN Emission

Renders a JValue tree back to JSORN text.

Canonical rules:
- boolean -> "true" / "false"
- null / undefined -> "null" / "undefined"
- number -> plain digits when integral and below 1e21, otherwise the
  shortest roundtrip form with `e+` written as `e`; NaN / Infinity /
  -Infinity spelled out; negative zero is "-0"
- integer -> decimal digits + "n"
- string -> quoted, with backslash escapes
- date -> "@" + epoch milliseconds + "@"
- object -> "{" + "key":value pairs in insertion order + "}"
- array -> "[" + comma-separated elements + "]"

An object or array met a second time (by identity) is written as a
reference literal to the key path where it was first written, so shared
and cyclic graphs survive a parse/stringify round trip.
"""

from __future__ import annotations
import hashlib
import math
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from .errors import StructuralError
from .literals import DATE_DELIMITER, QUOTE, canon_reference, epoch_millis, escape_string
from .types import CodecOpts, JType, JValue, MapEntry, Reference, default_codec_opts


# ============================================================
# Canonical Scalar Encoding
# ============================================================

def canon_bool(v: bool) -> str:
    return "true" if v else "false"


def canon_integer(n: int) -> str:
    return f"{n}n"


def canon_number(f: float) -> str:
    """Canonicalize a double so that it lexes back to the same value."""
    if math.isnan(f):
        return "NaN"
    if math.isinf(f):
        return "Infinity" if f > 0 else "-Infinity"
    if f == 0:
        return "-0" if math.copysign(1.0, f) < 0 else "0"
    if f.is_integer() and abs(f) < 1e21:
        return str(int(f))

    s = repr(f)
    if "e" in s:
        # 1.5e-07 -> 1.5e-7 (reciprocal marker), 1e+22 -> 1e22
        mantissa, exp = s.split("e")
        marker = "-" if exp.startswith("-") else ""
        s = f"{mantissa}e{marker}{exp.lstrip('+-').lstrip('0') or '0'}"
    return s


def canon_string(s: str) -> str:
    return f"{QUOTE}{escape_string(s)}{QUOTE}"


def canon_date(t: datetime) -> str:
    return f"{DATE_DELIMITER}{epoch_millis(t)}{DATE_DELIMITER}"


# ============================================================
# Main Stringification
# ============================================================

class _Emitter:
    """State of one stringify call: the identity map of written containers."""

    def __init__(self, opts: CodecOpts):
        self.opts = opts
        self.seen: Dict[int, Tuple[str, ...]] = {}

    def value(self, v: JValue, path: Tuple[str, ...], depth: int) -> str:
        t = v.type

        if t == JType.NULL:
            return "null"
        elif t == JType.UNDEFINED:
            return "undefined"
        elif t == JType.BOOLEAN:
            return canon_bool(v.as_bool())
        elif t == JType.NUMBER:
            return canon_number(v.as_number())
        elif t == JType.INTEGER:
            return canon_integer(v.as_int())
        elif t == JType.STRING:
            return canon_string(v.as_str())
        elif t == JType.DATE:
            return canon_date(v.as_date())
        elif t == JType.REFERENCE:
            return canon_reference(v.as_reference())

        first = self.seen.get(id(v))
        if first is not None:
            return canon_reference(Reference(first))

        if depth >= self.opts.max_depth:
            raise StructuralError(f"nesting deeper than {self.opts.max_depth} levels")
        self.seen[id(v)] = path

        if t == JType.ARRAY:
            return self.array(v.as_array(), path, depth + 1)
        elif t == JType.OBJECT:
            return self.object(v.as_object(), path, depth + 1)

        raise ValueError(f"unknown type: {t}")

    def array(self, items: List[JValue], path: Tuple[str, ...], depth: int) -> str:
        parts = [self.value(item, path + (str(i),), depth) for i, item in enumerate(items)]
        return "[" + ",".join(parts) + "]"

    def object(self, entries: List[MapEntry], path: Tuple[str, ...], depth: int) -> str:
        parts = []
        for e in entries:
            parts.append(f"{canon_string(e.key)}:{self.value(e.value, path + (e.key,), depth)}")
        return "{" + ",".join(parts) + "}"


def stringify(v: JValue, opts: Optional[CodecOpts] = None) -> str:
    """
    Render a JValue as JSORN text.

    This is the inverse of parse: shared and cyclic containers are written
    once and referenced afterwards.
    """
    if not isinstance(v, JValue):
        raise TypeError(f"expected JValue, got {type(v).__name__}")
    if opts is None:
        opts = default_codec_opts()
    return _Emitter(opts).value(v, (), 0)


# ============================================================
# Comparison
# ============================================================

def fingerprint(v: JValue) -> str:
    """
    Compute SHA-256 fingerprint of the stringified form.
    Returns hex string.
    """
    h = hashlib.sha256(stringify(v).encode('utf-8'))
    return h.hexdigest()


def equal(a: JValue, b: JValue) -> bool:
    """Check if two values are equal in normal form, including their sharing."""
    return stringify(a) == stringify(b)
