"""
JSORN Python Bridge

Converts between JValue trees and plain Python data. Shared and cyclic
dicts/lists map to shared JValue nodes and back, so object identity
survives the conversion in both directions. Tuples are immutable values
and are converted fresh at every occurrence.
"""

from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, Optional

from .emit import stringify
from .errors import StructuralError
from .parse import parse
from .types import UNDEFINED, CodecOpts, JType, JValue, Reference, default_codec_opts


def from_python(data: Any, opts: Optional[CodecOpts] = None) -> JValue:
    """Convert a Python value to JValue."""
    if opts is None:
        opts = default_codec_opts()
    return _from_python(data, {}, 0, opts.max_depth)


def _from_python(data: Any, memo: Dict[int, JValue], depth: int, max_depth: int) -> JValue:
    if data is None:
        return JValue.null()
    elif data is UNDEFINED:
        return JValue.undefined()
    elif isinstance(data, bool):
        return JValue.boolean(data)
    elif isinstance(data, int):
        return JValue.integer(data)
    elif isinstance(data, float):
        return JValue.number(data)
    elif isinstance(data, str):
        return JValue.string(data)
    elif isinstance(data, datetime):
        return JValue.date(data)
    elif isinstance(data, Reference):
        return JValue.reference_from(data)
    elif isinstance(data, JValue):
        return data

    if id(data) in memo:
        return memo[id(data)]

    if isinstance(data, (list, tuple, dict)) and depth >= max_depth:
        raise StructuralError(f"nesting deeper than {max_depth} levels")

    if isinstance(data, (list, tuple)):
        arr = JValue.array()
        if isinstance(data, list):
            memo[id(data)] = arr
        for item in data:
            arr.append(_from_python(item, memo, depth + 1, max_depth))
        return arr
    elif isinstance(data, dict):
        obj = JValue.object()
        memo[id(data)] = obj
        for k, v in data.items():
            obj.set(str(k), _from_python(v, memo, depth + 1, max_depth))
        return obj

    raise TypeError(f"cannot convert {type(data).__name__} to JSORN")


def to_python(v: JValue, opts: Optional[CodecOpts] = None) -> Any:
    """Convert a JValue to plain Python data."""
    if opts is None:
        opts = default_codec_opts()
    return _to_python(v, {}, 0, opts.max_depth)


def _to_python(v: JValue, memo: Dict[int, Any], depth: int, max_depth: int) -> Any:
    t = v.type

    if t == JType.NULL:
        return None
    elif t == JType.UNDEFINED:
        return UNDEFINED
    elif t == JType.BOOLEAN:
        return v.as_bool()
    elif t == JType.NUMBER:
        return v.as_number()
    elif t == JType.INTEGER:
        return v.as_int()
    elif t == JType.STRING:
        return v.as_str()
    elif t == JType.DATE:
        return v.as_date()
    elif t == JType.REFERENCE:
        return v.as_reference()

    if id(v) in memo:
        return memo[id(v)]

    if depth >= max_depth:
        raise StructuralError(f"nesting deeper than {max_depth} levels")

    if t == JType.ARRAY:
        items: list = []
        memo[id(v)] = items
        items.extend(_to_python(item, memo, depth + 1, max_depth) for item in v.as_array())
        return items
    elif t == JType.OBJECT:
        result: dict = {}
        memo[id(v)] = result
        for e in v.as_object():
            result[e.key] = _to_python(e.value, memo, depth + 1, max_depth)
        return result

    raise ValueError(f"unknown type: {t}")


# ============================================================
# Convenience Functions
# ============================================================

def dumps(data: Any, opts: Optional[CodecOpts] = None) -> str:
    """Convert Python data directly to JSORN text."""
    return stringify(from_python(data, opts), opts)


def loads(text: str, opts: Optional[CodecOpts] = None) -> Any:
    """Parse JSORN text to Python data."""
    return to_python(parse(text, opts), opts)
