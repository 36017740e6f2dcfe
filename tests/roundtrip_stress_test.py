#!/usr/bin/env python3
"""
JSORN Round-Trip Stress Test Suite

Python -> JSORN -> Python round-trip fidelity across edge cases, normal form
idempotence for hand-written documents, and rejection of malformed input.
"""

import math
import os
import sys
from datetime import datetime, timedelta, timezone
from typing import Any, List, Tuple, Type

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', 'py'))

from jsorn import (
    UNDEFINED, parse, stringify, dumps, loads, equal,
    JsornError, LexError, UnterminatedLiteralError, NumberFormatError,
    DateFormatError, ReferenceFormatError, StructuralError,
    ReferenceResolutionError,
)

UTC = timezone.utc


# =============================================================================
# Test Cases
# =============================================================================

ROUNDTRIP_TESTS: List[Tuple[str, Any]] = [
    # =========================================================================
    # BASIC TYPES
    # =========================================================================
    ("null", None),
    ("undefined", UNDEFINED),
    ("true", True),
    ("false", False),
    ("zero", 0),
    ("zero float", 0.0),
    ("positive int", 42),
    ("negative int", -123),
    ("huge int", 2 ** 200),
    ("huge negative int", -(3 ** 150)),
    ("float", 3.14159),
    ("negative float", -2.71828),
    ("scientific notation small", 1e-10),
    ("scientific notation large", 1e25),
    ("smallest subnormal", 5e-324),
    ("largest double", 1.7976931348623157e308),
    ("integral float past 1e21", 1e21),
    ("infinity", math.inf),
    ("negative infinity", -math.inf),
    ("empty string", ""),
    ("simple string", "hello"),
    ("string with spaces", "hello world"),
    ("string with quotes", 'say "hello"'),
    ("string with backslash", "path\\to\\file"),
    ("string with newline", "line1\nline2"),
    ("string with tab", "col1\tcol2"),
    ("string with unicode", "你好世界"),
    ("string with emoji", "🚀🔥💻"),
    ("string with null char", "before\x00after"),
    ("string with delimiters", "@date@ #ref# {obj} [arr]"),
    ("string looking like keyword", "undefined"),

    # =========================================================================
    # DATES
    # =========================================================================
    ("epoch", datetime(1970, 1, 1, tzinfo=UTC)),
    ("modern date", datetime(2024, 2, 29, 12, 30, 15, tzinfo=UTC)),
    ("pre-epoch date", datetime(1901, 7, 4, 8, 0, tzinfo=UTC)),
    ("sub-millisecond date", datetime(2001, 1, 1, 0, 0, 0, 123456, tzinfo=UTC)),
    ("offset date", datetime(2010, 5, 5, 10, 0, tzinfo=timezone(timedelta(hours=-5)))),

    # =========================================================================
    # ARRAYS
    # =========================================================================
    ("empty array", []),
    ("array of nulls", [None, None, None]),
    ("array of bools", [True, False, True]),
    ("array of ints", [1, 2, 3, 4, 5]),
    ("array of floats", [1.1, 2.2, 3.3]),
    ("array of strings", ["a", "b", "c"]),
    ("mixed array", [1, "two", True, None, 3.14, UNDEFINED]),
    ("nested array", [[1, 2], [3, 4], [5, 6]]),
    ("deeply nested array", [[[1]], [[2]], [[3]]]),

    # =========================================================================
    # OBJECTS
    # =========================================================================
    ("empty object", {}),
    ("simple object", {"name": "Alice", "age": 30}),
    ("key order kept", {"z": 1, "a": 2, "m": 3}),
    ("empty key", {"": 1}),
    ("key with quote", {'a"b': 1}),
    ("key with separator", {'a","b': 1}),
    ("nested object", {"outer": {"inner": {"deep": [1, {"x": None}]}}}),
    ("array of objects", [{"a": 1}, {"b": 2}, {}]),
    ("object with everything", {
        "n": 1.5,
        "i": 10 ** 20,
        "s": "str",
        "d": datetime(2020, 1, 1, tzinfo=UTC),
        "u": UNDEFINED,
        "z": None,
        "l": [True, False],
    }),
]


def _roundtrip(data: Any) -> Tuple[str, Any]:
    text = dumps(data)
    return text, loads(text)


@pytest.mark.parametrize("name,data", ROUNDTRIP_TESTS, ids=[n for n, _ in ROUNDTRIP_TESTS])
def test_roundtrip(name: str, data: Any):
    """Python -> JSORN -> Python."""
    text, restored = _roundtrip(data)
    assert restored == data, f"MISMATCH\n  Original: {data!r}\n  Restored: {restored!r}\n  JSORN: {text}"
    assert type(restored) is type(data) or isinstance(data, datetime)


def test_roundtrip_nan():
    text, restored = _roundtrip([math.nan])
    assert text == "[NaN]"
    assert math.isnan(restored[0])


def test_roundtrip_negative_zero():
    text, restored = _roundtrip(-0.0)
    assert text == "-0"
    assert math.copysign(1.0, restored) < 0


# =============================================================================
# Shared and cyclic graphs
# =============================================================================

def test_shared_subtrees():
    leaf = {"v": 1}
    pair = [leaf, leaf]
    data = {"first": pair, "second": pair, "third": [pair, leaf]}
    text, restored = _roundtrip(data)
    assert text == '{"first":[{"v":1n},#"first","0"#],"second":#"first"#,"third":[#"first"#,#"first","0"#]}'
    assert restored["second"] is restored["first"]
    assert restored["third"][0] is restored["first"]
    assert restored["third"][1] is restored["first"][0]
    assert restored["first"][1] is restored["first"][0]


def test_self_cycle():
    data = {"name": "loop"}
    data["me"] = data
    text, restored = _roundtrip(data)
    assert text == '{"name":"loop","me":##}'
    assert restored["me"] is restored


def test_deep_cycle():
    tree = {"children": []}
    node = tree
    for i in range(20):
        child = {"id": i, "parent": node, "children": []}
        node["children"].append(child)
        node = child
    text, restored = _roundtrip(tree)

    node = restored
    for i in range(20):
        child = node["children"][0]
        assert child["id"] == i
        assert child["parent"] is node
        node = child


def test_tuples_stay_independent():
    point = (1, 2)
    text, restored = _roundtrip([(), (), point, point])
    assert text == "[[],[],[1n,2n],[1n,2n]]"
    restored[0].append(1)
    restored[2].append(3)
    assert restored[1] == []
    assert restored[3] == [1, 2]


def test_doubly_linked_list():
    nodes = [{"value": i} for i in range(5)]
    for a, b in zip(nodes, nodes[1:]):
        a["next"] = b
        b["prev"] = a
    text, restored = _roundtrip(nodes)
    for a, b in zip(restored, restored[1:]):
        assert a["next"] is b
        assert b["prev"] is a


# =============================================================================
# Normal form
# =============================================================================

DOCUMENTS: List[str] = [
    '{"a":1}',
    '[1, 2n, 1.5, 2e3, 2e-3, 1.25e-10, -0, .5]',
    '{"when": @2020-01-01T00:00:00Z@, "epoch": @0@, "frac": @1.5@}',
    '{"a": {"b": [{"c": 1}]}, "r1": #"a"#, "r2": #"a","b"#, "r3": #"a","b","0"#, "root": ##}',
    '[[], {}, [[]], {"": {}}]',
    '"\\u0041\\n"',
    '[true, false, null, undefined, NaN, Infinity, -Infinity, -NaN]',
    '{\n  "multi": [\n    1,\n    2\n  ]\n}',
]


@pytest.mark.parametrize("doc", DOCUMENTS)
def test_normal_form_idempotent(doc: str):
    once = stringify(parse(doc))
    twice = stringify(parse(once))
    assert once == twice


@pytest.mark.parametrize("doc", DOCUMENTS)
def test_reparse_equal(doc: str):
    v = parse(doc)
    assert equal(parse(stringify(v)), v)


# =============================================================================
# Malformed input
# =============================================================================

REJECTED: List[Tuple[str, Type[JsornError]]] = [
    ("{a: 1}", StructuralError),
    ("[1, 2,]", StructuralError),
    ("[1, 2", StructuralError),
    ('{"a" 1}', StructuralError),
    ("[1 2]", StructuralError),
    ("x", LexError),
    ("[1, ~]", LexError),
    ('"open', UnterminatedLiteralError),
    ("@0", UnterminatedLiteralError),
    ('#"a"', UnterminatedLiteralError),
    ("1.5n", NumberFormatError),
    ("1e2n", NumberFormatError),
    ("1e", NumberFormatError),
    ("-", NumberFormatError),
    ("@not-a-date@", DateFormatError),
    ("@99999999999999999999@", DateFormatError),
    ("#abc#", ReferenceFormatError),
    ('{"x": #"missing"#}', ReferenceResolutionError),
    ('{"x": 1, "y": #"x"#}', ReferenceResolutionError),
    ('{"x": 1, "y": #"x","z"#}', ReferenceResolutionError),
]


@pytest.mark.parametrize("text,error", REJECTED)
def test_rejected(text: str, error: Type[JsornError]):
    with pytest.raises(error) as exc:
        parse(text)
    assert exc.value.line is not None
    assert "Invalid JSORN" in str(exc.value)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
