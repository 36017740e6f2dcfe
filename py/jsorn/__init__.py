"""
JSORN - JSON with Object References and Numbers

A JSON-like text format that round-trips what JSON cannot: exact big
integers (`123n`), reciprocal exponents (`2e-3`), dates (`@0@`),
`undefined`, NaN/Infinity, and back-references (`#"a","b"#`) for shared and
cyclic object graphs.

Example:
    >>> import jsorn
    >>>
    >>> v = jsorn.parse('{"big":12345678901234567890n,"when":@0@}')
    >>> v.get("big").as_int()
    12345678901234567890
    >>>
    >>> # Shared structure is written once and referenced afterwards
    >>> shared = {"x": 1}
    >>> jsorn.dumps({"a": shared, "b": shared})
    '{"a":{"x":1n},"b":#"a"#}'
    >>>
    >>> # Cycles survive the round trip
    >>> doc = jsorn.loads('{"self":##}')
    >>> doc["self"] is doc
    True
"""

__version__ = "1.0.0"

# Core types
from .types import (
    JValue,
    JType,
    Reference,
    MapEntry,
    CodecOpts,
    UNDEFINED,
    default_codec_opts,
    field,
    j,
    J,
)

# Errors
from .errors import (
    JsornError,
    LexError,
    UnterminatedLiteralError,
    NumberFormatError,
    DateFormatError,
    ReferenceFormatError,
    StructuralError,
    ReferenceResolutionError,
)

# Parsing
from .parse import (
    parse,
    lex,
    Token,
    TokenType,
)

# Emission
from .emit import (
    stringify,
    equal,
    fingerprint,
)

# Python bridge
from .bridge import (
    from_python,
    to_python,
    dumps,
    loads,
)

__all__ = [
    # Version
    "__version__",
    # Core types
    "JValue",
    "JType",
    "Reference",
    "MapEntry",
    "CodecOpts",
    "UNDEFINED",
    "default_codec_opts",
    "field",
    "j",
    "J",
    # Errors
    "JsornError",
    "LexError",
    "UnterminatedLiteralError",
    "NumberFormatError",
    "DateFormatError",
    "ReferenceFormatError",
    "StructuralError",
    "ReferenceResolutionError",
    # Parsing
    "parse",
    "lex",
    "Token",
    "TokenType",
    # Emission
    "stringify",
    "equal",
    "fingerprint",
    # Python bridge
    "from_python",
    "to_python",
    "dumps",
    "loads",
]
