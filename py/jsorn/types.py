"""
JSORN Core Types

JValue is the universal node container for JSORN documents.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple, Union


class JType(Enum):
    """JSORN value types."""
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    NULL = "null"
    UNDEFINED = "undefined"
    DATE = "date"
    REFERENCE = "reference"


class _Undefined:
    """Python stand-in for the document value `undefined`."""

    _instance: Optional["_Undefined"] = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()


@dataclass(frozen=True)
class Reference:
    """Unresolved back-reference: the key path from the document root."""
    keys: Tuple[str, ...] = ()

    def __str__(self) -> str:
        if not self.keys:
            return "#<root>"
        return "#" + "/".join(self.keys)


@dataclass
class MapEntry:
    """Key-value pair of an object."""
    key: str
    value: "JValue"


@dataclass(frozen=True)
class CodecOpts:
    """Per-call options for parse and stringify."""
    max_depth: int = 256


def default_codec_opts() -> CodecOpts:
    return CodecOpts()


class JValue:
    """
    Universal node container for JSORN data.

    Supports: object, array, string, number, integer, boolean, null,
    undefined, date, reference

    Objects and arrays are compared by identity when detecting shared
    structure, so the same JValue instance may sit in several slots of a
    tree (or inside itself).
    """

    __slots__ = (
        '_type', '_bool', '_number', '_int', '_str',
        '_date', '_ref', '_array', '_object'
    )

    def __init__(self, jtype: JType):
        self._type = jtype
        self._bool: Optional[bool] = None
        self._number: Optional[float] = None
        self._int: Optional[int] = None
        self._str: Optional[str] = None
        self._date: Optional[datetime] = None
        self._ref: Optional[Reference] = None
        self._array: Optional[List[JValue]] = None
        self._object: Optional[List[MapEntry]] = None

    @property
    def type(self) -> JType:
        return self._type

    # ============================================================
    # Constructors
    # ============================================================

    @staticmethod
    def null() -> "JValue":
        return JValue(JType.NULL)

    @staticmethod
    def undefined() -> "JValue":
        return JValue(JType.UNDEFINED)

    @staticmethod
    def boolean(v: bool) -> "JValue":
        jv = JValue(JType.BOOLEAN)
        jv._bool = bool(v)
        return jv

    @staticmethod
    def number(v: float) -> "JValue":
        jv = JValue(JType.NUMBER)
        jv._number = float(v)
        return jv

    @staticmethod
    def integer(v: int) -> "JValue":
        jv = JValue(JType.INTEGER)
        jv._int = int(v)
        return jv

    @staticmethod
    def string(v: str) -> "JValue":
        jv = JValue(JType.STRING)
        jv._str = v
        return jv

    @staticmethod
    def date(v: datetime) -> "JValue":
        jv = JValue(JType.DATE)
        jv._date = v
        return jv

    @staticmethod
    def reference(*keys: str) -> "JValue":
        jv = JValue(JType.REFERENCE)
        jv._ref = Reference(tuple(keys))
        return jv

    @staticmethod
    def reference_from(ref: Reference) -> "JValue":
        jv = JValue(JType.REFERENCE)
        jv._ref = ref
        return jv

    @staticmethod
    def array(*values: "JValue") -> "JValue":
        jv = JValue(JType.ARRAY)
        jv._array = list(values)
        return jv

    @staticmethod
    def object(*entries: MapEntry) -> "JValue":
        jv = JValue(JType.OBJECT)
        jv._object = []
        for e in entries:
            jv.set(e.key, e.value)
        return jv

    # ============================================================
    # Accessors
    # ============================================================

    def is_null(self) -> bool:
        return self._type == JType.NULL

    def is_undefined(self) -> bool:
        return self._type == JType.UNDEFINED

    def is_container(self) -> bool:
        return self._type in (JType.OBJECT, JType.ARRAY)

    def as_bool(self) -> bool:
        if self._type != JType.BOOLEAN:
            raise TypeError("not a boolean")
        return self._bool  # type: ignore

    def as_number(self) -> float:
        if self._type != JType.NUMBER:
            raise TypeError("not a number")
        return self._number  # type: ignore

    def as_int(self) -> int:
        if self._type != JType.INTEGER:
            raise TypeError("not an integer")
        return self._int  # type: ignore

    def as_str(self) -> str:
        if self._type != JType.STRING:
            raise TypeError("not a string")
        return self._str  # type: ignore

    def as_date(self) -> datetime:
        if self._type != JType.DATE:
            raise TypeError("not a date")
        return self._date  # type: ignore

    def as_reference(self) -> Reference:
        if self._type != JType.REFERENCE:
            raise TypeError("not a reference")
        return self._ref  # type: ignore

    def as_array(self) -> List["JValue"]:
        if self._type != JType.ARRAY:
            raise TypeError("not an array")
        return self._array  # type: ignore

    def as_object(self) -> List[MapEntry]:
        if self._type != JType.OBJECT:
            raise TypeError("not an object")
        return self._object  # type: ignore

    def as_numeric(self) -> Union[int, float]:
        """Get numeric value (works for integer or number)."""
        if self._type == JType.INTEGER:
            return self._int  # type: ignore
        if self._type == JType.NUMBER:
            return self._number  # type: ignore
        raise TypeError("not numeric")

    def get(self, key: str) -> Optional["JValue"]:
        """Get member of an object by key."""
        if self._type == JType.OBJECT:
            for e in self._object:  # type: ignore
                if e.key == key:
                    return e.value
        return None

    def keys(self) -> List[str]:
        return [e.key for e in self.as_object()]

    def index(self, i: int) -> "JValue":
        """Get element from array by index."""
        if self._type != JType.ARRAY:
            raise TypeError("not an array")
        if i < 0 or i >= len(self._array):  # type: ignore
            raise IndexError("index out of bounds")
        return self._array[i]  # type: ignore

    def __len__(self) -> int:
        """Get length of array or object."""
        if self._type == JType.ARRAY:
            return len(self._array)  # type: ignore
        if self._type == JType.OBJECT:
            return len(self._object)  # type: ignore
        return 0

    # ============================================================
    # Mutators
    # ============================================================

    def set(self, key: str, value: "JValue") -> None:
        """Set member on object, keeping the original position of an existing key."""
        if self._type != JType.OBJECT:
            raise TypeError("cannot set on non-object")
        for e in self._object:  # type: ignore
            if e.key == key:
                e.value = value
                return
        self._object.append(MapEntry(key, value))  # type: ignore

    def append(self, value: "JValue") -> None:
        """Append to array."""
        if self._type != JType.ARRAY:
            raise TypeError("cannot append to non-array")
        self._array.append(value)  # type: ignore

    def __repr__(self) -> str:
        if self._type == JType.NULL:
            return "JValue.null()"
        elif self._type == JType.UNDEFINED:
            return "JValue.undefined()"
        elif self._type == JType.BOOLEAN:
            return f"JValue.boolean({self._bool})"
        elif self._type == JType.NUMBER:
            return f"JValue.number({self._number!r})"
        elif self._type == JType.INTEGER:
            return f"JValue.integer({self._int})"
        elif self._type == JType.STRING:
            return f"JValue.string({self._str!r})"
        elif self._type == JType.DATE:
            return f"JValue.date({self._date!r})"
        elif self._type == JType.REFERENCE:
            return f"JValue.reference({', '.join(repr(k) for k in self._ref.keys)})"  # type: ignore
        elif self._type == JType.ARRAY:
            return f"JValue.array(<{len(self._array)} items>)"  # type: ignore
        elif self._type == JType.OBJECT:
            return f"JValue.object(<{len(self._object)} entries>)"  # type: ignore
        return f"JValue({self._type})"


# ============================================================
# Helper Functions
# ============================================================

def field(key: str, value: JValue) -> MapEntry:
    """Create an entry for object construction."""
    return MapEntry(key, value)


# Shorthand constructors
class J:
    """Shorthand constructors for JValue."""

    @staticmethod
    def null() -> JValue:
        return JValue.null()

    @staticmethod
    def undefined() -> JValue:
        return JValue.undefined()

    @staticmethod
    def bool(v: bool) -> JValue:
        return JValue.boolean(v)

    @staticmethod
    def num(v: float) -> JValue:
        return JValue.number(v)

    @staticmethod
    def int(v: int) -> JValue:
        return JValue.integer(v)

    @staticmethod
    def str(v: str) -> JValue:
        return JValue.string(v)

    @staticmethod
    def date(v: datetime) -> JValue:
        return JValue.date(v)

    @staticmethod
    def ref(*keys: str) -> JValue:
        return JValue.reference(*keys)

    @staticmethod
    def list(*values: JValue) -> JValue:
        return JValue.array(*values)

    @staticmethod
    def obj(*entries: MapEntry) -> JValue:
        return JValue.object(*entries)


j = J()
