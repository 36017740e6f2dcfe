"""
JSORN Reference Resolver

Rewrites the reference placeholders left by the parser into shared edges:
each placeholder slot is rebound to the very object or array its key path
reaches from the document root.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Union

from .errors import ReferenceResolutionError
from .types import JType, JValue


@dataclass
class Placeholder:
    """An unresolved reference and the slot it occupies."""
    node: JValue
    container: Optional[JValue]
    slot: Union[str, int, None]
    line: int
    column: int

    @property
    def keys(self):
        return self.node.as_reference().keys


def _array_index(key: str) -> Optional[int]:
    if not (key.isascii() and key.isdigit()):
        return None
    if len(key) > 1 and key[0] == "0":
        return None
    return int(key)


class Resolver:
    """Resolves every placeholder of one parsed document."""

    def __init__(self, root: JValue, placeholders: List[Placeholder]):
        self.root = root
        self.pending: Dict[int, Placeholder] = {id(p.node): p for p in placeholders}
        self.active: Set[int] = set()

    def resolve_all(self) -> int:
        count = len(self.pending)
        for p in list(self.pending.values()):
            if id(p.node) in self.pending:
                self._resolve(p)
        return count

    def _resolve(self, p: Placeholder) -> JValue:
        key = id(p.node)
        if key in self.active:
            raise ReferenceResolutionError(p.keys, "reference points at itself", p.line, p.column)

        self.active.add(key)
        target = self._walk(p)
        self.active.discard(key)
        del self.pending[key]

        if p.container is None:
            self.root = target
        elif p.container.type == JType.OBJECT:
            p.container.set(p.slot, target)  # type: ignore
        else:
            p.container.as_array()[p.slot] = target  # type: ignore
        return target

    def _follow(self, node: JValue) -> JValue:
        # a slot may still hold a placeholder that has not been reached yet
        if node.type == JType.REFERENCE and id(node) in self.pending:
            return self._resolve(self.pending[id(node)])
        return node

    def _walk(self, p: Placeholder) -> JValue:
        node = self._follow(self.root)

        for key in p.keys:
            if node.type == JType.OBJECT:
                child = node.get(key)
                if child is None:
                    raise ReferenceResolutionError(p.keys, f"no member {key!r}", p.line, p.column)
            elif node.type == JType.ARRAY:
                i = _array_index(key)
                if i is None or i >= len(node):
                    raise ReferenceResolutionError(p.keys, f"no element {key!r}", p.line, p.column)
                child = node.index(i)
            else:
                raise ReferenceResolutionError(
                    p.keys, f"segment {key!r} steps into a {node.type.value}", p.line, p.column
                )
            node = self._follow(child)

        if not node.is_container():
            raise ReferenceResolutionError(
                p.keys, f"target is a {node.type.value}, not an object or array", p.line, p.column
            )
        return node


def resolve_references(root: JValue, placeholders: List[Placeholder]) -> JValue:
    """Resolve all placeholders in place and return the document root."""
    resolver = Resolver(root, placeholders)
    resolver.resolve_all()
    return resolver.root
