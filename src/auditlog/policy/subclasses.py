"""Concrete subclass resolution over the mapped schema."""

import inspect
from collections.abc import Iterable

from auditlog.core.schema import SchemaIntrospector


def is_concrete(cls: type) -> bool:
    """Check that ``cls`` is neither abstract nor a protocol.

    Covers ABCs with unimplemented abstract methods, classes declaring
    ``__abstract__ = True`` for SQLAlchemy, and ``typing.Protocol`` types.
    """
    if inspect.isabstract(cls):
        return False
    if cls.__dict__.get("__abstract__", False):
        return False
    return not getattr(cls, "_is_protocol", False)


class SubclassResolver:
    """Finds the concrete mapped subclasses of a type."""

    def __init__(self, introspector: SchemaIntrospector) -> None:
        self.introspector = introspector

    def concrete_subclasses(self, cls: type | None) -> set[type]:
        """Return every concrete mapped strict subtype of ``cls``.

        Each subtype found is searched again against the same pool of
        mapped types, so multi-level hierarchies expand in one call.
        Abstract intermediate types are searched but not returned.

        Args:
            cls: The supertype, or None

        Returns:
            The concrete subclasses; empty for None or a leaf type
        """
        found: set[type] = set()
        if cls is None:
            return found
        candidates = self.introspector.types_with_metadata()
        self._collect(cls, candidates, found, visited=set())
        return found

    def _collect(
        self,
        cls: type,
        candidates: Iterable[type],
        found: set[type],
        visited: set[type],
    ) -> None:
        visited.add(cls)
        for candidate in candidates:
            if candidate is cls or not issubclass(candidate, cls):
                continue
            if is_concrete(candidate):
                found.add(candidate)
            if candidate not in visited:
                self._collect(candidate, candidates, found, visited)
