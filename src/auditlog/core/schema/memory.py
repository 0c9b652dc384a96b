"""In-memory schema with explicitly declared association edges.

Useful for tests and for applications whose domain types are not
SQLAlchemy-mapped.
"""

from collections.abc import Sequence

from auditlog.core.schema.introspector import PropertyDescriptor, PropertyKind


class InMemorySchemaIntrospector:
    """Schema built by registering types and edges by hand.

    Example:
        schema = InMemorySchemaIntrospector()
        schema.map(Patient, Visit)
        schema.one_to_many(Patient, "visits", Visit)
    """

    def __init__(self) -> None:
        self._properties: dict[type, list[PropertyDescriptor]] = {}

    def map(self, *classes: type) -> "InMemorySchemaIntrospector":
        for cls in classes:
            self._properties.setdefault(cls, [])
        return self

    def add_property(self, owner: type, descriptor: PropertyDescriptor) -> None:
        self.map(owner)
        self._properties[owner].append(descriptor)

    def scalar(self, owner: type, name: str) -> None:
        self.add_property(owner, PropertyDescriptor(name, PropertyKind.SCALAR))

    def one_to_one(self, owner: type, name: str, target: type) -> None:
        self.add_property(
            owner, PropertyDescriptor(name, PropertyKind.ONE_TO_ONE, target)
        )

    def one_to_many(self, owner: type, name: str, target: type) -> None:
        self.add_property(
            owner, PropertyDescriptor(name, PropertyKind.COLLECTION, target)
        )

    def many_to_many(self, owner: type, name: str, target: type) -> None:
        self.add_property(
            owner,
            PropertyDescriptor(
                name, PropertyKind.COLLECTION, target, is_many_to_many=True
            ),
        )

    def reference(self, owner: type, name: str, target: type) -> None:
        self.add_property(
            owner, PropertyDescriptor(name, PropertyKind.REFERENCE, target)
        )

    def types_with_metadata(self) -> set[type]:
        return set(self._properties)

    def properties_of(self, cls: type) -> Sequence[PropertyDescriptor]:
        return tuple(self._properties.get(cls, ()))

    def is_mapped(self, cls: type) -> bool:
        return cls in self._properties
