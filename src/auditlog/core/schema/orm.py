"""Schema introspection backed by SQLAlchemy mapper metadata."""

from collections.abc import Sequence

from sqlalchemy.orm import (
    ColumnProperty,
    Mapper,
    RelationshipDirection,
    RelationshipProperty,
    registry as Registry,
)

from auditlog.core.schema.introspector import PropertyDescriptor, PropertyKind


class SqlAlchemySchemaIntrospector:
    """Reads the mappers of a declarative registry.

    Relationships are classified by direction:

    - ONETOMANY with ``uselist=False`` is a one-to-one
    - ONETOMANY with ``uselist=True`` is an owned collection
    - MANYTOMANY is a shared collection
    - MANYTOONE is a plain reference

    Example:
        introspector = SqlAlchemySchemaIntrospector(Base.registry)
    """

    def __init__(self, registry: Registry) -> None:
        self.registry = registry

    def _mappers(self) -> dict[type, Mapper]:
        return {mapper.class_: mapper for mapper in self.registry.mappers}

    def types_with_metadata(self) -> set[type]:
        return set(self._mappers())

    def is_mapped(self, cls: type) -> bool:
        return isinstance(cls, type) and cls in self._mappers()

    def properties_of(self, cls: type) -> Sequence[PropertyDescriptor]:
        mapper = self._mappers().get(cls)
        if mapper is None:
            return ()

        descriptors: list[PropertyDescriptor] = []
        for prop in mapper.attrs:
            if isinstance(prop, RelationshipProperty):
                descriptors.append(_describe_relationship(prop))
            elif isinstance(prop, ColumnProperty):
                descriptors.append(PropertyDescriptor(prop.key, PropertyKind.SCALAR))
        return descriptors


def _describe_relationship(prop: RelationshipProperty) -> PropertyDescriptor:
    target = prop.mapper.class_
    if prop.direction is RelationshipDirection.MANYTOMANY:
        return PropertyDescriptor(
            prop.key, PropertyKind.COLLECTION, target, is_many_to_many=True
        )
    if prop.direction is RelationshipDirection.ONETOMANY:
        kind = PropertyKind.COLLECTION if prop.uselist else PropertyKind.ONE_TO_ONE
        return PropertyDescriptor(prop.key, kind, target)
    return PropertyDescriptor(prop.key, PropertyKind.REFERENCE, target)
