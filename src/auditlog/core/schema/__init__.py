"""Schema introspection for mapped domain types."""

from auditlog.core.schema.introspector import (
    PropertyDescriptor,
    PropertyKind,
    SchemaIntrospector,
)
from auditlog.core.schema.memory import InMemorySchemaIntrospector
from auditlog.core.schema.orm import SqlAlchemySchemaIntrospector


__all__ = [
    "InMemorySchemaIntrospector",
    "PropertyDescriptor",
    "PropertyKind",
    "SchemaIntrospector",
    "SqlAlchemySchemaIntrospector",
]
