"""Read-only view of the mapped object schema.

The audit policy only needs three questions answered about the schema:
which types are mapped, what properties a type declares, and what each
association property points at.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol, runtime_checkable


class PropertyKind(StrEnum):
    """How a mapped property relates its owner to other types."""

    SCALAR = "scalar"
    ONE_TO_ONE = "one_to_one"
    COLLECTION = "collection"
    # Many-to-one reference; the target is not owned by the referrer
    REFERENCE = "reference"


@dataclass(frozen=True)
class PropertyDescriptor:
    """A single declared property of a mapped type.

    Attributes:
        name: Attribute name on the type
        kind: Property kind
        element_type: Target type for associations, element type for
            collections, None for scalars
        is_many_to_many: True for collections backed by a link table
    """

    name: str
    kind: PropertyKind
    element_type: type | None = None
    is_many_to_many: bool = False

    @property
    def is_association(self) -> bool:
        return self.kind in (PropertyKind.ONE_TO_ONE, PropertyKind.COLLECTION)


@runtime_checkable
class SchemaIntrospector(Protocol):
    """Protocol implemented by schema metadata providers."""

    def types_with_metadata(self) -> set[type]:
        """Return every mapped type."""
        ...

    def properties_of(self, cls: type) -> Sequence[PropertyDescriptor]:
        """Return the declared properties of ``cls`` in mapping order.

        Unmapped types have no properties.
        """
        ...

    def is_mapped(self, cls: type) -> bool:
        """Check whether ``cls`` is a mapped persistent type."""
        ...
