"""Tests for the in-memory schema introspector."""

from auditlog.core.schema import (
    InMemorySchemaIntrospector,
    PropertyDescriptor,
    PropertyKind,
    SchemaIntrospector,
)
from tests.factories.domain import Concept, ConceptName, NotADomainType, Tag


class TestInMemorySchemaIntrospector:
    """Tests for InMemorySchemaIntrospector."""

    def test_implements_protocol(self):
        assert isinstance(InMemorySchemaIntrospector(), SchemaIntrospector)

    def test_map_registers_types(self):
        schema = InMemorySchemaIntrospector().map(Concept, Tag)

        assert schema.types_with_metadata() == {Concept, Tag}
        assert schema.is_mapped(Concept)
        assert not schema.is_mapped(NotADomainType)

    def test_adding_a_property_maps_the_owner(self):
        schema = InMemorySchemaIntrospector()
        schema.one_to_many(Concept, "names", ConceptName)

        assert schema.is_mapped(Concept)
        # The target is not mapped implicitly
        assert not schema.is_mapped(ConceptName)

    def test_properties_in_declaration_order(self):
        schema = InMemorySchemaIntrospector()
        schema.scalar(Concept, "uuid")
        schema.one_to_many(Concept, "names", ConceptName)
        schema.many_to_many(Concept, "tags", Tag)

        assert list(schema.properties_of(Concept)) == [
            PropertyDescriptor("uuid", PropertyKind.SCALAR),
            PropertyDescriptor("names", PropertyKind.COLLECTION, ConceptName),
            PropertyDescriptor(
                "tags", PropertyKind.COLLECTION, Tag, is_many_to_many=True
            ),
        ]

    def test_unmapped_type_has_no_properties(self):
        assert InMemorySchemaIntrospector().properties_of(NotADomainType) == ()


class TestPropertyDescriptor:
    """Tests for PropertyDescriptor."""

    def test_is_association(self):
        assert PropertyDescriptor("d", PropertyKind.ONE_TO_ONE, Tag).is_association
        assert PropertyDescriptor("n", PropertyKind.COLLECTION, Tag).is_association
        assert not PropertyDescriptor("c", PropertyKind.REFERENCE, Tag).is_association
        assert not PropertyDescriptor("uuid", PropertyKind.SCALAR).is_association
