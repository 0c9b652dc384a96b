"""Plain domain types and an in-memory schema over them."""

from abc import ABC, abstractmethod

from auditlog.core.schema import InMemorySchemaIntrospector


class Person:
    pass


class Patient(Person):
    pass


class Visit:
    pass


class Encounter:
    pass


class Obs:
    pass


class Location:
    pass


class Concept:
    pass


class ConceptName:
    pass


class ConceptDescription:
    pass


class Tag:
    pass


class Order(ABC):
    @abstractmethod
    def instructions(self) -> str: ...


class DrugOrder(Order):
    def instructions(self) -> str:
        return "take twice daily"


class SpecialDrugOrder(DrugOrder):
    pass


class TestOrder(Order):
    __test__ = False

    def instructions(self) -> str:
        return "fasting"


class NotADomainType:
    pass


def build_schema() -> InMemorySchemaIntrospector:
    """Clinical schema used across the policy tests.

    Patient -> visits -> encounters -> obs/orders; obs reference concepts;
    a concept owns its names and description and shares its tags.
    """
    schema = InMemorySchemaIntrospector()
    schema.map(
        Person,
        Patient,
        Visit,
        Encounter,
        Obs,
        Location,
        Concept,
        ConceptName,
        ConceptDescription,
        Tag,
        Order,
        DrugOrder,
        SpecialDrugOrder,
        TestOrder,
    )
    schema.scalar(Person, "gender")
    schema.scalar(Patient, "gender")
    schema.one_to_many(Patient, "visits", Visit)
    schema.reference(Visit, "patient", Patient)
    schema.one_to_many(Visit, "encounters", Encounter)
    schema.reference(Encounter, "location", Location)
    schema.one_to_many(Encounter, "obs", Obs)
    schema.one_to_many(Encounter, "orders", Order)
    schema.reference(Obs, "concept", Concept)
    schema.one_to_many(Concept, "names", ConceptName)
    schema.one_to_one(Concept, "description", ConceptDescription)
    schema.many_to_many(Concept, "tags", Tag)
    return schema
