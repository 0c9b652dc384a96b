"""Transitive closure of owned associations.

If an entity is audited, the types it owns through one-to-one and
one-to-many associations are audited too. Many-to-many peers are shared
and are not followed. A declared target also stands for its concrete
mapped subclasses, since instances are classified by their runtime type.
"""

from collections.abc import Iterable

from auditlog.core.schema import PropertyDescriptor, SchemaIntrospector
from auditlog.policy.subclasses import SubclassResolver


class AssociationClosure:
    """Computes the types reachable through owned associations."""

    def __init__(
        self,
        introspector: SchemaIntrospector,
        resolver: SubclassResolver | None = None,
    ) -> None:
        self.introspector = introspector
        self.resolver = resolver or SubclassResolver(introspector)

    def owned_targets(self, cls: type) -> list[type]:
        """Return the mapped types ``cls`` directly owns, in property order."""
        targets = []
        for prop in self.introspector.properties_of(cls):
            target = self._owned_target(prop)
            if target is not None:
                targets.append(target)
        return targets

    def _owned_target(self, prop: PropertyDescriptor) -> type | None:
        if not prop.is_association or prop.element_type is None:
            return None
        # Unmapped targets are outside the persistent domain
        if not self.introspector.is_mapped(prop.element_type):
            return None
        if prop.is_many_to_many:
            return None
        return prop.element_type

    def closure(self, seed_types: Iterable[type]) -> set[type]:
        """Return every type reachable from the seeds via owned associations.

        All seeds share one result set: a type already found is never
        expanded again, which bounds the walk on cyclic schemas. A seed is
        part of the result only if it is reachable from a seed. Each target
        brings its concrete subclasses along, and those are expanded too.
        """
        found: set[type] = set()
        for seed in seed_types:
            self._expand(seed, found)
        return found

    def _expand(self, cls: type, found: set[type]) -> None:
        for target in self.owned_targets(cls):
            for owned in (target, *self.resolver.concrete_subclasses(target)):
                if owned in found:
                    continue
                found.add(owned)
                self._expand(owned, found)
