"""Loading, mutating and persisting the exception list.

The exception list is a comma-joined list of fully-qualified type names
stored under a single configuration property. Its meaning depends on the
strategy: under NONE_EXCEPT it lists the audited types, under ALL_EXCEPT
the types excluded from audit.
"""

import threading
from collections.abc import Iterable

import structlog

from auditlog.core.constants import EXCEPTIONS_SEPARATOR, GP_EXCEPTIONS_DESCRIPTION
from auditlog.core.errors import PersistenceError, PolicyStateError, TypeNotFoundError
from auditlog.core.loader import TypeLoader, names_of
from auditlog.core.settings_store import ConfigurationStore
from auditlog.policy.cache import CacheSlot, PolicyCache
from auditlog.policy.strategy import AuditingStrategy
from auditlog.policy.subclasses import SubclassResolver


logger = structlog.get_logger()


class ExceptionSetManager:
    """Owns the cached exception set and its persisted form.

    Args:
        store: Configuration store holding the list
        loader: Resolves listed names to types
        resolver: Expands types to their concrete subclasses
        cache: Cache the set is kept in
        key: Property the list is stored under
    """

    def __init__(
        self,
        store: ConfigurationStore,
        loader: TypeLoader,
        resolver: SubclassResolver,
        cache: PolicyCache,
        key: str,
    ) -> None:
        self.store = store
        self.loader = loader
        self.resolver = resolver
        self.cache = cache
        self.key = key
        # Held for the whole of an update and for a reset
        self.lock = threading.RLock()

    def exceptions(self) -> frozenset[type]:
        """Return the exception set, loading it on a cache miss."""
        return self.cache.get_or_compute(CacheSlot.EXCEPTIONS, self.load)

    def load(self) -> frozenset[type]:
        """Read the list from configuration.

        Each listed type contributes itself and its concrete subclasses.
        Names that fail to load are logged and skipped.
        """
        raw = self.store.get_value(self.key)
        types: set[type] = set()
        for name in parse_names(raw):
            try:
                cls = self.loader.load_by_name(name)
            except TypeNotFoundError:
                logger.error("audit_type_not_found", type_name=name, key=self.key)
                continue
            types.add(cls)
            types.update(self.resolver.concrete_subclasses(cls))

        logger.debug("audit_exceptions_loaded", key=self.key, count=len(types))
        return frozenset(types)

    def update(
        self,
        types: Iterable[type],
        start_auditing: bool,
        strategy: AuditingStrategy,
        generation: int | None = None,
    ) -> frozenset[type]:
        """Apply a start/stop request and persist the resulting list.

        Under NONE_EXCEPT, starting adds the type and stopping removes the
        type with its concrete subclasses. Under ALL_EXCEPT it is the other
        way round: starting removes the type with its subclasses, stopping
        adds it.

        Args:
            types: Types to start or stop auditing
            start_auditing: True to start, False to stop
            strategy: Strategy the request was validated against
            generation: Exceptions cache generation observed before
                ``strategy`` was read; defaults to the current one

        Raises:
            PolicyStateError: If the strategy or the list changed while the
                update was being prepared; nothing is written
            PersistenceError: If the list cannot be written; the exceptions
                and implicitly audited caches are dropped first
        """
        types = list(types)
        action = "start" if start_auditing else "stop"
        if generation is None:
            generation = self.cache.generation(CacheSlot.EXCEPTIONS)
        updated = set(self.exceptions())
        adding = start_auditing == (strategy is AuditingStrategy.NONE_EXCEPT)

        for cls in types:
            if adding:
                updated.add(cls)
            else:
                updated.discard(cls)
                updated.difference_update(self.resolver.concrete_subclasses(cls))

        result = frozenset(updated)
        if self.cache.generation(CacheSlot.EXCEPTIONS) != generation:
            logger.warning(
                "audit_exceptions_update_conflict",
                action=action,
                types=names_of(types),
            )
            raise PolicyStateError(
                "Auditing configuration changed while the exception list was "
                "being updated",
                details={"action": action, "types": names_of(types)},
            )

        try:
            self.store.set_value(
                self.key, serialize(result), description=GP_EXCEPTIONS_DESCRIPTION
            )
        except PersistenceError as exc:
            self.cache.invalidate(CacheSlot.EXCEPTIONS, CacheSlot.IMPLICITLY_AUDITED)
            logger.error(
                "audit_exceptions_persist_failed",
                action=action,
                types=names_of(types),
            )
            raise PersistenceError(
                f"Failed to {action} auditing {', '.join(names_of(types))}",
                details={"property": self.key, "action": action},
            ) from exc

        self.cache.put(CacheSlot.EXCEPTIONS, result, generation)
        self.cache.invalidate(CacheSlot.IMPLICITLY_AUDITED)

        logger.info(
            "audit_exceptions_updated",
            action=action,
            strategy=strategy.value,
            types=names_of(types),
            count=len(result),
        )
        return result

    def reset(self) -> None:
        """Clear the persisted list.

        Waits for an update in progress, so a list prepared under the old
        strategy cannot be written after the reset.
        """
        with self.lock:
            self.store.set_value(self.key, "", description=GP_EXCEPTIONS_DESCRIPTION)


def parse_names(raw: str | None) -> list[str]:
    """Split a stored list into trimmed, non-blank names."""
    if raw is None:
        return []
    names = (name.strip() for name in raw.split(EXCEPTIONS_SEPARATOR))
    return [name for name in names if name]


def serialize(types: Iterable[type]) -> str:
    """Join the sorted fully-qualified names of ``types``."""
    return EXCEPTIONS_SEPARATOR.join(names_of(types))
