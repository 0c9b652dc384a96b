"""Audit policy engine.

Answers whether a mapped type is audited, explicitly or implicitly
through an owned association, and keeps its caches coherent with the
configuration store.

Caches and what invalidates them:

- strategy: the strategy property
- exceptions: the strategy or exception-list property, a failed write
- implicitly audited: the strategy or exception-list property, any write
- store last state: its own property only
"""

from collections.abc import Callable, Iterable
from typing import TypeVar

import structlog

from auditlog.config import Settings, settings as default_settings
from auditlog.core.constants import TRUTHY_VALUES
from auditlog.core.errors import PolicyStateError
from auditlog.core.loader import TypeLoader, names_of
from auditlog.core.schema import SchemaIntrospector
from auditlog.core.settings_store import ConfigurationChange, ConfigurationStore
from auditlog.policy.cache import MISSING, CacheSlot, PolicyCache
from auditlog.policy.closure import AssociationClosure
from auditlog.policy.exception_set import ExceptionSetManager
from auditlog.policy.guard import ReentrancyGuard, Suspender
from auditlog.policy.strategy import AuditingStrategy, parse_strategy
from auditlog.policy.subclasses import SubclassResolver


logger = structlog.get_logger()

T = TypeVar("T")


class AuditPolicyEngine:
    """Facade over strategy resolution, exceptions and association closure.

    One instance owns all policy caches for the process. It subscribes to
    the configuration store on construction.

    Args:
        introspector: Schema metadata
        store: Configuration store
        loader: Type loader, defaults to one resolving against the schema
        settings: Supplies the property names
        suspenders: Extra side effects to suspend during cache misses, in
            addition to the store's own ``suspended()``

    Example:
        engine = AuditPolicyEngine(SqlAlchemySchemaIntrospector(Base.registry), store)
        if engine.is_audited(type(obj)):
            ...
    """

    def __init__(
        self,
        introspector: SchemaIntrospector,
        store: ConfigurationStore,
        loader: TypeLoader | None = None,
        settings: Settings | None = None,
        suspenders: Iterable[Suspender] = (),
    ) -> None:
        settings = settings or default_settings
        self.introspector = introspector
        self.store = store
        self.strategy_key = settings.auditing_strategy_property
        self.exceptions_key = settings.exceptions_property
        self.store_last_state_key = settings.store_last_state_property

        self.cache = PolicyCache()
        self.guard = ReentrancyGuard(store.suspended, *suspenders)
        self.subclasses = SubclassResolver(introspector)
        self.associations = AssociationClosure(introspector, self.subclasses)
        self.exception_set = ExceptionSetManager(
            store,
            loader or TypeLoader(introspector),
            self.subclasses,
            self.cache,
            self.exceptions_key,
        )

        store.subscribe(self.on_configuration_change)

    def _guarded(self, slots: Iterable[CacheSlot], compute: Callable[[], T]) -> T:
        """Run ``compute`` inside the guard unless every slot is cached."""
        if all(self.cache.is_cached(slot) for slot in slots):
            return compute()
        with self.guard.suspended():
            return compute()

    # Strategy

    def get_strategy(self) -> AuditingStrategy:
        """Return the active strategy.

        A missing or blank value yields NONE and is not cached, so a value
        set later is picked up on the next call.

        Raises:
            ConfigurationError: If the stored value names no strategy
        """
        cached = self.cache.get(CacheSlot.STRATEGY)
        if cached is not MISSING:
            return cached

        generation = self.cache.generation(CacheSlot.STRATEGY)
        with self.guard.suspended():
            raw = self.store.get_value(self.strategy_key)
        strategy = parse_strategy(raw, self.strategy_key)
        if strategy is None:
            return AuditingStrategy.NONE

        if self.cache.put(CacheSlot.STRATEGY, strategy, generation):
            logger.info("audit_strategy_loaded", strategy=strategy.value)
        return strategy

    # Queries

    def is_audited(self, cls: type) -> bool:
        """Check whether instances of ``cls`` are explicitly audited."""
        return self._guarded(
            (CacheSlot.STRATEGY, CacheSlot.EXCEPTIONS),
            lambda: self._is_audited(cls),
        )

    def _is_audited(self, cls: type) -> bool:
        if not self.introspector.is_mapped(cls):
            return False
        strategy = self.get_strategy()
        if strategy is AuditingStrategy.NONE:
            return False
        if strategy is AuditingStrategy.ALL:
            return True
        if strategy is AuditingStrategy.NONE_EXCEPT:
            return cls in self.exception_set.exceptions()
        return cls not in self.exception_set.exceptions()

    def is_implicitly_audited(self, cls: type) -> bool:
        """Check whether ``cls`` is audited only through an owned association."""
        return self._guarded(
            (CacheSlot.IMPLICITLY_AUDITED,),
            lambda: self._is_implicitly_audited(cls),
        )

    def _is_implicitly_audited(self, cls: type) -> bool:
        if not self.introspector.is_mapped(cls):
            return False
        if self.get_strategy() is AuditingStrategy.NONE:
            return False
        return cls in self.get_implicitly_audited_types()

    def get_exceptions(self) -> frozenset[type]:
        """Return the current exception set."""
        return self._guarded(
            (CacheSlot.EXCEPTIONS,), self.exception_set.exceptions
        )

    def get_implicitly_audited_types(self) -> frozenset[type]:
        """Return the types audited only because an audited type owns them."""
        return self._guarded(
            (CacheSlot.IMPLICITLY_AUDITED,),
            lambda: self.cache.get_or_compute(
                CacheSlot.IMPLICITLY_AUDITED, self._compute_implicitly_audited
            ),
        )

    def _compute_implicitly_audited(self) -> frozenset[type]:
        strategy = self.get_strategy()
        exceptions = self.exception_set.exceptions()

        if strategy is AuditingStrategy.NONE_EXCEPT:
            seeds: Iterable[type] = exceptions
        elif strategy is AuditingStrategy.ALL_EXCEPT and exceptions:
            # An excluded type owned by an audited one is still tracked
            seeds = [
                cls
                for cls in self.introspector.types_with_metadata()
                if cls not in exceptions
            ]
        else:
            return frozenset()

        reachable = self.associations.closure(seeds)
        implicit = frozenset(cls for cls in reachable if not self._is_audited(cls))
        logger.debug(
            "audit_implicit_types_computed",
            strategy=strategy.value,
            count=len(implicit),
        )
        return implicit

    def get_association_types_to_audit(self, cls: type) -> set[type]:
        """Return the types reachable from ``cls`` via owned associations."""
        return self.associations.closure([cls])

    def get_persistent_concrete_subclasses(self, cls: type | None) -> set[type]:
        """Return the concrete mapped subclasses of ``cls``."""
        return self.subclasses.concrete_subclasses(cls)

    def store_last_state_of_deleted_items(self) -> bool:
        """Check whether deleted items keep a snapshot of their last state."""
        return self._guarded(
            (CacheSlot.STORE_LAST_STATE,),
            lambda: self.cache.get_or_compute(
                CacheSlot.STORE_LAST_STATE, self._read_store_last_state
            ),
        )

    def _read_store_last_state(self) -> bool:
        raw = self.store.get_value(self.store_last_state_key)
        return raw is not None and raw.strip().lower() in TRUTHY_VALUES

    # Mutations

    def start_auditing(self, types: Iterable[type]) -> None:
        """Make ``types`` audited under an exception-based strategy.

        Raises:
            PolicyStateError: If the strategy is NONE or ALL
            PersistenceError: If the exception list cannot be saved
        """
        self._update_exceptions(types, start_auditing=True)

    def stop_auditing(self, types: Iterable[type]) -> None:
        """Stop auditing ``types`` under an exception-based strategy.

        Raises:
            PolicyStateError: If the strategy is NONE or ALL
            PersistenceError: If the exception list cannot be saved
        """
        self._update_exceptions(types, start_auditing=False)

    def _update_exceptions(self, types: Iterable[type], start_auditing: bool) -> None:
        types = list(types)
        with self.exception_set.lock:
            generation = self.cache.generation(CacheSlot.EXCEPTIONS)
            strategy = self.get_strategy()
            if not strategy.uses_exceptions:
                action = "start" if start_auditing else "stop"
                raise PolicyStateError(
                    f"Can't {action} auditing when the auditing strategy is set to "
                    f"{AuditingStrategy.NONE} or {AuditingStrategy.ALL}",
                    details={"strategy": strategy.value, "types": names_of(types)},
                )
            with self.guard.suspended():
                self.exception_set.update(types, start_auditing, strategy, generation)

    # Configuration changes

    def supports_key(self, key: str) -> bool:
        """Check whether changes to ``key`` affect this engine."""
        return key in (
            self.strategy_key,
            self.exceptions_key,
            self.store_last_state_key,
        )

    def on_configuration_change(self, change: ConfigurationChange) -> None:
        """Invalidate the caches that depend on the changed property."""
        if change.key == self.store_last_state_key:
            self.cache.invalidate(CacheSlot.STORE_LAST_STATE)
        elif change.key == self.strategy_key:
            self.cache.invalidate(
                CacheSlot.STRATEGY,
                CacheSlot.EXCEPTIONS,
                CacheSlot.IMPLICITLY_AUDITED,
            )
            # A list of exceptions means something else under a new strategy
            self.exception_set.reset()
        elif change.key == self.exceptions_key:
            self.cache.invalidate(CacheSlot.EXCEPTIONS, CacheSlot.IMPLICITLY_AUDITED)
        else:
            return

        logger.info(
            "audit_caches_invalidated", key=change.key, deleted=change.deleted
        )
