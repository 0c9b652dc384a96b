"""Key-value configuration store interface and change notifications.

Stores deliver a ``ConfigurationChange`` to every subscribed listener after
a value is written or deleted. Delivery can be deferred per thread with
``suspended()``; deferred changes are delivered when the outermost
suspension ends.
"""

import threading
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import structlog


logger = structlog.get_logger()


@dataclass(frozen=True)
class ConfigurationChange:
    """A configuration property was written or deleted.

    Attributes:
        key: Property name
        value: New value, or None when the property was deleted
    """

    key: str
    value: str | None

    @property
    def deleted(self) -> bool:
        return self.value is None


ConfigurationListener = Callable[[ConfigurationChange], None]


@runtime_checkable
class ConfigurationStore(Protocol):
    """Protocol implemented by configuration stores."""

    def get_value(self, key: str) -> str | None: ...

    def set_value(self, key: str, value: str, description: str | None = None) -> None:
        """Write a value; raises PersistenceError on failure."""
        ...

    def delete_value(self, key: str) -> None: ...

    def subscribe(self, listener: ConfigurationListener) -> None: ...

    def suspended(self) -> AbstractContextManager[None]:
        """Scope during which reads have no side effects on the store."""
        ...


class NotifyingStore:
    """Listener bookkeeping and deferrable notification delivery."""

    def __init__(self) -> None:
        self._listeners: list[ConfigurationListener] = []
        self._local = threading.local()

    def subscribe(self, listener: ConfigurationListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: ConfigurationListener) -> None:
        self._listeners.remove(listener)

    def _depth(self) -> int:
        return getattr(self._local, "depth", 0)

    def _pending(self) -> list[ConfigurationChange]:
        if not hasattr(self._local, "pending"):
            self._local.pending = []
        return self._local.pending

    @contextmanager
    def notifications_suspended(self) -> Iterator[None]:
        """Defer change delivery on this thread until the scope exits."""
        self._local.depth = self._depth() + 1
        try:
            yield
        finally:
            self._local.depth -= 1
            if self._local.depth == 0:
                pending = list(self._pending())
                self._pending().clear()
                for change in pending:
                    self._deliver(change)

    def _notify(self, key: str, value: str | None) -> None:
        change = ConfigurationChange(key, value)
        if self._depth() > 0:
            self._pending().append(change)
            return
        self._deliver(change)

    def _deliver(self, change: ConfigurationChange) -> None:
        logger.debug(
            "configuration_changed", key=change.key, deleted=change.deleted
        )
        for listener in list(self._listeners):
            listener(change)
