"""Dictionary-backed configuration store."""

from collections.abc import Iterator, Mapping
from contextlib import contextmanager

from auditlog.core.errors import PersistenceError
from auditlog.core.settings_store.base import NotifyingStore


class InMemoryConfigurationStore(NotifyingStore):
    """Configuration held in a dict.

    Counts reads and writes, and can be told to fail writes, so tests can
    observe caching and persistence failure behaviour.

    Example:
        store = InMemoryConfigurationStore({"auditlog.auditingStrategy": "ALL"})
    """

    def __init__(self, values: Mapping[str, str] | None = None) -> None:
        super().__init__()
        self._values: dict[str, str] = dict(values or {})
        self.reads: list[str] = []
        self.writes: list[tuple[str, str]] = []
        self.fail_writes = False

    def get_value(self, key: str) -> str | None:
        self.reads.append(key)
        return self._values.get(key)

    def set_value(self, key: str, value: str, description: str | None = None) -> None:
        if self.fail_writes:
            raise PersistenceError(
                f"Failed to save {key}", details={"property": key}
            )
        self._values[key] = value
        self.writes.append((key, value))
        self._notify(key, value)

    def delete_value(self, key: str) -> None:
        if self._values.pop(key, None) is not None:
            self._notify(key, None)

    def reads_of(self, key: str) -> int:
        return self.reads.count(key)

    @contextmanager
    def suspended(self) -> Iterator[None]:
        with self.notifications_suspended():
            yield
