"""Scoped suspension of side effects during cache-miss computations.

Filling a cache reads configuration through the same session that
triggers audit checks on flush. If that read autoflushed, the flush hook
would ask the engine again while it is still computing. The guard enters
every registered suspender for the duration of the computation and exits
them on every path, exceptions included.
"""

import threading
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, ExitStack, contextmanager
from typing import Any


Suspender = Callable[[], AbstractContextManager[Any]]


class ReentrancyGuard:
    """Enters a stack of suspenders around a computation.

    Nested use on the same thread only enters the suspenders once.
    """

    def __init__(self, *suspenders: Suspender) -> None:
        self._suspenders = list(suspenders)
        self._local = threading.local()

    def add(self, suspender: Suspender) -> None:
        """Register another suspender, entered after the existing ones."""
        self._suspenders.append(suspender)

    @property
    def active(self) -> bool:
        return getattr(self._local, "depth", 0) > 0

    @contextmanager
    def suspended(self) -> Iterator[None]:
        if self.active:
            self._local.depth += 1
            try:
                yield
            finally:
                self._local.depth -= 1
            return

        with ExitStack() as stack:
            for suspender in self._suspenders:
                stack.enter_context(suspender())
            self._local.depth = 1
            try:
                yield
            finally:
                self._local.depth = 0
