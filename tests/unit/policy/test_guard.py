"""Tests for the re-entrancy guard."""

from contextlib import contextmanager

import pytest

from auditlog.policy.guard import ReentrancyGuard


class RecordingSuspender:
    """Suspender recording enter/exit calls."""

    def __init__(self, name, events):
        self.name = name
        self.events = events

    @contextmanager
    def __call__(self):
        self.events.append(f"enter:{self.name}")
        try:
            yield
        finally:
            self.events.append(f"exit:{self.name}")


class TestReentrancyGuard:
    """Tests for ReentrancyGuard."""

    def test_enters_and_exits_suspenders_in_order(self):
        events = []
        guard = ReentrancyGuard(
            RecordingSuspender("flush", events), RecordingSuspender("notify", events)
        )

        with guard.suspended():
            assert guard.active
            events.append("body")

        assert not guard.active
        assert events == [
            "enter:flush",
            "enter:notify",
            "body",
            "exit:notify",
            "exit:flush",
        ]

    def test_restores_on_exception(self):
        """Suspenders are released when the computation fails."""
        events = []
        guard = ReentrancyGuard(RecordingSuspender("flush", events))

        with pytest.raises(RuntimeError), guard.suspended():
            raise RuntimeError("boom")

        assert events == ["enter:flush", "exit:flush"]
        assert not guard.active

    def test_nested_use_enters_once(self):
        events = []
        guard = ReentrancyGuard(RecordingSuspender("flush", events))

        with guard.suspended():
            with guard.suspended():
                events.append("inner")
            assert guard.active

        assert events == ["enter:flush", "inner", "exit:flush"]

    def test_added_suspender_is_used(self):
        events = []
        guard = ReentrancyGuard()
        guard.add(RecordingSuspender("late", events))

        with guard.suspended():
            pass

        assert events == ["enter:late", "exit:late"]
