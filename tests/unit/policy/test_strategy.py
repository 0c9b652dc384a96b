"""Tests for auditing strategy parsing."""

import pytest

from auditlog.core.errors import ConfigurationError
from auditlog.policy.strategy import AuditingStrategy, parse_strategy


KEY = "auditlog.auditingStrategy"


class TestParseStrategy:
    """Tests for parse_strategy."""

    @pytest.mark.parametrize("value", [None, "", "   ", "\t\n"])
    def test_blank_values_are_unset(self, value):
        """Absent or blank values mean no strategy is configured."""
        assert parse_strategy(value, KEY) is None

    @pytest.mark.parametrize("strategy", list(AuditingStrategy))
    def test_parses_every_name(self, strategy):
        assert parse_strategy(strategy.value, KEY) is strategy

    def test_trims_whitespace(self):
        assert parse_strategy("  ALL_EXCEPT ", KEY) is AuditingStrategy.ALL_EXCEPT

    def test_unknown_value_raises(self):
        """A value naming no strategy is a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            parse_strategy("SOME_EXCEPT", KEY)

        assert exc_info.value.details["property"] == KEY
        assert exc_info.value.details["value"] == "SOME_EXCEPT"
        assert "NONE_EXCEPT" in exc_info.value.details["allowed"]

    def test_names_are_case_sensitive(self):
        with pytest.raises(ConfigurationError):
            parse_strategy("all", KEY)


class TestAuditingStrategy:
    """Tests for AuditingStrategy."""

    def test_exception_based_strategies(self):
        assert AuditingStrategy.NONE_EXCEPT.uses_exceptions
        assert AuditingStrategy.ALL_EXCEPT.uses_exceptions
        assert not AuditingStrategy.NONE.uses_exceptions
        assert not AuditingStrategy.ALL.uses_exceptions
