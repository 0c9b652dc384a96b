"""Auditing strategies."""

from enum import StrEnum

from auditlog.core.errors import ConfigurationError


class AuditingStrategy(StrEnum):
    """Global mode selecting how audit inclusion is decided.

    NONE_EXCEPT audits only the types in the exception list; ALL_EXCEPT
    audits every type except those in it.
    """

    NONE = "NONE"
    ALL = "ALL"
    NONE_EXCEPT = "NONE_EXCEPT"
    ALL_EXCEPT = "ALL_EXCEPT"

    @property
    def uses_exceptions(self) -> bool:
        return self in (AuditingStrategy.NONE_EXCEPT, AuditingStrategy.ALL_EXCEPT)


def parse_strategy(value: str | None, key: str) -> AuditingStrategy | None:
    """Parse a stored strategy value.

    Args:
        value: Raw configuration value
        key: Property the value was read from, for error details

    Returns:
        The strategy, or None if the value is absent or blank

    Raises:
        ConfigurationError: If the value names no strategy
    """
    if value is None or not value.strip():
        return None
    try:
        return AuditingStrategy[value.strip()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown auditing strategy: {value.strip()!r}",
            details={
                "property": key,
                "value": value,
                "allowed": [strategy.value for strategy in AuditingStrategy],
            },
        ) from None
