"""Configuration property database model."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from auditlog.core.constants import MAX_PROPERTY_NAME_LENGTH
from auditlog.core.database.base import Base, TimestampMixin


class GlobalSetting(Base, TimestampMixin):
    """A named, human-editable configuration value.

    Attributes:
        name: Unique property name, e.g. ``auditlog.auditingStrategy``
        value: Raw string value (nullable)
        description: What the property controls
    """

    __tablename__ = "global_settings"

    name: Mapped[str] = mapped_column(
        "property",  # Column name in database
        String(MAX_PROPERTY_NAME_LENGTH),
        primary_key=True,
    )
    value: Mapped[str | None] = mapped_column(
        "property_value",
        Text,
        nullable=True,
    )
    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<GlobalSetting(name={self.name}, value={self.value})>"
