"""SQLAlchemy domain models for introspection and flush-hook tests."""

from sqlalchemy import Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class DomainBase(DeclarativeBase):
    pass


class Auditable(DomainBase):
    """Abstract base; never mapped itself."""

    __abstract__ = True

    id: Mapped[int] = mapped_column(Integer, primary_key=True)


patient_tags = Table(
    "patient_tags",
    DomainBase.metadata,
    Column("patient_id", ForeignKey("patients.id"), primary_key=True),
    Column("tag_id", ForeignKey("tags.id"), primary_key=True),
)


class Person(Auditable):
    __tablename__ = "persons"

    kind: Mapped[str] = mapped_column(String(20))
    gender: Mapped[str | None] = mapped_column(String(1), nullable=True)

    __mapper_args__ = {
        "polymorphic_on": "kind",
        "polymorphic_identity": "person",
    }


class Patient(Person):
    __tablename__ = "patients"

    id: Mapped[int] = mapped_column(ForeignKey("persons.id"), primary_key=True)
    identifier: Mapped[str] = mapped_column(String(50))

    visits: Mapped[list["Visit"]] = relationship(back_populates="patient")
    profile: Mapped["PatientProfile"] = relationship(
        back_populates="patient", uselist=False
    )
    tags: Mapped[list["Tag"]] = relationship(secondary=patient_tags)

    __mapper_args__ = {"polymorphic_identity": "patient"}


class PatientProfile(Auditable):
    __tablename__ = "patient_profiles"

    patient_id: Mapped[int] = mapped_column(ForeignKey("patients.id"))
    notes: Mapped[str | None] = mapped_column(String(255), nullable=True)

    patient: Mapped[Patient] = relationship(back_populates="profile")


class Visit(Auditable):
    __tablename__ = "visits"

    patient_id: Mapped[int] = mapped_column(ForeignKey("patients.id"))
    reason: Mapped[str | None] = mapped_column(String(255), nullable=True)

    patient: Mapped[Patient] = relationship(back_populates="visits")


class Tag(Auditable):
    __tablename__ = "tags"

    name: Mapped[str] = mapped_column(String(50))
