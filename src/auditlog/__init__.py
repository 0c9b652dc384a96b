"""Audit policy engine for SQLAlchemy-mapped domain models."""

__version__ = "0.1.0"
