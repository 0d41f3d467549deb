"""
SQLAlchemy DeclarativeBase models -- read-only mirrors of the tables this
service reads.

Column names use camelCase to match the actual PostgreSQL column names.
The preference service that writes these rows owns the schema; these
models are NOT used for migrations.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class UserPreference(Base):
    """Saved cities for an anonymous browser session. Ordered, lowercased on write."""

    __tablename__ = "user_preferences"

    sessionId: Mapped[str] = mapped_column(String(100), primary_key=True)
    cities: Mapped[list[str]] = mapped_column(ARRAY(String), server_default="{}")
    createdAt: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    updatedAt: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
