"""Category ORM — portfolio project category keyed by a slug id.

Invariants:
    - id is a slug (e.g. "web", "mobile"), chosen by the caller, immutable
    - count is a denormalized cache of projects referencing the category;
      refreshed only by explicit recalculation (services/aggregates.py)

Design Decisions:
    - No relationship() to Project: dependents are always counted live by the
      referential guard, never loaded into memory
"""

from sqlalchemy import String, Integer
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, TimestampMixin


class Category(TimestampMixin, Base):
    """Project category with cached project count."""
    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    label: Mapped[str] = mapped_column(String(100), nullable=False)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
