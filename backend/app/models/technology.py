"""Technology and Feature ORM — shared vocabularies referenced by projects and services.

Invariants:
    - name is the natural key (unique); upserts resolve by name, never by id
    - Rows are never removed while a join row references them (FK RESTRICT)
"""

from sqlalchemy import String, Text, Integer
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, TimestampMixin


class Technology(TimestampMixin, Base):
    """A technology (framework, language, tool) used by projects and services."""
    __tablename__ = "technologies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    icon: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class Feature(TimestampMixin, Base):
    """A named project feature (e.g. "Responsive Design")."""
    __tablename__ = "features"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
