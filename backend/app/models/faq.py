"""FAQ ORM — categories and the question/answer items they own.

Invariants:
    - FAQCategory.id is a caller-chosen slug ("general", "pricing")
    - FAQItem.category references FAQCategory.id; a category with items cannot
      be deleted (guard first, FK RESTRICT underneath)
    - `popular` is a filter flag, not a separate entity
"""

from sqlalchemy import Boolean, String, Text, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, TimestampMixin


class FAQCategory(TimestampMixin, Base):
    """Named FAQ section with an icon."""
    __tablename__ = "faq_categories"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    icon: Mapped[str] = mapped_column(String(50), nullable=False)


class FAQItem(TimestampMixin, Base):
    """One question/answer pair."""
    __tablename__ = "faq_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    category: Mapped[str] = mapped_column(
        String(50), ForeignKey("faq_categories.id", ondelete="RESTRICT"),
        nullable=False, index=True,
    )
    question: Mapped[str] = mapped_column(Text, nullable=False)
    answer: Mapped[str] = mapped_column(Text, nullable=False)
    popular: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
