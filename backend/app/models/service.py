"""Service ORM — marketing service offerings with features and technologies.

Invariants:
    - title is the natural key (unique)
    - ServiceFeature rows are owned free-text bullets: replaced wholesale on update
    - ServiceTechnology links reference existing technologies and carry a copy of
      the technology name for display

Design Decisions:
    - The copied name is written by the synchronizer at link time, so a link
      never exists with an empty name
"""

from sqlalchemy import String, Text, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, TimestampMixin


class Service(TimestampMixin, Base):
    """A service offered on the marketing site."""
    __tablename__ = "services"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    icon: Mapped[str | None] = mapped_column(String(50), nullable=True)
    subtitle: Mapped[str | None] = mapped_column(String(300), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    color: Mapped[str | None] = mapped_column(String(100), nullable=True)

    features: Mapped[list["ServiceFeature"]] = relationship(
        "ServiceFeature", cascade="all, delete-orphan", passive_deletes=True,
        order_by="ServiceFeature.id", lazy="selectin",
    )
    technology_links: Mapped[list["ServiceTechnology"]] = relationship(
        "ServiceTechnology", cascade="all, delete-orphan", passive_deletes=True,
        lazy="selectin",
    )


class ServiceFeature(Base):
    __tablename__ = "service_features"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    service_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("services.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)


class ServiceTechnology(Base):
    """Join row: service built with technology."""
    __tablename__ = "service_technologies"

    service_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("services.id", ondelete="CASCADE"), primary_key=True,
    )
    technology_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("technologies.id", ondelete="RESTRICT"), primary_key=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
