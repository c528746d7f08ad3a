"""Project ORM — portfolio entry with owned sub-records.

Invariants:
    - slug is unique and derived from the title (core/slugs.py)
    - category_id is required; the category cannot be deleted while referenced
    - At most one ProjectMetric and one ProjectLink per project (unique project_id)
    - Images ordered by `order` ascending
    - Sub-records and join rows are owned: deleting a project deletes them

Design Decisions:
    - All collections eager (selectin): the API always returns the full project
    - passive_deletes=True: DB-level ON DELETE CASCADE does the child cleanup
    - Creating/deleting a project never touches Category.count; the counter is
      refreshed by explicit recalculation
"""

from sqlalchemy import String, Text, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.domain_types import ImageType, ProjectStatus
from app.db.base import Base, TimestampMixin


class Project(TimestampMixin, Base):
    """Portfolio project — owns metrics, links, images, and relation links."""
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    subtitle: Mapped[str] = mapped_column(String(300), nullable=False, default="")
    category_id: Mapped[str] = mapped_column(
        String(50), ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=False, index=True,
    )
    type: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    duration: Mapped[str | None] = mapped_column(String(50), nullable=True)
    year: Mapped[str | None] = mapped_column(String(10), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ProjectStatus.DEVELOPMENT.value,
    )
    icon: Mapped[str | None] = mapped_column(String(100), nullable=True)
    color: Mapped[str | None] = mapped_column(String(100), nullable=True)

    metrics: Mapped["ProjectMetric"] = relationship(
        "ProjectMetric", uselist=False, cascade="all, delete-orphan",
        passive_deletes=True, lazy="selectin",
    )
    links: Mapped["ProjectLink"] = relationship(
        "ProjectLink", uselist=False, cascade="all, delete-orphan",
        passive_deletes=True, lazy="selectin",
    )
    images: Mapped[list["ProjectImage"]] = relationship(
        "ProjectImage", cascade="all, delete-orphan", passive_deletes=True,
        order_by="ProjectImage.order", lazy="selectin",
    )
    technology_links: Mapped[list["ProjectTechnology"]] = relationship(
        "ProjectTechnology", cascade="all, delete-orphan", passive_deletes=True,
        lazy="selectin",
    )
    feature_links: Mapped[list["ProjectFeature"]] = relationship(
        "ProjectFeature", cascade="all, delete-orphan", passive_deletes=True,
        lazy="selectin",
    )

    @property
    def technologies(self) -> list[str]:
        return [link.technology.name for link in self.technology_links]

    @property
    def features(self) -> list[str]:
        return [link.feature.name for link in self.feature_links]


class ProjectMetric(TimestampMixin, Base):
    """Headline numbers shown on the project page (free-form strings)."""
    __tablename__ = "project_metrics"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    users: Mapped[str | None] = mapped_column(String(50), nullable=True)
    performance: Mapped[str | None] = mapped_column(String(50), nullable=True)
    rating: Mapped[str | None] = mapped_column(String(50), nullable=True)
    downloads: Mapped[str | None] = mapped_column(String(50), nullable=True)
    revenue: Mapped[str | None] = mapped_column(String(50), nullable=True)
    uptime: Mapped[str | None] = mapped_column(String(50), nullable=True)


class ProjectLink(TimestampMixin, Base):
    """External URLs for a project."""
    __tablename__ = "project_links"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    live: Mapped[str | None] = mapped_column(String(500), nullable=True)
    github: Mapped[str | None] = mapped_column(String(500), nullable=True)
    case_study: Mapped[str | None] = mapped_column("case", String(500), nullable=True)
    demo: Mapped[str | None] = mapped_column(String(500), nullable=True)
    docs: Mapped[str | None] = mapped_column(String(500), nullable=True)


class ProjectImage(TimestampMixin, Base):
    """Gallery image; position given by `order`."""
    __tablename__ = "project_images"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    url: Mapped[str] = mapped_column(String(500), nullable=False)
    caption: Mapped[str | None] = mapped_column(String(300), nullable=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    image_type: Mapped[str] = mapped_column(
        "type", String(20), nullable=False, default=ImageType.SCREENSHOT.value,
    )
