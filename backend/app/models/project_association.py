"""Project join rows — many-to-many links from projects to technologies and features.

Invariants:
    - Composite primary key (project_id, referent_id): a link exists at most once
    - Deleting a project cascades its links; deleting a referenced technology
      or feature is restricted at the DB level
    - Links are only written by services/association_sync.py

Design Decisions:
    - technology/feature relationships eager (selectin): responses list names
      without lazy loads in async context
"""

from sqlalchemy import Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


class ProjectTechnology(Base):
    """Join row: project uses technology."""
    __tablename__ = "project_technologies"

    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True,
    )
    technology_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("technologies.id", ondelete="RESTRICT"), primary_key=True,
    )

    technology: Mapped["Technology"] = relationship("Technology", lazy="selectin")


class ProjectFeature(Base):
    """Join row: project offers feature."""
    __tablename__ = "project_features"

    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True,
    )
    feature_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("features.id", ondelete="RESTRICT"), primary_key=True,
    )

    feature: Mapped["Feature"] = relationship("Feature", lazy="selectin")
