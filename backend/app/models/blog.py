"""Blog Taxonomy ORM — categories, tags, and the posts that reference them.

Invariants:
    - BlogCategory.name and BlogTag.name are natural keys; slugs derived from them
    - BlogCategory.post_count caches the number of *published* posts in the
      category; refreshed only by explicit recalculation
    - BlogPostTag links are written only by services/association_sync.py

Design Decisions:
    - BlogPost kept minimal (title, slug, category, publish flags): post bodies,
      authors, and stats are content plumbing with no cross-entity invariant
"""

from datetime import datetime

from sqlalchemy import Boolean, String, Text, Integer, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, TimestampMixin


class BlogCategory(TimestampMixin, Base):
    """Blog category with cached published-post count."""
    __tablename__ = "blog_categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    slug: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon: Mapped[str | None] = mapped_column(String(50), nullable=True)
    color: Mapped[str | None] = mapped_column(String(50), nullable=True)
    post_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class BlogTag(TimestampMixin, Base):
    __tablename__ = "blog_tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    slug: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)


class BlogPost(TimestampMixin, Base):
    """Blog post header row."""
    __tablename__ = "blog_posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    slug: Mapped[str] = mapped_column(String(300), nullable=False, unique=True)
    excerpt: Mapped[str | None] = mapped_column(Text, nullable=True)
    category_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("blog_categories.id", ondelete="RESTRICT"),
        nullable=False, index=True,
    )
    published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    published_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )


class BlogPostTag(Base):
    """Join row: post tagged with tag."""
    __tablename__ = "blog_post_tags"

    post_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("blog_posts.id", ondelete="CASCADE"), primary_key=True,
    )
    tag_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("blog_tags.id", ondelete="RESTRICT"), primary_key=True,
    )
