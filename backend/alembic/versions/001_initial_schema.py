"""Initial schema — categories, projects, vocabularies, FAQ, blog taxonomy, services.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "categories",
        sa.Column("id", sa.String(50), primary_key=True),
        sa.Column("label", sa.String(100), nullable=False),
        sa.Column("count", sa.Integer, nullable=False, server_default="0"),
        *_timestamps(),
    )

    op.create_table(
        "technologies",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("icon", sa.String(100), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "features",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False, unique=True),
        *_timestamps(),
    )

    op.create_table(
        "projects",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("slug", sa.String(200), nullable=False, unique=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("subtitle", sa.String(300), nullable=False, server_default=""),
        sa.Column(
            "category_id", sa.String(50),
            sa.ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False,
        ),
        sa.Column("type", sa.String(100), nullable=False, server_default=""),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("image", sa.String(500), nullable=True),
        sa.Column("duration", sa.String(50), nullable=True),
        sa.Column("year", sa.String(10), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="DEVELOPMENT"),
        sa.Column("icon", sa.String(100), nullable=True),
        sa.Column("color", sa.String(100), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_projects_category_id", "projects", ["category_id"])

    op.create_table(
        "project_metrics",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "project_id", sa.Integer,
            sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, unique=True,
        ),
        sa.Column("users", sa.String(50), nullable=True),
        sa.Column("performance", sa.String(50), nullable=True),
        sa.Column("rating", sa.String(50), nullable=True),
        sa.Column("downloads", sa.String(50), nullable=True),
        sa.Column("revenue", sa.String(50), nullable=True),
        sa.Column("uptime", sa.String(50), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "project_links",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "project_id", sa.Integer,
            sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, unique=True,
        ),
        sa.Column("live", sa.String(500), nullable=True),
        sa.Column("github", sa.String(500), nullable=True),
        sa.Column("case", sa.String(500), nullable=True),
        sa.Column("demo", sa.String(500), nullable=True),
        sa.Column("docs", sa.String(500), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "project_images",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "project_id", sa.Integer,
            sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("url", sa.String(500), nullable=False),
        sa.Column("caption", sa.String(300), nullable=True),
        sa.Column("order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("type", sa.String(20), nullable=False, server_default="SCREENSHOT"),
        *_timestamps(),
    )
    op.create_index("ix_project_images_project_id", "project_images", ["project_id"])

    op.create_table(
        "project_technologies",
        sa.Column(
            "project_id", sa.Integer,
            sa.ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True,
        ),
        sa.Column(
            "technology_id", sa.Integer,
            sa.ForeignKey("technologies.id", ondelete="RESTRICT"), primary_key=True,
        ),
    )

    op.create_table(
        "project_features",
        sa.Column(
            "project_id", sa.Integer,
            sa.ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True,
        ),
        sa.Column(
            "feature_id", sa.Integer,
            sa.ForeignKey("features.id", ondelete="RESTRICT"), primary_key=True,
        ),
    )

    op.create_table(
        "faq_categories",
        sa.Column("id", sa.String(50), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("icon", sa.String(50), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "faq_items",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "category", sa.String(50),
            sa.ForeignKey("faq_categories.id", ondelete="RESTRICT"), nullable=False,
        ),
        sa.Column("question", sa.Text, nullable=False),
        sa.Column("answer", sa.Text, nullable=False),
        sa.Column("popular", sa.Boolean, nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("ix_faq_items_category", "faq_items", ["category"])

    op.create_table(
        "blog_categories",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("slug", sa.String(120), nullable=False, unique=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("icon", sa.String(50), nullable=True),
        sa.Column("color", sa.String(50), nullable=True),
        sa.Column("post_count", sa.Integer, nullable=False, server_default="0"),
        *_timestamps(),
    )

    op.create_table(
        "blog_tags",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("slug", sa.String(120), nullable=False, unique=True),
        *_timestamps(),
    )

    op.create_table(
        "blog_posts",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("slug", sa.String(300), nullable=False, unique=True),
        sa.Column("excerpt", sa.Text, nullable=True),
        sa.Column(
            "category_id", sa.Integer,
            sa.ForeignKey("blog_categories.id", ondelete="RESTRICT"), nullable=False,
        ),
        sa.Column("published", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("featured", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_blog_posts_category_id", "blog_posts", ["category_id"])

    op.create_table(
        "blog_post_tags",
        sa.Column(
            "post_id", sa.Integer,
            sa.ForeignKey("blog_posts.id", ondelete="CASCADE"), primary_key=True,
        ),
        sa.Column(
            "tag_id", sa.Integer,
            sa.ForeignKey("blog_tags.id", ondelete="RESTRICT"), primary_key=True,
        ),
    )

    op.create_table(
        "services",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(200), nullable=False, unique=True),
        sa.Column("icon", sa.String(50), nullable=True),
        sa.Column("subtitle", sa.String(300), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("color", sa.String(100), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "service_features",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "service_id", sa.Integer,
            sa.ForeignKey("services.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("name", sa.String(200), nullable=False),
    )
    op.create_index("ix_service_features_service_id", "service_features", ["service_id"])

    op.create_table(
        "service_technologies",
        sa.Column(
            "service_id", sa.Integer,
            sa.ForeignKey("services.id", ondelete="CASCADE"), primary_key=True,
        ),
        sa.Column(
            "technology_id", sa.Integer,
            sa.ForeignKey("technologies.id", ondelete="RESTRICT"), primary_key=True,
        ),
        sa.Column("name", sa.String(100), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("service_technologies")
    op.drop_table("service_features")
    op.drop_table("services")
    op.drop_table("blog_post_tags")
    op.drop_table("blog_posts")
    op.drop_table("blog_tags")
    op.drop_table("blog_categories")
    op.drop_table("faq_items")
    op.drop_table("faq_categories")
    op.drop_table("project_features")
    op.drop_table("project_technologies")
    op.drop_table("project_images")
    op.drop_table("project_links")
    op.drop_table("project_metrics")
    op.drop_table("projects")
    op.drop_table("features")
    op.drop_table("technologies")
    op.drop_table("categories")
