"""Catalog Queries — read side for list and detail endpoints.

Invariants:
    - Read-only: never flushes, never commits
    - Live counts (project_count, item count) are computed per call, alongside
      the cached counters, so staleness stays observable
    - Missing detail rows raise ResourceNotFoundError
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import CategoryId, ProjectId
from app.core.errors import ResourceNotFoundError
from app.models.blog import BlogCategory, BlogTag
from app.models.category import Category
from app.models.faq import FAQCategory, FAQItem
from app.models.project import Project
from app.models.service import Service
from app.models.technology import Feature, Technology


class CatalogQueries:

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Categories ─────────────────────────────────────────────

    async def list_categories(self) -> list[tuple[Category, int]]:
        """Categories with their live project count, ordered by id."""
        live = (
            select(Project.category_id, func.count().label("n"))
            .group_by(Project.category_id)
            .subquery()
        )
        result = await self.db.execute(
            select(Category, func.coalesce(live.c.n, 0))
            .outerjoin(live, live.c.category_id == Category.id)
            .order_by(Category.id),
        )
        return [(category, n) for category, n in result.all()]

    async def get_category(self, category_id: CategoryId) -> tuple[Category, int]:
        category = await self.db.get(Category, category_id)
        if category is None:
            raise ResourceNotFoundError("Category", category_id)
        result = await self.db.execute(
            select(func.count()).select_from(Project)
            .where(Project.category_id == category_id),
        )
        return category, result.scalar_one()

    # ─── Projects ───────────────────────────────────────────────

    async def list_projects(
        self,
        skip: int = 0,
        take: int = 20,
        category: str | None = None,
        status: str | None = None,
    ) -> tuple[list[Project], int]:
        filters = []
        if category:
            filters.append(Project.category_id == category)
        if status:
            filters.append(Project.status == status)

        total = await self.db.execute(
            select(func.count()).select_from(Project).where(*filters),
        )
        result = await self.db.execute(
            select(Project)
            .where(*filters)
            .order_by(Project.created_at.desc(), Project.id.desc())
            .offset(skip)
            .limit(take),
        )
        return list(result.scalars().all()), total.scalar_one()

    async def get_project(self, project_id: ProjectId) -> Project:
        project = await self.db.get(Project, project_id)
        if project is None:
            raise ResourceNotFoundError("Project", project_id)
        return project

    async def get_project_by_slug(self, slug: str) -> Project:
        result = await self.db.execute(select(Project).where(Project.slug == slug))
        project = result.scalar_one_or_none()
        if project is None:
            raise ResourceNotFoundError("Project", slug)
        return project

    # ─── Vocabularies ───────────────────────────────────────────

    async def list_technologies(self) -> list[Technology]:
        result = await self.db.execute(select(Technology).order_by(Technology.name))
        return list(result.scalars().all())

    async def list_features(self) -> list[Feature]:
        result = await self.db.execute(select(Feature).order_by(Feature.name))
        return list(result.scalars().all())

    async def list_blog_categories(self) -> list[BlogCategory]:
        result = await self.db.execute(select(BlogCategory).order_by(BlogCategory.name))
        return list(result.scalars().all())

    async def list_blog_tags(self) -> list[BlogTag]:
        result = await self.db.execute(select(BlogTag).order_by(BlogTag.name))
        return list(result.scalars().all())

    async def list_services(self) -> list[Service]:
        result = await self.db.execute(select(Service).order_by(Service.id))
        return list(result.scalars().all())

    # ─── FAQ ────────────────────────────────────────────────────

    async def list_faq_categories(
        self, include_count: bool = False,
    ) -> list[tuple[FAQCategory, int | None]]:
        if not include_count:
            result = await self.db.execute(select(FAQCategory).order_by(FAQCategory.name))
            return [(category, None) for category in result.scalars().all()]

        live = (
            select(FAQItem.category, func.count().label("n"))
            .group_by(FAQItem.category)
            .subquery()
        )
        result = await self.db.execute(
            select(FAQCategory, func.coalesce(live.c.n, 0))
            .outerjoin(live, live.c.category == FAQCategory.id)
            .order_by(FAQCategory.name),
        )
        return [(category, n) for category, n in result.all()]

    async def list_faq_items(
        self,
        skip: int = 0,
        take: int = 50,
        category: str | None = None,
        popular: bool | None = None,
    ) -> tuple[list[FAQItem], int]:
        filters = []
        if category:
            filters.append(FAQItem.category == category)
        if popular is not None:
            filters.append(FAQItem.popular.is_(popular))

        total = await self.db.execute(
            select(func.count()).select_from(FAQItem).where(*filters),
        )
        result = await self.db.execute(
            select(FAQItem)
            .where(*filters)
            .order_by(FAQItem.id)
            .offset(skip)
            .limit(take),
        )
        return list(result.scalars().all()), total.scalar_one()
