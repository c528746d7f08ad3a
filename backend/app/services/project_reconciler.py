"""Project Reconciler — writes a project and everything it owns as one unit.

Invariants:
    - Projects are keyed by slug, derived from the title; upsert of the same
      seed twice leaves one project with identical links and sub-records
    - The category must exist before any write (ResourceNotFoundError otherwise)
    - Technology/feature links go through the AssociationSynchronizer: unknown
      names are skipped and reported, never created
    - Metric, link and images are delete-then-recreate when supplied
    - Category.count is NOT touched here; counts are refreshed by recalculation
    - Flushes only — the caller owns the transaction boundary

Design Decisions:
    - Sub-records rewritten with bulk DELETE + INSERT rather than ORM collection
      mutation: the same statements work whether or not the collections are loaded
    - Returned project reloaded with populate_existing so eager collections
      reflect the bulk writes
"""

import logging

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import CategoryId, ProjectId
from app.core.errors import DuplicateKeyError, ResourceNotFoundError
from app.core.results import UpsertResult
from app.core.slugs import generate_slug
from app.infrastructure.database import integrity_error_for
from app.models.category import Category
from app.models.project import Project, ProjectImage, ProjectLink, ProjectMetric
from app.schemas.project import (
    ProjectCreate, ProjectImageIn, ProjectLinks, ProjectMetrics, ProjectUpdate,
)
from app.services.association_sync import (
    PROJECT_FEATURES, PROJECT_TECHNOLOGIES, AssociationSynchronizer,
)

logger = logging.getLogger(__name__)


class ProjectReconciler:
    """Create, update and upsert of projects with owned sub-records."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.sync = AssociationSynchronizer(db)

    async def create(self, data: ProjectCreate) -> tuple[Project, list[str]]:
        """Insert a new project. Raises DuplicateKeyError if the slug is taken."""
        slug = generate_slug(data.title)
        await self._require_category(data.category_id)
        if await self._find_by_slug(slug) is not None:
            raise DuplicateKeyError("Project", slug)

        project = Project(slug=slug, **data.scalar_fields())
        self.db.add(project)
        await self._flush_unique(slug)
        skipped = await self.apply_relations(project.id, data)
        return await self.reload(project.id), skipped

    async def update(
        self, project_id: ProjectId, data: ProjectUpdate,
    ) -> tuple[Project, list[str]]:
        """Partial update; the slug stays fixed after creation."""
        project = await self._lock(project_id)
        scalars = data.scalar_fields()
        if "category_id" in scalars:
            await self._require_category(scalars["category_id"])
        for name, value in scalars.items():
            setattr(project, name, value)
        await self._flush_unique(project.slug)
        skipped = await self.apply_relations(project.id, data)
        return await self.reload(project.id), skipped

    async def upsert(self, seed: ProjectCreate) -> tuple[UpsertResult, list[str]]:
        """Create or fully rewrite the project whose slug derives from seed.title."""
        slug = generate_slug(seed.title)
        await self._require_category(seed.category_id)

        project = await self._find_by_slug(slug, lock=True)
        created = project is None
        if created:
            project = Project(slug=slug, **seed.scalar_fields())
            self.db.add(project)
        else:
            for name, value in seed.scalar_fields().items():
                setattr(project, name, value)
        await self._flush_unique(slug)

        skipped = await self.apply_relations(project.id, seed)
        logger.info(
            f"{'Created' if created else 'Updated'} project {slug}",
            extra={"entity_kind": "project", "natural_key": slug},
        )
        entity = await self.reload(project.id)
        return UpsertResult(entity=entity, created=created), skipped

    async def delete(self, project_id: ProjectId) -> None:
        project = await self._lock(project_id)
        await self.db.delete(project)
        await self.db.flush()

    async def apply_relations(
        self, project_id: ProjectId, data: ProjectCreate | ProjectUpdate,
    ) -> list[str]:
        """Write every relation present in data. Returns skipped natural keys."""
        skipped: list[str] = []
        if data.technologies is not None:
            report = await self.sync.sync(PROJECT_TECHNOLOGIES, project_id, data.technologies)
            skipped.extend(report.skipped)
        if data.features is not None:
            report = await self.sync.sync(PROJECT_FEATURES, project_id, data.features)
            skipped.extend(report.skipped)
        if data.metrics is not None:
            await self._replace_metrics(project_id, data.metrics)
        if data.links is not None:
            await self._replace_links(project_id, data.links)
        if data.images is not None:
            await self._replace_images(project_id, data.images)
        await self.db.flush()
        return skipped

    async def reload(self, project_id: ProjectId) -> Project:
        result = await self.db.execute(
            select(Project)
            .where(Project.id == project_id)
            .execution_options(populate_existing=True),
        )
        project = result.scalar_one_or_none()
        if project is None:
            raise ResourceNotFoundError("Project", project_id)
        return project

    # ─── Internals ──────────────────────────────────────────────

    async def _replace_metrics(self, project_id: ProjectId, metrics: ProjectMetrics) -> None:
        await self.db.execute(
            delete(ProjectMetric).where(ProjectMetric.project_id == project_id),
        )
        await self.db.execute(
            insert(ProjectMetric), [{"project_id": project_id, **metrics.model_dump()}],
        )

    async def _replace_links(self, project_id: ProjectId, links: ProjectLinks) -> None:
        await self.db.execute(
            delete(ProjectLink).where(ProjectLink.project_id == project_id),
        )
        await self.db.execute(
            insert(ProjectLink), [{"project_id": project_id, **links.model_dump()}],
        )

    async def _replace_images(
        self, project_id: ProjectId, images: list[ProjectImageIn],
    ) -> None:
        await self.db.execute(
            delete(ProjectImage).where(ProjectImage.project_id == project_id),
        )
        if not images:
            return
        rows = [
            {
                "project_id": project_id,
                "url": image.url,
                "caption": image.caption,
                # Position in the list unless the caller pinned an order
                "order": image.order if image.order is not None else index,
                "image_type": image.type.value,
            }
            for index, image in enumerate(images)
        ]
        await self.db.execute(insert(ProjectImage), rows)

    async def _require_category(self, category_id: CategoryId) -> None:
        if await self.db.get(Category, category_id) is None:
            raise ResourceNotFoundError("Category", category_id)

    async def _find_by_slug(self, slug: str, lock: bool = False) -> Project | None:
        stmt = select(Project).where(Project.slug == slug)
        if lock:
            stmt = stmt.with_for_update()
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _lock(self, project_id: ProjectId) -> Project:
        result = await self.db.execute(
            select(Project).where(Project.id == project_id).with_for_update(),
        )
        project = result.scalar_one_or_none()
        if project is None:
            raise ResourceNotFoundError("Project", project_id)
        return project

    async def _flush_unique(self, slug: str) -> None:
        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            raise integrity_error_for(e, "Project", slug)
