"""Catalog Commands — the write surface of the catalog, one method per command.

Invariants:
    - Every method returns a CommandResult; NOT_FOUND, DUPLICATE_KEY, CONFLICT
      and TRANSIENT arrive as failure values, never as raised exceptions
    - One command == one transaction (commit on success, rollback on failure),
      except count recalculation, which commits per parent
    - Project create/update/delete never touch Category.count; callers refresh
      it with recalculate_category_counts / recalculate_category_count
    - Partial association syncs are successes carrying `skipped` natural keys

Design Decisions:
    - Commands compose the four components (synchronizer, maintainer, guard,
      reconciler) and own nothing else: each component flushes, the command commits
    - Status-code mapping deliberately absent: the transport decides (ADR: core
      knows nothing about HTTP)
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import (
    CategoryId, EntityKind, FAQCategoryId, FeatureId, ProjectId, TechnologyId,
)
from app.core.results import CommandResult, CountOutcome, SyncReport, UpsertResult
from app.models.category import Category
from app.models.project import Project
from app.schemas.catalog import CatalogSeed
from app.schemas.project import ProjectCreate, ProjectUpdate
from app.services.aggregates import (
    BLOG_CATEGORY_POST_COUNT, CATEGORY_PROJECT_COUNT, AggregateMaintainer,
)
from app.services.association_sync import (
    POST_TAGS, PROJECT_FEATURES, PROJECT_TECHNOLOGIES, SERVICE_TECHNOLOGIES,
    AssociationSynchronizer,
)
from app.services.catalog_import import CatalogImporter, ImportReport
from app.services.command_runner import CommandRunner
from app.services.project_reconciler import ProjectReconciler
from app.services.referential_guard import (
    BLOG_CATEGORY_GUARD, BLOG_TAG_GUARD, CATEGORY_GUARD, FAQ_CATEGORY_GUARD,
    FEATURE_GUARD, TECHNOLOGY_GUARD, GuardSpec, ReferentialGuard,
)
from app.services.upsert_reconciler import UPSERT_SPECS, UpsertReconciler

logger = logging.getLogger(__name__)


class CatalogCommands(CommandRunner):
    """Categories, projects, taxonomies, associations, upserts and imports."""

    def __init__(
        self,
        db: AsyncSession,
        timeout_seconds: float | None = None,
        import_timeout_seconds: float | None = None,
    ):
        super().__init__(db, timeout_seconds)
        self.import_timeout_seconds = import_timeout_seconds
        self.sync = AssociationSynchronizer(db)
        self.aggregates = AggregateMaintainer(db)
        self.guard = ReferentialGuard(db)
        self.upserts = UpsertReconciler(db)
        self.projects = ProjectReconciler(db)

    # ─── Categories ─────────────────────────────────────────────

    async def create_category(self, category_id: CategoryId, label: str) -> CommandResult[Category]:
        async def work():
            category = await self.upserts.create(
                EntityKind.CATEGORY, category_id, {"label": label},
            )
            await self._commit("Category", category_id)
            return CommandResult.success(category)
        return await self._run("create_category", work)

    async def update_category(self, category_id: CategoryId, label: str) -> CommandResult[Category]:
        async def work():
            category = await self.upserts.update(
                EntityKind.CATEGORY, category_id, {"label": label},
            )
            await self.db.commit()
            return CommandResult.success(category)
        return await self._run("update_category", work)

    async def delete_category(self, category_id: CategoryId) -> CommandResult[None]:
        return await self._delete_guarded("delete_category", CATEGORY_GUARD, category_id)

    async def recalculate_category_counts(self) -> CommandResult[list[CountOutcome]]:
        async def work():
            outcomes = await self.aggregates.recalculate_all(CATEGORY_PROJECT_COUNT)
            return CommandResult.success(outcomes)
        return await self._run("recalculate_category_counts", work)

    async def recalculate_category_count(
        self, category_id: CategoryId,
    ) -> CommandResult[CountOutcome]:
        async def work():
            outcome = await self.aggregates.recalculate_one(
                CATEGORY_PROJECT_COUNT, category_id,
            )
            return CommandResult.success(outcome)
        return await self._run("recalculate_category_count", work)

    # ─── Taxonomy deletes ───────────────────────────────────────

    async def delete_faq_category(self, faq_category_id: FAQCategoryId) -> CommandResult[None]:
        return await self._delete_guarded(
            "delete_faq_category", FAQ_CATEGORY_GUARD, faq_category_id,
        )

    async def delete_technology(self, technology_id: TechnologyId) -> CommandResult[None]:
        return await self._delete_guarded("delete_technology", TECHNOLOGY_GUARD, technology_id)

    async def delete_feature(self, feature_id: FeatureId) -> CommandResult[None]:
        return await self._delete_guarded("delete_feature", FEATURE_GUARD, feature_id)

    async def delete_blog_category(self, blog_category_id: int) -> CommandResult[None]:
        return await self._delete_guarded(
            "delete_blog_category", BLOG_CATEGORY_GUARD, blog_category_id,
        )

    async def delete_blog_tag(self, tag_id: int) -> CommandResult[None]:
        return await self._delete_guarded("delete_blog_tag", BLOG_TAG_GUARD, tag_id)

    async def recalculate_blog_post_counts(self) -> CommandResult[list[CountOutcome]]:
        async def work():
            outcomes = await self.aggregates.recalculate_all(BLOG_CATEGORY_POST_COUNT)
            return CommandResult.success(outcomes)
        return await self._run("recalculate_blog_post_counts", work)

    # ─── Associations ───────────────────────────────────────────

    async def sync_project_associations(
        self, project_id: ProjectId, technology_names: list[str], feature_names: list[str],
    ) -> CommandResult[tuple[SyncReport, SyncReport]]:
        """Replace both link sets of a project in one transaction."""
        async def work():
            technologies = await self.sync.sync(
                PROJECT_TECHNOLOGIES, project_id, technology_names,
            )
            features = await self.sync.sync(PROJECT_FEATURES, project_id, feature_names)
            await self.db.commit()
            return CommandResult.from_report(
                (technologies, features),
                [*technologies.skipped, *features.skipped],
            )
        return await self._run("sync_project_associations", work)

    async def sync_service_technologies(
        self, service_id: int, technology_names: list[str],
    ) -> CommandResult[SyncReport]:
        return await self._sync_one(
            "sync_service_technologies", SERVICE_TECHNOLOGIES, service_id, technology_names,
        )

    async def sync_post_tags(self, post_id: int, tag_names: list[str]) -> CommandResult[SyncReport]:
        return await self._sync_one("sync_post_tags", POST_TAGS, post_id, tag_names)

    # ─── Upserts ────────────────────────────────────────────────

    async def create_by_natural_key(
        self, kind: EntityKind, natural_key: Any, attributes: dict,
    ) -> CommandResult[Any]:
        """Insert-only counterpart of upsert_by_natural_key."""
        async def work():
            entity = await self.upserts.create(kind, natural_key, attributes)
            await self._commit(UPSERT_SPECS[kind].label, natural_key)
            return CommandResult.success(entity)
        return await self._run(f"create_{kind.value}", work)

    async def upsert_by_natural_key(
        self, kind: EntityKind, natural_key: Any, attributes: dict,
    ) -> CommandResult[UpsertResult]:
        """Create or update the row for natural_key. Safe to retry blindly."""
        async def work():
            if kind == EntityKind.SERVICE:
                result, skipped = await self.upserts.upsert_service(natural_key, attributes)
            else:
                result = await self.upserts.upsert(kind, natural_key, attributes)
                skipped = []
            await self._commit(UPSERT_SPECS[kind].label, natural_key)
            return CommandResult.from_report(result, skipped)
        return await self._run(f"upsert_{kind.value}", work)

    async def upsert_project(self, seed: ProjectCreate) -> CommandResult[UpsertResult]:
        async def work():
            result, skipped = await self.projects.upsert(seed)
            await self._commit("Project", result.entity.slug)
            return CommandResult.from_report(result, skipped)
        return await self._run("upsert_project", work)

    # ─── Projects ───────────────────────────────────────────────

    async def create_project(self, data: ProjectCreate) -> CommandResult[Project]:
        async def work():
            project, skipped = await self.projects.create(data)
            await self._commit("Project", project.slug)
            return CommandResult.from_report(project, skipped)
        return await self._run("create_project", work)

    async def update_project(
        self, project_id: ProjectId, data: ProjectUpdate,
    ) -> CommandResult[Project]:
        async def work():
            project, skipped = await self.projects.update(project_id, data)
            await self._commit("Project", project.slug)
            return CommandResult.from_report(project, skipped)
        return await self._run("update_project", work)

    async def delete_project(self, project_id: ProjectId) -> CommandResult[None]:
        async def work():
            await self.projects.delete(project_id)
            await self.db.commit()
            return CommandResult.success()
        return await self._run("delete_project", work)

    # ─── Import ─────────────────────────────────────────────────

    async def import_catalog(self, seed: CatalogSeed) -> CommandResult[ImportReport]:
        async def work():
            report = await CatalogImporter(self.db).run(seed)
            return CommandResult.success(report)
        return await self._run(
            "import_catalog", work, timeout_seconds=self.import_timeout_seconds,
        )

    # ─── Internals ──────────────────────────────────────────────

    async def _delete_guarded(
        self, operation: str, spec: GuardSpec, parent_id: Any,
    ) -> CommandResult[None]:
        async def work():
            await self.guard.delete(spec, parent_id)
            await self.db.commit()
            logger.info(
                f"Deleted {spec.resource_type} {parent_id}",
                extra={"entity_kind": spec.resource_type, "natural_key": str(parent_id)},
            )
            return CommandResult.success()
        return await self._run(operation, work)

    async def _sync_one(
        self, operation: str, spec, owner_id: Any, keys: list[str],
    ) -> CommandResult[SyncReport]:
        async def work():
            report = await self.sync.sync(spec, owner_id, keys)
            await self.db.commit()
            return CommandResult.from_report(report, list(report.skipped))
        return await self._run(operation, work)

