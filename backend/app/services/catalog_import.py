"""Catalog Import — idempotent bulk (re)population of the catalog from a seed payload.

Invariants:
    - Sections run in dependency order: categories, technologies, services,
      features, FAQ categories, FAQ items, blog categories, blog tags,
      projects, then recalculation of category and blog post counts
    - Service technologies and project technologies/features are linked by
      name; unknown names land in `skipped` under the owner's natural key
    - Each item commits on its own; a domain failure on one item (unknown
      category, duplicate slug) is recorded and the import continues
    - Re-running the same seed converges: no duplicate rows or join rows, and
      unchanged rows are counted as unchanged, not rewritten
    - Transient store failures abort the whole import; rerunning it is safe

Design Decisions:
    - Per-item commits over one transaction: a large seed should land as much
      as it can, mirroring a seeding script that logs and moves on
    - Counts recalculated once at the end, not per project
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import EntityKind
from app.core.errors import PortfolioError
from app.core.results import CountOutcome, UpsertResult
from app.schemas.catalog import CatalogSeed, parse_attributes
from app.services.aggregates import (
    BLOG_CATEGORY_POST_COUNT, CATEGORY_PROJECT_COUNT, AggregateMaintainer,
)
from app.services.project_reconciler import ProjectReconciler
from app.services.upsert_reconciler import UpsertReconciler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportFailure:
    kind: str
    natural_key: str
    code: str
    message: str


@dataclass
class ImportReport:
    """Per-kind tallies plus everything that did not land cleanly."""
    created: Counter = field(default_factory=Counter)
    updated: Counter = field(default_factory=Counter)
    unchanged: Counter = field(default_factory=Counter)
    skipped: dict[str, list[str]] = field(default_factory=dict)
    failures: list[ImportFailure] = field(default_factory=list)
    counts: list[CountOutcome] = field(default_factory=list)
    post_counts: list[CountOutcome] = field(default_factory=list)

    def record(self, kind: str, result: UpsertResult) -> None:
        if result.created:
            self.created[kind] += 1
        elif result.changed:
            self.updated[kind] += 1
        else:
            self.unchanged[kind] += 1


class CatalogImporter:
    """Runs a CatalogSeed through the reconcilers, one committed item at a time."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.upserts = UpsertReconciler(db)
        self.projects = ProjectReconciler(db)
        self.aggregates = AggregateMaintainer(db)

    async def run(self, seed: CatalogSeed) -> ImportReport:
        report = ImportReport()

        for category in seed.categories:
            await self._upsert(
                report, EntityKind.CATEGORY, category.id, {"label": category.label},
            )
        for technology in seed.technologies:
            await self._upsert(
                report, EntityKind.TECHNOLOGY, technology.name,
                {"icon": technology.icon, "description": technology.description},
            )
        for service in seed.services:
            async def write_service(service=service):
                result, skipped = await self.upserts.upsert_service(
                    service.title,
                    parse_attributes(EntityKind.SERVICE, service.model_dump(exclude={"title"})),
                )
                if skipped:
                    report.skipped[service.title] = skipped
                return result
            await self._item(report, EntityKind.SERVICE.value, service.title, write_service)
        for name in seed.features:
            await self._upsert(report, EntityKind.FEATURE, name, {})
        for faq_category in seed.faq_categories:
            await self._upsert(
                report, EntityKind.FAQ_CATEGORY, faq_category.id,
                faq_category.model_dump(exclude={"id"}),
            )
        for item in seed.faq_items:
            await self._upsert(
                report, EntityKind.FAQ_ITEM, item.id, item.model_dump(exclude={"id"}),
            )
        for blog_category in seed.blog_categories:
            await self._upsert(
                report, EntityKind.BLOG_CATEGORY, blog_category.name,
                blog_category.model_dump(exclude={"name"}),
            )
        for tag in seed.blog_tags:
            await self._upsert(report, EntityKind.BLOG_TAG, tag.name, {})

        for project in seed.projects:
            async def write_project(project=project):
                result, skipped = await self.projects.upsert(project)
                if skipped:
                    report.skipped[result.entity.slug] = skipped
                return result
            await self._item(report, "project", project.title, write_project)

        report.counts = await self.aggregates.recalculate_all(CATEGORY_PROJECT_COUNT)
        report.post_counts = await self.aggregates.recalculate_all(BLOG_CATEGORY_POST_COUNT)
        logger.info(
            f"Catalog import finished: created={dict(report.created)} "
            f"updated={dict(report.updated)} failures={len(report.failures)}",
        )
        return report

    async def _upsert(
        self, report: ImportReport, kind: EntityKind, key: Any, attributes: dict,
    ) -> None:
        async def write():
            return await self.upserts.upsert(kind, key, attributes)
        await self._item(report, kind.value, key, write)

    async def _item(
        self,
        report: ImportReport,
        kind: str,
        key: Any,
        write: Callable[[], Awaitable[UpsertResult]],
    ) -> None:
        try:
            result = await write()
            await self.db.commit()
        except PortfolioError as e:
            if e.outcome is None:
                raise
            await self.db.rollback()
            logger.warning(
                f"Import of {kind} {key} failed: {e.message}",
                extra={"error_code": e.code, "entity_kind": kind, "natural_key": str(key)},
            )
            report.failures.append(ImportFailure(kind, str(key), e.code, e.message))
            return
        report.record(kind, result)
