"""Referential Guard — refuses deletes of rows that other rows still reference.

Invariants:
    - A guarded parent is deleted only if its live dependent count is 0 at the
      moment of deletion
    - Check and delete run in one transaction with the parent row locked; on
      PostgreSQL the FOR UPDATE lock blocks the FOR KEY SHARE lock a concurrent
      child insert needs, so no dependent can appear between count and delete
    - A refused delete leaves the parent untouched and reports the live count
    - FK RESTRICT constraints remain as the second line; an IntegrityError at
      delete time is reported as DependentsExistError, never as a raw DB error

Design Decisions:
    - Counts are always live (SELECT count(*)), never read from cached counters
    - One GuardSpec may list several dependent tables (a technology is referenced
      by projects and services); the reported count is their sum
"""

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import DependentsExistError, ResourceNotFoundError
from app.core.results import DeleteCheck
from app.models.blog import BlogCategory, BlogPost, BlogPostTag, BlogTag
from app.models.category import Category
from app.models.faq import FAQCategory, FAQItem
from app.models.project import Project
from app.models.project_association import ProjectFeature, ProjectTechnology
from app.models.service import ServiceTechnology
from app.models.technology import Feature, Technology

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Dependent:
    label: str
    child_fk: Any


@dataclass(frozen=True)
class GuardSpec:
    """A parent table and every child FK that restricts its deletion."""
    resource_type: str
    parent_model: type
    parent_key: Any
    dependents: tuple[Dependent, ...]

    @property
    def dependent_label(self) -> str:
        return " and ".join(d.label for d in self.dependents)


CATEGORY_GUARD = GuardSpec(
    "Category", Category, Category.id,
    (Dependent("projects", Project.category_id),),
)
FAQ_CATEGORY_GUARD = GuardSpec(
    "FAQCategory", FAQCategory, FAQCategory.id,
    (Dependent("faq items", FAQItem.category),),
)
TECHNOLOGY_GUARD = GuardSpec(
    "Technology", Technology, Technology.id,
    (
        Dependent("projects", ProjectTechnology.technology_id),
        Dependent("services", ServiceTechnology.technology_id),
    ),
)
FEATURE_GUARD = GuardSpec(
    "Feature", Feature, Feature.id,
    (Dependent("projects", ProjectFeature.feature_id),),
)
BLOG_CATEGORY_GUARD = GuardSpec(
    "BlogCategory", BlogCategory, BlogCategory.id,
    (Dependent("posts", BlogPost.category_id),),
)
BLOG_TAG_GUARD = GuardSpec(
    "BlogTag", BlogTag, BlogTag.id,
    (Dependent("posts", BlogPostTag.tag_id),),
)


class ReferentialGuard:
    """Count-then-delete under a parent row lock."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def count_dependents(self, spec: GuardSpec, parent_id: Any) -> int:
        total = 0
        for dependent in spec.dependents:
            result = await self.db.execute(
                select(func.count())
                .select_from(dependent.child_fk.class_)
                .where(dependent.child_fk == parent_id),
            )
            total += result.scalar_one()
        return total

    async def can_delete(self, spec: GuardSpec, parent_id: Any) -> DeleteCheck:
        """Report whether the parent could be deleted right now."""
        if await self.db.get(spec.parent_model, parent_id) is None:
            raise ResourceNotFoundError(spec.resource_type, parent_id)
        count = await self.count_dependents(spec, parent_id)
        return DeleteCheck(allowed=count == 0, dependent_count=count)

    async def delete(self, spec: GuardSpec, parent_id: Any) -> None:
        """Delete the parent if nothing references it. Flushes; caller commits.

        Raises:
            ResourceNotFoundError: parent does not exist
            DependentsExistError: live dependents, or FK violation at delete time
        """
        result = await self.db.execute(
            select(spec.parent_model)
            .where(spec.parent_key == parent_id)
            .with_for_update(),
        )
        parent = result.scalar_one_or_none()
        if parent is None:
            raise ResourceNotFoundError(spec.resource_type, parent_id)

        count = await self.count_dependents(spec, parent_id)
        if count:
            logger.info(
                f"Refused delete of {spec.resource_type} {parent_id}: "
                f"{count} dependent(s)",
                extra={
                    "entity_kind": spec.resource_type,
                    "natural_key": str(parent_id),
                    "dependent_count": count,
                },
            )
            raise DependentsExistError(
                spec.resource_type, parent_id, count, spec.dependent_label,
            )

        try:
            await self.db.delete(parent)
            await self.db.flush()
        except IntegrityError:
            # A dependent slipped in on a backend without row locks
            await self.db.rollback()
            count = await self.count_dependents(spec, parent_id)
            raise DependentsExistError(
                spec.resource_type, parent_id, max(count, 1), spec.dependent_label,
            )
