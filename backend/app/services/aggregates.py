"""Aggregate Maintainer — recomputes denormalized counters from live relationship cardinality.

Invariants:
    - After recalculate_*, counter == live count of matching child rows at the
      moment that parent was counted
    - recalculate_all commits each parent separately: one failure is recorded in
      its CountOutcome and the scan continues
    - Counters are never maintained incrementally on child writes; this module
      is the only writer of Category.count and BlogCategory.post_count
    - Nothing is cached in process memory between calls

Design Decisions:
    - Per-parent transactions over one big transaction: a repair job should
      finish as much as it can (ADR: availability over cross-parent snapshot)
    - Parent row locked while counted and written: concurrent recalculations of
      the same parent serialize
    - UNCHANGED outcome when the stored value already matches: no write issued
"""

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import CountStatus
from app.core.errors import ResourceNotFoundError
from app.core.results import CountOutcome
from app.models.blog import BlogCategory, BlogPost
from app.models.category import Category
from app.models.project import Project

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CounterSpec:
    """A denormalized counter on a parent table derived from a child table."""
    name: str
    parent_label: str
    parent_model: type
    parent_key: Any
    counter: Any
    child_fk: Any
    child_filters: tuple = ()


CATEGORY_PROJECT_COUNT = CounterSpec(
    name="category.count",
    parent_label="Category",
    parent_model=Category,
    parent_key=Category.id,
    counter=Category.count,
    child_fk=Project.category_id,
)

# Only published posts count toward a blog category
BLOG_CATEGORY_POST_COUNT = CounterSpec(
    name="blog_category.post_count",
    parent_label="BlogCategory",
    parent_model=BlogCategory,
    parent_key=BlogCategory.id,
    counter=BlogCategory.post_count,
    child_fk=BlogPost.category_id,
    child_filters=(BlogPost.published.is_(True),),
)


class AggregateMaintainer:
    """Full and single-parent counter recalculation."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def count_children(self, spec: CounterSpec, parent_id: Any) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(spec.child_fk.class_)
            .where(spec.child_fk == parent_id, *spec.child_filters),
        )
        return result.scalar_one()

    async def recalculate_all(self, spec: CounterSpec) -> list[CountOutcome]:
        """Recount every parent. Returns one outcome per parent, in key order."""
        result = await self.db.execute(
            select(spec.parent_key).order_by(spec.parent_key),
        )
        parent_ids = list(result.scalars().all())
        await self.db.commit()

        outcomes = []
        for parent_id in parent_ids:
            outcomes.append(await self._recalculate_isolated(spec, parent_id))

        failed = sum(1 for o in outcomes if o.status == CountStatus.FAILED)
        logger.info(
            f"{spec.name}: recalculated {len(outcomes)} parent(s), {failed} failed",
        )
        return outcomes

    async def recalculate_one(self, spec: CounterSpec, parent_id: Any) -> CountOutcome:
        """Recount a single parent. Raises ResourceNotFoundError if absent."""
        outcome = await self._recalculate(spec, parent_id)
        await self.db.commit()
        return outcome

    async def _recalculate_isolated(
        self, spec: CounterSpec, parent_id: Any,
    ) -> CountOutcome:
        try:
            outcome = await self._recalculate(spec, parent_id)
            await self.db.commit()
            return outcome
        except (SQLAlchemyError, ResourceNotFoundError) as e:
            await self.db.rollback()
            logger.error(
                f"{spec.name}: recalculation failed for {parent_id}: {e}",
                extra={"entity_kind": spec.parent_label, "natural_key": str(parent_id)},
            )
            return CountOutcome(
                parent_id=parent_id, new_count=None,
                status=CountStatus.FAILED, error=str(e),
            )

    async def _recalculate(self, spec: CounterSpec, parent_id: Any) -> CountOutcome:
        result = await self.db.execute(
            select(spec.counter)
            .where(spec.parent_key == parent_id)
            .with_for_update(),
        )
        row = result.first()
        if row is None:
            raise ResourceNotFoundError(spec.parent_label, parent_id)

        new_count = await self.count_children(spec, parent_id)
        if row[0] == new_count:
            return CountOutcome(parent_id, new_count, CountStatus.UNCHANGED)

        await self.db.execute(
            update(spec.parent_model)
            .where(spec.parent_key == parent_id)
            .values({spec.counter.key: new_count}),
        )
        return CountOutcome(parent_id, new_count, CountStatus.UPDATED)
