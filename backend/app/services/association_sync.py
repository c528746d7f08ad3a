"""Association Synchronizer — reconciles an owner's many-to-many links against a target key set.

Invariants:
    - After sync, join rows for the owner are exactly {owner} x {resolved target ids}
    - Target keys are natural keys (names); unresolvable keys are skipped and
      reported, never inserted as dangling links
    - The owner row is locked (SELECT ... FOR UPDATE) for the whole
      clear-then-insert sequence; concurrent syncs of the same owner serialize
    - Referenced rows (technologies, features, tags) are never modified
    - Flushes only — the caller owns the transaction boundary

Design Decisions:
    - Clear-then-insert over diffing: one DELETE + one multi-row INSERT, and the
      owner lock makes the intermediate empty state invisible to other writers
    - Keys resolved in one IN query instead of one lookup per key
    - Empty target set is valid: it clears all links
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ResourceNotFoundError
from app.core.results import SyncReport
from app.core.slugs import dedupe_keys
from app.models.blog import BlogPost, BlogPostTag, BlogTag
from app.models.project import Project
from app.models.project_association import ProjectFeature, ProjectTechnology
from app.models.service import Service, ServiceTechnology
from app.models.technology import Feature, Technology

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JoinSpec:
    """Shape of one many-to-many relation."""
    name: str
    owner_label: str
    owner_model: type
    join_model: type
    owner_column: Any
    target_column: Any
    referent_model: type
    referent_key: Any
    # (join column, referent attribute) pairs copied onto each link
    copied_columns: tuple[tuple[str, str], ...] = ()


PROJECT_TECHNOLOGIES = JoinSpec(
    name="project_technologies",
    owner_label="Project",
    owner_model=Project,
    join_model=ProjectTechnology,
    owner_column=ProjectTechnology.project_id,
    target_column=ProjectTechnology.technology_id,
    referent_model=Technology,
    referent_key=Technology.name,
)

PROJECT_FEATURES = JoinSpec(
    name="project_features",
    owner_label="Project",
    owner_model=Project,
    join_model=ProjectFeature,
    owner_column=ProjectFeature.project_id,
    target_column=ProjectFeature.feature_id,
    referent_model=Feature,
    referent_key=Feature.name,
)

SERVICE_TECHNOLOGIES = JoinSpec(
    name="service_technologies",
    owner_label="Service",
    owner_model=Service,
    join_model=ServiceTechnology,
    owner_column=ServiceTechnology.service_id,
    target_column=ServiceTechnology.technology_id,
    referent_model=Technology,
    referent_key=Technology.name,
    copied_columns=(("name", "name"),),
)

POST_TAGS = JoinSpec(
    name="blog_post_tags",
    owner_label="BlogPost",
    owner_model=BlogPost,
    join_model=BlogPostTag,
    owner_column=BlogPostTag.post_id,
    target_column=BlogPostTag.tag_id,
    referent_model=BlogTag,
    referent_key=BlogTag.name,
)


class AssociationSynchronizer:
    """Clear-then-insert reconciliation of join rows, serialized per owner."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def sync(
        self, spec: JoinSpec, owner_id: Any, target_keys: Iterable[str],
    ) -> SyncReport:
        """Replace the owner's links with links to the resolvable target keys."""
        await self._lock_owner(spec, owner_id)
        keys = dedupe_keys(list(target_keys))

        await self.db.execute(
            delete(spec.join_model).where(spec.owner_column == owner_id),
        )
        resolved = await self._resolve(spec, keys)

        rows, linked, skipped = [], [], []
        for key in keys:
            referent = resolved.get(key)
            if referent is None:
                skipped.append(key)
                continue
            row = {
                spec.owner_column.key: owner_id,
                spec.target_column.key: referent.id,
            }
            for column, attribute in spec.copied_columns:
                row[column] = getattr(referent, attribute)
            rows.append(row)
            linked.append(key)

        if rows:
            await self.db.execute(insert(spec.join_model), rows)
        await self.db.flush()

        if skipped:
            logger.warning(
                f"{spec.name}: skipped {len(skipped)} unresolvable key(s) "
                f"for {spec.owner_label} {owner_id}",
                extra={"owner_id": owner_id, "skipped": skipped},
            )
        return SyncReport(
            owner_id=owner_id, linked=tuple(linked), skipped=tuple(skipped),
        )

    async def linked_keys(self, spec: JoinSpec, owner_id: Any) -> list[str]:
        """Natural keys currently linked to the owner, sorted."""
        result = await self.db.execute(
            select(spec.referent_key)
            .join(spec.join_model, spec.target_column == spec.referent_model.id)
            .where(spec.owner_column == owner_id)
            .order_by(spec.referent_key),
        )
        return list(result.scalars().all())

    async def _lock_owner(self, spec: JoinSpec, owner_id: Any) -> None:
        result = await self.db.execute(
            select(spec.owner_model.id)
            .where(spec.owner_model.id == owner_id)
            .with_for_update(),
        )
        if result.scalar_one_or_none() is None:
            raise ResourceNotFoundError(spec.owner_label, owner_id)

    async def _resolve(self, spec: JoinSpec, keys: list[str]) -> dict[str, Any]:
        if not keys:
            return {}
        result = await self.db.execute(
            select(spec.referent_model).where(spec.referent_key.in_(keys)),
        )
        return {
            getattr(referent, spec.referent_key.key): referent
            for referent in result.scalars().all()
        }
