"""Upsert Reconciler — idempotent create-or-update of catalog rows by natural key.

Invariants:
    - At most one row per natural key: upsert(k, a) twice leaves exactly one row
      with attributes a
    - Unchanged attributes are never written (UpsertResult.changed is False)
    - Referenced rows named in attributes (FAQ item -> FAQ category) must exist,
      otherwise ResourceNotFoundError before any write
    - A unique-constraint collision (concurrent create, derived slug clash)
      becomes DuplicateKeyError, never a raw IntegrityError; other constraint
      failures become DatabaseError
    - Flushes only — the caller owns the transaction boundary

Design Decisions:
    - Per-kind UpsertSpec table instead of one reconciler class per model: every
      kind shares the same lock-read-compare-write algorithm
    - Existing row locked FOR UPDATE before comparing, so two upserts of the same
      key serialize instead of interleaving their writes
    - Derived attributes (blog slugs) are computed from the natural key on every
      upsert so they can never drift from the name
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import EntityKind
from app.core.errors import DuplicateKeyError, ResourceNotFoundError
from app.core.results import UpsertResult
from app.core.slugs import dedupe_keys, generate_slug
from app.infrastructure.database import integrity_error_for
from app.models.blog import BlogCategory, BlogTag
from app.models.category import Category
from app.models.faq import FAQCategory, FAQItem
from app.models.service import Service, ServiceFeature
from app.models.technology import Feature, Technology
from app.services.association_sync import SERVICE_TECHNOLOGIES, AssociationSynchronizer

logger = logging.getLogger(__name__)


def _slug_from_name(key: str) -> dict:
    return {"slug": generate_slug(key)}


@dataclass(frozen=True)
class Reference:
    """An attribute that must name an existing row of another table."""
    attribute: str
    model: type
    label: str


@dataclass(frozen=True)
class UpsertSpec:
    label: str
    model: type
    key_attr: str
    mutable: tuple[str, ...] = ()
    required: tuple[str, ...] = ()
    create_defaults: dict = field(default_factory=dict)
    derive: Callable[[Any], dict] | None = None
    references: tuple[Reference, ...] = ()
    key_type: type = str

    @property
    def key_column(self):
        return getattr(self.model, self.key_attr)


UPSERT_SPECS: dict[EntityKind, UpsertSpec] = {
    EntityKind.CATEGORY: UpsertSpec(
        "Category", Category, "id",
        mutable=("label",), required=("label",), create_defaults={"count": 0},
    ),
    EntityKind.TECHNOLOGY: UpsertSpec(
        "Technology", Technology, "name", mutable=("icon", "description"),
    ),
    EntityKind.FEATURE: UpsertSpec("Feature", Feature, "name"),
    EntityKind.BLOG_CATEGORY: UpsertSpec(
        "BlogCategory", BlogCategory, "name",
        mutable=("description", "icon", "color"),
        create_defaults={"post_count": 0}, derive=_slug_from_name,
    ),
    EntityKind.BLOG_TAG: UpsertSpec(
        "BlogTag", BlogTag, "name", derive=_slug_from_name,
    ),
    EntityKind.FAQ_CATEGORY: UpsertSpec(
        "FAQCategory", FAQCategory, "id",
        mutable=("name", "icon"), required=("name", "icon"),
    ),
    EntityKind.FAQ_ITEM: UpsertSpec(
        "FAQItem", FAQItem, "id",
        mutable=("category", "question", "answer", "popular"),
        required=("category", "question", "answer"),
        references=(Reference("category", FAQCategory, "FAQCategory"),),
        key_type=int,
    ),
    EntityKind.SERVICE: UpsertSpec(
        "Service", Service, "title",
        mutable=("icon", "subtitle", "description", "color"),
    ),
}


class UpsertReconciler:
    """Create-or-update and create-only writes keyed by natural key."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.sync = AssociationSynchronizer(db)

    async def upsert(
        self, kind: EntityKind, natural_key: Any, attributes: dict,
    ) -> UpsertResult:
        """Make the row for natural_key carry exactly the given attributes."""
        spec = UPSERT_SPECS[kind]
        key = self._coerce_key(spec, natural_key)
        attrs = self._prepare(spec, key, attributes)
        await self._check_references(spec, attrs)

        existing = await self._find(spec, key, lock=True)
        if existing is None:
            entity = await self._insert(spec, key, attrs)
            logger.info(
                f"Created {spec.label} {key}",
                extra={"entity_kind": kind.value, "natural_key": str(key)},
            )
            return UpsertResult(entity=entity, created=True)

        changed = {
            name: value for name, value in attrs.items()
            if getattr(existing, name) != value
        }
        if not changed:
            return UpsertResult(entity=existing, created=False, changed=False)

        for name, value in changed.items():
            setattr(existing, name, value)
        await self._flush_unique(spec, key)
        logger.info(
            f"Updated {spec.label} {key}: {sorted(changed)}",
            extra={"entity_kind": kind.value, "natural_key": str(key)},
        )
        return UpsertResult(entity=existing, created=False, changed=True)

    async def create(self, kind: EntityKind, natural_key: Any, attributes: dict) -> Any:
        """Insert a new row. Raises DuplicateKeyError if the key is taken."""
        spec = UPSERT_SPECS[kind]
        key = self._coerce_key(spec, natural_key)
        attrs = self._prepare(spec, key, attributes)
        await self._check_references(spec, attrs)
        if await self._find(spec, key) is not None:
            raise DuplicateKeyError(spec.label, key)
        return await self._insert(spec, key, attrs)

    async def update(self, kind: EntityKind, natural_key: Any, attributes: dict) -> Any:
        """Apply a partial update to an existing row. Raises ResourceNotFoundError."""
        spec = UPSERT_SPECS[kind]
        key = self._coerce_key(spec, natural_key)
        entity = await self._find(spec, key, lock=True)
        if entity is None:
            raise ResourceNotFoundError(spec.label, key)
        attrs = self._prepare(spec, key, attributes, partial=True)
        await self._check_references(spec, attrs)
        for name, value in attrs.items():
            setattr(entity, name, value)
        await self._flush_unique(spec, key)
        return entity

    async def upsert_service(
        self, title: str, attributes: dict,
    ) -> tuple[UpsertResult, list[str]]:
        """Upsert a service with its owned feature names and technology links.

        `features` and `technologies` replace the stored sets when present and
        are left untouched when absent. Unknown technology names are returned
        as skipped keys, never created.
        """
        attributes = dict(attributes)
        features = attributes.pop("features", None)
        technologies = attributes.pop("technologies", None)
        result = await self.upsert(EntityKind.SERVICE, title, attributes)
        service_id = result.entity.id
        changed = result.changed

        skipped: list[str] = []
        if features is not None:
            changed |= await self._replace_service_features(
                service_id, dedupe_keys(features),
            )
        if technologies is not None:
            before = await self.sync.linked_keys(SERVICE_TECHNOLOGIES, service_id)
            report = await self.sync.sync(SERVICE_TECHNOLOGIES, service_id, technologies)
            skipped.extend(report.skipped)
            changed |= set(report.linked) != set(before)
        return UpsertResult(entity=result.entity, created=result.created, changed=changed), skipped

    async def get(self, kind: EntityKind, natural_key: Any) -> Any:
        spec = UPSERT_SPECS[kind]
        entity = await self._find(spec, self._coerce_key(spec, natural_key))
        if entity is None:
            raise ResourceNotFoundError(spec.label, natural_key)
        return entity

    # ─── Internals ──────────────────────────────────────────────

    def _coerce_key(self, spec: UpsertSpec, natural_key: Any) -> Any:
        try:
            return spec.key_type(natural_key)
        except (TypeError, ValueError):
            raise ResourceNotFoundError(spec.label, natural_key)

    def _prepare(
        self, spec: UpsertSpec, key: Any, attributes: dict, partial: bool = False,
    ) -> dict:
        unknown = set(attributes) - set(spec.mutable)
        if unknown:
            raise ValueError(f"{spec.label} has no attribute(s) {sorted(unknown)}")
        attrs = dict(attributes)
        if spec.derive is not None and not partial:
            attrs.update(spec.derive(key))
        return attrs

    async def _check_references(self, spec: UpsertSpec, attrs: dict) -> None:
        for ref in spec.references:
            if ref.attribute not in attrs:
                continue
            if await self.db.get(ref.model, attrs[ref.attribute]) is None:
                raise ResourceNotFoundError(ref.label, attrs[ref.attribute])

    async def _find(self, spec: UpsertSpec, key: Any, lock: bool = False) -> Any:
        stmt = select(spec.model).where(spec.key_column == key)
        if lock:
            stmt = stmt.with_for_update()
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _insert(self, spec: UpsertSpec, key: Any, attrs: dict) -> Any:
        missing = [name for name in spec.required if attrs.get(name) is None]
        if missing:
            raise ValueError(f"{spec.label} requires {missing} on create")
        entity = spec.model(**{spec.key_attr: key, **spec.create_defaults, **attrs})
        self.db.add(entity)
        await self._flush_unique(spec, key)
        return entity

    async def _replace_service_features(self, service_id: int, names: list[str]) -> bool:
        result = await self.db.execute(
            select(ServiceFeature.name)
            .where(ServiceFeature.service_id == service_id)
            .order_by(ServiceFeature.id),
        )
        if list(result.scalars().all()) == names:
            return False
        await self.db.execute(
            delete(ServiceFeature).where(ServiceFeature.service_id == service_id),
        )
        if names:
            await self.db.execute(
                insert(ServiceFeature),
                [{"service_id": service_id, "name": name} for name in names],
            )
        await self.db.flush()
        return True

    async def _flush_unique(self, spec: UpsertSpec, key: Any) -> None:
        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            raise integrity_error_for(e, spec.label, key)
