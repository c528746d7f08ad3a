"""Catalog Schemas — natural-key upsert attributes and bulk import payloads.

Invariants:
    - One attribute model per EntityKind; unknown fields rejected (extra="forbid")
    - Attribute models carry only mutable attributes: the natural key travels
      in the URL, derived fields (slugs) are never client-supplied
    - CatalogSeed sections are imported in dependency order, so a project or
      service may reference categories, technologies and features from the
      same payload
    - Names that derive a slug (blog categories, blog tags) must yield one

Design Decisions:
    - Attribute models validated at the route, then dumped to plain dicts for
      the reconciler: the reconciler stays independent of pydantic
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy import inspect

from app.core.domain_types import CountStatus, EntityKind
from app.core.slugs import generate_slug
from app.schemas.project import ProjectCreate

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class _Attributes(BaseModel):
    model_config = ConfigDict(extra="forbid")


class CategoryAttributes(_Attributes):
    label: str = Field(min_length=1, max_length=100)


class TechnologyAttributes(_Attributes):
    icon: str | None = Field(None, max_length=100)
    description: str | None = None


class FeatureAttributes(_Attributes):
    pass


class BlogCategoryAttributes(_Attributes):
    description: str | None = None
    icon: str | None = Field(None, max_length=50)
    color: str | None = Field(None, max_length=50)


class BlogTagAttributes(_Attributes):
    pass


class FAQCategoryAttributes(_Attributes):
    name: str = Field(min_length=1, max_length=100)
    icon: str = Field(min_length=1, max_length=50)


class FAQItemAttributes(_Attributes):
    category: str = Field(min_length=1, max_length=50)
    question: str = Field(min_length=1)
    answer: str = Field(min_length=1)
    popular: bool = False


class ServiceAttributes(_Attributes):
    icon: str | None = Field(None, max_length=50)
    subtitle: str | None = Field(None, max_length=300)
    description: str | None = None
    color: str | None = Field(None, max_length=100)
    # Owned bullet list and technology names; None leaves them untouched
    features: list[str] | None = None
    technologies: list[str] | None = None


ATTRIBUTE_SCHEMAS: dict[EntityKind, type[_Attributes]] = {
    EntityKind.CATEGORY: CategoryAttributes,
    EntityKind.TECHNOLOGY: TechnologyAttributes,
    EntityKind.FEATURE: FeatureAttributes,
    EntityKind.BLOG_CATEGORY: BlogCategoryAttributes,
    EntityKind.BLOG_TAG: BlogTagAttributes,
    EntityKind.FAQ_CATEGORY: FAQCategoryAttributes,
    EntityKind.FAQ_ITEM: FAQItemAttributes,
    EntityKind.SERVICE: ServiceAttributes,
}


def parse_attributes(kind: EntityKind, payload: dict) -> dict:
    """Validate a raw attribute dict for kind. Raises pydantic.ValidationError."""
    values = ATTRIBUTE_SCHEMAS[kind].model_validate(payload).model_dump()
    # Absent relation lists mean "leave untouched", not "clear"
    for relation in ("features", "technologies"):
        if relation in values and values[relation] is None:
            del values[relation]
    return values


# Kinds whose slug is derived from the natural key
SLUGGED_KINDS = frozenset({EntityKind.BLOG_CATEGORY, EntityKind.BLOG_TAG})


def check_natural_key(kind: EntityKind, natural_key: str) -> None:
    """Raise ValueError if natural_key cannot be stored for kind."""
    if not natural_key.strip():
        raise ValueError("natural key cannot be blank")
    if kind in SLUGGED_KINDS:
        generate_slug(natural_key)


def entity_to_dict(entity: Any) -> dict:
    """Column values of an ORM row, without relationships."""
    return {
        attr.key: getattr(entity, attr.key)
        for attr in inspect(entity).mapper.column_attrs
    }


class UpsertResponse(BaseModel):
    kind: EntityKind
    natural_key: str
    created: bool
    changed: bool
    entity: dict[str, Any]
    skipped: list[str] = []


# ─── Bulk import ────────────────────────────────────────────────

class CategorySeed(BaseModel):
    id: str = Field(min_length=1, max_length=50, pattern=SLUG_PATTERN)
    label: str = Field(min_length=1, max_length=100)


class TechnologySeed(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    icon: str | None = None
    description: str | None = None


class _NamedSeed(BaseModel):
    name: str = Field(min_length=1, max_length=100)

    @field_validator("name")
    @classmethod
    def name_yields_slug(cls, v: str) -> str:
        v = v.strip()
        generate_slug(v)
        return v


class BlogCategorySeed(_NamedSeed, BlogCategoryAttributes):
    pass


class BlogTagSeed(_NamedSeed):
    pass


class ServiceSeed(ServiceAttributes):
    title: str = Field(min_length=1, max_length=200)


class FAQCategorySeed(FAQCategoryAttributes):
    id: str = Field(min_length=1, max_length=50, pattern=SLUG_PATTERN)


class FAQItemSeed(FAQItemAttributes):
    id: int = Field(ge=1)


class CatalogSeed(BaseModel):
    """Full catalog payload; every section optional."""
    categories: list[CategorySeed] = []
    technologies: list[TechnologySeed] = []
    services: list[ServiceSeed] = []
    features: list[str] = []
    faq_categories: list[FAQCategorySeed] = []
    faq_items: list[FAQItemSeed] = []
    blog_categories: list[BlogCategorySeed] = []
    blog_tags: list[BlogTagSeed] = []
    projects: list[ProjectCreate] = []


class ImportFailureResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    kind: str
    natural_key: str
    code: str
    message: str


class CountOutcomeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Any = Field(validation_alias="parent_id")
    count: int | None = Field(validation_alias="new_count")
    outcome: CountStatus = Field(validation_alias="status")
    error: str | None = None


class ImportReportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    created: dict[str, int]
    updated: dict[str, int]
    unchanged: dict[str, int]
    skipped: dict[str, list[str]]
    failures: list[ImportFailureResponse]
    counts: list[CountOutcomeResponse]
    post_counts: list[CountOutcomeResponse] = []
