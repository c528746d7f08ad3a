"""Taxonomy Schemas — technologies, features, blog categories/tags, services.

Invariants:
    - Names are natural keys: 1-100 chars (features 1-200), stripped
    - Association updates carry full target sets; [] clears the relation
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TechnologyCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    icon: str | None = Field(None, max_length=100)
    description: str | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class TechnologyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    icon: str | None = None
    description: str | None = None


class FeatureCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)


class FeatureResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class BlogCategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    description: str | None = None
    icon: str | None = None
    color: str | None = None
    post_count: int


class BlogTagResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str


class PostTagsUpdate(BaseModel):
    tags: list[str] = Field(default_factory=list)


class ServiceTechnologiesUpdate(BaseModel):
    technologies: list[str] = Field(default_factory=list)


class ServiceFeatureResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str


class ServiceTechnologyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    technology_id: int
    name: str


class ServiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    icon: str | None = None
    subtitle: str | None = None
    description: str | None = None
    color: str | None = None
    features: list[ServiceFeatureResponse] = []
    technology_links: list[ServiceTechnologyResponse] = Field(
        default_factory=list, serialization_alias="technologies",
    )


class SyncResponse(BaseModel):
    """Outcome of replacing one owner's links."""
    owner_id: int
    linked: list[str]
    skipped: list[str] = []
