"""Project Schemas — request/response contracts for projects and their sub-records.

Invariants:
    - ProjectCreate.title: 1-200 chars, stripped, must yield a slug; the slug is
      never client-supplied
    - ProjectUpdate rejects explicit null for NOT NULL columns (400), so a
      partial update can never write None into them
    - technologies/features are natural-key lists; None means "leave untouched"
      on update, [] means "clear"
    - metrics/links/images replace the stored sub-records wholesale when given

Design Decisions:
    - ProjectLinks exposes the `case` column under its wire name via alias
      (`case` shadows nothing in Python, but stays out of attribute names)
    - ProjectResponse built with from_attributes straight from the ORM row
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.domain_types import ImageType, ProjectStatus
from app.core.slugs import generate_slug

# Scalar columns written from ProjectCreate/ProjectUpdate
PROJECT_SCALAR_FIELDS = (
    "title", "subtitle", "category_id", "type", "description", "image",
    "duration", "year", "status", "icon", "color",
)
# Columns declared NOT NULL; an update may omit them but never null them
PROJECT_REQUIRED_FIELDS = ("title", "subtitle", "category_id", "type", "description", "status")


class ProjectMetrics(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    users: str | None = None
    performance: str | None = None
    rating: str | None = None
    downloads: str | None = None
    revenue: str | None = None
    uptime: str | None = None


class ProjectLinks(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    live: str | None = None
    github: str | None = None
    case_study: str | None = Field(None, alias="case")
    demo: str | None = None
    docs: str | None = None


class ProjectImageIn(BaseModel):
    url: str = Field(min_length=1, max_length=500)
    caption: str | None = Field(None, max_length=300)
    order: int | None = Field(None, ge=0)
    type: ImageType = ImageType.SCREENSHOT


class ProjectImageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    url: str
    caption: str | None = None
    order: int
    type: str = Field(validation_alias="image_type")


class ProjectCreate(BaseModel):
    """Full project payload. Also the seed shape used by catalog import."""
    title: str = Field(min_length=1, max_length=200)
    subtitle: str = Field("", max_length=300)
    category_id: str = Field(min_length=1, max_length=50)
    type: str = Field("", max_length=100)
    description: str = ""
    image: str | None = None
    duration: str | None = None
    year: str | None = None
    status: ProjectStatus = ProjectStatus.DEVELOPMENT
    icon: str | None = None
    color: str | None = None
    technologies: list[str] | None = None
    features: list[str] | None = None
    metrics: ProjectMetrics | None = None
    links: ProjectLinks | None = None
    images: list[ProjectImageIn] | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty or whitespace")
        # The slug is the natural key; a title that yields none cannot be stored
        generate_slug(v)
        return v

    def scalar_fields(self) -> dict:
        values = {name: getattr(self, name) for name in PROJECT_SCALAR_FIELDS}
        values["status"] = self.status.value
        return values


class ProjectUpdate(BaseModel):
    """Partial update — only fields present in the request are written."""
    title: str | None = Field(None, min_length=1, max_length=200)
    subtitle: str | None = Field(None, max_length=300)
    category_id: str | None = Field(None, min_length=1, max_length=50)
    type: str | None = Field(None, max_length=100)
    description: str | None = None
    image: str | None = None
    duration: str | None = None
    year: str | None = None
    status: ProjectStatus | None = None
    icon: str | None = None
    color: str | None = None
    technologies: list[str] | None = None
    features: list[str] | None = None
    metrics: ProjectMetrics | None = None
    links: ProjectLinks | None = None
    images: list[ProjectImageIn] | None = None

    @field_validator(*PROJECT_REQUIRED_FIELDS)
    @classmethod
    def reject_null(cls, v, info):
        # Runs only for fields present in the body; omitted fields stay untouched
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    def scalar_fields(self) -> dict:
        values = self.model_dump(include=set(PROJECT_SCALAR_FIELDS), exclude_unset=True)
        if values.get("status") is not None:
            values["status"] = self.status.value
        return values


class ProjectAssociationsUpdate(BaseModel):
    """Target sets for a project's technology and feature links."""
    technologies: list[str] = Field(default_factory=list)
    features: list[str] = Field(default_factory=list)


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    slug: str
    title: str
    subtitle: str
    category_id: str
    type: str
    description: str
    image: str | None = None
    duration: str | None = None
    year: str | None = None
    status: str
    icon: str | None = None
    color: str | None = None
    technologies: list[str] = []
    features: list[str] = []
    metrics: ProjectMetrics | None = None
    links: ProjectLinks | None = None
    images: list[ProjectImageOut] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProjectListResponse(BaseModel):
    items: list[ProjectResponse]
    total: int
    skip: int
    take: int


class ProjectWriteResponse(BaseModel):
    """Project plus natural keys that could not be linked."""
    project: ProjectResponse
    created: bool = False
    skipped: list[str] = []


class AssociationsResponse(BaseModel):
    owner_id: int
    technologies: list[str]
    features: list[str]
    skipped: list[str] = []
