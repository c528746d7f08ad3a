"""Category Schemas — project category CRUD and count recalculation.

Invariants:
    - CategoryCreate.id is a slug: lowercase letters, digits, single hyphens
    - CategoryResponse.count is the cached counter; project_count is live
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.catalog import SLUG_PATTERN


class CategoryCreate(BaseModel):
    id: str = Field(min_length=1, max_length=50, pattern=SLUG_PATTERN)
    label: str = Field(min_length=1, max_length=100)

    @field_validator("label")
    @classmethod
    def strip_label(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("label cannot be empty or whitespace")
        return v


class CategoryUpdate(BaseModel):
    label: str = Field(min_length=1, max_length=100)


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    label: str
    count: int
    project_count: int | None = None
