"""FAQ Schemas — FAQ categories and question/answer items."""

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.catalog import SLUG_PATTERN


class FAQCategoryCreate(BaseModel):
    id: str = Field(min_length=1, max_length=50, pattern=SLUG_PATTERN)
    name: str = Field(min_length=1, max_length=100)
    icon: str = Field(min_length=1, max_length=50)


class FAQCategoryUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    icon: str | None = Field(None, min_length=1, max_length=50)


class FAQCategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    icon: str
    count: int | None = None


class FAQItemCreate(BaseModel):
    category: str = Field(min_length=1, max_length=50)
    question: str = Field(min_length=1, max_length=1000)
    answer: str = Field(min_length=1, max_length=5000)
    popular: bool = False


class FAQItemUpdate(BaseModel):
    category: str | None = Field(None, min_length=1, max_length=50)
    question: str | None = Field(None, min_length=1, max_length=1000)
    answer: str | None = Field(None, min_length=1, max_length=5000)
    popular: bool | None = None


class FAQItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    category: str
    question: str
    answer: str
    popular: bool


class FAQItemListResponse(BaseModel):
    items: list[FAQItemResponse]
    total: int
    skip: int
    take: int
