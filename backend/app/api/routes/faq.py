"""FAQ Routes — FAQ categories and items.

Invariants:
    - Deleting a category that still has items → 409 with dependent_count
    - Creating/moving an item into a missing category → 404
    - /items/popular is a filtered view of /items, not a separate resource
"""

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import (
    get_catalog_commands, get_catalog_queries, get_faq_commands,
)
from app.schemas.faq import (
    FAQCategoryCreate, FAQCategoryResponse, FAQCategoryUpdate, FAQItemCreate,
    FAQItemListResponse, FAQItemResponse, FAQItemUpdate,
)
from app.services.catalog_commands import CatalogCommands
from app.services.catalog_queries import CatalogQueries
from app.services.faq_commands import FAQCommands

router = APIRouter(prefix="/api/v1/faq", tags=["faq"])


# ─── Categories ─────────────────────────────────────────────────

@router.get("/categories", response_model=list[FAQCategoryResponse])
async def list_categories(
    include_count: bool = False,
    queries: CatalogQueries = Depends(get_catalog_queries),
):
    rows = await queries.list_faq_categories(include_count)
    return [
        FAQCategoryResponse(id=c.id, name=c.name, icon=c.icon, count=n)
        for c, n in rows
    ]


@router.post(
    "/categories", response_model=FAQCategoryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    body: FAQCategoryCreate, commands: FAQCommands = Depends(get_faq_commands),
):
    category = (await commands.create_category(body.id, body.name, body.icon)).unwrap()
    return FAQCategoryResponse.model_validate(category)


@router.put("/categories/{category_id}", response_model=FAQCategoryResponse)
async def update_category(
    category_id: str,
    body: FAQCategoryUpdate,
    commands: FAQCommands = Depends(get_faq_commands),
):
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    category = (await commands.update_category(category_id, changes)).unwrap()
    return FAQCategoryResponse.model_validate(category)


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: str, commands: CatalogCommands = Depends(get_catalog_commands),
):
    (await commands.delete_faq_category(category_id)).unwrap()


# ─── Items ──────────────────────────────────────────────────────

@router.get("/items", response_model=FAQItemListResponse)
async def list_items(
    skip: int = Query(0, ge=0),
    take: int = Query(50, ge=1, le=200),
    category: str | None = None,
    popular: bool | None = None,
    queries: CatalogQueries = Depends(get_catalog_queries),
):
    items, total = await queries.list_faq_items(skip, take, category, popular)
    return FAQItemListResponse(
        items=[FAQItemResponse.model_validate(i) for i in items],
        total=total, skip=skip, take=take,
    )


@router.get("/items/popular", response_model=list[FAQItemResponse])
async def list_popular_items(
    take: int = Query(10, ge=1, le=50),
    queries: CatalogQueries = Depends(get_catalog_queries),
):
    items, _ = await queries.list_faq_items(0, take, popular=True)
    return [FAQItemResponse.model_validate(i) for i in items]


@router.post(
    "/items", response_model=FAQItemResponse, status_code=status.HTTP_201_CREATED,
)
async def create_item(
    body: FAQItemCreate, commands: FAQCommands = Depends(get_faq_commands),
):
    result = await commands.create_item(
        body.category, body.question, body.answer, body.popular,
    )
    return FAQItemResponse.model_validate(result.unwrap())


@router.put("/items/{item_id}", response_model=FAQItemResponse)
async def update_item(
    item_id: int,
    body: FAQItemUpdate,
    commands: FAQCommands = Depends(get_faq_commands),
):
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    item = (await commands.update_item(item_id, changes)).unwrap()
    return FAQItemResponse.model_validate(item)


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(item_id: int, commands: FAQCommands = Depends(get_faq_commands)):
    (await commands.delete_item(item_id)).unwrap()
