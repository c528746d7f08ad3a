"""Category Routes — project category CRUD and count recalculation.

Invariants:
    - DELETE refuses categories with projects: 409 with dependent_count (live)
    - Project writes never refresh `count`; POST /recalculate does
    - Routes parse, call CatalogCommands, and map results; no business logic

Design Decisions:
    - Failure results re-raised via CommandResult.unwrap() so the global
      handler owns the status mapping
"""

import logging

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_catalog_commands, get_catalog_queries
from app.schemas.catalog import CountOutcomeResponse
from app.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from app.services.catalog_commands import CatalogCommands
from app.services.catalog_queries import CatalogQueries

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/categories", tags=["categories"])


@router.get("", response_model=list[CategoryResponse])
async def list_categories(queries: CatalogQueries = Depends(get_catalog_queries)):
    """All categories with cached and live project counts."""
    rows = await queries.list_categories()
    return [
        CategoryResponse(id=c.id, label=c.label, count=c.count, project_count=n)
        for c, n in rows
    ]


@router.post(
    "", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED,
)
async def create_category(
    body: CategoryCreate,
    commands: CatalogCommands = Depends(get_catalog_commands),
):
    category = (await commands.create_category(body.id, body.label)).unwrap()
    return CategoryResponse.model_validate(category)


@router.post("/recalculate", response_model=list[CountOutcomeResponse])
async def recalculate_counts(
    commands: CatalogCommands = Depends(get_catalog_commands),
):
    """Recount projects for every category (repair job)."""
    outcomes = (await commands.recalculate_category_counts()).unwrap()
    return [CountOutcomeResponse.model_validate(o) for o in outcomes]


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(
    category_id: str, queries: CatalogQueries = Depends(get_catalog_queries),
):
    category, live = await queries.get_category(category_id)
    return CategoryResponse(
        id=category.id, label=category.label, count=category.count, project_count=live,
    )


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: str,
    body: CategoryUpdate,
    commands: CatalogCommands = Depends(get_catalog_commands),
):
    category = (await commands.update_category(category_id, body.label)).unwrap()
    return CategoryResponse.model_validate(category)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: str, commands: CatalogCommands = Depends(get_catalog_commands),
):
    (await commands.delete_category(category_id)).unwrap()


@router.post("/{category_id}/recalculate", response_model=CountOutcomeResponse)
async def recalculate_count(
    category_id: str, commands: CatalogCommands = Depends(get_catalog_commands),
):
    outcome = (await commands.recalculate_category_count(category_id)).unwrap()
    return CountOutcomeResponse.model_validate(outcome)
