"""Technology & Feature Routes — shared vocabularies.

Invariants:
    - POST is create-only: an existing name → 409 (use PUT /catalog/... to upsert)
    - DELETE refused while any project or service links the row: 409
"""

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_catalog_commands, get_catalog_queries
from app.core.domain_types import EntityKind
from app.schemas.taxonomy import (
    FeatureCreate, FeatureResponse, TechnologyCreate, TechnologyResponse,
)
from app.services.catalog_commands import CatalogCommands
from app.services.catalog_queries import CatalogQueries

router = APIRouter(prefix="/api/v1", tags=["technologies"])


@router.get("/technologies", response_model=list[TechnologyResponse])
async def list_technologies(queries: CatalogQueries = Depends(get_catalog_queries)):
    return [TechnologyResponse.model_validate(t) for t in await queries.list_technologies()]


@router.post(
    "/technologies", response_model=TechnologyResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_technology(
    body: TechnologyCreate, commands: CatalogCommands = Depends(get_catalog_commands),
):
    result = await commands.create_by_natural_key(
        EntityKind.TECHNOLOGY, body.name,
        {"icon": body.icon, "description": body.description},
    )
    return TechnologyResponse.model_validate(result.unwrap())


@router.delete("/technologies/{technology_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_technology(
    technology_id: int, commands: CatalogCommands = Depends(get_catalog_commands),
):
    (await commands.delete_technology(technology_id)).unwrap()


@router.get("/features", response_model=list[FeatureResponse])
async def list_features(queries: CatalogQueries = Depends(get_catalog_queries)):
    return [FeatureResponse.model_validate(f) for f in await queries.list_features()]


@router.post(
    "/features", response_model=FeatureResponse, status_code=status.HTTP_201_CREATED,
)
async def create_feature(
    body: FeatureCreate, commands: CatalogCommands = Depends(get_catalog_commands),
):
    result = await commands.create_by_natural_key(EntityKind.FEATURE, body.name.strip(), {})
    return FeatureResponse.model_validate(result.unwrap())


@router.delete("/features/{feature_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_feature(
    feature_id: int, commands: CatalogCommands = Depends(get_catalog_commands),
):
    (await commands.delete_feature(feature_id)).unwrap()
