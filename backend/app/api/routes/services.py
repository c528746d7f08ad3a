"""Service Routes — marketing services and their technology links."""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_catalog_commands, get_catalog_queries
from app.schemas.taxonomy import ServiceResponse, ServiceTechnologiesUpdate, SyncResponse
from app.services.catalog_commands import CatalogCommands
from app.services.catalog_queries import CatalogQueries

router = APIRouter(prefix="/api/v1/services", tags=["services"])


@router.get("", response_model=list[ServiceResponse])
async def list_services(queries: CatalogQueries = Depends(get_catalog_queries)):
    return [ServiceResponse.model_validate(s) for s in await queries.list_services()]


@router.put("/{service_id}/technologies", response_model=SyncResponse)
async def replace_technologies(
    service_id: int,
    body: ServiceTechnologiesUpdate,
    commands: CatalogCommands = Depends(get_catalog_commands),
):
    report = (await commands.sync_service_technologies(service_id, body.technologies)).unwrap()
    return SyncResponse(
        owner_id=service_id, linked=list(report.linked), skipped=list(report.skipped),
    )
