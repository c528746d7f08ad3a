"""Project Routes — project CRUD and association replacement.

Invariants:
    - Unknown technology/feature names never fail a write: 200/201 with `skipped`
    - Project writes leave Category.count untouched (see /categories/recalculate)
    - Missing category on create/update → 404
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_catalog_commands, get_catalog_queries
from app.core.domain_types import ProjectStatus
from app.schemas.project import (
    AssociationsResponse, ProjectAssociationsUpdate, ProjectCreate,
    ProjectListResponse, ProjectResponse, ProjectUpdate, ProjectWriteResponse,
)
from app.services.catalog_commands import CatalogCommands
from app.services.catalog_queries import CatalogQueries

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/projects", tags=["projects"])


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    skip: int = Query(0, ge=0),
    take: int = Query(20, ge=1, le=100),
    category: str | None = None,
    status_filter: ProjectStatus | None = Query(None, alias="status"),
    queries: CatalogQueries = Depends(get_catalog_queries),
):
    projects, total = await queries.list_projects(
        skip, take, category, status_filter.value if status_filter else None,
    )
    return ProjectListResponse(
        items=[ProjectResponse.model_validate(p) for p in projects],
        total=total, skip=skip, take=take,
    )


@router.get("/slug/{slug}", response_model=ProjectResponse)
async def get_project_by_slug(
    slug: str, queries: CatalogQueries = Depends(get_catalog_queries),
):
    return ProjectResponse.model_validate(await queries.get_project_by_slug(slug))


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: int, queries: CatalogQueries = Depends(get_catalog_queries),
):
    return ProjectResponse.model_validate(await queries.get_project(project_id))


@router.post(
    "", response_model=ProjectWriteResponse, status_code=status.HTTP_201_CREATED,
)
async def create_project(
    body: ProjectCreate, commands: CatalogCommands = Depends(get_catalog_commands),
):
    result = await commands.create_project(body)
    project = result.unwrap()
    return ProjectWriteResponse(
        project=ProjectResponse.model_validate(project),
        created=True, skipped=result.skipped,
    )


@router.put("/{project_id}", response_model=ProjectWriteResponse)
async def update_project(
    project_id: int,
    body: ProjectUpdate,
    commands: CatalogCommands = Depends(get_catalog_commands),
):
    result = await commands.update_project(project_id, body)
    project = result.unwrap()
    return ProjectWriteResponse(
        project=ProjectResponse.model_validate(project), skipped=result.skipped,
    )


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: int, commands: CatalogCommands = Depends(get_catalog_commands),
):
    (await commands.delete_project(project_id)).unwrap()


@router.put("/{project_id}/associations", response_model=AssociationsResponse)
async def replace_associations(
    project_id: int,
    body: ProjectAssociationsUpdate,
    commands: CatalogCommands = Depends(get_catalog_commands),
):
    """Make the project's links exactly the given technology and feature names."""
    result = await commands.sync_project_associations(
        project_id, body.technologies, body.features,
    )
    technologies, features = result.unwrap()
    return AssociationsResponse(
        owner_id=project_id,
        technologies=list(technologies.linked),
        features=list(features.linked),
        skipped=result.skipped,
    )
