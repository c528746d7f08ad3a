"""Blog Taxonomy Routes — blog categories, tags, and post tagging.

Invariants:
    - post_count counts published posts only and is refreshed by /recalculate
    - Tag/category deletes refused while posts reference them (409)
"""

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_catalog_commands, get_catalog_queries
from app.schemas.catalog import CountOutcomeResponse
from app.schemas.taxonomy import (
    BlogCategoryResponse, BlogTagResponse, PostTagsUpdate, SyncResponse,
)
from app.services.catalog_commands import CatalogCommands
from app.services.catalog_queries import CatalogQueries

router = APIRouter(prefix="/api/v1/blog", tags=["blog"])


@router.get("/categories", response_model=list[BlogCategoryResponse])
async def list_categories(queries: CatalogQueries = Depends(get_catalog_queries)):
    return [
        BlogCategoryResponse.model_validate(c)
        for c in await queries.list_blog_categories()
    ]


@router.post("/categories/recalculate", response_model=list[CountOutcomeResponse])
async def recalculate_post_counts(
    commands: CatalogCommands = Depends(get_catalog_commands),
):
    outcomes = (await commands.recalculate_blog_post_counts()).unwrap()
    return [CountOutcomeResponse.model_validate(o) for o in outcomes]


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: int, commands: CatalogCommands = Depends(get_catalog_commands),
):
    (await commands.delete_blog_category(category_id)).unwrap()


@router.get("/tags", response_model=list[BlogTagResponse])
async def list_tags(queries: CatalogQueries = Depends(get_catalog_queries)):
    return [BlogTagResponse.model_validate(t) for t in await queries.list_blog_tags()]


@router.delete("/tags/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tag(
    tag_id: int, commands: CatalogCommands = Depends(get_catalog_commands),
):
    (await commands.delete_blog_tag(tag_id)).unwrap()


@router.put("/posts/{post_id}/tags", response_model=SyncResponse)
async def replace_post_tags(
    post_id: int,
    body: PostTagsUpdate,
    commands: CatalogCommands = Depends(get_catalog_commands),
):
    result = await commands.sync_post_tags(post_id, body.tags)
    report = result.unwrap()
    return SyncResponse(
        owner_id=post_id, linked=list(report.linked), skipped=list(report.skipped),
    )
