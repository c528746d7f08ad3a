"""Catalog Routes — natural-key upsert and bulk import.

Invariants:
    - PUT /catalog/{kind}/{natural_key} is idempotent: repeating it returns
      created=false, changed=false and writes nothing
    - Attribute bodies validated per kind; unknown fields → 400
    - Blank keys, and blog names that yield no slug → 400
    - POST /catalog/import reports per-item failures instead of failing whole

Design Decisions:
    - Body taken as a raw dict and validated against the kind's attribute
      model here, since the model depends on a path parameter
"""

import logging

from fastapi import APIRouter, Body, Depends
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from app.api.dependencies import get_catalog_commands
from app.core.domain_types import EntityKind
from app.schemas.catalog import (
    CatalogSeed, ImportReportResponse, UpsertResponse, check_natural_key,
    entity_to_dict, parse_attributes,
)
from app.services.catalog_commands import CatalogCommands

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/catalog", tags=["catalog"])


@router.put("/{kind}/{natural_key}", response_model=UpsertResponse)
async def upsert_by_natural_key(
    kind: EntityKind,
    natural_key: str,
    body: dict = Body(default_factory=dict),
    commands: CatalogCommands = Depends(get_catalog_commands),
):
    """Create or update one catalog row by its natural key."""
    try:
        check_natural_key(kind, natural_key)
    except ValueError as e:
        raise RequestValidationError([
            {"loc": ("path", "natural_key"), "msg": str(e), "type": "value_error"},
        ])
    try:
        attributes = parse_attributes(kind, body)
    except ValidationError as e:
        raise RequestValidationError(e.errors())

    result = await commands.upsert_by_natural_key(kind, natural_key, attributes)
    upserted = result.unwrap()
    return UpsertResponse(
        kind=kind,
        natural_key=natural_key,
        created=upserted.created,
        changed=upserted.changed,
        entity=entity_to_dict(upserted.entity),
        skipped=result.skipped,
    )


@router.post("/import", response_model=ImportReportResponse)
async def import_catalog(
    seed: CatalogSeed, commands: CatalogCommands = Depends(get_catalog_commands),
):
    """Upsert a whole catalog in dependency order, then recalculate counts."""
    report = (await commands.import_catalog(seed)).unwrap()
    return ImportReportResponse.model_validate(report)
