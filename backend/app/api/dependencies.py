"""Route Dependencies — per-request command and query objects.

Invariants:
    - Every command object shares the request's single AsyncSession
    - Deadlines come from Settings, never from the request
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.infrastructure.database import get_db
from app.services.catalog_commands import CatalogCommands
from app.services.catalog_queries import CatalogQueries
from app.services.faq_commands import FAQCommands


def get_catalog_commands(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> CatalogCommands:
    return CatalogCommands(
        db,
        timeout_seconds=settings.store_timeout_seconds,
        import_timeout_seconds=settings.import_timeout_seconds,
    )


def get_faq_commands(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> FAQCommands:
    return FAQCommands(db, timeout_seconds=settings.store_timeout_seconds)


def get_catalog_queries(db: AsyncSession = Depends(get_db)) -> CatalogQueries:
    return CatalogQueries(db)

