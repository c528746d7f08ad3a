"""Seed Catalog — command-line entry point that imports a catalog JSON file.

Usage:
    python -m app.seed_catalog seed/catalog.json [--database-url URL]

Invariants:
    - Same code path as POST /api/v1/catalog/import (CatalogCommands.import_catalog)
    - Safe to rerun: every section is an upsert by natural key
    - Exit status 1 when the import fails as a whole or any item failed
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from app.config import get_settings
from app.db.session import create_session_factory
from app.infrastructure.observability import setup_logging
from app.schemas.catalog import CatalogSeed
from app.services.catalog_commands import CatalogCommands

logger = logging.getLogger(__name__)


async def seed_from_file(path: Path, database_url: str) -> bool:
    """Import the seed at path. Returns True when every item landed."""
    seed = CatalogSeed.model_validate(json.loads(path.read_text(encoding="utf-8")))
    factory = create_session_factory(database_url)
    try:
        async with factory() as db:
            result = await CatalogCommands(db).import_catalog(seed)
    finally:
        await factory.kw["bind"].dispose()

    if not result.ok:
        logger.error(f"Catalog import failed: {result.error.message}")
        return False
    report = result.value
    for failure in report.failures:
        logger.error(f"{failure.kind} {failure.natural_key}: {failure.message}")
    for slug, keys in report.skipped.items():
        logger.warning(f"project {slug}: unresolved {keys}")
    logger.info(
        f"Seeded catalog: created={dict(report.created)} "
        f"updated={dict(report.updated)} unchanged={dict(report.unchanged)}",
    )
    return not report.failures


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Import a catalog seed file.")
    parser.add_argument("path", type=Path)
    parser.add_argument("--database-url", default=settings.database_url)
    args = parser.parse_args(argv)

    setup_logging(settings.log_level, settings.log_format, service="portfolio-seed")
    ok = asyncio.run(seed_from_file(args.path, args.database_url))
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
