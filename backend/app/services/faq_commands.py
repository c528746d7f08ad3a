"""FAQ Commands — create/update for FAQ categories and items.

Invariants:
    - An item's category must exist on create and on category change (NOT_FOUND)
    - FAQ category deletion is guarded and lives in CatalogCommands
    - Items are leaves: deleting one needs no guard
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import EntityKind, FAQCategoryId
from app.core.errors import ResourceNotFoundError
from app.core.results import CommandResult
from app.models.faq import FAQCategory, FAQItem
from app.services.command_runner import CommandRunner
from app.services.upsert_reconciler import UpsertReconciler

logger = logging.getLogger(__name__)


class FAQCommands(CommandRunner):

    def __init__(self, db: AsyncSession, timeout_seconds: float | None = None):
        super().__init__(db, timeout_seconds)
        self.upserts = UpsertReconciler(db)

    async def create_category(
        self, category_id: FAQCategoryId, name: str, icon: str,
    ) -> CommandResult[FAQCategory]:
        async def work():
            category = await self.upserts.create(
                EntityKind.FAQ_CATEGORY, category_id, {"name": name, "icon": icon},
            )
            await self._commit("FAQCategory", category_id)
            return CommandResult.success(category)
        return await self._run("create_faq_category", work)

    async def update_category(
        self, category_id: FAQCategoryId, changes: dict,
    ) -> CommandResult[FAQCategory]:
        async def work():
            category = await self.upserts.update(
                EntityKind.FAQ_CATEGORY, category_id, changes,
            )
            await self.db.commit()
            return CommandResult.success(category)
        return await self._run("update_faq_category", work)

    async def create_item(
        self, category: str, question: str, answer: str, popular: bool = False,
    ) -> CommandResult[FAQItem]:
        """Create an item with a store-assigned id."""
        async def work():
            if await self.db.get(FAQCategory, category) is None:
                raise ResourceNotFoundError("FAQCategory", category)
            item = FAQItem(
                category=category, question=question, answer=answer, popular=popular,
            )
            self.db.add(item)
            await self.db.commit()
            return CommandResult.success(item)
        return await self._run("create_faq_item", work)

    async def update_item(self, item_id: int, changes: dict) -> CommandResult[FAQItem]:
        async def work():
            item = await self.upserts.update(EntityKind.FAQ_ITEM, item_id, changes)
            await self.db.commit()
            return CommandResult.success(item)
        return await self._run("update_faq_item", work)

    async def delete_item(self, item_id: int) -> CommandResult[None]:
        async def work():
            item = await self.db.get(FAQItem, item_id)
            if item is None:
                raise ResourceNotFoundError("FAQItem", item_id)
            await self.db.delete(item)
            await self.db.commit()
            logger.info(f"Deleted FAQ item {item_id}", extra={"entity_kind": "faq_item"})
            return CommandResult.success()
        return await self._run("delete_faq_item", work)
