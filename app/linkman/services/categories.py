from __future__ import annotations

import logging

from app.linkman.core.error_catalog import AppError, ErrorCatalog
from app.linkman.core.metrics import metrics
from app.linkman.repos.base import CategoryStore, LinkStore, PublicCategoryConflictError
from app.linkman.repos.entities import Category

logger = logging.getLogger(__name__)


class CategoryAdminService:
    def __init__(self, categories: CategoryStore, links: LinkStore) -> None:
        self.categories = categories
        self.links = links

    async def get_categories(self) -> list[Category]:
        return await self.categories.find_all()

    async def get_category(self, category_id: str) -> Category:
        category = await self.categories.find_by_id(category_id)
        if category is None:
            raise AppError(ErrorCatalog.CATEGORY_NOT_FOUND, details={"category_id": category_id})
        return category

    async def add_category(self, category: Category) -> Category:
        category = category.copy()
        category.id = None
        if category.is_public:
            await self._ensure_no_public_category()
        created = await self._save(category)
        logger.info("category_created", extra={"category_id": created.id, "public": created.is_public})
        return created

    async def update_category(self, category_id: str, category: Category) -> Category:
        existing = await self.get_category(category_id)
        category = category.copy()
        category.id = existing.id
        if category.is_public and not existing.is_public:
            await self._ensure_no_public_category()
        updated = await self._save(category)
        logger.info("category_updated", extra={"category_id": updated.id, "public": updated.is_public})
        return updated

    async def delete_category(self, category_id: str) -> None:
        await self.get_category(category_id)
        # References go first so an interrupted cascade leaves the category deletable again.
        await self.links.remove_category_references(category_id)
        await self.categories.delete_by_id(category_id)
        logger.info("category_deleted", extra={"category_id": category_id})

    async def _ensure_no_public_category(self) -> None:
        if await self.categories.count_public_categories() > 0:
            metrics.increment_public_category_conflict()
            raise AppError(ErrorCatalog.ONLY_ONE_PUBLIC_CATEGORY_IS_ALLOWED)

    async def _save(self, category: Category) -> Category:
        try:
            return await self.categories.save(category)
        except PublicCategoryConflictError as exc:
            metrics.increment_public_category_conflict()
            raise AppError(ErrorCatalog.ONLY_ONE_PUBLIC_CATEGORY_IS_ALLOWED) from exc
