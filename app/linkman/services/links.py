from __future__ import annotations

import logging

from app.linkman.core.error_catalog import AppError, ErrorCatalog
from app.linkman.repos.base import CategoryStore, LinkStore
from app.linkman.repos.entities import Link
from app.linkman.services.images import NullObjectStorage

logger = logging.getLogger(__name__)


class LinkAdminService:
    def __init__(self, links: LinkStore, categories: CategoryStore, storage=None) -> None:
        self.links = links
        self.categories = categories
        self.storage = storage or NullObjectStorage()

    async def get_links(self, category_id: str | None = None) -> list[Link]:
        return await self.links.find_all(category_id)

    async def get_link(self, link_id: str) -> Link:
        link = await self.links.find_by_id(link_id)
        if link is None:
            raise AppError(ErrorCatalog.LINK_NOT_FOUND, details={"link_id": link_id})
        return link

    async def add_link(self, link: Link) -> Link:
        link = link.copy()
        link.id = None
        await self._validate_categories(link)
        created = await self.links.save(link)
        logger.info("link_created", extra={"link_id": created.id})
        return created

    async def update_link(self, link_id: str, link: Link) -> Link:
        existing = await self.get_link(link_id)
        link = link.copy()
        link.id = existing.id
        await self._validate_categories(link)
        updated = await self.links.save(link)
        stale = [key for key in (existing.card_image, existing.menu_image) if key and key not in (updated.card_image, updated.menu_image)]
        if stale:
            await self.storage.delete_objects(stale)
        logger.info("link_updated", extra={"link_id": updated.id})
        return updated

    async def delete_link(self, link_id: str) -> None:
        link = await self.get_link(link_id)
        await self.links.delete_by_id(link_id)
        await self.storage.delete_objects([link.card_image, link.menu_image])
        logger.info("link_deleted", extra={"link_id": link_id})

    async def _validate_categories(self, link: Link) -> None:
        unknown = await self.categories.find_unknown_ids(link.category_ids)
        if unknown:
            raise AppError(ErrorCatalog.CATEGORY_REFERENCE_NOT_FOUND, details={"category_ids": sorted(unknown)})
