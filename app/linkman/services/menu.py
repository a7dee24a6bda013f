from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import logging
import time

from app.linkman.core.acl import acl_matches
from app.linkman.core.config import settings
from app.linkman.core.context import UserContext
from app.linkman.core.error_catalog import AppError, ErrorCatalog
from app.linkman.core.i18n import normalize_language
from app.linkman.core.metrics import metrics
from app.linkman.repos.base import CategoryStore, LinkStore
from app.linkman.repos.entities import Category, Link
from app.linkman.services.images import NullUrlSigner, UrlSigner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MenuLink:
    id: str | None
    href: str
    text: str
    description: str | None
    blank: bool
    display_text: bool
    card_image_url: str | None = None
    menu_image_url: str | None = None


@dataclass(frozen=True)
class MenuEntry:
    category: str
    public: bool
    links: list[MenuLink] = field(default_factory=list)
    category_id: str | None = None


class VisibilityResolver:
    """Builds the per-caller view of categories and their links.

    Category readability is decided by the store query; links are then fetched per category
    concurrently and either trusted (the category gates them) or filtered by their own ACL,
    depending on ``apply_link_acl``.
    """

    def __init__(
        self,
        categories: CategoryStore,
        links: LinkStore,
        url_signer: UrlSigner | None = None,
        *,
        apply_link_acl: bool | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self.categories = categories
        self.links = links
        self.url_signer = url_signer or NullUrlSigner()
        self.apply_link_acl = settings.MENU_APPLY_LINK_ACL if apply_link_acl is None else apply_link_acl
        self.timeout_seconds = settings.MENU_TIMEOUT_SECONDS if timeout_seconds is None else timeout_seconds

    async def get_menu_entries(self, user_context: UserContext | None, language: str | None) -> list[MenuEntry]:
        return await self._timed("menu", self._resolve_menu(user_context or UserContext.anonymous(), language))

    async def get_link_containers(self, user_context: UserContext | None, language: str | None) -> list[MenuEntry]:
        return await self._timed("link_containers", self._resolve_containers(user_context or UserContext.anonymous(), language))

    async def _timed(self, view: str, resolution) -> list[MenuEntry]:
        start = time.perf_counter()
        try:
            if self.timeout_seconds:
                entries = await asyncio.wait_for(resolution, timeout=self.timeout_seconds)
            else:
                entries = await resolution
        except asyncio.TimeoutError as exc:
            logger.warning("menu_resolution_timeout", extra={"view": view, "timeout_seconds": self.timeout_seconds})
            raise AppError(ErrorCatalog.MENU_TIMEOUT, details={"view": view}) from exc
        metrics.record_menu_resolution(
            view=view,
            entries=len(entries),
            latency_ms=(time.perf_counter() - start) * 1000,
        )
        return entries

    async def _readable_categories(self, user_context: UserContext) -> list[Category]:
        return [
            category
            async for category in self.categories.find_readable_categories(
                user_context.user_id, user_context.roles, user_context.groups
            )
        ]

    async def _category_links(self, category: Category, user_context: UserContext) -> list[Link]:
        links = [link async for link in self.links.find_by_category_id(category.id)]
        if self.apply_link_acl:
            links = [link for link in links if acl_matches(link.acl, user_context)]
        return links

    async def _resolve_menu(self, user_context: UserContext, language: str | None) -> list[MenuEntry]:
        language = normalize_language(language)
        categories = await self._readable_categories(user_context)
        # A failing branch propagates out of gather and fails the whole resolution.
        link_lists = await asyncio.gather(
            *(self._category_links(category, user_context) for category in categories)
        )
        return self._assemble(zip(categories, link_lists), language)

    async def _resolve_containers(self, user_context: UserContext, language: str | None) -> list[MenuEntry]:
        language = normalize_language(language)
        categories, links = await asyncio.gather(
            self._readable_categories(user_context),
            self._readable_links(user_context),
        )
        by_id = {category.id: category for category in categories}
        public = next((category for category in categories if category.is_public), None)
        grouped: dict[str, list[Link]] = {category.id: [] for category in categories}
        for link in links:
            targets = [category_id for category_id in link.category_ids if category_id in by_id]
            if not link.category_ids and public is not None:
                targets = [public.id]
            for category_id in targets:
                grouped[category_id].append(link)
        return self._assemble(((category, grouped[category.id]) for category in categories), language)

    async def _readable_links(self, user_context: UserContext) -> list[Link]:
        return [
            link
            async for link in self.links.find_readable_links(
                user_context.user_id, user_context.roles, user_context.groups
            )
        ]

    def _assemble(self, groups, language: str | None) -> list[MenuEntry]:
        ordered = sorted(
            ((category, links) for category, links in groups if links),
            key=lambda item: item[0].sort_key(language),
        )
        return [
            MenuEntry(
                category=category.get_name(language),
                public=category.is_public,
                category_id=category.id,
                links=[
                    self._to_menu_link(link, language)
                    for link in sorted(links, key=lambda link: link.sort_key(language))
                ],
            )
            for category, links in ordered
        ]

    def _to_menu_link(self, link: Link, language: str | None) -> MenuLink:
        return MenuLink(
            id=link.id,
            href=link.href,
            text=link.get_text(language),
            description=link.get_description(language),
            blank=link.blank,
            display_text=link.display_text,
            card_image_url=self.url_signer.sign(link.card_image),
            menu_image_url=self.url_signer.sign(link.menu_image),
        )
