"""In-memory stores, selected with ``STORE_BACKEND=memory``.

They hold copies of the entities so callers never share mutable state with the store. All
access happens on one event loop. ``save`` never awaits, so its public category check cannot
interleave with another save.
"""

from __future__ import annotations

import logging
import uuid
from typing import AsyncIterator, Iterable

from app.linkman.core.acl import acl_matches
from app.linkman.core.context import UserContext
from app.linkman.core.store_timing import timed_store_call
from app.linkman.repos.base import PublicCategoryConflictError
from app.linkman.repos.entities import Category, Group, Link, utcnow

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


def _readable(acl, user_id: str | None, roles: Iterable[str] | None, groups: Iterable[str] | None) -> bool:
    context = UserContext(user_id=user_id, roles=frozenset(roles or ()), groups=frozenset(groups or ()))
    return acl_matches(acl, context)


class MemoryCategoryStore:
    def __init__(self):
        self._items: dict[str, Category] = {}

    async def find_readable_categories(
        self,
        user_id: str | None,
        roles: Iterable[str] | None,
        groups: Iterable[str] | None,
    ) -> AsyncIterator[Category]:
        with timed_store_call():
            found = [item.copy() for item in self._items.values() if _readable(item.acl, user_id, roles, groups)]
        for category in found:
            yield category

    async def count_public_categories(self) -> int:
        return sum(1 for item in self._items.values() if item.is_public)

    async def find_public_category(self) -> Category | None:
        for item in self._items.values():
            if item.is_public:
                return item.copy()
        return None

    async def find_all(self) -> list[Category]:
        return sorted((item.copy() for item in self._items.values()), key=lambda item: item.sort_key(None))

    async def find_by_id(self, category_id: str) -> Category | None:
        item = self._items.get(category_id)
        return item.copy() if item else None

    async def find_unknown_ids(self, category_ids: Iterable[str]) -> set[str]:
        return {category_id for category_id in category_ids or () if category_id and category_id not in self._items}

    async def save(self, category: Category) -> Category:
        stored = category.copy()
        if not stored.id:
            stored.id = _new_id()
        if stored.is_public and any(
            item.is_public for key, item in self._items.items() if key != stored.id
        ):
            logger.warning("public_category_conflict", extra={"category_id": stored.id})
            raise PublicCategoryConflictError(stored.id)
        self._items[stored.id] = stored
        return stored.copy()

    async def delete_by_id(self, category_id: str) -> bool:
        return self._items.pop(category_id, None) is not None


class MemoryLinkStore:
    def __init__(self):
        self._items: dict[str, Link] = {}

    async def find_by_category_id(self, category_id: str, *, ordered: bool = False) -> AsyncIterator[Link]:
        with timed_store_call():
            found = [item.copy() for item in self._items.values() if category_id in item.category_ids]
        if ordered:
            found.sort(key=lambda item: item.sort_key(None))
        for link in found:
            yield link

    async def find_readable_links(
        self,
        user_id: str | None,
        roles: Iterable[str] | None,
        groups: Iterable[str] | None,
    ) -> AsyncIterator[Link]:
        with timed_store_call():
            found = [item.copy() for item in self._items.values() if _readable(item.acl, user_id, roles, groups)]
        for link in found:
            yield link

    async def find_all(self, category_id: str | None = None) -> list[Link]:
        items = [item.copy() for item in self._items.values() if not category_id or category_id in item.category_ids]
        return sorted(items, key=lambda item: item.sort_key(None))

    async def find_by_id(self, link_id: str) -> Link | None:
        item = self._items.get(link_id)
        return item.copy() if item else None

    async def save(self, link: Link) -> Link:
        stored = link.copy()
        if not stored.id:
            stored.id = _new_id()
        stored.category_ids = {category_id for category_id in stored.category_ids if category_id}
        self._items[stored.id] = stored
        return stored.copy()

    async def delete_by_id(self, link_id: str) -> bool:
        return self._items.pop(link_id, None) is not None

    async def remove_category_references(self, category_id: str) -> None:
        for link_id in [key for key, item in self._items.items() if category_id in item.category_ids]:
            item = self._items[link_id]
            remaining = item.category_ids - {category_id}
            if remaining:
                updated = item.copy()
                updated.category_ids = remaining
                self._items[link_id] = updated
            else:
                del self._items[link_id]
                logger.info("link_deleted_without_category", extra={"link_id": link_id, "category_id": category_id})


class MemoryGroupStore:
    def __init__(self):
        self._items: dict[str, Group] = {}

    def _select(self, predicate) -> list[Group]:
        return sorted((item.copy() for item in self._items.values() if predicate(item)), key=lambda item: item.sort_key())

    async def find_by_id(self, group_id: str) -> Group | None:
        item = self._items.get(group_id)
        return item.copy() if item else None

    async def find_by_ids(self, group_ids: Iterable[str]) -> list[Group]:
        wanted = set(group_ids or ())
        return self._select(lambda item: item.id in wanted)

    async def find_all(self) -> list[Group]:
        return self._select(lambda item: True)

    async def find_by_owner(self, user: str) -> list[Group]:
        return self._select(lambda item: user in item.owners)

    async def find_by_member(self, user: str) -> list[Group]:
        return self._select(lambda item: user in item.members)

    async def find_by_owner_or_member(self, user: str) -> list[Group]:
        return self._select(lambda item: user in item.owners or user in item.members)

    async def count_owned_groups(self, user: str) -> int:
        return sum(1 for item in self._items.values() if user in item.owners)

    async def count_membership(self, user: str) -> int:
        return sum(1 for item in self._items.values() if user in item.members)

    async def save(self, group: Group) -> Group:
        stored = group.copy()
        existing = self._items.get(stored.id) if stored.id else None
        if existing is None:
            stored.id = stored.id or _new_id()
            stored.version = 0
        else:
            stored.version = existing.version + 1
            stored.created_by = stored.created_by or existing.created_by
            stored.created_at = existing.created_at
        stored.modified_at = utcnow()
        self._items[stored.id] = stored
        return stored.copy()

    async def delete_by_id(self, group_id: str) -> bool:
        return self._items.pop(group_id, None) is not None
