"""Store capabilities consumed by the services.

Each store has a SQL implementation and an in-memory one. ``repos.registry`` selects them
through the ``STORE_BACKEND`` setting.
"""

from __future__ import annotations

from typing import AsyncIterator, Iterable, Protocol

from app.linkman.repos.entities import Category, Group, Link


class PublicCategoryConflictError(Exception):
    """Raised by a store when a write would produce a second public category."""


class CategoryStore(Protocol):
    def find_readable_categories(
        self,
        user_id: str | None,
        roles: Iterable[str] | None,
        groups: Iterable[str] | None,
    ) -> AsyncIterator[Category]: ...

    async def count_public_categories(self) -> int: ...

    async def find_public_category(self) -> Category | None: ...

    async def find_all(self) -> list[Category]: ...

    async def find_by_id(self, category_id: str) -> Category | None: ...

    async def find_unknown_ids(self, category_ids: Iterable[str]) -> set[str]: ...

    async def save(self, category: Category) -> Category: ...

    async def delete_by_id(self, category_id: str) -> bool: ...


class LinkStore(Protocol):
    def find_by_category_id(self, category_id: str, *, ordered: bool = False) -> AsyncIterator[Link]: ...

    def find_readable_links(
        self,
        user_id: str | None,
        roles: Iterable[str] | None,
        groups: Iterable[str] | None,
    ) -> AsyncIterator[Link]: ...

    async def find_all(self, category_id: str | None = None) -> list[Link]: ...

    async def find_by_id(self, link_id: str) -> Link | None: ...

    async def save(self, link: Link) -> Link: ...

    async def delete_by_id(self, link_id: str) -> bool: ...

    async def remove_category_references(self, category_id: str) -> None: ...


class GroupStore(Protocol):
    async def find_by_id(self, group_id: str) -> Group | None: ...

    async def find_by_ids(self, group_ids: Iterable[str]) -> list[Group]: ...

    async def find_all(self) -> list[Group]: ...

    async def find_by_owner(self, user: str) -> list[Group]: ...

    async def find_by_member(self, user: str) -> list[Group]: ...

    async def find_by_owner_or_member(self, user: str) -> list[Group]: ...

    async def count_owned_groups(self, user: str) -> int: ...

    async def count_membership(self, user: str) -> int: ...

    async def save(self, group: Group) -> Group: ...

    async def delete_by_id(self, group_id: str) -> bool: ...
