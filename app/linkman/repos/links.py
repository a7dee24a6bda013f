from __future__ import annotations

import logging
from typing import AsyncIterator, Iterable

from sqlalchemy import func, or_, select

from app.linkman.core.acl import READ, AccessControlEntry, AccessControlList
from app.linkman.db.models import (
    ACE_GROUP,
    ACE_ROLE,
    ACE_USER,
    LinkCategoryRecord,
    LinkPrincipalRecord,
    LinkRecord,
)
from app.linkman.repos.entities import Link, utcnow
from app.linkman.repos.principals import (
    desired_principals,
    principal_values,
    readable_criteria,
    sync_principals,
)

logger = logging.getLogger(__name__)


def _to_link(record: LinkRecord) -> Link:
    values = principal_values(record.principals)
    entry = AccessControlEntry(
        guest=record.matches_guest,
        users=values[ACE_USER],
        roles=values[ACE_ROLE],
        groups=values[ACE_GROUP],
    )
    return Link(
        id=record.id,
        order=record.sort_order,
        href=record.href,
        blank=record.blank,
        display_text=record.display_text,
        text=record.text,
        text_translations=dict(record.text_translations or {}),
        description=record.description,
        description_translations=dict(record.description_translations or {}),
        acl=AccessControlList(owner=record.acl_owner, entries={READ: entry}),
        category_ids={row.category_id for row in record.categories},
        card_image=record.card_image,
        menu_image=record.menu_image,
    )


def _sync_categories(record: LinkRecord, category_ids: set[str]) -> None:
    existing = {row.category_id: row for row in record.categories}
    for category_id, row in existing.items():
        if category_id not in category_ids:
            record.categories.remove(row)
    for category_id in sorted(category_ids - existing.keys()):
        record.categories.append(LinkCategoryRecord(category_id=category_id))


def _apply(record: LinkRecord, link: Link) -> None:
    read = link.acl.read
    record.sort_order = link.order
    record.href = link.href
    record.blank = link.blank
    record.display_text = link.display_text
    record.text = link.text
    record.text_translations = dict(link.text_translations)
    record.description = link.description
    record.description_translations = dict(link.description_translations)
    record.acl_owner = link.acl.owner
    record.matches_guest = read.guest
    record.card_image = link.card_image
    record.menu_image = link.menu_image
    record.modified_at = utcnow()
    sync_principals(record.principals, desired_principals(read), LinkPrincipalRecord)
    _sync_categories(record, {category_id for category_id in link.category_ids if category_id})


class SqlLinkStore:
    def __init__(self, session_factory):
        self.session_factory = session_factory

    async def find_by_category_id(self, category_id: str, *, ordered: bool = False) -> AsyncIterator[Link]:
        stmt = (
            select(LinkRecord)
            .join(LinkCategoryRecord, LinkCategoryRecord.link_id == LinkRecord.id)
            .where(LinkCategoryRecord.category_id == category_id)
        )
        if ordered:
            stmt = stmt.order_by(LinkRecord.sort_order.asc(), func.lower(LinkRecord.text).asc())
        async with self.session_factory() as db:
            records = (await db.execute(stmt)).scalars().unique().all()
            links = [_to_link(record) for record in records]
        for link in links:
            yield link

    async def find_readable_links(
        self,
        user_id: str | None,
        roles: Iterable[str] | None,
        groups: Iterable[str] | None,
    ) -> AsyncIterator[Link]:
        stmt = select(LinkRecord).where(
            or_(*readable_criteria(LinkRecord, LinkPrincipalRecord.link_id, user_id, roles, groups))
        )
        async with self.session_factory() as db:
            records = (await db.execute(stmt)).scalars().all()
            links = [_to_link(record) for record in records]
        for link in links:
            yield link

    async def find_all(self, category_id: str | None = None) -> list[Link]:
        stmt = select(LinkRecord)
        if category_id:
            stmt = stmt.join(LinkCategoryRecord, LinkCategoryRecord.link_id == LinkRecord.id).where(
                LinkCategoryRecord.category_id == category_id
            )
        stmt = stmt.order_by(LinkRecord.sort_order.asc(), func.lower(LinkRecord.text).asc())
        async with self.session_factory() as db:
            records = (await db.execute(stmt)).scalars().unique().all()
            return [_to_link(record) for record in records]

    async def find_by_id(self, link_id: str) -> Link | None:
        async with self.session_factory() as db:
            record = await db.get(LinkRecord, link_id)
            return _to_link(record) if record else None

    async def save(self, link: Link) -> Link:
        async with self.session_factory() as db:
            record = await db.get(LinkRecord, link.id) if link.id else None
            if record is None:
                record = LinkRecord(id=link.id) if link.id else LinkRecord()
                record.principals = []
                record.categories = []
                db.add(record)
            _apply(record, link)
            await db.commit()
            return _to_link(record)

    async def delete_by_id(self, link_id: str) -> bool:
        async with self.session_factory() as db:
            record = await db.get(LinkRecord, link_id)
            if record is None:
                return False
            await db.delete(record)
            await db.commit()
            return True

    async def remove_category_references(self, category_id: str) -> None:
        """Detach every link from ``category_id``, deleting links left without a category.

        Each link is committed on its own. A failure part way leaves the processed links
        updated and the rest untouched, so the call can simply be repeated.
        """
        stmt = select(LinkCategoryRecord.link_id).where(LinkCategoryRecord.category_id == category_id)
        async with self.session_factory() as db:
            link_ids = sorted(set((await db.execute(stmt)).scalars().all()))

        for link_id in link_ids:
            async with self.session_factory() as db:
                record = await db.get(LinkRecord, link_id)
                if record is None:
                    continue
                remaining = {row.category_id for row in record.categories} - {category_id}
                if remaining:
                    _sync_categories(record, remaining)
                    record.modified_at = utcnow()
                    logger.info("link_category_detached", extra={"link_id": link_id, "category_id": category_id})
                else:
                    await db.delete(record)
                    logger.info("link_deleted_without_category", extra={"link_id": link_id, "category_id": category_id})
                await db.commit()
