from __future__ import annotations

import logging
from typing import AsyncIterator, Iterable

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError

from app.linkman.core.acl import READ, AccessControlEntry, AccessControlList
from app.linkman.db.models import (
    ACE_GROUP,
    ACE_ROLE,
    ACE_USER,
    PUBLIC_MARKER,
    CategoryPrincipalRecord,
    CategoryRecord,
)
from app.linkman.repos.base import PublicCategoryConflictError
from app.linkman.repos.entities import Category, utcnow
from app.linkman.repos.principals import (
    desired_principals,
    principal_values,
    readable_criteria,
    sync_principals,
)

logger = logging.getLogger(__name__)


def _to_category(record: CategoryRecord) -> Category:
    values = principal_values(record.principals)
    entry = AccessControlEntry(
        guest=record.matches_guest,
        users=values[ACE_USER],
        roles=values[ACE_ROLE],
        groups=values[ACE_GROUP],
    )
    return Category(
        id=record.id,
        order=record.sort_order,
        name=record.name,
        translations=dict(record.translations or {}),
        acl=AccessControlList(owner=record.acl_owner, entries={READ: entry}),
    )


def _apply(record: CategoryRecord, category: Category) -> None:
    read = category.acl.read
    record.sort_order = category.order
    record.name = category.name
    record.translations = dict(category.translations)
    record.acl_owner = category.acl.owner
    record.matches_guest = read.guest
    record.public_marker = PUBLIC_MARKER if read.guest else None
    record.modified_at = utcnow()
    sync_principals(record.principals, desired_principals(read), CategoryPrincipalRecord)


class SqlCategoryStore:
    def __init__(self, session_factory):
        self.session_factory = session_factory

    async def find_readable_categories(
        self,
        user_id: str | None,
        roles: Iterable[str] | None,
        groups: Iterable[str] | None,
    ) -> AsyncIterator[Category]:
        stmt = select(CategoryRecord).where(or_(
            *readable_criteria(CategoryRecord, CategoryPrincipalRecord.category_id, user_id, roles, groups)
        ))
        async with self.session_factory() as db:
            records = (await db.execute(stmt)).scalars().all()
            categories = [_to_category(record) for record in records]
        for category in categories:
            yield category

    async def count_public_categories(self) -> int:
        stmt = select(func.count()).select_from(CategoryRecord).where(CategoryRecord.matches_guest.is_(True))
        async with self.session_factory() as db:
            return (await db.execute(stmt)).scalar_one()

    async def find_public_category(self) -> Category | None:
        stmt = select(CategoryRecord).where(CategoryRecord.matches_guest.is_(True)).limit(1)
        async with self.session_factory() as db:
            record = (await db.execute(stmt)).scalars().first()
            return _to_category(record) if record else None

    async def find_all(self) -> list[Category]:
        stmt = select(CategoryRecord).order_by(CategoryRecord.sort_order.asc(), func.lower(CategoryRecord.name).asc())
        async with self.session_factory() as db:
            records = (await db.execute(stmt)).scalars().all()
            return [_to_category(record) for record in records]

    async def find_by_id(self, category_id: str) -> Category | None:
        async with self.session_factory() as db:
            record = await db.get(CategoryRecord, category_id)
            return _to_category(record) if record else None

    async def find_unknown_ids(self, category_ids: Iterable[str]) -> set[str]:
        wanted = {category_id for category_id in category_ids or () if category_id}
        if not wanted:
            return set()
        stmt = select(CategoryRecord.id).where(CategoryRecord.id.in_(wanted))
        async with self.session_factory() as db:
            found = set((await db.execute(stmt)).scalars().all())
        return wanted - found

    async def save(self, category: Category) -> Category:
        async with self.session_factory() as db:
            record = await db.get(CategoryRecord, category.id) if category.id else None
            if record is None:
                record = CategoryRecord(id=category.id) if category.id else CategoryRecord()
                record.principals = []
                db.add(record)
            _apply(record, category)
            try:
                await db.commit()
            except IntegrityError as exc:
                await db.rollback()
                if category.is_public:
                    logger.warning("public_category_conflict", extra={"category_id": category.id})
                    raise PublicCategoryConflictError(str(exc)) from exc
                raise
            return _to_category(record)

    async def delete_by_id(self, category_id: str) -> bool:
        async with self.session_factory() as db:
            record = await db.get(CategoryRecord, category_id)
            if record is None:
                return False
            await db.delete(record)
            await db.commit()
            return True
