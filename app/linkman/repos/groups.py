from __future__ import annotations

from typing import Iterable

from sqlalchemy import func, or_, select

from app.linkman.db.models import GROUP_MEMBER, GROUP_OWNER, GroupPrincipalRecord, GroupRecord
from app.linkman.repos.entities import Group, utcnow
from app.linkman.repos.principals import sync_principals


def _to_group(record: GroupRecord) -> Group:
    members = {row.value for row in record.principals if row.kind == GROUP_MEMBER}
    owners = {row.value for row in record.principals if row.kind == GROUP_OWNER}
    return Group(
        id=record.id,
        version=record.version,
        created_by=record.created_by,
        created_at=record.created_at,
        modified_at=record.modified_at,
        source=record.source,
        name=record.name,
        description=record.description,
        members=members,
        owners=owners,
    )


def _principal_subquery(kind: str, user: str):
    return select(GroupPrincipalRecord.group_id).where(
        GroupPrincipalRecord.kind == kind,
        GroupPrincipalRecord.value == user,
    )


def _sorted(groups: list[Group]) -> list[Group]:
    return sorted(groups, key=lambda group: group.sort_key())


class SqlGroupStore:
    def __init__(self, session_factory):
        self.session_factory = session_factory

    async def _find(self, stmt) -> list[Group]:
        async with self.session_factory() as db:
            records = (await db.execute(stmt)).scalars().all()
            return _sorted([_to_group(record) for record in records])

    async def _count(self, kind: str, user: str) -> int:
        stmt = (
            select(func.count())
            .select_from(GroupPrincipalRecord)
            .where(GroupPrincipalRecord.kind == kind, GroupPrincipalRecord.value == user)
        )
        async with self.session_factory() as db:
            return (await db.execute(stmt)).scalar_one()

    async def find_by_id(self, group_id: str) -> Group | None:
        async with self.session_factory() as db:
            record = await db.get(GroupRecord, group_id)
            return _to_group(record) if record else None

    async def find_by_ids(self, group_ids: Iterable[str]) -> list[Group]:
        wanted = [group_id for group_id in group_ids or () if group_id]
        if not wanted:
            return []
        return await self._find(select(GroupRecord).where(GroupRecord.id.in_(wanted)))

    async def find_all(self) -> list[Group]:
        return await self._find(select(GroupRecord))

    async def find_by_owner(self, user: str) -> list[Group]:
        return await self._find(select(GroupRecord).where(GroupRecord.id.in_(_principal_subquery(GROUP_OWNER, user))))

    async def find_by_member(self, user: str) -> list[Group]:
        return await self._find(select(GroupRecord).where(GroupRecord.id.in_(_principal_subquery(GROUP_MEMBER, user))))

    async def find_by_owner_or_member(self, user: str) -> list[Group]:
        stmt = select(GroupRecord).where(
            or_(
                GroupRecord.id.in_(_principal_subquery(GROUP_OWNER, user)),
                GroupRecord.id.in_(_principal_subquery(GROUP_MEMBER, user)),
            )
        )
        return await self._find(stmt)

    async def count_owned_groups(self, user: str) -> int:
        return await self._count(GROUP_OWNER, user)

    async def count_membership(self, user: str) -> int:
        return await self._count(GROUP_MEMBER, user)

    async def save(self, group: Group) -> Group:
        async with self.session_factory() as db:
            record = await db.get(GroupRecord, group.id) if group.id else None
            if record is None:
                record = GroupRecord(id=group.id) if group.id else GroupRecord()
                record.principals = []
                record.version = 0
                record.created_by = group.created_by
                record.created_at = group.created_at or utcnow()
                db.add(record)
            else:
                record.version = (record.version or 0) + 1
                if group.created_by:
                    record.created_by = group.created_by
            record.source = group.source
            record.name = group.name
            record.description = group.description
            record.modified_at = utcnow()
            desired = {(GROUP_MEMBER, value) for value in group.members if value}
            desired |= {(GROUP_OWNER, value) for value in group.owners if value}
            sync_principals(record.principals, desired, GroupPrincipalRecord)
            await db.commit()
            return _to_group(record)

    async def delete_by_id(self, group_id: str) -> bool:
        async with self.session_factory() as db:
            record = await db.get(GroupRecord, group_id)
            if record is None:
                return False
            await db.delete(record)
            await db.commit()
            return True
