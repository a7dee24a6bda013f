from __future__ import annotations

from dataclasses import dataclass
import logging

from app.linkman.core.config import settings
from app.linkman.core.error_catalog import AppError, ErrorCatalog
from app.linkman.repos.base import GroupStore
from app.linkman.repos.entities import Group, utcnow

logger = logging.getLogger(__name__)

SOURCE_INTERNAL = "INTERNAL"


@dataclass(frozen=True)
class GroupStatus:
    owned_group_size: int
    membership_size: int
    max_owned_groups: int


@dataclass(frozen=True)
class SelectOption:
    value: str
    display_value: str


class GroupService:
    def __init__(self, groups: GroupStore, *, max_owned_groups: int | None = None) -> None:
        self.groups = groups
        self.max_owned_groups = settings.MAX_OWNED_GROUPS if max_owned_groups is None else max_owned_groups

    async def create_group(self, group: Group, current_user: str) -> Group:
        if self.max_owned_groups >= 0:
            owned = await self.groups.count_owned_groups(current_user)
            if owned >= self.max_owned_groups:
                raise AppError(
                    ErrorCatalog.MAX_OWNED_GROUPS_REACHED,
                    details={"owned_group_size": owned, "max_owned_groups": self.max_owned_groups},
                )
        now = utcnow()
        new_group = group.copy()
        new_group.id = None
        new_group.version = 0
        new_group.created_by = current_user
        new_group.created_at = now
        new_group.modified_at = now
        new_group.source = SOURCE_INTERNAL
        new_group.owners.add(current_user)
        created = await self.groups.save(new_group)
        logger.info("group_created", extra={"group_id": created.id, "user": current_user})
        return created

    async def get_group(self, group_id: str) -> Group:
        group = await self.groups.find_by_id(group_id)
        if group is None:
            raise AppError(ErrorCatalog.GROUP_NOT_FOUND, details={"group_id": group_id})
        return group

    async def get_groups_by_ids(self, group_ids: list[str] | None) -> list[Group]:
        return await self.groups.find_by_ids(group_ids or [])

    async def update_group(self, group_id: str, group: Group, current_user: str) -> Group:
        existing = await self._owned_group(group_id, current_user)
        updated = existing.copy()
        updated.name = group.name
        updated.description = group.description
        updated.members = set(group.members)
        updated.owners = set(group.owners) or {current_user}
        saved = await self.groups.save(updated)
        logger.info("group_updated", extra={"group_id": saved.id, "user": current_user})
        return saved

    async def delete_group(self, group_id: str, current_user: str) -> None:
        await self._owned_group(group_id, current_user)
        await self.groups.delete_by_id(group_id)
        logger.info("group_deleted", extra={"group_id": group_id, "user": current_user})

    async def get_editable_groups(self, current_user: str) -> list[Group]:
        return await self.groups.find_by_owner(current_user)

    async def get_usable_groups(self, current_user: str) -> list[Group]:
        return await self.groups.find_by_owner_or_member(current_user)

    async def get_membership(self, current_user: str) -> list[Group]:
        return await self.groups.find_by_member(current_user)

    async def get_membership_ids(self, current_user: str | None) -> set[str]:
        if not current_user:
            return set()
        return {group.id for group in await self.groups.find_by_member(current_user)}

    async def get_status(self, current_user: str) -> GroupStatus:
        return GroupStatus(
            owned_group_size=await self.groups.count_owned_groups(current_user),
            membership_size=await self.groups.count_membership(current_user),
            max_owned_groups=self.max_owned_groups,
        )

    async def get_group_options(self) -> list[SelectOption]:
        excluded = set(settings.EXCLUDED_GROUPS)
        return [
            SelectOption(value=group.id, display_value=group.name)
            for group in await self.groups.find_all()
            if group.name and group.name not in excluded and group.id not in excluded
        ]

    # Administration: no ownership checks and no owned-group limit.

    async def get_all_groups(self) -> list[Group]:
        return await self.groups.find_all()

    async def admin_add_group(self, group: Group, current_user: str) -> Group:
        now = utcnow()
        new_group = group.copy()
        new_group.id = None
        new_group.version = 0
        new_group.created_by = group.created_by or current_user
        new_group.created_at = now
        new_group.modified_at = now
        new_group.source = SOURCE_INTERNAL
        created = await self.groups.save(new_group)
        logger.info("group_created_by_admin", extra={"group_id": created.id, "user": current_user})
        return created

    async def admin_update_group(self, group_id: str, group: Group, current_user: str) -> Group:
        updated = await self.get_group(group_id)
        updated.name = group.name
        updated.description = group.description
        updated.members = set(group.members)
        updated.owners = set(group.owners)
        if group.created_by:
            updated.created_by = group.created_by
        saved = await self.groups.save(updated)
        logger.info("group_updated_by_admin", extra={"group_id": saved.id, "user": current_user})
        return saved

    async def admin_delete_group(self, group_id: str, current_user: str) -> None:
        await self.get_group(group_id)
        await self.groups.delete_by_id(group_id)
        logger.info("group_deleted_by_admin", extra={"group_id": group_id, "user": current_user})

    async def _owned_group(self, group_id: str, current_user: str) -> Group:
        group = await self.get_group(group_id)
        if current_user not in group.owners:
            raise AppError(ErrorCatalog.PERMISSION_DENIED, details={"group_id": group_id})
        return group
