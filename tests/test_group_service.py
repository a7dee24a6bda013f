import pytest

from app.linkman.core.error_catalog import AppError
from app.linkman.core.security import TokenData
from app.linkman.repos.entities import Group
from app.linkman.services.groups import GroupService
from app.linkman.services.user_context import resolve_user_context


def _group(name, *, members=(), owners=()):
    return Group(name=name, members=set(members), owners=set(owners))


@pytest.mark.asyncio
async def test_creator_becomes_owner(stores):
    service = GroupService(stores.groups)

    created = await service.create_group(_group("Readers", members={"bob"}), "anna")

    assert created.id
    assert created.created_by == "anna"
    assert created.owners == {"anna"}
    assert created.members == {"bob"}
    assert created.source == "INTERNAL"
    assert (await service.get_group(created.id)).name == "Readers"


@pytest.mark.asyncio
async def test_max_owned_groups_is_enforced(stores):
    service = GroupService(stores.groups, max_owned_groups=1)
    await service.create_group(_group("First"), "anna")

    with pytest.raises(AppError) as exc_info:
        await service.create_group(_group("Second"), "anna")

    assert exc_info.value.error.code == "MAX_OWNED_GROUPS_REACHED"
    assert (await service.get_status("anna")).owned_group_size == 1


@pytest.mark.asyncio
async def test_only_owners_update_or_delete(stores):
    service = GroupService(stores.groups)
    group = await service.create_group(_group("Team", members={"bob"}), "anna")

    with pytest.raises(AppError) as update_error:
        await service.update_group(group.id, _group("Hijacked"), "bob")
    with pytest.raises(AppError) as delete_error:
        await service.delete_group(group.id, "bob")

    assert update_error.value.error.code == "PERMISSION_DENIED"
    assert delete_error.value.error.code == "PERMISSION_DENIED"
    assert (await service.get_group(group.id)).name == "Team"


@pytest.mark.asyncio
async def test_update_with_empty_owners_keeps_caller(stores):
    service = GroupService(stores.groups)
    group = await service.create_group(_group("Team"), "anna")

    updated = await service.update_group(group.id, _group("Team 2", members={"carl"}), "anna")

    assert updated.owners == {"anna"}
    assert updated.members == {"carl"}
    assert updated.version == group.version + 1
    assert updated.created_by == "anna"


@pytest.mark.asyncio
async def test_missing_group_is_not_found(stores):
    service = GroupService(stores.groups)

    with pytest.raises(AppError) as exc_info:
        await service.delete_group("missing", "anna")

    assert exc_info.value.error.code == "GROUP_NOT_FOUND"


@pytest.mark.asyncio
async def test_admin_manages_groups_without_ownership(stores):
    service = GroupService(stores.groups, max_owned_groups=0)
    orphan = await service.admin_add_group(_group("Orphaned", members={"bob"}), "root")
    assigned = await service.admin_add_group(
        Group(name="Assigned", created_by="carl", owners={"carl"}),
        "root",
    )

    assert orphan.created_by == "root"
    assert orphan.owners == set()
    assert assigned.created_by == "carl"
    assert [group.name for group in await service.get_all_groups()] == ["Assigned", "Orphaned"]

    updated = await service.admin_update_group(
        orphan.id,
        Group(name="Adopted", created_by="dora", owners={"dora"}, members={"bob"}),
        "root",
    )
    kept = await service.admin_update_group(assigned.id, _group("Assigned", owners={"carl"}), "root")

    assert updated.name == "Adopted"
    assert updated.owners == {"dora"}
    assert updated.created_by == "dora"
    assert updated.version == orphan.version + 1
    assert kept.created_by == "carl"

    await service.admin_delete_group(assigned.id, "root")
    with pytest.raises(AppError) as exc_info:
        await service.admin_delete_group(assigned.id, "root")

    assert exc_info.value.error.code == "GROUP_NOT_FOUND"
    assert [group.id for group in await service.get_all_groups()] == [orphan.id]


@pytest.mark.asyncio
async def test_membership_queries(stores):
    service = GroupService(stores.groups)
    owned = await service.create_group(_group("beta"), "anna")
    joined = await service.create_group(_group("Alpha", members={"anna"}), "bob")
    await service.create_group(_group("Other"), "bob")

    editable = await service.get_editable_groups("anna")
    usable = await service.get_usable_groups("anna")
    membership = await service.get_membership("anna")
    status = await service.get_status("anna")

    assert [group.id for group in editable] == [owned.id]
    assert [group.name for group in usable] == ["Alpha", "beta"]
    assert [group.id for group in membership] == [joined.id]
    assert await service.get_membership_ids("anna") == {joined.id}
    assert (status.owned_group_size, status.membership_size, status.max_owned_groups) == (1, 1, -1)
    assert [group.name for group in await service.get_groups_by_ids([joined.id, owned.id])] == ["Alpha", "beta"]


@pytest.mark.asyncio
async def test_user_context_combines_memberships_and_token_groups(memory_stores):
    service = GroupService(memory_stores.groups)
    joined = await service.create_group(_group("Team", members={"anna"}), "bob")

    context = await resolve_user_context(
        TokenData(sub="anna", roles=["ROLE_USER"], groups=["ldap-staff"]),
        service,
    )
    anonymous = await resolve_user_context(None, service)

    assert context.user_id == "anna"
    assert context.roles == frozenset({"ROLE_USER"})
    assert context.groups == frozenset({joined.id, "ldap-staff"})
    assert anonymous.is_anonymous
