from fastapi import APIRouter, Depends, Query, Response, status

from app.linkman.core.context import UserContext
from app.linkman.core.deps import get_group_service, require_admin, require_user_context
from app.linkman.schemas.errors import ApiErrorResponse, ApiValidationErrorResponse
from app.linkman.schemas.groups import (
    GroupItem,
    GroupListResponse,
    GroupSpec,
    GroupStatusResponse,
    MembershipIdsResponse,
    SelectOptionListResponse,
)
from app.linkman.services.groups import GroupService
from app.linkman.services.mappers import group_from_spec, group_to_item, option_to_item
from app.linkman.services.user_context import get_role_options

router = APIRouter(
    responses={
        401: {"model": ApiErrorResponse},
        403: {"model": ApiErrorResponse},
        404: {"model": ApiErrorResponse},
        422: {"model": ApiValidationErrorResponse},
    }
)


def _group_list(groups) -> GroupListResponse:
    return GroupListResponse(groups=[group_to_item(group) for group in groups])


@router.post("/api/groups", response_model=GroupItem, status_code=status.HTTP_201_CREATED)
async def create_group(
    payload: GroupSpec,
    context: UserContext = Depends(require_user_context),
    service: GroupService = Depends(get_group_service),
):
    return group_to_item(await service.create_group(group_from_spec(payload), context.user_id))


@router.get("/api/groups", response_model=GroupListResponse)
async def get_groups_by_ids(
    id: list[str] | None = Query(default=None),
    _context: UserContext = Depends(require_user_context),
    service: GroupService = Depends(get_group_service),
):
    return _group_list(await service.get_groups_by_ids(id))


@router.get("/api/groups/f/editable", response_model=GroupListResponse)
async def get_editable_groups(
    context: UserContext = Depends(require_user_context),
    service: GroupService = Depends(get_group_service),
):
    return _group_list(await service.get_editable_groups(context.user_id))


@router.get("/api/groups/f/usable", response_model=GroupListResponse)
async def get_usable_groups(
    context: UserContext = Depends(require_user_context),
    service: GroupService = Depends(get_group_service),
):
    return _group_list(await service.get_usable_groups(context.user_id))


@router.get("/api/groups/f/membership", response_model=GroupListResponse)
async def get_membership(
    context: UserContext = Depends(require_user_context),
    service: GroupService = Depends(get_group_service),
):
    return _group_list(await service.get_membership(context.user_id))


@router.get("/api/groups/f/membership-ids", response_model=MembershipIdsResponse)
async def get_membership_ids(
    context: UserContext = Depends(require_user_context),
    service: GroupService = Depends(get_group_service),
):
    return MembershipIdsResponse(ids=sorted(await service.get_membership_ids(context.user_id)))


@router.get("/api/groups/f/status", response_model=GroupStatusResponse)
async def get_status(
    context: UserContext = Depends(require_user_context),
    service: GroupService = Depends(get_group_service),
):
    group_status = await service.get_status(context.user_id)
    return GroupStatusResponse(
        owned_group_size=group_status.owned_group_size,
        membership_size=group_status.membership_size,
        max_owned_groups=group_status.max_owned_groups,
    )


@router.get("/api/groups/f/options", response_model=SelectOptionListResponse)
async def get_group_options(
    _context: UserContext = Depends(require_user_context),
    service: GroupService = Depends(get_group_service),
):
    return SelectOptionListResponse(options=[option_to_item(option) for option in await service.get_group_options()])


@router.get("/api/roles/f/options", response_model=SelectOptionListResponse)
async def get_roles(_context: UserContext = Depends(require_admin)):
    return SelectOptionListResponse(options=[option_to_item(option) for option in get_role_options()])


@router.get("/api/groups/{group_id}", response_model=GroupItem)
async def get_group(
    group_id: str,
    _context: UserContext = Depends(require_user_context),
    service: GroupService = Depends(get_group_service),
):
    return group_to_item(await service.get_group(group_id))


@router.put("/api/groups/{group_id}", response_model=GroupItem)
async def update_group(
    group_id: str,
    payload: GroupSpec,
    context: UserContext = Depends(require_user_context),
    service: GroupService = Depends(get_group_service),
):
    return group_to_item(await service.update_group(group_id, group_from_spec(payload), context.user_id))


@router.delete("/api/groups/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_group(
    group_id: str,
    context: UserContext = Depends(require_user_context),
    service: GroupService = Depends(get_group_service),
):
    await service.delete_group(group_id, context.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
