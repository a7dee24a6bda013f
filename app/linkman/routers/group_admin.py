from fastapi import APIRouter, Depends, Query, Response, status

from app.linkman.core.context import UserContext
from app.linkman.core.deps import get_group_service, require_admin
from app.linkman.schemas.errors import ApiErrorResponse, ApiValidationErrorResponse
from app.linkman.schemas.groups import AdminGroupSpec, GroupItem, GroupListResponse
from app.linkman.services.groups import GroupService
from app.linkman.services.mappers import group_from_spec, group_to_item

_ERROR_RESPONSES = {
    401: {"model": ApiErrorResponse},
    403: {"model": ApiErrorResponse},
    404: {"model": ApiErrorResponse},
    422: {"model": ApiValidationErrorResponse},
}

router = APIRouter(dependencies=[Depends(require_admin)], responses=_ERROR_RESPONSES)


@router.get("", response_model=GroupListResponse)
async def list_groups(service: GroupService = Depends(get_group_service)):
    return GroupListResponse(groups=[group_to_item(group) for group in await service.get_all_groups()])


@router.post("", response_model=GroupItem, status_code=status.HTTP_201_CREATED)
async def add_group(
    payload: AdminGroupSpec,
    context: UserContext = Depends(require_admin),
    service: GroupService = Depends(get_group_service),
):
    return group_to_item(await service.admin_add_group(group_from_spec(payload), context.user_id))


@router.get("/f", response_model=GroupListResponse)
async def find_groups_by_ids(
    id: list[str] | None = Query(default=None),
    service: GroupService = Depends(get_group_service),
):
    return GroupListResponse(groups=[group_to_item(group) for group in await service.get_groups_by_ids(id)])


@router.get("/{group_id}", response_model=GroupItem)
async def get_group(group_id: str, service: GroupService = Depends(get_group_service)):
    return group_to_item(await service.get_group(group_id))


@router.put("/{group_id}", response_model=GroupItem)
async def update_group(
    group_id: str,
    payload: AdminGroupSpec,
    context: UserContext = Depends(require_admin),
    service: GroupService = Depends(get_group_service),
):
    return group_to_item(await service.admin_update_group(group_id, group_from_spec(payload), context.user_id))


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_group(
    group_id: str,
    context: UserContext = Depends(require_admin),
    service: GroupService = Depends(get_group_service),
):
    await service.admin_delete_group(group_id, context.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
