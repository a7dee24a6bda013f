from fastapi import APIRouter, Depends, Query, Response, status

from app.linkman.core.deps import get_link_service, require_admin
from app.linkman.schemas.errors import ApiErrorResponse, ApiValidationErrorResponse
from app.linkman.schemas.links import LinkItem, LinkListResponse, LinkSpec
from app.linkman.services.links import LinkAdminService
from app.linkman.services.mappers import link_from_spec, link_to_item

_ERROR_RESPONSES = {
    400: {"model": ApiErrorResponse},
    401: {"model": ApiErrorResponse},
    403: {"model": ApiErrorResponse},
    404: {"model": ApiErrorResponse},
    422: {"model": ApiValidationErrorResponse},
}

router = APIRouter(dependencies=[Depends(require_admin)], responses=_ERROR_RESPONSES)


@router.get("", response_model=LinkListResponse)
async def list_links(
    category_id: str | None = Query(default=None),
    service: LinkAdminService = Depends(get_link_service),
):
    links = await service.get_links(category_id)
    return LinkListResponse(links=[link_to_item(link) for link in links])


@router.post("", response_model=LinkItem, status_code=status.HTTP_201_CREATED)
async def add_link(payload: LinkSpec, service: LinkAdminService = Depends(get_link_service)):
    return link_to_item(await service.add_link(link_from_spec(payload)))


@router.get("/{link_id}", response_model=LinkItem)
async def get_link(link_id: str, service: LinkAdminService = Depends(get_link_service)):
    return link_to_item(await service.get_link(link_id))


@router.put("/{link_id}", response_model=LinkItem)
async def update_link(link_id: str, payload: LinkSpec, service: LinkAdminService = Depends(get_link_service)):
    return link_to_item(await service.update_link(link_id, link_from_spec(payload)))


@router.delete("/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_link(link_id: str, service: LinkAdminService = Depends(get_link_service)):
    await service.delete_link(link_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
