from fastapi import APIRouter, Depends, Response, status

from app.linkman.core.deps import get_category_service, require_admin
from app.linkman.schemas.categories import CategoryItem, CategoryListResponse, CategorySpec
from app.linkman.schemas.errors import ApiErrorResponse, ApiValidationErrorResponse
from app.linkman.services.categories import CategoryAdminService
from app.linkman.services.mappers import category_from_spec, category_to_item

_ERROR_RESPONSES = {
    400: {"model": ApiErrorResponse},
    401: {"model": ApiErrorResponse},
    403: {"model": ApiErrorResponse},
    404: {"model": ApiErrorResponse},
    422: {"model": ApiValidationErrorResponse},
}

router = APIRouter(dependencies=[Depends(require_admin)], responses=_ERROR_RESPONSES)


@router.get("", response_model=CategoryListResponse)
async def list_categories(service: CategoryAdminService = Depends(get_category_service)):
    categories = await service.get_categories()
    return CategoryListResponse(categories=[category_to_item(category) for category in categories])


@router.post("", response_model=CategoryItem, status_code=status.HTTP_201_CREATED)
async def add_category(payload: CategorySpec, service: CategoryAdminService = Depends(get_category_service)):
    return category_to_item(await service.add_category(category_from_spec(payload)))


@router.get("/{category_id}", response_model=CategoryItem)
async def get_category(category_id: str, service: CategoryAdminService = Depends(get_category_service)):
    return category_to_item(await service.get_category(category_id))


@router.put("/{category_id}", response_model=CategoryItem)
async def update_category(
    category_id: str,
    payload: CategorySpec,
    service: CategoryAdminService = Depends(get_category_service),
):
    return category_to_item(await service.update_category(category_id, category_from_spec(payload)))


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(category_id: str, service: CategoryAdminService = Depends(get_category_service)):
    await service.delete_category(category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
