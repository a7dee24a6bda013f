from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials
from jose import JWTError
from pydantic import ValidationError

from app.linkman.core.config import settings
from app.linkman.core.context import UserContext
from app.linkman.core.error_catalog import AppError, ErrorCatalog
from app.linkman.core.security import TokenData, bearer_scheme, decode_token
from app.linkman.services.categories import CategoryAdminService
from app.linkman.services.groups import GroupService
from app.linkman.services.links import LinkAdminService
from app.linkman.services.menu import VisibilityResolver
from app.linkman.services.user_context import resolve_user_context


def get_optional_token_data(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> TokenData | None:
    if credentials is None:
        return None
    try:
        payload = decode_token(credentials.credentials)
        return TokenData(**payload)
    except (JWTError, ValidationError, TypeError) as exc:
        raise AppError(ErrorCatalog.INVALID_TOKEN) from exc


def get_current_token_data(token_data: TokenData | None = Depends(get_optional_token_data)) -> TokenData:
    if token_data is None or not token_data.sub:
        raise AppError(ErrorCatalog.INVALID_TOKEN)
    return token_data


def get_stores(request: Request):
    return request.app.state.stores


def get_group_service(stores=Depends(get_stores)) -> GroupService:
    return GroupService(stores.groups)


def get_category_service(stores=Depends(get_stores)) -> CategoryAdminService:
    return CategoryAdminService(stores.categories, stores.links)


def get_link_service(request: Request, stores=Depends(get_stores)) -> LinkAdminService:
    return LinkAdminService(stores.links, stores.categories, storage=request.app.state.object_storage)


def get_visibility_resolver(request: Request, stores=Depends(get_stores)) -> VisibilityResolver:
    return VisibilityResolver(stores.categories, stores.links, request.app.state.url_signer)


async def get_user_context(
    request: Request,
    token_data: TokenData | None = Depends(get_optional_token_data),
    groups: GroupService = Depends(get_group_service),
) -> UserContext:
    context = await resolve_user_context(token_data, groups)
    request.state.user_context = context
    return context


async def require_user_context(
    request: Request,
    token_data: TokenData = Depends(get_current_token_data),
    groups: GroupService = Depends(get_group_service),
) -> UserContext:
    context = await resolve_user_context(token_data, groups)
    request.state.user_context = context
    return context


def require_admin(context: UserContext = Depends(require_user_context)) -> UserContext:
    if settings.ADMIN_ROLE not in context.roles:
        raise AppError(ErrorCatalog.PERMISSION_DENIED, details={"required_role": settings.ADMIN_ROLE})
    return context


__all__ = [
    "get_optional_token_data",
    "get_current_token_data",
    "get_user_context",
    "require_user_context",
    "require_admin",
    "get_category_service",
    "get_link_service",
    "get_group_service",
    "get_visibility_resolver",
]
