from fastapi import APIRouter, Depends, Query, Request

from app.linkman.core.context import UserContext
from app.linkman.core.deps import get_user_context, get_visibility_resolver
from app.linkman.core.i18n import parse_accept_language
from app.linkman.schemas.menu import LanguagesResponse, LinkContainerItem, MenuEntryItem
from app.linkman.services.languages import get_available_languages
from app.linkman.services.mappers import link_container_to_item, menu_entry_to_item
from app.linkman.services.menu import VisibilityResolver

router = APIRouter()


def _language(request: Request, language: str | None) -> str | None:
    return language or parse_accept_language(request.headers.get("Accept-Language"))


@router.get("/api/menu", response_model=list[MenuEntryItem])
async def get_menu(
    request: Request,
    language: str | None = Query(default=None, description="Two-letter language code; overrides Accept-Language."),
    context: UserContext = Depends(get_user_context),
    resolver: VisibilityResolver = Depends(get_visibility_resolver),
):
    entries = await resolver.get_menu_entries(context, _language(request, language))
    return [menu_entry_to_item(entry) for entry in entries]


@router.get("/api/public/links", response_model=list[LinkContainerItem])
async def get_link_containers(
    request: Request,
    language: str | None = Query(default=None),
    context: UserContext = Depends(get_user_context),
    resolver: VisibilityResolver = Depends(get_visibility_resolver),
):
    entries = await resolver.get_link_containers(context, _language(request, language))
    return [link_container_to_item(entry) for entry in entries]


@router.get("/api/public/languages", response_model=LanguagesResponse)
async def get_languages(request: Request, language: str | None = Query(default=None)):
    return LanguagesResponse(languages=get_available_languages(_language(request, language)))
