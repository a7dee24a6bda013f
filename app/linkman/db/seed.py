import logging

from app.linkman.core.acl import AccessControlList
from app.linkman.core.i18n import normalize_translations
from app.linkman.repos.base import CategoryStore, PublicCategoryConflictError
from app.linkman.repos.entities import Category

logger = logging.getLogger(__name__)


async def bootstrap_public_category(store: CategoryStore, settings) -> Category:
    existing = await store.find_public_category()
    if existing is not None:
        return existing
    category = Category(
        name=settings.PUBLIC_CATEGORY_NAME,
        order=0,
        translations=normalize_translations(settings.PUBLIC_CATEGORY_TRANSLATIONS),
        acl=AccessControlList.readable_by(guest=True),
    )
    try:
        created = await store.save(category)
    except PublicCategoryConflictError:
        # Another instance bootstrapped concurrently.
        return await store.find_public_category()
    logger.info("public_category_bootstrapped", extra={"category_id": created.id})
    return created


async def run_seed(stores, settings) -> None:
    await bootstrap_public_category(stores.categories, settings)
