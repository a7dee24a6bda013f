from fastapi import APIRouter

from app.linkman.core.config import settings
from app.linkman.routers.categories import router as categories_router
from app.linkman.routers.group_admin import router as group_admin_router
from app.linkman.routers.groups import router as groups_router
from app.linkman.routers.health import router as health_router
from app.linkman.routers.links import router as links_router
from app.linkman.routers.menu import router as menu_router
from app.linkman.routers.metrics import router as metrics_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(menu_router, tags=["menu"])
api_router.include_router(categories_router, prefix="/api/admin/categories", tags=["categories"])
api_router.include_router(links_router, prefix="/api/admin/links", tags=["links"])
api_router.include_router(group_admin_router, prefix="/api/admin/groups", tags=["group-admin"])
api_router.include_router(groups_router, tags=["groups"])
if settings.METRICS_ENABLED:
    api_router.include_router(metrics_router, tags=["ops"])
