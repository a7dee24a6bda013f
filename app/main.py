from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.linkman.api import api_router
from app.linkman.core.config import settings
from app.linkman.core.errors import setup_exception_handlers
from app.linkman.core.logging import configure_logging
from app.linkman.db.seed import run_seed
from app.linkman.middleware.observability import ObservabilityMiddleware
from app.linkman.middleware.trace import TraceIdMiddleware
from app.linkman.repos.registry import build_stores
from app.linkman.services.images import build_object_storage, build_url_signer


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.stores = build_stores(settings.STORE_BACKEND)
    app.state.url_signer = build_url_signer()
    app.state.object_storage = build_object_storage()
    await run_seed(app.state.stores, settings)
    yield


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.add_middleware(TraceIdMiddleware)
    app.add_middleware(ObservabilityMiddleware)
    setup_exception_handlers(app)
    app.include_router(api_router)
    return app


app = create_app()
