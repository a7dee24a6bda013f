from fastapi import APIRouter, Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.linkman.core.error_catalog import ErrorCatalog
from app.linkman.core.errors import error_response

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    trace_id = getattr(request.state, "trace_id", "")
    return {"status": "ok", "trace_id": trace_id}


@router.get("/ready")
async def ready(request: Request):
    trace_id = getattr(request.state, "trace_id", "")
    # In-memory stores have no session factory and are always ready.
    session_factory = getattr(request.app.state.stores.categories, "session_factory", None)
    if session_factory is not None:
        try:
            async with session_factory() as db:
                await db.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            return error_response(
                code=ErrorCatalog.DB_UNAVAILABLE.code,
                message=ErrorCatalog.DB_UNAVAILABLE.message,
                details={"type": exc.__class__.__name__},
                trace_id=trace_id,
                status_code=ErrorCatalog.DB_UNAVAILABLE.status_code,
            )
    return {"status": "ready", "trace_id": trace_id}
