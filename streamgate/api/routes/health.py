from fastapi import APIRouter, Depends, Response
from redis import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from streamgate.api.routes.subscriptions import get_idempotency_store
from streamgate.db.session import get_db
from streamgate.services.idempotency import IdempotencyStore

router = APIRouter()


@router.get("/health")
def health() -> dict:
    """Liveness probe - always returns 200 if app is running."""
    return {"status": "ok"}


@router.get("/ready")
def readiness(
    response: Response,
    db: Session = Depends(get_db),
    idempotency: IdempotencyStore = Depends(get_idempotency_store),
) -> dict:
    """Readiness probe. The store is required; redis only degrades claim de-duplication."""
    checks = {"database": "ok", "redis": "ok"}
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        checks["database"] = str(e.__cause__ or e)
    try:
        idempotency.ping()
    except RedisError as e:
        checks["redis"] = str(e)

    if checks["database"] != "ok":
        response.status_code = 503
        return {"status": "not_ready", "checks": checks}
    return {"status": "ready" if checks["redis"] == "ok" else "degraded", "checks": checks}
