"""Health endpoints for liveness/readiness checks."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from buddy_recommender.db.client import ping_mongo

router = APIRouter(prefix="/health", tags=["health"])

@router.get("/live", summary="Liveness probe")
async def liveness_probe() -> dict:
    """Returns a trivial response so container orchestrators know the app is up."""
    return {"status": "alive"}


@router.get("/ready", summary="Readiness probe")
async def readiness_probe():
    """Reports whether MongoDB answers; 503 until it does."""
    if await ping_mongo():
        return {"status": "ok", "mongo": "ok"}
    return JSONResponse(status_code=503, content={"status": "degraded", "mongo": "unavailable"})
