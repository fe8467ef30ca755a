"""Root router: health checks plus every module under ``/api/v1``."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from workforce import __version__
from workforce.api.dependencies import DBSession
from workforce.config import settings
from workforce.core.auth.routes import router as auth_router
from workforce.core.responses import SuccessResponse, success_response
from workforce.modules import discover_modules


class HealthResponse(BaseModel):
    status: str


class AppInfo(BaseModel):
    app: str
    version: str
    environment: str


health_router = APIRouter(tags=["health"])


@health_router.get("/health/live", response_model=HealthResponse)
async def liveness() -> HealthResponse:
    """The process is up."""
    return HealthResponse(status="alive")


@health_router.get("/health/ready", summary="Readiness check")
async def readiness(db: DBSession) -> JSONResponse:
    """The database answers; 503 with the failing check otherwise."""
    try:
        await db.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as e:
        database = str(e)

    ready = database == "ok"
    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "ready" if ready else "degraded", "checks": {"database": database}},
    )


@health_router.get("/info", response_model=SuccessResponse[AppInfo])
async def info() -> SuccessResponse[AppInfo]:
    return success_response(
        AppInfo(app=settings.app_name, version=__version__, environment=settings.environment)
    )


v1_router = APIRouter(prefix="/api/v1")
v1_router.include_router(auth_router)
for module_router in discover_modules():
    v1_router.include_router(module_router)

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(v1_router)
