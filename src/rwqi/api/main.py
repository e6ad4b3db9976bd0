"""
RWQI FastAPI Application

River Water Quality Index API

Endpoints:
- GET /api/rwqi?river=<name>: composite water quality index for a river
- GET /health: service status and configuration summary

Status codes for /api/rwqi:
- 200: "ok" result, or "coming_soon" when no upstream data exists yet
- 400: river query missing or blank
- 404: river not in the registry
- 500: unexpected failure

Run with:
    uvicorn rwqi.api.main:create_app --factory
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rwqi import __version__
from rwqi.api.schemas import ErrorResponse, HealthResponse
from rwqi.config import Settings
from rwqi.service import RWQIError, RWQIResult, RWQIService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_service(request: Request) -> RWQIService:
    return request.app.state.service


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message or "internal error").model_dump(),
    )


# ============================================================================
# Water Quality Endpoint
# ============================================================================

@router.get(
    "/api/rwqi",
    response_model=RWQIResult,
    response_model_exclude_unset=True,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["Water Quality"],
    summary="Get the water quality index for a river",
)
async def get_rwqi(
    river: Optional[str] = Query(None, description="River name, id or alias (e.g. 'Ganga')"),
    service: RWQIService = Depends(get_service),
):
    """
    Get the composite River Water Quality Index (RWQI) for a river.

    The index is computed from the most complete recent sample found upstream
    and cached per river. Rivers without any published data return
    `status: "coming_soon"`.
    """
    try:
        result = await service.lookup(river)
    except RWQIError as e:
        return error_response(e.status_code, str(e))
    except Exception as e:
        logger.exception(f"Unexpected error computing RWQI for {river!r}")
        return error_response(500, str(e) or e.__class__.__name__)

    return JSONResponse(content=result.to_response())


# ============================================================================
# Health Endpoint
# ============================================================================

@router.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check(service: RWQIService = Depends(get_service)):
    """Report service status, registry size and cache occupancy."""
    return HealthResponse(
        version=__version__,
        rivers=len(service.directory.list_rivers()),
        cache_entries=len(service.cache),
        cache_ttl_seconds=service.cache.default_ttl,
        freshness_seconds=service.wq_config.freshness_seconds,
    )


# ============================================================================
# Application Factory
# ============================================================================

def create_app(
    settings: Optional[Settings] = None,
    service: Optional[RWQIService] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Runtime settings (read from the environment if omitted)
        service: Pre-built lookup service (built from settings if omitted)

    Raises:
        ConfigError: If environment configuration is malformed
    """
    if service is None:
        settings = settings or Settings.from_env()
        logging.basicConfig(
            level=settings.log_level,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        service = RWQIService.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await app.state.service.aclose()

    app = FastAPI(
        title="RWQI API",
        description="River Water Quality Index - composite water quality scores for rivers",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(router)
    return app


# ============================================================================
# Run Application
# ============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
