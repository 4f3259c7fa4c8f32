from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from movieinfo.api.deps import get_app_settings
from movieinfo.core.settings import Settings

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/live")
async def liveness() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/ready")
async def readiness(settings: Settings = Depends(get_app_settings)) -> JSONResponse:
    # searches cannot succeed without TMDB credentials
    ready = bool(settings.tmdb_api_key)
    return JSONResponse(
        status_code=200 if ready else 503,
        content={
            "status": "ok" if ready else "unavailable",
            "tmdb_api_key_set": ready,
            "rate_gate": {"capacity": settings.rate_gate_capacity, "window_seconds": settings.rate_gate_window_seconds},
        },
    )
