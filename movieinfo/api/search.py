from fastapi import APIRouter, Depends

from movieinfo.api.deps import get_app_settings, get_container
from movieinfo.core.container import AppContainer
from movieinfo.core.errors import APIError
from movieinfo.core.settings import Settings
from movieinfo.models.criteria import SearchRequest
from movieinfo.models.record import SearchResponse

router = APIRouter(prefix="/v1", tags=["search"])


@router.post("/search", response_model=SearchResponse)
async def search_movies(
    payload: SearchRequest,
    container: AppContainer = Depends(get_container),
    settings: Settings = Depends(get_app_settings),
) -> SearchResponse:
    if settings.max_search_limit > 0 and payload.limit is not None and payload.limit > settings.max_search_limit:
        raise APIError(
            code="limit_too_large",
            message="limit exceeds configured maximum",
            status_code=400,
            details={"max_search_limit": settings.max_search_limit},
        )
    results = await container.pipeline.execute(payload.criteria, limit=payload.limit)
    return SearchResponse(results=results, count=len(results))
