import logging
from typing import Protocol

from movieinfo.models.tmdb import ListingSummary

logger = logging.getLogger(__name__)


class DiscoverClient(Protocol):
    async def discover_movies(self, params: dict[str, str]) -> list[ListingSummary]:
        ...


def _or_join(ids: list[int]) -> str:
    # TMDB reads a pipe separated id list as OR
    return "|".join(str(value) for value in ids)


def build_discover_params(
    category_ids: list[int] | None = None,
    director_ids: list[int] | None = None,
    cast_ids: list[int] | None = None,
) -> dict[str, str]:
    params: dict[str, str] = {}
    if category_ids is not None:
        params["with_genres"] = _or_join(category_ids)
    if director_ids is not None:
        params["with_crew"] = _or_join(director_ids)
    if cast_ids is not None:
        params["with_cast"] = _or_join(cast_ids)
    return params


class DiscoveryStage:
    def __init__(self, client: DiscoverClient):
        self.client = client

    async def discover(
        self,
        category_ids: list[int] | None = None,
        director_ids: list[int] | None = None,
        cast_ids: list[int] | None = None,
    ) -> list[ListingSummary]:
        params = build_discover_params(category_ids, director_ids, cast_ids)
        summaries = await self.client.discover_movies(params)
        logger.info("TMDB discover completed", extra={"filters": sorted(params), "results": len(summaries)})
        return summaries
