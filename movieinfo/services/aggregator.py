import asyncio
import logging
from collections.abc import Collection
from typing import Protocol

from movieinfo.core.rate_gate import RateGate
from movieinfo.core.settings import Settings
from movieinfo.models.record import NormalizedRecord
from movieinfo.models.tmdb import Credits, JoinedDetail, ListingSummary, MovieDetails
from movieinfo.services.normalizer import normalize_movie, poster_url

logger = logging.getLogger(__name__)


class MovieDetailClient(Protocol):
    async def fetch_movie_credits(self, movie_id: int) -> Credits:
        ...

    async def fetch_movie_details(self, movie_id: int) -> MovieDetails:
        ...


def directors_allowed(joined: JoinedDetail, allowed_director_ids: Collection[int] | None) -> bool:
    """Every director of the movie must be allowed; one outsider drops the movie.

    A movie without any credited director passes.
    """
    if allowed_director_ids is None:
        return True
    return all(member.id in allowed_director_ids for member in joined.directors)


class DetailAggregator:
    def __init__(self, client: MovieDetailClient, gate: RateGate, settings: Settings):
        self.client = client
        self.gate = gate
        self.settings = settings

    async def _fetch_joined(self, movie_id: int) -> JoinedDetail:
        credits, details = await asyncio.gather(
            self.gate.dispatch(self.client.fetch_movie_credits, movie_id),
            self.gate.dispatch(self.client.fetch_movie_details, movie_id),
        )
        return JoinedDetail(credits=credits, details=details)

    async def _aggregate_one(
        self, summary: ListingSummary, allowed_director_ids: Collection[int] | None
    ) -> NormalizedRecord | None:
        joined = await self._fetch_joined(summary.id)

        image_url = poster_url(self.settings, joined.details.poster_path)
        if image_url:
            summary.background_image_url = image_url

        if not directors_allowed(joined, allowed_director_ids):
            logger.debug(
                "Movie dropped by director filter",
                extra={"movie_id": summary.id, "director_ids": [member.id for member in joined.directors]},
            )
            return None
        return normalize_movie(joined, self.settings)

    async def aggregate(
        self, summaries: list[ListingSummary], allowed_director_ids: list[int] | None = None
    ) -> list[NormalizedRecord]:
        allowed = set(allowed_director_ids) if allowed_director_ids is not None else None
        rows = await asyncio.gather(*[self._aggregate_one(summary, allowed) for summary in summaries])
        records = [row for row in rows if row is not None]
        logger.info(
            "Detail aggregation completed",
            extra={"summaries": len(summaries), "kept": len(records), "director_filter": allowed is not None},
        )
        return records
