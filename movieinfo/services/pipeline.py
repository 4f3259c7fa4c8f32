import asyncio
import logging
import time
from collections.abc import Awaitable, Mapping, Sequence
from typing import Any, TypeVar

from pydantic import ValidationError

from movieinfo.core.errors import APIError
from movieinfo.core.rate_gate import RateGate
from movieinfo.core.settings import Settings, get_settings
from movieinfo.models.criteria import Criteria, ResolvedIds
from movieinfo.models.record import NormalizedRecord
from movieinfo.services import normalizer
from movieinfo.services.aggregator import DetailAggregator
from movieinfo.services.discovery import DiscoveryStage
from movieinfo.services.entity_resolver import EntityResolver
from movieinfo.services.tmdb_client import TMDBClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _optional(awaitable: Awaitable[T] | None) -> T | None:
    if awaitable is None:
        return None
    return await awaitable


class MovieInfoPipeline:
    """Criteria in, normalized movie records out.

    Stages run in order: resolve names and categories to TMDB ids, one discover
    query, then per movie credit and detail fetches through the rate gate,
    director filtering and mapping. Any upstream failure fails the whole call.
    """

    ONTOLOGY_CLASS = normalizer.ONTOLOGY_CLASS
    ONTOLOGY_SUBCLASS = normalizer.ONTOLOGY_SUBCLASS
    ONTOLOGY_ATTRIBUTES = normalizer.ONTOLOGY_ATTRIBUTES

    def __init__(self, client: TMDBClient, gate: RateGate | None = None, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.gate = gate or RateGate(
            capacity=self.settings.rate_gate_capacity,
            window_seconds=self.settings.rate_gate_window_seconds,
        )
        self.resolver = EntityResolver(client, self.gate)
        self.discovery = DiscoveryStage(client)
        self.aggregator = DetailAggregator(client, self.gate, self.settings)

    async def resolve(self, criteria: Criteria) -> ResolvedIds:
        cast_ids, director_ids, category_ids = await asyncio.gather(
            _optional(self.resolver.resolve_names(criteria.cast) if criteria.cast is not None else None),
            _optional(self.resolver.resolve_names(criteria.director) if criteria.director is not None else None),
            _optional(self.resolver.resolve_categories(criteria.category) if criteria.category is not None else None),
        )
        return ResolvedIds(cast_ids=cast_ids, director_ids=director_ids, category_ids=category_ids)

    async def execute(
        self, criteria_list: Sequence[Criteria | Mapping[str, Any]], limit: int | None = None
    ) -> list[NormalizedRecord]:
        if not criteria_list:
            raise APIError("invalid_criteria", "At least one criteria entry is required", status_code=400)

        if limit is not None and limit < 0:
            raise APIError("invalid_limit", "limit must not be negative", status_code=400, details={"limit": limit})

        # only the first entry is honoured
        try:
            criteria = Criteria.model_validate(criteria_list[0])
        except ValidationError as exc:
            raise APIError(
                "invalid_criteria",
                "First criteria entry is invalid",
                status_code=400,
                details={"errors": exc.errors(include_url=False, include_context=False, include_input=False)},
            ) from exc
        start = time.perf_counter()

        resolved = await self.resolve(criteria)
        logger.info(
            "Criteria resolved",
            extra={
                "cast_ids": resolved.cast_ids,
                "director_ids": resolved.director_ids,
                "category_ids": resolved.category_ids,
            },
        )

        summaries = await self.discovery.discover(
            category_ids=resolved.category_ids,
            director_ids=resolved.director_ids,
            cast_ids=resolved.cast_ids,
        )
        records = await self.aggregator.aggregate(summaries, resolved.director_ids)
        if limit is not None:
            records = records[:limit]

        logger.info(
            "Search completed",
            extra={"results": len(records), "limit": limit, "duration_ms": int((time.perf_counter() - start) * 1000)},
        )
        return records
