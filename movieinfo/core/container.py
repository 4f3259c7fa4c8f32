import logging

from movieinfo.core.rate_gate import RateGate
from movieinfo.core.settings import Settings
from movieinfo.services.pipeline import MovieInfoPipeline
from movieinfo.services.tmdb_client import TMDBClient

logger = logging.getLogger(__name__)


class AppContainer:
    def __init__(self, settings: Settings):
        self.settings = settings

        self.tmdb_client = TMDBClient(settings)
        self.rate_gate = RateGate(
            capacity=settings.rate_gate_capacity,
            window_seconds=settings.rate_gate_window_seconds,
        )
        self.pipeline = MovieInfoPipeline(self.tmdb_client, gate=self.rate_gate, settings=settings)

        logger.info(
            "App container initialized",
            extra={
                "tmdb_base_url": settings.tmdb_base_url,
                "tmdb_api_key_set": bool(settings.tmdb_api_key),
                "tmdb_timeout_seconds": settings.tmdb_timeout_seconds,
                "rate_gate_capacity": settings.rate_gate_capacity,
                "rate_gate_window_seconds": settings.rate_gate_window_seconds,
                "max_search_limit": settings.max_search_limit,
            },
        )

    async def close(self) -> None:
        await self.tmdb_client.close()
