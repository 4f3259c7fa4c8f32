import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from movieinfo.core.errors import APIError
from movieinfo.core.settings import Settings
from movieinfo.models.tmdb import Category, Credits, ListingSummary, MovieDetails, PersonMatch

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class TMDBClient:
    """Thin async wrapper over the TMDB v3 endpoints the pipeline needs.

    Every failure surfaces as an APIError on the first attempt; nothing is retried here.
    """

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings
        self._client = httpx.AsyncClient(
            base_url=settings.tmdb_base_url,
            timeout=settings.tmdb_timeout_seconds,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        if not self.settings.tmdb_api_key:
            raise APIError("config_error", "TMDB_API_KEY is not set", status_code=500)

        merged_params: dict[str, Any] = {"api_key": self.settings.tmdb_api_key}
        if params:
            merged_params.update(params)

        try:
            response = await self._client.get(path, params=merged_params)
        except httpx.TransportError as exc:
            raise APIError(
                "tmdb_upstream_unavailable",
                "TMDB upstream is unavailable",
                status_code=502,
                details={"path": path, "error_type": exc.__class__.__name__},
            ) from exc

        if response.status_code == 401:
            raise APIError("tmdb_auth_error", "TMDB API key is invalid", status_code=502)
        if response.status_code >= 400:
            raise APIError(
                "tmdb_request_failed",
                "TMDB request failed",
                status_code=502,
                details={"path": path, "status_code": response.status_code, "response": response.text[:200]},
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise APIError(
                "tmdb_invalid_payload", "TMDB returned a non JSON body", status_code=502, details={"path": path}
            ) from exc
        if not isinstance(payload, dict):
            raise APIError("tmdb_invalid_payload", "TMDB returned an unexpected body", status_code=502, details={"path": path})
        return payload

    @staticmethod
    def _parse(model: type[ModelT], data: Any, path: str) -> ModelT:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise APIError(
                "tmdb_invalid_payload",
                "TMDB payload did not match the expected shape",
                status_code=502,
                details={"path": path, "errors": exc.error_count()},
            ) from exc

    def _parse_list(self, model: type[ModelT], payload: dict[str, Any], key: str, path: str) -> list[ModelT]:
        items = payload.get(key)
        if not isinstance(items, list):
            raise APIError(
                "tmdb_invalid_payload",
                f"TMDB field {key!r} is missing or not a list",
                status_code=502,
                details={"path": path, "keys": sorted(payload)},
            )
        return [self._parse(model, item, path) for item in items]

    async def list_genres(self) -> list[Category]:
        path = "/genre/movie/list"
        payload = await self._request(path)
        genres = self._parse_list(Category, payload, "genres", path)
        logger.info("fetched TMDB genre list", extra={"count": len(genres)})
        return genres

    async def search_person(self, name: str) -> list[PersonMatch]:
        path = "/search/person"
        payload = await self._request(path, params={"query": name})
        return self._parse_list(PersonMatch, payload, "results", path)

    async def discover_movies(self, params: dict[str, str]) -> list[ListingSummary]:
        path = "/discover/movie"
        payload = await self._request(path, params=params)
        return self._parse_list(ListingSummary, payload, "results", path)

    async def fetch_movie_credits(self, movie_id: int) -> Credits:
        path = f"/movie/{movie_id}/credits"
        return self._parse(Credits, await self._request(path), path)

    async def fetch_movie_details(self, movie_id: int) -> MovieDetails:
        path = f"/movie/{movie_id}"
        return self._parse(MovieDetails, await self._request(path), path)
