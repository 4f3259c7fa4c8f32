from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "MovieInfo Search API"
    environment: Literal["dev", "test", "prod"] = "dev"
    log_level: str = "INFO"

    tmdb_api_key: str | None = None
    tmdb_base_url: str = "https://api.themoviedb.org/3"
    # None means requests never time out
    tmdb_timeout_seconds: float | None = None

    rate_gate_capacity: int = Field(default=30, ge=1)
    rate_gate_window_seconds: float = Field(default=11.0, gt=0.0)

    poster_base_url: str = "http://image.tmdb.org/t/p/w780"
    title_base_url: str = "http://www.imdb.com/title/"
    tmdb_web_base_url: str = "https://www.themoviedb.org/movie/"

    # 0 means no app level cap
    max_search_limit: int = Field(default=0, ge=0)


@lru_cache
def get_settings() -> Settings:
    return Settings()
