from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class RecordAttributes(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    categories: list[str] = Field(default_factory=list, alias="film_and_book_genre")
    director: list[str] = Field(default_factory=list)
    cast: list[str] = Field(default_factory=list)
    kind: Literal["movie"] = Field(default="movie", alias="movie_or_series")


class NormalizedRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    class_: str = Field(alias="class")
    subclass: str
    id: int
    url: str
    web_url: str = Field(alias="webUrl")
    source: Literal["themoviedb"] = "themoviedb"
    type: Literal["web"] = "web"
    name: str
    tags: list[str] = Field(default_factory=list)
    attributes: RecordAttributes


class SearchResponse(BaseModel):
    results: list[NormalizedRecord]
    count: int
