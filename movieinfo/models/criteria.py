from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Criteria(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    cast: list[str] | None = None
    director: list[str] | None = None
    category: list[str] | None = Field(default=None, validation_alias=AliasChoices("category", "genre"))

    @field_validator("cast", "director", "category", mode="before")
    @classmethod
    def wrap_single_name(cls, value: object) -> object:
        if isinstance(value, str):
            return [value]
        return value


class ResolvedIds(BaseModel):
    """Provider ids per criterion kind. None means the criterion was not supplied."""

    cast_ids: list[int] | None = None
    director_ids: list[int] | None = None
    category_ids: list[int] | None = None


class SearchRequest(BaseModel):
    # entries stay raw; the pipeline validates only the first one
    criteria: list[Any] = Field(min_length=1)
    limit: int | None = Field(default=None, ge=1)
