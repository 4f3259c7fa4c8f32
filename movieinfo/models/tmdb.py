from pydantic import BaseModel, ConfigDict, Field


class Category(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str


class CategoryCatalog(BaseModel):
    model_config = ConfigDict(frozen=True)

    categories: tuple[Category, ...] = ()

    def lookup(self, name: str) -> int | None:
        wanted = name.strip().lower()
        for category in self.categories:
            if category.name.lower() == wanted:
                return category.id
        return None


class ListingSummary(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    title: str | None = None
    background_image_url: str | None = Field(default=None, serialization_alias="backgroundImageUrl")


class PersonMatch(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str | None = None


class CastMember(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str


class CrewMember(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    job: str | None = None


class Credits(BaseModel):
    model_config = ConfigDict(extra="ignore")

    cast: list[CastMember] = Field(default_factory=list)
    crew: list[CrewMember] = Field(default_factory=list)


class Genre(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str


class MovieDetails(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    title: str
    imdb_id: str | None = None
    genres: list[Genre] = Field(default_factory=list)
    poster_path: str | None = None


class JoinedDetail(BaseModel):
    credits: Credits
    details: MovieDetails

    @property
    def directors(self) -> list[CrewMember]:
        return [member for member in self.credits.crew if member.job == "Director"]
