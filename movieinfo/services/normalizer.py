from movieinfo.core.settings import Settings
from movieinfo.models.record import NormalizedRecord, RecordAttributes
from movieinfo.models.tmdb import JoinedDetail

ONTOLOGY_CLASS = "MovieAndTv"
ONTOLOGY_SUBCLASS = "MovieAndSeries"
ONTOLOGY_ATTRIBUTES: tuple[str, ...] = ("cast", "director", "category")


def title_url(settings: Settings, movie_id: int, imdb_id: str | None) -> str:
    if imdb_id:
        return f"{settings.title_base_url}{imdb_id}"
    return f"{settings.tmdb_web_base_url}{movie_id}"


def poster_url(settings: Settings, poster_path: str | None) -> str | None:
    if not poster_path:
        return None
    if poster_path.startswith("http"):
        return poster_path
    return f"{settings.poster_base_url}{poster_path}"


def normalize_movie(joined: JoinedDetail, settings: Settings) -> NormalizedRecord:
    details = joined.details
    url = title_url(settings, details.id, details.imdb_id)
    return NormalizedRecord(
        class_=ONTOLOGY_CLASS,
        subclass=ONTOLOGY_SUBCLASS,
        id=details.id,
        url=url,
        web_url=url,
        name=details.title,
        attributes=RecordAttributes(
            categories=[genre.name for genre in details.genres],
            director=[member.name for member in joined.directors],
            cast=[member.name for member in joined.credits.cast],
        ),
    )
