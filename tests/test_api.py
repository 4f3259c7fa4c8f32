from fastapi.testclient import TestClient

from movieinfo.core.errors import APIError
from movieinfo.core.settings import Settings
from movieinfo.main import app
from movieinfo.models.record import NormalizedRecord, RecordAttributes


def _record(movie_id: int) -> NormalizedRecord:
    return NormalizedRecord(
        class_="MovieAndTv",
        subclass="MovieAndSeries",
        id=movie_id,
        url=f"http://www.imdb.com/title/tt{movie_id}",
        web_url=f"http://www.imdb.com/title/tt{movie_id}",
        name=f"Movie {movie_id}",
        attributes=RecordAttributes(categories=["Drama"], director=["Frank Darabont"], cast=["Tim Robbins"]),
    )


class _PipelineStub:
    def __init__(self, error: APIError | None = None):
        self.error = error
        self.calls: list[tuple[list, int | None]] = []

    async def execute(self, criteria_list, limit=None):
        self.calls.append((criteria_list, limit))
        if self.error is not None:
            raise self.error
        return [_record(1), _record(2)][:limit]


class _ContainerStub:
    def __init__(self, pipeline: _PipelineStub, settings: Settings | None = None):
        self.settings = settings or Settings(environment="test")
        self.pipeline = pipeline


def _client(container: _ContainerStub) -> TestClient:
    # lifespan is skipped; the stub container stands in for the real one
    app.state.container = container
    return TestClient(app, raise_server_exceptions=False)


def test_liveness() -> None:
    client = _client(_ContainerStub(_PipelineStub()))

    response = client.get("/health/live")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_search_returns_records_by_wire_name() -> None:
    pipeline = _PipelineStub()
    client = _client(_ContainerStub(pipeline))

    response = client.post("/v1/search", json={"criteria": [{"director": ["Frank Darabont"], "genre": "Drama"}], "limit": 1})

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 1
    assert body["results"][0]["class"] == "MovieAndTv"
    assert body["results"][0]["webUrl"] == "http://www.imdb.com/title/tt1"
    assert body["results"][0]["attributes"]["film_and_book_genre"] == ["Drama"]
    assert body["results"][0]["attributes"]["movie_or_series"] == "movie"
    criteria, limit = pipeline.calls[0]
    assert limit == 1
    assert criteria == [{"director": ["Frank Darabont"], "genre": "Drama"}]


def test_search_limit_above_configured_maximum() -> None:
    pipeline = _PipelineStub()
    client = _client(_ContainerStub(pipeline, Settings(environment="test", max_search_limit=5)))

    response = client.post("/v1/search", json={"criteria": [{"cast": ["Tim Robbins"]}], "limit": 10})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "limit_too_large"
    assert pipeline.calls == []


def test_upstream_failure_is_rendered_as_error_body() -> None:
    error = APIError("tmdb_request_failed", "TMDB request failed", status_code=502, details={"path": "/movie/4"})
    client = _client(_ContainerStub(_PipelineStub(error=error)))

    response = client.post("/v1/search", json={"criteria": [{"cast": ["Tim Robbins"]}]})

    assert response.status_code == 502
    assert response.json() == {
        "error": {"code": "tmdb_request_failed", "message": "TMDB request failed", "details": {"path": "/movie/4"}}
    }


def test_empty_criteria_rejected_by_request_validation() -> None:
    client = _client(_ContainerStub(_PipelineStub()))

    response = client.post("/v1/search", json={"criteria": []})

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "invalid_request"


def test_readiness_reports_missing_api_key() -> None:
    client = _client(_ContainerStub(_PipelineStub(), Settings(environment="test", tmdb_api_key=None)))

    response = client.get("/health/ready")

    assert response.status_code == 503
    assert response.json()["tmdb_api_key_set"] is False


def test_readiness_ok_with_api_key() -> None:
    client = _client(_ContainerStub(_PipelineStub(), Settings(environment="test", tmdb_api_key="key")))

    response = client.get("/health/ready")

    assert response.status_code == 200
    assert response.json()["rate_gate"] == {"capacity": 30, "window_seconds": 11.0}


def test_entries_after_first_are_not_validated() -> None:
    pipeline = _PipelineStub()
    client = _client(_ContainerStub(pipeline))

    response = client.post("/v1/search", json={"criteria": [{"cast": ["Tim Robbins"]}, {"cast": 5}, "junk"]})

    assert response.status_code == 200
    criteria, _ = pipeline.calls[0]
    assert criteria[1:] == [{"cast": 5}, "junk"]


def test_invalid_first_entry_rendered_as_bad_request() -> None:
    error = APIError("invalid_criteria", "First criteria entry is invalid", status_code=400)
    client = _client(_ContainerStub(_PipelineStub(error=error)))

    response = client.post("/v1/search", json={"criteria": [{"cast": 5}]})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "invalid_criteria"
