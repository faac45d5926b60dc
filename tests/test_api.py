import pytest
from fastapi.testclient import TestClient

from conftest import FailingTrendStore
from trendtags.api.app import create_app
from trendtags.models import RateLimitSettings, ServerSettings, Settings


def make_client(store, **overrides) -> TestClient:
    settings = Settings(**overrides)
    return TestClient(create_app(settings, store=store))


@pytest.fixture
def client(store) -> TestClient:
    with make_client(store) as c:
        yield c


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "trendtags"}


def test_generate(client: TestClient) -> None:
    response = client.post(
        "/generate",
        json={"text": "I love dancing and music", "country": "global", "limit": 5},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["generated"] == ["#music", "#love", "#lovetok", "#lovetiktok", "#dancing"]
    assert data["keywords"] == ["love", "dancing", "and", "music"]
    assert data["sourceUpdatedAt"].startswith("2024-05-01T12:00:00")


def test_generate_defaults(client: TestClient) -> None:
    response = client.post("/generate", json={"text": "dance tonight"})
    assert response.status_code == 200
    data = response.json()
    assert len(data["generated"]) <= 12
    assert data["generated"][0] == "#dance"


def test_generate_unknown_country(client: TestClient) -> None:
    response = client.post("/generate", json={"text": "dance tonight", "country": "ZZ"})
    assert response.status_code == 200
    data = response.json()
    assert data["sourceUpdatedAt"] is None
    assert data["generated"] == ["#dance", "#dancetok", "#dancetiktok", "#tonight", "#tonighttok", "#tonighttiktok"]


def test_generate_zero_limit(client: TestClient) -> None:
    response = client.post("/generate", json={"text": "dance tonight", "limit": 0})
    assert response.status_code == 200
    assert response.json()["generated"] == []


@pytest.mark.parametrize("body", [{"text": "  a "}, {"text": ""}, {}, {"country": "us"}])
def test_generate_requires_text(client: TestClient, body) -> None:
    response = client.post("/generate", json=body)
    assert response.status_code == 400
    assert response.json() == {"error": "Provide text"}


def test_generate_without_body(client: TestClient) -> None:
    response = client.post("/generate")
    assert response.status_code == 400
    assert response.json() == {"error": "Provide text"}


def test_generate_rejects_negative_limit(client: TestClient) -> None:
    response = client.post("/generate", json={"text": "dance tonight", "limit": -1})
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"


def test_generate_store_failure_is_generic_500() -> None:
    with make_client(FailingTrendStore()) as c:
        response = c.post("/generate", json={"text": "dance tonight"})
    assert response.status_code == 500
    assert response.json() == {"error": "Could not generate hashtags"}


def test_trending(client: TestClient) -> None:
    response = client.get("/trending", params={"country": "GLOBAL"})
    assert response.status_code == 200
    data = response.json()
    assert data["hashtags"] == [{"tag": "#dance", "score": 10}, {"tag": "#music", "score": 8}]
    assert data["count"] == 2
    assert data["source"] == "tiktok"
    assert data["updatedAt"].startswith("2024-05-01")


def test_trending_unknown_country(client: TestClient) -> None:
    response = client.get("/trending", params={"country": "zz"})
    assert response.status_code == 200
    data = response.json()
    assert data["updatedAt"] is None
    assert data["hashtags"] == []


def test_trending_store_failure() -> None:
    with make_client(FailingTrendStore()) as c:
        response = c.get("/trending")
    assert response.status_code == 500
    assert response.json() == {"error": "Server error"}


def test_rate_limit_rejects_excess_requests(store) -> None:
    with make_client(store, rate_limit=RateLimitSettings(points=2, duration=60)) as c:
        assert c.get("/health").status_code == 200
        assert c.post("/generate", json={"text": "dance tonight"}).status_code == 200
        response = c.get("/trending")
    assert response.status_code == 429
    assert response.json() == {"error": "Too many requests"}


def test_rate_limit_counts_repeated_calls_to_one_route(store) -> None:
    with make_client(store, rate_limit=RateLimitSettings(points=2, duration=60)) as c:
        statuses = [c.get("/health").status_code for _ in range(4)]
    assert statuses == [200, 200, 429, 429]


def test_rate_limit_can_be_disabled(store) -> None:
    with make_client(store, rate_limit=RateLimitSettings(points=1, enabled=False)) as c:
        statuses = [c.get("/health").status_code for _ in range(3)]
    assert statuses == [200, 200, 200]


def test_body_size_limit(store) -> None:
    with make_client(store, server=ServerSettings(max_body_bytes=64)) as c:
        response = c.post("/generate", json={"text": "dance " * 50})
    assert response.status_code == 413
    assert response.json() == {"error": "Request body too large"}


def test_cors_headers(client: TestClient) -> None:
    response = client.get("/health", headers={"Origin": "https://example.com"})
    assert response.headers["access-control-allow-origin"] == "*"


def test_generate_null_limit_uses_default(client: TestClient) -> None:
    response = client.post("/generate", json={"text": "dance tonight", "limit": None})
    assert response.status_code == 200
    assert response.json()["generated"][0] == "#dance"
