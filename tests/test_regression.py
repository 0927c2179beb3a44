"""
Regression tests for defects found in earlier versions of this API.

1. A store failure on any route must produce a 500 response, never a
   hung request (recent-articles used to log and not answer).
2. A failed token check must stop the request: the handler must not run.
3. Every response carries an X-Request-ID, reusing the caller's when sent.
4. CORS must not set allow_credentials=true with allow_origins=*.
"""
import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from article_api.services import article_service


def _raise_store_error(*args, **kwargs):
    raise OperationalError("SELECT 1", {}, Exception("connection reset"))


# ---------------------------------------------------------------------------
# 1. Store failures -> 500
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_recent_articles_store_failure_returns_500(async_client: AsyncClient, monkeypatch):
    monkeypatch.setattr(article_service, "get_recent_articles", _raise_store_error)

    resp = await async_client.get("/recent-articles")
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Document store error"}


@pytest.mark.asyncio
async def test_post_article_store_failure_returns_500(async_client: AsyncClient, monkeypatch):
    monkeypatch.setattr(article_service, "create_article", _raise_store_error)

    resp = await async_client.post("/post-article", json={"title": "A", "authorEmail": "x@y.com"})
    assert resp.status_code == 500


# ---------------------------------------------------------------------------
# 2. Rejected tokens short-circuit the request
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_rejected_token_never_reaches_handler(async_client: AsyncClient, monkeypatch):
    calls = []

    async def _spy(db, email):
        calls.append(email)
        return []

    monkeypatch.setattr(article_service, "get_articles_by_author", _spy)

    resp = await async_client.get(
        "/my-articles/x@y.com", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert resp.status_code == 401
    assert calls == []


@pytest.mark.asyncio
async def test_mismatched_token_never_reaches_handler(
    async_client: AsyncClient, monkeypatch, auth_header
):
    calls = []

    async def _spy(db, email):
        calls.append(email)
        return []

    monkeypatch.setattr(article_service, "get_articles_by_author", _spy)

    resp = await async_client.get("/my-articles/x@y.com", headers=auth_header("z@y.com"))
    assert resp.status_code == 403
    assert calls == []


# ---------------------------------------------------------------------------
# 3. Request ids
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_response_carries_generated_request_id(async_client: AsyncClient):
    first = await async_client.get("/all-articles")
    second = await async_client.get("/all-articles")

    assert first.status_code == 200
    assert len(first.headers["x-request-id"]) == 32
    assert first.headers["x-request-id"] != second.headers["x-request-id"]


@pytest.mark.asyncio
async def test_incoming_request_id_is_echoed(async_client: AsyncClient):
    resp = await async_client.get("/health", headers={"X-Request-ID": "edge-42"})
    assert resp.headers["x-request-id"] == "edge-42"


@pytest.mark.asyncio
async def test_error_responses_carry_request_id(async_client: AsyncClient, monkeypatch):
    monkeypatch.setattr(article_service, "get_all_articles", _raise_store_error)

    resp = await async_client.get("/all-articles", headers={"X-Request-ID": "failing-1"})
    assert resp.status_code == 500
    assert resp.headers["x-request-id"] == "failing-1"


# ---------------------------------------------------------------------------
# 4. CORS
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_cors_does_not_allow_credentials_with_wildcard(async_client: AsyncClient):
    resp = await async_client.options(
        "/all-articles",
        headers={
            "Origin": "http://example.com",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert resp.headers.get("access-control-allow-origin") == "*"
    assert resp.headers.get("access-control-allow-credentials") != "true"
