"""
Cross-cutting regression tests.

1. Error envelope shape for 404 / 409 / 422 / unknown procedures
2. Concurrent reads of one article must not lose view increments;
   concurrent creates with one slug yield one row and one conflict
3. X-Query-Count / X-Response-Time-Ms headers on every response
4. CORS must not set allow_credentials=true with allow_origins=*
5. healthcheck answers on GET and POST
"""
import asyncio

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from conftest import make_category, make_news, make_user
from newsdesk.database import Base
from newsdesk.exceptions import ConflictError
from newsdesk.models import Category, News
from newsdesk.schemas import CategoryCreate, NewsCreate
from newsdesk.services import category_service, news_service


# ---------------------------------------------------------------------------
# 1. Error envelope
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_not_found_envelope(async_client: AsyncClient):
    resp = await async_client.post("/rpc/updateComment", json={"id": 3, "content": "x"})
    assert resp.status_code == 404
    assert resp.json() == {"error": {"code": "NOT_FOUND", "message": "Comment with id 3 not found"}}


@pytest.mark.asyncio
async def test_validation_envelope_lists_issues(async_client: AsyncClient):
    resp = await async_client.post("/rpc/getUserById", json={"id": "not-a-number"})
    assert resp.status_code == 422
    error = resp.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert any(issue["loc"][-1] == "id" for issue in error["issues"])


@pytest.mark.asyncio
async def test_missing_body_for_required_input(async_client: AsyncClient):
    resp = await async_client.post("/rpc/getNewsById")
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_unknown_procedure(async_client: AsyncClient):
    resp = await async_client.post("/rpc/doesNotExist")
    assert resp.status_code == 404


# ---------------------------------------------------------------------------
# 2. Concurrent view counting and slug races
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def file_session_factory(tmp_path):
    """
    A file-backed SQLite database with a regular connection pool, so each
    concurrent session gets its own connection and its own transaction.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'views.db'}",
        connect_args={"timeout": 30},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.mark.asyncio
async def test_concurrent_reads_count_every_view(file_session_factory):
    async with file_session_factory() as session:
        author = await make_user(session)
        category = await make_category(session)
        news = await make_news(session, author, category, "hot-topic")
        news_id = news.id
        await session.commit()

    async def read_once():
        async with file_session_factory() as session:
            await news_service.get_news_by_id(session, news_id)
            await session.commit()

    readers = 10
    await asyncio.gather(*(read_once() for _ in range(readers)))

    async with file_session_factory() as session:
        stored = await session.get(News, news_id)
        assert stored.views_count == readers


def _hold_until_both_checked(real_check):
    """Wrap a slug lookup so two writers both pass it before either inserts."""
    checked = 0
    both_checked = asyncio.Event()

    async def check_in_step(*args, **kwargs):
        nonlocal checked
        result = await real_check(*args, **kwargs)
        checked += 1
        if checked == 2:
            both_checked.set()
        await both_checked.wait()
        return result

    return check_in_step


@pytest.mark.asyncio
async def test_concurrent_category_creates_with_same_slug(file_session_factory, monkeypatch):
    monkeypatch.setattr(
        category_service, "_slug_owner", _hold_until_both_checked(category_service._slug_owner)
    )

    async def create():
        async with file_session_factory() as session:
            category = await category_service.create_category(
                session, CategoryCreate(name="Duplicate", slug="dup")
            )
            await asyncio.sleep(0.05)
            await session.commit()
            return category

    results = await asyncio.gather(create(), create(), return_exceptions=True)

    created = [r for r in results if isinstance(r, Category)]
    conflicts = [r for r in results if isinstance(r, ConflictError)]
    assert len(created) == 1
    assert len(conflicts) == 1
    assert conflicts[0].message == "Category with slug 'dup' already exists"

    async with file_session_factory() as session:
        count = await session.scalar(select(func.count()).select_from(Category))
        assert count == 1


@pytest.mark.asyncio
async def test_concurrent_news_creates_with_same_slug(file_session_factory, monkeypatch):
    async with file_session_factory() as session:
        author = await make_user(session)
        category = await make_category(session)
        await session.commit()

    monkeypatch.setattr(
        news_service, "_ensure_slug_free", _hold_until_both_checked(news_service._ensure_slug_free)
    )
    data = NewsCreate(title="Scoop", slug="scoop", content="c", category_id=category.id, author_id=author.id)

    async def create():
        async with file_session_factory() as session:
            news = await news_service.create_news(session, data)
            await asyncio.sleep(0.05)
            await session.commit()
            return news

    results = await asyncio.gather(create(), create(), return_exceptions=True)

    assert sum(isinstance(r, News) for r in results) == 1
    conflicts = [r for r in results if isinstance(r, ConflictError)]
    assert len(conflicts) == 1
    assert conflicts[0].message == "News with slug 'scoop' already exists"


# ---------------------------------------------------------------------------
# 3. Diagnostic headers
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_timing_headers_present(async_client: AsyncClient):
    resp = await async_client.post("/rpc/getCategories")
    assert resp.status_code == 200
    assert float(resp.headers["x-response-time-ms"]) >= 0
    assert int(resp.headers["x-query-count"]) == 1


@pytest.mark.asyncio
async def test_query_count_for_single_article_read(async_client: AsyncClient, db_session: AsyncSession):
    """The view increment and the read are one statement."""
    author = await make_user(db_session)
    category = await make_category(db_session)
    news = await make_news(db_session, author, category, "one-query")
    await db_session.commit()

    resp = await async_client.post("/rpc/getNewsById", json={"id": news.id})
    assert resp.status_code == 200
    assert resp.headers["x-query-count"] == "1"


@pytest.mark.asyncio
async def test_query_count_zero_for_healthcheck(async_client: AsyncClient):
    resp = await async_client.get("/rpc/healthcheck")
    assert resp.headers["x-query-count"] == "0"


# ---------------------------------------------------------------------------
# 4. CORS
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_cors_no_credentials_with_wildcard_origin(async_client: AsyncClient):
    resp = await async_client.options(
        "/rpc/getNews",
        headers={
            "Origin": "http://frontend.example.com",
            "Access-Control-Request-Method": "POST",
        },
    )
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "*"
    assert resp.headers.get("access-control-allow-credentials") != "true"


# ---------------------------------------------------------------------------
# 5. healthcheck
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["GET", "POST"])
async def test_healthcheck(async_client: AsyncClient, method: str):
    resp = await async_client.request(method, "/rpc/healthcheck")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["timestamp"]
