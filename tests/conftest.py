"""
Shared fixtures for the Newsdesk suite.

The app runs against one in-memory SQLite database (aiosqlite). Because an
in-memory database lives and dies with its connection, the engine uses
``StaticPool`` so the app's sessions and the tests' own session all share
that single connection. The schema is rebuilt around every test.

bcrypt is slowed down on purpose; ``BCRYPT_ROUNDS`` is lowered before
``newsdesk`` is imported so ``Settings`` sees it.
"""
import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from newsdesk.database import Base, get_db  # noqa: E402
from newsdesk.main import app  # noqa: E402
from newsdesk.middleware import count_statements  # noqa: E402
from newsdesk.models import Category, News, NewsStatus, User  # noqa: E402
from newsdesk.security import hash_password  # noqa: E402

sqlite_engine = create_async_engine(
    "sqlite+aiosqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
count_statements(sqlite_engine)

SqliteSession = async_sessionmaker(sqlite_engine, class_=AsyncSession, expire_on_commit=False)


async def _sqlite_db():
    async with SqliteSession() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = _sqlite_db


@pytest_asyncio.fixture(autouse=True)
async def fresh_schema():
    async with sqlite_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with sqlite_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session():
    """A session for seeding rows and calling services directly."""
    async with SqliteSession() as session:
        yield session


@pytest_asyncio.fixture
async def async_client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


# ---------------------------------------------------------------------------
# Row builders (flush only; the caller decides whether to commit)
# ---------------------------------------------------------------------------

DEFAULT_PASSWORD = "password123"


async def make_user(db: AsyncSession, username: str = "author", **fields) -> User:
    user = User(
        username=username,
        email=fields.pop("email", f"{username}@example.com"),
        password_hash=hash_password(DEFAULT_PASSWORD),
        **fields,
    )
    db.add(user)
    await db.flush()
    return user


async def make_category(db: AsyncSession, slug: str = "technology", name: str | None = None) -> Category:
    category = Category(slug=slug, name=name or slug.title())
    db.add(category)
    await db.flush()
    return category


async def make_news(db: AsyncSession, author: User, category: Category, slug: str, **fields) -> News:
    fields.setdefault("title", slug.replace("-", " ").title())
    fields.setdefault("content", f"Content of {slug}")
    fields.setdefault("status", NewsStatus.PUBLISHED)
    news = News(slug=slug, author_id=author.id, category_id=category.id, **fields)
    db.add(news)
    await db.flush()
    return news
