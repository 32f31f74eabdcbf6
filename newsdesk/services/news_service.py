"""
News service: business logic for the News aggregate.

Design notes
------------
- Public listings (``get_news``, ``get_news_by_category``, ``search_news``,
  ``get_featured_news``) only ever return ``published`` articles;
  ``get_all_news`` is the administrative listing over every status.
- Reading a single article bumps ``views_count`` with one
  ``UPDATE ... SET views_count = views_count + 1 ... RETURNING`` statement.
  The increment happens inside the database, so concurrent readers never
  overwrite each other's increments.
- Category and author existence, and slug uniqueness, are checked
  explicitly before every write so callers get a precise error message.
- Deleting an article deletes its comments first; the foreign key itself
  does not cascade.
- Service functions flush but do not commit; the transaction boundary is
  owned by the ``get_db`` dependency in the router layer.
"""
import logging

from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from newsdesk.config import settings
from newsdesk.dependencies import PaginationParams
from newsdesk.exceptions import ConflictError, NotFoundError
from newsdesk.models import Category, Comment, News, NewsStatus, User, utcnow
from newsdesk.schemas import (
    NewsByCategoryInput,
    NewsCreate,
    NewsSearchResult,
    NewsUpdate,
    PaginationInput,
    SearchNewsInput,
    SlugInput,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_LIKE_ESCAPE = "\\"


def _contains_pattern(term: str) -> str:
    """Return a LIKE pattern matching *term* literally anywhere in a string."""
    escaped = (
        term.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def _newest_published_first():
    # Unpublished-dated rows sink to the end on every backend.
    return (News.published_at.desc().nulls_last(), News.id.desc())


def _published():
    return select(News).where(News.status == NewsStatus.PUBLISHED)


async def _ensure_category(db: AsyncSession, category_id: int) -> None:
    if await db.get(Category, category_id) is None:
        raise NotFoundError(f"Category with id {category_id} not found")


async def _ensure_slug_free(db: AsyncSession, slug: str, news_id: int | None = None) -> None:
    """Raise ``ConflictError`` if *slug* belongs to an article other than *news_id*."""
    result = await db.execute(select(News.id).where(News.slug == slug))
    owner = result.scalar_one_or_none()
    if owner is not None and owner != news_id:
        raise ConflictError(f"News with slug '{slug}' already exists")


async def _flush_slug(db: AsyncSession, slug: str) -> None:
    """Flush, reporting a slug taken by a concurrent writer as a conflict."""
    try:
        await db.flush()
    except IntegrityError as exc:
        logger.warning("Slug %r taken concurrently", slug)
        raise ConflictError(f"News with slug '{slug}' already exists") from exc


async def _read_and_count_view(db: AsyncSession, *criteria) -> News | None:
    stmt = (
        update(News)
        .where(*criteria)
        .values(views_count=News.views_count + 1)
        .returning(News)
        .execution_options(synchronize_session=False, populate_existing=True)
    )
    result = await db.execute(stmt)
    return result.scalars().one_or_none()


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def create_news(db: AsyncSession, data: NewsCreate) -> News:
    """
    Create a news article.

    The category and the author must exist and the slug must be unused.
    ``views_count`` starts at 0 and ``published_at`` is only set when the
    caller supplies it.
    """
    await _ensure_category(db, data.category_id)
    if await db.get(User, data.author_id) is None:
        raise NotFoundError(f"User with id {data.author_id} not found")
    await _ensure_slug_free(db, data.slug)

    news = News(
        title=data.title,
        slug=data.slug,
        content=data.content,
        excerpt=data.excerpt,
        featured_image=data.featured_image,
        category_id=data.category_id,
        author_id=data.author_id,
        status=data.status,
        views_count=0,
        published_at=data.published_at,
    )
    db.add(news)
    await _flush_slug(db, news.slug)
    logger.info("Created news id=%s slug=%s status=%s", news.id, news.slug, news.status.value)
    return news


async def get_news(db: AsyncSession, pagination: PaginationInput | None = None) -> list[News]:
    """Return published articles, most recently published first."""
    page = PaginationParams(pagination)
    q = _published().order_by(*_newest_published_first()).limit(page.limit).offset(page.offset)
    result = await db.execute(q)
    return list(result.scalars().all())


async def get_all_news(db: AsyncSession, pagination: PaginationInput | None = None) -> list[News]:
    """Return articles of every status, newest first (administrative listing)."""
    page = PaginationParams(pagination)
    q = (
        select(News)
        .order_by(News.created_at.desc(), News.id.desc())
        .limit(page.limit)
        .offset(page.offset)
    )
    result = await db.execute(q)
    return list(result.scalars().all())


async def get_news_by_id(db: AsyncSession, news_id: int) -> News | None:
    """Return the article after counting one view, or None if it does not exist."""
    return await _read_and_count_view(db, News.id == news_id)


async def get_news_by_slug(db: AsyncSession, data: SlugInput) -> News | None:
    """Return the article after counting one view, or None if it does not exist."""
    return await _read_and_count_view(db, News.slug == data.slug)


async def get_news_by_category(db: AsyncSession, data: NewsByCategoryInput) -> list[News]:
    """
    Return published articles of one category, selected by id or by slug.

    The input schema guarantees exactly one of the two keys is present.
    """
    page = PaginationParams(PaginationInput(limit=data.limit, offset=data.offset))
    q = _published()
    if data.category_id is not None:
        q = q.where(News.category_id == data.category_id)
    else:
        q = q.join(Category, News.category_id == Category.id).where(
            Category.slug == data.category_slug
        )
    q = q.order_by(*_newest_published_first()).limit(page.limit).offset(page.offset)
    result = await db.execute(q)
    return list(result.scalars().all())


async def get_featured_news(db: AsyncSession, limit: int | None = None) -> list[News]:
    """Return the most viewed published articles."""
    q = (
        _published()
        .order_by(News.views_count.desc(), News.id.desc())
        .limit(limit or settings.FEATURED_NEWS_LIMIT)
    )
    result = await db.execute(q)
    return list(result.scalars().all())


async def update_news(db: AsyncSession, data: NewsUpdate) -> News:
    """
    Partially update an article.

    Only fields explicitly set in the request payload are modified
    (``model_dump(exclude_unset=True)``); nullable columns may be cleared by
    sending null. Keeping the article's own slug is not a conflict.
    """
    news = await db.get(News, data.id)
    if news is None:
        raise NotFoundError(f"News with id {data.id} not found")

    update_data = data.model_dump(exclude_unset=True, exclude={"id"})

    if "category_id" in update_data:
        await _ensure_category(db, update_data["category_id"])
    if "slug" in update_data:
        await _ensure_slug_free(db, update_data["slug"], news_id=news.id)

    for field, value in update_data.items():
        setattr(news, field, value)
    news.updated_at = utcnow()

    await _flush_slug(db, news.slug)
    logger.info("Updated news id=%s fields=%s", news.id, sorted(update_data))
    return news


async def delete_news(db: AsyncSession, news_id: int) -> bool:
    """
    Delete the article identified by *news_id* together with its comments.

    Returns True on success, False when the article does not exist.
    """
    news = await db.get(News, news_id)
    if news is None:
        return False

    removed = await db.execute(delete(Comment).where(Comment.news_id == news_id))
    await db.delete(news)
    await db.flush()
    logger.info("Deleted news id=%s and %s comment(s)", news_id, removed.rowcount)
    return True


async def search_news(db: AsyncSession, data: SearchNewsInput) -> list[NewsSearchResult]:
    """
    Case-insensitive substring search over title and content.

    Only published articles are searched; results are ordered by
    publication date (no relevance ranking) and carry their author and
    category.
    """
    page = PaginationParams(PaginationInput(limit=data.limit, offset=data.offset))
    pattern = _contains_pattern(data.query)

    q = _published().where(
        or_(
            News.title.ilike(pattern, escape=_LIKE_ESCAPE),
            News.content.ilike(pattern, escape=_LIKE_ESCAPE),
        )
    )
    if data.category_id is not None:
        q = q.where(News.category_id == data.category_id)
    q = (
        q.options(joinedload(News.author), joinedload(News.category))
        .execution_options(populate_existing=True)
        .order_by(*_newest_published_first())
        .limit(page.limit)
        .offset(page.offset)
    )
    result = await db.execute(q)
    return [NewsSearchResult.model_validate(n) for n in result.unique().scalars().all()]
