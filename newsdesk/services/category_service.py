"""
Category service: CRUD for news categories.

Slugs are unique; deletion is refused while any news article still
references the category (checked here, not by a store-level constraint).
"""
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.exceptions import ConflictError, NotFoundError
from newsdesk.models import Category, News, utcnow
from newsdesk.schemas import CategoryCreate, CategoryUpdate

logger = logging.getLogger(__name__)


async def _slug_owner(db: AsyncSession, slug: str) -> int | None:
    """Return the id of the category using *slug*, if any."""
    result = await db.execute(select(Category.id).where(Category.slug == slug))
    return result.scalar_one_or_none()


async def _flush_slug(db: AsyncSession, slug: str) -> None:
    """Flush, reporting a slug taken by a concurrent writer as a conflict."""
    try:
        await db.flush()
    except IntegrityError as exc:
        logger.warning("Slug %r taken concurrently", slug)
        raise ConflictError(f"Category with slug '{slug}' already exists") from exc


async def create_category(db: AsyncSession, data: CategoryCreate) -> Category:
    if await _slug_owner(db, data.slug) is not None:
        raise ConflictError(f"Category with slug '{data.slug}' already exists")

    category = Category(name=data.name, slug=data.slug, description=data.description)
    db.add(category)
    await _flush_slug(db, data.slug)
    logger.info("Created category id=%s slug=%s", category.id, category.slug)
    return category


async def get_categories(db: AsyncSession) -> list[Category]:
    """Return every category ordered by name."""
    result = await db.execute(select(Category).order_by(Category.name.asc(), Category.id))
    return list(result.scalars().all())


async def get_category_by_id(db: AsyncSession, category_id: int) -> Category | None:
    return await db.get(Category, category_id)


async def get_category_by_slug(db: AsyncSession, slug: str) -> Category | None:
    result = await db.execute(select(Category).where(Category.slug == slug))
    return result.scalar_one_or_none()


async def update_category(db: AsyncSession, data: CategoryUpdate) -> Category:
    """
    Partially update a category.

    Keeping the current slug is allowed; taking another category's slug
    raises ``ConflictError``.
    """
    category = await db.get(Category, data.id)
    if category is None:
        raise NotFoundError(f"Category with id {data.id} not found")

    update_data = data.model_dump(exclude_unset=True, exclude={"id"})

    if "slug" in update_data:
        owner = await _slug_owner(db, update_data["slug"])
        if owner is not None and owner != category.id:
            raise ConflictError(f"Category with slug '{update_data['slug']}' already exists")

    for field, value in update_data.items():
        setattr(category, field, value)
    category.updated_at = utcnow()

    await _flush_slug(db, category.slug)
    logger.info("Updated category id=%s fields=%s", category.id, sorted(update_data))
    return category


async def delete_category(db: AsyncSession, category_id: int) -> bool:
    """
    Delete a category that no news article references.

    Returns False when the category does not exist or is still in use.
    """
    category = await db.get(Category, category_id)
    if category is None:
        return False

    in_use = await db.execute(select(News.id).where(News.category_id == category_id).limit(1))
    if in_use.scalar_one_or_none() is not None:
        logger.warning("Refusing to delete category id=%s: still referenced by news", category_id)
        return False

    await db.delete(category)
    await db.flush()
    logger.info("Deleted category id=%s", category_id)
    return True
