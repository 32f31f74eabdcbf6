import logging
from collections.abc import AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from newsdesk.config import settings
from newsdesk.middleware import count_statements

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


# Tests swap this out through app.dependency_overrides[get_db].
engine = create_async_engine(settings.DATABASE_URL, echo=settings.DEBUG, pool_pre_ping=True)
count_statements(engine)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncIterator[AsyncSession]:
    """
    One session and one transaction per RPC call.

    Services only flush; the commit happens here once the handler returns.
    Any exception rolls the whole call back before it propagates to the
    error handlers in ``newsdesk.main``.
    """
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError:
            logger.exception("Database error, rolling back transaction")
            await session.rollback()
            raise
        except Exception:
            await session.rollback()
            raise
