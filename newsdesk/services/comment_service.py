"""
Comment service: comment creation, moderation and the reader/moderator
listings.

New comments always start ``pending`` and only ``approved`` comments are
shown to readers. Listings enrich each comment with its author (and, for
moderators, the article it belongs to) through explicit joined loads,
returned as typed DTOs rather than ad hoc dicts.
"""
import logging

from sqlalchemy import case, delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from newsdesk.dependencies import PaginationParams
from newsdesk.exceptions import InvalidInputError, NotFoundError
from newsdesk.models import Comment, CommentStatus, News, User, utcnow
from newsdesk.schemas import (
    CommentCreate,
    CommentForModeration,
    CommentUpdate,
    CommentWithAuthor,
    PaginationInput,
    PendingComment,
)

logger = logging.getLogger(__name__)

# Moderation triage order: pending first, then approved, then rejected.
_STATUS_ORDER = case(
    (Comment.status == CommentStatus.PENDING, 0),
    (Comment.status == CommentStatus.APPROVED, 1),
    else_=2,
)

_MODERATION_OUTCOMES = (CommentStatus.APPROVED, CommentStatus.REJECTED)


async def _get_or_raise(db: AsyncSession, comment_id: int) -> Comment:
    comment = await db.get(Comment, comment_id)
    if comment is None:
        raise NotFoundError(f"Comment with id {comment_id} not found")
    return comment


async def create_comment(db: AsyncSession, data: CommentCreate) -> Comment:
    """
    Add a comment to a news article on behalf of a user.

    Both the user and the article must exist; nothing is inserted
    otherwise. The comment always starts in the ``pending`` state.
    """
    if await db.get(User, data.user_id) is None:
        raise NotFoundError(f"User with id {data.user_id} not found")
    if await db.get(News, data.news_id) is None:
        raise NotFoundError(f"News with id {data.news_id} not found")

    comment = Comment(
        content=data.content,
        news_id=data.news_id,
        user_id=data.user_id,
        status=CommentStatus.PENDING,
    )
    db.add(comment)
    await db.flush()
    logger.info("Created comment id=%s on news id=%s", comment.id, comment.news_id)
    return comment


async def get_comments_by_news_id(
    db: AsyncSession,
    news_id: int,
    pagination: PaginationInput | None = None,
) -> list[CommentWithAuthor]:
    """Return the approved comments of one article, newest first, with their authors."""
    page = PaginationParams(pagination)
    q = (
        select(Comment)
        .where(Comment.news_id == news_id, Comment.status == CommentStatus.APPROVED)
        .options(joinedload(Comment.user))
        .execution_options(populate_existing=True)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .limit(page.limit)
        .offset(page.offset)
    )
    result = await db.execute(q)
    return [CommentWithAuthor.model_validate(c) for c in result.unique().scalars().all()]


async def get_all_comments(
    db: AsyncSession,
    pagination: PaginationInput | None = None,
) -> list[CommentForModeration]:
    """
    Return comments of every status for the moderation dashboard.

    Grouped by status (pending, approved, rejected), newest first within
    each group, with author and article summaries.
    """
    page = PaginationParams(pagination)
    q = (
        select(Comment)
        .options(joinedload(Comment.user), joinedload(Comment.news))
        .execution_options(populate_existing=True)
        .order_by(_STATUS_ORDER, Comment.created_at.desc(), Comment.id.desc())
        .limit(page.limit)
        .offset(page.offset)
    )
    result = await db.execute(q)
    return [CommentForModeration.model_validate(c) for c in result.unique().scalars().all()]


async def get_pending_comments(
    db: AsyncSession,
    pagination: PaginationInput | None = None,
) -> list[PendingComment]:
    """Return comments awaiting moderation, newest first, including the author's email."""
    page = PaginationParams(pagination)
    q = (
        select(Comment)
        .where(Comment.status == CommentStatus.PENDING)
        .options(joinedload(Comment.user), joinedload(Comment.news))
        .execution_options(populate_existing=True)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .limit(page.limit)
        .offset(page.offset)
    )
    result = await db.execute(q)
    return [PendingComment.model_validate(c) for c in result.unique().scalars().all()]


async def update_comment(db: AsyncSession, data: CommentUpdate) -> Comment:
    comment = await _get_or_raise(db, data.id)

    update_data = data.model_dump(exclude_unset=True, exclude={"id"})
    for field, value in update_data.items():
        setattr(comment, field, value)
    comment.updated_at = utcnow()

    await db.flush()
    logger.info("Updated comment id=%s fields=%s", comment.id, sorted(update_data))
    return comment


async def moderate_comment(db: AsyncSession, comment_id: int, status: str) -> Comment:
    """
    Approve or reject a comment.

    Re-moderating an already moderated comment is allowed.
    """
    if status not in _MODERATION_OUTCOMES:
        raise InvalidInputError("Moderation status must be 'approved' or 'rejected'")
    status = CommentStatus(status)

    comment = await _get_or_raise(db, comment_id)
    comment.status = status
    comment.updated_at = utcnow()

    await db.flush()
    logger.info("Moderated comment id=%s -> %s", comment.id, status.value)
    return comment


async def delete_comment(db: AsyncSession, comment_id: int) -> bool:
    """Hard-delete a comment. Returns True when a row was removed."""
    result = await db.execute(delete(Comment).where(Comment.id == comment_id))
    deleted = result.rowcount > 0
    if deleted:
        logger.info("Deleted comment id=%s", comment_id)
    return deleted
