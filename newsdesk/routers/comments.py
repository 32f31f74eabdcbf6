from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.database import get_db
from newsdesk.dependencies import optional_pagination
from newsdesk.schemas import (
    CommentCreate,
    CommentForModeration,
    CommentModerate,
    CommentResponse,
    CommentsByNewsInput,
    CommentUpdate,
    CommentWithAuthor,
    IdInput,
    PaginationInput,
    PendingComment,
)
from newsdesk.services import comment_service

router = APIRouter(prefix="/rpc", tags=["comments"])

@router.post("/createComment", response_model=CommentResponse)
async def create_comment(data: CommentCreate, db: AsyncSession = Depends(get_db)):
    return await comment_service.create_comment(db, data)

@router.post("/getCommentsByNewsId", response_model=list[CommentWithAuthor])
async def get_comments_by_news_id(data: CommentsByNewsInput, db: AsyncSession = Depends(get_db)):
    return await comment_service.get_comments_by_news_id(db, data.newsId, data.pagination)

@router.post("/getAllComments", response_model=list[CommentForModeration])
async def get_all_comments(
    pagination: PaginationInput | None = Depends(optional_pagination),
    db: AsyncSession = Depends(get_db),
):
    return await comment_service.get_all_comments(db, pagination)

@router.post("/getPendingComments", response_model=list[PendingComment])
async def get_pending_comments(
    pagination: PaginationInput | None = Depends(optional_pagination),
    db: AsyncSession = Depends(get_db),
):
    return await comment_service.get_pending_comments(db, pagination)

@router.post("/updateComment", response_model=CommentResponse)
async def update_comment(data: CommentUpdate, db: AsyncSession = Depends(get_db)):
    return await comment_service.update_comment(db, data)

@router.post("/moderateComment", response_model=CommentResponse)
async def moderate_comment(data: CommentModerate, db: AsyncSession = Depends(get_db)):
    return await comment_service.moderate_comment(db, data.id, data.status)

@router.post("/deleteComment", response_model=bool)
async def delete_comment(data: IdInput, db: AsyncSession = Depends(get_db)):
    return await comment_service.delete_comment(db, data.id)
