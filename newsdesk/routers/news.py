from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.database import get_db
from newsdesk.dependencies import optional_pagination
from newsdesk.schemas import (
    FeaturedNewsInput,
    IdInput,
    NewsByCategoryInput,
    NewsCreate,
    NewsResponse,
    NewsSearchResult,
    NewsUpdate,
    PaginationInput,
    SearchNewsInput,
    SlugInput,
)
from newsdesk.services import news_service

router = APIRouter(prefix="/rpc", tags=["news"])

@router.post("/createNews", response_model=NewsResponse)
async def create_news(data: NewsCreate, db: AsyncSession = Depends(get_db)):
    return await news_service.create_news(db, data)

@router.post("/getNews", response_model=list[NewsResponse])
async def get_news(
    pagination: PaginationInput | None = Depends(optional_pagination),
    db: AsyncSession = Depends(get_db),
):
    return await news_service.get_news(db, pagination)

@router.post("/getAllNews", response_model=list[NewsResponse])
async def get_all_news(
    pagination: PaginationInput | None = Depends(optional_pagination),
    db: AsyncSession = Depends(get_db),
):
    return await news_service.get_all_news(db, pagination)

@router.post("/getNewsById", response_model=NewsResponse | None)
async def get_news_by_id(data: IdInput, db: AsyncSession = Depends(get_db)):
    return await news_service.get_news_by_id(db, data.id)

@router.post("/getNewsBySlug", response_model=NewsResponse | None)
async def get_news_by_slug(data: SlugInput, db: AsyncSession = Depends(get_db)):
    return await news_service.get_news_by_slug(db, data)

@router.post("/getNewsByCategory", response_model=list[NewsResponse])
async def get_news_by_category(data: NewsByCategoryInput, db: AsyncSession = Depends(get_db)):
    return await news_service.get_news_by_category(db, data)

@router.post("/getFeaturedNews", response_model=list[NewsResponse])
async def get_featured_news(
    data: FeaturedNewsInput | None = Body(None),
    db: AsyncSession = Depends(get_db),
):
    return await news_service.get_featured_news(db, data.limit if data else None)

@router.post("/updateNews", response_model=NewsResponse)
async def update_news(data: NewsUpdate, db: AsyncSession = Depends(get_db)):
    return await news_service.update_news(db, data)

@router.post("/deleteNews", response_model=bool)
async def delete_news(data: IdInput, db: AsyncSession = Depends(get_db)):
    return await news_service.delete_news(db, data.id)

@router.post("/searchNews", response_model=list[NewsSearchResult])
async def search_news(data: SearchNewsInput, db: AsyncSession = Depends(get_db)):
    return await news_service.search_news(db, data)
