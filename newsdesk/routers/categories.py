from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.database import get_db
from newsdesk.schemas import CategoryCreate, CategoryResponse, CategoryUpdate, IdInput, SlugInput
from newsdesk.services import category_service

router = APIRouter(prefix="/rpc", tags=["categories"])

@router.post("/createCategory", response_model=CategoryResponse)
async def create_category(data: CategoryCreate, db: AsyncSession = Depends(get_db)):
    return await category_service.create_category(db, data)

@router.api_route("/getCategories", methods=["GET", "POST"], response_model=list[CategoryResponse])
async def get_categories(db: AsyncSession = Depends(get_db)):
    return await category_service.get_categories(db)

@router.post("/getCategoryById", response_model=CategoryResponse | None)
async def get_category_by_id(data: IdInput, db: AsyncSession = Depends(get_db)):
    return await category_service.get_category_by_id(db, data.id)

@router.post("/getCategoryBySlug", response_model=CategoryResponse | None)
async def get_category_by_slug(data: SlugInput, db: AsyncSession = Depends(get_db)):
    return await category_service.get_category_by_slug(db, data.slug)

@router.post("/updateCategory", response_model=CategoryResponse)
async def update_category(data: CategoryUpdate, db: AsyncSession = Depends(get_db)):
    return await category_service.update_category(db, data)

@router.post("/deleteCategory", response_model=bool)
async def delete_category(data: IdInput, db: AsyncSession = Depends(get_db)):
    return await category_service.delete_category(db, data.id)
