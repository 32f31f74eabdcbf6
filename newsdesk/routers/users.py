from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.database import get_db
from newsdesk.dependencies import optional_pagination
from newsdesk.schemas import IdInput, LoginInput, PaginationInput, UserCreate, UserResponse, UserUpdate
from newsdesk.services import user_service

router = APIRouter(prefix="/rpc", tags=["users"])

@router.post("/createUser", response_model=UserResponse)
async def create_user(data: UserCreate, db: AsyncSession = Depends(get_db)):
    return await user_service.create_user(db, data)

@router.post("/login", response_model=UserResponse | None)
async def login(data: LoginInput, db: AsyncSession = Depends(get_db)):
    return await user_service.login(db, data)

@router.post("/getUsers", response_model=list[UserResponse])
async def get_users(
    pagination: PaginationInput | None = Depends(optional_pagination),
    db: AsyncSession = Depends(get_db),
):
    return await user_service.get_users(db, pagination)

@router.post("/getUserById", response_model=UserResponse | None)
async def get_user_by_id(data: IdInput, db: AsyncSession = Depends(get_db)):
    return await user_service.get_user_by_id(db, data.id)

@router.post("/updateUser", response_model=UserResponse)
async def update_user(data: UserUpdate, db: AsyncSession = Depends(get_db)):
    return await user_service.update_user(db, data)

@router.post("/deleteUser", response_model=bool)
async def delete_user(data: IdInput, db: AsyncSession = Depends(get_db)):
    return await user_service.delete_user(db, data.id)
