"""
User service: registration, profile updates, soft delete and login.

Every read path returns ``UserResponse`` projections so the password hash
never leaves this module. Deleting a user only flips ``is_active``; their
news articles and comments keep pointing at the row.
"""
import logging

from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.dependencies import PaginationParams
from newsdesk.exceptions import ConflictError, NotFoundError
from newsdesk.models import User, utcnow
from newsdesk.schemas import LoginInput, PaginationInput, UserCreate, UserResponse, UserUpdate
from newsdesk.security import hash_password, placeholder_hash, verify_password

logger = logging.getLogger(__name__)


async def create_user(db: AsyncSession, data: UserCreate) -> UserResponse:
    """
    Create a new user and return its public projection.

    Username and email uniqueness is enforced at the database level; the
    integrity error is translated into ``ConflictError``.
    """
    user = User(
        username=data.username,
        email=data.email,
        password_hash=hash_password(data.password),
        full_name=data.full_name,
        avatar=data.avatar,
        role=data.role,
        is_active=True,
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as exc:
        logger.warning("Duplicate username or email on signup: %s", data.username)
        raise ConflictError("A user with this username or email already exists") from exc

    logger.info("Created user id=%s username=%s", user.id, user.username)
    return UserResponse.model_validate(user)


async def get_users(db: AsyncSession, pagination: PaginationInput | None = None) -> list[UserResponse]:
    page = PaginationParams(pagination)
    q = select(User).order_by(User.id).limit(page.limit).offset(page.offset)
    result = await db.execute(q)
    return [UserResponse.model_validate(u) for u in result.scalars().all()]


async def get_user_by_id(db: AsyncSession, user_id: int) -> UserResponse | None:
    user = await db.get(User, user_id)
    if user is None:
        return None
    return UserResponse.model_validate(user)


async def update_user(db: AsyncSession, data: UserUpdate) -> UserResponse:
    """
    Partially update a user.

    Only fields present in the request are written. Raises ``NotFoundError``
    for an unknown id and ``ConflictError`` when the requested username or
    email already belongs to another user.
    """
    user = await db.get(User, data.id)
    if user is None:
        raise NotFoundError(f"User with id {data.id} not found")

    update_data = data.model_dump(exclude_unset=True, exclude={"id"})

    clashes = []
    if "username" in update_data:
        clashes.append(User.username == update_data["username"])
    if "email" in update_data:
        clashes.append(User.email == update_data["email"])
    if clashes:
        q = select(User.id).where(or_(*clashes), User.id != user.id).limit(1)
        if (await db.execute(q)).scalar_one_or_none() is not None:
            raise ConflictError("Another user already uses this username or email")

    for field, value in update_data.items():
        setattr(user, field, value)
    user.updated_at = utcnow()

    try:
        await db.flush()
    except IntegrityError as exc:
        logger.warning("Username or email taken concurrently for user id=%s", data.id)
        raise ConflictError("Another user already uses this username or email") from exc
    logger.info("Updated user id=%s fields=%s", user.id, sorted(update_data))
    return UserResponse.model_validate(user)


async def delete_user(db: AsyncSession, user_id: int) -> bool:
    """
    Soft-delete the user: mark it inactive and keep the row.

    Returns True when the user existed.
    """
    stmt = (
        update(User)
        .where(User.id == user_id)
        .values(is_active=False, updated_at=utcnow())
        .returning(User.id)
    )
    result = await db.execute(stmt)
    deleted = result.scalar_one_or_none() is not None
    if deleted:
        logger.info("Deactivated user id=%s", user_id)
    return deleted


async def login(db: AsyncSession, data: LoginInput) -> UserResponse | None:
    """
    Verify credentials and return the user's public projection.

    The email must match exactly (case-sensitive). Unknown emails, inactive
    accounts and wrong passwords all yield None rather than an error.
    """
    result = await db.execute(select(User).where(User.email == data.email))
    user = result.scalar_one_or_none()
    if user is None or not user.is_active:
        verify_password(data.password, placeholder_hash())
        return None
    if not verify_password(data.password, user.password_hash):
        return None
    return UserResponse.model_validate(user)
