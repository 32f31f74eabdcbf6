from datetime import datetime
from typing import ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from newsdesk.config import settings
from newsdesk.models import CommentStatus, NewsStatus, UserRole

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class PartialUpdate(BaseModel):
    """
    Base for partial-update inputs.

    A field that is omitted stays unchanged (``model_dump(exclude_unset=True)``
    drops it); a field sent as null clears the column. Columns listed in
    ``non_nullable`` may be omitted but never set to null.
    """

    non_nullable: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_explicit_nulls(self):
        for name in self.non_nullable:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} may be omitted but not set to null")
        return self


# --- Pagination ---

class PaginationInput(BaseModel):
    limit: int = Field(settings.DEFAULT_PAGE_SIZE, ge=1, le=100)
    offset: int = Field(0, ge=0)


class IdInput(BaseModel):
    id: int


class SlugInput(BaseModel):
    slug: str


# --- User ---

class UserCreate(BaseModel):
    username: str = Field(min_length=3, max_length=50)
    email: str = Field(max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(min_length=6)
    full_name: str | None = None
    avatar: str | None = None
    role: UserRole = UserRole.USER

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > 72:
            raise ValueError("password must be at most 72 bytes")
        return value


class UserUpdate(PartialUpdate):
    id: int
    username: str | None = Field(None, min_length=3, max_length=50)
    email: str | None = Field(None, max_length=255, pattern=EMAIL_PATTERN)
    full_name: str | None = None
    avatar: str | None = None
    role: UserRole | None = None
    is_active: bool | None = None

    non_nullable = ("username", "email", "role", "is_active")


class UserResponse(BaseModel):
    """Public projection of a user; the password hash is never exposed."""

    id: int
    username: str
    email: str
    full_name: str | None
    avatar: str | None
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class LoginInput(BaseModel):
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str


# --- Category ---

class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    slug: str = Field(min_length=1, max_length=100)
    description: str | None = None


class CategoryUpdate(PartialUpdate):
    id: int
    name: str | None = Field(None, min_length=1, max_length=100)
    slug: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None

    non_nullable = ("name", "slug")


class CategoryResponse(BaseModel):
    id: int
    name: str
    slug: str
    description: str | None
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class CategorySummary(BaseModel):
    id: int
    name: str
    slug: str
    model_config = ConfigDict(from_attributes=True)


# --- News ---

class NewsCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    slug: str = Field(min_length=1, max_length=255)
    content: str
    excerpt: str | None = None
    featured_image: str | None = None
    category_id: int
    author_id: int
    status: NewsStatus = NewsStatus.DRAFT
    published_at: datetime | None = None


class NewsUpdate(PartialUpdate):
    id: int
    title: str | None = Field(None, min_length=1, max_length=255)
    slug: str | None = Field(None, min_length=1, max_length=255)
    content: str | None = None
    excerpt: str | None = None
    featured_image: str | None = None
    category_id: int | None = None
    status: NewsStatus | None = None
    published_at: datetime | None = None

    non_nullable = ("title", "slug", "content", "category_id", "status")


class NewsResponse(BaseModel):
    id: int
    title: str
    slug: str
    content: str
    excerpt: str | None
    featured_image: str | None
    category_id: int
    author_id: int
    status: NewsStatus
    views_count: int
    published_at: datetime | None
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class NewsSummary(BaseModel):
    id: int
    title: str
    slug: str
    model_config = ConfigDict(from_attributes=True)


class NewsByCategoryInput(PaginationInput):
    category_id: int | None = None
    category_slug: str | None = None

    @model_validator(mode="after")
    def exactly_one_category_key(self):
        if (self.category_id is None) == (self.category_slug is None):
            raise ValueError("Either category_id or category_slug must be provided")
        return self


class FeaturedNewsInput(BaseModel):
    limit: int = Field(settings.FEATURED_NEWS_LIMIT, ge=1, le=100)


class SearchNewsInput(PaginationInput):
    query: str = Field(min_length=1, max_length=255)
    category_id: int | None = None


# --- Comment ---

class CommentAuthor(BaseModel):
    id: int
    username: str
    full_name: str | None
    avatar: str | None
    model_config = ConfigDict(from_attributes=True)


class CommentAuthorContact(CommentAuthor):
    email: str


class CommentCreate(BaseModel):
    content: str = Field(min_length=1, max_length=1000)
    news_id: int
    user_id: int


class CommentUpdate(PartialUpdate):
    id: int
    content: str | None = Field(None, min_length=1, max_length=1000)
    status: CommentStatus | None = None

    non_nullable = ("content", "status")


class CommentModerate(BaseModel):
    id: int
    status: Literal["approved", "rejected"]


class CommentsByNewsInput(BaseModel):
    newsId: int
    pagination: PaginationInput | None = None


class CommentResponse(BaseModel):
    id: int
    content: str
    news_id: int
    user_id: int
    status: CommentStatus
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class CommentWithAuthor(CommentResponse):
    user: CommentAuthor


class CommentForModeration(CommentResponse):
    user: CommentAuthor
    news: NewsSummary


class PendingComment(CommentResponse):
    user: CommentAuthorContact
    news: NewsSummary


# --- Search results ---

class NewsSearchResult(NewsResponse):
    author: CommentAuthor
    category: CategorySummary


# --- Health ---

class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
