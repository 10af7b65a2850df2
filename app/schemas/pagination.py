# app/schemas/pagination.py
from typing import Generic, TypeVar, List, Optional
from pydantic import BaseModel, Field

from app.schemas.base import CamelModel

T = TypeVar('T')

# Keeps (page - 1) * limit inside a signed 64-bit OFFSET
MAX_PAGE = 1_000_000


class PaginationParams(BaseModel):
    page: int = Field(1, ge=1, le=MAX_PAGE)
    limit: int = Field(10, ge=1, le=100)


class PaginationMeta(CamelModel):
    current_page: int
    total_pages: int
    total_products: int
    has_next_page: bool
    has_prev_page: bool
    limit: int


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str
    data: Optional[T] = None


class PaginatedResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str
    data: List[T]
    pagination: PaginationMeta


class ReviewPaginationMeta(CamelModel):
    current_page: int
    total_pages: int
    total_reviews: int
    has_next_page: bool
    has_prev_page: bool
    limit: int


class ReviewPaginatedResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str
    data: List[T]
    pagination: ReviewPaginationMeta
