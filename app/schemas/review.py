from typing import Dict, Optional
from uuid import UUID
from pydantic import ConfigDict, Field, StrictInt
from datetime import datetime

from app.schemas.base import CamelModel, PartialUpdateModel
from app.schemas.pagination import PaginationParams

COMMENT_MIN_LENGTH = 10
COMMENT_MAX_LENGTH = 500


class ReviewBase(CamelModel):
    author: str = Field(..., min_length=2, max_length=100)
    rating: StrictInt = Field(..., ge=1, le=5)
    comment: str = Field(..., min_length=COMMENT_MIN_LENGTH, max_length=COMMENT_MAX_LENGTH)

    model_config = ConfigDict(str_strip_whitespace=True)


class ReviewCreate(ReviewBase):
    pass


class ReviewUpdate(PartialUpdateModel):
    author: Optional[str] = Field(None, min_length=2, max_length=100)
    rating: Optional[StrictInt] = Field(None, ge=1, le=5)
    comment: Optional[str] = Field(None, min_length=COMMENT_MIN_LENGTH, max_length=COMMENT_MAX_LENGTH)

    model_config = ConfigDict(str_strip_whitespace=True)


class ReviewRead(CamelModel):
    id: UUID
    product_id: UUID
    author: str
    rating: int
    comment: str
    created_at: datetime
    updated_at: datetime


class ReviewProductRead(CamelModel):
    id: UUID
    name: str
    description: Optional[str] = None


class ReviewDetailRead(ReviewRead):
    """A review together with a summary of the product it belongs to."""

    product: ReviewProductRead

    @classmethod
    def from_review(cls, review, product, with_description: bool = True) -> "ReviewDetailRead":
        summary = ReviewProductRead(
            id=product.id,
            name=product.name,
            description=product.description if with_description else None,
        )
        fields = ReviewRead.model_validate(review).model_dump()
        return cls(**fields, product=summary)


class ReviewListParams(PaginationParams):
    limit: int = Field(10, ge=1, le=50)
    rating: Optional[int] = Field(None, ge=1, le=5)


class RatingSummaryRead(CamelModel):
    product_id: UUID
    average_rating: float
    total_reviews: int
    rating_counts: Dict[str, int]
