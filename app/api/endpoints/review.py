# app/api/endpoints/review.py
from fastapi import APIRouter, Depends, status
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.api.deps import review_list_params
from app.api.endpoints.product import get_existing_product
from app.core.errors import ReviewNotFound
from app.db.session import get_db
from app.db.base import Review, get_product_by_id, get_review_by_id
from app.schemas.review import (
    ReviewCreate,
    ReviewDetailRead,
    ReviewListParams,
    ReviewRead,
    ReviewUpdate,
)
from app.schemas.pagination import ApiResponse, ReviewPaginatedResponse, ReviewPaginationMeta
from app.services.listing import PageWindow, page_counts

router = APIRouter()
product_reviews_router = APIRouter()


async def get_existing_review(session: AsyncSession, review_id: UUID) -> Review:
    review = await get_review_by_id(session, review_id)
    if review is None:
        raise ReviewNotFound(review_id)
    return review


@product_reviews_router.post(
    "/{product_id}/reviews",
    response_model=ApiResponse[ReviewRead],
    status_code=status.HTTP_201_CREATED,
)
async def create_review(
    product_id: UUID,
    review_data: ReviewCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Create a new review for a product.
    """
    await get_existing_product(db, product_id)

    review = Review(product_id=product_id, **review_data.model_dump())

    db.add(review)
    await db.commit()
    await db.refresh(review)

    return ApiResponse(message="Review created successfully", data=ReviewRead.model_validate(review))


@product_reviews_router.get(
    "/{product_id}/reviews",
    response_model=ReviewPaginatedResponse[ReviewDetailRead],
)
async def get_product_reviews(
    product_id: UUID,
    params: ReviewListParams = Depends(review_list_params),
    db: AsyncSession = Depends(get_db),
):
    """
    Get the reviews of a product, newest first.
    Supports pagination and an exact rating filter.
    """
    product = await get_existing_product(db, product_id)

    query = select(Review).where(Review.product_id == product_id)
    if params.rating:
        query = query.where(Review.rating == params.rating)

    # Count total matching reviews
    count_query = select(func.count()).select_from(query.subquery())
    result = await db.execute(count_query)
    total = result.scalar_one()

    # Paginate
    window = PageWindow(params.page, params.limit)
    query = query.order_by(Review.created_at.desc(), Review.id.desc())
    query = query.offset(window.skip).limit(window.limit)

    result = await db.execute(query)
    reviews = result.scalars().all()

    return ReviewPaginatedResponse(
        message="Reviews listed successfully",
        data=[
            ReviewDetailRead.from_review(review, product, with_description=False)
            for review in reviews
        ],
        pagination=ReviewPaginationMeta(
            total_reviews=total,
            **page_counts(window.page, window.limit, total),
        ),
    )


@router.get("/{review_id}", response_model=ApiResponse[ReviewDetailRead])
async def get_review(
    review_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """
    Get a specific review by its ID, with the name and description of its product.
    """
    review = await get_existing_review(db, review_id)
    product = await get_product_by_id(db, review.product_id)

    return ApiResponse(message="Review found", data=ReviewDetailRead.from_review(review, product))


@router.put("/{review_id}", response_model=ApiResponse[ReviewRead])
async def update_review(
    review_id: UUID,
    review_data: ReviewUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Update an existing review. Only author, rating and comment can change.
    """
    review = await get_existing_review(db, review_id)

    update_data = review_data.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        setattr(review, key, value)

    review.touch()
    await db.commit()
    await db.refresh(review)

    return ApiResponse(message="Review updated successfully", data=ReviewRead.model_validate(review))


@router.delete("/{review_id}", response_model=ApiResponse[None])
async def delete_review(
    review_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a review.
    """
    review = await get_existing_review(db, review_id)

    await db.delete(review)
    await db.commit()

    return ApiResponse(message="Review removed successfully", data=None)
