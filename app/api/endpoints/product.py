from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.api.deps import product_list_params
from app.core.errors import ProductNotFound
from app.db.session import get_db
from app.db.base import Product, get_product_by_id, delete_product_with_reviews
from app.schemas.product import (
    ProductCreate,
    ProductListParams,
    ProductRead,
    ProductUpdate,
    RatedProductRead,
)
from app.schemas.review import RatingSummaryRead
from app.schemas.pagination import ApiResponse, PaginatedResponse
from app.services.listing import list_recent_products, list_top_rated_products
from app.services.ratings import get_rating_summary

router = APIRouter()


async def get_existing_product(session: AsyncSession, product_id: UUID) -> Product:
    product = await get_product_by_id(session, product_id)
    if product is None:
        raise ProductNotFound(product_id)
    return product


@router.post("", response_model=ApiResponse[ProductRead], status_code=status.HTTP_201_CREATED)
async def create_product(
    product_data: ProductCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Create a new product.
    """
    new_product = Product(**product_data.model_dump())
    db.add(new_product)
    await db.commit()
    await db.refresh(new_product)

    return ApiResponse(
        message="Product created successfully",
        data=ProductRead.model_validate(new_product),
    )


@router.get("", response_model=PaginatedResponse[ProductRead])
async def list_products(
    params: ProductListParams = Depends(product_list_params),
    db: AsyncSession = Depends(get_db),
):
    """
    Retrieve a paginated list of products, newest first.
    Optional `category` and `search` filters are case-insensitive substring matches.
    """
    page = await list_recent_products(db, params)

    return PaginatedResponse(
        message="Products listed successfully",
        data=[ProductRead.model_validate(product) for product in page.items],
        pagination=page.pagination,
    )


@router.get("/top-rated", response_model=PaginatedResponse[RatedProductRead])
async def list_top_rated_products_endpoint(
    params: ProductListParams = Depends(product_list_params),
    db: AsyncSession = Depends(get_db),
):
    """
    Retrieve a paginated list of products ordered by average rating,
    then by number of reviews, then newest first.
    """
    page = await list_top_rated_products(db, params)

    return PaginatedResponse(
        message="Top rated products listed successfully",
        data=[
            RatedProductRead.from_product(item.product, item.average_rating, item.total_reviews)
            for item in page.items
        ],
        pagination=page.pagination,
    )


@router.get("/{product_id}", response_model=ApiResponse[ProductRead])
async def get_product(
    product_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """
    Retrieve a specific product.
    """
    product = await get_existing_product(db, product_id)

    return ApiResponse(message="Product found", data=ProductRead.model_validate(product))


@router.put("/{product_id}", response_model=ApiResponse[ProductRead])
async def update_product(
    product_id: UUID,
    product_data: ProductUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Update an existing product. Only the fields present in the body are changed.
    """
    product = await get_existing_product(db, product_id)

    update_data = product_data.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        setattr(product, key, value)

    product.touch()
    await db.commit()
    await db.refresh(product)

    return ApiResponse(
        message="Product updated successfully",
        data=ProductRead.model_validate(product),
    )


@router.delete("/{product_id}", response_model=ApiResponse[None])
async def delete_product(
    product_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a product together with all of its reviews.
    """
    product = await get_existing_product(db, product_id)
    await delete_product_with_reviews(db, product)

    return ApiResponse(message="Product and its reviews were deleted successfully", data=None)


@router.get("/{product_id}/rating-average", response_model=ApiResponse[RatingSummaryRead])
async def get_product_rating_average(
    product_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """
    Average rating (rounded to one decimal), total reviews and per-star counts.
    A product without reviews reports an average of 0.
    """
    await get_existing_product(db, product_id)
    summary = await get_rating_summary(db, product_id)

    if summary.total_reviews == 0:
        message = "Average calculated (no reviews)"
    else:
        message = "Rating average calculated successfully"

    return ApiResponse(
        message=message,
        data=RatingSummaryRead(
            product_id=product_id,
            average_rating=summary.average_rating,
            total_reviews=summary.total_reviews,
            rating_counts=summary.rating_counts,
        ),
    )
