from typing import Optional

from fastapi import Query

from app.schemas.pagination import MAX_PAGE
from app.schemas.product import ProductListParams
from app.schemas.review import ReviewListParams


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def product_list_params(
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(10, ge=1, le=100),
    category: Optional[str] = Query(None, max_length=100),
    search: Optional[str] = Query(None, max_length=100),
) -> ProductListParams:
    """Validated listing query; blank filters count as absent."""
    return ProductListParams(
        page=page,
        limit=limit,
        category=_clean(category),
        search=_clean(search),
    )


def review_list_params(
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(10, ge=1, le=50),
    rating: Optional[int] = Query(None, ge=1, le=5),
) -> ReviewListParams:
    return ReviewListParams(page=page, limit=limit, rating=rating)
