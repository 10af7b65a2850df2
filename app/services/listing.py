"""Paged product listings, newest first or best rated first."""
import logging
from dataclasses import dataclass
from typing import Generic, List, Optional, Tuple, TypeVar

from sqlalchemy import String, cast, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import Product, Review
from app.schemas.pagination import PaginationMeta
from app.schemas.product import ProductListParams

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class PageWindow:
    page: int = 1
    limit: int = 10

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class Page(Generic[T]):
    items: List[T]
    pagination: PaginationMeta


@dataclass(frozen=True)
class RatedProduct:
    product: Product
    average_rating: float
    total_reviews: int


def page_counts(page: int, limit: int, total: int) -> dict:
    # An empty result set has zero pages
    total_pages = (total + limit - 1) // limit
    return {
        "current_page": page,
        "total_pages": total_pages,
        "has_next_page": page < total_pages,
        "has_prev_page": page > 1,
        "limit": limit,
    }


def build_pagination(page: int, limit: int, total: int) -> PaginationMeta:
    return PaginationMeta(total_products=total, **page_counts(page, limit, total))


def product_filters(category: Optional[str] = None, search: Optional[str] = None) -> list:
    """Case-insensitive substring predicates, ANDed by the caller.

    ``%`` and ``_`` in user input match literally.
    """
    filters = []
    if category:
        filters.append(cast(Product.category, String).icontains(category, autoescape=True))
    if search:
        filters.append(
            Product.name.icontains(search, autoescape=True)
            | Product.description.icontains(search, autoescape=True)
        )
    return filters


async def count_products(session: AsyncSession, filters: list) -> int:
    count_query = select(func.count()).select_from(Product).where(*filters)
    result = await session.execute(count_query)
    return result.scalar_one()


async def list_recent_products(session: AsyncSession, params: ProductListParams) -> Page[Product]:
    window = PageWindow(params.page, params.limit)
    filters = product_filters(params.category, params.search)

    query = (
        select(Product)
        .where(*filters)
        .order_by(Product.created_at.desc(), Product.id.desc())
        .offset(window.skip)
        .limit(window.limit)
    )
    total = await count_products(session, filters)
    result = await session.execute(query)
    products = list(result.scalars().all())

    pagination = build_pagination(window.page, window.limit, total)
    logger.info(
        "Found %s products (page %s/%s)", len(products), window.page, pagination.total_pages
    )
    return Page(items=products, pagination=pagination)


def rating_stats_subquery():
    return (
        select(
            Review.product_id.label("product_id"),
            func.avg(Review.rating).label("average_rating"),
            func.count(Review.id).label("total_reviews"),
        )
        .group_by(Review.product_id)
        .subquery("rating_stats")
    )


async def list_top_rated_products(session: AsyncSession, params: ProductListParams) -> Page[RatedProduct]:
    """Products ordered by mean rating, then review count, then recency.

    The mean is left unrounded here; products without reviews rank as 0.
    """
    window = PageWindow(params.page, params.limit)
    filters = product_filters(params.category, params.search)

    stats = rating_stats_subquery()
    average_rating = func.coalesce(stats.c.average_rating, 0).label("average_rating")
    total_reviews = func.coalesce(stats.c.total_reviews, 0).label("total_reviews")

    query = (
        select(Product, average_rating, total_reviews)
        .outerjoin(stats, stats.c.product_id == Product.id)
        .where(*filters)
        .order_by(
            average_rating.desc(),
            total_reviews.desc(),
            Product.created_at.desc(),
            Product.id.desc(),
        )
        .offset(window.skip)
        .limit(window.limit)
    )
    total = await count_products(session, filters)
    result = await session.execute(query)
    rows: List[Tuple[Product, object, int]] = result.all()
    items = [
        RatedProduct(product=product, average_rating=float(avg), total_reviews=int(count))
        for product, avg, count in rows
    ]

    pagination = build_pagination(window.page, window.limit, total)
    logger.info(
        "Found %s products ordered by rating (page %s/%s)",
        len(items), window.page, pagination.total_pages,
    )
    return Page(items=items, pagination=pagination)
