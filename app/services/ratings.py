"""Aggregate rating statistics for a single product.

The summary is always computed from the current review rows; nothing is
cached or stored on the product.
"""
import logging
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, Mapping

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import Review

logger = logging.getLogger(__name__)

STARS = range(1, 6)


def round_half_up(value, digits: int = 1) -> float:
    """Round half away from zero, e.g. 4.25 -> 4.3 and 4.15 -> 4.2.

    ``value`` may be a Decimal (exact) or anything ``str()`` renders as a
    decimal literal.
    """
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    quantum = Decimal(1).scaleb(-digits)
    return float(value.quantize(quantum, rounding=ROUND_HALF_UP))


def empty_counts() -> Dict[str, int]:
    return {str(star): 0 for star in STARS}


@dataclass(frozen=True)
class RatingSummary:
    average_rating: float = 0.0
    total_reviews: int = 0
    rating_counts: Dict[str, int] = field(default_factory=empty_counts)


def summarize_histogram(counts: Mapping[int, int]) -> RatingSummary:
    """Build a summary from a ``{star: count}`` mapping.

    The mean is derived from exact integer sums so ties such as 4.25 round
    the same way they would on paper.
    """
    rating_counts = empty_counts()
    total = 0
    weighted = 0
    for star, count in counts.items():
        star = int(star)
        if star not in STARS:
            raise ValueError(f"rating {star} is outside 1..5")
        rating_counts[str(star)] += count
        total += count
        weighted += star * count

    if total == 0:
        return RatingSummary()

    average = round_half_up(Decimal(weighted) / Decimal(total), 1)
    return RatingSummary(average_rating=average, total_reviews=total, rating_counts=rating_counts)


def summarize_ratings(ratings: Iterable[int]) -> RatingSummary:
    """Single pass over raw rating values."""
    counts: Dict[int, int] = {}
    for rating in ratings:
        counts[rating] = counts.get(rating, 0) + 1
    return summarize_histogram(counts)


async def get_rating_summary(session: AsyncSession, product_id) -> RatingSummary:
    """Summary for one product using a single grouped query.

    Product existence is the caller's concern. Database errors propagate.
    """
    stmt = (
        select(Review.rating, func.count())
        .where(Review.product_id == product_id)
        .group_by(Review.rating)
    )
    result = await session.execute(stmt)
    summary = summarize_histogram({rating: count for rating, count in result.all()})
    logger.debug(
        "Rating summary for product %s: %s over %s reviews",
        product_id, summary.average_rating, summary.total_reviews,
    )
    return summary
