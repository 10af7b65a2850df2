"""Populate the database with a sample catalog.

Usage: python -m app.seed
"""
import asyncio
import logging
import random
from datetime import timedelta

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.logging import setup_logging
from app.db.base import Category, Product, Review
from app.db.base_mixins import utcnow
from app.db.session import async_engine, async_session_maker, init_db

logger = logging.getLogger(__name__)

MAX_REVIEWS_PER_PRODUCT = 24
REVIEW_WINDOW = timedelta(days=180)

SAMPLE_PRODUCTS = [
    {
        "name": "Samsung Galaxy S24 Smartphone",
        "description": "Android phone with 256GB storage, 50MP triple camera and a 6.2 inch AMOLED display.",
        "price": 2499.99,
        "category": Category.electronics,
    },
    {
        "name": "Dell Inspiron 15 Notebook",
        "description": "Laptop for work and study with an Intel Core i7, 16GB RAM and a 512GB NVMe SSD.",
        "price": 3299.90,
        "category": Category.electronics,
    },
    {
        "name": "Nike Air Max 270",
        "description": "Unisex running shoe with Air Max cushioning and a breathable mesh upper.",
        "price": 549.99,
        "category": Category.sports,
    },
    {
        "name": "ThunderX3 EC3 Gaming Chair",
        "description": "Ergonomic chair with adjustable lumbar support, 4D armrests and 180 degree recline.",
        "price": 899.99,
        "category": Category.home,
    },
    {
        "name": "Sony WH-1000XM5 Headphones",
        "description": "Over-ear bluetooth headphones with noise cancelling and up to 30 hours of battery.",
        "price": 1699.99,
        "category": Category.electronics,
    },
    {
        "name": "Clean Code - Robert Martin",
        "description": "Essential guide for developers on writing clean and maintainable code.",
        "price": 89.90,
        "category": Category.books,
    },
    {
        "name": "Adidas Originals T-Shirt",
        "description": "Casual cotton t-shirt with the classic embroidered logo.",
        "price": 129.99,
        "category": Category.clothing,
    },
    {
        "name": "Mondial Electric Pressure Cooker",
        "description": "5 litre electric pressure cooker with 12 preset programs and a non-stick bowl.",
        "price": 299.99,
        "category": Category.home,
    },
    {
        "name": "Caloi Explorer Sport Bike",
        "description": "29 inch mountain bike with an aluminium frame, 21 Shimano gears and disc brakes.",
        "price": 1899.99,
        "category": Category.sports,
    },
]

REVIEW_AUTHORS = [
    "Ana Silva", "João Santos", "Maria Oliveira", "Pedro Costa", "Carla Souza",
    "Lucas Ferreira", "Juliana Lima", "Rafael Alves", "Fernanda Rocha", "Bruno Martins",
]

REVIEW_COMMENTS = {
    5: ["Excellent product, exceeded my expectations.", "Amazing quality, highly recommended!"],
    4: ["Very good product, I recommend it.", "Good quality, met my expectations."],
    3: ["Reasonable product, as expected.", "Average quality for a fair price."],
    2: ["Below expectations, has some flaws.", "Not great, the quality is poor."],
    1: ["Very bad product, do not buy it.", "Terrible quality, money thrown away."],
}


def random_review(product: Product, rng: random.Random) -> Review:
    rating = rng.randint(1, 5)
    created_at = utcnow() - REVIEW_WINDOW * rng.random()
    return Review(
        product_id=product.id,
        author=rng.choice(REVIEW_AUTHORS),
        rating=rating,
        comment=rng.choice(REVIEW_COMMENTS[rating]),
        created_at=created_at,
        updated_at=created_at,
    )


async def seed_database(session: AsyncSession, rng: random.Random = None) -> dict:
    """Wipe both tables and insert the sample catalog with random reviews."""
    rng = rng or random.Random()

    logger.info("Removing existing data")
    await session.execute(delete(Review))
    await session.execute(delete(Product))

    products = [Product(**data) for data in SAMPLE_PRODUCTS]
    session.add_all(products)
    await session.flush()

    review_count = 0
    for product in products:
        reviews = [random_review(product, rng) for _ in range(rng.randint(0, MAX_REVIEWS_PER_PRODUCT))]
        session.add_all(reviews)
        review_count += len(reviews)
        logger.info("Generated %s reviews for %r", len(reviews), product.name)

    await session.commit()
    logger.info("Inserted %s products and %s reviews", len(products), review_count)
    return {"products": len(products), "reviews": review_count}


async def main():
    setup_logging(settings.LOG_LEVEL)
    await init_db()
    async with async_session_maker() as session:
        await seed_database(session)
    await async_engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
