import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import pytest
from datetime import datetime, timedelta, timezone
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from app.db.base import Base, Category, Product, Review
from app.db.session import get_db
from fastapi import FastAPI


TEST_DATABASE_URL = "sqlite+aiosqlite://"

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture(scope="function")
async def async_engine():
    """Create an async engine for testing."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture(scope="function")
async def async_session(async_engine):
    """Create an async session for testing."""
    async_session_maker = async_sessionmaker(
        async_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture(scope="function")
async def override_get_db(async_session):
    """Override the get_db dependency to use the test session."""
    async def _override_get_db():
        try:
            yield async_session
        finally:
            await async_session.commit()

    return _override_get_db


@pytest.fixture(scope="function")
async def async_client(app, override_get_db):
    """Create an async client for testing."""
    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides = {}


@pytest.fixture(scope="session")
def app() -> FastAPI:
    """Create a FastAPI app instance for testing."""
    from app.main import app
    return app


@pytest.fixture(scope="function")
def make_product(async_session: AsyncSession):
    """Factory inserting products directly; each call is one minute newer than the last."""
    counter = {"n": 0}

    async def _make_product(
        name="Test Product",
        description="A product used in tests",
        price=10.0,
        category=Category.electronics,
        created_at=None,
    ):
        counter["n"] += 1
        created_at = created_at or BASE_TIME + timedelta(minutes=counter["n"])
        product = Product(
            name=name,
            description=description,
            price=price,
            category=category,
            created_at=created_at,
            updated_at=created_at,
        )
        async_session.add(product)
        await async_session.commit()
        await async_session.refresh(product)
        return product

    return _make_product


@pytest.fixture(scope="function")
def add_reviews(async_session: AsyncSession):
    """Attach one review per rating value to a product."""
    async def _add_reviews(product, ratings):
        reviews = [
            Review(
                product_id=product.id,
                author=f"Reviewer {i}",
                rating=rating,
                comment="A perfectly ordinary review comment.",
            )
            for i, rating in enumerate(ratings)
        ]
        async_session.add_all(reviews)
        await async_session.commit()
        return reviews

    return _add_reviews
