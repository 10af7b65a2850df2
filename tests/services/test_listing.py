import pytest

from app.db.base import Category
from app.schemas.product import ProductListParams
from app.services.listing import (
    PageWindow,
    build_pagination,
    list_recent_products,
    list_top_rated_products,
)


class TestPageArithmetic:
    def test_skip(self):
        assert PageWindow(1, 10).skip == 0
        assert PageWindow(3, 10).skip == 20

    def test_first_page(self):
        meta = build_pagination(page=1, limit=10, total=25)

        assert meta.total_pages == 3
        assert meta.total_products == 25
        assert meta.has_prev_page is False
        assert meta.has_next_page is True

    def test_last_page(self):
        meta = build_pagination(page=3, limit=10, total=25)

        assert meta.has_prev_page is True
        assert meta.has_next_page is False

    def test_exact_multiple(self):
        assert build_pagination(page=1, limit=5, total=10).total_pages == 2

    def test_empty_collection_has_zero_pages(self):
        meta = build_pagination(page=1, limit=10, total=0)

        assert meta.total_pages == 0
        assert meta.has_next_page is False
        assert meta.has_prev_page is False

    def test_serialized_names(self):
        meta = build_pagination(page=2, limit=10, total=25)

        assert meta.model_dump(by_alias=True) == {
            "currentPage": 2,
            "totalPages": 3,
            "totalProducts": 25,
            "hasNextPage": True,
            "hasPrevPage": True,
            "limit": 10,
        }


@pytest.mark.asyncio
async def test_recent_products_are_paged_newest_first(async_session, make_product):
    products = [await make_product(name=f"Product {i:02d}") for i in range(25)]

    sizes = []
    seen = []
    for page in (1, 2, 3):
        result = await list_recent_products(async_session, ProductListParams(page=page, limit=10))
        sizes.append(len(result.items))
        seen.extend(p.id for p in result.items)
        assert result.pagination.total_pages == 3
        assert result.pagination.total_products == 25

    assert sizes == [10, 10, 5]
    assert seen == [p.id for p in reversed(products)]


@pytest.mark.asyncio
async def test_page_past_the_end_is_empty(async_session, make_product):
    await make_product()

    result = await list_recent_products(async_session, ProductListParams(page=5, limit=10))

    assert result.items == []
    assert result.pagination.total_products == 1
    assert result.pagination.has_prev_page is True
    assert result.pagination.has_next_page is False


@pytest.mark.asyncio
async def test_category_and_search_compose(async_session, make_product):
    phone = await make_product(name="Smartphone X", category=Category.electronics)
    await make_product(name="Laptop Y", description="Not a handset", category=Category.electronics)
    await make_product(name="Phone case", description="Leather", category=Category.other)
    described = await make_product(
        name="Galaxy", description="An Android PHONE", category=Category.electronics
    )

    result = await list_recent_products(
        async_session,
        ProductListParams(category="eletrônicos", search="phone"),
    )

    assert {p.id for p in result.items} == {phone.id, described.id}
    assert result.pagination.total_products == 2


@pytest.mark.asyncio
async def test_category_is_a_substring_match(async_session, make_product):
    await make_product(category=Category.electronics)
    await make_product(category=Category.books)

    result = await list_recent_products(async_session, ProductListParams(category="trôn"))

    assert [p.category for p in result.items] == [Category.electronics]


@pytest.mark.asyncio
async def test_search_wildcards_match_literally(async_session, make_product):
    await make_product(name="100% cotton shirt")
    await make_product(name="Plain shirt")

    result = await list_recent_products(async_session, ProductListParams(search="100%"))

    assert [p.name for p in result.items] == ["100% cotton shirt"]

    result = await list_recent_products(async_session, ProductListParams(search="%"))

    assert [p.name for p in result.items] == ["100% cotton shirt"]


@pytest.mark.asyncio
async def test_top_rated_orders_by_average_then_review_count(async_session, make_product, add_reviews):
    first = await make_product(name="First")
    second = await make_product(name="Second")
    third = await make_product(name="Third")
    await add_reviews(first, [5, 4] * 5)      # 4.5 over 10
    await add_reviews(second, [5, 4] * 10)    # 4.5 over 20
    await add_reviews(third, [3] * 5)         # 3.0 over 5

    result = await list_top_rated_products(async_session, ProductListParams())

    assert [item.product.id for item in result.items] == [second.id, first.id, third.id]
    assert [item.average_rating for item in result.items] == [4.5, 4.5, 3.0]
    assert [item.total_reviews for item in result.items] == [20, 10, 5]


@pytest.mark.asyncio
async def test_top_rated_keeps_unrounded_average(async_session, make_product, add_reviews):
    product = await make_product()
    await add_reviews(product, [5, 4, 4])

    result = await list_top_rated_products(async_session, ProductListParams())

    assert result.items[0].average_rating == pytest.approx(13 / 3)


@pytest.mark.asyncio
async def test_top_rated_unreviewed_products_rank_last_newest_first(async_session, make_product, add_reviews):
    older = await make_product(name="Older")
    newer = await make_product(name="Newer")
    rated = await make_product(name="Rated")
    await add_reviews(rated, [1])

    result = await list_top_rated_products(async_session, ProductListParams())

    assert [item.product.id for item in result.items] == [rated.id, newer.id, older.id]
    assert result.items[1].average_rating == 0
    assert result.items[1].total_reviews == 0


@pytest.mark.asyncio
async def test_top_rated_count_follows_filters(async_session, make_product, add_reviews):
    book = await make_product(name="Book", category=Category.books)
    await make_product(name="Gadget", category=Category.electronics)
    await add_reviews(book, [4])

    result = await list_top_rated_products(
        async_session, ProductListParams(category="livros", limit=1)
    )

    assert [item.product.id for item in result.items] == [book.id]
    assert result.pagination.total_products == 1
    assert result.pagination.total_pages == 1
