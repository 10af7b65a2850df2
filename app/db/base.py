import uuid
import enum
from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, Text, Enum, Index, Uuid, select, delete
from sqlalchemy.orm import relationship, declarative_base
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.base_mixins import TimestampMixin

Base = declarative_base()


class Category(str, enum.Enum):
    electronics = "eletrônicos"
    clothing = "roupas"
    home = "casa"
    sports = "esportes"
    books = "livros"
    health = "saúde"
    beauty = "beleza"
    toys = "brinquedos"
    food = "alimentação"
    other = "outros"


class Product(TimestampMixin, Base):
    __tablename__ = "products"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=False)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    category = Column(
        Enum(Category, values_callable=lambda e: [item.value for item in e], native_enum=False, length=20),
        nullable=False,
        index=True,
    )

    reviews = relationship("Review", back_populates="product", passive_deletes=True)

    def __repr__(self):
        return f"<Product {self.name}>"


class Review(TimestampMixin, Base):
    __tablename__ = "reviews"
    __table_args__ = (
        Index("ix_reviews_product_id_created_at", "product_id", "created_at"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    product_id = Column(Uuid, ForeignKey("products.id"), nullable=False, index=True)
    author = Column(String(100), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(String(500), nullable=False)

    product = relationship("Product", back_populates="reviews")

    def __repr__(self):
        return f"<Review {self.rating} by {self.author}>"


async def get_product_by_id(session: AsyncSession, product_id):
    stmt = select(Product).where(Product.id == product_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_review_by_id(session: AsyncSession, review_id):
    stmt = select(Review).where(Review.id == review_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def delete_product_with_reviews(session: AsyncSession, product: Product):
    # Reviews go first so none is left pointing at a missing product
    await session.execute(delete(Review).where(Review.product_id == product.id))
    await session.delete(product)
    await session.commit()
