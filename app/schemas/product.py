# app/schemas/product.py
from decimal import Decimal
from typing import Annotated, Optional
from uuid import UUID
from pydantic import AfterValidator, ConfigDict, Field
from datetime import datetime

from app.db.base import Category
from app.schemas.base import CamelModel, PartialUpdateModel
from app.schemas.pagination import PaginationParams


def check_price_precision(value: float) -> float:
    if Decimal(str(value)).as_tuple().exponent < -2:
        raise ValueError("price must have at most 2 decimal places")
    return value


# Largest value a Numeric(10, 2) column holds
MAX_PRICE = 99_999_999.99

Price = Annotated[float, Field(ge=0, le=MAX_PRICE), AfterValidator(check_price_precision)]


class ProductBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=1000)
    price: Price
    category: Category

    model_config = ConfigDict(str_strip_whitespace=True)


class ProductCreate(ProductBase):
    pass


class ProductUpdate(PartialUpdateModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=1000)
    price: Optional[Price] = None
    category: Optional[Category] = None

    model_config = ConfigDict(str_strip_whitespace=True)


class ProductRead(CamelModel):
    id: UUID
    name: str
    description: str
    price: float
    category: Category
    created_at: datetime
    updated_at: datetime


class RatedProductRead(ProductRead):
    average_rating: float = 0.0
    total_reviews: int = 0

    @classmethod
    def from_product(cls, product, average_rating: float, total_reviews: int) -> "RatedProductRead":
        fields = ProductRead.model_validate(product).model_dump()
        return cls(**fields, average_rating=average_rating, total_reviews=total_reviews)


class ProductListParams(PaginationParams):
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    search: Optional[str] = Field(None, min_length=1, max_length=100)
