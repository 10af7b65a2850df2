from fastapi import APIRouter
from app.api.endpoints import health, product, review
from app.core.config import settings

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(product.router, prefix=f"{settings.API_PREFIX}/products", tags=["products"])
api_router.include_router(review.product_reviews_router, prefix=f"{settings.API_PREFIX}/products", tags=["reviews"])
api_router.include_router(review.router, prefix=f"{settings.API_PREFIX}/reviews", tags=["reviews"])
