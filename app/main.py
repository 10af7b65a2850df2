import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.requests import Request

from app.api.api import api_router
from app.core.config import settings
from app.core.errors import register_all_errors
from app.core.logging import setup_logging
from app.db.session import init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    logger.info("%s %s started", settings.PROJECT_NAME, settings.PROJECT_VERSION)
    yield


def register_middleware(app: FastAPI):
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_logging(request: Request, call_next):
        start_time = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "%s %s - %s (%.1f ms)",
            request.method, request.url.path, response.status_code, elapsed_ms,
        )
        return response


def create_app() -> FastAPI:
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.PROJECT_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    register_all_errors(app)
    register_middleware(app)

    @app.get("/", tags=["root"])
    async def root():
        return {
            "message": "Product review API",
            "version": settings.PROJECT_VERSION,
            "endpoints": {
                "products": f"{settings.API_PREFIX}/products",
                "reviews": f"{settings.API_PREFIX}/reviews",
                "docs": "/docs",
            },
        }

    app.include_router(api_router)
    return app


app = create_app()
