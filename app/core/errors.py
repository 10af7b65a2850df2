import logging
from typing import Any, Callable, Dict

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.requests import Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class CatalogException(Exception):
    """This is the base class for all catalog errors"""
    pass


class ProductNotFound(CatalogException):
    """Product with the given ID does not exist."""
    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product with ID {product_id} does not exist")


class ReviewNotFound(CatalogException):
    """Review with the given ID does not exist."""
    def __init__(self, review_id):
        self.review_id = review_id
        super().__init__(f"Review with ID {review_id} does not exist")


class InvalidIdentifier(CatalogException):
    """Path parameter is not a valid identifier."""
    def __init__(self):
        super().__init__("The provided ID is not valid")


def error_body(error: str, message: str, **extra: Any) -> Dict[str, Any]:
    body = {"success": False, "error": error, "message": message}
    body.update(extra)
    return body


def create_exception_handler(status_code: int, error: str) -> Callable[[Request, Exception], JSONResponse]:
    async def exception_handler(request: Request, exc: CatalogException):
        return JSONResponse(
            content=error_body(error, str(exc)),
            status_code=status_code
        )

    return exception_handler


def _field_name(loc) -> str:
    # ("body", "price") -> "price", ("query", "limit") -> "limit"
    parts = [str(part) for part in loc[1:]] if len(loc) > 1 else [str(part) for part in loc]
    return ".".join(parts)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()

    # Malformed identifiers in the path are reported separately from body/query problems
    if any(err["loc"] and err["loc"][0] == "path" for err in errors):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body("Invalid ID", str(InvalidIdentifier())),
        )

    details = [
        {"field": _field_name(err["loc"]), "message": err["msg"]}
        for err in errors
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Validation error", "The provided data is invalid", details=details),
    )


async def data_access_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Data access error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error", "Something went wrong, please try again later"),
    )


def register_all_errors(app: FastAPI):
    # Product Not Found
    app.add_exception_handler(
        ProductNotFound,
        create_exception_handler(
            status_code=status.HTTP_404_NOT_FOUND,
            error="Product not found",
        )
    )

    # Review Not Found
    app.add_exception_handler(
        ReviewNotFound,
        create_exception_handler(
            status_code=status.HTTP_404_NOT_FOUND,
            error="Review not found",
        )
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, data_access_exception_handler)

    @app.exception_handler(404)
    async def not_found_error_handler(request, exc):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=error_body(
                "Route not found",
                f"The route {request.method} {request.url.path} does not exist",
            )
        )
