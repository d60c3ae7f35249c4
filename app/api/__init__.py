# app/api/__init__.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.api.routers import carts, health, orders, payments, products
from app.domain.errors import StorefrontError
from app.utils.logging import get_logger

logger = get_logger(__name__)


def include_routers(app: FastAPI) -> None:
    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(carts.router)
    app.include_router(orders.router)
    app.include_router(payments.router)


def register_error_handlers(app: FastAPI) -> None:
    """Wszystkie bledy jako {"error": "..."} ze statusem klasy bledu."""

    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = "Nieprawidłowe dane wejściowe"
        if errors:
            message += f": {errors[0].get('msg', '')}"
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"{request.method} {request.url.path}: blad bazy {exc}")
        return JSONResponse(status_code=500, content={"error": "Błąd bazy danych"})
