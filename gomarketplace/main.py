from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gomarketplace import container
from gomarketplace.api.routes.cart_routes import router as cart_router
from gomarketplace.core.config import Settings
from gomarketplace.core.errors import CartProvisioningError
from gomarketplace.core.logging import configure_logging
from gomarketplace.infrastructure.key_value_store import KeyValueStore
from gomarketplace.models.schemas import StorageHealth
from gomarketplace.store.provider import CartProvider

logger = logging.getLogger(__name__)


def _error_code(status_code: int) -> str:
    codes = {
        400: "VALIDATION_ERROR",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        500: "INTERNAL_ERROR",
    }
    return codes.get(status_code, "INTERNAL_ERROR")


def _error_response(status_code: int, code: str, message: str, details: list[dict[str, str]] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details or [],
            }
        },
    )


def create_app(
    settings: Settings | None = None,
    key_value_store: KeyValueStore | None = None,
) -> FastAPI:
    settings = settings or container.settings
    key_value_store = key_value_store or container.key_value_store
    configure_logging(settings)

    @asynccontextmanager
    async def app_lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            async with CartProvider(
                key_value_store=key_value_store,
                storage_key=settings.cart_storage_key,
            ) as cart_store:
                app.state.cart_store = cart_store
                logger.info(
                    "Cart provisioned from %s storage with %d item(s)",
                    key_value_store.name,
                    len(cart_store.current_items()),
                )
                try:
                    yield
                finally:
                    app.state.cart_store = None
        finally:
            # The provider has flushed pending writes by now.
            container.mongo_manager.close()
            container.redis_manager.close()

    app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=app_lifespan)
    app.include_router(cart_router, prefix=settings.api_prefix)

    @app.exception_handler(CartProvisioningError)
    async def handle_provisioning_error(_: Request, exc: CartProvisioningError) -> JSONResponse:
        logger.error("Cart accessed without provisioning: %s", exc)
        return _error_response(500, "CONFIGURATION_ERROR", str(exc))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = str(exc.detail) if exc.detail else "Request failed"
        return _error_response(exc.status_code, _error_code(exc.status_code), message)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_exception(_: Request, exc: RequestValidationError) -> JSONResponse:
        details = []
        for issue in exc.errors():
            loc = issue.get("loc", ())
            field_parts = [str(part) for part in loc[1:]] if len(loc) > 1 else [str(loc[0])] if loc else ["body"]
            details.append(
                {
                    "field": ".".join(field_parts),
                    "message": str(issue.get("msg", "Invalid value")),
                }
            )
        return _error_response(400, "VALIDATION_ERROR", "Invalid request data", details)

    @app.exception_handler(Exception)
    async def handle_unexpected_exception(_: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error", exc_info=exc)
        return _error_response(500, "INTERNAL_ERROR", "Internal server error")

    @app.get("/health")
    def health() -> dict[str, object]:
        storage = StorageHealth(
            backend=key_value_store.name,
            status=key_value_store.status,
            error=key_value_store.error,
        )
        cart_store = getattr(app.state, "cart_store", None)
        writer = cart_store.cart_repository.writer if cart_store is not None else None
        return {
            "status": "ok",
            "storage": storage.model_dump(),
            "cart": {
                "provisioned": cart_store is not None,
                "snapshotWritesCompleted": writer.writes_completed if writer else 0,
                "snapshotWritesFailed": writer.writes_failed if writer else 0,
            },
        }

    return app


app = create_app()
