"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from store_tracker.api.purchases import router as purchases_router
from store_tracker.api.users import router as users_router
from store_tracker.app_logging import configure_logging
from store_tracker.containers import AppContainer
from store_tracker.domain.errors import (
    ConflictError,
    NotFoundError,
    TransactionFailure,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            app.state.container.setup_storage()
        except Exception:
            logger.exception("Failed to set up database collections")
            raise
        yield
        app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(users_router)
    app.include_router(purchases_router)

    @app.exception_handler(NotFoundError)
    async def not_found(_request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": str(exc), "identifier": exc.identifier},
        )

    @app.exception_handler(ConflictError)
    async def conflict(_request: Request, exc: ConflictError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": str(exc), "identifier": exc.identifier},
        )

    @app.exception_handler(TransactionFailure)
    async def transaction_failure(
        _request: Request, exc: TransactionFailure
    ) -> JSONResponse:
        logger.error("Transaction failure: %s", exc)
        status_code = (
            status.HTTP_503_SERVICE_UNAVAILABLE
            if exc.retryable
            else status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        return JSONResponse(
            status_code=status_code,
            content={"detail": "Transaction failed", "retryable": exc.retryable},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
