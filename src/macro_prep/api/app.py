"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from macro_prep.api.backup import router as backup_router
from macro_prep.api.catalog import router as catalog_router
from macro_prep.api.inventory import router as inventory_router
from macro_prep.api.sessions import router as sessions_router
from macro_prep.api.tracking import router as tracking_router
from macro_prep.app_logging import configure_logging
from macro_prep.containers import AppContainer
from macro_prep.errors import (
    DuplicateNameError,
    InsufficientInventoryError,
    InvalidPortionError,
    LedgerError,
    MalformedBackupError,
    NoSolutionError,
    NotFoundError,
    TransactionFailedError,
)

_UNPROCESSABLE = 422

_STATUS_BY_ERROR: list[tuple[type[LedgerError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InsufficientInventoryError, status.HTTP_409_CONFLICT),
    (DuplicateNameError, status.HTTP_409_CONFLICT),
    (NoSolutionError, _UNPROCESSABLE),
    (InvalidPortionError, _UNPROCESSABLE),
    (MalformedBackupError, _UNPROCESSABLE),
    (TransactionFailedError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(logging.DEBUG if container.settings.debug else logging.INFO)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        if state_container.settings.seed_catalog:
            try:
                state_container.catalog_service.seed_defaults()
            except Exception:
                logger.exception("Failed to seed default ingredients")
        yield

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    async def ledger_error_handler(request: Request, exc: Exception) -> JSONResponse:
        status_code = _status_for(exc)
        content: dict[str, object] = {"detail": str(exc), "error": type(exc).__name__}
        if isinstance(exc, InsufficientInventoryError):
            content["ceiling"] = exc.ceiling
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("Request %s failed: %s", request.url.path, exc)
        return JSONResponse(status_code=status_code, content=content)

    async def value_error_handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(
            status_code=_UNPROCESSABLE,
            content={"detail": str(exc), "error": type(exc).__name__},
        )

    app.add_exception_handler(LedgerError, ledger_error_handler)
    app.add_exception_handler(ValueError, value_error_handler)

    app.include_router(catalog_router)
    app.include_router(inventory_router)
    app.include_router(sessions_router)
    app.include_router(tracking_router)
    app.include_router(backup_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def _status_for(exc: Exception) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST
