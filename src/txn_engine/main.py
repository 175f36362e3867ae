"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from txn_engine.config.settings import get_settings
from txn_engine.config.logging_config import setup_logging
from txn_engine.api.routers import transactions_router
from txn_engine.app_context import get_app_context, set_app_context
from txn_engine.core.exceptions import AppError, ErrorKind


_STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.VALIDATION: 422,
    ErrorKind.NETWORK: 502,
    ErrorKind.SERVER: 502,
    ErrorKind.UNKNOWN: 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging()
    context = get_app_context()
    yield
    # Shutdown
    await context.aclose()
    set_app_context(None)


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Enriched purchase and rental listings with a stale-while-revalidate cache",
    version=settings.app_version,
    lifespan=lifespan,
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    return JSONResponse(
        status_code=_STATUS_BY_KIND[exc.kind],
        content={"error": exc.code, "kind": exc.kind.value, "message": exc.message},
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


# Registered after /health so the {resource} routes do not capture it
app.include_router(transactions_router)
