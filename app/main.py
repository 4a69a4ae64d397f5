"""
Main FastAPI application entry point.
Wires logging, the database, CORS and the quote routers together.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes import forms, health, ingestion, quotes
from app.core.config import settings
from app.core.logging import get_logger, setup_logging
from app.db.session import create_db_and_tables
from app.services.workbook_reader import WorkbookReadError

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create quote tables on startup."""
    logger.info(f"Starting {settings.PROJECT_NAME} v{settings.VERSION}")
    create_db_and_tables()
    yield
    logger.info("Shutting down application...")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Quote builder with spreadsheet and clipboard ingestion",
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    docs_url=f"{settings.API_V1_PREFIX}/docs",
    redoc_url=f"{settings.API_V1_PREFIX}/redoc",
    lifespan=lifespan,
)

if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin).rstrip("/") for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["content-type", "accept"],
    )


@app.exception_handler(WorkbookReadError)
async def workbook_read_error_handler(request: Request, exc: WorkbookReadError) -> JSONResponse:
    """Undecodable uploads are a client error, whichever route received them."""
    logger.warning(f"Unreadable upload on {request.url.path}: {exc}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


for router in (health.router, quotes.router, ingestion.router, forms.router):
    app.include_router(router, prefix=settings.API_V1_PREFIX)
