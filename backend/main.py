"""
PharmaDesk master data API.

Builds the FastAPI app that the Streamlit admin UI talks to. Logs go to
stdout and to a size-rotated file under ``settings.LOG_DIR``.
"""
import sys
import logging
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.config import settings
from backend.core.database import init_db
from backend.api.v1.router import api_router

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE_MAX_BYTES = 10_000_000
LOG_FILE_BACKUPS = 5


def configure_logging() -> None:
    """Attach console and rotating-file handlers to the root logger."""
    settings.LOG_DIR.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        settings.LOG_DIR / "backend.log",
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout), file_handler],
    )


configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the SQLite file and its tables before serving requests."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
    init_db()
    logger.info(f"Variant master ready at {settings.DATABASE_URL}")

    yield

    logger.info(f"{settings.APP_NAME} stopped")


async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    """Log the failure in full and answer with a generic 500."""
    logger.error(
        f"{request.method} {request.url.path} failed: {type(exc).__name__}: {exc}",
        exc_info=True
    )
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An internal error occurred. Please try again later.",
            "error_code": "INTERNAL_ERROR",
        }
    )


def create_app() -> FastAPI:
    """Assemble the API: middleware, error handler, routes."""
    application = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Variant and unit master data for PharmaDesk",
        lifespan=lifespan,
    )

    # The admin UI only issues these verbs, always with JSON bodies
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept"],
    )
    application.add_exception_handler(Exception, unhandled_error)
    application.include_router(api_router)

    @application.get("/")
    async def root():
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "docs": "/docs",
        }

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "backend.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
    )
