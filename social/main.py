"""FastAPI application entry point.

Owns the process-wide connection pool: the lifespan creates the engine,
wires the Storage facade onto app.state and disposes the engine on shutdown.
"""

from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from social.settings import get_settings
from social.stores.postgres import create_engine, ping_db
from social.stores.storage import new_storage

logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events.
    """
    settings = get_settings()

    engine = create_engine(settings)
    try:
        await ping_db(engine)
        logger.info("DataBase connection pool established")
    except Exception:
        logger.exception("Postgres init failed")

    app.state.engine = engine
    app.state.storage = new_storage(engine, query_timeout=settings.query_timeout_seconds)

    yield

    await engine.dispose()
    logger.info("DataBase connection pool closed")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler returning structured error format."""
        logger.error(f"internal server error: {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": str(exc) if settings.debug else "the server encountered a problem",
                    "detail": None,
                }
            },
        )

    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "version": settings.app_version}

    return app


# Application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "social.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
