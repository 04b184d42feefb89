from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

import uvicorn

from inventory_ledger.config import Settings, get_settings
from inventory_ledger.database import Database
from inventory_ledger.api import health, outflows, products, sessions

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    database: Database = app.state.database

    # Startup
    logger.info("Starting up application...")

    # Create database tables
    logger.info("Creating database tables...")
    database.create_all()
    logger.info("Database tables created successfully")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    database.dispose()


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors as {"success": false, "error": <message>}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def create_app(settings: Settings = None, database: Database = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Application settings (read from the environment if omitted)
        database: Storage client (built from settings if omitted)
    """
    settings = settings or get_settings()

    # Configure logging
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    app = FastAPI(
        title=settings.APP_NAME,
        description="""
    HTTP JSON API backing an inventory tracker.

    - **Sessions**: unauthenticated login audit log
    - **Products**: import product lists (upsert by product code) and list them
    - **Outflows**: record stock withdrawals and query their history

    ### Stock consistency
    Outflows decrement stock with a conditional UPDATE, so stock never goes
    negative even under concurrent requests.
    """,
        version=settings.APP_VERSION,
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.database = database or Database.from_settings(settings)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # Include API routers
    app.include_router(health.router, prefix="/api")
    app.include_router(sessions.router, prefix="/api")
    app.include_router(products.router, prefix="/api")
    app.include_router(outflows.router, prefix="/api")

    @app.get("/", tags=["Root"])
    def root():
        """Root endpoint: service banner and current time."""
        return {
            "mensaje": "API de Inventario funcionando 🚀",
            "fecha": datetime.now(timezone.utc).isoformat()
        }

    return app


def run():
    """Serve the application with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "inventory_ledger.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
    )


if __name__ == "__main__":
    run()
