from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Optional
import logging

import uvicorn

from product_catalog.config import Settings, get_settings
from product_catalog.database import Database
from product_catalog.exceptions import register_exception_handlers
from product_catalog.models.product import PRODUCTS_COLLECTION
from product_catalog.services.product_service import ProductService
from product_catalog.api import products, health

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    A failed connection aborts startup.
    """
    database: Database = app.state.database

    # Startup
    logger.info("Starting up application...")
    await database.connect()

    logger.info("Ensuring product indexes...")
    await ProductService(database.get_collection(PRODUCTS_COLLECTION)).ensure_indexes()
    logger.info("Product indexes ready")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    await database.disconnect()


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to use (defaults to the environment)
        database: Database handle to own (defaults to one built from settings)
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        description="""
    A simple Products CRUD API with FastAPI and MongoDB.

    - **List** products, newest first
    - **Create** products with validated name, price, category and stock
    - **Update** products partially by ID
    - **Delete** products by ID

    Every response is wrapped in `{success, message?, data?, error?, errors?}`.
    Malformed bodies and IDs are rejected with 400 before reaching the database.
    """,
        version=settings.APP_VERSION,
        docs_url=settings.DOCS_URL,
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.database = database or Database(
        settings.MONGODB_URI,
        settings.MONGODB_DB,
        timeout_ms=settings.MONGODB_TIMEOUT_MS,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include API routers
    app.include_router(health.router)
    app.include_router(products.router, prefix=settings.API_PREFIX)

    @app.get("/", tags=["Root"])
    def root():
        """Root endpoint with API information."""
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "docs": settings.DOCS_URL,
            "redoc": "/redoc",
            "health": "/health",
            "products": settings.API_PREFIX,
        }

    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn on the configured host and port."""
    logger.info(f"Server is running at http://{settings.HOST}:{settings.PORT}")
    logger.info(f"Swagger Docs: http://{settings.HOST}:{settings.PORT}{settings.DOCS_URL}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
