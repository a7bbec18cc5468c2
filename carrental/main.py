"""
Main FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from carrental.config import get_settings
from carrental.database import close_db, init_db
from carrental.errors import register_exception_handlers
from carrental.log import configure_logging
from carrental.routers import auth, cars, orders

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan events for the application.
    Handles startup and shutdown events.
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    # Startup
    logger.info("Starting %s %s", settings.app_name, settings.app_version)
    await init_db()
    logger.info("Database initialized; API available at %s", settings.api_v1_prefix)

    yield

    # Shutdown
    await close_db()
    logger.info("Shutting down %s", settings.app_name)


def create_app() -> FastAPI:
    """Build the application with routers, CORS and error handlers."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="""
        ## Car Rental API

        Book cars, pay for orders and download invoices.

        ### Entities:
        * **Users**: Local and Google accounts
        * **Cars**: Inventory with daily price and availability
        * **Orders**: Rental bookings (pending, paid, cancelled)
        """,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(auth.router, prefix=settings.api_v1_prefix)
    app.include_router(cars.router, prefix=settings.api_v1_prefix)
    app.include_router(orders.router, prefix=settings.api_v1_prefix)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": "Car Rental API",
            "version": settings.app_version,
            "docs": "/docs",
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": settings.app_version,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "carrental.main:app",
        host="0.0.0.0",
        port=8000,
        reload=get_settings().debug,
    )
