"""Main FastAPI application entry point for the task tracker."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import settings
from config.database import Database, get_database
from config.logging_utils import setup_logging
from api.errors import register_exception_handlers
from api.routers.auth import router as auth_router
from api.routers.tasks import router as tasks_router
from services.auth_service import TokenService, create_token_service
from services.task_store import TASKS_COLLECTION, TaskStore
from services.user_store import USERS_COLLECTION, UserStore


logger = logging.getLogger(__name__)


async def create_indexes(database: Database) -> None:
    """Create the indexes the stores rely on."""
    await UserStore(database.get_collection(USERS_COLLECTION)).create_indexes()
    await TaskStore(database.get_collection(TASKS_COLLECTION)).create_indexes()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    setup_logging()
    database: Database = app.state.database
    await database.connect()
    try:
        await create_indexes(database)
        logger.info("Database indexes created")
    except Exception:
        logger.warning("Could not create database indexes", exc_info=True)
    yield
    await database.disconnect()


def create_app(
    database: Optional[Database] = None,
    token_service: Optional[TokenService] = None
) -> FastAPI:
    """
    Build the application around an explicit store handle and token service.

    Both default to instances built from settings.
    """
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Task tracking API with per-user tasks and bearer token authentication",
        lifespan=lifespan
    )
    app.state.database = database or Database(settings.MONGODB_URL, settings.DATABASE_NAME)
    app.state.token_service = token_service or create_token_service()

    origins = settings.get_cors_origins()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(auth_router)
    app.include_router(tasks_router)

    @app.get("/api")
    async def api_info():
        """API information endpoint."""
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "status": "running"
        }

    @app.get("/health")
    async def health_check():
        """Liveness check endpoint for monitoring."""
        return {"status": "ok"}

    @app.get("/health/db")
    async def database_health_check(database: Database = Depends(get_database)):
        """Readiness check that pings the database."""
        db_healthy = await database.health_check()
        return {
            "status": "ok" if db_healthy else "unavailable",
            "database": "connected" if db_healthy else "disconnected"
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
