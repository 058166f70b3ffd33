from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from prometheus_fastapi_instrumentator import Instrumentator, metrics
from sqlalchemy import text
from sqlmodel import SQLModel, Session

from core.config import get_settings
from core.logging_config import setup_logging
from dependencies import engine, log_requests, setup_error_handlers
from models import HealthResponse
from routers import (
    login_router,
    users_router,
    posts_router,
)

# Initialize settings and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


def create_db_and_tables():
    SQLModel.metadata.create_all(engine)

def custom_generate_unique_id(route: APIRoute):
    return f"{route.tags[0] if route.tags else ''}-{route.name}"

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Setup and cleanup tasks for the application lifecycle"""
    create_db_and_tables()
    logger.info(f"{settings.APP_NAME} {settings.APP_VERSION} started")
    yield
    engine.dispose()
    logger.info(f"{settings.APP_NAME} stopped")

def create_application() -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url=settings.DOCS_URL,
        redoc_url=settings.REDOC_URL,
        openapi_url=settings.OPENAPI_URL,
        openapi_tags=settings.OPENAPI_TAGS,
        lifespan=lifespan,
        generate_unique_id_function=custom_generate_unique_id,
    )

    # Add middleware
    app.middleware("http")(log_requests)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add error handlers
    setup_error_handlers(app)

    Instrumentator().instrument(app)\
        .add(metrics.request_size())\
        .add(metrics.response_size())\
        .add(metrics.latency(buckets=[0.1, 0.5, 1.0, 2.0, 3.0, 4.0, 5.0]))\
        .add(metrics.requests(should_include_handler=True))\
        .expose(app, include_in_schema=True, should_gzip=True)

    # Include routers
    app.include_router(login_router, prefix="/login", tags=["login"])
    app.include_router(users_router, prefix="/users", tags=["users"])
    app.include_router(posts_router, prefix="/posts", tags=["posts"])

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint for monitoring"""
        try:
            with Session(engine) as session:
                session.execute(text("SELECT 1"))
        except Exception as e:
            logger.error(f"Health check failed: {str(e)}")
            raise HTTPException(
                status_code=503,
                detail="Service unavailable"
            )
        return {"status": "healthy", "version": settings.APP_VERSION}

    return app

# Create the FastAPI application
app = create_application()

def main():
    """Main function for direct script execution"""
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000)

if __name__ == "__main__":
    main()
