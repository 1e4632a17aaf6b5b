from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from jalpan.core.config import settings
from jalpan.core.logging import get_logger
from jalpan.api.v1 import api_router
from jalpan.infrastructure.database import engine, Base

# registers the daily_reports table on Base.metadata
from jalpan.domain.inspection import models  # noqa: F401

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application startup / shutdown
    """
    logger.info(f"Starting {settings.APP_NAME} API...")
    logger.info(f"Database: {settings.DATABASE_URL}")

    # Development convenience; production schemas are managed separately
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")

    yield

    logger.info("Shutting down...")


# FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Daily food quality inspection for the Jalpan canteen",
    lifespan=lifespan
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routers
app.include_router(api_router, prefix=settings.API_PREFIX)


# Health Check
@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "app_name": settings.APP_NAME,
        "version": settings.APP_VERSION
    }


@app.get("/")
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME} API",
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "jalpan.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
