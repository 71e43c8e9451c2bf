# backend/stockwatch/main.py
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from stockwatch import __version__
from stockwatch.core.config import settings
from stockwatch.db import connect_to_mongo, close_mongo_connection
from stockwatch.logger import get_logger
from stockwatch.middleware.request_logger import RequestLoggerMiddleware
from stockwatch.routers import health, stocks
from stockwatch.tasks.scheduler import start_scheduler, shutdown_scheduler

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle with async context manager"""
    # ========== STARTUP ==========
    log.info("Starting stockwatch...")

    try:
        await connect_to_mongo(settings)
        log.info("MongoDB connected successfully")
    except Exception as e:
        log.error("Failed to connect to MongoDB: %s", e)
        raise

    if not settings.configured:
        log.warning("Discovery / Alpha Vantage credentials missing; refresh runs will be rejected")

    try:
        scheduler = start_scheduler()
        if scheduler:
            jobs = [job.id for job in scheduler.get_jobs()]
            log.info("Scheduler started with jobs: %s", jobs)
    except Exception as e:
        log.exception("Failed to start scheduler: %s", e)

    log.info("Application startup complete!")

    yield  # Application runs here

    # ========== SHUTDOWN ==========
    log.info("Shutting down stockwatch...")

    try:
        shutdown_scheduler()
    except Exception as e:
        log.exception("Failed to stop scheduler: %s", e)

    try:
        await close_mongo_connection()
    except Exception as e:
        log.error("Error closing MongoDB connection: %s", e)

    log.info("Application shutdown complete!")


app = FastAPI(title="stockwatch", version=__version__, lifespan=lifespan)
app.add_middleware(RequestLoggerMiddleware)

# ========== ROUTERS ==========
app.include_router(health.router, prefix=settings.API_PREFIX)
app.include_router(stocks.router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    return {
        "message": "stockwatch - news, images and closing prices per company",
        "version": __version__,
        "api_endpoints": {
            "health": f"{settings.API_PREFIX}/health",
            "stocks": f"{settings.API_PREFIX}/stocks",
            "refresh": f"{settings.API_PREFIX}/stocks/refresh",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("stockwatch.main:app", host=settings.HOST, port=settings.PORT, reload=settings.RELOAD)
