"""newsHub Backend - 多源新闻标题聚合服务入口。"""

from fastapi import FastAPI
from fastapi.concurrency import asynccontextmanager
from fastapi.routing import APIRoute
from loguru import logger
from starlette.middleware.cors import CORSMiddleware

from newshub.core.config import settings
from newshub.core.domain.exceptions import DomainException
from newshub.core.infrastructure.logging import setup_logging
from newshub.core.interfaces.http.exceptions import (
    domain_exception_handler,
    global_exception_handler,
)
from newshub.core.interfaces.http.routers import api_router
from newshub.modules.feeds.application import dependencies as feeds_app_deps
from newshub.modules.feeds.infrastructure import dependencies as feeds_infra_deps


def custom_generate_unique_id(route: APIRoute) -> str:
    """Generate unique operation IDs for OpenAPI."""
    if route.tags:
        return f"{route.tags[0]}-{route.name}"
    return route.name


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Application lifespan manager."""
    setup_logging()
    logger.info("Starting newsHub backend...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    scheduler = feeds_infra_deps.get_feed_scheduler()
    if settings.FEED_SCHEDULER_ENABLED:
        scheduler.start()

    yield

    logger.info("Shutting down newsHub backend...")
    await scheduler.stop()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description=(
        "多源新闻标题聚合 - 抓取、解析、排序一体化\n\n"
        "每个源按候选 feed 地址依次回退，单个源失败不影响其他源。"
    ),
    version="0.1.0",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url=f"{settings.API_V1_STR}/docs",
    redoc_url=f"{settings.API_V1_STR}/redoc",
    root_path=settings.ROOTPATH,
    generate_unique_id_function=custom_generate_unique_id,
    lifespan=lifespan,
)

# Dependency overrides (application -> infrastructure)
app.dependency_overrides[feeds_app_deps.get_feed_scheduler] = (
    feeds_infra_deps.get_feed_scheduler
)

# Exception handlers
app.add_exception_handler(DomainException, domain_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# CORS middleware
if settings.all_cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.all_cors_origins,
        allow_credentials=True,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )

# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint.

    返回调度器状态以及各源最近一次结果的汇总。
    """
    scheduler = feeds_infra_deps.get_feed_scheduler()
    snapshot = scheduler.store.snapshot()

    statuses = [slot.status.value for slot in snapshot.slots]
    failed = statuses.count("failure")

    if not scheduler.is_running and settings.FEED_SCHEDULER_ENABLED:
        overall_status = "degraded"
    elif failed and failed == len(statuses):
        overall_status = "unhealthy"
    else:
        overall_status = "healthy"

    return {
        "status": overall_status,
        "environment": settings.ENVIRONMENT,
        "version": "0.1.0",
        "scheduler": {
            "running": scheduler.is_running,
            "interval_sec": scheduler.interval_sec,
            "cycles_completed": snapshot.cycles_completed,
            "last_updated_at": snapshot.last_updated_at,
        },
        "sources": {
            "total": len(statuses),
            "failed": failed,
        },
    }


@app.get("/", tags=["root"])
async def root():
    """Root endpoint."""
    return {
        "message": "Welcome to newsHub API",
        "docs": f"{settings.API_V1_STR}/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.SERVER_PORT,
        reload=settings.ENVIRONMENT == "local",
    )
