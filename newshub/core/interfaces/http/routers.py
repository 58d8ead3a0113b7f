"""API router configuration."""

from fastapi import APIRouter

from newshub.modules.feeds.interfaces.router import router as feeds_router

api_router = APIRouter()

# Feeds
api_router.include_router(feeds_router)
