"""Agregador de routers de la API."""
from fastapi import APIRouter

from app.api.routers import health, users
from app.core.config import Settings


def build_api_router(settings: Settings) -> APIRouter:
    api_router = APIRouter()
    api_router.include_router(health.router)
    api_router.include_router(users.router, prefix=settings.users_prefix_normalized)
    return api_router
