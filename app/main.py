"""Entrada principal de la app FastAPI (configura middlewares, excepciones y routers)."""
import logging

from fastapi import FastAPI

from app.api.router import build_api_router
from app.core.config import Settings, settings as default_settings
from app.core.exceptions import register_exception_handlers
from app.core.logging import setup_logging
from app.core.middleware import add_middlewares
from app.infrastructure.db.bootstrap import ensure_collections
from app.infrastructure.db.mongo_async import close_async_db, get_async_db, ping
from app.infrastructure.security.token_service import TokenService

_log = logging.getLogger("users.startup")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings
    setup_logging(settings.log_level)
    app = FastAPI(title=settings.app_name)

    app.state.settings = settings
    # Se crea lazy en la primera petición (ver api.deps.get_user_repository)
    app.state.user_repository = None
    app.state.token_service = TokenService.from_settings(settings) if settings.jwt_configured else None
    if app.state.token_service is None:
        _log.warning("JWT_SECRET no configurado; las rutas protegidas responderán 500")

    add_middlewares(app, settings)
    register_exception_handlers(app)

    @app.on_event("startup")
    async def on_startup():
        db = get_async_db(settings)
        # Garantiza colección/índices mínimos si hay conexión
        if await ping():
            await ensure_collections(db)
        else:
            _log.warning("Mongo no listo; omitiendo ensure_collections()")

    @app.on_event("shutdown")
    async def on_shutdown():
        close_async_db()

    # Monta routers bajo el prefijo configurado
    app.include_router(build_api_router(settings), prefix=settings.api_prefix_normalized)
    return app


app = create_app()
