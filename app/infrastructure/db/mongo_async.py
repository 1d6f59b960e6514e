"""Cliente MongoDB asíncrono (Motor).

Un único cliente por proceso, inicializado de forma lazy y cerrado en el shutdown.
"""
from __future__ import annotations

import logging
from typing import Optional

import certifi
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from app.core.config import Settings, settings as default_settings

_log = logging.getLogger("users.mongo")

_aclient: Optional[AsyncIOMotorClient] = None
_adb: Optional[AsyncIOMotorDatabase] = None


def _build_async_client(cfg: Settings) -> AsyncIOMotorClient:
    uri = cfg.mongo_uri
    kwargs = dict(serverSelectionTimeoutMS=cfg.mongo_server_selection_timeout_ms)
    if uri.startswith("mongodb+srv://"):
        # SRV ya implica TLS; proveemos CA bundle para robustez
        kwargs["tlsCAFile"] = certifi.where()
    elif cfg.mongo_tls:
        kwargs["tls"] = True
        kwargs["tlsCAFile"] = certifi.where()
        if cfg.mongo_tls_insecure:
            kwargs["tlsAllowInvalidCertificates"] = True
            kwargs["tlsAllowInvalidHostnames"] = True
    return AsyncIOMotorClient(uri, **kwargs)


def get_async_db(cfg: Settings | None = None) -> AsyncIOMotorDatabase:
    """Devuelve la DB asíncrona; inicializa lazy un único cliente/bd."""
    global _aclient, _adb
    if _adb is None:
        cfg = cfg or default_settings
        _aclient = _aclient or _build_async_client(cfg)
        _adb = _aclient[cfg.mongo_db]
        _log.info("Motor listo (db=%s)", cfg.mongo_db)
    return _adb


async def ping() -> bool:
    """True si el servidor responde a `ping`; no lanza."""
    if _adb is None:
        return False
    try:
        await _adb.command("ping")
        return True
    except Exception as e:
        _log.warning("Mongo no accesible: %s", e)
        return False


def db_ready() -> bool:
    return _adb is not None


def close_async_db() -> None:
    global _aclient, _adb
    if _aclient is not None:
        _aclient.close()
        _log.info("Motor cerrado")
    _aclient = None
    _adb = None
