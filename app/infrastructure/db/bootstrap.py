"""
Bootstrap de la base Mongo: asegura la colección `user` y sus índices mínimos.
Se ejecuta al inicio de la app. No tumba la app si algo falla; deja warnings.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from app.repositories.user_repo import USER_COLL

_log = logging.getLogger("users.mongo.bootstrap")

USER_INDEXES: List[Dict[str, Any]] = [
    {"keys": [("email", 1)], "unique": True, "sparse": True, "name": "uniq_email"},
]


async def _ensure_collection(db: AsyncIOMotorDatabase, name: str) -> None:
    try:
        if name not in await db.list_collection_names():
            await db.create_collection(name)
    except PyMongoError as e:
        # Puede existir ya (carrera entre workers) o faltar privilegios
        _log.warning("No se pudo crear la colección '%s': %s", name, e)


async def _ensure_indexes(db: AsyncIOMotorDatabase, name: str, indexes: List[Dict[str, Any]]) -> None:
    coll = db[name]
    for ix in indexes:
        opts = dict(ix)
        keys = opts.pop("keys")
        try:
            await coll.create_index(keys, **opts)
        except PyMongoError as e:
            # Ignora fallas de índice (e.g., datos no únicos previos)
            _log.warning("No se pudo crear índice en '%s' (%s): %s", name, keys, e)


async def ensure_collections(db: AsyncIOMotorDatabase) -> None:
    """Garantiza la colección `user` y sus índices."""
    await _ensure_collection(db, USER_COLL)
    await _ensure_indexes(db, USER_COLL, USER_INDEXES)
