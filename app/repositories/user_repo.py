"""Repositorio asíncrono de la colección `user` (Motor).

Devuelve dicts planos listos para JSON: `_id` se expone como `id` (str).
Errores de Mongo se envuelven en `StoreFailure`.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from app.core.exceptions import StoreFailure

USER_COLL = "user"
CREDENTIAL_FIELD = "password"


def _id_filter(user_id: str) -> Dict[str, Any]:
    # Los ids pueden venir como ObjectId o como string plano
    if ObjectId.is_valid(user_id):
        return {"_id": {"$in": [ObjectId(user_id), user_id]}}
    return {"_id": user_id}


def _jsonable(value: Any) -> Any:
    # ObjectId puede aparecer en listas de referencias o subdocumentos
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def serialize_user(doc: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if "_id" in doc:
        out["id"] = str(doc["_id"])
    for k, v in doc.items():
        if k == "_id":
            continue
        out[k] = _jsonable(v)
    return out


class UserRepository:
    """Consultas de lectura sobre usuarios."""

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._coll = db[USER_COLL]

    async def list_users(self) -> List[Dict[str, Any]]:
        """Todos los usuarios en orden natural, sin el campo de credencial."""
        try:
            docs = await self._coll.find({}, {CREDENTIAL_FIELD: 0}).to_list(length=None)
        except PyMongoError as e:
            raise StoreFailure(f"list_users: {e}") from e
        return [serialize_user(d) for d in docs]

    async def get_user_by_id(self, user_id: str, *, with_credential: bool = False) -> Optional[Dict[str, Any]]:
        projection = None if with_credential else {CREDENTIAL_FIELD: 0}
        try:
            doc = await self._coll.find_one(_id_filter(user_id), projection)
        except PyMongoError as e:
            raise StoreFailure(f"get_user_by_id: {e}") from e
        return serialize_user(doc) if doc else None
