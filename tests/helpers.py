"""Dobles de prueba compartidos por los tests de API."""

from __future__ import annotations

from typing import Any

from fastapi.testclient import TestClient

from app.api.deps import get_user_repository
from app.core.config import Settings
from app.core.exceptions import StoreFailure
from app.main import create_app
from app.repositories.user_repo import CREDENTIAL_FIELD

SECRET = "test-secret-for-users-api-0123456789"


class FakeUserRepository:
    """Repositorio en memoria con la misma interfaz que `UserRepository`."""

    def __init__(self, users: list[dict[str, Any]] | None = None, *, fail: bool = False) -> None:
        self.users = [dict(u) for u in users or []]
        self.fail = fail
        self.lookups: list[str] = []

    async def list_users(self) -> list[dict[str, Any]]:
        if self.fail:
            raise StoreFailure("list_users: connection refused")
        return [{k: v for k, v in u.items() if k != CREDENTIAL_FIELD} for u in self.users]

    async def get_user_by_id(self, user_id: str, *, with_credential: bool = False) -> dict[str, Any] | None:
        self.lookups.append(user_id)
        if self.fail:
            raise StoreFailure("get_user_by_id: connection refused")
        for u in self.users:
            if u.get("id") == user_id:
                if with_credential:
                    return dict(u)
                return {k: v for k, v in u.items() if k != CREDENTIAL_FIELD}
        return None


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {"jwt_secret": SECRET, "api_prefix": "/api/v1", "users_prefix": "/users"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_client(repo: FakeUserRepository, **overrides: Any) -> TestClient:
    app = create_app(make_settings(**overrides))
    app.dependency_overrides[get_user_repository] = lambda: repo
    return TestClient(app, raise_server_exceptions=False)


def _matches(doc: dict[str, Any], filtro: dict[str, Any]) -> bool:
    for key, cond in filtro.items():
        if isinstance(cond, dict) and "$in" in cond:
            if doc.get(key) not in cond["$in"]:
                return False
        elif doc.get(key) != cond:
            return False
    return True


def _project(doc: dict[str, Any], projection: dict[str, int] | None) -> dict[str, Any]:
    if not projection:
        return dict(doc)
    return {k: v for k, v in doc.items() if projection.get(k, 1)}


class FakeCursor:
    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs

    async def to_list(self, length: int | None = None) -> list[dict[str, Any]]:
        return list(self._docs)


class FakeCollection:
    def __init__(self, docs: list[dict[str, Any]], error: Exception | None = None) -> None:
        self.docs = docs
        self.error = error
        self.filters: list[dict[str, Any]] = []

    def find(self, filtro: dict[str, Any], projection: dict[str, int] | None = None) -> FakeCursor:
        if self.error:
            raise self.error
        return FakeCursor([_project(d, projection) for d in self.docs if _matches(d, filtro)])

    async def find_one(self, filtro: dict[str, Any], projection: dict[str, int] | None = None):
        self.filters.append(filtro)
        if self.error:
            raise self.error
        for d in self.docs:
            if _matches(d, filtro):
                return _project(d, projection)
        return None


class FakeDatabase:
    def __init__(self, coll: FakeCollection) -> None:
        self.coll = coll
        self.requested: list[str] = []

    def __getitem__(self, name: str) -> FakeCollection:
        self.requested.append(name)
        return self.coll
