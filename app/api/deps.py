"""
Dependencias reutilizables para routers (FastAPI Depends).

- Repositorio de usuarios y servicio de tokens, tomados de `app.state`.
- Autorización: extrae y valida el Bearer token, devuelve el usuario actual.
- Mantener esta capa delgada: sin lógica de negocio pesada.
"""
import logging
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends, Header, Request

from app.core.exceptions import ConfigurationError, InvalidCredential, MissingCredential, UnknownSubject
from app.infrastructure.db.mongo_async import get_async_db
from app.infrastructure.security.token_service import TokenService
from app.repositories.user_repo import UserRepository

_log = logging.getLogger("users.auth")

BEARER_SCHEME = "Bearer"


def get_user_repository(request: Request) -> UserRepository:
    repo = getattr(request.app.state, "user_repository", None)
    if repo is None:
        repo = UserRepository(get_async_db(request.app.state.settings))
        request.app.state.user_repository = repo
    return repo


def get_token_service(request: Request) -> TokenService:
    tokens = getattr(request.app.state, "token_service", None)
    if tokens is None:
        raise ConfigurationError("JWT_SECRET no configurado; no se pueden validar tokens")
    return tokens


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Devuelve el token de `Authorization: Bearer <token>` o None."""
    if not authorization or not authorization.startswith(BEARER_SCHEME):
        return None
    # Un solo espacio separa esquema y token; "Bearer  x" no trae token
    parts = authorization.split(" ")
    if len(parts) < 2:
        return None
    return parts[1] or None


class UserAuthorizer:
    """Resuelve un Bearer token a un usuario existente o lanza `Unauthorized`."""

    def __init__(self, tokens: TokenService, users: UserRepository) -> None:
        self.tokens = tokens
        self.users = users

    async def authorise(self, authorization: Optional[str]) -> Dict[str, Any]:
        token = extract_bearer_token(authorization)
        if not token:
            raise MissingCredential()

        try:
            user_id = self.tokens.subject_of(token)
        except jwt.PyJWTError as e:
            _log.info("Token rechazado: %s", e)
            raise InvalidCredential(str(e)) from e

        # Fallas del store se propagan al handler genérico
        user = await self.users.get_user_by_id(user_id, with_credential=True)
        if not user:
            _log.info("Token válido para usuario inexistente sub=%s", user_id)
            raise UnknownSubject()
        return user


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    tokens: TokenService = Depends(get_token_service),
    users: UserRepository = Depends(get_user_repository),
) -> Dict[str, Any]:
    user = await UserAuthorizer(tokens, users).authorise(authorization)
    request.state.user = user
    return user
