"""
Endpoints del recurso `user`.

- Lectura: listado completo y detalle por id (este último requiere Bearer token).
- Crear/actualizar/eliminar: placeholders sin persistencia.
- Errores del store no se capturan aquí; los resuelve el handler global.
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from app.api.deps import get_current_user, get_user_repository
from app.api.schemas.user import StubOut, UserListOut, UserOut
from app.repositories.user_repo import UserRepository

router = APIRouter(tags=["Users"])


@router.get("/", response_model=UserListOut, summary="Listar usuarios")
async def get_users(users: UserRepository = Depends(get_user_repository)) -> UserListOut:
    return UserListOut(success=True, data=await users.list_users())


@router.get(
    "/{user_id}",
    response_model=UserOut,
    summary="Detalle de usuario (sin credencial)",
    responses={status.HTTP_401_UNAUTHORIZED: {"description": "Token ausente, inválido o usuario inexistente"}},
)
async def get_user(
    user_id: str,
    _current: Dict[str, Any] = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
) -> UserOut:
    # Sin rama 404: si no existe, data=None
    return UserOut(success=True, data=await users.get_user_by_id(user_id))


@router.post("/", response_model=StubOut, summary="Crear usuario (no implementado)")
async def create_user() -> StubOut:
    return StubOut(title="CREATE new user")


@router.put("/{user_id}", response_model=StubOut, summary="Actualizar usuario (no implementado)")
async def update_user(user_id: str) -> StubOut:
    return StubOut(title="UPDATE user")


@router.delete("/{user_id}", response_model=StubOut, summary="Eliminar usuario (no implementado)")
async def delete_user(user_id: str) -> StubOut:
    return StubOut(title="DELETE user")
