"""
Esquemas Pydantic de respuesta para la colección `user`.

Los documentos son de forma libre: sólo `id` es fijo y nunca se expone
el campo de credencial.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class UserListOut(BaseModel):
    success: bool = True
    data: List[Dict[str, Any]]


class UserOut(BaseModel):
    success: bool = True
    data: Optional[Dict[str, Any]] = None


class StubOut(BaseModel):
    """Respuesta fija de los endpoints aún no implementados."""
    title: str
