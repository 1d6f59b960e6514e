"""
Creación y verificación de JWTs de acceso.

El secreto se recibe explícitamente en el constructor; nada aquí lee del entorno.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict
from uuid import uuid4

# Asegura que usamos PyJWT (no el paquete "jwt" incorrecto)
try:
    import jwt as pyjwt  # PyJWT expone jwt.encode/jwt.decode
    if not hasattr(pyjwt, "encode"):
        raise ImportError("Paquete 'jwt' incorrecto en el entorno")
except ImportError as e:
    raise RuntimeError(
        "Conflicto de librerías JWT: instala PyJWT>=2 y desinstala el paquete 'jwt'. "
        "Ejecuta: pip uninstall jwt && pip install PyJWT"
    ) from e

from app.core.config import Settings

# Claim heredado de tokens emitidos por el login anterior
LEGACY_SUBJECT_CLAIM = "userId"


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Firma y valida access tokens HS256 con un secreto compartido."""

    def __init__(self, secret: str, *, algorithm: str = "HS256", expire_minutes: int = 60) -> None:
        if not secret:
            raise ValueError("El secreto JWT no puede estar vacío")
        self._secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    @classmethod
    def from_settings(cls, cfg: Settings) -> "TokenService":
        return cls(
            cfg.jwt_secret or "",
            algorithm=cfg.jwt_algorithm,
            expire_minutes=cfg.access_token_expire_minutes,
        )

    def create_access_token(self, subject: str, *, expires_in: timedelta | None = None) -> str:
        """
        Genera un JWT válido por `expire_minutes` (o `expires_in`).
        Claims: sub, iat, exp, jti.
        """
        now = _now_utc()
        exp = now + (expires_in if expires_in is not None else timedelta(minutes=self.expire_minutes))
        payload = {
            "sub": str(subject),
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
            "jti": str(uuid4()),
        }
        return pyjwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify_access_token(self, token: str) -> Dict[str, Any]:
        """
        Decodifica y valida firma/expiración. Devuelve payload.
        Lanza `jwt.InvalidTokenError` (o subclase) si no es válido.
        """
        return pyjwt.decode(token, key=self._secret, algorithms=[self.algorithm])

    def subject_of(self, token: str) -> str:
        """Valida el token y devuelve el identificador del usuario (sujeto)."""
        payload = self.verify_access_token(token)
        subject = payload.get("sub") or payload.get(LEGACY_SUBJECT_CLAIM)
        if not subject:
            raise pyjwt.InvalidTokenError("Token sin sujeto")
        return str(subject)
