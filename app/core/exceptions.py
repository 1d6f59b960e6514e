"""
Errores de dominio y handlers globales para respuestas de error consistentes.

- `Unauthorized` y subclases: rechazos de autorización (401), se resuelven aquí.
- `StoreFailure`: fallas de persistencia; se registran y responden 500 genérico.
"""
import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_401_UNAUTHORIZED


class Unauthorized(Exception):
    """Rechazo de autorización; termina la petición con 401."""

    status_code = HTTP_401_UNAUTHORIZED
    message = "Unauthorised"

    def __init__(self, error: str | None = None) -> None:
        super().__init__(error or self.message)
        self.error = error

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"message": self.message}
        if self.error:
            body["error"] = self.error
        return body


class MissingCredential(Unauthorized):
    message = "Unauthorised, token is needed"


class InvalidCredential(Unauthorized):
    # Incluye el texto del error de verificación en la respuesta
    message = "Unauthorised, token is invalid"


class UnknownSubject(Unauthorized):
    message = "Unauthorised, user is not found"


class StoreFailure(Exception):
    """Error de la capa de persistencia (Mongo)."""


class ConfigurationError(Exception):
    """Falta configuración requerida para atender la petición."""


def _req_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", object()), "request_id", None)


def _with_req_id(request: Request, body: Dict[str, Any]) -> Dict[str, Any]:
    rid = _req_id(request)
    if rid:
        body["request_id"] = rid
    return body


def _req_id_headers(request: Request) -> Dict[str, str] | None:
    # Este handler corre fuera de RequestIdMiddleware; repone el header
    rid = _req_id(request)
    return {"X-Request-Id": rid} if rid else None


def register_exception_handlers(app: FastAPI) -> None:
    log = logging.getLogger("users.errors")

    @app.exception_handler(Unauthorized)
    async def _unauthorized_handler(request: Request, exc: Unauthorized):
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(StarletteHTTPException)
    async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
        body = _with_req_id(request, {"message": exc.detail or "HTTP error"})
        return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def _validation_handler(request: Request, exc: RequestValidationError):
        body = _with_req_id(request, {"message": "Validation error", "errors": exc.errors()})
        return JSONResponse(status_code=422, content=body)

    @app.exception_handler(StoreFailure)
    async def _store_handler(request: Request, exc: StoreFailure):
        log.exception("Store failure request_id=%s", _req_id(request))
        body = _with_req_id(request, {"message": "Internal server error"})
        return JSONResponse(status_code=500, content=body)

    @app.exception_handler(ConfigurationError)
    async def _config_handler(request: Request, exc: ConfigurationError):
        log.error("Configuration error request_id=%s: %s", _req_id(request), exc)
        body = _with_req_id(request, {"message": "Internal server error"})
        return JSONResponse(status_code=500, content=body)

    @app.exception_handler(Exception)
    async def _generic_handler(request: Request, exc: Exception):
        log.exception("Unhandled error request_id=%s", _req_id(request))
        body = _with_req_id(request, {"message": "Internal server error"})
        return JSONResponse(status_code=500, content=body, headers=_req_id_headers(request))
