"""Configuración central de la aplicación (Pydantic Settings).

- Carga variables desde .env en la raíz del proyecto.
- Agrupa ajustes por área: App, CORS, Mongo, Auth/JWT, Logging.
"""
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resuelve el .env ubicado en la raíz del proyecto (independiente del CWD)
ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


def _normalize_prefix(value: str | None) -> str:
    pref = (value or "").strip()
    if not pref:
        return ""
    if not pref.startswith("/"):
        pref = "/" + pref
    # FastAPI no acepta prefijos terminados en "/"
    return pref.rstrip("/")


class Settings(BaseSettings):
    """Variables de configuración con valores por defecto razonables.

    Nota: los valores pueden sobreescribirse vía variables de entorno (.env).
    """
    # App
    app_name: str = "Users API"
    api_prefix: str = "/api/v1"
    users_prefix: str = "/users"

    # CORS
    cors_origins: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]
    cors_allow_any: bool = False  # Permite todos los orígenes (usa con cuidado)

    # Mongo
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "users_db"
    mongo_tls: bool = False
    # TLS relax options (dev only)
    mongo_tls_insecure: bool = False
    mongo_server_selection_timeout_ms: int = 15000

    # Auth / JWT
    jwt_secret: str | None = None
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # Logging
    log_level: str = "INFO"

    # --- Utilidades derivadas / helpers ---
    @property
    def api_prefix_normalized(self) -> str:
        """Devuelve `api_prefix` con formato consistente.

        - Siempre inicia con '/'
        - Sin "/" final
        - Si está vacío o es "/", devuelve ""
        """
        return _normalize_prefix(self.api_prefix)

    @property
    def users_prefix_normalized(self) -> str:
        return _normalize_prefix(self.users_prefix)

    @property
    def jwt_configured(self) -> bool:
        return bool(self.jwt_secret)

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # no fallar si hay variables no usadas
    )


settings = Settings()
