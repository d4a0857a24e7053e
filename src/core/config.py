"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que el cliente y el transporte lean config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, TypeVar

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.environment import Environment
from core.domain.errors import InvalidCredentialConfigError


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "ebay-d2"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "ebay-d2"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "ebay-d2"
    return Path.home() / ".config" / "ebay-d2"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario.

    Los valores `None` no pisan lo que ya exista.
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# ebay-d2 user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class ClientSettings(BaseSettings):
    """Configuración de transporte y paginación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.

    Nota:
    - No declara campos de credencial: un cliente construido con una
      credencial explícita no depende de `EBAY_D2_TOKEN`, `EBAY_D2_EXPIRE`...
    """

    model_config = SettingsConfigDict(
        env_prefix="EBAY_D2_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout por request a la Trading API (segundos).",
    )
    user_agent: str = Field(
        default="ebay-d2/0.1",
        min_length=1,
        description="User-Agent de las peticiones.",
    )

    orders_page_size: int = Field(
        default=100,
        ge=1,
        le=100,
        description="EntriesPerPage para GetOrders (máximo de eBay: 100).",
    )
    seller_list_page_size: int = Field(
        default=200,
        ge=1,
        le=200,
        description="EntriesPerPage para GetSellerList (máximo de eBay: 200).",
    )
    max_pages: int = Field(
        default=1000,
        ge=1,
        description="Tope de páginas por llamada agregada.",
    )


class AppSettings(ClientSettings):
    """Configuración completa de la CLI: transporte + credencial.

    Los campos de credencial se validan de verdad en
    `core.domain.credentials.build_credential`; aquí solo se transportan.
    """

    email: str | None = Field(default=None, description="Email de la cuenta vendedora.")
    user_id: str | None = Field(default=None, description="eBay user ID.")
    token: str | None = Field(default=None, description="Token OAuth o Auth'n'Auth.")
    auth_type: str = Field(default="OAUTH", description="OAUTH o AUTHNAUTH.")
    expire: datetime | None = Field(default=None, description="Expiración del token.")
    environment: Environment = Field(
        default=Environment.SANDBOX,
        description="sandbox o production.",
    )
    client_id: str | None = Field(default=None, description="App ID (solo AUTHNAUTH).")
    dev_id: str | None = Field(default=None, description="Dev ID (solo AUTHNAUTH).")
    cert_id: str | None = Field(default=None, description="Cert ID (solo AUTHNAUTH).")

    def credential_config(self) -> dict[str, Any]:
        """Configuración cruda de credencial, con la forma que espera `EbayClient`."""

        config: dict[str, Any] = {
            "email": self.email,
            "userId": self.user_id,
            "token": self.token,
            "authType": self.auth_type,
            "expire": self.expire,
            "environment": self.environment.value,
        }
        if self.client_id or self.dev_id or self.cert_id:
            config["appConfig"] = {
                "clientId": self.client_id,
                "devId": self.dev_id,
                "certId": self.cert_id,
            }
        return config


SettingsT = TypeVar("SettingsT", bound=ClientSettings)


def load_settings(settings_cls: type[SettingsT] = AppSettings, **values: Any) -> SettingsT:
    """Instancia settings desde env/.env traduciendo errores de validación.

    Un `EBAY_D2_*` mal formado se reporta como `InvalidCredentialConfigError`
    en vez de un `ValidationError` de pydantic.
    """

    try:
        return settings_cls(**values)
    except ValidationError as exc:
        raise InvalidCredentialConfigError(f"Invalid EBAY_D2_* configuration: {exc}") from exc
