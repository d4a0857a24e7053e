"""Credenciales de la Trading API (Pydantic v2).

Por qué una unión etiquetada:
- `authType` determina por completo qué forma deben tener los datos
  (token OAuth vs. app AuthNAuth); no hay herencia de comportamiento.
- Los modelos son `frozen`: se construyen una vez y se comparten entre
  llamadas concurrentes sin riesgo.

Nota:
- La expiración solo se reporta (`is_expired`); este módulo no renueva tokens.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator
from pydantic.config import ConfigDict

from core.domain.environment import Environment
from core.domain.errors import (
    InvalidAuthNAuthConfigError,
    InvalidCredentialConfigError,
    NoAuthTokenError,
    NotSupportedAuthTypeError,
)

COMPATIBILITY_LEVEL = "1061"
SITE_ID = "0"


class AuthType(str, Enum):
    OAUTH = "OAUTH"
    AUTHNAUTH = "AUTHNAUTH"


class AppConfig(BaseModel):
    """Claves de la aplicación registrada en el portal de desarrolladores."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    client_id: str = Field(..., alias="clientId", min_length=1, description="App ID (App name).")
    dev_id: str = Field(..., alias="devId", min_length=1, description="Dev ID.")
    cert_id: str = Field(..., alias="certId", min_length=1, description="Cert ID.")


class _CredentialBase(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    email: str | None = Field(default=None, description="Email de la cuenta vendedora.")
    user_id: str | None = Field(default=None, alias="userId", description="eBay user ID.")
    token: str = Field(..., min_length=1, description="Token de acceso (OAuth o Auth'n'Auth).")
    expire: datetime | None = Field(
        default=None,
        description="Momento de expiración del token (UTC si no trae zona).",
    )
    environment: Environment = Field(
        default=Environment.SANDBOX,
        validation_alias=AliasChoices("environment", "env"),
        description="sandbox o production.",
    )

    @field_validator("expire")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def is_expired(self) -> bool:
        if self.expire is None:
            return False
        return self.expire <= datetime.now(timezone.utc)

    @property
    def base_url(self) -> str:
        return self.environment.base_url

    def _common_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "text/xml",
            "X-EBAY-API-COMPATIBILITY-LEVEL": COMPATIBILITY_LEVEL,
            "X-EBAY-API-SITEID": SITE_ID,
        }


class TokenCredential(_CredentialBase):
    """Credencial OAuth: el token viaja como `Bearer` en `X-EBAY-API-IAF-TOKEN`."""

    auth_type: Literal[AuthType.OAUTH] = Field(default=AuthType.OAUTH, alias="authType")

    def auth_headers(self) -> dict[str, str]:
        headers = self._common_headers()
        headers["X-EBAY-API-IAF-TOKEN"] = f"Bearer {self.token}"
        return headers


class AppCredential(_CredentialBase):
    """Credencial Auth'n'Auth: identifica la app con sus tres claves."""

    auth_type: Literal[AuthType.AUTHNAUTH] = Field(default=AuthType.AUTHNAUTH, alias="authType")
    app_config: AppConfig = Field(..., alias="appConfig")

    def auth_headers(self) -> dict[str, str]:
        headers = self._common_headers()
        headers["X-EBAY-API-APP-NAME"] = self.app_config.client_id
        headers["X-EBAY-API-DEV-NAME"] = self.app_config.dev_id
        headers["X-EBAY-API-CERT-NAME"] = self.app_config.cert_id
        return headers


Credential = Annotated[Union[TokenCredential, AppCredential], Field(discriminator="auth_type")]


def _parse_auth_type(value: object) -> AuthType:
    if isinstance(value, AuthType):
        return value
    if isinstance(value, str):
        try:
            return AuthType(value.strip().upper())
        except ValueError:
            pass
    raise NotSupportedAuthTypeError(value)


def build_credential(raw: Mapping[str, Any] | TokenCredential | AppCredential) -> TokenCredential | AppCredential:
    """Valida una configuración cruda y devuelve la credencial congelada.

    Orden de validación:
    1) token presente y no vacío (`NoAuthTokenError`)
    2) authType reconocido (`NotSupportedAuthTypeError`)
    3) appConfig completo si authType es AUTHNAUTH (`InvalidAuthNAuthConfigError`)
    """

    if isinstance(raw, (TokenCredential, AppCredential)):
        return raw
    if not isinstance(raw, Mapping):
        raise InvalidCredentialConfigError(
            f"Credential config must be a mapping, got {type(raw).__name__}."
        )

    token = raw.get("token")
    if not isinstance(token, str) or not token.strip():
        raise NoAuthTokenError()

    auth_type = _parse_auth_type(raw.get("authType", raw.get("auth_type")))

    data = {k: v for k, v in raw.items() if k != "auth_type"}
    data["authType"] = auth_type

    model: type[TokenCredential] | type[AppCredential] = TokenCredential
    if auth_type is AuthType.AUTHNAUTH:
        if not (raw.get("appConfig") or raw.get("app_config")):
            raise InvalidAuthNAuthConfigError()
        model = AppCredential

    try:
        return model.model_validate(data)
    except ValidationError as exc:
        bad_app_config = any(
            err["loc"] and err["loc"][0] in ("appConfig", "app_config") for err in exc.errors()
        )
        if bad_app_config:
            raise InvalidAuthNAuthConfigError() from exc
        raise InvalidCredentialConfigError(str(exc)) from exc
