"""Errores del cliente eBay.

Por qué una jerarquía propia:
- El caller puede capturar `EbayClientError` sin conocer httpx ni xmltodict.
- Los errores de validación (credenciales, opciones) se lanzan de forma
  síncrona; los de red/parseo/API aparecen al hacer `await`.
"""

from __future__ import annotations

from typing import Any


class EbayClientError(Exception):
    """Base de todos los errores del cliente."""


class NoAuthTokenError(EbayClientError):
    def __init__(self, message: str = "An auth token is required to build the client.") -> None:
        super().__init__(message)


class InvalidAuthNAuthConfigError(EbayClientError):
    def __init__(
        self,
        message: str = "AUTHNAUTH requires appConfig with clientId, devId and certId.",
    ) -> None:
        super().__init__(message)


class NotSupportedAuthTypeError(EbayClientError):
    def __init__(self, auth_type: object) -> None:
        self.auth_type = auth_type
        super().__init__(f"Auth type {auth_type!r} is not supported (use OAUTH or AUTHNAUTH).")


class InvalidCredentialConfigError(EbayClientError):
    """La configuración de credenciales tiene campos inválidos (env, expire...)."""


class InvalidOptionsError(EbayClientError):
    def __init__(self, call_name: str, detail: str) -> None:
        self.call_name = call_name
        self.detail = detail
        super().__init__(f"Invalid options for {call_name}: {detail}")


class ResponseParseError(EbayClientError):
    """La respuesta no es XML bien formado."""


class EbayHttpError(EbayClientError):
    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"eBay API returned HTTP {status_code}")


class EbayApiError(EbayClientError):
    """`Ack=Failure` en la respuesta.

    `errors` conserva las entradas `Errors` decodificadas tal cual.
    """

    def __init__(self, call_name: str, errors: list[dict[str, Any]]) -> None:
        self.call_name = call_name
        self.errors = errors
        messages = [
            str(e.get("LongMessage") or e.get("ShortMessage") or e.get("ErrorCode"))
            for e in errors
            if isinstance(e, dict)
        ]
        detail = "; ".join(messages) if messages else "no error details"
        super().__init__(f"{call_name} failed: {detail}")


class PaginationLimitError(EbayClientError):
    """La llamada reporta más páginas que `max_pages`; no se devuelve nada parcial."""

    def __init__(self, call_name: str, total_pages: int, max_pages: int) -> None:
        self.call_name = call_name
        self.total_pages = total_pages
        self.max_pages = max_pages
        super().__init__(
            f"{call_name} reports {total_pages} pages, above the {max_pages} page limit"
        )
