"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts y headers para todas las llamadas a la Trading API.
- Facilita testeo: se puede sustituir por un stub o por `httpx.MockTransport`.
"""

from __future__ import annotations

import logging

import httpx

from core.config import ClientSettings, load_settings
from core.interfaces.transport import TransportResponse

logger = logging.getLogger(__name__)


def build_async_client(
    settings: ClientSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    Por qué un builder:
    - Centraliza timeouts/headers para que todas las llamadas se comporten igual.
    - `transport` permite inyectar `httpx.MockTransport` en tests.
    """

    settings = settings or load_settings(ClientSettings)
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "text/xml, application/xml;q=0.9, */*;q=0.8",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


class HttpxTransport:
    """Implementación de `core.interfaces.transport.Transport` sobre httpx.

    Si no se le pasa un cliente, crea uno propio y lo cierra en `aclose`.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        settings: ClientSettings | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or build_async_client(settings)

    async def send(self, url: str, headers: dict[str, str], body: str) -> TransportResponse:
        logger.debug("POST %s (%s)", url, headers.get("X-EBAY-API-CALL-NAME", "?"))
        response = await self._client.post(url, headers=headers, content=body.encode("utf-8"))
        logger.debug("POST %s -> HTTP %d", url, response.status_code)
        return TransportResponse(status_code=response.status_code, text=response.text)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
