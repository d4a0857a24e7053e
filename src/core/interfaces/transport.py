"""Contrato del transporte HTTP.

Por qué Protocol:
- El core solo necesita "POST url+headers+body -> (status, body)".
- Permite sustituir httpx por un stub en tests sin herencia rígida.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    text: str


@runtime_checkable
class Transport(Protocol):
    """Contrato mínimo para enviar un envelope.

    Reglas de diseño:
    - `send` es asíncrono porque hace I/O.
    - Los timeouts/cancelación son responsabilidad de la implementación.
    - Un fallo de red se propaga como excepción, no como status.
    """

    async def send(self, url: str, headers: dict[str, str], body: str) -> TransportResponse:
        """Envía `body` por POST y devuelve status + texto de respuesta."""

        ...

    async def aclose(self) -> None:
        """Libera recursos (conexiones) del transporte."""

        ...
