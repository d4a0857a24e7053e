"""Fachada del cliente de la Trading API.

Responsabilidad:
- Validar credenciales al construir y opciones al llamar (errores síncronos).
- Componer envelope -> transporte -> normalizador por página.
- Delegar en `PaginationAggregator` las llamadas que paginan.

Uso:

    async with EbayClient(config) as client:
        orders = await client.get_orders({"CreateTimeFrom": "...", "CreateTimeTo": "..."})
        for order in orders["GetOrdersResponse"]["OrderArray"]["Order"]:
            ...
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Mapping
from typing import Any

from adapters.http_client import HttpxTransport
from core.config import AppSettings, ClientSettings, load_settings
from core.domain.calls import (
    COMPLETE_SALE,
    GET_ORDERS,
    GET_SELLER_LIST,
    GET_USER,
    CallSpec,
    get_call,
)
from core.domain.credentials import AppCredential, TokenCredential, build_credential
from core.domain.errors import EbayHttpError
from core.interfaces.transport import Transport
from core.services.envelope import build_envelope
from core.services.normalizer import parse_response, raise_for_ack
from core.services.pagination import PaginationAggregator

logger = logging.getLogger(__name__)

Document = dict[str, Any]


class EbayClient:
    """Cliente asíncrono de la Trading API (una instancia por cuenta vendedora).

    Los métodos de operación validan `options` en el momento de la llamada y
    devuelven un awaitable; un `InvalidOptionsError` se lanza antes de
    cualquier petición, sin necesidad de hacer `await`.
    """

    def __init__(
        self,
        config: Mapping[str, Any] | TokenCredential | AppCredential,
        *,
        transport: Transport | None = None,
        settings: ClientSettings | None = None,
    ) -> None:
        self._credential = build_credential(config)
        if isinstance(config, Mapping):
            self.config: dict[str, Any] = dict(config)
        else:
            self.config = config.model_dump(by_alias=True, mode="json")
        self._settings = settings or load_settings(ClientSettings)
        self._transport = transport
        self._owns_transport = transport is None
        self._page_sizes = {
            GET_ORDERS.name: self._settings.orders_page_size,
            GET_SELLER_LIST.name: self._settings.seller_list_page_size,
        }
        self._aggregator = PaginationAggregator(self._fetch_page, max_pages=self._settings.max_pages)

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings | None = None,
        *,
        transport: Transport | None = None,
    ) -> "EbayClient":
        settings = settings or load_settings(AppSettings)
        return cls(settings.credential_config(), transport=transport, settings=settings)

    async def __aenter__(self) -> "EbayClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._transport is not None and self._owns_transport:
            await self._transport.aclose()
            self._transport = None

    @property
    def credential(self) -> TokenCredential | AppCredential:
        return self._credential

    @property
    def is_expired(self) -> bool:
        return self._credential.is_expired

    @property
    def url(self) -> str:
        return self._credential.base_url

    @property
    def headers(self) -> dict[str, str]:
        return self._credential.auth_headers()

    def headers_for(self, call_name: str) -> dict[str, str]:
        headers = self.headers
        headers["X-EBAY-API-CALL-NAME"] = get_call(call_name).request_element
        return headers

    # Operaciones

    def get_seller_list(self, options: object = None) -> Awaitable[Document]:
        """Publicaciones del vendedor (todas las páginas, `ItemArray.Item`)."""

        return self._call(GET_SELLER_LIST, options)

    def get_orders(self, options: object = None) -> Awaitable[Document]:
        """Órdenes completadas como vendedor (todas las páginas, `OrderArray.Order`)."""

        return self._call(GET_ORDERS, options)

    def get_user(self, options: object = None) -> Awaitable[Document]:
        return self._call(GET_USER, options)

    def complete_sale(self, options: object) -> Awaitable[Document]:
        """Marca una línea de orden como enviada (requiere OrderLineItemID y Shipment)."""

        return self._call(COMPLETE_SALE, options)

    def execute(self, call_name: str, options: object = None) -> Awaitable[Document]:
        """Una sola petición (sin agregar páginas) para cualquier llamada registrada."""

        spec = get_call(call_name)
        fields = spec.prepare_options(options)
        return self._fetch_page(spec.name, fields, None)

    # Pipeline

    def _call(self, spec: CallSpec, options: object) -> Awaitable[Document]:
        fields = spec.prepare_options(options)
        if spec.paginated and spec.list_path:
            page_size = self._page_sizes.get(spec.name, spec.page_size or 100)
            return self._aggregator.run_paged(spec.name, fields, page_size, spec.list_path)
        return self._fetch_page(spec.name, fields, None)

    def _get_transport(self) -> Transport:
        if self._transport is None:
            self._transport = HttpxTransport(settings=self._settings)
            self._owns_transport = True
        return self._transport

    async def _fetch_page(
        self,
        call_name: str,
        fields: Mapping[str, Any],
        pagination: tuple[int, int] | None,
    ) -> Document:
        spec = get_call(call_name)
        body = build_envelope(call_name, fields, spec.default_fields(), pagination=pagination)

        if pagination is not None:
            logger.debug("%s: requesting page %d (%d per page)", call_name, pagination[1], pagination[0])
        else:
            logger.debug("%s: sending request", call_name)

        response = await self._get_transport().send(self.url, self.headers_for(call_name), body)
        if response.status_code >= 400:
            raise EbayHttpError(response.status_code, response.text)

        document = parse_response(response.text, spec.repeatable_paths())
        raise_for_ack(document, call_name)
        return document
