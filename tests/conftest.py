"""Shared fixtures: credential configs, XML page builders and a recording transport."""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from adapters.ebay_client import EbayClient
from core.config import AppSettings
from core.interfaces.transport import TransportResponse

FIXTURES = Path(__file__).parent / "fixtures"

OAUTH_CONFIG = {
    "email": "testebay@example.com",
    "userId": "testebay00",
    "token": "TOKENTOKENTOKEN",
    "authType": "OAUTH",
    "expire": "2018-07-01T01:31:34.148Z",
    "env": "sandbox",
}

AUTHNAUTH_CONFIG = {
    "email": "testebay@example.com",
    "userId": "testebay00",
    "token": "TOKENTOKENTOKEN",
    "authType": "AUTHNAUTH",
    "expire": "2018-07-01T01:31:34.148Z",
    "env": "sandbox",
    "appConfig": {
        "clientId": "CLIENTIDTEST",
        "devId": "DEVIDTEST",
        "certId": "CERTIDTEST",
    },
}

_PAGE_NUMBER_RE = re.compile(r"<PageNumber>(\d+)</PageNumber>")

Responder = Callable[[str], tuple[int, str]]


def read_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


def _pagination_result(total_pages: int | None, total_entries: int) -> str:
    if total_pages is None:
        return ""
    return (
        "<PaginationResult>"
        f"<TotalNumberOfPages>{total_pages}</TotalNumberOfPages>"
        f"<TotalNumberOfEntries>{total_entries}</TotalNumberOfEntries>"
        "</PaginationResult>"
    )


def seller_list_page(
    item_ids: Sequence[str],
    *,
    page: int = 1,
    total_pages: int | None = 1,
    total_entries: int | None = None,
) -> str:
    items = "".join(
        "<Item>"
        f"<ItemID>{item_id}</ItemID>"
        f"<Title>Phone case {item_id}</Title>"
        "<Quantity>3</Quantity>"
        '<SellingStatus><CurrentPrice currencyID="USD">9.99</CurrentPrice></SellingStatus>'
        "<ListingDetails><EndTime>2018-08-01T00:00:00.000Z</EndTime></ListingDetails>"
        "</Item>"
        for item_id in item_ids
    )
    has_more = "true" if total_pages is not None and page < total_pages else "false"
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<GetSellerListResponse xmlns="urn:ebay:apis:eBLBaseComponents">'
        "<Timestamp>2018-07-05T22:10:25.000Z</Timestamp>"
        "<Ack>Success</Ack>"
        "<Version>1061</Version>"
        + _pagination_result(total_pages, total_entries or len(item_ids))
        + f"<HasMoreItems>{has_more}</HasMoreItems>"
        + (f"<ItemArray>{items}</ItemArray>" if item_ids else "")
        + f"<ItemsPerPage>{len(item_ids)}</ItemsPerPage>"
        f"<PageNumber>{page}</PageNumber>"
        f"<ReturnedItemCountActual>{len(item_ids)}</ReturnedItemCountActual>"
        "</GetSellerListResponse>"
    )


def orders_page(
    order_ids: Sequence[str],
    *,
    page: int = 1,
    total_pages: int | None = 1,
    total_entries: int | None = None,
) -> str:
    orders = "".join(
        "<Order>"
        f"<OrderID>{order_id}</OrderID>"
        "<OrderStatus>Completed</OrderStatus>"
        "<BuyerUserID>buyer01</BuyerUserID>"
        '<Total currencyID="USD">19.98</Total>'
        "<CreatedTime>2018-06-01T10:00:00.000Z</CreatedTime>"
        "<TransactionArray><Transaction>"
        f"<OrderLineItemID>{order_id}-1</OrderLineItemID>"
        "<QuantityPurchased>2</QuantityPurchased>"
        "</Transaction></TransactionArray>"
        "</Order>"
        for order_id in order_ids
    )
    has_more = "true" if total_pages is not None and page < total_pages else "false"
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<GetOrdersResponse xmlns="urn:ebay:apis:eBLBaseComponents">'
        "<Timestamp>2018-07-05T22:10:25.000Z</Timestamp>"
        "<Ack>Success</Ack>"
        "<Version>1061</Version>"
        + _pagination_result(total_pages, total_entries or len(order_ids))
        + f"<HasMoreOrders>{has_more}</HasMoreOrders>"
        + f"<OrderArray>{orders}</OrderArray>"
        + "<OrdersPerPage>100</OrdersPerPage>"
        f"<PageNumber>{page}</PageNumber>"
        f"<ReturnedOrderCountActual>{len(order_ids)}</ReturnedOrderCountActual>"
        "</GetOrdersResponse>"
    )


def page_number_of(body: str) -> int | None:
    match = _PAGE_NUMBER_RE.search(body)
    return int(match.group(1)) if match else None


def paged_responder(pages: Sequence[str]) -> Responder:
    """Responde con `pages[PageNumber - 1]` según el envelope recibido."""

    def respond(body: str) -> tuple[int, str]:
        number = page_number_of(body) or 1
        return 200, pages[number - 1]

    return respond


def fixed_responder(text: str, status: int = 200) -> Responder:
    return lambda body: (status, text)


class RecordingTransport:
    """Transport en memoria que guarda cada request enviado."""

    def __init__(self, responder: Responder) -> None:
        self.responder = responder
        self.requests: list[dict[str, object]] = []
        self.closed = False

    async def send(self, url: str, headers: dict[str, str], body: str) -> TransportResponse:
        self.requests.append({"url": url, "headers": dict(headers), "body": body})
        status, text = self.responder(body)
        return TransportResponse(status_code=status, text=text)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(_env_file=None)


@pytest.fixture
def make_client(settings: AppSettings) -> Callable[..., tuple[EbayClient, RecordingTransport]]:
    def _make(responder: Responder, config: dict | None = None) -> tuple[EbayClient, RecordingTransport]:
        transport = RecordingTransport(responder)
        client = EbayClient(config or OAUTH_CONFIG, transport=transport, settings=settings)
        return client, transport

    return _make
