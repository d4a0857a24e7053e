"""Contratos de llamada de la Trading API.

Cada `CallSpec` reúne lo que distingue a una operación:
- defaults fijos (en orden) que van primero en el envelope,
- el modelo de opciones que valida lo que aporta el caller,
- si pagina, con qué tamaño de página y dónde vive la colección,
- qué rutas de la respuesta son repetibles (siempre lista).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from core.domain.errors import InvalidOptionsError
from core.domain.models import (
    CallOptions,
    CompleteSaleOptions,
    OrdersOptions,
    SellerListOptions,
    UserOptions,
)

XML_NAMESPACE = "urn:ebay:apis:eBLBaseComponents"

# Ruta (sin el elemento raíz) dentro de la respuesta.
FieldPath = tuple[str, ...]


@dataclass(frozen=True)
class CallSpec:
    name: str
    options_model: type[CallOptions]
    defaults: tuple[tuple[str, str], ...] = ()
    paginated: bool = False
    page_size: int | None = None
    list_path: FieldPath | None = None
    repeatable: tuple[FieldPath, ...] = field(default_factory=tuple)

    @property
    def request_element(self) -> str:
        return f"{self.name}Request"

    @property
    def response_element(self) -> str:
        return f"{self.name}Response"

    def default_fields(self) -> dict[str, str]:
        return dict(self.defaults)

    def repeatable_paths(self) -> set[FieldPath]:
        """Rutas absolutas (con la raíz `<Call>Response`) que siempre son lista."""

        paths = {(self.response_element, "Errors")}
        for path in self.repeatable:
            paths.add((self.response_element, *path))
        if self.list_path:
            paths.add((self.response_element, *self.list_path))
        return paths

    def prepare_options(self, options: object) -> dict[str, Any]:
        """Valida `options` contra el esquema de la llamada.

        Acepta `None`, un mapping o una instancia del modelo. Cualquier otra
        cosa (p.ej. un string) es `InvalidOptionsError`.
        """

        if options is None:
            options = {}
        if isinstance(options, self.options_model):
            return options.to_fields()
        if not isinstance(options, Mapping):
            raise InvalidOptionsError(
                self.name,
                f"expected a mapping of fields, got {type(options).__name__}",
            )
        try:
            model = self.options_model.model_validate(dict(options))
        except ValidationError as exc:
            raise InvalidOptionsError(self.name, str(exc)) from exc
        return model.to_fields(order=options.keys())


GET_SELLER_LIST = CallSpec(
    name="GetSellerList",
    options_model=SellerListOptions,
    paginated=True,
    page_size=200,
    list_path=("ItemArray", "Item"),
)

GET_ORDERS = CallSpec(
    name="GetOrders",
    options_model=OrdersOptions,
    defaults=(
        ("WarningLevel", "High"),
        ("OrderRole", "Seller"),
        ("OrderStatus", "Completed"),
    ),
    paginated=True,
    page_size=100,
    list_path=("OrderArray", "Order"),
    repeatable=(("OrderArray", "Order", "TransactionArray", "Transaction"),),
)

GET_USER = CallSpec(
    name="GetUser",
    options_model=UserOptions,
    defaults=(("DetailLevel", "ReturnAll"),),
)

COMPLETE_SALE = CallSpec(
    name="CompleteSale",
    options_model=CompleteSaleOptions,
    defaults=(
        ("ErrorLanguage", "en_US"),
        ("WarningLevel", "High"),
    ),
)

CALLS: dict[str, CallSpec] = {
    spec.name: spec for spec in (GET_SELLER_LIST, GET_ORDERS, GET_USER, COMPLETE_SALE)
}


def get_call(name: str) -> CallSpec:
    try:
        return CALLS[name]
    except KeyError:
        raise KeyError(f"Unknown Trading API call: {name!r}") from None
