"""Modelos de opciones por llamada (Pydantic v2).

Por qué un esquema por llamada:
- Cada operación declara qué campos son obligatorios y cómo se anidan,
  en vez de aceptar cualquier objeto y descubrir el error en eBay.
- Los alias PascalCase son los nombres de elemento XML; `populate_by_name`
  permite usar también snake_case desde Python.

Nota:
- `extra="allow"`: los campos no declarados viajan tal cual al envelope.
- `to_fields` respeta el orden de claves del caller.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class CallOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_fields(self, order: Iterable[str] = ()) -> dict[str, Any]:
        """Campos listos para el envelope (nombres XML, sin `None`).

        `order` son las claves tal como las pasó el caller (alias o nombre
        Python); esos campos salen primero y en ese orden.
        """

        dumped = self.model_dump(by_alias=True, exclude_none=True)
        fields: dict[str, Any] = {}
        for key in order:
            info = type(self).model_fields.get(key)
            name = info.alias if info is not None and info.alias else key
            if name in dumped:
                fields[name] = dumped.pop(name)
        fields.update(dumped)
        return fields


class SellerListOptions(CallOptions):
    start_time_from: str | datetime | None = Field(
        default=None,
        alias="StartTimeFrom",
        description="Inicio del rango de fecha de publicación.",
    )
    start_time_to: str | datetime | None = Field(default=None, alias="StartTimeTo")
    end_time_from: str | datetime | None = Field(
        default=None,
        alias="EndTimeFrom",
        description="Inicio del rango de fecha de fin de publicación.",
    )
    end_time_to: str | datetime | None = Field(default=None, alias="EndTimeTo")
    detail_level: str | None = Field(default=None, alias="DetailLevel")
    granularity_level: str | None = Field(default=None, alias="GranularityLevel")
    include_variations: bool | None = Field(default=None, alias="IncludeVariations")
    user_id: str | None = Field(
        default=None,
        alias="UserID",
        description="Vendedor a listar (por defecto, el dueño del token).",
    )


class OrdersOptions(CallOptions):
    create_time_from: str | datetime | None = Field(
        default=None,
        alias="CreateTimeFrom",
        description="Inicio del rango de creación de órdenes.",
    )
    create_time_to: str | datetime | None = Field(default=None, alias="CreateTimeTo")
    mod_time_from: str | datetime | None = Field(default=None, alias="ModTimeFrom")
    mod_time_to: str | datetime | None = Field(default=None, alias="ModTimeTo")
    number_of_days: int | None = Field(
        default=None,
        alias="NumberOfDays",
        ge=1,
        le=30,
        description="Alternativa a los rangos: últimos N días.",
    )
    order_id_array: dict[str, Any] | None = Field(
        default=None,
        alias="OrderIDArray",
        description="Filtro por IDs: {'OrderID': [...]}.",
    )


class UserOptions(CallOptions):
    user_id: str | None = Field(default=None, alias="UserID")
    item_id: str | None = Field(default=None, alias="ItemID")


class ShipmentTrackingDetails(CallOptions):
    shipment_tracking_number: str = Field(..., alias="ShipmentTrackingNumber", min_length=1)
    shipping_carrier_used: str = Field(..., alias="ShippingCarrierUsed", min_length=1)


class Shipment(CallOptions):
    shipment_tracking_details: ShipmentTrackingDetails | list[ShipmentTrackingDetails] | None = Field(
        default=None,
        alias="ShipmentTrackingDetails",
        description="Uno o varios números de seguimiento.",
    )
    shipped_time: str | datetime | None = Field(default=None, alias="ShippedTime")


class CompleteSaleOptions(CallOptions):
    order_line_item_id: str = Field(
        ...,
        alias="OrderLineItemID",
        min_length=1,
        description="Línea de la orden a marcar (ItemID-TransactionID).",
    )
    shipment: Shipment = Field(..., alias="Shipment")
    item_id: str | None = Field(default=None, alias="ItemID")
    transaction_id: str | None = Field(default=None, alias="TransactionID")
    order_id: str | None = Field(default=None, alias="OrderID")
    paid: bool | None = Field(default=None, alias="Paid")
    shipped: bool | None = Field(default=None, alias="Shipped")
