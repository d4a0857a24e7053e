"""Normalización de respuestas XML -> dict.

Regla de listas:
- xmltodict devuelve un dict cuando un elemento aparece una vez y una lista
  cuando aparece varias. Para las rutas declaradas como repetibles por el
  contrato de la llamada forzamos siempre lista, así el caller nunca
  distingue "un item" de "muchos".
"""

from __future__ import annotations

from collections.abc import Collection
from typing import Any
from xml.parsers.expat import ExpatError

import xmltodict

from core.domain.errors import EbayApiError, ResponseParseError

PathKey = tuple[str, ...]


def _force_list_for(repeatable: Collection[PathKey]):
    paths = {tuple(p) for p in repeatable}

    def force_list(path: list[tuple[str, Any]] | None, key: str, value: Any) -> bool:
        parents = tuple(name for name, _attrs in (path or []))
        return (*parents, key) in paths

    return force_list


def parse_response(xml_text: str | bytes, repeatable: Collection[PathKey] = ()) -> dict[str, Any]:
    """Decodifica el XML de respuesta.

    `repeatable` son rutas absolutas, p.ej.
    `("GetOrdersResponse", "OrderArray", "Order")`.
    """

    text = xml_text.decode("utf-8", "replace") if isinstance(xml_text, bytes) else xml_text
    if not text or not text.strip():
        raise ResponseParseError("Empty response body (expected XML).")

    try:
        document = xmltodict.parse(xml_text, force_list=_force_list_for(repeatable))
    except ExpatError as exc:
        raise ResponseParseError(f"Malformed XML response: {exc}") from exc

    if not isinstance(document, dict):
        raise ResponseParseError("XML response has no root element.")
    return document


def get_path(document: Any, path: PathKey) -> Any:
    """Navega `document` por `path`; devuelve `None` si algún tramo falta."""

    node = document
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
        if node is None:
            return None
    return node


def raise_for_ack(document: dict[str, Any], call_name: str) -> None:
    """Lanza `EbayApiError` si la respuesta trae `Ack=Failure`.

    `Warning` y `PartialFailure` se devuelven al caller sin tocar.
    """

    root = document.get(f"{call_name}Response")
    if not isinstance(root, dict):
        return
    if root.get("Ack") != "Failure":
        return

    errors = root.get("Errors") or []
    if isinstance(errors, dict):
        errors = [errors]
    raise EbayApiError(call_name, [e for e in errors if isinstance(e, dict)])
