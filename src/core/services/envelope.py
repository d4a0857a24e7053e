"""Construcción del envelope XML de la Trading API.

Convenciones (las mismas que usa `xmltodict`, así build -> parse es simétrico):
- mapping anidado -> elemento anidado
- lista/tupla -> elemento repetido
- clave `@attr` -> atributo, clave `#text` -> texto del elemento
- `None` se omite; bool -> `true`/`false`; datetime -> ISO-8601 UTC con `Z`
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from enum import Enum
from typing import Any

import xmltodict

from core.domain.calls import XML_NAMESPACE
from core.domain.errors import InvalidOptionsError


def _format_datetime(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _to_xml_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(k): _to_xml_value(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [_to_xml_value(v) for v in value if v is not None]
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, datetime):
        return _format_datetime(value)
    return str(value)


def build_fields(
    options: Mapping[str, Any] | None,
    defaults: Mapping[str, Any] | None = None,
    *,
    pagination: tuple[int, int] | None = None,
) -> dict[str, Any]:
    """Mezcla defaults + opciones (+ bloque `Pagination`) en orden determinista."""

    fields: dict[str, Any] = dict(defaults or {})
    # dict.update conserva la posición de una clave default que el caller sobrescribe.
    fields.update(options or {})
    if pagination is not None:
        entries_per_page, page_number = pagination
        fields.pop("Pagination", None)
        fields["Pagination"] = {
            "EntriesPerPage": entries_per_page,
            "PageNumber": page_number,
        }
    return fields


def build_envelope(
    call_name: str,
    options: object = None,
    defaults: Mapping[str, Any] | None = None,
    *,
    pagination: tuple[int, int] | None = None,
    pretty: bool = True,
) -> str:
    """Devuelve el XML del request `<{call_name}Request>`.

    `pagination` es `(entries_per_page, page_number)` cuando la llamada pagina.
    """

    if options is not None and not isinstance(options, Mapping):
        raise InvalidOptionsError(
            call_name,
            f"expected a mapping of fields, got {type(options).__name__}",
        )

    fields = build_fields(options, defaults, pagination=pagination)
    body: dict[str, Any] = {"@xmlns": XML_NAMESPACE}
    body.update(_to_xml_value(fields))

    return xmltodict.unparse(
        {f"{call_name}Request": body},
        encoding="utf-8",
        pretty=pretty,
        indent="  ",
    )
