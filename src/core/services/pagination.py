"""Agregación de resultados paginados.

Máquina de estados explícita:

    START -> FETCHING(page) -> MORE -> FETCHING(page + 1) ...
                             -> DONE -> FINISHED

- Las páginas se piden en serie: el total solo se conoce tras la página 1.
- `PageState` es local a una ejecución; nada se comparte entre llamadas.
- Cualquier excepción aborta la ejecución y descarta las páginas previas.
- Superar `max_pages` también aborta (`PaginationLimitError`).
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from core.domain.errors import PaginationLimitError
from core.services.normalizer import get_path

logger = logging.getLogger(__name__)

# (call_name, options, (entries_per_page, page_number)) -> documento parseado
PageFetcher = Callable[[str, Mapping[str, Any], tuple[int, int]], Awaitable[dict[str, Any]]]

DEFAULT_MAX_PAGES = 1000


class PaginationPhase(str, Enum):
    START = "start"
    FETCHING = "fetching"
    MORE = "more"
    DONE = "done"
    FINISHED = "finished"


@dataclass
class PageState:
    entries_per_page: int
    page_number: int = 1
    items: list[Any] = field(default_factory=list)
    total_pages: int | None = None
    done: bool = False
    phase: PaginationPhase = PaginationPhase.START


def _read_total_pages(document: dict[str, Any], call_name: str) -> int | None:
    raw = get_path(document, (f"{call_name}Response", "PaginationResult", "TotalNumberOfPages"))
    if raw is None:
        return None
    try:
        return int(str(raw).strip())
    except ValueError:
        logger.warning("%s returned a non-numeric TotalNumberOfPages: %r", call_name, raw)
        return None


def _page_entries(document: dict[str, Any], path: tuple[str, ...]) -> list[Any]:
    value = get_path(document, path)
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _merge_entries(first: dict[str, Any], path: tuple[str, ...], items: list[Any]) -> dict[str, Any]:
    """Copia la primera página y reemplaza la colección por `items`."""

    merged = copy.deepcopy(first)
    node: dict[str, Any] = merged
    for key in path[:-1]:
        child = node.get(key)
        if not isinstance(child, dict):
            if not items:
                return merged
            child = {}
            node[key] = child
        node = child
    if items or path[-1] in node:
        node[path[-1]] = items
    return merged


class PaginationAggregator:
    """Recorre todas las páginas de una llamada y devuelve un único documento."""

    def __init__(self, fetch_page: PageFetcher, *, max_pages: int = DEFAULT_MAX_PAGES) -> None:
        self._fetch_page = fetch_page
        self._max_pages = max_pages

    async def run_paged(
        self,
        call_name: str,
        base_options: Mapping[str, Any],
        page_size: int,
        list_path: tuple[str, ...],
    ) -> dict[str, Any]:
        """Ejecuta `call_name` página a página.

        `list_path` es la ruta de la colección repetible relativa a
        `<call_name>Response`, p.ej. `("ItemArray", "Item")`.
        """

        absolute_path = (f"{call_name}Response", *list_path)
        state = PageState(entries_per_page=page_size)

        # La página 1 fija el documento base y el total de páginas.
        first = await self._fetch(state, call_name, base_options)
        state.total_pages = _read_total_pages(first, call_name)
        self._collect(state, call_name, first, absolute_path)
        self._advance(state, call_name)

        while not state.done:
            document = await self._fetch(state, call_name, base_options)
            self._collect(state, call_name, document, absolute_path)
            self._advance(state, call_name)

        state.phase = PaginationPhase.FINISHED
        return _merge_entries(first, absolute_path, state.items)

    async def _fetch(
        self,
        state: PageState,
        call_name: str,
        base_options: Mapping[str, Any],
    ) -> dict[str, Any]:
        state.phase = PaginationPhase.FETCHING
        return await self._fetch_page(
            call_name,
            base_options,
            (state.entries_per_page, state.page_number),
        )

    def _collect(
        self,
        state: PageState,
        call_name: str,
        document: dict[str, Any],
        path: tuple[str, ...],
    ) -> None:
        entries = _page_entries(document, path)
        state.items.extend(entries)
        logger.debug(
            "%s page %d/%s: %d entries (%d total)",
            call_name,
            state.page_number,
            state.total_pages if state.total_pages is not None else "?",
            len(entries),
            len(state.items),
        )

    def _advance(self, state: PageState, call_name: str) -> None:
        if state.total_pages is None or state.total_pages <= state.page_number:
            state.phase = PaginationPhase.DONE
            state.done = True
            return
        if state.total_pages > self._max_pages:
            logger.warning(
                "%s reports %d pages; aborting at the %d page limit",
                call_name,
                state.total_pages,
                self._max_pages,
            )
            raise PaginationLimitError(call_name, state.total_pages, self._max_pages)
        state.phase = PaginationPhase.MORE
        state.page_number += 1
