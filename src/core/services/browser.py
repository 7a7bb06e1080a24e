"""Estado de la consulta del listado y sus mutadores de entrada.

`CountryBrowser` es la única fuente de verdad del `QueryState`: solo cambia
cuando el usuario escribe un texto o elige una región, y cada cambio vuelve a
ejecutar el `QueryResolver`.
"""

from __future__ import annotations

from core.config import AppSettings
from core.domain.models import QueryMode, QueryState
from core.services.query_resolver import CountryListState, QueryResolver


class CountryBrowser:
    def __init__(self, resolver: QueryResolver, settings: AppSettings | None = None) -> None:
        self._resolver = resolver
        self._settings = settings or AppSettings()
        self._query = QueryState.all_countries()
        self._has_searched = False

    @property
    def query(self) -> QueryState:
        return self._query

    @property
    def state(self) -> CountryListState:
        return self._resolver.state

    async def refresh(self) -> CountryListState:
        return await self._resolver.resolve(self._query)

    async def set_search_text(self, text: str) -> CountryListState:
        if not text.strip():
            return await self._apply(QueryState.all_countries())

        full_text = False
        # La primera transición ALL -> NAME puede pedir coincidencia exacta.
        if self._query.mode is QueryMode.ALL and not self._has_searched:
            full_text = self._settings.exact_first_search
            self._has_searched = True
        return await self._apply(QueryState.by_name(text), full_text=full_text)

    async def set_region(self, region: str) -> CountryListState:
        return await self._apply(QueryState.by_region(region))

    async def _apply(self, query: QueryState, *, full_text: bool = False) -> CountryListState:
        self._query = query
        return await self._resolver.resolve(query, full_text=full_text)
