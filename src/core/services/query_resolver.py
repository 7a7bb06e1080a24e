"""Query Resolver: listado de países bajo los modos ALL / NAME / REGION.

Los tres modos comparten una única función de resolución y un único canal de
error: cualquier fallo termina en un `Failed` visible, nunca en un no-op.

Supersesión: cada llamada toma un token de generación creciente. Al terminar,
el resultado solo se aplica si su token sigue siendo el último emitido; una
respuesta antigua que llega tarde se descarta.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from core.config import AppSettings
from core.domain.errors import NotFound, ParseError, TransportError
from core.domain.models import ALL_REGIONS, CountrySummary, QueryMode, QueryState
from core.domain.normalization import prepare_summaries
from core.domain.state import FailureKind, Failed, FetchState, Loading, Ready
from core.interfaces.country_source import CountrySource

logger = logging.getLogger(__name__)

CountryListState = FetchState[tuple[CountrySummary, ...]]
StateListener = Callable[[Any], None]


@dataclass(frozen=True)
class CountryRequest:
    """Petición remota ya resuelta a partir de un `QueryState`."""

    mode: QueryMode
    param: str = ""
    full_text: bool = False


def build_request(query: QueryState, *, full_text: bool = False) -> CountryRequest:
    """Traduce la consulta a una de las formas de llamada remotas.

    - NAME con texto vacío (o solo espacios) equivale a ALL.
    - REGION con la región centinela "All" (o vacía) equivale a ALL.
    """

    text = query.text.strip()
    if query.mode is QueryMode.NAME and text:
        return CountryRequest(mode=QueryMode.NAME, param=text, full_text=full_text)
    if query.mode is QueryMode.REGION and text and text.casefold() != ALL_REGIONS.casefold():
        return CountryRequest(mode=QueryMode.REGION, param=text)
    return CountryRequest(mode=QueryMode.ALL)


class QueryResolver:
    def __init__(
        self,
        source: CountrySource,
        settings: AppSettings | None = None,
        *,
        on_change: StateListener | None = None,
    ) -> None:
        self._source = source
        self._settings = settings or AppSettings()
        self._on_change = on_change
        self._generation = 0
        self._state: CountryListState = Loading()

    @property
    def state(self) -> CountryListState:
        return self._state

    def _cap_for(self, request: CountryRequest) -> int | None:
        if request.mode is QueryMode.REGION:
            return self._settings.region_result_cap
        return self._settings.result_cap

    def _set_state(self, state: CountryListState) -> None:
        self._state = state
        if self._on_change:
            self._on_change(state)

    async def resolve(self, query: QueryState, *, full_text: bool = False) -> CountryListState:
        """Ejecuta la consulta y publica Loading -> Ready/Failed.

        Si otra llamada se emitió mientras esta esperaba la red, el resultado
        se descarta y se devuelve el estado vigente.
        """

        request = build_request(query, full_text=full_text)
        self._generation += 1
        token = self._generation
        self._set_state(Loading())

        outcome = await self._run(request)
        if token != self._generation:
            logger.debug("Discarding superseded result for %s", request)
            return self._state

        self._set_state(outcome)
        return outcome

    async def _fetch(self, request: CountryRequest) -> list[dict[str, Any]]:
        if request.mode is QueryMode.NAME:
            return await self._source.fetch_by_name(request.param, full_text=request.full_text)
        if request.mode is QueryMode.REGION:
            return await self._source.fetch_by_region(request.param)
        return await self._source.fetch_all()

    async def _run(self, request: CountryRequest) -> CountryListState:
        try:
            records = await self._fetch(request)
        except NotFound as exc:
            if request.mode is QueryMode.ALL:
                logger.warning("Country list unavailable: %s", exc)
                return Failed(str(exc), FailureKind.TRANSPORT)
            # Búsqueda sin coincidencias: lista vacía, no error.
            return Ready(())
        except TransportError as exc:
            logger.warning("Country list request failed: %s", exc)
            return Failed(str(exc), FailureKind.TRANSPORT)
        except ParseError as exc:
            logger.warning("Country list response could not be parsed: %s", exc)
            return Failed(str(exc), FailureKind.PARSE)

        try:
            countries = prepare_summaries(records, cap=self._cap_for(request))
        except ParseError as exc:
            logger.warning("Country list response could not be parsed: %s", exc)
            return Failed(str(exc), FailureKind.PARSE)
        return Ready(tuple(countries))
