"""Detail Resolver: ficha de un país y sus vecinos.

Algoritmo:
1. Buscar por nombre exacto (full-text). Sin coincidencias -> NotFound.
2. El primer registro gana (una coincidencia ambigua se acepta en silencio).
3. Si declara fronteras: una única consulta por lote de códigos.
4. Sin fronteras: lista vacía y ninguna llamada secundaria.

Cada cambio de nombre repite el algoritmo completo; no hay caché.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from core.config import AppSettings
from core.domain.errors import DataError, NotFound, ParseError, TransportError
from core.domain.models import BorderCountry, CountryDetail, CountryView
from core.domain.normalization import border_from_record, detail_from_record, is_excluded
from core.domain.routes import decode_route_segment
from core.domain.state import FailureKind, Failed, FetchState, Loading, Ready
from core.interfaces.country_source import CountrySource

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Failed to load country data. Please try again."

CountryViewState = FetchState[CountryView]


class DetailResolver:
    def __init__(
        self,
        source: CountrySource,
        settings: AppSettings | None = None,
        *,
        on_change: Callable[[Any], None] | None = None,
    ) -> None:
        self._source = source
        self._settings = settings or AppSettings()
        self._on_change = on_change
        self._generation = 0
        self._name: str | None = None
        self._state: CountryViewState = Loading()

    @property
    def state(self) -> CountryViewState:
        return self._state

    @property
    def name(self) -> str | None:
        return self._name

    def _set_state(self, state: CountryViewState) -> None:
        self._state = state
        if self._on_change:
            self._on_change(state)

    async def resolve_route(self, segment: str) -> CountryViewState:
        """Resuelve un segmento de ruta codificado (`/country/<segment>`)."""

        return await self.select(decode_route_segment(segment))

    async def select(self, name: str) -> CountryViewState:
        """Navega a `name`; repetir el mismo nombre ya resuelto no vuelve a consultar."""

        if name == self._name and isinstance(self._state, Ready):
            return self._state
        return await self.resolve_detail(name)

    async def resolve_detail(self, name: str) -> CountryViewState:
        self._name = name
        self._generation += 1
        token = self._generation
        self._set_state(Loading())

        outcome = await self._run(name.strip())
        if token != self._generation:
            logger.debug("Discarding superseded detail for %r", name)
            return self._state

        self._set_state(outcome)
        return outcome

    async def _run(self, name: str) -> CountryViewState:
        if not name:
            return Failed(GENERIC_FAILURE, FailureKind.NOT_FOUND)

        try:
            records = await self._source.fetch_by_name(name, full_text=True)
        except (NotFound, ParseError) as exc:
            logger.warning("Country %r not found: %s", name, exc)
            return Failed(GENERIC_FAILURE, FailureKind.NOT_FOUND)
        except TransportError as exc:
            logger.warning("Country %r request failed: %s", name, exc)
            return Failed(str(exc), FailureKind.TRANSPORT)

        if not records:
            return Failed(GENERIC_FAILURE, FailureKind.NOT_FOUND)

        try:
            detail = detail_from_record(records[0])
        except ParseError as exc:
            logger.warning("Country %r record could not be parsed: %s", name, exc)
            return Failed(str(exc), FailureKind.PARSE)

        try:
            borders = await self._resolve_borders(detail)
        except DataError as exc:
            if not self._settings.borders_degrade_on_error:
                logger.warning("Border lookup for %r failed: %s", name, exc)
                kind = FailureKind.PARSE if isinstance(exc, ParseError) else FailureKind.TRANSPORT
                return Failed(str(exc), kind)
            logger.warning("Border lookup for %r failed, showing no borders: %s", name, exc)
            borders = ()

        return Ready(CountryView(detail=detail, borders=borders))

    async def _resolve_borders(self, detail: CountryDetail) -> tuple[BorderCountry, ...]:
        if not detail.border_codes:
            return ()
        records = await self._source.fetch_by_codes(detail.border_codes)
        borders = [border_from_record(r) for r in records]
        return tuple(b for b in borders if not is_excluded(b.common_name))
