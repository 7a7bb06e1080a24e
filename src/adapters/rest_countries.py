"""Fuente de datos: REST Countries (v3.1).

Implementa `core.interfaces.country_source.CountrySource` sobre httpx.

Notas de la API:
- `/all` exige el parámetro `fields`; pedimos solo lo que usa el listado.
- Las búsquedas sin coincidencias responden 404 (lo traducimos a `NotFound`).
"""

from __future__ import annotations

import logging
from typing import Any, Sequence
from urllib.parse import quote

import httpx

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.errors import NotFound, ParseError, TransportError

logger = logging.getLogger(__name__)

SUMMARY_FIELDS = "name,flags,population,region,capital"
BORDER_FIELDS = "name,cca3"


def _segment(value: str) -> str:
    return quote(value.strip(), safe="")


class RestCountriesSource:
    """Cliente asíncrono de las cuatro formas de llamada usadas por el Core."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport

    async def fetch_all(self) -> list[dict[str, Any]]:
        return await self._get("all", params={"fields": SUMMARY_FIELDS})

    async def fetch_by_name(self, name: str, *, full_text: bool = False) -> list[dict[str, Any]]:
        params: dict[str, str] = {}
        if full_text:
            params["fullText"] = "true"
        return await self._get(f"name/{_segment(name)}", params=params or None)

    async def fetch_by_region(self, region: str) -> list[dict[str, Any]]:
        return await self._get(f"region/{_segment(region)}", params={"fields": SUMMARY_FIELDS})

    async def fetch_by_codes(self, codes: Sequence[str]) -> list[dict[str, Any]]:
        if not codes:
            return []
        return await self._get(
            "alpha",
            params={"codes": ",".join(codes), "fields": BORDER_FIELDS},
        )

    async def _get(self, path: str, *, params: dict[str, str] | None = None) -> list[dict[str, Any]]:
        logger.debug("GET %s params=%s", path, params)
        try:
            async with build_async_client(self._settings, transport=self._transport) as client:
                response = await client.get(path, params=params)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            # InvalidURL (p. ej. una búsqueda pegada de >64k caracteres) no hereda de HTTPError.
            raise TransportError(f"Failed to fetch data: {exc}") from exc

        logger.debug("GET %s -> HTTP %s", path, response.status_code)
        if response.status_code == 404:
            raise NotFound(f"No countries found for '{path}'")
        if not response.is_success:
            raise TransportError(
                f"Failed to fetch data (HTTP {response.status_code}).",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise ParseError("Response body is not valid JSON.") from exc
        if not isinstance(payload, list):
            raise ParseError(f"Expected a JSON array, got {type(payload).__name__}.")
        return payload
