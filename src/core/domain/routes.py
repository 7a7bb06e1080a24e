"""Rutas navegables de la vista de detalle.

Una vista de detalle se direcciona por el nombre común del país, codificado
como segmento de URL: `/country/<nombre>`.
"""

from __future__ import annotations

from urllib.parse import quote, unquote

COUNTRY_ROUTE_PREFIX = "/country/"


def country_route(name: str) -> str:
    return COUNTRY_ROUTE_PREFIX + quote(name, safe="")


def decode_route_segment(segment: str) -> str:
    return unquote(segment)


def route_segment(path: str) -> str | None:
    """Segmento (aún codificado) de una ruta de país, o None si no lo es."""

    if not path.startswith(COUNTRY_ROUTE_PREFIX):
        return None
    segment = path[len(COUNTRY_ROUTE_PREFIX) :].strip("/")
    if not segment or "/" in segment:
        return None
    return segment


def parse_country_route(path: str) -> str | None:
    segment = route_segment(path)
    return None if segment is None else decode_route_segment(segment)
