"""Errores del dominio.

Los adaptadores los lanzan; los resolvers los convierten en `Failed` en su
frontera. Nunca llegan al renderer como excepciones.
"""

from __future__ import annotations


class DataError(Exception):
    """Base de todos los fallos al obtener o interpretar datos de países."""


class TransportError(DataError):
    """Fallo de red, timeout o status HTTP no exitoso."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class ParseError(DataError):
    """El cuerpo de la respuesta no se puede interpretar."""


class NotFound(DataError):
    """La consulta no devolvió ninguna coincidencia."""
