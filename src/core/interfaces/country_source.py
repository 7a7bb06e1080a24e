"""Contrato de la fuente remota de países.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite que el adaptador HTTP sea intercambiable por un fake en memoria
  en los tests sin acoplar el Core a httpx.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable


@runtime_checkable
class CountrySource(Protocol):
    """Las cuatro formas de llamada de la API de países.

    Reglas de diseño:
    - Todas son asíncronas porque hacen I/O (HTTP).
    - Devuelven los registros crudos (lista de objetos JSON); la normalización
      vive en `core.domain.normalization`.
    - Los fallos se señalan con `core.domain.errors` (TransportError,
      ParseError, NotFound).
    """

    async def fetch_all(self) -> list[dict[str, Any]]:
        ...

    async def fetch_by_name(self, name: str, *, full_text: bool = False) -> list[dict[str, Any]]:
        ...

    async def fetch_by_region(self, region: str) -> list[dict[str, Any]]:
        ...

    async def fetch_by_codes(self, codes: Sequence[str]) -> list[dict[str, Any]]:
        ...
