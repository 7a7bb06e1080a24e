"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- Los modelos son inmutables (`frozen`): una lista nueva reemplaza a la anterior
  en bloque, nunca se edita en sitio.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

# País excluido de todos los listados y de las fronteras.
EXCLUDED_COUNTRY = "Israel"

# Región centinela: equivale al listado completo.
ALL_REGIONS = "All"

REGIONS: tuple[str, ...] = (ALL_REGIONS, "Africa", "Americas", "Asia", "Europe", "Oceania")

NOT_AVAILABLE = "N/A"
NO_CAPITAL = "No capital"


class QueryMode(str, Enum):
    """Modo de consulta: determina la forma del endpoint remoto."""

    ALL = "all"
    NAME = "name"
    REGION = "region"


class QueryState(BaseModel):
    """Consulta activa del listado (modo + texto)."""

    model_config = ConfigDict(frozen=True)

    mode: QueryMode = Field(
        default=QueryMode.ALL,
        description="Modo de consulta activo.",
    )
    text: str = Field(
        default="",
        description="Texto de búsqueda (NAME) o nombre de región (REGION).",
    )

    @classmethod
    def all_countries(cls) -> "QueryState":
        return cls(mode=QueryMode.ALL, text="")

    @classmethod
    def by_name(cls, text: str) -> "QueryState":
        return cls(mode=QueryMode.NAME, text=text)

    @classmethod
    def by_region(cls, region: str) -> "QueryState":
        return cls(mode=QueryMode.REGION, text=region)


class CountrySummary(BaseModel):
    """Resumen de país producido por los endpoints de listado."""

    model_config = ConfigDict(frozen=True)

    common_name: str = Field(
        ...,
        min_length=1,
        description="Nombre común (identidad del país dentro de un listado).",
    )
    flag_url: str = Field(
        default="",
        description="URL de la bandera (SVG).",
    )
    population: int = Field(
        default=0,
        ge=0,
        description="Población.",
    )
    region: str = Field(
        default="",
        description="Región continental.",
    )
    capital: str | None = Field(
        default=None,
        description="Primera capital declarada, si existe.",
    )

    @property
    def capital_label(self) -> str:
        return self.capital or NO_CAPITAL


class BorderCountry(BaseModel):
    """Proyección mínima de un país vecino (solo para enlaces)."""

    model_config = ConfigDict(frozen=True)

    code: str = Field(
        ...,
        min_length=3,
        max_length=3,
        description="Código alpha-3 (cca3).",
    )
    common_name: str = Field(
        ...,
        min_length=1,
        description="Nombre común del vecino.",
    )


class CountryDetail(BaseModel):
    """Registro completo de un país (vista de detalle).

    Los campos opcionales se guardan tal cual; las propiedades `*_label`
    devuelven el valor ya resuelto con sus fallbacks para el renderer.
    """

    model_config = ConfigDict(frozen=True)

    common_name: str = Field(..., min_length=1)
    code: str | None = Field(default=None, description="Código alpha-3 (cca3).")
    native_name: str | None = None
    population: int = Field(default=0, ge=0)
    region: str = ""
    subregion: str | None = None
    capital_list: tuple[str, ...] = ()
    top_level_domain: str | None = None
    currencies: tuple[str, ...] = Field(
        default=(),
        description="Nombres de monedas, sin duplicados, en orden de respuesta.",
    )
    languages: tuple[str, ...] = Field(
        default=(),
        description="Idiomas, sin duplicados, en orden de respuesta.",
    )
    border_codes: tuple[str, ...] = Field(
        default=(),
        description="Códigos alpha-3 de los países fronterizos.",
    )
    flag_url: str = ""

    @property
    def native_name_label(self) -> str:
        return self.native_name or NOT_AVAILABLE

    @property
    def capital_label(self) -> str:
        return self.capital_list[0] if self.capital_list else NO_CAPITAL

    @property
    def currencies_label(self) -> str:
        return ", ".join(self.currencies) if self.currencies else NOT_AVAILABLE

    @property
    def languages_label(self) -> str:
        return ", ".join(self.languages) if self.languages else NOT_AVAILABLE

    @property
    def top_level_domain_label(self) -> str:
        return self.top_level_domain or NOT_AVAILABLE

    @property
    def region_label(self) -> str:
        return self.region or NOT_AVAILABLE


class CountryView(BaseModel):
    """Resultado del Detail Resolver: detalle + vecinos."""

    model_config = ConfigDict(frozen=True)

    detail: CountryDetail
    borders: tuple[BorderCountry, ...] = ()
