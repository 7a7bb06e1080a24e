"""Normalización de registros crudos de la API a entidades del dominio.

Una función por entidad, aplicada una sola vez en el borde de datos: los
consumidores posteriores solo ven campos ya resueltos y tipados.
"""

from __future__ import annotations

import unicodedata
from typing import Any, Iterable

from pydantic import ValidationError

from core.domain.errors import ParseError
from core.domain.models import (
    EXCLUDED_COUNTRY,
    BorderCountry,
    CountryDetail,
    CountrySummary,
)


def collation_key(name: str) -> tuple[str, str]:
    """Clave de ordenación sensible al idioma.

    Orden primario sin acentos ni mayúsculas ("Åland Islands" junto a las A),
    con el nombre original como desempate para que el orden sea total.
    """

    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), name


def is_excluded(name: str) -> bool:
    return name == EXCLUDED_COUNTRY


def _as_dict(value: object) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _str_or_none(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _str_list(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    return [v.strip() for v in value if isinstance(v, str) and v.strip()]


def _unique(values: Iterable[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    out: list[str] = []
    for v in values:
        if v in seen:
            continue
        seen.add(v)
        out.append(v)
    return tuple(out)


def _record(raw: object) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise ParseError(f"Expected a country object, got {type(raw).__name__}")
    return raw


def _common_name(record: dict[str, Any]) -> str:
    name = _str_or_none(_as_dict(record.get("name")).get("common"))
    if name is None:
        raise ParseError("Country record without name.common")
    return name


def _population(record: dict[str, Any]) -> int:
    value = record.get("population")
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ParseError(f"Invalid population: {value!r}")
    return max(0, int(value))


def _flag_url(record: dict[str, Any]) -> str:
    return _str_or_none(_as_dict(record.get("flags")).get("svg")) or ""


def summary_from_record(raw: object) -> CountrySummary:
    record = _record(raw)
    capitals = _str_list(record.get("capital"))
    try:
        return CountrySummary(
            common_name=_common_name(record),
            flag_url=_flag_url(record),
            population=_population(record),
            region=_str_or_none(record.get("region")) or "",
            capital=capitals[0] if capitals else None,
        )
    except ValidationError as exc:
        raise ParseError(str(exc)) from exc


def detail_from_record(raw: object) -> CountryDetail:
    record = _record(raw)
    name = _as_dict(record.get("name"))

    native_name = None
    for entry in _as_dict(name.get("nativeName")).values():
        native_name = _str_or_none(_as_dict(entry).get("common"))
        if native_name:
            break

    currencies = [
        _str_or_none(_as_dict(c).get("name"))
        for c in _as_dict(record.get("currencies")).values()
    ]
    languages = [_str_or_none(lang) for lang in _as_dict(record.get("languages")).values()]
    tlds = _str_list(record.get("tld"))

    try:
        return CountryDetail(
            common_name=_common_name(record),
            code=_str_or_none(record.get("cca3")),
            native_name=native_name,
            population=_population(record),
            region=_str_or_none(record.get("region")) or "",
            subregion=_str_or_none(record.get("subregion")),
            capital_list=tuple(_str_list(record.get("capital"))),
            top_level_domain=tlds[0] if tlds else None,
            currencies=_unique(c for c in currencies if c),
            languages=_unique(lang for lang in languages if lang),
            border_codes=tuple(code.upper() for code in _str_list(record.get("borders"))),
            flag_url=_flag_url(record),
        )
    except ValidationError as exc:
        raise ParseError(str(exc)) from exc


def border_from_record(raw: object) -> BorderCountry:
    record = _record(raw)
    code = _str_or_none(record.get("cca3"))
    if code is None:
        raise ParseError("Border record without cca3")
    try:
        return BorderCountry(code=code.upper(), common_name=_common_name(record))
    except ValidationError as exc:
        raise ParseError(str(exc)) from exc


def prepare_summaries(records: Iterable[object], *, cap: int | None) -> list[CountrySummary]:
    """Normaliza, excluye el país centinela, deduplica, ordena y recorta."""

    summaries: list[CountrySummary] = []
    seen: set[str] = set()
    for raw in records:
        summary = summary_from_record(raw)
        if is_excluded(summary.common_name) or summary.common_name in seen:
            continue
        seen.add(summary.common_name)
        summaries.append(summary)

    summaries.sort(key=lambda s: collation_key(s.common_name))
    if cap is not None:
        summaries = summaries[:cap]
    return summaries
