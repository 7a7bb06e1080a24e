from __future__ import annotations

import asyncio
from typing import Any, Callable, Sequence

import pytest

from core.config import AppSettings
from core.domain.errors import NotFound


def make_country(
    name: str,
    *,
    code: str | None = None,
    region: str = "Europe",
    subregion: str | None = None,
    population: int = 1_000_000,
    capital: Sequence[str] | None = None,
    borders: Sequence[str] = (),
    native_name: str | None = None,
    **extra: Any,
) -> dict[str, Any]:
    record: dict[str, Any] = {
        "name": {"common": name, "official": name},
        "cca3": code or name[:3].upper(),
        "region": region,
        "population": population,
        "flags": {"svg": f"https://flagcdn.test/{(code or name[:3]).lower()}.svg"},
        "capital": list(capital) if capital is not None else [f"{name} City"],
        "borders": list(borders),
    }
    if subregion:
        record["subregion"] = subregion
    if native_name:
        record["name"]["nativeName"] = {"xxx": {"official": native_name, "common": native_name}}
    record.update(extra)
    return record


WORLD = [
    make_country(
        "France",
        code="FRA",
        capital=["Paris"],
        subregion="Western Europe",
        population=67_391_582,
        borders=["AND", "BEL", "DEU", "ITA", "LUX", "MCO", "ESP", "CHE"],
        native_name="France",
        tld=[".fr"],
        currencies={"EUR": {"name": "Euro", "symbol": "€"}},
        languages={"fra": "French"},
    ),
    make_country("Germany", code="DEU", capital=["Berlin"], population=83_240_525),
    make_country("Belgium", code="BEL", capital=["Brussels"]),
    make_country("Åland Islands", code="ALA", capital=["Mariehamn"], population=29_458),
    make_country("Albania", code="ALB", capital=["Tirana"]),
    make_country(
        "Malaysia",
        code="MYS",
        region="Asia",
        capital=["Kuala Lumpur"],
        borders=["THA", "IDN", "BRN", "SGP"],
    ),
    make_country("Thailand", code="THA", region="Asia", capital=["Bangkok"]),
    make_country("Indonesia", code="IDN", region="Asia", capital=["Jakarta"]),
    make_country("Brunei", code="BRN", region="Asia", capital=["Bandar Seri Begawan"]),
    make_country("Singapore", code="SGP", region="Asia", capital=["Singapore"]),
    make_country("Japan", code="JPN", region="Asia", capital=["Tokyo"]),
    make_country("Israel", code="ISR", region="Asia", capital=["Jerusalem"]),
    make_country("Jordan", code="JOR", region="Asia", capital=["Amman"], borders=["IRQ", "ISR", "SAU"]),
    make_country("Curaçao", code="CUW", region="Americas", capital=["Willemstad"]),
    make_country("Cuba", code="CUB", region="Americas", capital=["Havana"]),
    make_country("Antarctica", code="ATA", region="Antarctic", capital=[], population=1000),
]


class FakeCountrySource:
    """`CountrySource` en memoria: registra cada llamada y puede fallar a demanda."""

    def __init__(self, records: Sequence[dict[str, Any]], *, errors: dict[str, Exception] | None = None) -> None:
        self.records = list(records)
        self.errors = dict(errors or {})
        self.calls: list[tuple[Any, ...]] = []

    def _maybe_fail(self, kind: str) -> None:
        exc = self.errors.get(kind)
        if exc is not None:
            raise exc

    async def fetch_all(self) -> list[dict[str, Any]]:
        self.calls.append(("all",))
        self._maybe_fail("all")
        return list(self.records)

    async def fetch_by_name(self, name: str, *, full_text: bool = False) -> list[dict[str, Any]]:
        self.calls.append(("name", name, full_text))
        self._maybe_fail("name")
        needle = name.casefold()
        if full_text:
            matches = [r for r in self.records if r["name"]["common"].casefold() == needle]
        else:
            matches = [r for r in self.records if needle in r["name"]["common"].casefold()]
        if not matches:
            raise NotFound(name)
        return matches

    async def fetch_by_region(self, region: str) -> list[dict[str, Any]]:
        self.calls.append(("region", region))
        self._maybe_fail("region")
        matches = [r for r in self.records if r.get("region", "").casefold() == region.casefold()]
        if not matches:
            raise NotFound(region)
        return matches

    async def fetch_by_codes(self, codes: Sequence[str]) -> list[dict[str, Any]]:
        self.calls.append(("codes", tuple(codes)))
        self._maybe_fail("codes")
        by_code = {r["cca3"]: r for r in self.records}
        return [by_code[c] for c in codes if c in by_code]

    def calls_of(self, kind: str) -> list[tuple[Any, ...]]:
        return [c for c in self.calls if c[0] == kind]


class GatedCountrySource(FakeCountrySource):
    """Cada llamada espera en su propia puerta hasta que el test la libere.

    `release` / `fail` abren la llamada pendiente más antigua de ese tipo, o
    la que se hizo con `param` si se indica.
    """

    def __init__(self) -> None:
        super().__init__([])
        self._pending: list[tuple[str, Any, asyncio.Future[Any]]] = []

    def _wait(self, kind: str, param: Any = None) -> asyncio.Future[Any]:
        future = asyncio.get_running_loop().create_future()
        self._pending.append((kind, param, future))
        return future

    def _take(self, kind: str, param: Any) -> asyncio.Future[Any]:
        for i, (pending_kind, pending_param, future) in enumerate(self._pending):
            if pending_kind == kind and (param is None or pending_param == param):
                del self._pending[i]
                return future
        raise AssertionError(f"no pending {kind!r} call for {param!r}")

    def release(self, kind: str, records: list[dict[str, Any]], *, param: Any = None) -> None:
        self._take(kind, param).set_result(records)

    def fail(self, kind: str, exc: Exception, *, param: Any = None) -> None:
        self._take(kind, param).set_exception(exc)

    async def fetch_all(self) -> list[dict[str, Any]]:
        self.calls.append(("all",))
        return await self._wait("all")

    async def fetch_by_name(self, name: str, *, full_text: bool = False) -> list[dict[str, Any]]:
        self.calls.append(("name", name, full_text))
        return await self._wait("name", name)

    async def fetch_by_region(self, region: str) -> list[dict[str, Any]]:
        self.calls.append(("region", region))
        return await self._wait("region", region)

    async def fetch_by_codes(self, codes: Sequence[str]) -> list[dict[str, Any]]:
        self.calls.append(("codes", tuple(codes)))
        return await self._wait("codes", tuple(codes))


@pytest.fixture
def settings(tmp_path) -> AppSettings:
    return AppSettings(_env_file=None, storage_path=tmp_path / "local_storage.json")


@pytest.fixture
def world() -> list[dict[str, Any]]:
    return [dict(r) for r in WORLD]


@pytest.fixture
def country() -> Callable[..., dict[str, Any]]:
    return make_country


@pytest.fixture
def make_source(world) -> Callable[..., FakeCountrySource]:
    def _make(records: Sequence[dict[str, Any]] | None = None, **kwargs: Any) -> FakeCountrySource:
        return FakeCountrySource(world if records is None else records, **kwargs)

    return _make


@pytest.fixture
def source(make_source) -> FakeCountrySource:
    return make_source()


@pytest.fixture
def gated_source() -> GatedCountrySource:
    return GatedCountrySource()
