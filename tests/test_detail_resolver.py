from __future__ import annotations

import asyncio

from core.domain.errors import ParseError, TransportError
from core.domain.routes import country_route, route_segment
from core.domain.state import FailureKind, Failed, Loading, Ready
from core.services.detail_resolver import GENERIC_FAILURE, DetailResolver


async def test_country_without_borders_makes_no_batch_call(make_source, settings, country):
    source = make_source([country("Iceland", code="ISL", borders=[])])

    state = await DetailResolver(source, settings).resolve_detail("Iceland")

    assert isinstance(state, Ready)
    assert state.value.borders == ()
    assert source.calls_of("codes") == []


async def test_borders_use_one_batch_call_in_response_order(make_source, settings, country):
    source = make_source(
        [
            country("Switzerland", code="CHE", borders=["FRA", "DEU"]),
            country("France", code="FRA"),
            country("Germany", code="DEU"),
        ]
    )

    state = await DetailResolver(source, settings).resolve_detail("Switzerland")

    assert source.calls_of("codes") == [("codes", ("FRA", "DEU"))]
    assert [(b.code, b.common_name) for b in state.value.borders] == [("FRA", "France"), ("DEU", "Germany")]


async def test_malaysia_neighbours_resolve_to_their_own_views(source, settings):
    resolver = DetailResolver(source, settings)

    state = await resolver.resolve_detail("Malaysia")

    names = [b.common_name for b in state.value.borders]
    assert names == ["Thailand", "Indonesia", "Brunei", "Singapore"]
    for name in names:
        neighbour = await resolver.resolve_route(route_segment(country_route(name)))
        assert isinstance(neighbour, Ready)
        assert neighbour.value.detail.common_name == name


async def test_sentinel_is_excluded_from_borders(source, settings):
    state = await DetailResolver(source, settings).resolve_detail("Jordan")

    assert "Israel" not in [b.common_name for b in state.value.borders]


async def test_unknown_country_is_not_found(source, settings):
    state = await DetailResolver(source, settings).resolve_detail("Atlantis")

    assert state == Failed(GENERIC_FAILURE, FailureKind.NOT_FOUND)


async def test_empty_match_is_not_found(make_source, settings):
    class EmptySource(type(make_source())):
        async def fetch_by_name(self, name, *, full_text=False):
            self.calls.append(("name", name, full_text))
            return []

    state = await DetailResolver(EmptySource([]), settings).resolve_detail("France")

    assert state == Failed(GENERIC_FAILURE, FailureKind.NOT_FOUND)


async def test_non_array_body_is_not_found(make_source, settings):
    source = make_source(errors={"name": ParseError("Expected a JSON array, got dict.")})

    state = await DetailResolver(source, settings).resolve_detail("France")

    assert isinstance(state, Failed)
    assert state.kind is FailureKind.NOT_FOUND


async def test_detail_uses_full_text_lookup(source, settings):
    await DetailResolver(source, settings).resolve_detail("France")

    assert source.calls_of("name") == [("name", "France", True)]


async def test_first_match_wins(make_source, settings, country):
    source = make_source(
        [country("Guinea", code="GIN", capital=["Conakry"]), country("guinea", code="GNQ", capital=["Malabo"])]
    )

    state = await DetailResolver(source, settings).resolve_detail("Guinea")

    assert state.value.detail.code == "GIN"


async def test_border_failure_fails_the_whole_view(source, settings):
    source.errors["codes"] = TransportError("Failed to fetch data (HTTP 503).", status_code=503)

    state = await DetailResolver(source, settings).resolve_detail("France")

    assert state == Failed("Failed to fetch data (HTTP 503).", FailureKind.TRANSPORT)


async def test_border_failure_can_degrade_to_no_borders(source, settings):
    source.errors["codes"] = TransportError("Failed to fetch data (HTTP 503).", status_code=503)
    lenient = settings.model_copy(update={"borders_degrade_on_error": True})

    state = await DetailResolver(source, lenient).resolve_detail("France")

    assert isinstance(state, Ready)
    assert state.value.detail.common_name == "France"
    assert state.value.borders == ()


async def test_transport_failure_on_detail(make_source, settings):
    source = make_source(errors={"name": TransportError("Failed to fetch data: timed out")})

    state = await DetailResolver(source, settings).resolve_detail("France")

    assert state == Failed("Failed to fetch data: timed out", FailureKind.TRANSPORT)


async def test_display_fields_fall_back(make_source, settings, country):
    record = country("Nowhere", code="NWH", capital=[])
    source = make_source([record])

    state = await DetailResolver(source, settings).resolve_detail("Nowhere")

    detail = state.value.detail
    assert detail.native_name_label == "N/A"
    assert detail.currencies_label == "N/A"
    assert detail.languages_label == "N/A"
    assert detail.capital_label == "No capital"
    assert detail.top_level_domain_label == "N/A"


async def test_display_fields_resolved(source, settings):
    state = await DetailResolver(source, settings).resolve_detail("France")

    detail = state.value.detail
    assert detail.native_name_label == "France"
    assert detail.currencies_label == "Euro"
    assert detail.languages_label == "French"
    assert detail.capital_label == "Paris"
    assert detail.top_level_domain_label == ".fr"
    assert detail.subregion == "Western Europe"


async def test_route_segment_is_decoded(make_source, settings, country):
    source = make_source([country("Côte d'Ivoire", code="CIV")])

    state = await DetailResolver(source, settings).resolve_route("C%C3%B4te%20d%27Ivoire")

    assert source.calls_of("name") == [("name", "Côte d'Ivoire", True)]
    assert state.value.detail.common_name == "Côte d'Ivoire"


async def test_select_same_name_does_not_refetch(source, settings):
    resolver = DetailResolver(source, settings)

    await resolver.select("France")
    await resolver.select("France")
    await resolver.select("Germany")

    assert [c[1] for c in source.calls_of("name")] == ["France", "Germany"]


async def test_resolve_detail_always_refetches(source, settings):
    resolver = DetailResolver(source, settings)

    await resolver.resolve_detail("Germany")
    await resolver.resolve_detail("Germany")

    assert len(source.calls_of("name")) == 2


async def test_superseded_detail_is_discarded(gated_source, settings, country):
    seen = []
    resolver = DetailResolver(gated_source, settings, on_change=seen.append)

    task_a = asyncio.create_task(resolver.resolve_detail("France"))
    await asyncio.sleep(0)
    assert isinstance(resolver.state, Loading)
    task_b = asyncio.create_task(resolver.resolve_detail("Iceland"))
    await asyncio.sleep(0)

    # La llamada más reciente termina primero; la antigua llega después.
    gated_source.release("name", [country("Iceland", code="ISL")], param="Iceland")
    state_b = await task_b
    gated_source.release("name", [country("France", code="FRA")], param="France")
    await task_a

    assert state_b.value.detail.common_name == "Iceland"
    assert resolver.name == "Iceland"
    assert resolver.state is state_b
    assert [s.value.detail.common_name for s in seen if isinstance(s, Ready)] == ["Iceland"]


async def test_superseded_failure_does_not_replace_newer_view(gated_source, settings, country):
    resolver = DetailResolver(gated_source, settings)

    task_a = asyncio.create_task(resolver.resolve_detail("France"))
    await asyncio.sleep(0)
    task_b = asyncio.create_task(resolver.resolve_detail("Iceland"))
    await asyncio.sleep(0)

    gated_source.release("name", [country("Iceland", code="ISL")], param="Iceland")
    await task_b
    gated_source.fail("name", TransportError("Failed to fetch data: timed out"), param="France")
    await task_a

    assert isinstance(resolver.state, Ready)
    assert resolver.state.value.detail.common_name == "Iceland"
