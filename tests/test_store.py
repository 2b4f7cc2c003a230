"""Tests for the in-memory and PostgREST stores and the temple directory."""

from __future__ import annotations

import httpx
import pytest

from temple_crowd.core.temple_directory import TempleDirectory
from temple_crowd.store.base import FetchStatus, StoreError
from temple_crowd.store.memory import DEMO_TEMPLES, InMemoryTempleStore
from temple_crowd.store.postgrest import PostgrestStore

_BASE_URL = "https://db.example.test/rest/v1"

_SOMNATH = {
    "id": "somnath",
    "name": "Somnath Temple",
    "capacity": {"maxVisitorsPerSlot": 100},
}


def _postgrest(handler) -> PostgrestStore:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=_BASE_URL)
    return PostgrestStore("https://db.example.test", "anon-key", client=client)


def _no_rows(request: httpx.Request) -> httpx.Response:
    return httpx.Response(
        406,
        json={"code": "PGRST116", "message": "JSON object requested, multiple (or no) rows returned"},
    )


# ── In-memory store ──────────────────────────────────────────────────────────


class TestInMemoryStore:
    @pytest.mark.asyncio
    async def test_fetch_known_temple(self) -> None:
        store = InMemoryTempleStore([_SOMNATH])
        result = await store.fetch_temple("somnath")
        assert result.status is FetchStatus.FOUND
        assert result.value["name"] == "Somnath Temple"

    @pytest.mark.asyncio
    async def test_fetch_unknown_temple_is_absent(self) -> None:
        result = await InMemoryTempleStore().fetch_temple("nope")
        assert result.status is FetchStatus.ABSENT
        assert result.value is None

    @pytest.mark.asyncio
    async def test_returned_rows_are_copies(self) -> None:
        store = InMemoryTempleStore([_SOMNATH])
        first = await store.fetch_temple("somnath")
        first.value["capacity"]["maxVisitorsPerSlot"] = 1
        second = await store.fetch_temple("somnath")
        assert second.value["capacity"]["maxVisitorsPerSlot"] == 100

    @pytest.mark.asyncio
    async def test_list_is_ordered_by_name(self) -> None:
        rows = await InMemoryTempleStore(DEMO_TEMPLES).list_temples()
        names = [r["name"] for r in rows]
        assert names == sorted(names)
        assert len(rows) == 14

    @pytest.mark.asyncio
    async def test_simulation_record_round_trip_by_key(self) -> None:
        store = InMemoryTempleStore([_SOMNATH])
        await store.put_simulation_record("somnath", "2026-03-14", {"alerts": []})
        assert (await store.fetch_simulation_record("somnath", "2026-03-14")).is_found
        assert not (await store.fetch_simulation_record("somnath", "2026-03-15")).is_found


# ── PostgREST store ──────────────────────────────────────────────────────────


class TestPostgrestStore:
    @pytest.mark.asyncio
    async def test_fetch_temple_found(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_SOMNATH)

        result = await _postgrest(handler).fetch_temple("somnath")
        assert result.is_found
        assert result.value["id"] == "somnath"
        assert seen[0].url.path == "/rest/v1/temples"
        assert seen[0].url.params["id"] == "eq.somnath"
        assert seen[0].headers["accept"] == "application/vnd.pgrst.object+json"

    @pytest.mark.asyncio
    async def test_no_rows_code_is_absent(self) -> None:
        result = await _postgrest(_no_rows).fetch_simulation_record("somnath", "2026-03-14")
        assert result.status is FetchStatus.ABSENT

    @pytest.mark.asyncio
    async def test_simulation_query_filters_on_temple_and_date(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"alerts": []})

        await _postgrest(handler).fetch_simulation_record("somnath", "2026-03-14")
        assert seen[0].url.path == "/rest/v1/temple_simulation"
        assert seen[0].url.params["temple_id"] == "eq.somnath"
        assert seen[0].url.params["date"] == "eq.2026-03-14"

    @pytest.mark.asyncio
    async def test_other_406_is_fault(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(406, json={"code": "PGRST102", "message": "bad accept"})

        result = await _postgrest(handler).fetch_simulation_record("somnath", "2026-03-14")
        assert result.status is FetchStatus.FAULT

    @pytest.mark.asyncio
    async def test_server_error_is_fault(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="unavailable")

        result = await _postgrest(handler).fetch_simulation_record("somnath", "2026-03-14")
        assert result.status is FetchStatus.FAULT
        assert isinstance(result.error, httpx.HTTPStatusError)

    @pytest.mark.asyncio
    async def test_transport_error_is_fault(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        result = await _postgrest(handler).fetch_temple("somnath")
        assert result.status is FetchStatus.FAULT

    @pytest.mark.asyncio
    async def test_non_object_payload_is_fault(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[_SOMNATH])

        result = await _postgrest(handler).fetch_temple("somnath")
        assert result.status is FetchStatus.FAULT

    @pytest.mark.asyncio
    async def test_list_temples(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["order"] == "name.asc"
            return httpx.Response(200, json=[_SOMNATH])

        rows = await _postgrest(handler).list_temples()
        assert rows == [_SOMNATH]

    @pytest.mark.asyncio
    async def test_list_failure_raises_store_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"message": "boom"})

        with pytest.raises(StoreError):
            await _postgrest(handler).list_temples()

    def test_base_url_required(self) -> None:
        with pytest.raises(ValueError):
            PostgrestStore("", "key")


# ── Temple directory ─────────────────────────────────────────────────────────


class TestTempleDirectory:
    @pytest.mark.asyncio
    async def test_lists_mapped_temples(self) -> None:
        directory = TempleDirectory(InMemoryTempleStore(DEMO_TEMPLES))
        temples = await directory.list_temples()
        assert len(temples) == 14
        assert temples[0].name == "Akshardham Temple (Delhi)"

    @pytest.mark.asyncio
    async def test_falls_back_to_demo_list_on_store_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500)

        temples = await TempleDirectory(_postgrest(handler)).list_temples()
        assert {t.id for t in temples} >= {"somnath", "kashi", "ttd"}

    @pytest.mark.asyncio
    async def test_search_matches_name_city_and_state(self) -> None:
        directory = TempleDirectory(InMemoryTempleStore(DEMO_TEMPLES))
        assert {t.id for t in await directory.search("gujarat")} == {"somnath", "dwarka", "ambaji", "pavagadh"}
        assert [t.id for t in await directory.search("VARANASI")] == ["kashi"]
        assert [t.id for t in await directory.search("golden")] == ["golden"]

    @pytest.mark.asyncio
    async def test_search_limit(self) -> None:
        directory = TempleDirectory(InMemoryTempleStore(DEMO_TEMPLES), search_limit=2)
        assert len(await directory.search("temple")) == 2

    @pytest.mark.asyncio
    async def test_blank_query_matches_nothing(self) -> None:
        directory = TempleDirectory(InMemoryTempleStore(DEMO_TEMPLES))
        assert await directory.search("   ") == []

    @pytest.mark.asyncio
    async def test_unmappable_rows_are_skipped(self) -> None:
        directory = TempleDirectory(InMemoryTempleStore([_SOMNATH, {"id": "bad", "capacity": {"maxVisitorsPerSlot": -3}}]))
        assert [t.id for t in await directory.list_temples()] == ["somnath"]
