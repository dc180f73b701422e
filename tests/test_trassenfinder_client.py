"""Tests for the Trassenfinder API client against a local test server."""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

import aiohttp
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from infra_explorer.adapters.trassenfinder_api import TrassenfinderClient
from infra_explorer.domain.models import CollectionKind, FetchError, FetchErrorKind, Segment, Station

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@asynccontextmanager
async def serving(
    stations: Handler | None = None, segments: Handler | None = None, **client_kwargs: object
) -> AsyncIterator[TrassenfinderClient]:
    """Run a local API and yield a client pointed at it."""
    app = web.Application()
    if stations is not None:
        app.router.add_get("/api/betriebsstellen", stations)
    if segments is not None:
        app.router.add_get("/api/streckensegmente", segments)
    server = TestServer(app)
    await server.start_server()
    try:
        async with aiohttp.ClientSession() as session:
            yield TrassenfinderClient(session, str(server.make_url("/api")), **client_kwargs)  # type: ignore[arg-type]
    finally:
        await server.close()


def json_handler(payload: object, status: int = 200) -> Handler:
    async def handler(request: web.Request) -> web.Response:
        return web.json_response(payload, status=status)

    return handler


def text_handler(body: str, status: int = 200) -> Handler:
    async def handler(request: web.Request) -> web.Response:
        return web.Response(text=body, status=status, content_type="text/plain")

    return handler


@pytest.mark.asyncio
async def test_fetch_stations_decodes_records_and_keeps_unknown_fields() -> None:
    """Given a station array, when fetching stations, then records carry their extra fields."""
    payload = [
        {"ds100": "FF", "langname_stammdaten": "Frankfurt (Main) Hbf", "x": 8.66, "y": 50.1, "typ": "Bf"},
        {"ds100": "MH"},
    ]

    async with serving(stations=json_handler(payload)) as client:
        stations = await client.fetch_stations()

    assert stations == [
        Station(id="FF", name="Frankfurt (Main) Hbf", x=8.66, y=50.1, metadata={"typ": "Bf"}),
        Station(id="MH", name="MH"),
    ]


@pytest.mark.asyncio
async def test_fetch_segments_derives_identifier() -> None:
    """Given segments without ids, when fetching segments, then ids are derived from endpoints."""
    payload = [{"von": "FF", "bis": "FFS", "streckennummer": 3600}]

    async with serving(segments=json_handler(payload)) as client:
        segments = await client.fetch(CollectionKind.SEGMENTS)

    assert len(segments) == 1
    segment = segments[0]
    assert isinstance(segment, Segment)
    assert segment.id == "FF-3600-FFS"
    assert segment.route_number == "3600"


@pytest.mark.asyncio
async def test_empty_array_returns_empty_list() -> None:
    """Given an empty remote store, when fetching, then an empty list is returned."""
    async with serving(stations=json_handler([])) as client:
        stations = await client.fetch(CollectionKind.STATIONS)

    assert stations == []


@pytest.mark.asyncio
async def test_non_2xx_status_raises_server_error() -> None:
    """Given the API answers 503, when fetching, then a server error with the reason is raised."""
    async with serving(stations=text_handler("maintenance", status=503)) as client:
        with pytest.raises(FetchError) as exc_info:
            await client.fetch_stations()

    assert exc_info.value.kind is FetchErrorKind.SERVER_ERROR
    assert exc_info.value.status_code == 503
    assert exc_info.value.message == "Server error: Service unavailable"


@pytest.mark.asyncio
async def test_missing_endpoint_raises_server_error() -> None:
    """Given an unknown path, when fetching, then the 404 is reported as server error."""
    async with serving(stations=json_handler([])) as client:
        with pytest.raises(FetchError) as exc_info:
            await client.fetch_segments()

    assert exc_info.value.kind is FetchErrorKind.SERVER_ERROR
    assert exc_info.value.message == "Server error: HTTP 404"


@pytest.mark.asyncio
async def test_invalid_json_raises_decode_error() -> None:
    """Given a body that is not JSON, when fetching, then a decode error is raised."""
    async with serving(stations=text_handler("<html>oops</html>")) as client:
        with pytest.raises(FetchError) as exc_info:
            await client.fetch_stations()

    assert exc_info.value.kind is FetchErrorKind.DECODE_ERROR


@pytest.mark.asyncio
async def test_non_array_document_raises_decode_error() -> None:
    """Given a JSON object instead of an array, when fetching, then a decode error is raised."""
    async with serving(stations=json_handler({"items": []})) as client:
        with pytest.raises(FetchError) as exc_info:
            await client.fetch_stations()

    assert exc_info.value.kind is FetchErrorKind.DECODE_ERROR
    assert exc_info.value.message == "Decode error: expected a JSON array"


@pytest.mark.asyncio
async def test_non_object_element_raises_decode_error() -> None:
    """Given an array containing a string, when fetching, then the element is reported."""
    async with serving(stations=json_handler([{"id": "FF"}, "MH"])) as client:
        with pytest.raises(FetchError) as exc_info:
            await client.fetch_stations()

    assert exc_info.value.message == "Decode error: record 1 is not an object"


@pytest.mark.asyncio
async def test_record_without_identifier_fails_whole_response() -> None:
    """Given one station lacking its id, when fetching, then the whole response fails."""
    payload = [{"ds100": "FF"}, {"langname": "Nowhere"}]

    async with serving(stations=json_handler(payload)) as client:
        with pytest.raises(FetchError) as exc_info:
            await client.fetch_stations()

    assert exc_info.value.kind is FetchErrorKind.DECODE_ERROR
    assert exc_info.value.detail.startswith("record 1:")


@pytest.mark.asyncio
async def test_record_with_unreadable_optional_fields_still_decodes() -> None:
    """Given records with bad optional values, when fetching, then the collection still loads."""
    stations_payload = [
        {"ds100": "FF", "langname_stammdaten": "Frankfurt", "x": "n/a", "y": ""},
        {"ds100": "MH", "langname_stammdaten": 42},
    ]
    segments_payload = [{"von": "FF", "bis": "MH", "streckennummer": 3600, "laenge": "12,5"}]

    async with serving(
        stations=json_handler(stations_payload), segments=json_handler(segments_payload)
    ) as client:
        stations = await client.fetch_stations()
        segments = await client.fetch_segments()

    assert [station.id for station in stations] == ["FF", "MH"]
    assert stations[0].has_coordinates is False
    assert stations[0].metadata == {"x": "n/a"}
    assert stations[1].name == "42"
    assert segments[0].length is None
    assert segments[0].metadata == {"laenge": "12,5"}


@pytest.mark.asyncio
async def test_slow_response_raises_timeout() -> None:
    """Given a handler slower than the timeout, when fetching, then a timeout error is raised."""

    async def slow(request: web.Request) -> web.Response:
        await asyncio.sleep(0.5)
        return web.json_response([])

    async with serving(stations=slow, timeout_seconds=0.05) as client:
        with pytest.raises(FetchError) as exc_info:
            await client.fetch_stations()

    assert exc_info.value.kind is FetchErrorKind.TIMEOUT
    assert exc_info.value.message == "Timeout"


@pytest.mark.asyncio
async def test_unreachable_server_raises_network_error() -> None:
    """Given nothing listens on the port, when fetching, then a network error is raised."""
    server = TestServer(web.Application())
    await server.start_server()
    url = str(server.make_url("/api"))
    await server.close()

    async with aiohttp.ClientSession() as session:
        client = TrassenfinderClient(session, url, timeout_seconds=2.0)
        with pytest.raises(FetchError) as exc_info:
            await client.fetch_stations()

    assert exc_info.value.kind is FetchErrorKind.NETWORK
    assert exc_info.value.message.startswith("Network error")


@pytest.mark.asyncio
async def test_custom_paths_are_used() -> None:
    """Given custom collection paths, when building URLs, then they are joined to the base URL."""
    async with aiohttp.ClientSession() as session:
        client = TrassenfinderClient(
            session, "https://example.com/api/", stations_path="/bs/", segments_path="seg"
        )

        assert client.url_for(CollectionKind.STATIONS) == "https://example.com/api/bs"
        assert client.url_for(CollectionKind.SEGMENTS) == "https://example.com/api/seg"


@pytest.mark.asyncio
async def test_request_logging_when_enabled(caplog: pytest.LogCaptureFixture) -> None:
    """Given request logging enabled, when fetching, then the GET is logged at INFO."""
    caplog.set_level(logging.INFO, logger="infra_explorer.adapters.api_request_logger")

    async with serving(stations=json_handler([]), log_requests=True) as client:
        await client.fetch_stations()

    messages = [r.getMessage() for r in caplog.records]
    assert any(m.startswith("API Request: GET ") and "/api/betriebsstellen" in m for m in messages)


@pytest.mark.asyncio
async def test_no_request_logging_by_default(caplog: pytest.LogCaptureFixture) -> None:
    """Given request logging disabled, when fetching, then no request is logged."""
    caplog.set_level(logging.INFO, logger="infra_explorer.adapters.api_request_logger")

    async with serving(stations=json_handler([])) as client:
        await client.fetch_stations()

    assert not [r for r in caplog.records if r.getMessage().startswith("API Request:")]
