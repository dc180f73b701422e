"""Tests for the collection cache."""

from datetime import UTC, datetime

import pytest

from infra_explorer.application import CollectionCache
from infra_explorer.domain.models import CollectionKind, FetchError, FetchOutcome, Station
from tests.fakes import RecordingDispatch, make_stations

STATIONS = CollectionKind.STATIONS
SEGMENTS = CollectionKind.SEGMENTS
LOADED_AT = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def dispatch() -> RecordingDispatch:
    return RecordingDispatch()


@pytest.fixture
def cache(dispatch: RecordingDispatch) -> CollectionCache:
    return CollectionCache(dispatch=dispatch, clock=lambda: LOADED_AT)


def test_collections_start_empty(cache: CollectionCache) -> None:
    """Given a new cache, when peeking, then every collection is in its initial shape."""
    for kind in CollectionKind:
        view = cache.peek(kind)
        assert view.items == ()
        assert view.error is None
        assert view.in_flight is False
        assert view.requested is False


def test_first_access_dispatches_initial_fetch(
    cache: CollectionCache, dispatch: RecordingDispatch
) -> None:
    """Given a never requested collection, when getting it, then its fetch is dispatched once."""
    view = cache.get(STATIONS)
    cache.get(STATIONS)

    assert view.in_flight is True
    assert dispatch.dispatched == [STATIONS]


def test_peek_never_dispatches(cache: CollectionCache, dispatch: RecordingDispatch) -> None:
    """Given a never requested collection, when peeking, then nothing is fetched."""
    cache.peek(SEGMENTS)

    assert dispatch.dispatched == []


def test_refresh_while_in_flight_is_noop(
    cache: CollectionCache, dispatch: RecordingDispatch
) -> None:
    """Given a fetch in flight, when refreshing again, then no second fetch is dispatched."""
    assert cache.refresh(STATIONS) is True
    assert cache.refresh(STATIONS) is False
    assert cache.refresh(STATIONS) is False

    assert dispatch.dispatched == [STATIONS]


def test_in_flight_is_tracked_per_kind(
    cache: CollectionCache, dispatch: RecordingDispatch
) -> None:
    """Given a stations fetch in flight, when refreshing segments, then segments are fetched too."""
    cache.refresh(STATIONS)
    cache.refresh(SEGMENTS)

    assert dispatch.dispatched == [STATIONS, SEGMENTS]


def test_successful_fetch_replaces_items(cache: CollectionCache) -> None:
    """Given a fetch in flight, when it succeeds, then items are replaced and flags cleared."""
    stations = make_stations("Alpha", "Beta")
    cache.refresh(STATIONS)

    cache.on_fetch_complete(STATIONS, FetchOutcome.succeeded(stations))

    view = cache.peek(STATIONS)
    assert view.items == tuple(stations)
    assert view.loaded_at == LOADED_AT
    assert view.in_flight is False
    assert view.error is None
    assert view.is_loaded is True


def test_failed_refresh_keeps_previous_items(cache: CollectionCache) -> None:
    """Given loaded data, when a refresh fails, then the data is retained next to the error."""
    stations = make_stations("Alpha", "Beta")
    cache.refresh(STATIONS)
    cache.on_fetch_complete(STATIONS, FetchOutcome.succeeded(stations))
    before = cache.peek(STATIONS).items

    cache.refresh(STATIONS)
    error = FetchError.timeout()
    cache.on_fetch_complete(STATIONS, FetchOutcome.failed(error))

    view = cache.peek(STATIONS)
    assert view.items == before
    assert view.error is error
    assert view.in_flight is False
    assert view.is_stale is True


def test_successful_refresh_clears_error(cache: CollectionCache) -> None:
    """Given a failed fetch, when a later refresh succeeds, then the error is cleared."""
    cache.refresh(SEGMENTS)
    cache.on_fetch_complete(SEGMENTS, FetchOutcome.failed(FetchError.timeout()))
    assert cache.peek(SEGMENTS).error is not None

    cache.refresh(SEGMENTS)
    cache.on_fetch_complete(SEGMENTS, FetchOutcome.succeeded([]))

    view = cache.peek(SEGMENTS)
    assert view.error is None
    assert view.is_loaded is True


def test_completion_only_touches_its_own_kind(cache: CollectionCache) -> None:
    """Given both kinds in flight, when one completes, then the other stays in flight."""
    cache.refresh(STATIONS)
    cache.refresh(SEGMENTS)

    cache.on_fetch_complete(SEGMENTS, FetchOutcome.failed(FetchError.network("reset")))

    assert cache.peek(STATIONS).in_flight is True
    assert cache.peek(STATIONS).error is None
    assert cache.peek(SEGMENTS).in_flight is False


def test_ensure_loaded_retries_only_failed_or_unloaded_collections(
    cache: CollectionCache, dispatch: RecordingDispatch
) -> None:
    """Given loaded and failed collections, when ensuring loaded, then only the failed one refetches."""
    cache.refresh(STATIONS)
    cache.on_fetch_complete(STATIONS, FetchOutcome.succeeded([Station(id="S1", name="Alpha")]))
    cache.refresh(SEGMENTS)
    cache.on_fetch_complete(SEGMENTS, FetchOutcome.failed(FetchError.timeout()))
    dispatch.dispatched.clear()

    assert cache.ensure_loaded(STATIONS) is False
    assert cache.ensure_loaded(SEGMENTS) is True
    assert cache.ensure_loaded(SEGMENTS) is False

    assert dispatch.dispatched == [SEGMENTS]


def test_dispatch_failure_does_not_leave_fetch_in_flight() -> None:
    """Given a dispatcher that fails, when refreshing, then the collection records an error."""

    def failing_dispatch(kind: CollectionKind) -> None:
        raise RuntimeError("no running event loop")

    cache = CollectionCache(dispatch=failing_dispatch)

    assert cache.refresh(STATIONS) is False

    view = cache.peek(STATIONS)
    assert view.in_flight is False
    assert view.error is not None
    assert "no running event loop" in view.error.message


def test_snapshots_are_not_mutated(cache: CollectionCache) -> None:
    """Given a snapshot taken earlier, when the cache changes, then the snapshot is unchanged."""
    before = cache.get(STATIONS)

    cache.on_fetch_complete(STATIONS, FetchOutcome.succeeded(make_stations("Alpha")))

    assert before.items == ()
    assert before.in_flight is True
    assert cache.peek(STATIONS).items != ()


def test_ensure_loaded_retries_failed_refresh_of_loaded_collection(
    cache: CollectionCache, dispatch: RecordingDispatch
) -> None:
    """Given loaded stations whose refresh failed, when ensuring loaded, then a new fetch starts."""
    cache.refresh(STATIONS)
    cache.on_fetch_complete(STATIONS, FetchOutcome.succeeded([Station(id="S1", name="Alpha")]))
    cache.refresh(STATIONS)
    cache.on_fetch_complete(STATIONS, FetchOutcome.failed(FetchError.timeout()))
    dispatch.dispatched.clear()

    assert cache.ensure_loaded(STATIONS) is True

    view = cache.peek(STATIONS)
    assert dispatch.dispatched == [STATIONS]
    assert view.in_flight is True
    assert view.items == (Station(id="S1", name="Alpha"),)
