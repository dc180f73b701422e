"""Pure rendering of the explorer state into a terminal frame."""

from __future__ import annotations

from typing import TYPE_CHECKING

from infra_explorer.application.map_panel import MAP_ROWS, map_title, render_map
from infra_explorer.application.navigation import StatusPhase
from infra_explorer.domain.models import (
    CollectionKind,
    CollectionView,
    Frame,
    FrameLine,
    LineStyle,
    Record,
    Segment,
    Station,
)

if TYPE_CHECKING:
    from infra_explorer.application.navigation import NavigationState

# Header, detail and help lines around the list
RESERVED_ROWS = 3

DEFAULT_COLUMNS = 80

NO_DATA_TEXT = "(no data)"
SELECTED_MARKER = "> "
UNSELECTED_MARKER = "  "
HELP_TEXT = (
    "up/down move | PgUp/PgDn page | b stations | s segments | m map | r refresh | q quit"
)


def reserved_rows(state: NavigationState) -> int:
    """Screen rows not available to the list of entries."""
    if state.show_map:
        return RESERVED_ROWS + MAP_ROWS + 1
    return RESERVED_ROWS


def _entries(count: int) -> str:
    return "1 entry" if count == 1 else f"{count} entries"


def describe_status(state: NavigationState, collection: CollectionView) -> str:
    """Status part of the header line."""
    status = state.status
    if status.phase is StatusPhase.LOADING:
        if collection.is_empty:
            return "loading..."
        return f"loading... (showing {_entries(len(collection))} cached)"

    if status.phase is StatusPhase.ERROR:
        text = f"error: {status.message}"
        if collection.is_stale:
            text += f" [stale, showing {_entries(len(collection))}]"
        return text

    if collection.loaded_at is None:
        return "not loaded"
    loaded_at = collection.loaded_at.astimezone().strftime("%H:%M:%S")
    return f"loaded {_entries(len(collection))} at {loaded_at}"


def format_entry(record: Record) -> str:
    return record.label


def _format_coordinates(station: Station) -> str:
    if not station.has_coordinates:
        return "no coordinates"
    return f"x={station.x:.5f} y={station.y:.5f}"


def _station_name(station_id: str, stations: CollectionView | None) -> str:
    if stations is None:
        return station_id
    station = stations.find(station_id)
    if station is None or station.name == station_id:
        return station_id
    return f"{station.name} ({station_id})"


def describe_detail(record: Record, stations: CollectionView | None = None) -> str:
    """One-line detail view of the selected record.

    Segment endpoints are resolved to station names when a stations snapshot
    is supplied.
    """
    if isinstance(record, Station):
        parts = [f"{record.id}: {record.name}", _format_coordinates(record)]
    elif isinstance(record, Segment):
        parts = [
            f"{_station_name(record.from_station, stations)} -> "
            f"{_station_name(record.to_station, stations)}"
        ]
        if record.route_number is not None:
            parts.append(f"route {record.route_number}")
        if record.length is not None:
            parts.append(f"length {record.length:g}")
    else:
        parts = [record.id]

    if record.metadata:
        parts.append(f"{len(record.metadata)} more fields")
    return " | ".join(parts)


def render(
    state: NavigationState,
    collection: CollectionView,
    stations: CollectionView | None = None,
    columns: int = DEFAULT_COLUMNS,
) -> Frame:
    """Describe the screen for the active view.

    Reads nothing but its arguments, so equal inputs give equal frames.

    Args:
        state: Navigation state; its view must match ``collection.kind``.
        collection: Snapshot of the active collection.
        stations: Optional stations snapshot used to name segment endpoints
            and to draw the map.
        columns: Terminal width, used to size the map.

    Returns:
        Header line, the visible entries (or a "no data" line), the detail
        line of the selection, the map when it is shown and the key help.
    """
    header_style = LineStyle.ERROR if state.status.phase is StatusPhase.ERROR else LineStyle.HEADER
    lines = [FrameLine(f"{state.view.title} - {describe_status(state, collection)}", header_style)]

    if collection.is_empty:
        lines.append(FrameLine(NO_DATA_TEXT))
    else:
        selected = state.selected_index
        for index in state.visible_range(len(collection)):
            text = format_entry(collection.items[index])
            if index == selected:
                lines.append(FrameLine(SELECTED_MARKER + text, LineStyle.SELECTED))
            else:
                lines.append(FrameLine(UNSELECTED_MARKER + text))

    selected_record = (
        None
        if state.selected_index is None or state.selected_index >= len(collection)
        else collection.items[state.selected_index]
    )
    resolver = stations if collection.kind is CollectionKind.SEGMENTS else None
    detail = "" if selected_record is None else describe_detail(selected_record, resolver)
    lines.append(FrameLine(detail, LineStyle.DETAIL))

    if state.show_map:
        plotted = collection if collection.kind is CollectionKind.STATIONS else stations
        if plotted is None:
            plotted = CollectionView(kind=CollectionKind.STATIONS)
        lines.append(FrameLine(map_title(plotted), LineStyle.HEADER))
        grid = render_map(plotted, MAP_ROWS, max(columns - 1, 1), selected_record)
        lines.extend(FrameLine(row, LineStyle.MAP) for row in grid)

    lines.append(FrameLine(HELP_TEXT, LineStyle.HINT))
    return Frame(tuple(lines))
