"""Character map of the station coordinates.

Every station with coordinates is plotted into a grid scaled to the extent
of all coordinates, north up. The selected station, or the track of the
selected segment between its endpoints, is drawn on top.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from infra_explorer.domain.models import CollectionView, Record, Segment, Station

MAP_ROWS = 10

STATION_MARK = "."
SELECTED_MARK = "@"
ENDPOINT_MARK = "O"
TRACK_MARK = "+"


def _scale(value: float, low: float, high: float, cells: int) -> int:
    if cells <= 1 or high == low:
        return (cells - 1) // 2
    return round((value - low) / (high - low) * (cells - 1))


@dataclass(frozen=True)
class Extent:
    """Bounding box of the plotted coordinates."""

    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @classmethod
    def of(cls, stations: Iterable[Station]) -> Extent | None:
        """Extent of the stations with coordinates; None when there are none."""
        points = [(s.x, s.y) for s in stations if s.x is not None and s.y is not None]
        if not points:
            return None
        xs = [x for x, _ in points]
        ys = [y for _, y in points]
        return cls(min(xs), max(xs), min(ys), max(ys))

    def cell(self, station: Station, rows: int, columns: int) -> tuple[int, int] | None:
        """Grid cell ``(row, column)`` of a station; None without coordinates."""
        if station.x is None or station.y is None:
            return None
        column = _scale(station.x, self.min_x, self.max_x, columns)
        row = rows - 1 - _scale(station.y, self.min_y, self.max_y, rows)
        return row, column

    def describe(self) -> str:
        return (
            f"x {self.min_x:.2f}..{self.max_x:.2f}, "
            f"y {self.min_y:.2f}..{self.max_y:.2f}"
        )


def _track(start: tuple[int, int], end: tuple[int, int]) -> list[tuple[int, int]]:
    """Cells on the straight line between two cells, both ends included."""
    (row0, column0), (row1, column1) = start, end
    steps = max(abs(row1 - row0), abs(column1 - column0))
    if steps == 0:
        return [start]
    return [
        (row0 + round(i * (row1 - row0) / steps), column0 + round(i * (column1 - column0) / steps))
        for i in range(steps + 1)
    ]


def map_title(stations: CollectionView) -> str:
    extent = Extent.of(_stations(stations))
    if extent is None:
        return "Map - no coordinates"
    return f"Map - {extent.describe()}"


def render_map(
    stations: CollectionView,
    rows: int,
    columns: int,
    selected: Record | None = None,
) -> list[str]:
    """Draw the stations into ``rows`` lines of at most ``columns`` characters.

    Args:
        stations: Stations snapshot supplying the coordinates.
        rows: Height of the grid.
        columns: Width of the grid.
        selected: Selected station or segment to highlight.

    Returns:
        The grid lines with trailing blanks removed; empty when no station
        has coordinates.
    """
    plotted = _stations(stations)
    extent = Extent.of(plotted)
    if extent is None or rows < 1 or columns < 1:
        return []

    grid = [[" "] * columns for _ in range(rows)]

    def put(cell: tuple[int, int] | None, mark: str) -> None:
        if cell is not None:
            row, column = cell
            grid[row][column] = mark

    for station in plotted:
        put(extent.cell(station, rows, columns), STATION_MARK)

    if isinstance(selected, Station):
        put(extent.cell(selected, rows, columns), SELECTED_MARK)
    elif isinstance(selected, Segment):
        ends = [stations.find(selected.from_station), stations.find(selected.to_station)]
        cells = [
            extent.cell(end, rows, columns) if isinstance(end, Station) else None for end in ends
        ]
        if cells[0] is not None and cells[1] is not None:
            for cell in _track(cells[0], cells[1]):
                put(cell, TRACK_MARK)
        for cell in cells:
            put(cell, ENDPOINT_MARK)

    return ["".join(line).rstrip() for line in grid]


def _stations(stations: CollectionView) -> list[Station]:
    return [item for item in stations.items if isinstance(item, Station)]
