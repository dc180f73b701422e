"""Segment domain model."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from infra_explorer.domain.models.wire_fields import (
    coerce_float,
    coerce_text,
    first_present,
    split_known_fields,
)

FROM_KEYS = ("from_station", "from", "von")
TO_KEYS = ("to_station", "to", "bis")
ROUTE_KEYS = ("route_number", "routenumber", "streckennummer")
LENGTH_KEYS = ("length", "laenge", "length_km")

SEGMENT_FIELDS = frozenset(("id",) + FROM_KEYS + TO_KEYS + ROUTE_KEYS + LENGTH_KEYS)


class Segment(BaseModel):
    """A track element (Streckensegment) connecting two stations.

    Endpoints are station identifiers; a segment never owns its stations.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    from_station: str
    to_station: str
    route_number: str | None = None
    length: float | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def normalize_record(cls, data: Any) -> Any:
        """Map wire aliases to fields, coerce values and derive a missing id.

        Records without an explicit id are identified as
        ``{from}-{route_number}-{to}``. Unreadable route numbers and lengths
        are kept in metadata.
        """
        if not isinstance(data, dict):
            return data

        known, metadata = split_known_fields(data, SEGMENT_FIELDS)
        record: dict[str, Any] = {"metadata": metadata}

        _, start = first_present(known, *FROM_KEYS)
        _, end = first_present(known, *TO_KEYS)
        if start is not None:
            record["from_station"] = start
        if end is not None:
            record["to_station"] = end

        route_key, raw_route = first_present(known, *ROUTE_KEYS)
        route = None if raw_route is None else coerce_text(raw_route)
        if raw_route is not None and route is None:
            metadata[route_key] = raw_route
        record["route_number"] = route

        length_key, raw_length = first_present(known, *LENGTH_KEYS)
        if raw_length is not None:
            length = coerce_float(raw_length)
            if length is None:
                metadata[length_key] = raw_length
            else:
                record["length"] = length

        _, identifier = first_present(known, "id")
        if identifier is None and start is not None and end is not None:
            parts = [start, end] if route is None else [start, route, end]
            identifier = "-".join(str(part) for part in parts)
        if identifier is not None:
            record["id"] = identifier

        return record

    @field_validator("id", "from_station", "to_station", mode="before")
    @classmethod
    def validate_identifier(cls, v: Any) -> str:
        """Accept numeric identifiers but reject empty ones."""
        if v is None or str(v).strip() == "":
            raise ValueError("identifier must not be empty")
        return str(v)

    @property
    def label(self) -> str:
        """Display label, e.g. ``3600 (FF -> FFS)``."""
        prefix = self.route_number or self.id
        return f"{prefix} ({self.from_station} -> {self.to_station})"
