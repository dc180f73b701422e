"""Station domain model."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from infra_explorer.domain.models.wire_fields import (
    coerce_float,
    coerce_text,
    first_present,
    split_known_fields,
)

# Wire names per field, in order of preference
ID_KEYS = ("id", "ds100")
NAME_KEYS = ("name", "langname_stammdaten", "langname")
X_KEYS = ("x", "longitude")
Y_KEYS = ("y", "latitude")

STATION_FIELDS = frozenset(ID_KEYS + NAME_KEYS + X_KEYS + Y_KEYS)


class Station(BaseModel):
    """A named infrastructure node (Betriebsstelle) in the rail network.

    Only the identifier is required. Optional fields that cannot be read keep
    their raw value in ``metadata`` instead of failing the record.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str = ""
    x: float | None = None
    y: float | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def normalize_record(cls, data: Any) -> Any:
        """Map wire aliases to fields, coerce values and collect the rest as metadata.

        The name defaults to the identifier.
        """
        if not isinstance(data, dict):
            return data

        known, metadata = split_known_fields(data, STATION_FIELDS)
        record: dict[str, Any] = {"metadata": metadata}

        _, identifier = first_present(known, *ID_KEYS)
        if identifier is not None:
            record["id"] = identifier

        name_key, raw_name = first_present(known, *NAME_KEYS)
        name = None if raw_name is None else coerce_text(raw_name)
        if raw_name is not None and name is None:
            metadata[name_key] = raw_name
        record["name"] = name or coerce_text(identifier) or ""

        for field, keys in (("x", X_KEYS), ("y", Y_KEYS)):
            key, raw = first_present(known, *keys)
            if raw is None:
                continue
            value = coerce_float(raw)
            if value is None:
                metadata[key] = raw
            else:
                record[field] = value

        return record

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> str:
        """Accept numeric identifiers but reject empty ones."""
        if v is None or str(v).strip() == "":
            raise ValueError("station identifier must not be empty")
        return str(v)

    @property
    def has_coordinates(self) -> bool:
        return self.x is not None and self.y is not None

    @property
    def label(self) -> str:
        """Display label, e.g. ``FF (Frankfurt (Main) Hbf)``."""
        if self.name and self.name != self.id:
            return f"{self.id} ({self.name})"
        return self.id
