"""
Health Record Model — one sample read from a record source.

Every source normalizes what it reads into this structure before the
export stages filter it and hand it to the targets.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


def _parse_date(value: str | datetime | None) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _format_date(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass
class Record:
    """
    A single health record.

    ``value`` holds the numeric quantity, the category value, or a mapping
    of workout attributes. Correlations keep their member records in
    ``objects``.
    """

    uuid: str
    category: str
    start: datetime | None = None
    end: datetime | None = None
    value: Any = None
    unit: str | None = None
    source_id: str | None = None
    metadata: dict = field(default_factory=dict)
    objects: list["Record"] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Serialize to JSON-compatible dictionary."""
        data = {
            "uuid": self.uuid,
            "category": self.category,
            "sdate": _format_date(self.start),
            "edate": _format_date(self.end),
            "value": self.value,
        }
        if self.unit is not None:
            data["unit"] = self.unit
        if self.source_id is not None:
            data["source"] = self.source_id
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        if self.objects:
            data["objects"] = [obj.to_dict() for obj in self.objects]
        return data

    @classmethod
    def from_dict(cls, data: dict, category: str | None = None) -> "Record":
        """Deserialize from dictionary. ``category`` fills in a missing category key."""
        return cls(
            uuid=data["uuid"],
            category=data.get("category") or category or "",
            start=_parse_date(data.get("sdate")),
            end=_parse_date(data.get("edate")),
            value=data.get("value"),
            unit=data.get("unit"),
            source_id=data.get("source"),
            metadata=data.get("metadata", {}),
            objects=[cls.from_dict(obj) for obj in data.get("objects", [])],
        )
