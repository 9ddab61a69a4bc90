"""
Run configuration — what a single export run should contain.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from health_exporter.core.errors import InvalidArgumentError
from health_exporter.models.record import Record

# Metadata key a writing app stamps on records it generated itself.
GENERATED_BY_KEY = "HealthExporter.generatedBy"

DiscoveryResult = Mapping[str, str]


class ExportType(Enum):
    """Which records an export run includes."""

    ALL = "All"
    ADDED_BY_THIS_APP = "Added by this app"
    GENERATED_BY_THIS_APP = "Generated by this app"


@dataclass(frozen=True)
class RunConfiguration:
    """
    Immutable description of one export run.

    ``app_source_id`` identifies records written by this application and is
    required for every mode except ``ExportType.ALL``.
    """

    export_type: ExportType = ExportType.ALL
    app_source_id: str | None = None
    export_uuid: str = field(default_factory=lambda: str(uuid.uuid4()))
    profile_name: str | None = None
    start_date: datetime | None = None
    destination_settings: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(
            self, "destination_settings", MappingProxyType(dict(self.destination_settings))
        )

    def validate(self) -> None:
        """Raise InvalidArgumentError if the configuration cannot drive a run."""
        if not isinstance(self.export_type, ExportType):
            raise InvalidArgumentError(f"unknown export type {self.export_type!r}")
        if self.export_type is not ExportType.ALL and not self.app_source_id:
            raise InvalidArgumentError(
                f"export type {self.export_type.value!r} requires an app source id"
            )
        if not self.export_uuid:
            raise InvalidArgumentError("export uuid must not be empty")

    def accepts(self, record: Record) -> bool:
        """Check whether a record belongs in this run."""
        if self.start_date is not None and record.start is not None:
            if _aware(record.start) < _aware(self.start_date):
                return False

        if self.export_type is ExportType.ALL:
            return True
        if record.source_id != self.app_source_id:
            return False
        if self.export_type is ExportType.GENERATED_BY_THIS_APP:
            return record.metadata.get(GENERATED_BY_KEY) == self.app_source_id
        return True


def _aware(value: datetime) -> datetime:
    # Naive datetimes are treated as UTC so mixed inputs compare.
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
