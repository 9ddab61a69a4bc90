"""
User data stage — characteristics the user entered directly.

These values are never written by an exporting app, so the stage is only
part of runs that export everything.
"""

from __future__ import annotations

from typing import Sequence

from health_exporter.models.catalog import CHARACTERISTIC_TYPES
from health_exporter.models.config import RunConfiguration
from health_exporter.sources.base import RecordSource
from health_exporter.stages.base import write_to_targets
from health_exporter.targets.base import ExportTarget


class UserDataStage:
    name = "userData"
    message = "user data"

    def __init__(self, config: RunConfiguration, characteristic_types=CHARACTERISTIC_TYPES):
        self.config = config
        self.characteristic_types = sorted(characteristic_types)

    async def export(self, source: RecordSource, targets: Sequence[ExportTarget]) -> None:
        entries = []
        for characteristic in self.characteristic_types:
            async for record in source.read(characteristic):
                if record.value is not None:
                    entries.append({"characteristic": characteristic, "value": record.value})
        await write_to_targets(targets, self.name, entries)
