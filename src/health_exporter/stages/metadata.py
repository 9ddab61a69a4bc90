"""Metadata stage — describes the export itself."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

from health_exporter import __version__
from health_exporter.models.config import RunConfiguration
from health_exporter.sources.base import RecordSource
from health_exporter.stages.base import write_to_targets
from health_exporter.targets.base import ExportTarget


class MetaDataStage:
    name = "metaData"
    message = "metadata"

    def __init__(self, config: RunConfiguration):
        self.config = config

    async def export(self, source: RecordSource, targets: Sequence[ExportTarget]) -> None:
        meta = {
            "type": self.config.export_type.value,
            "exportUuid": self.config.export_uuid,
            "profileName": self.config.profile_name,
            "date": datetime.now(timezone.utc).isoformat(),
            "version": __version__,
        }
        if self.config.start_date is not None:
            meta["since"] = self.config.start_date.isoformat()
        await write_to_targets(targets, self.name, [meta])
