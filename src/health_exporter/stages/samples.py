"""
Sample stages — one stage per quantity, category or correlation type.

Each stage exports a single type identifier under its own section name and
reports that identifier as its progress message.
"""

from __future__ import annotations

from typing import Sequence

from health_exporter.models.config import RunConfiguration
from health_exporter.models.record import Record
from health_exporter.sources.base import RecordSource
from health_exporter.stages.base import stream_records
from health_exporter.targets.base import ExportTarget


class QuantityStage:
    """Numeric samples, exported in the unit resolved by discovery."""

    def __init__(self, config: RunConfiguration, category: str, unit: str):
        self.config = config
        self.category = category
        self.unit = unit
        self.name = category
        self.message = category

    def __repr__(self) -> str:
        return f"QuantityStage({self.category!r}, unit={self.unit!r})"

    def _serialize(self, record: Record) -> dict:
        data = record.to_dict()
        data["unit"] = record.unit or self.unit
        return data

    async def export(self, source: RecordSource, targets: Sequence[ExportTarget]) -> None:
        await stream_records(
            source.read(self.category, self.unit),
            targets,
            self.name,
            self.config,
            serialize=self._serialize,
        )


class CategoryStage:
    """Enumerated samples such as sleep analysis; no unit."""

    def __init__(self, config: RunConfiguration, category: str):
        self.config = config
        self.category = category
        self.name = category
        self.message = category

    def __repr__(self) -> str:
        return f"CategoryStage({self.category!r})"

    async def export(self, source: RecordSource, targets: Sequence[ExportTarget]) -> None:
        await stream_records(source.read(self.category), targets, self.name, self.config)


class CorrelationStage:
    """
    Composite samples (blood pressure, food) made of other samples.

    Member records travel inside the correlation's ``objects`` list; only
    the correlation itself is filtered by the run configuration.
    """

    def __init__(self, config: RunConfiguration, category: str):
        self.config = config
        self.category = category
        self.name = category
        self.message = category

    def __repr__(self) -> str:
        return f"CorrelationStage({self.category!r})"

    async def export(self, source: RecordSource, targets: Sequence[ExportTarget]) -> None:
        await stream_records(source.read(self.category), targets, self.name, self.config)
