"""Workout stage — training sessions, always the last stage of a run."""

from __future__ import annotations

from typing import Sequence

from health_exporter.models.catalog import WORKOUT_TYPE
from health_exporter.models.config import RunConfiguration
from health_exporter.models.record import Record
from health_exporter.sources.base import RecordSource
from health_exporter.stages.base import stream_records
from health_exporter.targets.base import ExportTarget


def _serialize_workout(record: Record) -> dict:
    data = record.to_dict()
    # Workout attributes (duration, energy, distance) are flattened next to the dates.
    if isinstance(record.value, dict):
        del data["value"]
        data.update(record.value)
    return data


class WorkoutStage:
    name = "workouts"
    message = "workout"

    def __init__(self, config: RunConfiguration):
        self.config = config

    async def export(self, source: RecordSource, targets: Sequence[ExportTarget]) -> None:
        await stream_records(
            source.read(WORKOUT_TYPE),
            targets,
            self.name,
            self.config,
            serialize=_serialize_workout,
        )
