"""Export stages, one per record category plus metadata, user data and workouts."""

from health_exporter.stages.base import WRITE_BATCH_SIZE, ExportStage, stream_records, write_to_targets
from health_exporter.stages.metadata import MetaDataStage
from health_exporter.stages.samples import CategoryStage, CorrelationStage, QuantityStage
from health_exporter.stages.user_data import UserDataStage
from health_exporter.stages.workout import WorkoutStage

__all__ = [
    "ExportStage",
    "MetaDataStage",
    "UserDataStage",
    "QuantityStage",
    "CategoryStage",
    "CorrelationStage",
    "WorkoutStage",
    "WRITE_BATCH_SIZE",
    "stream_records",
    "write_to_targets",
]
