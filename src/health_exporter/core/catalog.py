"""
Stage catalog — turns discovery results into the ordered stage list of a run.
"""

from __future__ import annotations

from typing import Iterable

from health_exporter.models.catalog import CATEGORY_TYPES, CORRELATION_TYPES
from health_exporter.models.config import DiscoveryResult, ExportType, RunConfiguration
from health_exporter.stages import (
    CategoryStage,
    CorrelationStage,
    ExportStage,
    MetaDataStage,
    QuantityStage,
    UserDataStage,
    WorkoutStage,
)


class StageCatalogBuilder:
    """
    Builds the stages for one run.

    Metadata always comes first, user data right after it (only when
    exporting everything), and workouts last. Quantity stages follow the
    discovery order; category and correlation stages are sorted by
    identifier.
    """

    def __init__(
        self,
        category_types: Iterable[str] = CATEGORY_TYPES,
        correlation_types: Iterable[str] = CORRELATION_TYPES,
    ):
        self.category_types = sorted(category_types)
        self.correlation_types = sorted(correlation_types)

    def build(self, config: RunConfiguration, discovery: DiscoveryResult) -> list[ExportStage]:
        stages: list[ExportStage] = [MetaDataStage(config)]

        # The exporting app never writes user data, so it only belongs to full exports.
        if config.export_type is ExportType.ALL:
            stages.append(UserDataStage(config))

        stages.extend(QuantityStage(config, category, unit) for category, unit in discovery.items())
        stages.extend(CategoryStage(config, category) for category in self.category_types)
        stages.extend(CorrelationStage(config, category) for category in self.correlation_types)

        stages.append(WorkoutStage(config))
        return stages
