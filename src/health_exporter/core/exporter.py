"""
Health Data Exporter — public entry point for an export run.

Wires the external collaborators to the export core:
- Validates the run configuration and the targets
- Requests read authorization from the record source
- Resolves preferred units for the quantity types (discovery)
- Builds the stage list and hands the run to the orchestrator
"""

from __future__ import annotations

import logging
from typing import Sequence

from health_exporter.core.catalog import StageCatalogBuilder
from health_exporter.core.errors import ExportError, InvalidArgumentError, SourceError
from health_exporter.core.orchestrator import (
    CompletionCallback,
    ExportOrchestrator,
    ProgressCallback,
    notify,
    validate_targets,
)
from health_exporter.models.catalog import QUANTITY_TYPES, read_types
from health_exporter.models.config import RunConfiguration
from health_exporter.models.result import RunResult
from health_exporter.sources.base import RecordSource
from health_exporter.targets.base import ExportTarget

logger = logging.getLogger(__name__)


class HealthDataExporter:
    """
    Exports everything a record source holds into one or more targets.

    One exporter owns one orchestrator, so runs started through the same
    exporter never overlap.
    """

    def __init__(
        self,
        source: RecordSource,
        orchestrator: ExportOrchestrator | None = None,
        builder: StageCatalogBuilder | None = None,
        quantity_types=QUANTITY_TYPES,
    ):
        self.source = source
        self.orchestrator = orchestrator or ExportOrchestrator()
        self.builder = builder or StageCatalogBuilder()
        self.quantity_types = frozenset(quantity_types)

    async def export(
        self,
        targets: Sequence[ExportTarget],
        config: RunConfiguration,
        on_progress: ProgressCallback | None = None,
        on_completion: CompletionCallback | None = None,
    ) -> RunResult:
        """Run a complete export. ``on_completion`` fires exactly once."""
        targets = list(targets)
        try:
            config.validate()
            validate_targets(targets)
        except InvalidArgumentError as e:
            return await self._abort(e, on_completion)

        try:
            await self.source.authorize(read_types() | self.quantity_types)
            discovery = await self.source.preferred_units(self.quantity_types)
        except SourceError as e:
            return await self._abort(e, on_completion)
        except Exception as e:
            error = SourceError(f"discovery failed: {e}")
            error.__cause__ = e
            return await self._abort(error, on_completion)

        logger.info(f"Discovered units for {len(discovery)} quantity types")
        stages = self.builder.build(config, discovery)

        return await self.orchestrator.run(
            targets,
            stages,
            self.source,
            on_progress=on_progress,
            on_done=on_completion,
        )

    async def _abort(self, error: ExportError, on_completion: CompletionCallback | None) -> RunResult:
        logger.error(f"Export not started: {error}")
        await notify(on_completion, error)
        return RunResult(error=error)
