"""
ExportStage Protocol — one unit of the export pipeline.
"""

from __future__ import annotations

import logging
from typing import AsyncIterator, Callable, Protocol, Sequence, runtime_checkable

from health_exporter.models.config import RunConfiguration
from health_exporter.models.record import Record
from health_exporter.sources.base import RecordSource
from health_exporter.targets.base import ExportTarget

logger = logging.getLogger(__name__)

WRITE_BATCH_SIZE = 500


@runtime_checkable
class ExportStage(Protocol):
    """
    Protocol that all stages must implement.

    ``name`` is the section key written to targets, ``message`` the label
    reported through progress. Stages receive targets that are already open
    and must not open or close them.
    """

    name: str
    message: str

    async def export(self, source: RecordSource, targets: Sequence[ExportTarget]) -> None:
        """Read this stage's records from ``source`` and write them to every target."""
        ...


async def write_to_targets(
    targets: Sequence[ExportTarget], stage_name: str, records: list[dict]
) -> None:
    """Write one batch to every target in order."""
    for target in targets:
        await target.write(stage_name, records)


async def stream_records(
    records: AsyncIterator[Record],
    targets: Sequence[ExportTarget],
    stage_name: str,
    config: RunConfiguration,
    serialize: Callable[[Record], dict] = Record.to_dict,
    batch_size: int = WRITE_BATCH_SIZE,
) -> int:
    """
    Filter ``records`` through the run configuration and fan them out in batches.

    Always writes at least one (possibly empty) batch so every target
    gets a section for the stage. Returns the number of records written.
    """
    batch: list[dict] = []
    written = 0
    flushed = False

    async for record in records:
        if not config.accepts(record):
            continue
        batch.append(serialize(record))
        if len(batch) >= batch_size:
            await write_to_targets(targets, stage_name, batch)
            written += len(batch)
            flushed = True
            batch = []

    if batch or not flushed:
        await write_to_targets(targets, stage_name, batch)
        written += len(batch)

    logger.debug(f"[{stage_name}] {written} records written to {len(targets)} targets")
    return written
