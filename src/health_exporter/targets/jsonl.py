"""
JSON Lines Target — Streams records as one JSON object per line.

Each line carries the stage it came from:
    {"stage": "HKQuantityTypeIdentifierHeartRate", "uuid": "...", ...}

Lines are streamed to a temporary file that only replaces the destination
when the run succeeds.
"""

import json
import logging
from pathlib import Path

import aiofiles

from health_exporter.targets.base import FileTarget

logger = logging.getLogger(__name__)


class JSONLinesTarget(FileTarget):
    """Appends records to a ``.jsonl`` file as they arrive."""

    def __init__(self, path: Path):
        super().__init__(path)
        self._file = None

    async def _open(self) -> None:
        self._file = await aiofiles.open(self.tmp_path, "w")

    async def _write(self, stage_name: str, records: list[dict]) -> None:
        lines = "".join(json.dumps({"stage": stage_name, **record}) + "\n" for record in records)
        await self._file.write(lines)
        logger.debug(f"[JSONL] {stage_name}: {len(records)} records")

    async def _close(self, commit: bool) -> None:
        try:
            await self._file.flush()
        finally:
            await self._file.close()
            self._file = None
        self._publish(commit)
