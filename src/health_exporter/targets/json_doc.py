"""
JSON Document Target — Exports a run as one JSON document.

Output structure:
    {
        "metaData": {...},
        "userData": [...],
        "HKQuantityTypeIdentifierHeartRate": [...],
        ...
        "workouts": [...]
    }

Sections are buffered in memory and the document is written to a temporary
file on close, then moved into place. A failed run drops the temporary file
and leaves any earlier export at the destination untouched.
"""

import json
import logging
from pathlib import Path

import aiofiles

from health_exporter.targets.base import FileTarget

logger = logging.getLogger(__name__)


class JSONDocumentTarget(FileTarget):
    """Writes every stage as a key of a single JSON object."""

    def __init__(self, path: Path, indent: int | None = 2):
        super().__init__(path)
        self.indent = indent
        self.sections: dict[str, list[dict]] = {}

    async def _open(self) -> None:
        self.sections = {}
        # Fail on open, not on close, when the destination is unwritable.
        async with aiofiles.open(self.tmp_path, "w") as f:
            await f.write("")

    async def _write(self, stage_name: str, records: list[dict]) -> None:
        self.sections.setdefault(stage_name, []).extend(records)

    async def _close(self, commit: bool) -> None:
        if commit:
            document = {
                name: records[0] if name == "metaData" and len(records) == 1 else records
                for name, records in self.sections.items()
            }
            async with aiofiles.open(self.tmp_path, "w") as f:
                await f.write(json.dumps(document, indent=self.indent))
            logger.debug(f"[JSON] Wrote {len(document)} sections to {self.path}")
        self.sections = {}
        self._publish(commit)
