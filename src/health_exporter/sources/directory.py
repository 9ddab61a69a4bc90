"""
Directory Source — Reads records from a local JSON dump.

Expected layout:
    data_dir/
    ├── units.json                              {"HKQuantityTypeIdentifierHeartRate": "count/min", ...}
    ├── HKQuantityTypeIdentifierHeartRate.json  [{"uuid": ..., "sdate": ..., ...}, ...]
    ├── HKCharacteristicTypeIdentifierBloodType.json
    └── ...

A missing category file means the category holds no records.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import AsyncIterator, Iterable

import aiofiles

from health_exporter.core.errors import SourceError
from health_exporter.models.record import Record

logger = logging.getLogger(__name__)


class DirectorySource:
    """Serves records from ``<data_dir>/<category>.json`` files."""

    UNITS_FILE = "units.json"

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    async def authorize(self, types: Iterable[str]) -> None:
        if not self.data_dir.is_dir():
            raise SourceError(f"data directory not found: {self.data_dir}")
        logger.debug(f"Reading from {self.data_dir}")

    async def preferred_units(self, quantity_types: Iterable[str]) -> dict[str, str]:
        """Units for the requested types that appear in ``units.json``."""
        units = await self._load(self.data_dir / self.UNITS_FILE, default={})
        if not isinstance(units, dict):
            raise SourceError(f"{self.UNITS_FILE} must contain an object")
        return {type_id: units[type_id] for type_id in sorted(quantity_types) if type_id in units}

    async def read(self, category: str, unit: str | None = None) -> AsyncIterator[Record]:
        entries = await self._load(self.data_dir / f"{category}.json", default=[])
        if not isinstance(entries, list):
            raise SourceError(f"{category}.json must contain a list of records")

        for entry in entries:
            record = Record.from_dict(entry, category=category)
            if unit is not None and record.unit is None:
                record.unit = unit
            yield record

    async def _load(self, path: Path, default):
        if not path.exists():
            return default

        try:
            async with aiofiles.open(path) as f:
                content = await f.read()
            return json.loads(content) if content.strip() else default
        except json.JSONDecodeError as e:
            raise SourceError(f"corrupted JSON in {path}: {e}") from e
        except OSError as e:
            raise SourceError(f"cannot read {path}: {e}") from e
