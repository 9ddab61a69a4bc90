"""
ExportTarget Protocol — Base interface for all export destinations.
"""

from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Protocol, runtime_checkable

from health_exporter.core.errors import TargetStateError

logger = logging.getLogger(__name__)


class TargetState(Enum):
    """Lifecycle state of a target within one run."""

    UNOPENED = "unopened"
    OPEN = "open"
    CLOSED = "closed"
    FAILED = "failed"


@runtime_checkable
class ExportTarget(Protocol):
    """
    Protocol that all targets must implement.

    The orchestrator calls ``open`` and ``close`` exactly once per run;
    stages only ever see targets in the open state and call ``write`` one
    batch at a time, possibly several times for the same stage. A failed
    run closes its targets with ``commit=False`` and nothing it wrote may
    become visible at the destination.
    """

    name: str

    def is_valid(self) -> bool:
        """Check the destination is usable before anything is opened."""
        ...

    async def open(self) -> None:
        """Acquire the destination."""
        ...

    async def write(self, stage_name: str, records: list[dict]) -> None:
        """Append a batch of records to the section for ``stage_name``."""
        ...

    async def close(self, commit: bool = True) -> None:
        """Release the destination; keep what was written only when ``commit`` is true."""
        ...


class FileTarget:
    """
    Lifecycle bookkeeping shared by the file based targets.

    Subclasses implement ``_open``, ``_write`` and ``_close``; this class
    enforces the ``UNOPENED -> OPEN -> CLOSED`` transitions and marks the
    target ``FAILED`` when opening or closing raises.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self.name = str(self.path)
        self.state = TargetState.UNOPENED
        self.count = 0

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"

    @property
    def tmp_path(self) -> Path:
        return self.path.with_name(self.path.name + ".tmp")

    def _publish(self, commit: bool) -> None:
        """Move the temporary file into place, or drop it when the run failed."""
        if commit:
            os.replace(self.tmp_path, self.path)
        else:
            self.tmp_path.unlink(missing_ok=True)

    def is_valid(self) -> bool:
        """Valid when the path is not a directory and its parent can hold a file."""
        if self.state is not TargetState.UNOPENED:
            return False
        if self.path.is_dir():
            return False
        for parent in self.path.parents:
            if parent.exists():
                return parent.is_dir()
        return False

    async def open(self) -> None:
        self._require(TargetState.UNOPENED, "open")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            await self._open()
        except Exception:
            self.state = TargetState.FAILED
            raise
        self.state = TargetState.OPEN
        logger.debug(f"Opened {self!r}")

    async def write(self, stage_name: str, records: list[dict]) -> None:
        self._require(TargetState.OPEN, "write to")
        await self._write(stage_name, records)
        self.count += len(records)

    async def close(self, commit: bool = True) -> None:
        self._require(TargetState.OPEN, "close")
        try:
            await self._close(commit)
        except Exception:
            self.state = TargetState.FAILED
            raise
        self.state = TargetState.CLOSED
        if commit:
            logger.info(f"Export complete: {self.count} records written to {self.path}")
        else:
            logger.info(f"Export discarded: {self.path} left untouched")

    def _require(self, state: TargetState, action: str) -> None:
        if self.state is not state:
            raise TargetStateError(f"cannot {action} {self!r} in state {self.state.value}")

    async def _open(self) -> None:
        raise NotImplementedError

    async def _write(self, stage_name: str, records: list[dict]) -> None:
        raise NotImplementedError

    async def _close(self, commit: bool) -> None:
        raise NotImplementedError
