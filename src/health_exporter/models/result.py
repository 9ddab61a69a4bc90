"""Outcome of a single export run."""

from __future__ import annotations

from dataclasses import dataclass, field

from health_exporter.core.errors import ExportError


@dataclass
class RunResult:
    """Either success or the first error the run hit."""

    error: ExportError | None = None
    stages_run: list[str] = field(default_factory=list)
    targets_closed: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def phase(self) -> str | None:
        return self.error.phase if self.error is not None else None
