"""
Export error taxonomy.

A run reports at most one of these through its completion callback. The
``phase`` attribute tells the caller which part of the run failed.
"""

from __future__ import annotations


class ExportError(Exception):
    """Base error for export operations."""

    phase = "run"


class InvalidArgumentError(ExportError, ValueError):
    """Raised when a target or configuration is rejected before any side effect."""

    phase = "validate"

    def __init__(self, message: str, target=None):
        super().__init__(message)
        self.target = target


class TargetLifecycleError(ExportError):
    """A target failed to open or close."""

    def __init__(self, target, cause: BaseException | None = None):
        self.target = target
        self.target_name = getattr(target, "name", repr(target))
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"failed to {self.phase} target {self.target_name!r}{detail}")


class TargetOpenError(TargetLifecycleError):
    phase = "open"


class TargetCloseError(TargetLifecycleError):
    phase = "close"


class StageFailure(ExportError):
    """A stage failed while reading from the source or writing to a target."""

    phase = "stage"

    def __init__(self, stage_name: str, cause: BaseException | None = None):
        self.stage_name = stage_name
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"stage {stage_name!r} failed{detail}")


class ExportCancelledError(ExportError):
    """The run was cancelled at a stage boundary."""

    phase = "cancel"


class SourceError(ExportError):
    """The record source could not authorize, discover units, or read."""

    phase = "source"


class TargetStateError(ExportError, RuntimeError):
    """A target was used outside of its open state."""
