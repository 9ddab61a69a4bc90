"""
Export Orchestrator — drives one export run at a time.

A run walks through a fixed lifecycle:
- Validate every target (nothing is touched if one is invalid)
- Open every target in order
- Run the stages one after another, reporting progress before each
- Close every opened target, whatever happened before
- Report success (with a final 1.0 progress) or the first error
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Iterable, Sequence

from health_exporter.core.errors import (
    ExportCancelledError,
    ExportError,
    InvalidArgumentError,
    StageFailure,
    TargetCloseError,
    TargetOpenError,
)
from health_exporter.models.result import RunResult
from health_exporter.sources.base import RecordSource
from health_exporter.stages.base import ExportStage
from health_exporter.targets.base import ExportTarget

logger = logging.getLogger(__name__)

DONE_MESSAGE = "done"

ProgressCallback = Callable[[str, "float | None"], "Awaitable[Any] | Any"]
CompletionCallback = Callable[["ExportError | None"], "Awaitable[Any] | Any"]


def validate_targets(targets: Iterable[ExportTarget]) -> None:
    """Raise InvalidArgumentError for the first target that is not usable."""
    for target in targets:
        try:
            valid = target.is_valid()
        except Exception as e:
            raise InvalidArgumentError(f"cannot validate export target {target!r}: {e}", target=target) from e
        if not valid:
            raise InvalidArgumentError(f"invalid export target {target!r}", target=target)


async def notify(callback: Callable | None, *args) -> None:
    """Invoke a plain or coroutine callback."""
    if callback is None:
        return
    outcome = callback(*args)
    if inspect.isawaitable(outcome):
        await outcome


class ExportOrchestrator:
    """
    Runs export pipelines strictly one at a time.

    Concurrent calls to ``run`` (or runs scheduled with ``submit``) wait for
    the run slot in arrival order; targets and stages of one run are never
    touched by another.
    """

    def __init__(self, done_message: str = DONE_MESSAGE):
        self.done_message = done_message
        self._slot = asyncio.Lock()

    @property
    def busy(self) -> bool:
        return self._slot.locked()

    def submit(
        self,
        targets: Iterable[ExportTarget],
        stages: Iterable[ExportStage],
        source: RecordSource,
        on_progress: ProgressCallback | None = None,
        on_done: CompletionCallback | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> asyncio.Task:
        """Queue a run and return the task that resolves to its RunResult."""
        return asyncio.create_task(
            self.run(targets, stages, source, on_progress, on_done, cancel_event)
        )

    async def run(
        self,
        targets: Iterable[ExportTarget],
        stages: Iterable[ExportStage],
        source: RecordSource,
        on_progress: ProgressCallback | None = None,
        on_done: CompletionCallback | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> RunResult:
        """
        Execute one run and report its outcome.

        Args:
            targets: Destinations to open, write and close.
            stages: Stages to run in order. The list is frozen on entry.
            source: Record source handed to every stage.
            on_progress: Called with ``(message, fraction)`` before each stage
                and with ``(done_message, 1.0)`` after a successful run.
            on_done: Called exactly once with ``None`` or the run's error.
            cancel_event: When set, the run stops at the next stage boundary
                with ExportCancelledError.

        Returns:
            The RunResult, which carries the same error passed to ``on_done``.
        """
        targets = list(targets)
        stages = tuple(stages)

        async with self._slot:
            result = await self._execute(targets, stages, source, on_progress, cancel_event)

            if result.ok:
                logger.info(f"Export finished: {len(result.stages_run)} stages")
                try:
                    await notify(on_progress, self.done_message, 1.0)
                except Exception as e:
                    # Targets are already committed.
                    logger.warning(f"Progress callback failed on completion: {e}")
            else:
                logger.error(f"Export failed during {result.phase}: {result.error}")
            await notify(on_done, result.error)

        return result

    async def _execute(
        self,
        targets: list[ExportTarget],
        stages: Sequence[ExportStage],
        source: RecordSource,
        on_progress: ProgressCallback | None,
        cancel_event: asyncio.Event | None,
    ) -> RunResult:
        result = RunResult()

        # --- 1. VALIDATE ---
        try:
            validate_targets(targets)
        except InvalidArgumentError as e:
            result.error = e
            return result

        logger.info(f"Starting export: {len(stages)} stages into {len(targets)} targets")

        opened: list[ExportTarget] = []
        try:
            # --- 2. OPEN ---
            for target in targets:
                try:
                    await target.open()
                except Exception as e:
                    raise TargetOpenError(target, e) from e
                opened.append(target)

            # --- 3. STAGES ---
            await self._run_stages(stages, opened, source, on_progress, cancel_event, result)
        except ExportError as e:
            result.error = e
        finally:
            # --- 4. CLOSE ---
            await self._close_targets(opened, result)

        return result

    async def _run_stages(
        self,
        stages: Sequence[ExportStage],
        targets: list[ExportTarget],
        source: RecordSource,
        on_progress: ProgressCallback | None,
        cancel_event: asyncio.Event | None,
        result: RunResult,
    ) -> None:
        total = len(stages)
        for index, stage in enumerate(stages):
            # Progress marks the start of a stage, not its completion.
            try:
                await notify(on_progress, stage.message, index / total)
            except Exception as e:
                raise StageFailure(stage.name, e) from e

            if cancel_event is not None and cancel_event.is_set():
                raise ExportCancelledError(f"export cancelled before stage {stage.name!r}")

            logger.debug(f"Stage {index + 1}/{total}: {stage.name}")
            try:
                await stage.export(source, targets)
            except Exception as e:
                raise StageFailure(stage.name, e) from e
            result.stages_run.append(stage.name)

    async def _close_targets(self, targets: list[ExportTarget], result: RunResult) -> None:
        """
        Close every target once; the first failure counts only if nothing failed before.

        Targets are told to commit only while the run is still error free: after
        a stage or open failure every target rolls back, and after a close
        failure the targets that follow it roll back.
        """
        for target in targets:
            try:
                await target.close(commit=result.error is None)
            except Exception as e:
                error = TargetCloseError(target, e)
                error.__cause__ = e
                if result.error is None:
                    result.error = error
                else:
                    logger.warning(f"Suppressed error while closing after failure: {error}")
                continue
            result.targets_closed.append(getattr(target, "name", repr(target)))
