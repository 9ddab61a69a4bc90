"""
RecordSource Protocol — the upstream store the stages read from.
"""

from __future__ import annotations

from typing import AsyncIterator, Iterable, Protocol, runtime_checkable

from health_exporter.models.record import Record


@runtime_checkable
class RecordSource(Protocol):
    """
    Protocol that all record sources must implement.

    Sources are read-only. A run calls ``authorize`` and ``preferred_units``
    once before it starts, then ``read`` once per stage.
    """

    async def authorize(self, types: Iterable[str]) -> None:
        """Request read access to the given type identifiers."""
        ...

    async def preferred_units(self, quantity_types: Iterable[str]) -> dict[str, str]:
        """Resolve the unit each quantity type should be exported in."""
        ...

    def read(self, category: str, unit: str | None = None) -> AsyncIterator[Record]:
        """Lazily yield every record of ``category``. Not restartable."""
        ...
