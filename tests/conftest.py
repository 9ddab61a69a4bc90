"""Shared fakes for orchestrator, stage and exporter tests."""

from datetime import datetime

import pytest

from health_exporter.core.errors import SourceError
from health_exporter.models.record import Record


class RecordingTarget:
    """In-memory target that logs every lifecycle call into a shared event list."""

    def __init__(self, name, events=None, valid=True, fail_open=False, fail_close=False, fail_valid=False):
        self.name = name
        self.events = events if events is not None else []
        self.valid = valid
        self.fail_valid = fail_valid
        self.fail_open = fail_open
        self.fail_close = fail_close
        self.open_calls = 0
        self.close_calls = 0
        self.commits: list[bool] = []
        self.written: dict[str, list[dict]] = {}

    def is_valid(self):
        if self.fail_valid:
            raise OSError(f"cannot stat {self.name}")
        return self.valid

    async def open(self):
        self.open_calls += 1
        self.events.append(("open", self.name))
        if self.fail_open:
            raise OSError(f"cannot open {self.name}")

    async def write(self, stage_name, records):
        self.events.append(("write", self.name, stage_name))
        self.written.setdefault(stage_name, []).extend(records)

    async def close(self, commit=True):
        self.close_calls += 1
        self.commits.append(commit)
        self.events.append(("close", self.name))
        if self.fail_close:
            raise OSError(f"cannot close {self.name}")


class FakeStage:
    """Stage that records its export calls and optionally fails."""

    def __init__(self, name, events=None, fail=False):
        self.name = name
        self.message = name
        self.events = events if events is not None else []
        self.fail = fail
        self.export_calls = 0

    async def export(self, source, targets):
        self.export_calls += 1
        self.events.append(("export", self.name))
        if self.fail:
            raise RuntimeError(f"{self.name} exploded")
        for target in targets:
            await target.write(self.name, [{"stage": self.name}])


class FakeSource:
    """Record source serving canned records and units."""

    def __init__(self, records=None, units=None, fail_on=(), fail_authorize=False):
        self.records = records or {}
        self.units = units or {}
        self.fail_on = set(fail_on)
        self.fail_authorize = fail_authorize
        self.reads: list[str] = []
        self.authorized: set[str] = set()

    async def authorize(self, types):
        if self.fail_authorize:
            raise SourceError("authorization denied")
        self.authorized = set(types)

    async def preferred_units(self, quantity_types):
        return dict(self.units)

    async def read(self, category, unit=None):
        self.reads.append(category)
        if category in self.fail_on:
            raise SourceError(f"read of {category} failed")
        for record in self.records.get(category, []):
            yield record


def make_record(uuid, category="A", value=1.0, source_id="com.example.app", start=None, **kwargs):
    return Record(
        uuid=uuid,
        category=category,
        start=start or datetime(2024, 1, 1, 8, 0),
        end=start or datetime(2024, 1, 1, 8, 0),
        value=value,
        source_id=source_id,
        **kwargs,
    )


@pytest.fixture
def events():
    return []


@pytest.fixture
def three_targets(events):
    return [RecordingTarget(f"t{i}", events) for i in range(3)]
