"""Tests for the file based export targets."""

import json
import sqlite3

import pytest

from health_exporter.core.errors import TargetStateError
from health_exporter.targets import (
    ExportTarget,
    JSONDocumentTarget,
    JSONLinesTarget,
    SQLiteTarget,
    TargetState,
    get_target,
)

META = {"type": "All", "exportUuid": "run-1"}
SAMPLES = [
    {"uuid": "s1", "category": "steps", "sdate": "2024-01-01T08:00:00", "edate": None, "value": 10},
    {"uuid": "s2", "category": "steps", "sdate": "2024-01-01T09:00:00", "edate": None, "value": 20},
]


async def run_lifecycle(target):
    await target.open()
    await target.write("metaData", [META])
    await target.write("steps", SAMPLES[:1])
    await target.write("steps", SAMPLES[1:])
    await target.close()


# ═══════════════════════════════════════════
# Lifecycle Tests
# ═══════════════════════════════════════════


class TestLifecycle:
    def test_targets_satisfy_protocol(self, tmp_path):
        assert isinstance(JSONDocumentTarget(tmp_path / "a.json"), ExportTarget)
        assert isinstance(JSONLinesTarget(tmp_path / "a.jsonl"), ExportTarget)
        assert isinstance(SQLiteTarget(tmp_path / "a.db"), ExportTarget)

    @pytest.mark.asyncio
    async def test_state_transitions(self, tmp_path):
        target = JSONLinesTarget(tmp_path / "out.jsonl")
        assert target.state is TargetState.UNOPENED
        await target.open()
        assert target.state is TargetState.OPEN
        await target.close()
        assert target.state is TargetState.CLOSED

    @pytest.mark.asyncio
    async def test_write_before_open_rejected(self, tmp_path):
        target = JSONDocumentTarget(tmp_path / "out.json")
        with pytest.raises(TargetStateError):
            await target.write("steps", SAMPLES)

    @pytest.mark.asyncio
    async def test_write_after_close_rejected(self, tmp_path):
        target = JSONDocumentTarget(tmp_path / "out.json")
        await target.open()
        await target.close()
        with pytest.raises(TargetStateError):
            await target.write("steps", SAMPLES)

    @pytest.mark.asyncio
    async def test_open_twice_rejected(self, tmp_path):
        target = JSONLinesTarget(tmp_path / "out.jsonl")
        await target.open()
        with pytest.raises(TargetStateError):
            await target.open()
        await target.close()

    @pytest.mark.asyncio
    async def test_failed_open_marks_failed(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        target = JSONLinesTarget(blocker / "out.jsonl")

        with pytest.raises(OSError):
            await target.open()
        assert target.state is TargetState.FAILED

    def test_validity(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x")

        assert JSONDocumentTarget(tmp_path / "out.json").is_valid()
        assert JSONDocumentTarget(tmp_path / "new" / "dir" / "out.json").is_valid()
        assert not JSONDocumentTarget(tmp_path).is_valid()
        assert not JSONDocumentTarget(blocker / "out.json").is_valid()

    @pytest.mark.asyncio
    async def test_used_target_is_not_valid_again(self, tmp_path):
        target = JSONLinesTarget(tmp_path / "out.jsonl")
        await target.open()
        await target.close()
        assert not target.is_valid()


# ═══════════════════════════════════════════
# Format Tests
# ═══════════════════════════════════════════


class TestJSONDocumentTarget:
    @pytest.mark.asyncio
    async def test_writes_single_document(self, tmp_path):
        path = tmp_path / "export.json"
        target = JSONDocumentTarget(path)

        await run_lifecycle(target)

        document = json.loads(path.read_text())
        assert document["metaData"] == META
        assert [r["uuid"] for r in document["steps"]] == ["s1", "s2"]
        assert not target.tmp_path.exists()
        assert target.count == 3


class TestJSONLinesTarget:
    @pytest.mark.asyncio
    async def test_one_line_per_record(self, tmp_path):
        path = tmp_path / "export.jsonl"

        await run_lifecycle(JSONLinesTarget(path))

        lines = [json.loads(line) for line in path.read_text().splitlines()]
        assert [line["stage"] for line in lines] == ["metaData", "steps", "steps"]
        assert lines[2]["uuid"] == "s2"


class TestSQLiteTarget:
    @pytest.mark.asyncio
    async def test_exports_rows(self, tmp_path):
        db_path = tmp_path / "export.db"

        await run_lifecycle(SQLiteTarget(db_path))

        conn = sqlite3.connect(str(db_path))
        rows = conn.execute("SELECT stage, uuid, payload FROM records ORDER BY stage, uuid").fetchall()
        conn.close()

        assert [(stage, uuid) for stage, uuid, _ in rows] == [
            ("metaData", "metaData:0"),
            ("steps", "s1"),
            ("steps", "s2"),
        ]
        assert json.loads(rows[2][2])["value"] == 20


# ═══════════════════════════════════════════
# Discarded Runs
# ═══════════════════════════════════════════


async def discard_run(target):
    await target.open()
    await target.write("metaData", [META])
    await target.write("steps", [{**SAMPLES[1], "value": 0}, {**SAMPLES[0], "uuid": "s3"}])
    await target.close(commit=False)


class TestDiscardedRun:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "cls,filename",
        [(JSONDocumentTarget, "export.json"), (JSONLinesTarget, "export.jsonl")],
    )
    async def test_previous_file_left_untouched(self, tmp_path, cls, filename):
        path = tmp_path / filename
        path.write_text('{"good": true}\n')
        target = cls(path)

        await discard_run(target)

        assert path.read_text() == '{"good": true}\n'
        assert not target.tmp_path.exists()
        assert target.state is TargetState.CLOSED

    @pytest.mark.asyncio
    async def test_no_file_created_when_none_existed(self, tmp_path):
        target = JSONDocumentTarget(tmp_path / "export.json")

        await discard_run(target)

        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_sqlite_rows_rolled_back(self, tmp_path):
        db_path = tmp_path / "export.db"
        await run_lifecycle(SQLiteTarget(db_path))

        await discard_run(SQLiteTarget(db_path))

        conn = sqlite3.connect(str(db_path))
        rows = conn.execute("SELECT stage, uuid, payload FROM records ORDER BY stage, uuid").fetchall()
        conn.close()
        assert [(stage, uuid) for stage, uuid, _ in rows] == [
            ("metaData", "metaData:0"),
            ("steps", "s1"),
            ("steps", "s2"),
        ]
        assert json.loads(rows[2][2])["value"] == 20


class TestGetTarget:
    @pytest.mark.parametrize(
        "fmt,cls,filename",
        [
            ("json", JSONDocumentTarget, "export.json"),
            ("jsonl", JSONLinesTarget, "export.jsonl"),
            ("sqlite", SQLiteTarget, "export.db"),
        ],
    )
    def test_factory(self, tmp_path, fmt, cls, filename):
        target = get_target(fmt, str(tmp_path))
        assert isinstance(target, cls)
        assert target.path == tmp_path / filename

    def test_unknown_format(self, tmp_path):
        with pytest.raises(ValueError):
            get_target("xml", str(tmp_path))
