"""Tests for the individual export stages."""

from datetime import datetime

import pytest

from conftest import FakeSource, RecordingTarget, make_record

from health_exporter import __version__
from health_exporter.models.catalog import WORKOUT_TYPE
from health_exporter.models.config import GENERATED_BY_KEY, ExportType, RunConfiguration
from health_exporter.stages import (
    CorrelationStage,
    MetaDataStage,
    QuantityStage,
    UserDataStage,
    WorkoutStage,
    stream_records,
)

APP = "com.example.app"


async def collect(records):
    for record in records:
        yield record


class TestMetaDataStage:
    @pytest.mark.asyncio
    async def test_writes_single_metadata_entry(self):
        config = RunConfiguration(profile_name="alice", export_uuid="run-1")
        target = RecordingTarget("t")

        await MetaDataStage(config).export(FakeSource(), [target])

        [meta] = target.written["metaData"]
        assert meta["type"] == "All"
        assert meta["exportUuid"] == "run-1"
        assert meta["profileName"] == "alice"
        assert meta["version"] == __version__
        assert "since" not in meta


class TestUserDataStage:
    @pytest.mark.asyncio
    async def test_collects_characteristics_with_values(self):
        source = FakeSource(
            records={
                "blood": [make_record("c1", "blood", "A+")],
                "sex": [make_record("c2", "sex", None)],
            }
        )
        target = RecordingTarget("t")

        await UserDataStage(RunConfiguration(), characteristic_types={"sex", "blood"}).export(source, [target])

        assert target.written["userData"] == [{"characteristic": "blood", "value": "A+"}]
        assert source.reads == ["blood", "sex"]


class TestQuantityStage:
    @pytest.mark.asyncio
    async def test_filters_by_source_and_applies_unit(self):
        source = FakeSource(
            records={
                "mass": [
                    make_record("m1", "mass", 70.0),
                    make_record("m2", "mass", 71.0, source_id="other"),
                ]
            }
        )
        config = RunConfiguration(export_type=ExportType.ADDED_BY_THIS_APP, app_source_id=APP)
        targets = [RecordingTarget("t0"), RecordingTarget("t1")]

        await QuantityStage(config, "mass", "kg").export(source, targets)

        for target in targets:
            assert target.written["mass"] == [
                {
                    "uuid": "m1",
                    "category": "mass",
                    "sdate": "2024-01-01T08:00:00",
                    "edate": "2024-01-01T08:00:00",
                    "value": 70.0,
                    "unit": "kg",
                    "source": APP,
                }
            ]

    @pytest.mark.asyncio
    async def test_generated_requires_marker(self):
        source = FakeSource(
            records={
                "mass": [
                    make_record("m1", "mass", metadata={GENERATED_BY_KEY: APP}),
                    make_record("m2", "mass"),
                ]
            }
        )
        config = RunConfiguration(export_type=ExportType.GENERATED_BY_THIS_APP, app_source_id=APP)
        target = RecordingTarget("t")

        await QuantityStage(config, "mass", "kg").export(source, [target])

        assert [r["uuid"] for r in target.written["mass"]] == ["m1"]


class TestCorrelationStage:
    @pytest.mark.asyncio
    async def test_keeps_member_records(self):
        members = [make_record("s", "systolic", 120), make_record("d", "diastolic", 80)]
        source = FakeSource(records={"bp": [make_record("bp1", "bp", None, objects=members)]})
        target = RecordingTarget("t")

        await CorrelationStage(RunConfiguration(), "bp").export(source, [target])

        [entry] = target.written["bp"]
        assert [obj["uuid"] for obj in entry["objects"]] == ["s", "d"]


class TestWorkoutStage:
    @pytest.mark.asyncio
    async def test_flattens_workout_attributes(self):
        workout = make_record("w1", WORKOUT_TYPE, {"activityType": "running", "duration": 1800})
        target = RecordingTarget("t")

        await WorkoutStage(RunConfiguration()).export(FakeSource(records={WORKOUT_TYPE: [workout]}), [target])

        [entry] = target.written["workouts"]
        assert entry["activityType"] == "running"
        assert entry["duration"] == 1800
        assert "value" not in entry


class TestStreamRecords:
    @pytest.mark.asyncio
    async def test_writes_in_batches(self, events):
        target = RecordingTarget("t", events)
        records = [make_record(f"r{i}") for i in range(5)]

        written = await stream_records(collect(records), [target], "A", RunConfiguration(), batch_size=2)

        assert written == 5
        assert len([e for e in events if e[0] == "write"]) == 3
        assert len(target.written["A"]) == 5

    @pytest.mark.asyncio
    async def test_empty_stage_still_writes_section(self, events):
        target = RecordingTarget("t", events)

        written = await stream_records(collect([]), [target], "A", RunConfiguration())

        assert written == 0
        assert target.written == {"A": []}

    @pytest.mark.asyncio
    async def test_exact_batch_multiple_has_no_trailing_write(self, events):
        target = RecordingTarget("t", events)
        records = [make_record(f"r{i}") for i in range(4)]

        await stream_records(collect(records), [target], "A", RunConfiguration(), batch_size=2)

        assert len([e for e in events if e[0] == "write"]) == 2

    @pytest.mark.asyncio
    async def test_start_date_filter(self):
        target = RecordingTarget("t")
        records = [
            make_record("old", start=datetime(2020, 1, 1)),
            make_record("new", start=datetime(2024, 6, 1)),
        ]
        config = RunConfiguration(start_date=datetime(2023, 1, 1))

        await stream_records(collect(records), [target], "A", config)

        assert [r["uuid"] for r in target.written["A"]] == ["new"]
