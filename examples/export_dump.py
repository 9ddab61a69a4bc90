"""
Example: Export a local record dump to JSON and SQLite in one run.

Usage:
    python examples/export_dump.py ./health_dump
"""

import asyncio
import sys
from pathlib import Path

from health_exporter import ExportType, HealthDataExporter, RunConfiguration
from health_exporter.sources.directory import DirectorySource
from health_exporter.targets import JSONDocumentTarget, SQLiteTarget


async def main(dump_dir: Path):
    output_dir = Path("./export_output")
    targets = [
        JSONDocumentTarget(output_dir / "export.json"),
        SQLiteTarget(output_dir / "export.db"),
    ]

    exporter = HealthDataExporter(DirectorySource(dump_dir))
    result = await exporter.export(
        targets,
        RunConfiguration(export_type=ExportType.ALL, profile_name="example"),
        on_progress=lambda message, percent: print(f"{(percent or 0) * 100:5.1f}%  {message}"),
    )

    if result.ok:
        print(f"\n✅ Exported to: {output_dir.absolute()}")
    else:
        print(f"\n❌ Export failed during {result.phase}: {result.error}")


if __name__ == "__main__":
    asyncio.run(main(Path(sys.argv[1] if len(sys.argv) > 1 else "./health_dump")))
