"""Export targets for health records."""

from health_exporter.targets.base import ExportTarget, FileTarget, TargetState
from health_exporter.targets.json_doc import JSONDocumentTarget
from health_exporter.targets.jsonl import JSONLinesTarget
from health_exporter.targets.sqlite import SQLiteTarget


def get_target(format_name: str, output_dir: str) -> ExportTarget:
    """Factory function to create a target by format name."""
    from pathlib import Path

    out = Path(output_dir)
    match format_name:
        case "json":
            return JSONDocumentTarget(path=out / "export.json")
        case "jsonl":
            return JSONLinesTarget(path=out / "export.jsonl")
        case "sqlite":
            return SQLiteTarget(db_path=out / "export.db")
        case _:
            raise ValueError(f"Unknown export format: {format_name!r}. Use 'json', 'jsonl', or 'sqlite'.")


__all__ = [
    "ExportTarget",
    "FileTarget",
    "TargetState",
    "JSONDocumentTarget",
    "JSONLinesTarget",
    "SQLiteTarget",
    "get_target",
]
