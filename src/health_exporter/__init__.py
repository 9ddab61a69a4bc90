"""
Health Data Exporter - Staged export of health records into pluggable targets.

Reads every record category a source exposes, runs one export stage per
category, and fans the records out to JSON, JSON Lines, or SQLite targets
with all-or-nothing target lifecycle handling.
"""

__version__ = "1.0.0"


def __getattr__(name: str):
    """Lazy import for heavy dependencies."""
    if name == "HealthDataExporter":
        from health_exporter.core.exporter import HealthDataExporter

        return HealthDataExporter
    if name == "ExportOrchestrator":
        from health_exporter.core.orchestrator import ExportOrchestrator

        return ExportOrchestrator
    if name == "RunConfiguration":
        from health_exporter.models.config import RunConfiguration

        return RunConfiguration
    if name == "ExportType":
        from health_exporter.models.config import ExportType

        return ExportType
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["HealthDataExporter", "ExportOrchestrator", "RunConfiguration", "ExportType", "__version__"]
