"""procwatch: lightweight process start/stop watching and per-process telemetry recording."""

from procwatch.models import CompiledTable
from procwatch.service.dataset import (
    AttributeDataSet,
    ProcessCPUDataSet,
    ProcessDataSet,
    ProcessMemoryDataSet,
    attribute_registry,
)
from procwatch.service.exporter import DataExporter, ExportError, exporter_registry
from procwatch.service.monitor import MonitoringSession, ProcessSource, ProcessWatcher

__version__ = "0.1.0"

__all__ = [
    "AttributeDataSet",
    "CompiledTable",
    "DataExporter",
    "ExportError",
    "MonitoringSession",
    "ProcessCPUDataSet",
    "ProcessDataSet",
    "ProcessMemoryDataSet",
    "ProcessSource",
    "ProcessWatcher",
    "attribute_registry",
    "exporter_registry",
]
