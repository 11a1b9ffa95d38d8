"""Exporters; importing this package registers every built-in exporter."""

from .exporter import DataExporter, ExportError, exporter_registry
from .csv_exporter import CsvExporter
from .json_exporter import JsonExporter
from .markdown_exporter import MarkdownExporter
from .sqlite_exporter import SqliteExporter

__all__ = [
    "DataExporter",
    "ExportError",
    "exporter_registry",
    "CsvExporter",
    "JsonExporter",
    "MarkdownExporter",
    "SqliteExporter",
]
