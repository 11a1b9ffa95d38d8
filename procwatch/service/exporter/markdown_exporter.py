from pathlib import Path

from tabulate import tabulate

from procwatch.consts.ExportFormat import ExportFormat
from procwatch.models import CompiledTable, TIMESTAMP_COLUMN
from .exporter import DataExporter, exporter_registry


@exporter_registry.register(ExportFormat.MARKDOWN.value)
class MarkdownExporter(DataExporter):
    format = ExportFormat.MARKDOWN

    def _write(self, table: CompiledTable, path: Path) -> None:
        headers = [TIMESTAMP_COLUMN] + list(table.columns)
        records = [[ts] + list(row) for ts, row in zip(table.timestamps, table.rows)]
        text = tabulate(records, headers=headers, tablefmt="github", floatfmt=".3f", missingval="")
        with open(path, "w", encoding="utf-8") as f:
            f.write(f"# Process {table.pid}\n\n{text}\n")
