from pathlib import Path

from procwatch.consts.ExportFormat import ExportFormat
from procwatch.models import CompiledTable
from .exporter import DataExporter, exporter_registry


@exporter_registry.register(ExportFormat.CSV.value)
class CsvExporter(DataExporter):
    """Header row plus one line per frame; missing samples are empty cells."""

    format = ExportFormat.CSV

    def _write(self, table: CompiledTable, path: Path) -> None:
        table.to_dataframe().to_csv(path, index=True)
