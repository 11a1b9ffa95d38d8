from pathlib import Path

from procwatch.consts.ExportFormat import ExportFormat
from procwatch.models import CompiledTable
from .exporter import DataExporter, exporter_registry


@exporter_registry.register(ExportFormat.JSON.value)
class JsonExporter(DataExporter):
    """JSON array with one object per frame (missing samples are null)."""

    format = ExportFormat.JSON

    def _write(self, table: CompiledTable, path: Path) -> None:
        df = table.to_dataframe().reset_index()
        df.to_json(path, orient="records", indent=2)
