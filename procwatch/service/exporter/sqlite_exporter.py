import sqlite3
from pathlib import Path

from procwatch.consts.ExportFormat import ExportFormat
from procwatch.models import CompiledTable
from .exporter import DataExporter, exporter_registry

FRAMES_TABLE = "frames"


@exporter_registry.register(ExportFormat.SQLITE.value)
class SqliteExporter(DataExporter):
    """SQLite database holding one `frames` table (timestamp + attribute columns)."""

    format = ExportFormat.SQLITE

    def _write(self, table: CompiledTable, path: Path) -> None:
        conn = sqlite3.connect(str(path))
        try:
            table.to_dataframe().to_sql(FRAMES_TABLE, conn, index=True, if_exists="replace")
            conn.commit()
        finally:
            conn.close()
