from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from procwatch.consts.ExportFormat import ExportFormat
from procwatch.models import CompiledTable
from procwatch.util.file_utils import create_unique_file, delete_file, resolve_output_dir
from procwatch.util.log_config import setup_logger
from procwatch.util.registry import Registry

logger = setup_logger(__name__)


class ExportError(RuntimeError):
    """An exporter could not produce its output file."""


class DataExporter(ABC):
    """Abstract base exporter.

    Subclasses set ``format`` and implement _write. Every export() call
    writes a new file; earlier outputs are never touched.
    """

    format: ExportFormat

    def __init__(self, output_dir: Optional[Path] = None) -> None:
        self.output_dir = output_dir

    def export(self, table: CompiledTable) -> Path:
        """
        Write table to a fresh file.

        Returns:
            Path of the written file

        Raises:
            ExportError: If the file couldn't be created or written
        """
        try:
            directory = resolve_output_dir(self.output_dir)
            path = create_unique_file(directory, f"procwatch_{table.pid}_", self.format.extension)
        except OSError as e:
            raise ExportError(f"Could not create {self.format.value} output file: {e}") from e

        try:
            self._write(table, path)
        except Exception as e:
            delete_file(path)
            raise ExportError(f"Writing {self.format.value} export failed: {e}") from e

        logger.debug(f"{type(self).__name__} wrote {table.count} row(s) to {path}")
        return path

    @abstractmethod
    def _write(self, table: CompiledTable, path: Path) -> None:
        """Serialize table into the (already created, empty) file at path."""
        pass


exporter_registry: Registry[DataExporter] = Registry("exporter")
