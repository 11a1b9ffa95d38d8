"""
Process Data Set Module

Records frames of attribute samples for one target process and compiles them
into a table that exporters can serialize. Not thread safe: use one data set
from one thread at a time.
"""
import time
from pathlib import Path
from typing import Dict, List, Optional

import psutil

from procwatch.models import CompiledTable, Frame, TIMESTAMP_COLUMN
from procwatch.service.exporter.exporter import DataExporter
from procwatch.service.monitor.process_source import ProcessSource
from procwatch.util.log_config import setup_logger
from .attribute_data_set import AttributeDataSet

logger = setup_logger(__name__)


class ProcessDataSet:
    """Time series of attribute samples for one process"""

    def __init__(self, process: psutil.Process, source: Optional[ProcessSource] = None):
        """
        Initialize an empty data set bound to a process.

        Args:
            process: Target process handle (borrowed, never terminated here)
            source: Snapshot source used for liveness checks
        """
        self.process = process
        self.source = source or ProcessSource()
        # dict keeps registration order, which is the recording order
        self._attributes: Dict[type, AttributeDataSet] = {}
        self._frames: List[Frame] = []
        self.last_export_error: Optional[str] = None

    @classmethod
    def from_pid(cls, pid: int, source: Optional[ProcessSource] = None) -> "ProcessDataSet":
        """Bind a new data set to pid; raises psutil.NoSuchProcess if it's gone."""
        source = source or ProcessSource()
        return cls(source.get_process(pid), source=source)

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def attribute_count(self) -> int:
        return len(self._attributes)

    @property
    def frame_count(self) -> int:
        return len(self._frames)

    @property
    def columns(self) -> List[str]:
        return [attribute.name for attribute in self._attributes.values()]

    def add_attribute_data_set(self, attribute: AttributeDataSet) -> bool:
        """
        Register an attribute data set.

        Returns:
            False if the same type (or another type with the same column
            name) is already registered, or the column name is empty or
            reserved; True otherwise
        """
        attribute_type = type(attribute)
        if not attribute.name or attribute.name == TIMESTAMP_COLUMN:
            logger.warning(f"Invalid column name '{attribute.name}' for pid {self.pid}; "
                           f"{attribute_type.__name__} rejected")
            return False
        if attribute_type in self._attributes:
            logger.warning(f"Duplicate attribute data set {attribute_type.__name__} for pid {self.pid}; rejected")
            return False
        if attribute.name in self.columns:
            logger.warning(f"Column '{attribute.name}' already recorded for pid {self.pid}; "
                           f"{attribute_type.__name__} rejected")
            return False

        self._attributes[attribute_type] = attribute
        return True

    def record(self) -> bool:
        """
        Sample every registered attribute data set once.

        A failing attribute leaves a missing value in the frame without
        affecting the others.

        Returns:
            True iff a frame was appended (False when the process is gone)
        """
        if not self.source.is_alive(self.process):
            logger.debug(f"Process {self.pid} is not running; no frame recorded")
            return False

        now = time.time()
        frame = Frame(timestamp=now)
        failed = []

        for attribute_type, attribute in self._attributes.items():
            try:
                ok = attribute.record(self.process, now)
            except Exception:
                logger.exception(f"Attribute data set {attribute_type.__name__} raised for pid {self.pid}")
                ok = False

            frame.values[attribute_type] = attribute.last_value if ok else None
            if not ok:
                failed.append(attribute.name)

        # A failure caused by the process exiting mid-sample drops the frame
        if failed and not self.source.is_alive(self.process):
            logger.debug(f"Process {self.pid} exited while sampling; frame discarded")
            return False

        if failed:
            logger.debug(f"Partial frame for pid {self.pid}: missing {', '.join(failed)}")

        self._frames.append(frame)
        return True

    def compile(self) -> CompiledTable:
        """Build a table of every frame recorded so far; frames are kept."""
        attribute_types = list(self._attributes)
        return CompiledTable(
            pid=self.pid,
            columns=[self._attributes[t].name for t in attribute_types],
            timestamps=[frame.timestamp for frame in self._frames],
            rows=[[frame.values.get(t) for t in attribute_types] for frame in self._frames],
        )

    def export(self, exporter: DataExporter) -> Optional[Path]:
        """
        Serialize the compiled table through exporter.

        Returns:
            Output path, or None on failure (details in last_export_error)
        """
        self.last_export_error = None
        try:
            path = exporter.export(self.compile())
        except Exception as e:
            self.last_export_error = f"{type(exporter).__name__}: {e}"
            logger.error(f"Export failed for pid {self.pid}: {self.last_export_error}")
            return None

        logger.info(f"Exported {self.frame_count} frame(s) for pid {self.pid} to {path}")
        return path
