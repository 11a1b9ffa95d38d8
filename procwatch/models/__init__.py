"""Models for recorded process data."""

from .compiled_table import CompiledTable, TIMESTAMP_COLUMN
from .frame import Frame
from .stat_summary import StatSummary

__all__ = ["CompiledTable", "Frame", "StatSummary", "TIMESTAMP_COLUMN"]
