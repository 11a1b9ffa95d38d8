"""
Process Snapshot Source

Thin psutil wrapper answering "which processes are alive" and the per-process
metric queries the watcher and the data sets rely on.
"""
from typing import Dict

import psutil

from procwatch.util.log_config import setup_logger

logger = setup_logger(__name__)


class SnapshotUnavailableError(RuntimeError):
    """The live process list could not be read this time."""


class ProcessSource:
    """Snapshot source backed by psutil"""

    def list_live_processes(self) -> Dict[int, psutil.Process]:
        """
        Take a snapshot of all live processes.

        Returns:
            Mapping pid -> process handle

        Raises:
            SnapshotUnavailableError: If the OS process table can't be read
        """
        try:
            # process_iter skips processes that vanish while iterating
            return {proc.pid: proc for proc in psutil.process_iter()}
        except (psutil.Error, OSError) as e:
            raise SnapshotUnavailableError(f"Could not list processes: {e}") from e

    def get_process(self, pid: int) -> psutil.Process:
        """Build a handle for pid; raises psutil.NoSuchProcess if it's gone."""
        return psutil.Process(pid)

    def is_alive(self, process: psutil.Process) -> bool:
        """True while the process runs; zombies count as exited."""
        try:
            return process.is_running() and process.status() != psutil.STATUS_ZOMBIE
        except psutil.NoSuchProcess:
            return False
        except psutil.AccessDenied:
            # Can't read status but the handle still points at a live process
            return process.is_running()

    def cpu_time(self, process: psutil.Process) -> float:
        """Total CPU seconds (user + system) consumed so far."""
        times = process.cpu_times()
        return times.user + times.system

    def memory_usage(self, process: psutil.Process) -> int:
        """Resident set size in bytes."""
        return process.memory_info().rss
