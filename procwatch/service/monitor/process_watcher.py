"""
Process Watcher Module

Polls the live process list on a background thread, diffs consecutive
snapshots and notifies subscribers about started and stopped processes.
One watcher is shared by everything in the application; start/stop calls are
reference counted so independent users can share its polling thread.
"""
import threading
from typing import Iterable, Optional, Set, Tuple

import psutil

from procwatch.service.monitor.monitoring_session import MonitoringSession
from procwatch.service.monitor.observer import ObserverList
from procwatch.service.monitor.process_source import ProcessSource, SnapshotUnavailableError
from procwatch.util.log_config import setup_logger

logger = setup_logger(__name__)

DEFAULT_SLEEP_INTERVAL = 0.5  # seconds
BASELINE_TIMEOUT = 5.0  # seconds
JOIN_GRACE = 2.0  # seconds


def diff_pids(known: Set[int], snapshot: Iterable[int]) -> Tuple[Set[int], Set[int]]:
    """
    Compare the previous and the current pid sets.

    Returns:
        (new pids, stopped pids)
    """
    current = set(snapshot)
    return current - known, known - current


class ProcessWatcher:
    """Reference-counted polling watcher for process start/stop events"""

    def __init__(self, source: Optional[ProcessSource] = None, sleep_interval: float = DEFAULT_SLEEP_INTERVAL):
        """
        Initialize the watcher (not watching yet).

        Args:
            source: Snapshot source (default: psutil backed ProcessSource)
            sleep_interval: Seconds between two snapshot comparisons
        """
        if sleep_interval <= 0:
            raise ValueError(f"sleep_interval must be positive, got {sleep_interval}")

        self.source = source or ProcessSource()
        self._sleep_interval = float(sleep_interval)

        # Callbacks get the psutil.Process of a started process / the pid of a stopped one
        self.on_new_process: ObserverList[psutil.Process] = ObserverList("new_process")
        self.on_process_stopped: ObserverList[int] = ObserverList("process_stopped")

        # Guards ref count, state and thread handle as one unit
        self._lock = threading.Lock()
        self._ref_count = 0
        self._watching = False
        self._thread: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None
        self._primed: Optional[threading.Event] = None

    @property
    def sleep_interval(self) -> float:
        return self._sleep_interval

    @property
    def is_watching(self) -> bool:
        with self._lock:
            return self._watching

    @property
    def ref_count(self) -> int:
        with self._lock:
            return self._ref_count

    def start_watching(self) -> None:
        """
        Take a reference on the watcher; the first reference starts polling.

        Returns once the polling thread has its baseline snapshot, so every
        process created afterwards is reported through on_new_process. The
        lock is not held while waiting for the baseline.

        Raises:
            RuntimeError: If the polling thread can't be started
        """
        with self._lock:
            self._ref_count += 1
            first = self._ref_count == 1
            if first:
                stop_event = threading.Event()
                primed = threading.Event()
                thread = threading.Thread(
                    target=self._poll_loop,
                    args=(stop_event, primed),
                    name="procwatch-poller",
                    daemon=True,
                )
                try:
                    thread.start()
                except RuntimeError:
                    self._ref_count -= 1
                    raise

                self._thread = thread
                self._stop_event = stop_event
                self._primed = primed
                self._watching = True
            primed = self._primed

        # Later references wait on the same baseline as the first one
        if primed is not None and not primed.wait(timeout=BASELINE_TIMEOUT):
            logger.warning(f"Baseline snapshot not ready after {BASELINE_TIMEOUT}s; continuing")
        if first:
            logger.info(f"Process watcher started (interval={self._sleep_interval}s)")

    def stop_watching(self) -> None:
        """
        Drop a reference; the last one stops polling.

        An unbalanced call is logged and ignored. The polling thread is joined
        unless this is called from one of its own callbacks.
        """
        with self._lock:
            if self._ref_count == 0:
                logger.warning("stop_watching() called more often than start_watching(); ignoring")
                return

            self._ref_count -= 1
            if self._ref_count > 0:
                return

            thread, stop_event = self._thread, self._stop_event
            self._thread = None
            self._stop_event = None
            self._primed = None
            self._watching = False
            if stop_event is not None:
                stop_event.set()

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self._sleep_interval + JOIN_GRACE)
            if thread.is_alive():
                logger.warning("Polling thread still busy dispatching; it will exit after the current tick")
        logger.info("Process watcher stopped")

    def session(self) -> MonitoringSession:
        """Start watching and return a session that stops it on close()."""
        return MonitoringSession(self)

    def _poll_loop(self, stop_event: threading.Event, primed: threading.Event) -> None:
        """Main polling loop (runs in background thread)"""
        known = self._take_baseline()
        primed.set()

        while not stop_event.wait(self._sleep_interval):
            try:
                self._tick(known)
            except Exception:
                logger.exception("Unexpected error in polling tick; continuing")

    def _take_baseline(self) -> Set[int]:
        try:
            return set(self.source.list_live_processes())
        except (SnapshotUnavailableError, psutil.Error, OSError) as e:
            logger.warning(f"Baseline snapshot failed, next tick reports all processes as new: {e}")
            return set()

    def _tick(self, known: Set[int]) -> None:
        try:
            snapshot = self.source.list_live_processes()
        except (SnapshotUnavailableError, psutil.Error, OSError) as e:
            logger.warning(f"Skipping tick, process snapshot unavailable: {e}")
            return

        new_pids, stopped_pids = diff_pids(known, snapshot.keys())

        for pid in new_pids:
            self.on_new_process.dispatch(snapshot[pid])
            known.add(pid)

        for pid in stopped_pids:
            self.on_process_stopped.dispatch(pid)
            known.discard(pid)

        if new_pids or stopped_pids:
            logger.debug(f"Tick: {len(new_pids)} started, {len(stopped_pids)} stopped, {len(known)} known")
