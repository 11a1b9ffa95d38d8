import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from procwatch.service.monitor.process_watcher import ProcessWatcher


class MonitoringSession:
    """
    Scoped hold on a ProcessWatcher.

    Creating a session calls start_watching(); close() (or leaving the
    ``with`` block) calls stop_watching() exactly once.
    """

    def __init__(self, watcher: "ProcessWatcher"):
        self.watcher = watcher
        self._lock = threading.Lock()
        self._closed = False
        watcher.start_watching()

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self.watcher.stop_watching()

    def __enter__(self) -> "MonitoringSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
