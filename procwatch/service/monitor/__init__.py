"""Process watching: snapshot source, observer lists and the polling watcher."""

from .monitoring_session import MonitoringSession
from .observer import ObserverList, Subscription
from .process_source import ProcessSource, SnapshotUnavailableError
from .process_watcher import DEFAULT_SLEEP_INTERVAL, ProcessWatcher

__all__ = [
    "MonitoringSession",
    "ObserverList",
    "Subscription",
    "ProcessSource",
    "SnapshotUnavailableError",
    "DEFAULT_SLEEP_INTERVAL",
    "ProcessWatcher",
]
