"""Shared test fixtures: fake processes/source for deterministic tests, real sleeping subprocesses."""

import subprocess
import sys
import threading
import time
from collections import namedtuple
from typing import Callable, Dict, Iterable

import psutil
import pytest

from procwatch.service.monitor.process_source import ProcessSource, SnapshotUnavailableError

CpuTimes = namedtuple("CpuTimes", ["user", "system"])
MemoryInfo = namedtuple("MemoryInfo", ["rss", "vms"])


class FakeProcess:
    """Stand-in for psutil.Process with settable metrics. No OS calls."""

    def __init__(self, pid: int, cpu_user: float = 0.0, cpu_system: float = 0.0, rss: int = 0):
        self.pid = pid
        self.cpu_user = cpu_user
        self.cpu_system = cpu_system
        self.rss = rss
        self.gone = False
        self.access_denied = False

    def _check(self):
        if self.gone:
            raise psutil.NoSuchProcess(self.pid)
        if self.access_denied:
            raise psutil.AccessDenied(self.pid)

    def is_running(self) -> bool:
        return not self.gone

    def status(self) -> str:
        self._check()
        return psutil.STATUS_RUNNING

    def cpu_times(self):
        self._check()
        return CpuTimes(self.cpu_user, self.cpu_system)

    def memory_info(self):
        self._check()
        return MemoryInfo(self.rss, self.rss * 2)

    def name(self) -> str:
        return f"fake-{self.pid}"


class FakeSource(ProcessSource):
    """Snapshot source whose process table is controlled by the test."""

    def __init__(self, pids: Iterable[int] = ()):
        self._lock = threading.Lock()
        self._processes: Dict[int, FakeProcess] = {pid: FakeProcess(pid) for pid in pids}
        self.fail = False
        self.snapshots_taken = 0

    def set_pids(self, pids: Iterable[int]) -> None:
        with self._lock:
            self._processes = {pid: self._processes.get(pid) or FakeProcess(pid) for pid in pids}

    def list_live_processes(self) -> Dict[int, FakeProcess]:
        with self._lock:
            self.snapshots_taken += 1
            if self.fail:
                raise SnapshotUnavailableError("process table unreadable")
            return dict(self._processes)

    def get_process(self, pid: int) -> FakeProcess:
        with self._lock:
            if pid not in self._processes:
                raise psutil.NoSuchProcess(pid)
            return self._processes[pid]


def wait_for(predicate: Callable[[], bool], timeout: float, step: float = 0.01) -> bool:
    """Poll predicate until it holds or timeout elapses."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(step)
    return predicate()


def spawn_sleeper() -> subprocess.Popen:
    return subprocess.Popen(
        [sys.executable, "-c", "import time; time.sleep(120)"],
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )


def stop_sleeper(process: subprocess.Popen) -> None:
    if process.poll() is None:
        process.kill()
    process.wait(timeout=10)


@pytest.fixture
def fake_source():
    return FakeSource()


@pytest.fixture
def fake_process():
    return FakeProcess(4242, cpu_user=1.0, cpu_system=0.5, rss=10 * 1024 * 1024)


@pytest.fixture
def sleeping_process():
    """A real child process that hangs until killed; yields its psutil.Process."""
    process = spawn_sleeper()
    try:
        yield psutil.Process(process.pid)
    finally:
        stop_sleeper(process)
