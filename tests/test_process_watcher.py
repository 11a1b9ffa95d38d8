"""Tests for the polling process watcher."""

import threading
from collections import Counter

import pytest

from procwatch.service.monitor.process_watcher import ProcessWatcher, diff_pids
from tests.conftest import FakeSource, spawn_sleeper, stop_sleeper, wait_for

INTERVAL = 0.02


class EventLog:
    """Collects watcher events in delivery order."""

    def __init__(self, watcher: ProcessWatcher):
        self.lock = threading.Lock()
        self.events = []
        watcher.on_new_process.subscribe(self.on_new)
        watcher.on_process_stopped.subscribe(self.on_stopped)

    def on_new(self, process):
        with self.lock:
            self.events.append(("new", process.pid))

    def on_stopped(self, pid):
        with self.lock:
            self.events.append(("stopped", pid))

    def snapshot(self):
        with self.lock:
            return list(self.events)


@pytest.fixture
def watcher(fake_source):
    w = ProcessWatcher(source=fake_source, sleep_interval=INTERVAL)
    yield w
    while w.ref_count:
        w.stop_watching()


def test_diff_pids():
    new, stopped = diff_pids({1, 2, 3}, [2, 3, 4, 5])
    assert new == {4, 5}
    assert stopped == {1}


def test_rejects_non_positive_interval():
    with pytest.raises(ValueError):
        ProcessWatcher(source=FakeSource(), sleep_interval=0)


def test_processes_alive_at_start_are_not_reported(watcher, fake_source):
    fake_source.set_pids([1, 2, 3])
    log = EventLog(watcher)

    watcher.start_watching()
    assert wait_for(lambda: fake_source.snapshots_taken >= 5, timeout=2)

    assert log.snapshot() == []


def test_new_and_stopped_exactly_once(watcher, fake_source):
    fake_source.set_pids([1])
    log = EventLog(watcher)
    watcher.start_watching()

    fake_source.set_pids([1, 10, 11, 12])
    assert wait_for(lambda: len(log.snapshot()) == 3, timeout=5 * INTERVAL + 1)
    fake_source.set_pids([1])
    assert wait_for(lambda: len(log.snapshot()) == 6, timeout=5 * INTERVAL + 1)

    # A few more ticks must not produce duplicates
    taken = fake_source.snapshots_taken
    assert wait_for(lambda: fake_source.snapshots_taken >= taken + 5, timeout=2)

    counts = Counter(log.snapshot())
    for pid in (10, 11, 12):
        assert counts[("new", pid)] == 1
        assert counts[("stopped", pid)] == 1
    assert ("stopped", 1) not in counts


def test_new_before_stopped_within_a_tick(watcher, fake_source):
    fake_source.set_pids([1, 2])
    log = EventLog(watcher)
    watcher.start_watching()

    fake_source.set_pids([2, 3])
    assert wait_for(lambda: len(log.snapshot()) == 2, timeout=2)

    assert log.snapshot() == [("new", 3), ("stopped", 1)]


def test_new_process_callback_receives_handle(watcher, fake_source):
    received = []
    watcher.on_new_process.subscribe(received.append)
    watcher.start_watching()

    fake_source.set_pids([77])
    assert wait_for(lambda: received, timeout=2)

    assert received[0] is fake_source.get_process(77)


def test_failing_subscriber_does_not_kill_polling(watcher, fake_source):
    def broken(_):
        raise RuntimeError("subscriber bug")

    watcher.on_new_process.subscribe(broken)
    log = EventLog(watcher)
    watcher.start_watching()

    fake_source.set_pids([5])
    assert wait_for(lambda: ("new", 5) in log.snapshot(), timeout=2)
    fake_source.set_pids([5, 6])
    assert wait_for(lambda: ("new", 6) in log.snapshot(), timeout=2)


def test_snapshot_failure_skips_tick(watcher, fake_source):
    log = EventLog(watcher)
    watcher.start_watching()

    fake_source.fail = True
    fake_source.set_pids([8])
    taken = fake_source.snapshots_taken
    assert wait_for(lambda: fake_source.snapshots_taken >= taken + 3, timeout=2)
    assert log.snapshot() == []

    fake_source.fail = False
    assert wait_for(lambda: log.snapshot() == [("new", 8)], timeout=2)
    assert watcher.is_watching


def test_failed_baseline_reports_everything_next_tick(fake_source):
    fake_source.set_pids([1, 2])
    fake_source.fail = True
    watcher = ProcessWatcher(source=fake_source, sleep_interval=INTERVAL)
    log = EventLog(watcher)
    watcher.start_watching()
    try:
        fake_source.fail = False
        assert wait_for(lambda: len(log.snapshot()) == 2, timeout=2)
        assert sorted(log.snapshot()) == [("new", 1), ("new", 2)]
    finally:
        watcher.stop_watching()


def test_reference_counting(watcher):
    assert not watcher.is_watching

    watcher.start_watching()
    watcher.start_watching()
    assert watcher.is_watching
    assert watcher.ref_count == 2

    watcher.stop_watching()
    assert watcher.is_watching
    assert watcher.ref_count == 1

    watcher.stop_watching()
    assert not watcher.is_watching
    assert watcher.ref_count == 0


def test_unbalanced_stop_is_clamped(watcher):
    watcher.stop_watching()
    assert watcher.ref_count == 0
    assert not watcher.is_watching

    watcher.start_watching()
    assert watcher.is_watching
    assert watcher.ref_count == 1


def test_polling_thread_exits_on_stop(watcher):
    watcher.start_watching()
    assert any(t.name == "procwatch-poller" for t in threading.enumerate())

    watcher.stop_watching()

    assert wait_for(lambda: not any(t.name == "procwatch-poller" and t.is_alive()
                                    for t in threading.enumerate()), timeout=INTERVAL + 2)


def live_pollers():
    return [t for t in threading.enumerate() if t.name == "procwatch-poller" and t.is_alive()]


def run_concurrently(count, action):
    barrier = threading.Barrier(count)
    errors = []

    def worker():
        try:
            barrier.wait(timeout=5)
            action()
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker) for _ in range(count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)
    assert not any(t.is_alive() for t in threads)
    assert errors == []


def test_concurrent_start_and_stop_share_one_thread(watcher):
    # pollers of earlier tests may still be finishing their last tick
    assert wait_for(lambda: not live_pollers(), timeout=INTERVAL + 3)
    count = 16

    run_concurrently(count, watcher.start_watching)

    assert watcher.ref_count == count
    assert watcher.is_watching
    assert len(live_pollers()) == 1

    run_concurrently(count, watcher.stop_watching)

    assert watcher.ref_count == 0
    assert not watcher.is_watching
    assert wait_for(lambda: not live_pollers(), timeout=INTERVAL + 3)


class SlowBaselineSource(FakeSource):
    """Blocks the first snapshot until released."""

    def __init__(self):
        super().__init__()
        self.release = threading.Event()
        self.first_call = threading.Event()

    def list_live_processes(self):
        if not self.first_call.is_set():
            self.first_call.set()
            self.release.wait(timeout=5)
        return super().list_live_processes()


def test_state_readable_while_baseline_is_pending():
    source = SlowBaselineSource()
    w = ProcessWatcher(source=source, sleep_interval=INTERVAL)
    starters = [threading.Thread(target=w.start_watching) for _ in range(2)]
    try:
        starters[0].start()
        assert source.first_call.wait(timeout=2)
        starters[1].start()

        seen = []
        reader = threading.Thread(target=lambda: seen.append((w.ref_count, w.is_watching)))
        reader.start()
        reader.join(timeout=1)
        assert not reader.is_alive()
        assert wait_for(lambda: w.ref_count == 2, timeout=2)
        assert seen[0][1] is True

        # neither reference returns before the baseline exists
        assert all(t.is_alive() for t in starters)
    finally:
        source.release.set()
        for t in starters:
            t.join(timeout=5)
        while w.ref_count:
            w.stop_watching()

    assert not any(t.is_alive() for t in starters)


def test_restart_after_stop(watcher, fake_source):
    log = EventLog(watcher)
    watcher.start_watching()
    watcher.stop_watching()

    watcher.start_watching()
    fake_source.set_pids([21])
    assert wait_for(lambda: log.snapshot() == [("new", 21)], timeout=2)


def test_stop_from_callback_does_not_deadlock(watcher, fake_source):
    stopped = threading.Event()

    def stop_now(_):
        watcher.stop_watching()
        stopped.set()

    watcher.on_new_process.subscribe(stop_now)
    watcher.start_watching()
    fake_source.set_pids([30])

    assert stopped.wait(timeout=2)
    assert not watcher.is_watching


def test_session_scopes_the_reference(watcher):
    with watcher.session() as session:
        assert watcher.is_watching
        assert not session.closed
    assert session.closed
    assert not watcher.is_watching


def test_session_close_is_idempotent(watcher):
    watcher.start_watching()
    session = watcher.session()
    assert watcher.ref_count == 2

    session.close()
    session.close()

    assert watcher.ref_count == 1
    assert watcher.is_watching


def test_detects_real_subprocess_start_and_stop():
    watcher = ProcessWatcher(sleep_interval=0.2)
    started = threading.Event()
    ended = threading.Event()
    seen_new = set()
    target = {}

    def on_new(process):
        seen_new.add(process.pid)
        if process.pid == target.get("pid"):
            started.set()

    def on_stopped(pid):
        if pid == target.get("pid"):
            ended.set()

    watcher.on_new_process.subscribe(on_new)
    watcher.on_process_stopped.subscribe(on_stopped)

    with watcher.session():
        process = spawn_sleeper()
        target["pid"] = process.pid
        try:
            assert watcher.is_watching
            if not started.wait(timeout=watcher.sleep_interval * 5):
                assert process.pid in seen_new, "on_new_process did not trigger"
        finally:
            stop_sleeper(process)

        assert ended.wait(timeout=watcher.sleep_interval * 5), "on_process_stopped did not trigger"
