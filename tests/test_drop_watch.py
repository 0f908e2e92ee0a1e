import threading
from datetime import datetime, timedelta

from app.client.drop_watch import DropStatusWatcher
from app.models.drop import Drop
from app.services.drop_service import DropStatus

from conftest import schedule

START = datetime(2026, 5, 1, 18, 0)


class Clock:

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


def make_drop():
    return Drop(id="drop-1", title="May Day", **schedule(START, START + timedelta(hours=2)))


def test_callback_fires_only_on_change():
    clock = Clock(START - timedelta(minutes=5))
    seen = []
    watcher = DropStatusWatcher(make_drop(), seen.append, clock=clock)

    watcher.poll()
    watcher.poll()
    clock.now = START
    watcher.poll()
    watcher.poll()
    clock.now = START + timedelta(hours=3)
    watcher.poll()

    assert seen == [DropStatus.scheduled, DropStatus.active, DropStatus.ended]
    assert watcher.status == DropStatus.ended


def test_independent_watchers_agree():
    clock = Clock(START + timedelta(minutes=1))
    drop = make_drop()
    banner = DropStatusWatcher(drop, lambda s: None, clock=clock)
    badge = DropStatusWatcher(drop, lambda s: None, clock=clock)

    assert banner.poll() == badge.poll() == DropStatus.active


def test_background_thread_reports_and_stops():
    fired = threading.Event()
    seen = []

    def on_change(status):
        seen.append(status)
        fired.set()

    watcher = DropStatusWatcher(make_drop(), on_change, interval=0.01, clock=Clock(START))
    watcher.start()
    try:
        assert fired.wait(timeout=2)
    finally:
        watcher.stop()

    assert seen == [DropStatus.active]
    assert watcher._thread is None


def test_callback_can_stop_its_own_watcher():
    clock = Clock(START + timedelta(hours=3))
    errors = []
    done = threading.Event()
    watcher = None

    def on_change(status):
        try:
            if status == DropStatus.ended:
                watcher.stop()
        except RuntimeError as e:
            errors.append(e)
        finally:
            done.set()

    watcher = DropStatusWatcher(make_drop(), on_change, interval=0.01, clock=clock)
    watcher.start()
    try:
        assert done.wait(timeout=2)
    finally:
        watcher.stop()

    assert errors == []
