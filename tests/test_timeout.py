import threading
import time

import pytest

from symplace.timeout import PlacementTimeout, TimeoutManager


def wait_until(predicate, limit=2.0):
    deadline = time.monotonic() + limit
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


def test_not_timed_out_before_deadline():
    with TimeoutManager(60, 60) as manager:
        assert manager.timed_out is False
        manager.check_timeout()
        assert manager.elapsed >= 0.0


def test_times_out_and_check_raises():
    manager = TimeoutManager(0.02, 60)
    fired = []
    manager.emergency_callback = lambda: fired.append(True)
    manager.start_watchdog()
    try:
        assert wait_until(lambda: manager.timed_out)
        with pytest.raises(PlacementTimeout, match="Timeout"):
            manager.check_timeout()
    finally:
        manager.stop()
    assert fired == []


def test_timeout_is_a_runtime_error():
    manager = TimeoutManager(0.01, 60)
    manager.emergency_callback = None
    manager.start_watchdog()
    try:
        assert wait_until(lambda: manager.timed_out)
        with pytest.raises(RuntimeError) as excinfo:
            manager.check_timeout()
    finally:
        manager.stop()
    assert isinstance(excinfo.value, PlacementTimeout)
    assert "Timeout" in str(excinfo.value)


def test_emergency_callback_runs_after_grace_period():
    manager = TimeoutManager(0.01, 0.01)
    fired = threading.Event()
    manager.emergency_callback = fired.set
    manager.start_watchdog()
    try:
        assert fired.wait(2.0)
        assert manager.timed_out
    finally:
        manager.stop()


def test_stop_prevents_timeout():
    manager = TimeoutManager(0.1, 0.01)
    fired = threading.Event()
    manager.emergency_callback = fired.set
    manager.start_watchdog()
    manager.stop()
    time.sleep(0.2)
    assert manager.timed_out is False
    assert not fired.is_set()


def test_restart_resets_flag():
    manager = TimeoutManager(0.01, 60)
    manager.emergency_callback = None
    manager.start_watchdog()
    assert wait_until(lambda: manager.timed_out)
    manager.seconds = 60
    manager.start_watchdog()
    try:
        assert manager.timed_out is False
    finally:
        manager.stop()