import logging

import pytest

from nodekit.coroutine import go, go_recover, run_recovering


class Flaky:
    def __init__(self, failures):
        self.failures = failures
        self.calls = 0
        self.received = []

    def __call__(self, *args):
        self.calls += 1
        self.received.append(args)
        if self.calls <= self.failures:
            raise RuntimeError("boom")


def test_success_runs_once_with_args():
    job = Flaky(0)
    run_recovering(job, 0, 1, "two")
    assert job.calls == 1
    assert job.received == [(1, "two")]


def test_zero_recover_does_not_retry():
    job = Flaky(10)
    run_recovering(job, 0)
    assert job.calls == 1


def test_positive_recover_limits_total_runs():
    job = Flaky(10)
    run_recovering(job, 3)
    assert job.calls == 3


def test_infinite_recover_until_success():
    job = Flaky(4)
    run_recovering(job, -1)
    assert job.calls == job.failures + 1


def test_failure_is_logged(caplog):
    job = Flaky(1)
    with caplog.at_level(logging.ERROR, logger="nodekit.coroutine"):
        run_recovering(job, 0)
    assert any("boom" in record.getMessage() for record in caplog.records)


def test_not_callable_rejected():
    with pytest.raises(TypeError, match="not a function"):
        run_recovering(42, 0)
    with pytest.raises(TypeError):
        go("nope")


def test_go_runs_in_thread():
    job = Flaky(0)
    thread = go(job, "x")
    thread.join(timeout=5)
    assert not thread.is_alive()
    assert job.received == [("x",)]


def test_go_swallows_exception():
    job = Flaky(5)
    thread = go(job)
    thread.join(timeout=5)
    assert job.calls == 1


def test_go_recover_restarts():
    job = Flaky(2)
    thread = go_recover(job, -1, "arg")
    thread.join(timeout=5)
    assert job.calls == job.failures + 1
    assert set(job.received) == {("arg",)}