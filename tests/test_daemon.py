"""
Unit tests for daemonization with everything process-level patched out.
"""

import os
import signal
from types import SimpleNamespace

import pytest

from pmdock.managers import daemon


class Exited(Exception):
    def __init__(self, code):
        self.code = code


@pytest.fixture
def fake_os(monkeypatch):
    """Replaces the `os` seen by the daemon module only; pytest keeps the real one."""
    calls = []

    def _exit(code):
        raise Exited(code)

    fake = SimpleNamespace(
        calls=calls,
        devnull=os.devnull,
        O_RDWR=os.O_RDWR,
        fork=lambda: 0,
        getpid=lambda: 500,
        setsid=lambda: calls.append(("setsid",)),
        open=lambda path, flags: 7,
        dup2=lambda fd, fd2: calls.append(("dup2", fd, fd2)),
        close=lambda fd: calls.append(("close", fd)),
        kill=lambda pid, sig: calls.append(("kill", pid, sig)),
        _exit=_exit,
    )
    monkeypatch.setattr(daemon, "os", fake)
    monkeypatch.setattr("signal.pthread_sigmask", lambda how, sigs: calls.append(("sigmask", how, set(sigs))))
    return fake


@pytest.mark.unit
class TestDaemonize:
    def test_child_detaches(self, fake_os):
        assert daemon.daemonize() == 500
        assert fake_os.calls == [
            ("sigmask", signal.SIG_BLOCK, {signal.SIGUSR1}),
            ("sigmask", signal.SIG_UNBLOCK, {signal.SIGUSR1}),
            ("setsid",),
            ("dup2", 7, 0),
            ("close", 7),
        ]

    def test_parent_exits_zero_on_ready(self, monkeypatch, fake_os):
        waited = []
        fake_os.fork = lambda: 501
        monkeypatch.setattr("signal.sigwait", lambda sigs: waited.append(set(sigs)) or signal.SIGUSR1)
        with pytest.raises(Exited) as exc:
            daemon.daemonize()
        assert exc.value.code == 0
        assert waited == [{signal.SIGUSR1}]

    def test_parent_times_out(self, monkeypatch, fake_os):
        fake_os.fork = lambda: 501
        monkeypatch.setattr("signal.sigtimedwait", lambda sigs, timeout: None)
        with pytest.raises(Exited) as exc:
            daemon.daemonize(timeout=5)
        assert exc.value.code == 1

    def test_fork_failure(self, fake_os):
        def fail():
            raise OSError("EAGAIN")

        fake_os.fork = fail
        with pytest.raises(daemon.DaemonError):
            daemon.daemonize()

    def test_notify_parent(self, fake_os):
        daemon.notify_parent(500)
        assert fake_os.calls == [("kill", 500, signal.SIGUSR1)]

    def test_notify_missing_parent(self, fake_os):
        def gone(pid, sig):
            raise ProcessLookupError(pid)

        fake_os.kill = gone
        daemon.notify_parent(500)
