"""Fixtures that stand in for systemctl, rofi and the terminal."""

import signal
import subprocess
import tempfile
from collections.abc import Iterable
from typing import Any
from unittest.mock import Mock

import pytest

from rofi_systemd.config import Config


class FakeRun:
    """Replacement for ``subprocess.run`` that answers by matching argv words.

    Each rule holds a queue of results; the last result of a queue repeats.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[list[str], dict[str, Any]]] = []
        self._rules: list[tuple[tuple[str, ...], tuple[str, ...], list[Mock]]] = []

    def add(
        self,
        words: Iterable[str],
        stdout: str = "",
        returncode: int = 0,
        without: Iterable[str] = (),
    ) -> "FakeRun":
        result = Mock()
        result.returncode = returncode
        result.stdout = stdout
        result.stderr = ""
        words, without = tuple(words), tuple(without)
        for w, wo, queue in self._rules:
            if (w, wo) == (words, without):
                queue.append(result)
                return self
        self._rules.append((words, without, [result]))
        return self

    def __call__(self, cmd, **kwargs):
        cmd = list(cmd)
        self.calls.append((cmd, kwargs))
        for words, without, queue in self._rules:
            if all(w in cmd for w in words) and not any(w in cmd for w in without):
                return queue.pop(0) if len(queue) > 1 else queue[0]
        raise AssertionError(f"unexpected command {cmd}")

    def commands(self, *words: str) -> list[list[str]]:
        return [c for c, _ in self.calls if all(w in c for w in words)]


@pytest.fixture
def fake_run(monkeypatch: pytest.MonkeyPatch) -> FakeRun:
    fake = FakeRun()
    monkeypatch.setattr(subprocess, "run", fake)
    return fake


@pytest.fixture
def config() -> Config:
    return Config(terminal=["urxvt", "-e"], exec_strategy="spawn")


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    for var in (
        "ROFI_SYSTEMD_TERM",
        "TERMINAL",
        "ROFI_SYSTEMD_EXEC",
        "ROFI_SYSTEMD_DEFAULT_ACTION",
        "ROFI_SYSTEMD_MAX_NAME_LENGTH",
        "ROFI_SYSTEMD_ROFI",
        "ROFI_SYSTEMD_SUDO",
        "ROFI_SYSTEMD_DEBUG",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
    return tmp_path


@pytest.fixture(autouse=True)
def restore_signals():
    saved = {sig: signal.getsignal(sig) for sig in (signal.SIGTERM, signal.SIGHUP)}
    yield
    for sig, handler in saved.items():
        signal.signal(sig, handler)
