# File: src/mstair/stringify/base/test_config.py
"""
Tests for the LOG_COLOR decision and its thread-local override.
"""

from __future__ import annotations

import copy
import io
import pickle
import sys
import threading
from collections.abc import Iterator

import pytest

import mstair.stringify.base.config as cfg
from mstair.stringify.base.types import CALCULATE, MISSING, Missing


class _Terminal(io.StringIO):
    def isatty(self) -> bool:
        return True


@pytest.fixture
def reset_override(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.delenv(cfg.K_LOG_COLOR, raising=False)
    cfg.use_color(unset_override=True)
    yield
    cfg.use_color(unset_override=True)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("setting", "expected"),
    [("always", True), ("ON", True), ("1", True), ("never", False), ("off", False), ("0", False)],
)
def test_log_color_setting(
    monkeypatch: pytest.MonkeyPatch, reset_override: None, setting: str, expected: bool
) -> None:
    monkeypatch.setenv(cfg.K_LOG_COLOR, setting)
    assert cfg.use_color() is expected


@pytest.mark.unit
@pytest.mark.parametrize("setting", ["", "auto", "sometimes"])
def test_auto_follows_stderr_terminal(
    monkeypatch: pytest.MonkeyPatch, reset_override: None, setting: str
) -> None:
    monkeypatch.setenv(cfg.K_LOG_COLOR, setting)
    monkeypatch.setattr(sys, "stderr", io.StringIO())
    assert cfg.use_color() is False
    monkeypatch.setattr(sys, "stderr", _Terminal())
    assert cfg.use_color() is True


@pytest.mark.unit
def test_override_beats_environment_until_unset(
    monkeypatch: pytest.MonkeyPatch, reset_override: None
) -> None:
    monkeypatch.setenv(cfg.K_LOG_COLOR, "always")
    assert cfg.use_color(override=False) is False
    assert cfg.use_color() is False
    assert cfg.use_color(unset_override=True) is True


@pytest.mark.unit
def test_override_is_thread_local(monkeypatch: pytest.MonkeyPatch, reset_override: None) -> None:
    monkeypatch.setenv(cfg.K_LOG_COLOR, "always")
    cfg.use_color(override=False)
    seen: list[bool] = []
    worker = threading.Thread(target=lambda: seen.append(cfg.use_color()))
    worker.start()
    worker.join()
    assert seen == [True]
    assert cfg.use_color() is False


@pytest.mark.unit
def test_sentinels_are_singletons() -> None:
    assert Missing() is MISSING
    assert copy.deepcopy(MISSING) is MISSING
    assert pickle.loads(pickle.dumps(CALCULATE)) is CALCULATE
    assert not MISSING
    assert MISSING != CALCULATE
    assert repr(CALCULATE) == "CALCULATE"


# End of file: src/mstair/stringify/base/test_config.py
