# File: src/mstair/stringify/xlogging/test_core_logger.py
"""
Tests for CoreLogger, initialize_root(), create_logger() and CoreFormatter.

Confirms that:
- LOG_LEVELS alone does not lower a logger below the root level.
- Non-primitive arguments are rendered with stringify().
- Caller information points at the test, not at CoreLogger internals.
- Continuation lines are re-indented and colour codes follow LOG_COLOR.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterator
from typing import Any

import pytest
import pytz
from colorama import Fore

import mstair.stringify.base.config as cfg
from mstair.stringify import config as stringify_config
from mstair.stringify.nodes import RenderContext, RenderResult
from mstair.stringify.xlogging import logger_util as lu
from mstair.stringify.xlogging.core_logger import CoreLogger, initialize_root
from mstair.stringify.xlogging.logger_constants import TRACE
from mstair.stringify.xlogging.logger_factory import create_logger
from mstair.stringify.xlogging.logger_formatter import (
    COLOR_MAP,
    CoreFormatter,
    get_color_code,
    rgb_code,
)


_INIT_ATTR = "_mstair_stringify_corelogger_initialized"


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Clear LOG_* and STRINGIFY_* vars and reset the level config; never read .env."""
    monkeypatch.setattr(lu, "fs_load_dotenv", lambda *a, **k: False)
    monkeypatch.setattr(stringify_config, "_load_dotenv_once", lambda: False)
    for k in [k for k in os.environ if k.startswith(("LOG_", "STRINGIFY_"))]:
        monkeypatch.delenv(k, raising=False)
    monkeypatch.setattr(lu, "_log_level_config_instance", None, raising=False)
    yield


@pytest.fixture
def clean_logging() -> Iterator[None]:
    """Reset root logger state (stderr handlers, level, init flag) around tests."""
    root = logging.getLogger()
    prev_level = root.level
    prev_handlers = list(root.handlers)
    prev_attr = getattr(root, _INIT_ATTR, None)

    root.handlers = [h for h in prev_handlers if not _is_stderr_handler(h)]
    root.setLevel(logging.WARNING)
    if hasattr(root, _INIT_ATTR):
        delattr(root, _INIT_ATTR)

    yield

    root.handlers = prev_handlers
    root.setLevel(prev_level)
    if prev_attr is not None:
        setattr(root, _INIT_ATTR, prev_attr)
    elif hasattr(root, _INIT_ATTR):
        delattr(root, _INIT_ATTR)


@pytest.fixture
def no_color() -> Iterator[None]:
    cfg.use_color(override=False)
    yield
    cfg.use_color(unset_override=True)


def _is_stderr_handler(handler: logging.Handler) -> bool:
    return isinstance(handler, logging.StreamHandler) and handler.stream is sys.stderr


def _record(msg: str, *, created: float | None = None) -> logging.LogRecord:
    record = logging.LogRecord("mstair_test", logging.INFO, __file__, 10, msg, None, None, func="f")
    if created is not None:
        record.created = created
    return record


class _Boom:
    def __stringify__(self, context: RenderContext) -> RenderResult:
        raise RuntimeError("boom")


# ---------- Levels ----------


@pytest.mark.unit
def test_env_trace_does_not_lower_logger_below_root(
    clean_env: None, clean_logging: None, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("LOG_LEVELS", "pkg.*:TRACE")
    log = CoreLogger("pkg.module")
    assert logging.getLogger().getEffectiveLevel() == logging.WARNING
    assert log.level == logging.WARNING


@pytest.mark.unit
def test_lowering_root_lets_env_level_through(
    clean_env: None, clean_logging: None, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("LOG_LEVELS", "pkg.*:TRACE; other:INFO")
    initialize_root(level=TRACE)
    assert CoreLogger("pkg.module").level == TRACE
    assert CoreLogger("other").level == logging.INFO


@pytest.mark.unit
def test_trace_records_use_trace_level_name(
    clean_env: None, clean_logging: None, caplog: pytest.LogCaptureFixture
) -> None:
    log = create_logger("mstair_test.trace", level=TRACE)
    with caplog.at_level(TRACE):
        log.trace("fine detail")
    assert caplog.records[-1].levelname == "TRACE"
    assert caplog.records[-1].levelno == TRACE


# ---------- Messages ----------


@pytest.mark.unit
def test_non_primitive_args_are_stringified(
    clean_env: None, clean_logging: None, caplog: pytest.LogCaptureFixture
) -> None:
    log = create_logger("mstair_test.args", level=logging.DEBUG)
    log.info("value %s count %d", {"a": [1, 2]}, 3)
    log.info({"k": None})
    assert [r.getMessage() for r in caplog.records[-2:]] == [
        "value { a: [1, 2] } count 3",
        "{ k: null }",
    ]


@pytest.mark.unit
def test_layout_options_travel_in_kwargs(
    clean_env: None, clean_logging: None, caplog: pytest.LogCaptureFixture
) -> None:
    log = create_logger("mstair_test.options", level=logging.DEBUG)
    log.info("%s", [1, [2, [3]]], max_depth=0)
    log.info("%s", [1, 2], wrap_width=0)
    assert caplog.records[-2].getMessage() == "[1, ...]"
    assert caplog.records[-1].getMessage() == "[\n  1,\n  2\n]"


@pytest.mark.unit
def test_unserializable_arg_is_reported_inline(
    clean_env: None, clean_logging: None, caplog: pytest.LogCaptureFixture
) -> None:
    log = create_logger("mstair_test.boom", level=logging.DEBUG)
    log.warning("got %s", _Boom())
    assert caplog.records[-1].getMessage() == "got <unserializable: _Boom: boom>"


@pytest.mark.unit
def test_extra_kwargs_land_on_record(
    clean_env: None, clean_logging: None, caplog: pytest.LogCaptureFixture
) -> None:
    log = create_logger("mstair_test.extra", level=logging.DEBUG)
    log.info("request done", request_id=7)
    assert caplog.records[-1].request_id == 7  # type: ignore[attr-defined]


@pytest.mark.unit
@pytest.mark.parametrize("key", ["lineno", "filename", "levelname"])
def test_forbidden_kwargs_raise(clean_env: None, clean_logging: None, key: str) -> None:
    log = create_logger("mstair_test.forbidden", level=logging.DEBUG)
    with pytest.raises(ValueError, match=key):
        log.info("x", **{key: 1})


@pytest.mark.unit
def test_caller_is_reported(
    clean_env: None, clean_logging: None, caplog: pytest.LogCaptureFixture
) -> None:
    log = create_logger("mstair_test.caller", level=logging.DEBUG)
    log.info("here")
    log.dump([1], label="xs")
    for record in caplog.records[-2:]:
        assert record.funcName == "test_caller_is_reported"
        assert record.filename == "test_core_logger.py"


@pytest.mark.unit
def test_dump_with_and_without_label(
    clean_env: None, clean_logging: None, caplog: pytest.LogCaptureFixture
) -> None:
    log = create_logger("mstair_test.dump", level=logging.DEBUG)
    log.dump([1, 2], label="xs", wrap_width=0)
    log.dump({"a": 1}, level=logging.INFO)
    assert caplog.records[-2].getMessage() == "xs = [\n  1,\n  2\n]"
    assert caplog.records[-2].levelno == logging.DEBUG
    assert caplog.records[-1].getMessage() == "{ a: 1 }"
    assert caplog.records[-1].levelno == logging.INFO


@pytest.mark.unit
def test_dump_below_level_is_not_rendered(
    clean_env: None, clean_logging: None, caplog: pytest.LogCaptureFixture
) -> None:
    log = create_logger("mstair_test.quiet", level=logging.WARNING)
    log.dump(_Boom())
    assert not [r for r in caplog.records if r.name == "mstair_test.quiet"]


@pytest.mark.unit
def test_prefix_with_nests_and_resets(
    clean_env: None, clean_logging: None, caplog: pytest.LogCaptureFixture
) -> None:
    log = create_logger("mstair_test.prefix", level=logging.DEBUG)
    with log.prefix_with("outer"):
        with log.prefix_with("inner"):
            log.info("hello")
        log.info("between")
    log.info("after")
    assert [r.getMessage() for r in caplog.records[-3:]] == [
        "outer > inner > hello",
        "outer > between",
        "after",
    ]


# ---------- Root setup ----------


@pytest.mark.unit
def test_initialize_root_is_idempotent(clean_env: None, clean_logging: None) -> None:
    initialize_root()
    initialize_root()
    root = logging.getLogger()
    handlers = [h for h in root.handlers if _is_stderr_handler(h)]
    assert len(handlers) == 1
    assert isinstance(handlers[0].formatter, CoreFormatter)
    assert root.level == logging.WARNING


@pytest.mark.unit
def test_initialize_root_force_replaces_handler(clean_env: None, clean_logging: None) -> None:
    initialize_root()
    first = [h for h in logging.getLogger().handlers if _is_stderr_handler(h)]
    initialize_root(level="info", force=True)
    second = [h for h in logging.getLogger().handlers if _is_stderr_handler(h)]
    assert len(second) == 1
    assert second[0] is not first[0]
    assert logging.getLogger().level == logging.INFO


@pytest.mark.unit
def test_datefmt_without_directives_drops_timestamp(clean_env: None, clean_logging: None) -> None:
    initialize_root(datefmt="none")
    handler = next(h for h in logging.getLogger().handlers if _is_stderr_handler(h))
    assert handler.formatter is not None
    assert "asctime" not in handler.formatter._fmt  # type: ignore[operator]


# ---------- Factory ----------


@pytest.mark.unit
def test_create_logger_reuses_instance(clean_env: None, clean_logging: None) -> None:
    log = create_logger("mstair_test.same")
    assert isinstance(log, CoreLogger)
    assert create_logger("mstair_test.same") is log
    assert logging.getLogger("mstair_test.same") is log


@pytest.mark.unit
def test_create_logger_replaces_plain_logger(clean_env: None, clean_logging: None) -> None:
    plain = logging.getLogger("mstair_test.plain")
    assert not isinstance(plain, CoreLogger)
    log = create_logger("mstair_test.plain")
    assert isinstance(log, CoreLogger)
    assert logging.getLogger("mstair_test.plain") is log


@pytest.mark.unit
def test_create_logger_names_main_after_script(
    clean_env: None, clean_logging: None, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(sys, "argv", ["/tmp/report_tool.py"])
    assert create_logger("__main__").name == "report_tool"
    monkeypatch.setattr(sys, "argv", [""])
    assert create_logger(None).name == "embedded_main"


# ---------- Formatter ----------


@pytest.mark.unit
def test_continuation_lines_are_reindented(clean_env: None, no_color: None) -> None:
    formatter = CoreFormatter("%(levelName)s %(message)s")
    assert formatter.format(_record("first\n  second\n    third")) == (
        "INFO first\n    second\n      third"
    )
    assert formatter.format(_record("single")) == "INFO single"


@pytest.mark.unit
def test_color_enabled_adds_codes(clean_env: None) -> None:
    try:
        cfg.use_color(override=True)
        out = CoreFormatter("%(message)s").format(_record("hi"))
    finally:
        cfg.use_color(unset_override=True)
    assert out == COLOR_MAP["INFO"] + "hi" + Fore.RESET


@pytest.mark.unit
@pytest.mark.parametrize(
    ("key", "expected"),
    [
        (None, Fore.RESET),
        ("WARNING", COLOR_MAP["WARNING"]),
        ("#ff0080", rgb_code(255, 0, 128)),
        ("red", Fore.RED),
        ("lightblue", Fore.LIGHTBLUE_EX),
        ("no-such-colour", Fore.RESET),
    ],
)
def test_get_color_code(key: Any, expected: str) -> None:
    try:
        cfg.use_color(override=True)
        assert get_color_code(key) == expected
    finally:
        cfg.use_color(unset_override=True)


@pytest.mark.unit
def test_get_color_code_empty_when_color_disabled(no_color: None) -> None:
    assert get_color_code("ERROR") == ""


@pytest.mark.unit
def test_log_color_setting_controls_formatter(
    clean_env: None, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv(cfg.K_LOG_COLOR, "never")
    assert CoreFormatter("%(message)s").format(_record("hi")) == "hi"
    monkeypatch.setenv(cfg.K_LOG_COLOR, "always")
    assert CoreFormatter("%(message)s").format(_record("hi")) == COLOR_MAP["INFO"] + "hi" + Fore.RESET


@pytest.mark.unit
def test_rgb_code_clamps() -> None:
    assert rgb_code(300, -5, 7) == "\033[38;2;255;0;7m"


@pytest.mark.unit
def test_format_time_uses_log_tz(clean_env: None, monkeypatch: pytest.MonkeyPatch) -> None:
    assert CoreFormatter().formatTime(_record("x", created=0)) == "12:00am"
    monkeypatch.setenv("LOG_TZ", "Asia/Tokyo")
    formatter = CoreFormatter()
    assert formatter.formatTime(_record("x", created=0)) == "9:00am"
    assert formatter.formatTime(_record("x", created=0), "%Y-%m-%d %H:%M") == "1970-01-01 09:00"


@pytest.mark.unit
def test_unknown_tz_falls_back_to_utc(
    clean_env: None, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setenv("LOG_TZ", "Mars/Olympus")
    with caplog.at_level(logging.WARNING, logger="mstair.stringify.xlogging.logger_formatter"):
        formatter = CoreFormatter()
    assert formatter.tz is pytz.utc
    assert "Mars/Olympus" in caplog.text


@pytest.mark.unit
def test_format_file_is_relative_to_cwd(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> None:
    monkeypatch.chdir(tmp_path)
    assert CoreFormatter.format_file(str(tmp_path / "pkg" / "mod.py")) == "pkg/mod.py"
    assert CoreFormatter.format_file("") == "<unknown file>"


# End of file: src/mstair/stringify/xlogging/test_core_logger.py
