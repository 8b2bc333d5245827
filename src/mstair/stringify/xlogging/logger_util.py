# File: src/mstair/stringify/xlogging/logger_util.py
"""
Environment variable-driven log level configuration.

Two sources are supported:
- Pattern lists in LOG_LEVEL / LOG_LEVELS, e.g. `LOG_LEVELS="mstair.*:DEBUG; root=WARNING"`
- Per-logger overrides in variables like LOG_LEVEL_MSTAIR_STRINGIFY=TRACE

Resolution for a logger name: exact > nearest ancestor > most specific glob >
default (bare level or `root`) > fallback. A .env file is loaded first.
"""

from __future__ import annotations

import fnmatch
import logging
import os
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import ClassVar, Final, NamedTuple

from mstair.stringify.base.fs_helpers import fs_load_dotenv
from mstair.stringify.xlogging.logger_constants import initialize_logger_constants


__all__ = ["LogEnvVar", "LogLevelConfig"]

_FRAGMENT_SEPARATOR_RX: Final[re.Pattern[str]] = re.compile(r"[;, ]+")
_ASSIGNMENT_OPERATOR_RX: Final[re.Pattern[str]] = re.compile(r"[:=]+")

_log_level_config_instance: LogLevelConfig | None = None


@dataclass(slots=True)
class LogEnvVar:
    """
    One LOG_LEVEL* environment variable.

    The suffix names the logger it targets: `_` separates name parts and `__`
    stands for a literal underscore (LOG_LEVEL_MY__APP_CORE -> my_app.core).
    """

    NAME_RX: ClassVar[re.Pattern[str]] = re.compile(
        r"""
        ^(?P<BASENAME>LOG_LEVELS?)          # LOG_LEVEL or LOG_LEVELS
        (?P<SUFFIX>(?:_[A-Z][A-Z0-9_]*)*)$  # optional logger suffix
        """,
        re.VERBOSE,
    )

    name: str = field(default="", repr=False)
    module: str = ""
    value: str = field(default="", repr=False)

    @classmethod
    def from_env_var(cls, name: str, value: str) -> LogEnvVar | None:
        """Return a LogEnvVar if `name` is a LOG_LEVEL* variable, else None."""
        re_match = cls.NAME_RX.match(name)
        if re_match is None:
            return None
        suffix = re_match["SUFFIX"].lstrip("_")
        if not suffix or suffix.upper() == "ROOT":
            module = ""
        else:
            module = suffix.replace("__", "\0").replace("_", ".").replace("\0", "_").lower()
        return cls(name=name, module=module, value=value)

    @classmethod
    def from_environ(cls) -> Iterator[LogEnvVar]:
        """Yield a LogEnvVar for every matching environment variable, after loading .env."""
        fs_load_dotenv()
        # Reverse order: LOG_LEVEL_<NAME>, then LOG_LEVELS, then LOG_LEVEL; later entries win.
        for name, value in sorted(os.environ.items(), reverse=True):
            env_var = cls.from_env_var(name, value)
            if env_var is not None:
                yield env_var


class LogEnvPatternLevel(NamedTuple):
    pattern: str
    level: int


def _glob_specificity(pattern: str) -> int:
    """Length of the fixed prefix before the first wildcard."""
    return min((i for i, ch in enumerate(pattern) if ch in "*?["), default=len(pattern))


def _is_glob_pattern(pattern: str) -> bool:
    return any(ch in pattern for ch in "*?[")


def _ancestors(logger_name: str) -> Iterator[str]:
    """Dotted ancestors of a logger name, nearest first."""
    parts = logger_name.split(".")
    for end in range(len(parts) - 1, 0, -1):
        yield ".".join(parts[:end])


@dataclass(slots=True)
class LogLevelConfig:
    """
    Pattern -> level table built from the environment.

    The empty pattern holds the default level.
    """

    pattern_to_level: dict[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.pattern_to_level:
            self.update_from_environment()

    @classmethod
    def get_instance(cls) -> LogLevelConfig:
        """Return the shared instance, building it from the environment on first use."""
        global _log_level_config_instance
        if _log_level_config_instance is None:
            initialize_logger_constants()
            _log_level_config_instance = cls()
        return _log_level_config_instance

    def update_from_environment(self) -> None:
        """Rebuild the table from the current environment."""
        self.pattern_to_level.clear()
        level_names = {
            k.upper(): v
            for k, v in logging.getLevelNamesMapping().items()
            if isinstance(v, int) and v != logging.NOTSET
        }
        for var in LogEnvVar.from_environ():
            for entry in self.parse_log_var(var, level_names):
                self.pattern_to_level[entry.pattern] = entry.level

    @staticmethod
    def parse_log_var(var: LogEnvVar, level_names: dict[str, int]) -> Iterator[LogEnvPatternLevel]:
        """Split one variable into pattern/level entries; unknown level names are ignored."""
        for fragment in _FRAGMENT_SEPARATOR_RX.split(var.value):
            if not fragment.strip():
                continue
            parts = _ASSIGNMENT_OPERATOR_RX.split(fragment.strip(), maxsplit=1)
            if len(parts) == 2:
                pattern, level_text = (p.strip().strip("'\"") for p in parts)
            else:
                pattern, level_text = "", parts[0].strip().strip("'\"")

            if var.module:
                pattern = var.module if pattern in {"", "root"} else f"{var.module}.{pattern}"
            if pattern.lower() == "root":
                pattern = ""

            if level_text.isdigit():
                yield LogEnvPatternLevel(pattern, int(level_text))
            elif (level := level_names.get(level_text.upper())) is not None:
                yield LogEnvPatternLevel(pattern, level)

    def get_effective_level(self, logger_name: str, *, default: int = logging.WARNING) -> int:
        """Return the configured level for `logger_name`, or `default`."""
        name_lc = logger_name.lower()
        lc_map = {k.lower(): v for k, v in self.pattern_to_level.items() if k}

        if name_lc in lc_map:
            return lc_map[name_lc]

        for ancestor in _ancestors(name_lc):
            if ancestor in lc_map:
                return lc_map[ancestor]

        best: tuple[int, int] | None = None
        for pattern, level in lc_map.items():
            if _is_glob_pattern(pattern) and fnmatch.fnmatch(name_lc, pattern):
                score = _glob_specificity(pattern)
                if best is None or score > best[0]:
                    best = (score, level)
        if best is not None:
            return best[1]

        return self.pattern_to_level.get("", default)


# End of file: src/mstair/stringify/xlogging/logger_util.py
