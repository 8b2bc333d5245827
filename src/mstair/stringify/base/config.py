# File: src/mstair/stringify/base/config.py
"""
Colour decision for log output.

LOG_COLOR selects colour codes in CoreFormatter output:
- `always` / `on` / `1` / `true`: always colour
- `never` / `off` / `0` / `false`: never colour
- `auto`, unset or anything else: colour only when stderr is a terminal

A thread-local override takes precedence, so a test can pin the decision
without leaking it into other threads.
"""

from __future__ import annotations

import os
import sys
import threading
from typing import Final


__all__ = [
    "K_LOG_COLOR",
    "use_color",
]

K_LOG_COLOR: Final[str] = "LOG_COLOR"

_ON: Final[frozenset[str]] = frozenset({"always", "on", "1", "true", "yes"})
_OFF: Final[frozenset[str]] = frozenset({"never", "off", "0", "false", "no"})

_tls = threading.local()


def use_color(
    *,
    unset_override: bool = False,
    override: bool | None = None,
) -> bool:
    """
    Decide whether log output carries ANSI colour codes.

    :param unset_override: If True, clears any prior override for this thread.
    :param override: If True or False, sets the override for this thread.
    :return: True if colour codes should be written.
    """
    if unset_override:
        _tls.override = None
    if override is not None:
        _tls.override = override
        return override
    current: bool | None = getattr(_tls, "override", None)
    if current is not None:
        return current

    setting = os.environ.get(K_LOG_COLOR, "").strip().lower()
    if setting in _ON:
        return True
    if setting in _OFF:
        return False
    return bool(getattr(sys.stderr, "isatty", lambda: False)())


# End of file: src/mstair/stringify/base/config.py
