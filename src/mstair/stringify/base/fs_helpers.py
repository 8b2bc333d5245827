# File: src/mstair/stringify/base/fs_helpers.py
"""
File System Helpers
"""

import logging
from pathlib import Path
from typing import IO, TypeAlias

import dotenv


__all__ = [
    "StrPath",
    "fs_load_dotenv",
]

StrPath: TypeAlias = str | Path


def fs_load_dotenv(
    *,
    logger: logging.Logger | None = None,
    dotenv_path: StrPath | None = None,
    stream: IO[str] | None = None,
    verbose: bool = False,
    override: bool = False,
    encoding: str | None = "utf-8",
) -> bool:
    """
    Parse a .env file and load the variables it defines into os.environ.

    Variables already present in the environment win unless `override` is set,
    so an explicit `STRINGIFY_WRAP_WIDTH=...` on the command line beats the file.

    :param logger: Logger for python-dotenv's own warnings; supplying one enables verbose.
    :param dotenv_path: Absolute or relative path to the .env file.
    :param stream: Text stream with .env content, used if `dotenv_path` is None.
    :param verbose: Whether to warn when the .env file is missing.
    :param override: Whether .env values replace variables that are already set.
    :param encoding: Encoding of the .env file.
    :return: True if at least one environment variable was set, else False.

    If both `dotenv_path` and `stream` are None, `find_dotenv(usecwd=True)` locates
    the file starting from the current working directory.
    """
    if logger is not None:
        dotenv.main.logger = logger
        verbose = True
    if dotenv_path is None and stream is None:
        dotenv_path = dotenv.find_dotenv(usecwd=True) or None
        if dotenv_path is None:
            return False
    return dotenv.load_dotenv(
        dotenv_path=dotenv_path,
        stream=stream,
        verbose=verbose,
        override=override,
        encoding=encoding,
    )


# End of file: src/mstair/stringify/base/fs_helpers.py
