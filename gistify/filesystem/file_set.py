"""Candidate file discovery: recursive walk filtered by a regular expression."""

from __future__ import annotations

import logging
import os
import re
from typing import TYPE_CHECKING, NoReturn

from gistify.exceptions import PreconditionError, TraversalError

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

logger = logging.getLogger(__name__)


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a search pattern, raising PreconditionError when it is invalid."""
    try:
        return re.compile(pattern)
    except re.error as exc:
        msg = f"could not compile given regex {pattern!r}: {exc}"
        raise PreconditionError(msg) from exc


def _raise_traversal_error(exc: OSError) -> NoReturn:
    msg = f"could not search files in dir {exc.filename}: {exc.strerror or exc}"
    raise TraversalError(msg) from exc


def find_files(
    root: str | Path,
    pattern: str,
    exclude: Iterable[str | Path] = (),
) -> list[str]:
    """Return regular files under ``root`` whose path matches ``pattern``.

    Paths are joined from ``root`` and normalized, so walking ``.`` yields
    ``a.txt`` and ``sub/b.txt``.  Matching uses ``re.search`` on that string.
    Paths in ``exclude`` (e.g. the metadata store) are never returned.  Both
    sides are compared as resolved absolute paths, so a relative store path
    still excludes the store when ``root`` is absolute.
    """
    regex = compile_pattern(pattern)
    excluded = {os.path.realpath(p) for p in exclude}

    matches: list[str] = []
    for dirpath, dirs, files in os.walk(root, onerror=_raise_traversal_error):
        dirs.sort()
        for filename in sorted(files):
            path = os.path.normpath(os.path.join(dirpath, filename))
            if os.path.realpath(path) in excluded or not os.path.isfile(path):
                continue
            if regex.search(path):
                matches.append(path)

    logger.debug("Found %d file(s) under %s matching %r", len(matches), root, pattern)
    return matches
