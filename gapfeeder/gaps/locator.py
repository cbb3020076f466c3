from __future__ import annotations

import logging
import os
from fnmatch import fnmatchcase
from pathlib import Path

from ..errors import LocatorError, NoGapFilesError
from .models import GapFile

logger = logging.getLogger(__name__)


def translate_glob(pattern: str) -> str:
    """Rewrite a shell-style glob with backslash escapes into fnmatch syntax.

    ``\\*`` outside a character class matches a literal ``*`` and ``[^...]``
    negates a class. fnmatch has no escape character, so escaped characters
    become one-character classes and ``^`` becomes ``!``.
    """
    if not pattern:
        raise LocatorError("Gap file glob must not be empty.")

    translated: list[str] = []
    in_class = False
    class_start = 0
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "\\":
            if i + 1 >= len(pattern):
                raise LocatorError(f"Malformed gap file glob: {pattern!r}")
            escaped = pattern[i + 1]
            if in_class or escaped not in "*?[]":
                translated.append(escaped)
            else:
                translated.append(f"[{escaped}]")
            i += 2
            continue
        if char == "[" and not in_class:
            in_class = True
            translated.append(char)
            if pattern.startswith("^", i + 1):
                translated.append("!")
                i += 1
            class_start = len(translated)
        elif char == "]" and in_class:
            if len(translated) == class_start:
                raise LocatorError(f"Empty character class in gap file glob: {pattern!r}")
            in_class = False
            translated.append(char)
        else:
            translated.append(char)
        i += 1

    if in_class:
        raise LocatorError(f"Malformed gap file glob: {pattern!r}")
    return "".join(translated)


def scan_gap_files(directory: Path, pattern: str) -> list[GapFile]:
    match_pattern = translate_glob(pattern)

    matched: list[GapFile] = []
    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                if not fnmatchcase(entry.name, match_pattern):
                    continue
                if not entry.is_file():
                    continue
                matched.append(
                    GapFile(path=Path(entry.path), mtime_ns=entry.stat().st_mtime_ns)
                )
    except OSError as exc:
        raise LocatorError(f"Could not read gap directory {directory}: {exc}") from exc
    return matched


def find_latest_gap_file(directory: Path, pattern: str) -> GapFile:
    """Return the most recently modified regular file in ``directory`` matching ``pattern``.

    Files sharing a modification time are ordered by name, so the
    lexicographically greatest name wins regardless of listing order.
    Raises :class:`NoGapFilesError` when nothing matches.
    """
    matched = scan_gap_files(directory, pattern)
    if not matched:
        raise NoGapFilesError(str(directory), pattern)

    matched.sort(key=GapFile.sort_key, reverse=True)
    latest = matched[0]
    logger.info(
        "Selected %s out of %d match(es), modified %s (%s)",
        latest.name,
        len(matched),
        latest.modified.to_datetime_string(),
        latest.modified.diff_for_humans(),
    )
    return latest
