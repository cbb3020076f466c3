from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from ..errors import CounterFileError

logger = logging.getLogger(__name__)

SUMMARY_CAPACITY = 3
BODY_LINES = 2


class SummaryBuffer:
    """Fixed three-slot window over the most recent lines, oldest first.

    Lines are kept as raw bytes, split on newline only and terminators
    included. Unused slots are empty, so a short counter file still yields
    a full-width buffer.
    """

    def __init__(self) -> None:
        self._slots: list[bytes] = [b""] * SUMMARY_CAPACITY

    def push(self, line: bytes) -> None:
        self._slots[0], self._slots[1], self._slots[2] = (
            self._slots[1],
            self._slots[2],
            line,
        )

    def extend(self, lines: Iterable[bytes]) -> None:
        for line in lines:
            self.push(line)

    @property
    def lines(self) -> list[bytes]:
        return list(self._slots)

    def body(self) -> bytes:
        # the oldest retained line never goes into the mail
        return b"".join(self._slots[-BODY_LINES:])


def complete_lines(stream: Iterable[bytes]) -> Iterable[bytes]:
    for line in stream:
        # a trailing line without terminator is still being written
        if not line.endswith(b"\n"):
            break
        yield line


def read_recent_gap_messages(path: Path) -> SummaryBuffer:
    buffer = SummaryBuffer()
    try:
        with path.open("rb") as counter_file:
            buffer.extend(complete_lines(counter_file))
    except OSError as exc:
        raise CounterFileError(f"Could not read gap count file {path}: {exc}") from exc

    logger.debug("Retained gap count lines: %r", buffer.lines)
    return buffer
