from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pendulum


@dataclass(slots=True)
class GapFile:
    path: Path
    mtime_ns: int

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def modified(self) -> pendulum.DateTime:
        return pendulum.from_timestamp(self.mtime_ns / 1_000_000_000, tz=pendulum.local_timezone())

    def sort_key(self) -> tuple[int, str]:
        return (self.mtime_ns, self.name)


@dataclass(slots=True)
class CompressedArtifact:
    path: Path
    size: int
    source: GapFile
