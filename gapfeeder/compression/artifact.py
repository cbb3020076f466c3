from __future__ import annotations

import gzip
import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator, Optional

from ..errors import CompressionError
from ..gaps.models import CompressedArtifact, GapFile

logger = logging.getLogger(__name__)

COMPRESSION_LEVEL = 9
CHUNK_SIZE = 1024 * 1024


def _header_name(name: str) -> str:
    # gzip stores the original name latin-1 encoded
    try:
        name.encode("latin-1")
    except UnicodeEncodeError:
        return ""
    return name


def compress_to(source: GapFile, target: IO[bytes]) -> int:
    """Stream ``source`` through gzip into the open binary file ``target``.

    The target is flushed and synced to disk before its size is measured.
    """
    with source.path.open("rb") as uncompressed:
        with gzip.GzipFile(
            filename=_header_name(source.name),
            mode="wb",
            compresslevel=COMPRESSION_LEVEL,
            fileobj=target,
            mtime=source.mtime_ns // 1_000_000_000,
        ) as compressor:
            shutil.copyfileobj(uncompressed, compressor, CHUNK_SIZE)
    target.flush()
    os.fsync(target.fileno())
    return os.fstat(target.fileno()).st_size


@contextmanager
def compressed_gap_file(
    source: GapFile, directory: Optional[Path] = None
) -> Iterator[CompressedArtifact]:
    """Yield a gzip copy of ``source`` in the temp area, deleting it on exit.

    ``TMPDIR`` picks the temp area unless ``directory`` is given.
    """
    try:
        handle = tempfile.NamedTemporaryFile(
            prefix=f"{source.name}.",
            suffix=".gz",
            dir=directory,
            delete=False,
        )
    except OSError as exc:
        raise CompressionError(f"Could not create temporary file: {exc}") from exc

    path = Path(handle.name)
    try:
        try:
            with handle:
                size = compress_to(source, handle)
        except OSError as exc:
            raise CompressionError(f"Could not compress {source.path}: {exc}") from exc

        logger.debug("Compressed %s to %s (%d bytes)", source.path, path, size)
        yield CompressedArtifact(path=path, size=size, source=source)
    finally:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
