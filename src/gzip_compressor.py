"""Per-file gzip compression with a verified decompression pass."""

import gzip
import logging
import os
import time
import zlib

from src.errors import BenchmarkError, IntegrityError
from src.models import FileSet, CompressionResult

logger = logging.getLogger(__name__)

METHOD = "gzip"


def gz_path(path: str) -> str:
    return path + ".gz"


def decompressed_path(path: str) -> str:
    root, ext = os.path.splitext(path)
    return f"{root}_decompressed{ext}"


class GzipCompressor:
    """Compresses every file of a FileSet into its own standalone .gz stream."""

    def __init__(self, level: int = 6):
        if not 1 <= level <= 9:
            raise ValueError(f"gzip level must be 1-9, got {level}")
        self._level = level

    @property
    def level(self) -> int:
        return self._level

    def compress(self, file_set: FileSet, progress=None) -> CompressionResult:
        """Compress each file independently. Duration sums the per-file work only."""
        duration = 0.0
        output_size = 0

        for path in file_set.paths:
            target = gz_path(path)
            start = time.perf_counter()
            try:
                with open(path, "rb") as f:
                    data = f.read()
                compressed = gzip.compress(data, compresslevel=self._level)
                with open(target, "wb") as f:
                    f.write(compressed)
            except (OSError, zlib.error) as exc:
                raise BenchmarkError("gzip-compress", f"{path}: {exc}") from exc
            duration += time.perf_counter() - start

            output_size += len(compressed)
            logger.debug("gzip %s: %d -> %d bytes", path, len(data), len(compressed))
            if progress is not None:
                progress.advance()

        if progress is not None:
            progress.finish("Individual gzip compression complete!")

        logger.info(
            "gzip compressed %d files to %d bytes in %.3fs",
            file_set.count, output_size, duration,
        )
        return CompressionResult(
            method=METHOD,
            input_size=file_set.total_size,
            output_size=output_size,
            compression_duration=duration,
            file_count=file_set.count,
        )

    def decompress(self, file_set: FileSet, progress=None) -> float:
        """Decompress every .gz back to disk and check it against the original.

        Returns the total decompression time. The byte comparison is not timed.
        """
        duration = 0.0

        for path in file_set.paths:
            source = gz_path(path)
            target = decompressed_path(path)
            start = time.perf_counter()
            try:
                with gzip.open(source, "rb") as f:
                    restored = f.read()
                with open(target, "wb") as f:
                    f.write(restored)
            except (OSError, EOFError, zlib.error) as exc:
                # gzip.BadGzipFile is an OSError subclass
                raise BenchmarkError("gzip-decompress", f"{source}: {exc}") from exc
            duration += time.perf_counter() - start

            try:
                with open(path, "rb") as f:
                    original = f.read()
            except OSError as exc:
                raise BenchmarkError("gzip-decompress", f"{path}: {exc}") from exc
            if restored != original:
                raise IntegrityError(
                    "gzip-decompress",
                    f"{source} does not round-trip to {path} "
                    f"({len(restored)} bytes vs {len(original)} bytes)",
                )
            if progress is not None:
                progress.advance()

        if progress is not None:
            progress.finish("Gzip decompression complete!")

        logger.info("gzip decompressed and verified %d files in %.3fs", file_set.count, duration)
        return duration

