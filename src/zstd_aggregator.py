"""Multi-file zstd archive: every file streamed into a single zstd frame.

Each entry is framed as::

    u32le name length | name (utf-8) | u32le content length | content
"""

import logging
import os
import struct
import time

import zstandard as zstd

from src.errors import BenchmarkError, IntegrityError
from src.models import FileSet, CompressionResult

logger = logging.getLogger(__name__)

METHOD = "zstd"
DEFAULT_ARCHIVE_NAME = "all_logs.zst"
_U32 = struct.Struct("<I")


class ZstdAggregator:
    """Compresses a whole FileSet into one archive. No per-file decompression."""

    def __init__(self, level: int = 3, archive_name: str = DEFAULT_ARCHIVE_NAME):
        if not 1 <= level <= 22:
            raise ValueError(f"zstd level must be 1-22, got {level}")
        self._level = level
        self._archive_name = archive_name

    @property
    def level(self) -> int:
        return self._level

    def archive_path(self, file_set: FileSet) -> str:
        """Archive sits beside the generated files."""
        directory = os.path.dirname(file_set.paths[0]) if file_set.paths else "."
        return os.path.join(directory, self._archive_name)

    def compress(self, file_set: FileSet, progress=None) -> CompressionResult:
        archive = self.archive_path(file_set)
        cctx = zstd.ZstdCompressor(level=self._level)
        duration = 0.0

        try:
            with open(archive, "wb") as out:
                writer = cctx.stream_writer(out, closefd=False)
                for path in file_set.paths:
                    start = time.perf_counter()
                    name = os.path.basename(path).encode("utf-8")
                    with open(path, "rb") as f:
                        content = f.read()
                    writer.write(_U32.pack(len(name)))
                    writer.write(name)
                    writer.write(_U32.pack(len(content)))
                    writer.write(content)
                    duration += time.perf_counter() - start
                    if progress is not None:
                        progress.advance()
                start = time.perf_counter()
                writer.close()  # ends the frame
                duration += time.perf_counter() - start
            output_size = os.path.getsize(archive)
        except (OSError, zstd.ZstdError) as exc:
            raise BenchmarkError("zstd-compress", f"{archive}: {exc}") from exc

        if progress is not None:
            progress.finish("Zstd compression complete!")

        logger.info(
            "zstd archived %d files to %d bytes in %.3fs",
            file_set.count, output_size, duration,
        )
        return CompressionResult(
            method=METHOD,
            input_size=file_set.total_size,
            output_size=output_size,
            compression_duration=duration,
            file_count=file_set.count,
        )

    def verify(self, file_set: FileSet, archive_path: str | None = None):
        """Check the archive holds every file of the set, in order, byte for byte."""
        archive = archive_path or self.archive_path(file_set)
        expected = iter(file_set.paths)
        count = 0
        for name, content in read_archive(archive):
            path = next(expected, None)
            if path is None:
                raise IntegrityError("zstd-verify", f"unexpected extra entry {name}")
            if name != os.path.basename(path):
                raise IntegrityError("zstd-verify", f"entry {count} is {name}, expected {os.path.basename(path)}")
            try:
                with open(path, "rb") as f:
                    original = f.read()
            except OSError as exc:
                raise BenchmarkError("zstd-verify", f"{path}: {exc}") from exc
            if original != content:
                raise IntegrityError("zstd-verify", f"{name} does not match {path}")
            count += 1
        if count != file_set.count:
            raise IntegrityError("zstd-verify", f"archive holds {count} of {file_set.count} files")
        logger.info("zstd archive %s verified (%d entries)", archive, count)


def _read_exact(reader, size: int, archive: str) -> bytes:
    chunks = []
    remaining = size
    while remaining > 0:
        chunk = reader.read(remaining)
        if not chunk:
            raise IntegrityError("zstd-verify", f"{archive} is truncated")
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def read_archive(archive: str):
    """Yield ``(name, content)`` for every entry of a zstd archive."""
    dctx = zstd.ZstdDecompressor()
    try:
        with open(archive, "rb") as f, dctx.stream_reader(f) as reader:
            while True:
                header = reader.read(_U32.size)
                if not header:
                    return
                if len(header) < _U32.size:
                    header += _read_exact(reader, _U32.size - len(header), archive)
                (name_len,) = _U32.unpack(header)
                raw_name = _read_exact(reader, name_len, archive)
                try:
                    name = raw_name.decode("utf-8")
                except UnicodeDecodeError as exc:
                    raise IntegrityError("zstd-verify", f"{archive} has a corrupt entry name: {exc}") from exc
                (content_len,) = _U32.unpack(_read_exact(reader, _U32.size, archive))
                yield name, _read_exact(reader, content_len, archive)
    except (OSError, zstd.ZstdError) as exc:
        raise BenchmarkError("zstd-verify", f"{archive}: {exc}") from exc
