"""Comparison report: ratios, winner, margin, text and JSON output."""

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone

import psutil

from src.errors import BenchmarkError
from src.models import GenerationResult, CompressionResult

logger = logging.getLogger(__name__)

UNITS = ("B", "KB", "MB", "GB")


def format_bytes(size: int) -> str:
    """Format a byte count with binary units, e.g. ``1536 -> '1.50 KB'``."""
    value = float(size)
    unit = 0
    while value >= 1024.0 and unit < len(UNITS) - 1:
        value /= 1024.0
        unit += 1
    return f"{value:.2f} {UNITS[unit]}"


def format_duration(seconds: float) -> str:
    """Format a duration with the largest unit that keeps the value >= 1."""
    if seconds >= 1.0:
        return f"{seconds:.2f}s"
    if seconds >= 1e-3:
        return f"{seconds * 1e3:.2f}ms"
    if seconds >= 1e-6:
        return f"{seconds * 1e6:.2f}µs"
    return f"{seconds * 1e9:.2f}ns"


def format_percent(fraction: float) -> str:
    return f"{fraction * 100:.2f}%"


@dataclass(frozen=True)
class ComparisonReport:
    original_size: int
    generation_time: float
    gzip: CompressionResult
    zstd: CompressionResult

    @classmethod
    def build(
        cls,
        generation: GenerationResult,
        gzip_result: CompressionResult,
        zstd_result: CompressionResult,
    ) -> "ComparisonReport":
        original_size = generation.file_set.total_size
        if original_size <= 0:
            raise ValueError("original size must be positive")
        for result in (gzip_result, zstd_result):
            if result is None:
                raise ValueError("both compression results are required")
            if result.input_size != original_size:
                raise ValueError(
                    f"{result.method} measured {result.input_size} input bytes, "
                    f"expected {original_size}"
                )
            if result.output_size <= 0:
                raise ValueError(f"{result.method} produced no output")
        if gzip_result.decompression_duration is None:
            raise ValueError("gzip result is missing its decompression time")
        return cls(
            original_size=original_size,
            generation_time=generation.duration,
            gzip=gzip_result,
            zstd=zstd_result,
        )

    @property
    def gzip_ratio(self) -> float:
        return self.gzip.output_size / self.original_size

    @property
    def zstd_ratio(self) -> float:
        return self.zstd.output_size / self.original_size

    @property
    def winner(self) -> str:
        """Method with the smaller output; ties go to gzip."""
        return "zstd" if self.zstd.output_size < self.gzip.output_size else "gzip"

    @property
    def margin_bytes(self) -> int:
        return abs(self.gzip.output_size - self.zstd.output_size)

    @property
    def margin_percent(self) -> float:
        """Margin relative to the losing method's size."""
        loser = self.gzip if self.winner == "zstd" else self.zstd
        return self.margin_bytes / loser.output_size * 100

    def render(self) -> str:
        lines = [
            "📊 COMPRESSION COMPARISON RESULTS",
            "=====================================",
            "Original JSON files:",
            f"  Size: {format_bytes(self.original_size)}",
            f"  Generation time: {format_duration(self.generation_time)}",
            "",
            "Individual gzip compression:",
            f"  Size: {format_bytes(self.gzip.output_size)}",
            f"  Compression time: {format_duration(self.gzip.compression_duration)}",
            f"  Decompression time: {format_duration(self.gzip.decompression_duration)}",
            f"  Compression ratio: {format_percent(self.gzip_ratio)}",
            "",
            "Multi-file zstd compression:",
            f"  Size: {format_bytes(self.zstd.output_size)}",
            f"  Compression time: {format_duration(self.zstd.compression_duration)}",
            f"  Compression ratio: {format_percent(self.zstd_ratio)}",
            "",
            "🏆 WINNER:",
            f"  {self.winner.capitalize()} wins by {format_bytes(self.margin_bytes)} "
            f"({self.margin_percent:.2f}% smaller)",
        ]
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "original": {
                "files": self.gzip.file_count,
                "size_bytes": self.original_size,
                "generation_secs": round(self.generation_time, 6),
            },
            "gzip": {
                "size_bytes": self.gzip.output_size,
                "compression_secs": round(self.gzip.compression_duration, 6),
                "decompression_secs": round(self.gzip.decompression_duration, 6),
                "ratio_percent": round(self.gzip_ratio * 100, 2),
            },
            "zstd": {
                "size_bytes": self.zstd.output_size,
                "compression_secs": round(self.zstd.compression_duration, 6),
                "ratio_percent": round(self.zstd_ratio * 100, 2),
            },
            "winner": {
                "method": self.winner,
                "margin_bytes": self.margin_bytes,
                "margin_percent": round(self.margin_percent, 2),
            },
        }


def write_json_report(report: ComparisonReport, path: str) -> str:
    """Save the report with system info as JSON. Returns the file path."""
    data = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "system": {
            "cpu_count": psutil.cpu_count(),
            "memory_mb": round(psutil.virtual_memory().total / (1024 * 1024)),
        },
        "results": report.to_dict(),
    }

    try:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
    except OSError as exc:
        raise BenchmarkError("report", f"cannot write {path}: {exc}") from exc

    logger.info("JSON report saved to %s", path)
    return path
