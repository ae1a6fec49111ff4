"""Benchmark data model: log records, the generated file set, and results."""

from dataclasses import dataclass, asdict


@dataclass(frozen=True)
class LogRecord:
    timestamp: str
    level: str
    message: str
    source_ip: str
    user_id: str
    request_id: str
    http_method: str
    http_path: str
    http_status: int
    user_agent: str
    response_time_ms: int
    app_version: str
    service_name: str
    region: str
    payload: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class FileSet:
    """Generated files in write order, with their combined size.

    ``total_size`` is measured once after generation; both compressors
    report their ratio against it.
    """

    paths: tuple[str, ...]
    total_size: int

    @property
    def count(self) -> int:
        return len(self.paths)


@dataclass(frozen=True)
class GenerationResult:
    file_set: FileSet
    duration: float  # seconds


@dataclass(frozen=True)
class CompressionResult:
    method: str
    input_size: int
    output_size: int
    compression_duration: float
    file_count: int
    decompression_duration: float | None = None

    @property
    def ratio(self) -> float:
        """Compressed size as a fraction of the original (lower is better)."""
        if self.input_size <= 0:
            raise ValueError("input_size must be positive to compute a ratio")
        return self.output_size / self.input_size
