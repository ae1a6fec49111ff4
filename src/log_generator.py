"""Synthetic JSON log file generator."""

import glob
import json
import logging
import os
import random
import string
import time

from src.errors import BenchmarkError
from src.models import LogRecord, FileSet, GenerationResult

logger = logging.getLogger(__name__)

ALPHANUMERIC = string.ascii_letters + string.digits
LEVELS = ["INFO", "WARN", "ERROR", "DEBUG"]
HTTP_METHODS = ["GET", "POST", "PUT", "DELETE"]
HTTP_STATUSES = [200, 201, 400, 404, 500]
SERVICES = ["auth-service", "product-service", "order-service"]
REGIONS = ["us-east-1", "us-west-2", "eu-central-1"]
USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/126.0.0.0 Safari/537.36"
)
DEFAULT_PAYLOAD_SIZE = 2500

# Artifacts left by earlier runs; removed before generating so stale files
# never count towards the measured sizes.
STALE_PATTERNS = ("log_*.json", "log_*.json.gz", "log_*_decompressed.json", "all_logs.zst")


def random_string(rng: random.Random, length: int) -> str:
    return "".join(rng.choices(ALPHANUMERIC, k=length))


def generate_record(rng: random.Random, payload_size: int = DEFAULT_PAYLOAD_SIZE) -> LogRecord:
    """Generate a single synthetic log record."""
    timestamp = (
        f"2025-07-09T{rng.randrange(24):02d}:{rng.randrange(60):02d}:"
        f"{rng.randrange(60):02d}.{rng.randrange(1000):03d}Z"
    )
    segments = [random_string(rng, rng.randint(5, 10)) for _ in range(rng.randint(1, 3))]
    return LogRecord(
        timestamp=timestamp,
        level=rng.choice(LEVELS),
        message=random_string(rng, rng.randint(50, 150)),
        source_ip=".".join(str(rng.randint(1, 254)) for _ in range(4)),
        user_id=f"user-{rng.randint(1000, 9999)}",
        request_id=random_string(rng, 32),
        http_method=rng.choice(HTTP_METHODS),
        http_path="/" + "/".join(segments),
        http_status=rng.choice(HTTP_STATUSES),
        user_agent=USER_AGENT,
        response_time_ms=rng.randint(10, 500),
        app_version=f"{rng.randint(1, 5)}.{rng.randint(0, 9)}.{rng.randint(0, 9)}",
        service_name=rng.choice(SERVICES),
        region=rng.choice(REGIONS),
        payload=random_string(rng, payload_size),
    )


def file_name(index: int) -> str:
    return f"log_{index:04d}.json"


def prepare_output_dir(path: str, clean: bool = True):
    """Create the working directory and clear artifacts from earlier runs."""
    try:
        os.makedirs(path, exist_ok=True)
        if not clean:
            return
        removed = 0
        for pattern in STALE_PATTERNS:
            for stale in glob.glob(os.path.join(path, pattern)):
                os.remove(stale)
                removed += 1
        if removed:
            logger.info("Removed %d stale files from %s", removed, path)
    except OSError as exc:
        raise BenchmarkError("generate", f"cannot prepare output directory {path}: {exc}") from exc


class LogGenerator:
    """Writes one pretty-printed JSON log record per file."""

    def __init__(
        self,
        output_dir: str,
        num_files: int,
        payload_size: int = DEFAULT_PAYLOAD_SIZE,
        seed: int | None = None,
    ):
        if num_files < 1:
            raise ValueError(f"num_files must be at least 1, got {num_files}")
        self._output_dir = output_dir
        self._num_files = num_files
        self._payload_size = payload_size
        self._rng = random.Random(seed)

    @property
    def output_dir(self) -> str:
        return self._output_dir

    def generate(self, progress=None) -> GenerationResult:
        """Generate the file set. Blocks until every file is written."""
        logger.info("Generating %d files in %s", self._num_files, self._output_dir)

        paths = []
        total_size = 0
        duration = 0.0

        for i in range(self._num_files):
            path = os.path.join(self._output_dir, file_name(i))
            start = time.perf_counter()
            data = json.dumps(generate_record(self._rng, self._payload_size).to_dict(), indent=2)
            try:
                with open(path, "w", encoding="utf-8") as f:
                    f.write(data)
            except OSError as exc:
                raise BenchmarkError("generate", f"cannot write {path}: {exc}") from exc
            duration += time.perf_counter() - start

            total_size += os.path.getsize(path)
            paths.append(path)
            if progress is not None:
                progress.advance()

        if progress is not None:
            progress.finish("JSON files generated!")

        logger.info("Generated %d files, %d bytes in %.3fs", len(paths), total_size, duration)
        return GenerationResult(
            file_set=FileSet(paths=tuple(paths), total_size=total_size),
            duration=duration,
        )
