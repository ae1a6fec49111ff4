"""Benchmark pipeline: generate, gzip each file, gunzip, zstd all files, report."""

import logging
import sys
from dataclasses import replace

from src.config import BenchmarkConfig
from src.gzip_compressor import GzipCompressor
from src.log_generator import LogGenerator, prepare_output_dir
from src.progress import progress_factory
from src.reporter import ComparisonReport, write_json_report
from src.zstd_aggregator import ZstdAggregator

logger = logging.getLogger(__name__)


class BenchmarkRunner:
    """Runs every stage once, in order, on the same generated file set."""

    def __init__(self, config: BenchmarkConfig, stdout=None, stderr=None):
        self._config = config
        self._stdout = stdout if stdout is not None else sys.stdout
        self._progress = progress_factory(
            enabled=config.show_progress,
            stream=stderr if stderr is not None else sys.stderr,
        )

    def _print(self, text: str = ""):
        print(text, file=self._stdout, flush=True)

    def run(self) -> ComparisonReport:
        """Run the full benchmark and print the report. Raises BenchmarkError on failure."""
        config = self._config
        logger.info("Benchmark config: %s", config)

        self._print("🚀 Starting compression comparison project")
        self._print(f"Generating {config.num_files} fake JSON files...")

        prepare_output_dir(config.output_dir, clean=config.clean)

        self._print("\n📝 Step 1: Generating JSON files")
        generator = LogGenerator(
            config.output_dir, config.num_files,
            payload_size=config.payload_size, seed=config.seed,
        )
        generation = generator.generate(self._progress(config.num_files, "generate"))
        file_set = generation.file_set

        self._print("\n🗜️  Step 2: Compressing individual files with gzip")
        gzip_compressor = GzipCompressor(level=config.gzip_level)
        gzip_result = gzip_compressor.compress(file_set, self._progress(file_set.count, "gzip"))

        self._print("\n📦 Step 3: Decompressing gzip files")
        decompression = gzip_compressor.decompress(file_set, self._progress(file_set.count, "gunzip"))
        gzip_result = replace(gzip_result, decompression_duration=decompression)

        self._print("\n🗜️  Step 4: Compressing all files with zstd")
        aggregator = ZstdAggregator(level=config.zstd_level)
        zstd_result = aggregator.compress(file_set, self._progress(file_set.count, "zstd"))
        if config.verify_zstd:
            aggregator.verify(file_set)

        report = ComparisonReport.build(generation, gzip_result, zstd_result)
        if config.report_json:
            write_json_report(report, config.report_json)

        self._print()
        self._print(report.render())
        self._print("\n✅ Compression comparison complete!")
        return report
