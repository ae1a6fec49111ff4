#!/usr/bin/env python3
"""Log compression benchmark — Entry Point."""

import sys
import logging

from src.benchmark import BenchmarkRunner
from src.config import load_config
from src.errors import BenchmarkError

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    try:
        config = load_config(argv)
    except ValueError as exc:
        print(f"Error: invalid configuration: {exc}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        BenchmarkRunner(config).run()
    except (BenchmarkError, OSError) as exc:
        logger.debug("Benchmark aborted", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
