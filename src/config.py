"""Configuration — frozen dataclass from YAML file, env vars, and CLI args."""

import os
import logging
import argparse
from dataclasses import dataclass, fields, replace

import yaml

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes")


def _parse_optional_int(value: str) -> int | None:
    value = value.strip()
    return int(value) if value else None


@dataclass(frozen=True)
class BenchmarkConfig:
    num_files: int = 10_000
    output_dir: str = "mock_logs"
    payload_size: int = 2500
    gzip_level: int = 6
    zstd_level: int = 3
    seed: int | None = None
    show_progress: bool = True
    clean: bool = True
    verify_zstd: bool = False
    report_json: str | None = None
    log_level: str = "WARNING"

    def validate(self) -> "BenchmarkConfig":
        """Raise ValueError on mistyped or out-of-range settings; return self otherwise."""
        for name, expected, optional in _FIELD_TYPES:
            value = getattr(self, name)
            if value is None and optional:
                continue
            # bool is an int subclass; a YAML "yes" must not pass as a count
            if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
                raise ValueError(f"{name} must be {expected.__name__}, got {value!r}")
        if self.num_files < 1:
            raise ValueError(f"num_files must be at least 1, got {self.num_files}")
        if self.payload_size < 0:
            raise ValueError(f"payload_size must not be negative, got {self.payload_size}")
        if not 1 <= self.gzip_level <= 9:
            raise ValueError(f"gzip_level must be 1-9, got {self.gzip_level}")
        if not 1 <= self.zstd_level <= 22:
            raise ValueError(f"zstd_level must be 1-22, got {self.zstd_level}")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level}")
        return self


# field -> (type, None allowed)
_FIELD_TYPES = (
    ("num_files", int, False),
    ("output_dir", str, False),
    ("payload_size", int, False),
    ("gzip_level", int, False),
    ("zstd_level", int, False),
    ("seed", int, True),
    ("show_progress", bool, False),
    ("clean", bool, False),
    ("verify_zstd", bool, False),
    ("report_json", str, True),
    ("log_level", str, False),
)


# env var -> (field, parser)
ENV_VARS = {
    "BENCH_NUM_FILES": ("num_files", int),
    "BENCH_OUTPUT_DIR": ("output_dir", str),
    "BENCH_PAYLOAD_SIZE": ("payload_size", int),
    "BENCH_GZIP_LEVEL": ("gzip_level", int),
    "BENCH_ZSTD_LEVEL": ("zstd_level", int),
    "BENCH_SEED": ("seed", _parse_optional_int),
    "BENCH_SHOW_PROGRESS": ("show_progress", _parse_bool),
    "BENCH_CLEAN": ("clean", _parse_bool),
    "BENCH_VERIFY_ZSTD": ("verify_zstd", _parse_bool),
    "BENCH_REPORT_JSON": ("report_json", str),
    "BENCH_LOG_LEVEL": ("log_level", lambda v: v.strip().upper()),
}


def load_yaml_config(path: str | None) -> dict:
    """Load settings from a YAML mapping. Returns empty dict if no path or file."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Config file {path} is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")

    known = {f.name for f in fields(BenchmarkConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        logger.warning("Ignoring unknown config keys in %s: %s", path, ", ".join(unknown))
    logger.info("Loaded YAML config from %s", path)
    return {k: v for k, v in data.items() if k in known}


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compare per-file gzip with multi-file zstd on synthetic JSON logs",
    )
    parser.add_argument("--config", default=None, help="Path to YAML config file")
    parser.add_argument("--num-files", type=int, default=None)
    parser.add_argument("--output-dir", type=str, default=None)
    parser.add_argument("--payload-size", type=int, default=None)
    parser.add_argument("--gzip-level", type=int, default=None)
    parser.add_argument("--zstd-level", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--report-json", type=str, default=None,
                        help="Also write the results as JSON to this path")
    parser.add_argument("--verify-zstd", action="store_true", default=None,
                        help="Read the zstd archive back and compare every entry")
    parser.add_argument("--no-progress", action="store_true", default=False)
    parser.add_argument("--no-clean", action="store_true", default=False,
                        help="Keep stale files from earlier runs in the output dir")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, default=None)
    return parser


def load_config(argv=None) -> BenchmarkConfig:
    """Build BenchmarkConfig: defaults < YAML file < env vars < CLI args."""
    args = build_cli_parser().parse_args(argv)

    config = replace(BenchmarkConfig(), **load_yaml_config(args.config))

    env_overrides = {}
    for var, (name, parse) in ENV_VARS.items():
        raw = os.environ.get(var)
        if raw is not None:
            env_overrides[name] = parse(raw)
    config = replace(config, **env_overrides)

    cli_overrides = {
        name: getattr(args, name)
        for name in (
            "num_files", "output_dir", "payload_size", "gzip_level",
            "zstd_level", "seed", "report_json", "verify_zstd", "log_level",
        )
        if getattr(args, name) is not None
    }
    if args.no_progress:
        cli_overrides["show_progress"] = False
    if args.no_clean:
        cli_overrides["clean"] = False

    return replace(config, **cli_overrides).validate()
