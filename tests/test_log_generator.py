"""Tests for src/log_generator.py — records, file generation, output dir prep."""

import json
import os
import random
import re

import pytest

from src.errors import BenchmarkError
from src.log_generator import (
    LogGenerator,
    generate_record,
    random_string,
    file_name,
    prepare_output_dir,
    LEVELS,
    HTTP_METHODS,
    HTTP_STATUSES,
    SERVICES,
    REGIONS,
)
from src.progress import ProgressBar


# ── Single records ──────────────────────────────────────────────────

class TestGenerateRecord:
    def test_value_domains(self):
        rng = random.Random(1)
        for _ in range(200):
            r = generate_record(rng, payload_size=100)
            assert re.fullmatch(r"2025-07-09T\d{2}:\d{2}:\d{2}\.\d{3}Z", r.timestamp)
            assert r.level in LEVELS
            assert 50 <= len(r.message) <= 150
            octets = [int(o) for o in r.source_ip.split(".")]
            assert len(octets) == 4 and all(1 <= o <= 254 for o in octets)
            assert re.fullmatch(r"user-\d{4}", r.user_id)
            assert len(r.request_id) == 32
            assert r.http_method in HTTP_METHODS
            assert 1 <= r.http_path.count("/") <= 3
            assert r.http_status in HTTP_STATUSES
            assert 10 <= r.response_time_ms <= 500
            assert re.fullmatch(r"[1-5]\.\d\.\d", r.app_version)
            assert r.service_name in SERVICES
            assert r.region in REGIONS
            assert len(r.payload) == 100

    def test_same_seed_same_record(self):
        assert generate_record(random.Random(7)) == generate_record(random.Random(7))

    def test_random_string_is_alphanumeric(self):
        s = random_string(random.Random(3), 64)
        assert len(s) == 64
        assert s.isalnum()


class TestFileName:
    def test_zero_padded(self):
        assert file_name(7) == "log_0007.json"

    def test_wide_index(self):
        assert file_name(12345) == "log_12345.json"


# ── File set generation ─────────────────────────────────────────────

class TestLogGenerator:
    def test_exact_file_count(self, tmp_path):
        result = LogGenerator(str(tmp_path), num_files=15, payload_size=50, seed=1).generate()
        assert result.file_set.count == 15
        assert sorted(os.listdir(tmp_path)) == [file_name(i) for i in range(15)]

    def test_single_file(self, tmp_path):
        result = LogGenerator(str(tmp_path), num_files=1, payload_size=10).generate()
        assert result.file_set.count == 1

    def test_every_file_is_valid_json(self, file_set):
        for path in file_set.paths:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            assert len(data) == 15
            assert isinstance(data["http_status"], int)

    def test_pretty_printed(self, file_set):
        with open(file_set.paths[0], encoding="utf-8") as f:
            text = f.read()
        assert text.startswith('{\n  "timestamp": ')

    def test_total_size_matches_disk(self, file_set):
        assert file_set.total_size == sum(os.path.getsize(p) for p in file_set.paths)

    def test_duration_recorded(self, generation):
        assert generation.duration > 0

    def test_seeded_runs_identical(self, tmp_path):
        a = LogGenerator(str(tmp_path / "a"), 5, payload_size=20, seed=9)
        b = LogGenerator(str(tmp_path / "b"), 5, payload_size=20, seed=9)
        os.makedirs(a.output_dir)
        os.makedirs(b.output_dir)
        fa, fb = a.generate().file_set, b.generate().file_set
        for pa, pb in zip(fa.paths, fb.paths):
            with open(pa, "rb") as x, open(pb, "rb") as y:
                assert x.read() == y.read()

    @pytest.mark.parametrize("count", [0, -3])
    def test_rejects_non_positive_count(self, tmp_path, count):
        with pytest.raises(ValueError):
            LogGenerator(str(tmp_path), num_files=count)

    def test_missing_directory_is_fatal(self, tmp_path):
        generator = LogGenerator(str(tmp_path / "missing"), num_files=2)
        with pytest.raises(BenchmarkError) as exc_info:
            generator.generate()
        assert exc_info.value.stage == "generate"

    def test_advances_progress(self, tmp_path):
        progress = ProgressBar(4, enabled=False)
        LogGenerator(str(tmp_path), num_files=4, payload_size=5).generate(progress)
        assert progress.position == 4


# ── Output directory preparation ────────────────────────────────────

class TestPrepareOutputDir:
    def test_creates_nested_directory(self, tmp_path):
        target = tmp_path / "a" / "b"
        prepare_output_dir(str(target))
        assert target.is_dir()

    def test_removes_stale_artifacts(self, tmp_path):
        for name in ("log_0001.json", "log_0001.json.gz", "log_0001_decompressed.json", "all_logs.zst"):
            (tmp_path / name).write_text("stale")
        (tmp_path / "notes.txt").write_text("keep")
        prepare_output_dir(str(tmp_path))
        assert os.listdir(tmp_path) == ["notes.txt"]

    def test_no_clean_keeps_files(self, tmp_path):
        (tmp_path / "log_0001.json").write_text("{}")
        prepare_output_dir(str(tmp_path), clean=False)
        assert (tmp_path / "log_0001.json").exists()

    def test_uncreatable_directory_is_fatal(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        with pytest.raises(BenchmarkError) as exc_info:
            prepare_output_dir(str(blocker / "logs"))
        assert exc_info.value.stage == "generate"
