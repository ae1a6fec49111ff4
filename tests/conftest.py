import pytest

from src.log_generator import LogGenerator


@pytest.fixture
def generation(tmp_path):
    """A small seeded file set written to a temporary directory."""
    output_dir = tmp_path / "logs"
    output_dir.mkdir()
    generator = LogGenerator(str(output_dir), num_files=20, payload_size=500, seed=42)
    return generator.generate()


@pytest.fixture
def file_set(generation):
    return generation.file_set
