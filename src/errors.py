"""Fatal benchmark errors, tagged with the pipeline stage that raised them."""


class BenchmarkError(Exception):
    """Raised when a benchmark stage cannot complete. Never retried."""

    def __init__(self, stage: str, message: str):
        super().__init__(f"{stage} failed: {message}")
        self.stage = stage
        self.message = message


class IntegrityError(BenchmarkError):
    """Raised when decompressed bytes differ from the original file."""
