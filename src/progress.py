"""Terminal progress bar drawn on stderr while a stage runs."""

import sys
import time


class ProgressBar:
    """Renders ``[HH:MM:SS] [=====>----] pos/total pct% message``.

    Redraws are throttled to ``min_interval`` seconds so drawing cost stays
    negligible next to the work being measured. Callers advance the bar
    outside their timed sections.
    """

    def __init__(
        self,
        total: int,
        label: str = "",
        stream=None,
        width: int = 40,
        enabled: bool = True,
        min_interval: float = 0.1,
    ):
        self._total = max(total, 0)
        self._label = label
        self._stream = stream if stream is not None else sys.stderr
        self._width = width
        self._enabled = enabled
        self._min_interval = min_interval
        self._position = 0
        self._start = time.monotonic()
        self._last_draw = None
        self._finished = False

    @property
    def position(self) -> int:
        return self._position

    @property
    def total(self) -> int:
        return self._total

    @property
    def percent(self) -> float:
        if self._total == 0:
            return 100.0
        return self._position / self._total * 100

    def elapsed(self) -> float:
        return time.monotonic() - self._start

    def advance(self, n: int = 1):
        self._position = min(self._position + n, self._total)
        if not self._enabled:
            return
        now = time.monotonic()
        if (
            self._last_draw is None
            or now - self._last_draw >= self._min_interval
            or self._position == self._total
        ):
            self._last_draw = now
            self._draw(self._label)

    def finish(self, message: str = ""):
        if self._finished:
            return
        self._finished = True
        if not self._enabled:
            return
        self._draw(message or self._label)
        self._stream.write("\n")
        self._stream.flush()

    def render(self, message: str = "") -> str:
        """Return the bar line for the current position."""
        elapsed = int(self.elapsed())
        hours, rem = divmod(elapsed, 3600)
        minutes, seconds = divmod(rem, 60)

        filled = int(self._width * self.percent / 100)
        if filled >= self._width:
            bar = "=" * self._width
        else:
            bar = "=" * filled + ">" + "-" * (self._width - filled - 1)

        count_width = len(str(self._total))
        line = (
            f"[{hours:02d}:{minutes:02d}:{seconds:02d}] [{bar}] "
            f"{self._position:>{count_width}}/{self._total} {self.percent:5.1f}%"
        )
        if message:
            line += f" {message}"
        return line

    def _draw(self, message: str):
        self._stream.write("\r" + self.render(message))
        self._stream.flush()


def progress_factory(enabled: bool = True, stream=None):
    """Return a ``(total, label) -> ProgressBar`` callable for pipeline stages."""

    def make(total: int, label: str = "") -> ProgressBar:
        return ProgressBar(total, label=label, stream=stream, enabled=enabled)

    return make
