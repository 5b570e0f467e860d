import asyncio
import contextlib
import logging
import sys
import threading
import time
from collections.abc import Callable

from shared.constants import PROGRESS_BAR_LEN

logger = logging.getLogger(__name__)


class SingleLineRenderer:
    """Thread-safe renderer that redraws a single console line."""

    def __init__(self, *, single_line: bool = True, stream=None) -> None:
        self.single_line = single_line
        self._stream = stream
        self._last_len = 0
        self._lock = threading.Lock()

    @property
    def stream(self):
        return self._stream if self._stream is not None else sys.stdout

    def clear_line(self) -> None:
        """Wipe the current progress line."""
        with self._lock:
            if self.single_line and self._last_len > 0:
                self.stream.write('\r' + ' ' * self._last_len + '\r')
                self.stream.flush()
                self._last_len = 0

    def write_line(self, msg: str) -> None:
        """Redraw the current progress line."""
        with self._lock:
            if self.single_line:
                pad = max(0, self._last_len - len(msg))
                self.stream.write('\r' + msg + (' ' * pad))
            else:
                self.stream.write('\r' + msg)
            self.stream.flush()
            self._last_len = len(msg)

    def finish_line(self) -> None:
        """Move past the progress line so later output starts clean."""
        with self._lock:
            if self._last_len > 0:
                self.stream.write('\n')
                self.stream.flush()
                self._last_len = 0


DEFAULT_WRITER = SingleLineRenderer()


# Optional progress hook for embedding callers: (done, total, label)
class _CbStore:
    progress: Callable[[int, int, str], None] | None = None


def set_progress_callback(cb: Callable[[int, int, str], None] | None) -> None:
    """Install a global progress callback: (done, total, label)."""
    _CbStore.progress = cb


def render_bar(length: int, fraction: float) -> str:
    """Render a fixed-width bar; ``fraction`` is clamped into [0, 1]."""
    fraction = min(1.0, max(0.0, fraction))
    filled = int(round(length * fraction))
    return '█' * filled + '░' * (length - filled)


class ConsoleProgress:
    """Progress bar for step-wise operations."""

    def __init__(
        self,
        total: int,
        label: str = 'Processing locations',
        writer: SingleLineRenderer | None = None,
        bar_len: int = PROGRESS_BAR_LEN,
    ) -> None:
        self.total = max(1, int(total))
        self.done = 0
        self.start = time.monotonic()
        self.label = label
        self.bar_len = bar_len
        self._writer = writer or DEFAULT_WRITER
        self._lock = threading.Lock()
        self._async_lock: asyncio.Lock | None = None
        self._writer.clear_line()
        self._render()

    def _format_eta(self, remaining: float) -> str:
        if remaining is None or remaining == float('inf'):
            return '--:--'
        m, s = divmod(int(remaining), 60)
        h, m = divmod(m, 60)
        if h > 0:
            return f'{h:02d}:{m:02d}:{s:02d}'
        return f'{m:02d}:{s:02d}'

    def _render(self) -> None:
        elapsed = max(1e-6, time.monotonic() - self.start)
        rps = self.done / elapsed
        remaining = (self.total - self.done) / rps if rps > 0 else float('inf')
        fraction = self.done / self.total
        msg = (
            f'{self.label} |{render_bar(self.bar_len, fraction)}| '
            f'{self.done:,} / {self.total:,} ({round(fraction * 100)}%) | ETA'
            f' {self._format_eta(remaining)}'
        )
        self._writer.write_line(msg)
        if _CbStore.progress is not None:
            with contextlib.suppress(Exception):
                _CbStore.progress(self.done, self.total, self.label)

    def step_sync(self, n: int = 1) -> None:
        with self._lock:
            self.done = min(self.total, self.done + n)
            self._render()

    async def step(self, n: int = 1) -> None:
        if self._async_lock is None:
            self._async_lock = asyncio.Lock()
        async with self._async_lock:
            self.step_sync(n)

    def close(self) -> None:
        self._writer.finish_line()
