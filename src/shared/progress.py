import sys
import time
from typing import TextIO


class ConsoleProgress:
    """Прогресс-бар для пошаговых операций (одна перерисовываемая строка)."""

    def __init__(
        self,
        total: int,
        label: str = 'Прогресс',
        stream: TextIO | None = None,
    ) -> None:
        self.total = max(1, int(total))
        self.done = 0
        self.start = time.monotonic()
        self.label = label
        self._stream = stream or sys.stderr
        self._render()  # показать 0%

    def _format_eta(self, remaining: float) -> str:
        if remaining == float('inf'):
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
        bar_len = 30
        filled = int(bar_len * self.done / self.total)
        bar = '█' * filled + '░' * (bar_len - filled)
        msg = (
            f'{self.label}: [{bar}] {self.done}/{self.total} | {rps:4.1f}/s | ETA'
            f' {self._format_eta(remaining)}'
        )
        self._stream.write('\r' + msg)
        self._stream.flush()

    def update(self, done: int, total: int) -> None:
        """Колбэк в формате on_progress(done, total) загрузчика тайлов."""
        self.total = max(1, int(total))
        self.done = min(self.total, int(done))
        self._render()

    def step(self, n: int = 1) -> None:
        self.done = min(self.total, self.done + n)
        self._render()

    def close(self) -> None:
        self._stream.write('\n')
        self._stream.flush()
