from __future__ import annotations

from time import monotonic


def format_duration(seconds: float) -> str:
    if seconds < 1:
        return f"{int(seconds * 1000)}ms"
    return f"{seconds:.2f}s"


class Timer:
    def __init__(self, name: str = "") -> None:
        self.name = name
        self.start = 0.0
        self.elapsed = 0.0

    def __enter__(self) -> "Timer":
        self.start = monotonic()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.elapsed = monotonic() - self.start

    def __str__(self) -> str:
        return format_duration(self.elapsed)
