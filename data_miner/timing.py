"""
Phase timing for mining runs.

    timer = RunTimer()
    timer.start()
    with timer.phase("hierarchy") as stats:
        index = ClassHierarchyIndex.build(source.iter_classes())
        stats.rows = len(index)
    timer.stop()
    print(timer.report())

Miners time themselves from worker threads; each miner gets its own phase
named after it.
"""

import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Optional


@dataclass
class PhaseStats:
    name: str
    started: Optional[float] = None
    finished: Optional[float] = None
    rows: int = 0

    @property
    def seconds(self) -> float:
        if self.started is None or self.finished is None:
            return 0.0
        return self.finished - self.started


def format_seconds(seconds: float) -> str:
    """``850ms``, ``12.3s`` or ``4m 05s``."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, rest = divmod(seconds, 60)
    return f"{int(minutes)}m {rest:02.0f}s"


@dataclass
class RunTimer:
    """Wall-clock time of a run and of each named phase inside it."""

    phases: dict[str, PhaseStats] = field(default_factory=dict)
    run_started: Optional[float] = None
    run_finished: Optional[float] = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def start(self) -> None:
        self.run_started = time.perf_counter()
        self.run_finished = None

    def stop(self) -> None:
        self.run_finished = time.perf_counter()

    @contextmanager
    def phase(self, name: str) -> Iterator[PhaseStats]:
        """Time the enclosed block under ``name``. Safe from worker threads."""
        with self._lock:
            stats = self.phases.setdefault(name, PhaseStats(name=name))
        began = time.perf_counter()
        try:
            yield stats
        finally:
            ended = time.perf_counter()
            with self._lock:
                if stats.started is None:
                    stats.started = began
                stats.finished = ended

    @property
    def elapsed(self) -> float:
        if self.run_started is None:
            return 0.0
        end = self.run_finished if self.run_finished is not None else time.perf_counter()
        return end - self.run_started

    def report(self) -> str:
        rule = "=" * 60
        lines = [rule, "MINING RUN REPORT", rule, f"Total time: {format_seconds(self.elapsed)}", ""]
        for stats in self.phases.values():
            rows = f"  {stats.rows:,} rows" if stats.rows else ""
            lines.append(f"  {stats.name:20s} {format_seconds(stats.seconds):>10s}{rows}")
        lines.append(rule)
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "elapsed": self.elapsed,
            "phases": {
                stats.name: {"seconds": stats.seconds, "rows": stats.rows}
                for stats in self.phases.values()
            },
        }
