"""Performance regression gate over timed workload trials."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

import psutil

from .config import PerfConfig
from .errors import PerformanceError, PerformanceRegression
from .executor import CommandExecutor
from .logging import get_logger


@dataclass(frozen=True)
class PerfSample:
    """Wall-clock duration of one workload run."""

    trial: int
    duration_ms: float


@dataclass(frozen=True)
class PerfResult:
    """Accepted gate outcome."""

    samples: Sequence[PerfSample]
    median_ms: float
    threshold_ms: float


def detect_cpu_speed() -> Optional[float]:
    """Return the nominal processor clock speed in MHz, if the platform reports it."""
    freq = psutil.cpu_freq()
    if freq is None:
        return None
    speed = freq.max or freq.current
    return float(speed) if speed else None


def compute_threshold(multiplier: float, cpu_speed: Optional[float]) -> float:
    """Scale the time budget inversely with the host clock speed."""
    if not cpu_speed or cpu_speed <= 0:
        raise PerformanceError("Unable to determine CPU speed; cannot compute performance threshold")
    return multiplier / cpu_speed


def median_duration(durations: Sequence[float]) -> float:
    """Return the middle value of the sorted durations (upper middle for even counts)."""
    if not durations:
        raise PerformanceError("No performance samples were collected")
    ordered = sorted(durations)
    return ordered[len(ordered) // 2]


def decide(samples: Sequence[PerfSample], threshold_ms: float) -> PerfResult:
    """Accept the samples when their median is within ``threshold_ms``."""
    median = median_duration([sample.duration_ms for sample in samples])
    if median > threshold_ms:
        raise PerformanceRegression(median, threshold_ms)
    return PerfResult(samples=tuple(samples), median_ms=median, threshold_ms=threshold_ms)


class PerformanceGate:
    """Times a fixed workload several times and judges the median against a budget."""

    def __init__(
        self,
        executor: CommandExecutor,
        workload: Sequence[str],
        *,
        multiplier: float,
        trials: int = 3,
        clock: Callable[[], float] | None = None,
        cpu_speed: Callable[[], Optional[float]] | None = None,
    ) -> None:
        if trials < 1:
            raise PerformanceError("The performance gate needs at least one trial")
        self.executor = executor
        self.workload = list(workload)
        self.multiplier = multiplier
        self.trials = trials
        self._clock = clock or time.perf_counter
        self._cpu_speed = cpu_speed or detect_cpu_speed
        self.logger = get_logger("perf")

    @classmethod
    def from_config(cls, executor: CommandExecutor, config: PerfConfig) -> "PerformanceGate":
        return cls(executor, config.workload, multiplier=config.multiplier, trials=config.trials)

    def threshold(self) -> float:
        speed = self._cpu_speed()
        threshold = compute_threshold(self.multiplier, speed)
        self.logger.info("CPU Speed is %s with multiplier %s", speed, self.multiplier)
        return threshold

    def measure(self, threshold_ms: float) -> List[PerfSample]:
        """Run the workload sequentially; a failing run aborts before any decision."""
        samples: List[PerfSample] = []
        for trial in range(1, self.trials + 1):
            start = self._clock()
            self.executor.run(self.workload, capture_output=True)
            elapsed_ms = (self._clock() - start) * 1000
            samples.append(PerfSample(trial=trial, duration_ms=elapsed_ms))
            self.logger.info(
                "Performance Run #%d:  %.0fms (limit: %.0fms)", trial, elapsed_ms, threshold_ms
            )
        return samples

    def run(self) -> PerfResult:
        threshold_ms = self.threshold()
        samples = self.measure(threshold_ms)
        try:
            result = decide(samples, threshold_ms)
        except PerformanceRegression as exc:
            self.logger.error(str(exc))
            raise
        self.logger.info(
            "Performance budget ok:  %.0fms (limit: %.0fms)", result.median_ms, result.threshold_ms
        )
        return result


__all__ = [
    "PerfResult",
    "PerfSample",
    "PerformanceGate",
    "compute_threshold",
    "decide",
    "detect_cpu_speed",
    "median_duration",
]
