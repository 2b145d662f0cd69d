"""Rolling statistics for generation timings."""

import abc
from dataclasses import dataclass, field

import numpy as np

from layoutwfc import config


class StatsVar(abc.ABC):
    """Abstract base class for tracking statistics of a variable over time."""

    @abc.abstractmethod
    def record(self, value: float) -> None:
        """Record a new sample value."""
        pass

    @property
    @abc.abstractmethod
    def sample_count(self) -> int:
        pass

    @abc.abstractmethod
    def _get_valid_samples(self) -> np.ndarray:
        pass

    @property
    def p50(self) -> float:
        return self.get_percentiles()[0]

    @property
    def p95(self) -> float:
        return self.get_percentiles()[1]

    @property
    def p99(self) -> float:
        return self.get_percentiles()[2]

    @property
    def last(self) -> float:
        """Most recently recorded value, 0.0 before the first sample."""
        valid = self._get_valid_samples()
        return float(valid[-1]) if len(valid) else 0.0

    def get_percentiles(self) -> tuple[float, float, float]:
        """Return (p50, p95, p99) as a tuple of floats."""
        valid = self._get_valid_samples()
        if len(valid) == 0:
            return (0.0, 0.0, 0.0)

        p50, p95, p99 = np.percentile(valid, [50, 95, 99])
        return (float(p50), float(p95), float(p99))


class MostRecentNVar(StatsVar):
    """Ring buffer over the most recent N samples."""

    def __init__(self, num_samples: int = 1000) -> None:
        self.num_samples = num_samples
        self.samples = np.zeros(num_samples, dtype=np.float32)
        self.count = 0
        self.write_index = 0

    def record(self, value: float) -> None:
        self.samples[self.write_index] = value
        self.write_index = (self.write_index + 1) % self.num_samples
        self.count += 1

    def _get_valid_samples(self) -> np.ndarray:
        if self.count <= self.num_samples:
            return self.samples[: self.count]

        # Wrapped: oldest sample sits at write_index
        return np.concatenate(
            [self.samples[self.write_index :], self.samples[: self.write_index]]
        )

    @property
    def sample_count(self) -> int:
        return min(self.count, self.num_samples)


@dataclass
class GenerationStats:
    """Counters a solver keeps about its generate() calls.

    Attributes:
        elapsed_ms: Wall time of recent generate() calls.
        runs: Total number of completed generate() calls.
        contradictions: Cells whose wave emptied during the last run.
        fallbacks: Cells forced to Floor during the last run (contradiction
            fallback plus gap fill).
    """

    elapsed_ms: MostRecentNVar = field(
        default_factory=lambda: MostRecentNVar(config.STATS_SAMPLE_SIZE)
    )
    runs: int = 0
    contradictions: int = 0
    fallbacks: int = 0

    def begin_run(self) -> None:
        self.contradictions = 0
        self.fallbacks = 0

    def end_run(self, elapsed_ms: float) -> None:
        self.elapsed_ms.record(elapsed_ms)
        self.runs += 1
