"""
Statistics Module - Running round-trip statistics for one ping run.

Latencies are whole milliseconds. Every timed attempt contributes to
min/max/total, whether it got a reply or timed out.
"""

from dataclasses import dataclass


# Larger than any realistic round trip
LATENCY_SENTINEL_MS = 2**31 - 1


@dataclass(frozen=True)
class StatisticsSummary:
    """Final figures rendered after a run."""
    sent: int
    succeeded: int
    failed: int
    loss_percent: float
    min_ms: int
    max_ms: int
    avg_ms: int


@dataclass
class RunStatistics:
    """
    Accumulates per-attempt outcomes.

    Usage:
        stats = RunStatistics()
        stats.record(5, succeeded=True)
        stats.record(1000, succeeded=False)
        summary = stats.summarize()
    """
    sent: int = 0
    succeeded: int = 0
    failed: int = 0
    min_latency_ms: int = LATENCY_SENTINEL_MS
    max_latency_ms: int = 0
    total_latency_ms: int = 0
    timed_attempts: int = 0

    def record(self, elapsed_ms: int, succeeded: bool) -> None:
        """Record a timed attempt."""
        self.sent += 1
        if succeeded:
            self.succeeded += 1
        else:
            self.failed += 1

        self.timed_attempts += 1
        self.total_latency_ms += elapsed_ms
        if elapsed_ms < self.min_latency_ms:
            self.min_latency_ms = elapsed_ms
        if elapsed_ms > self.max_latency_ms:
            self.max_latency_ms = elapsed_ms

    def record_untimed_failure(self) -> None:
        """Record an attempt that failed before a reply was awaited."""
        self.sent += 1
        self.failed += 1

    @property
    def timed(self) -> bool:
        return self.timed_attempts > 0

    def summarize(self) -> StatisticsSummary:
        """
        Compute loss and average figures.

        With nothing sent every figure is zero. The average is taken over
        timed attempts only, and ``min_ms`` is reported as zero until a timed
        attempt has been recorded.
        """
        if self.sent == 0:
            return StatisticsSummary(
                sent=0, succeeded=0, failed=0, loss_percent=0.0,
                min_ms=0, max_ms=0, avg_ms=0,
            )

        return StatisticsSummary(
            sent=self.sent,
            succeeded=self.succeeded,
            failed=self.failed,
            loss_percent=self.failed / self.sent * 100,
            min_ms=self.min_latency_ms if self.timed else 0,
            max_ms=self.max_latency_ms,
            avg_ms=self.total_latency_ms // self.timed_attempts if self.timed else 0,
        )
