import time
from dataclasses import dataclass
from dataclasses import field


@dataclass
class FetchStats:
    """Counters for one fetch cycle, reported once the snapshot is written."""
    total: int = 0
    fetched: int = 0
    failed: int = 0
    releases: int = 0
    workflow_runs: int = 0
    packages: int = 0
    degraded: int = 0
    start_time: float = field(default_factory=time.time)

    def inc_fetched(self):
        self.fetched += 1

    def inc_failed(self, count: int = 1):
        self.failed += count

    def inc_degraded(self, count: int = 1):
        self.degraded += count

    @property
    def elapsed_time(self) -> float:
        return time.time() - self.start_time
