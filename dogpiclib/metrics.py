import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

OK = "ok"
ERROR = "error"
CANCELLED = "cancelled"


@dataclass(frozen=True)
class RequestSample:
    index: int
    outcome: str
    bytes: int
    fetch_ms: float


@dataclass
class Totals:
    requests: int = 0
    bytes: int = 0
    errors: int = 0
    cancelled: int = 0
    fetch_ms_sum: float = 0.0


class Metrics:
    """Outcome and latency of each request of one run, keyed by issue index.

    Only the event loop thread records into it, so no locking is done.
    """

    def __init__(self, now: Optional[Callable[[], float]] = None):
        self._now = now or time.perf_counter
        self._start = self._now()
        self._samples: Dict[int, RequestSample] = {}

    def record_fetch(self, index: int, outcome: str, bytes_read: int, fetch_ms: float) -> None:
        self._samples[index] = RequestSample(
            index=index, outcome=outcome, bytes=max(0, bytes_read), fetch_ms=fetch_ms
        )

    def samples(self) -> List[RequestSample]:
        return [self._samples[i] for i in sorted(self._samples)]

    def totals(self) -> Totals:
        t = Totals()
        for s in self._samples.values():
            t.requests += 1
            t.bytes += s.bytes
            t.fetch_ms_sum += s.fetch_ms
            if s.outcome == ERROR:
                t.errors += 1
            elif s.outcome == CANCELLED:
                t.cancelled += 1
        return t

    def elapsed(self) -> float:
        return max(1e-6, self._now() - self._start)


def _format_sample(s: RequestSample) -> str:
    if s.outcome == OK:
        return f"{s.fetch_ms:.1f}"
    return s.outcome


def log_summary(metrics: Metrics, log_fn) -> None:
    totals = metrics.totals()
    log_fn(
        "Perf: requests=%d, errors=%d, cancelled=%d, KB=%.2f, fetch_ms=[%s], elapsed_s=%.2f",
        totals.requests,
        totals.errors,
        totals.cancelled,
        totals.bytes / 1024,
        ", ".join(_format_sample(s) for s in metrics.samples()),
        metrics.elapsed(),
    )
