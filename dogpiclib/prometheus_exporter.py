import logging

from prometheus_client import CollectorRegistry, Counter, Gauge, write_to_textfile

from .metrics import Metrics


logger = logging.getLogger(__name__)


class PrometheusExporter:
    """Writes a run's fetch metrics to a Prometheus textfile-collector file."""

    def __init__(self, metrics: Metrics, path: str) -> None:
        self.metrics = metrics
        self.path = path
        self.registry = CollectorRegistry()

        self.requests_total = Counter(
            'dogpics_requests_total', 'Total number of image requests issued', registry=self.registry
        )
        self.bytes_total = Counter(
            'dogpics_bytes_total', 'Total number of response bytes received', registry=self.registry
        )
        self.errors_total = Counter(
            'dogpics_errors_total', 'Total number of failed image requests', registry=self.registry
        )
        self.cancelled_total = Counter(
            'dogpics_cancelled_total', 'Requests cancelled after a sibling failed', registry=self.registry
        )
        self.request_duration_seconds = Gauge(
            'dogpics_request_duration_seconds',
            'Duration of each request, by issue index',
            ['index', 'outcome'],
            registry=self.registry,
        )
        self.run_duration_seconds = Gauge(
            'dogpics_run_duration_seconds', 'Wall-clock duration of the run in seconds', registry=self.registry
        )

    def _update_metrics(self) -> None:
        totals = self.metrics.totals()
        if totals.requests > 0:
            self.requests_total.inc(totals.requests)
        if totals.bytes > 0:
            self.bytes_total.inc(totals.bytes)
        if totals.errors > 0:
            self.errors_total.inc(totals.errors)
        if totals.cancelled > 0:
            self.cancelled_total.inc(totals.cancelled)
        for s in self.metrics.samples():
            self.request_duration_seconds.labels(index=str(s.index), outcome=s.outcome).set(s.fetch_ms / 1000.0)
        self.run_duration_seconds.set(self.metrics.elapsed())

    def write(self) -> None:
        """Export the run once; call at the end of a run."""
        self._update_metrics()
        write_to_textfile(self.path, self.registry)
        logger.info(f"Prometheus metrics written to {self.path}")
