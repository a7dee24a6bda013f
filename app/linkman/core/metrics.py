from __future__ import annotations

from dataclasses import dataclass

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST

from app.linkman.core.config import settings


@dataclass
class MetricsSnapshot:
    content: bytes
    content_type: str


class Metrics:
    def __init__(self) -> None:
        self.enabled = bool(settings.METRICS_ENABLED)
        self._registry = None
        self._http_requests_total = None
        self._http_request_duration_ms = None
        self._menu_resolution_duration_ms = None
        self._menu_entries_total = None
        self._public_category_conflict_total = None
        self._store_failure_total = None
        if self.enabled:
            self._initialize_registry()

    def _initialize_registry(self) -> None:
        self._registry = CollectorRegistry()
        self._http_requests_total = Counter(
            "http_requests_total",
            "HTTP requests by route/method/status.",
            ["route", "method", "status"],
            registry=self._registry,
        )
        self._http_request_duration_ms = Histogram(
            "http_request_duration_ms",
            "HTTP request latency in milliseconds.",
            ["route", "method", "status"],
            buckets=(5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000),
            registry=self._registry,
        )
        self._menu_resolution_duration_ms = Histogram(
            "menu_resolution_duration_ms",
            "Menu and link container resolution latency in milliseconds.",
            ["view"],
            buckets=(1, 5, 10, 25, 50, 100, 250, 500, 1000, 2500),
            registry=self._registry,
        )
        self._menu_entries_total = Counter(
            "menu_entries_total",
            "Category groups emitted by menu resolution.",
            ["view"],
            registry=self._registry,
        )
        self._public_category_conflict_total = Counter(
            "public_category_conflict_total",
            "Rejected attempts to create a second public category.",
            registry=self._registry,
        )
        self._store_failure_total = Counter(
            "store_failure_total",
            "Operational store failures surfaced to callers.",
            registry=self._registry,
        )

    def reset(self) -> None:
        if not self.enabled:
            return
        self._initialize_registry()

    def record_http_request(self, *, route: str, method: str, status_code: int, latency_ms: float) -> None:
        if not self.enabled:
            return
        labels = {"route": route, "method": method, "status": str(status_code)}
        self._http_requests_total.labels(**labels).inc()
        self._http_request_duration_ms.labels(**labels).observe(latency_ms)

    def record_menu_resolution(self, *, view: str, entries: int, latency_ms: float) -> None:
        if not self.enabled:
            return
        self._menu_resolution_duration_ms.labels(view=view).observe(latency_ms)
        self._menu_entries_total.labels(view=view).inc(entries)

    def increment_public_category_conflict(self) -> None:
        if not self.enabled:
            return
        self._public_category_conflict_total.inc()

    def increment_store_failure(self) -> None:
        if not self.enabled:
            return
        self._store_failure_total.inc()

    def render(self) -> MetricsSnapshot:
        if not self.enabled:
            return MetricsSnapshot(content=b"metrics_disabled\n", content_type="text/plain")
        return MetricsSnapshot(content=generate_latest(self._registry), content_type=CONTENT_TYPE_LATEST)


metrics = Metrics()
