from __future__ import annotations

from datetime import datetime, timezone

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)


class Metrics:
    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry(auto_describe=True)
        self.parse_runs_total = Counter(
            "discon_parse_runs_total",
            "Total parse invocations by status and code",
            labelnames=("status", "code"),
            registry=self.registry,
        )
        self.parse_duration_seconds = Histogram(
            "discon_parse_duration_seconds",
            "Duration of parse invocations in seconds",
            registry=self.registry,
        )
        self.fetch_runs_total = Counter(
            "discon_fetch_runs_total",
            "Total page fetches by status",
            labelnames=("status",),
            registry=self.registry,
        )
        self.last_success_epoch = Gauge(
            "discon_last_success_epoch_seconds",
            "Unix timestamp of the last successful parse per region",
            labelnames=("region",),
            registry=self.registry,
        )

    def mark_parse(self, status: str, code: int) -> None:
        self.parse_runs_total.labels(status=status, code=str(code)).inc()

    def mark_fetch(self, status: str) -> None:
        self.fetch_runs_total.labels(status=status).inc()

    def mark_parse_success(self, region_id: str, parsed_at_utc: datetime) -> None:
        timestamp = parsed_at_utc.astimezone(timezone.utc).timestamp()
        self.last_success_epoch.labels(region=region_id).set(timestamp)

    def render(self) -> tuple[bytes, str]:
        return generate_latest(self.registry), CONTENT_TYPE_LATEST
