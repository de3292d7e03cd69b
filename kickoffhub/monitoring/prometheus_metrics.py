"""
Prometheus Metrics für KickOffHub

Metriken für HTTP-Requests, Import-Jobs, geladene Module und Systemressourcen.
"""

import logging
from typing import Optional

import psutil
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    Info,
    generate_latest,
)

from ..core.config import Settings

CONTENT_TYPE = CONTENT_TYPE_LATEST


class PrometheusMetrics:
    """Prometheus Metriken für API und Import-Worker"""

    def __init__(self, settings: Settings, registry: Optional[CollectorRegistry] = None):
        self.settings = settings
        self.logger = logging.getLogger("prometheus_metrics")

        # eigene Registry, damit mehrere Instanzen (z.B. in Tests) nicht kollidieren
        self.registry = registry or CollectorRegistry()

        # API Metriken
        self.api_requests_total = Counter(
            "api_requests_total",
            "Total number of API requests",
            ["method", "endpoint", "status"],
            registry=self.registry,
        )

        self.api_request_duration = Histogram(
            "api_request_duration_seconds",
            "API request duration in seconds",
            ["method", "endpoint"],
            registry=self.registry,
        )

        # Import Jobs
        self.import_jobs_total = Counter(
            "import_jobs_total",
            "Total number of import jobs",
            ["job_name", "mode", "status"],
            registry=self.registry,
        )

        self.import_job_duration = Histogram(
            "import_job_duration_seconds",
            "Import job duration in seconds",
            ["job_name"],
            registry=self.registry,
        )

        self.teams_imported_total = Counter(
            "teams_imported_total",
            "Total number of teams upserted by imports",
            registry=self.registry,
        )

        # Module
        self.modules_loaded = Gauge(
            "modules_loaded", "Number of feature modules loaded at startup", registry=self.registry
        )

        # System Metriken
        self.system_cpu_usage = Gauge(
            "system_cpu_usage_percent", "System CPU usage percentage", registry=self.registry
        )

        self.system_memory_usage = Gauge(
            "system_memory_usage_bytes", "System memory usage in bytes", registry=self.registry
        )

        # Application Info
        self.app_info = Info(
            "kickoffhub",
            "KickOffHub application info",
            registry=self.registry,
        )
        self.app_info.info({"version": "1.0.0", "environment": self.settings.environment})

    def record_api_request(self, method: str, endpoint: str, status: str, duration: float):
        """Zeichnet API Request auf"""
        self.api_requests_total.labels(method=method, endpoint=endpoint, status=status).inc()
        self.api_request_duration.labels(method=method, endpoint=endpoint).observe(duration)

    def record_import(
        self, job_name: str, mode: str, status: str, duration: float, teams: int = 0
    ):
        """Zeichnet einen Import auf (mode: sync | queued | worker)"""
        self.import_jobs_total.labels(job_name=job_name, mode=mode, status=status).inc()
        self.import_job_duration.labels(job_name=job_name).observe(duration)
        if teams > 0:
            self.teams_imported_total.inc(teams)

    def set_modules_loaded(self, count: int):
        self.modules_loaded.set(count)

    def update_system_metrics(self):
        """Aktualisiert System-Metriken"""
        try:
            self.system_cpu_usage.set(psutil.cpu_percent())
            self.system_memory_usage.set(psutil.virtual_memory().used)
        except Exception as e:
            self.logger.warning(f"Failed to update system metrics: {e}")

    def export_metrics(self) -> str:
        """Exportiert Metriken im Prometheus Format"""
        self.update_system_metrics()
        try:
            return generate_latest(self.registry).decode("utf-8")
        except Exception as e:
            self.logger.error(f"Failed to export metrics: {e}")
            return f"# Error exporting metrics: {e}\n"

