"""
Monitoring Module
Health Checks und Prometheus Metriken
"""

from .health_checks import HealthChecker
from .prometheus_metrics import PrometheusMetrics

__all__ = ["HealthChecker", "PrometheusMetrics"]
