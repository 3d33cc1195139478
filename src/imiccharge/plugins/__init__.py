"""Plugin framework for observing ChargeApi requests."""

from .base import ClientPlugin, PluginContext, PluginHook
from .fluentd_audit import FluentdAuditPlugin
from .prometheus_metrics import PrometheusMetricsPlugin

__all__ = [
    "ClientPlugin",
    "FluentdAuditPlugin",
    "PluginContext",
    "PluginHook",
    "PrometheusMetricsPlugin",
]
