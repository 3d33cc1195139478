"""Plugin for Prometheus metrics instrumentation."""

import time

from prometheus_client import Counter, Gauge, Histogram

from .base import ClientPlugin, PluginContext, PluginHook


class PrometheusMetricsPlugin(ClientPlugin):
    """
    Exposes Prometheus metrics about backend API usage.

    This plugin tracks:
    - Request counts per operation and outcome (ok or error kind)
    - Request latency per operation
    - Last seen account balance
    - Live charging readings per charger

    Metrics are exposed via the standard prometheus_client registry.
    Use prometheus_client.start_http_server(), generate_latest() or
    write_to_textfile() to publish them.
    """

    # Class-level metrics (shared across all plugin instances)

    imiccharge_requests_total = Counter(
        "imiccharge_requests_total",
        "Total number of backend API operations",
        labelnames=["operation", "outcome"],
    )

    imiccharge_request_seconds = Histogram(
        "imiccharge_request_seconds",
        "Backend API round-trip duration in seconds",
        labelnames=["operation"],
    )

    imiccharge_last_success_ts = Gauge(
        "imiccharge_last_success_ts",
        "Unix timestamp of the last successful operation",
        labelnames=["operation"],
    )

    imiccharge_account_balance = Gauge(
        "imiccharge_account_balance",
        "Account balance reported by the last balance or stop request",
    )

    imiccharge_charging_power = Gauge(
        "imiccharge_charging_power",
        "Instantaneous power usage reported for a charger",
        labelnames=["charger_id"],
    )

    imiccharge_charging_energy_kwh = Gauge(
        "imiccharge_charging_energy_kwh",
        "Energy delivered in the current session (kWh)",
        labelnames=["charger_id"],
    )

    def __init__(self):
        """Initialize the Prometheus metrics plugin."""
        super().__init__()
        # Request start times, keyed by context identity
        self._request_start_times: dict[int, float] = {}

    def hooks(self) -> dict[PluginHook, str]:
        return {
            PluginHook.BEFORE_REQUEST: "before_request",
            PluginHook.AFTER_RESPONSE: "after_response",
            PluginHook.ON_FAILURE: "on_failure",
        }

    def _observe_duration(self, context: PluginContext):
        started = self._request_start_times.pop(id(context), None)
        if started is not None:
            self.imiccharge_request_seconds.labels(operation=context.operation).observe(
                time.time() - started
            )

    async def before_request(self, context: PluginContext):
        """Record request start time for latency tracking."""
        self._request_start_times[id(context)] = time.time()

    async def after_response(self, context: PluginContext):
        """Count the success and record what the response tells us."""
        self._observe_duration(context)
        self.imiccharge_requests_total.labels(operation=context.operation, outcome="ok").inc()
        self.imiccharge_last_success_ts.labels(operation=context.operation).set(time.time())

        value = context.result.value if context.result else None
        if context.operation == "get_account_balance" and value is not None:
            self.imiccharge_account_balance.set(float(value))
        elif context.operation == "stop_charging" and value is not None:
            self.imiccharge_account_balance.set(float(value.new_balance))
            charger_id = context.params.get("charger_id", "")
            self.imiccharge_charging_power.labels(charger_id=charger_id).set(0)
        elif context.operation == "get_charging_status" and value is not None:
            charger_id = context.params.get("charger_id", "")
            self.imiccharge_charging_power.labels(charger_id=charger_id).set(value.power_usage)
            self.imiccharge_charging_energy_kwh.labels(charger_id=charger_id).set(value.kwh)

    async def on_failure(self, context: PluginContext):
        """Count the failure under its error kind."""
        self._observe_duration(context)
        kind = context.result.kind if context.result else None
        outcome = kind.value if kind is not None else "unknown"
        self.imiccharge_requests_total.labels(operation=context.operation, outcome=outcome).inc()
