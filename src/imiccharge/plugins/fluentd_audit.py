"""Plugin for structured audit logging to Fluentd."""

import asyncio
from typing import Any

from fluent import sender

from .base import ClientPlugin, PluginContext, PluginHook


class FluentdAuditPlugin(ClientPlugin):
    """
    Sends a structured audit record of every backend API operation to Fluentd.

    One event is emitted per operation outcome, tagged ``<prefix>.api``.
    Request bodies and credentials are never included.

    Example log entry:
    {
        "type": "api",
        "op": "stop_charging",
        "method": "POST",
        "path": "api/Charge/stop",
        "status": 200,
        "outcome": "ok",
        "params": {"charger_id": "EH123456"}
    }
    """

    def __init__(
        self,
        tag_prefix: str = "imiccharge",
        host: str = "localhost",
        port: int = 24224,
        timeout: float = 3.0,
        buffer_overflow_handler: Any = None,
        nanosecond_precision: bool = False,
    ):
        """
        Initialize the Fluentd audit plugin.

        Args:
            tag_prefix: Prefix for Fluentd tags (default: "imiccharge")
            host: Fluentd server hostname (default: "localhost")
            port: Fluentd server port (default: 24224)
            timeout: Connection timeout in seconds (default: 3.0)
            buffer_overflow_handler: Handler for buffer overflow (default: None)
            nanosecond_precision: Use nanosecond precision timestamps (default: False)
        """
        super().__init__()
        self.tag_prefix = tag_prefix
        self.host = host
        self.port = port
        self.timeout = timeout
        self.buffer_overflow_handler = buffer_overflow_handler
        self.nanosecond_precision = nanosecond_precision
        self.sender = None

    def hooks(self) -> dict[PluginHook, str]:
        return {
            PluginHook.AFTER_RESPONSE: "log_outcome",
            PluginHook.ON_FAILURE: "log_outcome",
        }

    async def initialize(self, api):
        """Initialize Fluentd sender when the api context is entered."""
        try:
            self.sender = sender.FluentSender(
                self.tag_prefix,
                host=self.host,
                port=self.port,
                timeout=self.timeout,
                buffer_overflow_handler=self.buffer_overflow_handler,
                nanosecond_precision=self.nanosecond_precision,
            )
        except Exception as e:
            self.logger.error(f"Failed to initialize Fluentd sender: {e}", exc_info=True)
            self.sender = None

    async def cleanup(self, api):
        """Close Fluentd sender when the api context is left."""
        if self.sender:
            try:
                await asyncio.to_thread(self.sender.close)
            except Exception as e:
                self.logger.error(f"Error closing Fluentd sender: {e}", exc_info=True)
            self.sender = None

    async def _send_event(self, tag: str, data: dict):
        """Send an event to Fluentd without blocking the event loop."""
        if not self.sender:
            return

        try:
            await asyncio.to_thread(self.sender.emit, tag, data)
        except Exception as e:
            self.logger.error(f"Failed to send event to Fluentd (tag={tag}): {e}")

    def _event_data(self, context: PluginContext) -> dict:
        kind = context.result.kind if context.result else None
        data = {
            "type": "api",
            "op": context.operation,
            "method": context.method,
            "path": context.path,
            "outcome": kind.value if kind is not None else "ok",
        }
        if context.status is not None:
            data["status"] = context.status
        if context.params:
            data["params"] = context.params
        if context.result is not None and context.result.error is not None:
            data["error"] = str(context.result.error)
        return data

    async def log_outcome(self, context: PluginContext):
        """Log the outcome of one operation."""
        await self._send_event("api", self._event_data(context))
