"""Base plugin infrastructure for ChargeApi."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..api import ChargeApi
    from ..results import ApiResult

logger = logging.getLogger(__name__)


class PluginHook(str, Enum):
    """
    Available plugin hooks in the request lifecycle.

    - BEFORE_REQUEST: the request is about to be sent (token already found)
    - AFTER_RESPONSE: the response was decoded into a result
    - ON_FAILURE: the operation failed, whatever the error kind
    """

    BEFORE_REQUEST = "before_request"
    AFTER_RESPONSE = "after_response"
    ON_FAILURE = "on_failure"


@dataclass
class PluginContext:
    """
    Context provided to plugin hooks.

    Contains:
    - api: Reference to the ChargeApi instance
    - operation: Client operation name (e.g., "stop_charging")
    - method / path: The HTTP request line, relative to the base URL
    - params: Non-secret operation arguments (e.g., charger_id)
    - status: HTTP status code, once a response arrived
    - result: The operation outcome (AFTER_RESPONSE and ON_FAILURE only)
    """

    api: "ChargeApi"
    operation: str
    method: str
    path: str
    params: dict[str, Any]
    status: int | None = None
    result: "ApiResult | None" = None


class ClientPlugin(ABC):
    """
    Base class for ChargeApi plugins.

    Plugins can register hooks to execute custom logic at various points
    in an API call.

    To create a plugin:
    1. Subclass ClientPlugin
    2. Implement the `hooks()` method to register your hook handlers
    3. Implement async methods for each hook you want to handle

    Example:
        class MyPlugin(ClientPlugin):
            def hooks(self) -> dict[PluginHook, str]:
                return {
                    PluginHook.ON_FAILURE: "on_failure"
                }

            async def on_failure(self, context: PluginContext):
                logger.warning(f"{context.operation} failed: {context.result.kind}")
    """

    def __init__(self):
        """Initialize the plugin."""
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @abstractmethod
    def hooks(self) -> dict[PluginHook, str]:
        """
        Return a mapping of hooks to handler method names.

        Returns:
            Dictionary mapping PluginHook enum values to method names on this class.
        """

    async def initialize(self, api: "ChargeApi"):
        """
        Called once when the api enters its async context.

        Override this to perform any initialization logic.
        """
        _ = api

    async def cleanup(self, api: "ChargeApi"):
        """
        Called when the api leaves its async context.

        Override this to perform any cleanup logic.
        """
        _ = api
