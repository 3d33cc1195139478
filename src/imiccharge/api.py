"""Typed-outcome client for the imicCharge backend."""

import asyncio
import logging
import time
from collections.abc import Callable
from decimal import Decimal
from functools import partial
from typing import Any, TypeVar
from urllib.parse import quote

import aiohttp
import simplejson
from yarl import URL

from . import config
from .errors import ApiError, DecodeError, HttpStatusError, NoTokenError, TransportError
from .logging_utils import log_api_request, log_error
from .models import (
    ChargerInfo,
    ChargingStatus,
    LoginResult,
    StopChargeResult,
    decode_decimal,
    decode_string,
)
from .plugins.base import ClientPlugin, PluginContext, PluginHook
from .results import ApiResult
from .storage import ACCESS_TOKEN_KEY, TokenStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

LOGIN_PATH = "login"
REGISTER_PATH = "register"
ACCOUNT_BALANCE_PATH = "api/Payment/get-account-balance"
CHECKOUT_SESSION_PATH = "api/Payment/create-checkout-session"
CHARGERS_PATH = "api/Charge/chargers"
START_CHARGING_PATH = "api/Charge/start"
STOP_CHARGING_PATH = "api/Charge/stop"
CHARGING_STATUS_PATH = "api/Charge/status/{charger_id}"


json_dumps = partial(simplejson.dumps, use_decimal=True)
json_loads = partial(simplejson.loads, use_decimal=True)


def _account_balance(payload: Any) -> Decimal:
    if not isinstance(payload, dict) or "accountBalance" not in payload:
        raise DecodeError("Response has no 'accountBalance' field")
    return decode_decimal(payload["accountBalance"], "accountBalance")


def _checkout_url(payload: Any) -> str:
    if not isinstance(payload, dict) or "url" not in payload:
        raise DecodeError("Response has no 'url' field")
    return decode_string(payload["url"], "url")


class ChargeApi:
    """
    Client for the imicCharge REST backend that reports why a call failed.

    Every operation returns an ApiResult. Failures are never raised: they are
    logged and carried in ``ApiResult.error`` with an ErrorKind of no_token,
    transport, http_status or decode.

    Each call opens its own aiohttp session and closes it before returning;
    no connection is shared between calls.

    Supports a plugin system for observing the request lifecycle. Use the
    api as an async context manager to run plugin initialize/cleanup.
    """

    def __init__(
        self,
        token_store: TokenStore,
        base_url: str | None = None,
        plugins: list[ClientPlugin] | None = None,
        timeout: aiohttp.ClientTimeout | None = None,
    ):
        self.base_url = URL(base_url or config.BASE_URL)
        self.token_store = token_store
        if timeout is None and config.REQUEST_TIMEOUT:
            timeout = aiohttp.ClientTimeout(total=config.REQUEST_TIMEOUT)
        self.timeout = timeout

        self.plugins: list[ClientPlugin] = plugins or []
        self._plugin_hooks: dict[PluginHook, list[tuple[ClientPlugin, str]]] = {}
        self._register_plugins()

    async def __aenter__(self) -> "ChargeApi":
        for plugin in self.plugins:
            try:
                await plugin.initialize(self)
            except Exception as e:
                log_error(
                    logger,
                    "plugin_initialization_error",
                    f"Failed to initialize plugin {plugin.__class__.__name__}: {e}",
                    plugin=plugin.__class__.__name__,
                    exc_info=e,
                )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        for plugin in self.plugins:
            try:
                await plugin.cleanup(self)
            except Exception as e:
                log_error(
                    logger,
                    "plugin_cleanup_error",
                    f"Failed to clean up plugin {plugin.__class__.__name__}: {e}",
                    plugin=plugin.__class__.__name__,
                    exc_info=e,
                )

    # Operations

    async def login(self, email: str, password: str) -> ApiResult[LoginResult]:
        """Exchange credentials for tokens. The tokens are not stored."""
        return await self._call(
            "login",
            "POST",
            LOGIN_PATH,
            LoginResult.from_json,
            body={"email": email, "password": password},
            auth=False,
        )

    async def register(self, email: str, password: str) -> ApiResult[bool]:
        """Create an account. Success is signalled by the status code only."""
        return await self._call(
            "register",
            "POST",
            REGISTER_PATH,
            None,
            body={"email": email, "password": password},
            auth=False,
        )

    async def get_account_balance(self) -> ApiResult[Decimal]:
        return await self._call(
            "get_account_balance", "GET", ACCOUNT_BALANCE_PATH, _account_balance
        )

    async def list_chargers(self) -> ApiResult[list[ChargerInfo]]:
        return await self._call(
            "list_chargers", "GET", CHARGERS_PATH, ChargerInfo.list_from_json
        )

    async def start_charging(self, charger_id: str) -> ApiResult[bool]:
        return await self._call(
            "start_charging",
            "POST",
            START_CHARGING_PATH,
            None,
            body={"chargerId": charger_id},
            params={"charger_id": charger_id},
        )

    async def stop_charging(self, charger_id: str) -> ApiResult[StopChargeResult]:
        return await self._call(
            "stop_charging",
            "POST",
            STOP_CHARGING_PATH,
            StopChargeResult.from_json,
            body={"chargerId": charger_id},
            params={"charger_id": charger_id},
        )

    async def get_charging_status(self, charger_id: str) -> ApiResult[ChargingStatus]:
        return await self._call(
            "get_charging_status",
            "GET",
            CHARGING_STATUS_PATH.format(charger_id=quote(charger_id, safe="")),
            ChargingStatus.from_json,
            params={"charger_id": charger_id},
        )

    async def create_checkout_session(self, amount: Decimal) -> ApiResult[str]:
        """Ask the backend for a payment checkout URL topping up ``amount``."""
        if not isinstance(amount, Decimal):
            amount = Decimal(str(amount))
        return await self._call(
            "create_checkout_session",
            "POST",
            CHECKOUT_SESSION_PATH,
            _checkout_url,
            body={"amount": amount},
            params={"amount": str(amount)},
        )

    # Request plumbing

    def url_for(self, path: str) -> URL:
        """Resolve a backend path against the base URL."""
        return self.base_url.join(URL(path, encoded=True))

    def _session_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"json_serialize": json_dumps}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        return kwargs

    async def _call(
        self,
        operation: str,
        method: str,
        path: str,
        decode: Callable[[Any], T] | None,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        auth: bool = True,
    ) -> ApiResult[T]:
        """
        Run one operation end to end and fold any failure into the result.

        A ``decode`` of None means only the status code matters and the
        value is True on success.
        """
        context = PluginContext(
            api=self,
            operation=operation,
            method=method,
            path=path,
            params=params or {},
        )

        try:
            headers = {}
            if auth:
                token = await self.token_store.get(ACCESS_TOKEN_KEY)
                if not token:
                    raise NoTokenError(ACCESS_TOKEN_KEY)
                headers["Authorization"] = f"Bearer {token}"

            await self._execute_plugin_hooks(PluginHook.BEFORE_REQUEST, context)

            raw = await self._send(context, headers, body, read_body=decode is not None)
            if decode is None:
                value = True
            else:
                try:
                    payload = json_loads(raw)
                except (ValueError, RecursionError) as e:
                    raise DecodeError(f"Invalid JSON from {path}: {e}") from e
                value = decode(payload)

        except ApiError as e:
            log_error(
                logger,
                e.kind.value,
                f"{operation} failed: {e}",
                operation=operation,
                status=context.status,
            )
            result: ApiResult[T] = ApiResult.failure(e)
            context.result = result
            await self._execute_plugin_hooks(PluginHook.ON_FAILURE, context)
            return result

        result = ApiResult.success(value)
        context.result = result
        await self._execute_plugin_hooks(PluginHook.AFTER_RESPONSE, context)
        return result

    async def _send(
        self,
        context: PluginContext,
        headers: dict[str, str],
        body: dict[str, Any] | None,
        read_body: bool,
    ) -> bytes:
        """Send the request on a session scoped to this call."""
        started = time.perf_counter()
        try:
            async with aiohttp.ClientSession(**self._session_kwargs()) as session:
                async with session.request(
                    context.method,
                    self.url_for(context.path),
                    headers=headers,
                    json=body,
                ) as response:
                    context.status = response.status
                    log_api_request(
                        logger,
                        context.operation,
                        context.method,
                        context.path,
                        status=response.status,
                        duration=time.perf_counter() - started,
                    )
                    if not 200 <= response.status < 300:
                        raise HttpStatusError(response.status, response.reason)
                    return await response.read() if read_body else b""
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(str(e) or e.__class__.__name__) from e

    def _register_plugins(self):
        """Register all plugins and build hook mapping."""
        for plugin in self.plugins:
            try:
                hooks = plugin.hooks()
                for hook, method_name in hooks.items():
                    if hook not in self._plugin_hooks:
                        self._plugin_hooks[hook] = []
                    self._plugin_hooks[hook].append((plugin, method_name))
            except Exception as e:
                log_error(
                    logger,
                    "plugin_registration_error",
                    f"Failed to register plugin {plugin.__class__.__name__}: {e}",
                    plugin=plugin.__class__.__name__,
                    exc_info=e,
                )

    async def _execute_plugin_hooks(self, hook: PluginHook, context: PluginContext):
        """Execute all registered plugin hooks for a given lifecycle point."""
        for plugin, method_name in self._plugin_hooks.get(hook, []):
            try:
                method = getattr(plugin, method_name)
                await method(context)
            except Exception as e:
                log_error(
                    logger,
                    "plugin_execution_error",
                    f"Error executing {plugin.__class__.__name__}.{method_name} for hook {hook.value}: {e}",
                    operation=context.operation,
                    plugin=plugin.__class__.__name__,
                    hook=hook.value,
                    method=method_name,
                    exc_info=e,
                )
