"""Backend client that reports every failure as an absent result."""

from decimal import Decimal

import aiohttp

from .api import ChargeApi
from .models import ChargerInfo, ChargingStatus, LoginResult, StopChargeResult
from .plugins.base import ClientPlugin
from .storage import TokenStore


class BackendClient:
    """
    Client for the imicCharge backend returning None or False on any failure.

    Operations never raise for backend trouble. A missing token, a network
    failure, a non-success status and an undecodable body all come back as
    None (or False for register and start_charging), after being logged.
    Use ``api`` directly when the cause of a failure matters.
    """

    def __init__(
        self,
        token_store: TokenStore,
        base_url: str | None = None,
        plugins: list[ClientPlugin] | None = None,
        timeout: aiohttp.ClientTimeout | None = None,
    ):
        self.api = ChargeApi(token_store, base_url=base_url, plugins=plugins, timeout=timeout)

    async def __aenter__(self) -> "BackendClient":
        await self.api.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.api.__aexit__(exc_type, exc_val, exc_tb)

    async def login(self, email: str, password: str) -> LoginResult | None:
        return (await self.api.login(email, password)).unwrap_or(None)

    async def register(self, email: str, password: str) -> bool:
        return (await self.api.register(email, password)).unwrap_or(False)

    async def get_account_balance(self) -> Decimal | None:
        return (await self.api.get_account_balance()).unwrap_or(None)

    async def list_chargers(self) -> list[ChargerInfo] | None:
        return (await self.api.list_chargers()).unwrap_or(None)

    async def start_charging(self, charger_id: str) -> bool:
        return (await self.api.start_charging(charger_id)).unwrap_or(False)

    async def stop_charging(self, charger_id: str) -> StopChargeResult | None:
        return (await self.api.stop_charging(charger_id)).unwrap_or(None)

    async def get_charging_status(self, charger_id: str) -> ChargingStatus | None:
        return (await self.api.get_charging_status(charger_id)).unwrap_or(None)

    async def create_checkout_session(self, amount: Decimal) -> str | None:
        return (await self.api.create_checkout_session(amount)).unwrap_or(None)
