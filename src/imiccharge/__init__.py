"""
imiccharge - client for the imicCharge EV charging backend

An asyncio client built on aiohttp that logs in, reads account balances,
starts and stops charging sessions and creates payment checkout sessions.
"""

__version__ = "0.1.0"

from .api import ChargeApi
from .client import BackendClient
from .errors import ApiError, ErrorKind
from .models import ChargerInfo, ChargingStatus, LoginResult, StopChargeResult
from .results import ApiResult
from .storage import MemoryTokenStore, SQLiteTokenStore, TokenStore

__all__ = [
    "ApiError",
    "ApiResult",
    "BackendClient",
    "ChargeApi",
    "ChargerInfo",
    "ChargingStatus",
    "ErrorKind",
    "LoginResult",
    "MemoryTokenStore",
    "SQLiteTokenStore",
    "StopChargeResult",
    "TokenStore",
]
