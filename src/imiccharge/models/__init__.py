from .domain import (
    ChargerInfo,
    ChargingStatus,
    LoginResult,
    StopChargeResult,
    decode_decimal,
    decode_string,
)

__all__ = [
    "ChargerInfo",
    "ChargingStatus",
    "LoginResult",
    "StopChargeResult",
    "decode_decimal",
    "decode_string",
]
