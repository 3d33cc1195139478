"""Domain models returned by the imicCharge backend."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from ..errors import DecodeError


def _fields(payload: Any, entity: str) -> dict[str, Any]:
    """Index a JSON object by lower-cased property name."""
    if not isinstance(payload, dict):
        raise DecodeError(f"Expected a JSON object for {entity}, got {type(payload).__name__}")
    return {str(key).lower(): value for key, value in payload.items()}


def decode_decimal(value: Any, name: str) -> Decimal:
    """Convert a JSON number to Decimal without passing through binary floats."""
    if isinstance(value, bool) or value is None:
        raise DecodeError(f"Field '{name}' is not a number: {value!r}")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(repr(value))
    raise DecodeError(f"Field '{name}' is not a number: {value!r}")


def decode_float(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float | Decimal):
        raise DecodeError(f"Field '{name}' is not a number: {value!r}")
    return float(value)


def decode_string(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise DecodeError(f"Field '{name}' is not a string: {value!r}")
    return value


def _optional_string(fields: dict[str, Any], name: str) -> str | None:
    value = fields.get(name.lower())
    if value is None:
        return None
    return decode_string(value, name)


def _decimal_or_zero(fields: dict[str, Any], name: str) -> Decimal:
    # Missing means zero; an explicit null is not a number
    if name.lower() not in fields:
        return Decimal("0")
    return decode_decimal(fields[name.lower()], name)


def _float_or_zero(fields: dict[str, Any], name: str) -> float:
    if name.lower() not in fields:
        return 0.0
    return decode_float(fields[name.lower()], name)


@dataclass(frozen=True)
class LoginResult:
    """Tokens issued by a successful login."""

    token_type: str | None = None
    access_token: str | None = None
    expires_in: int = 0
    refresh_token: str | None = None

    @classmethod
    def from_json(cls, payload: Any) -> "LoginResult":
        fields = _fields(payload, "LoginResult")
        expires_in = fields.get("expiresin", 0)
        if isinstance(expires_in, bool) or not isinstance(expires_in, int):
            raise DecodeError(f"Field 'expiresIn' is not an integer: {expires_in!r}")
        return cls(
            token_type=_optional_string(fields, "tokenType"),
            access_token=_optional_string(fields, "accessToken"),
            expires_in=expires_in,
            refresh_token=_optional_string(fields, "refreshToken"),
        )


@dataclass(frozen=True)
class StopChargeResult:
    """Outcome of stopping a charging session."""

    message: str | None = None
    new_balance: Decimal = Decimal("0")

    @classmethod
    def from_json(cls, payload: Any) -> "StopChargeResult":
        fields = _fields(payload, "StopChargeResult")
        return cls(
            message=_optional_string(fields, "message"),
            new_balance=_decimal_or_zero(fields, "newBalance"),
        )


@dataclass(frozen=True)
class ChargingStatus:
    """Live readings for an active charging session."""

    kwh: float = 0.0
    remaining_balance: Decimal = Decimal("0")
    power_usage: float = 0.0

    @classmethod
    def from_json(cls, payload: Any) -> "ChargingStatus":
        fields = _fields(payload, "ChargingStatus")
        return cls(
            kwh=_float_or_zero(fields, "kwh"),
            remaining_balance=_decimal_or_zero(fields, "remainingBalance"),
            power_usage=_float_or_zero(fields, "powerUsage"),
        )


@dataclass(frozen=True)
class ChargerInfo:
    """A charger owned by the account."""

    id: str | None = None
    name: str | None = None

    @classmethod
    def from_json(cls, payload: Any) -> "ChargerInfo":
        fields = _fields(payload, "ChargerInfo")
        return cls(
            id=_optional_string(fields, "id"),
            name=_optional_string(fields, "name"),
        )

    @classmethod
    def list_from_json(cls, payload: Any) -> list["ChargerInfo"]:
        if not isinstance(payload, list):
            raise DecodeError(
                f"Expected a JSON array of chargers, got {type(payload).__name__}"
            )
        return [cls.from_json(item) for item in payload]
