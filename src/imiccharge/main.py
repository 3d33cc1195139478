"""Command-line entry point for the imicCharge client."""

import argparse
import asyncio
import logging
import sys
from decimal import Decimal, InvalidOperation

from prometheus_client import REGISTRY, write_to_textfile

from . import config
from .api import ChargeApi
from .logging_utils import JSONFormatter
from .plugins import FluentdAuditPlugin, PrometheusMetricsPlugin
from .results import ApiResult
from .storage import ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, SQLiteTokenStore, TokenStore


def setup_logging(level: str = "WARNING"):
    """Configure JSON logging on stderr, keeping stdout for command output."""
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(JSONFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers = [console_handler]

    # Suppress verbose logging from dependencies
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def parse_amount(value: str) -> Decimal:
    """argparse type for a positive monetary amount."""
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"Invalid amount: {value}") from None
    if not amount.is_finite() or amount <= 0:
        raise argparse.ArgumentTypeError(f"Amount must be a positive number: {value}")
    return amount


def parse_endpoint(parser: argparse.ArgumentParser, endpoint: str) -> tuple[str, int]:
    """Split a host:port endpoint, exiting through the parser on bad input."""
    if ":" not in endpoint:
        parser.error("--fluentd-endpoint must be in host:port format (e.g., localhost:24224)")
    host, port_str = endpoint.rsplit(":", 1)
    if not host:
        parser.error("--fluentd-endpoint host cannot be empty")
    try:
        return host, int(port_str)
    except ValueError:
        parser.error(f"Invalid port in --fluentd-endpoint: {endpoint}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="imiccharge", description="Client for the imicCharge EV charging backend"
    )
    parser.add_argument(
        "--base-url",
        default=config.BASE_URL,
        help=f"Backend base URL (default: {config.BASE_URL})",
    )
    parser.add_argument(
        "--token-db",
        default=config.TOKEN_DB,
        help=f"Path to the SQLite credential store (default: {config.TOKEN_DB})",
    )
    parser.add_argument(
        "--log-level",
        default=config.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help=f"Logging level (default: {config.LOG_LEVEL})",
    )
    parser.add_argument(
        "--fluentd-endpoint",
        default=config.FLUENTD_ENDPOINT,
        help="Fluentd endpoint in host:port format. If provided, enables audit logging.",
    )
    parser.add_argument(
        "--fluentd-tag",
        default=config.FLUENTD_TAG,
        help=f"Tag prefix for Fluentd events (default: {config.FLUENTD_TAG})",
    )
    parser.add_argument(
        "--metrics-textfile",
        default=None,
        help="Write Prometheus metrics to this file when the command finishes",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    login = commands.add_parser("login", help="Log in and store the access token")
    login.add_argument("email")
    login.add_argument("password")

    register = commands.add_parser("register", help="Create a new account")
    register.add_argument("email")
    register.add_argument("password")

    commands.add_parser("logout", help="Forget the stored tokens")
    commands.add_parser("balance", help="Show the account balance")
    commands.add_parser("chargers", help="List chargers on the account")

    for name, help_text in (
        ("start", "Start charging"),
        ("stop", "Stop charging"),
        ("status", "Show live charging status"),
    ):
        command = commands.add_parser(name, help=help_text)
        command.add_argument("charger_id")

    checkout = commands.add_parser("checkout", help="Create a payment link to top up the balance")
    checkout.add_argument("amount", type=parse_amount)

    return parser


def _fail(command: str, result: ApiResult) -> int:
    print(f"{command} failed: {result.kind.value}: {result.error}", file=sys.stderr)
    return 1


async def run_command(args: argparse.Namespace, api: ChargeApi, store: TokenStore) -> int:
    """Execute one parsed command and return the process exit code."""
    command = args.command

    if command == "logout":
        await store.delete(ACCESS_TOKEN_KEY)
        await store.delete(REFRESH_TOKEN_KEY)
        print("Logged out")
        return 0

    if command == "login":
        result = await api.login(args.email, args.password)
        if not result.ok:
            return _fail(command, result)
        tokens = result.value
        if not tokens.access_token:
            print("login failed: backend returned no access token", file=sys.stderr)
            return 1
        await store.set(ACCESS_TOKEN_KEY, tokens.access_token)
        if tokens.refresh_token:
            await store.set(REFRESH_TOKEN_KEY, tokens.refresh_token)
        print(f"Logged in (token expires in {tokens.expires_in}s)")
        return 0

    if command == "register":
        result = await api.register(args.email, args.password)
        if not result.ok:
            return _fail(command, result)
        print("Registered")
        return 0

    if command == "balance":
        result = await api.get_account_balance()
        if not result.ok:
            return _fail(command, result)
        print(result.value)
        return 0

    if command == "chargers":
        result = await api.list_chargers()
        if not result.ok:
            return _fail(command, result)
        if not result.value:
            print("No chargers")
        for charger in result.value:
            print(f"{charger.id}\t{charger.name or ''}")
        return 0

    if command == "start":
        result = await api.start_charging(args.charger_id)
        if not result.ok:
            return _fail(command, result)
        print(f"Charging started on {args.charger_id}")
        return 0

    if command == "stop":
        result = await api.stop_charging(args.charger_id)
        if not result.ok:
            return _fail(command, result)
        stopped = result.value
        print(f"{stopped.message or 'Charging stopped'} (new balance: {stopped.new_balance})")
        return 0

    if command == "status":
        result = await api.get_charging_status(args.charger_id)
        if not result.ok:
            return _fail(command, result)
        status = result.value
        print(f"Energy: {status.kwh} kWh")
        print(f"Power: {status.power_usage}")
        print(f"Remaining balance: {status.remaining_balance}")
        return 0

    if command == "checkout":
        result = await api.create_checkout_session(args.amount)
        if not result.ok:
            return _fail(command, result)
        print(result.value)
        return 0

    raise ValueError(f"Unknown command: {command}")


async def main(argv: list[str] | None = None) -> int:
    """Main application entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    plugins = []
    if args.metrics_textfile:
        plugins.append(PrometheusMetricsPlugin())
    if args.fluentd_endpoint:
        fluentd_host, fluentd_port = parse_endpoint(parser, args.fluentd_endpoint)
        plugins.append(
            FluentdAuditPlugin(
                tag_prefix=args.fluentd_tag,
                host=fluentd_host,
                port=fluentd_port,
            )
        )

    store = SQLiteTokenStore(args.token_db)
    try:
        async with ChargeApi(store, base_url=args.base_url, plugins=plugins) as api:
            return await run_command(args, api, store)
    finally:
        await store.close()
        if args.metrics_textfile:
            write_to_textfile(args.metrics_textfile, REGISTRY)


def run():
    """Entry point for console script."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    run()
