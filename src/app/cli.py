"""
Command-line entry point for the order client.

Credentials come from the environment (BFX_API_KEY, BFX_API_SECRET); the
API root and timeout can be overridden by flags.

Usage:
    bfx-orders active --symbol tBTCUSD
    bfx-orders history
    bfx-orders get 123456 --history
    bfx-orders trades tBTCUSD 123456
    bfx-orders cancel 123456
    bfx-orders cancel-many 1 2 3
    bfx-orders cancel-all
"""

import argparse
import dataclasses
import json
import logging
import sys
from typing import Any, Iterable, List, Optional

from ..clients.config import RestConfig
from ..clients.rest_client import RestClient, RestClientError
from ..models.codec import JsonCodec
from ..models.errors import OrderNotFoundError
from ..models.requests import CancelOrderMultiRequest
from ..services.order_service import OrderService

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="bfx-orders",
        description="Query and manage orders through the authenticated REST API",
    )

    parser.add_argument(
        '--api-url',
        type=str,
        default=None,
        help='API root URL (default: BFX_API_URL or https://api.bitfinex.com/v2/)'
    )

    parser.add_argument(
        '--timeout',
        type=float,
        default=None,
        help='Request timeout in seconds (default: BFX_API_TIMEOUT or 15)'
    )

    parser.add_argument(
        '--log-level',
        type=str,
        default='WARNING',
        help='Logging level (default: WARNING)'
    )

    commands = parser.add_subparsers(dest='command', required=True)

    active = commands.add_parser('active', help='List active orders')
    active.add_argument('--symbol', type=str, default='', help='Restrict to one symbol')

    history = commands.add_parser('history', help='List past orders')
    history.add_argument('--symbol', type=str, default='', help='Restrict to one symbol')

    get = commands.add_parser('get', help='Show one order by ID')
    get.add_argument('order_id', type=int)
    get.add_argument('--history', action='store_true', help='Search past orders instead of active ones')

    trades = commands.add_parser('trades', help='List trades generated by an order')
    trades.add_argument('symbol', type=str)
    trades.add_argument('order_id', type=int)

    cancel = commands.add_parser('cancel', help='Cancel one order by ID')
    cancel.add_argument('order_id', type=int)

    cancel_many = commands.add_parser('cancel-many', help='Cancel several orders by ID')
    cancel_many.add_argument('order_ids', type=int, nargs='+')

    commands.add_parser('cancel-all', help='Cancel every open order')

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> RestConfig:
    """Environment settings with command-line overrides applied."""
    config = RestConfig.from_env()
    if args.api_url:
        config.base_url = args.api_url
    if args.timeout is not None:
        config.timeout = args.timeout
    return config


def _to_json(item: Any) -> str:
    if dataclasses.is_dataclass(item):
        item = dataclasses.asdict(item)
    return json.dumps(item, default=str)


def _emit(items: Iterable[Any]) -> None:
    for item in items:
        print(_to_json(item))


def run(service: OrderService, args: argparse.Namespace) -> None:
    """Dispatch one subcommand against the service and print the result."""
    if args.command == 'active':
        _emit(service.list_active(args.symbol))
    elif args.command == 'history':
        _emit(service.list_historical(args.symbol))
    elif args.command == 'get':
        if args.history:
            _emit([service.get_historical_by_id(args.order_id)])
        else:
            _emit([service.get_active_by_id(args.order_id)])
    elif args.command == 'trades':
        _emit(service.list_trades_for_order(args.symbol, args.order_id))
    elif args.command == 'cancel':
        _emit([service.cancel_one_by_id(args.order_id)])
    elif args.command == 'cancel-many':
        _emit([service.cancel_many_by_id(args.order_ids)])
    elif args.command == 'cancel-all':
        _emit([service.cancel_multi(CancelOrderMultiRequest(all_orders=True))])


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    configure_logging(args.log_level)

    try:
        config = build_config(args)
        logger.debug(f"Using {config!r}")

        with RestClient(config) as client:
            run(OrderService(client, JsonCodec()), args)
    except (RestClientError, OrderNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
