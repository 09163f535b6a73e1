"""Command line access to the shared gateway.

Usage:
    python -m dbgateway ping
    python -m dbgateway query "SELECT * FROM users WHERE name = %s" -p "O'Brien"
    python -m dbgateway execute "DELETE FROM sessions WHERE id = %s" -p 42
"""

import argparse
import json
import logging
import sys
from typing import Optional, Sequence

from .errors import GatewayError
from .gateway import get_gateway, reset_gateway
from .log_config import level_from_env, setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dbgateway", description="Run statements against the configured MySQL database")
    parser.add_argument("--log-dir", default=None, help="Also write logs to this directory")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("ping", help="Check connectivity")

    for name, help_text in (("query", "Fetch rows as JSON lines"), ("execute", "Print affected row count")):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("sql", help="SQL with %%s placeholders")
        cmd.add_argument("-p", "--param", dest="params", action="append", default=[],
                         help="Positional parameter value (repeatable)")

    return parser


def run(args: argparse.Namespace) -> int:
    gateway = get_gateway()

    if args.command == "ping":
        gateway.ping()
        print(f"OK {gateway.config.describe()}")
    elif args.command == "query":
        for row in gateway.fetch_all(args.sql, args.params or None):
            print(json.dumps(row, default=str))
    elif args.command == "execute":
        print(gateway.execute(args.sql, args.params or None))

    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=level_from_env(), log_dir=args.log_dir)

    try:
        status = run(args)
    except GatewayError as e:
        logger.error("%s failed: %s", args.command, e)
        status = 1
    finally:
        reset_gateway()

    if status:
        sys.exit(status)
    return status


if __name__ == "__main__":
    main()
