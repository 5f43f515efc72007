from __future__ import annotations

import argparse
import logging
import sys

from kennel.core.logging import configure_logging
from kennel.core.settings import get_settings
from kennel.migrations import commands
from kennel.schema.migration import Direction
from kennel.schema.registry import latest_version
from kennel.utils.errors import AppError
from kennel.utils.run_id import set_run_id


logger = logging.getLogger("kennel.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kennel-migrate", description="Kennel schema migrations")
    parser.add_argument(
        "--database-url",
        default=None,
        help="Override DATABASE_URL for this run",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("status", help="List migrations and whether each is applied")
    subparsers.add_parser("current", help="Print the applied version")
    subparsers.add_parser("latest", help="Print the newest known version")
    subparsers.add_parser("up-to-date", help="Exit 1 when migrations are pending")

    migrate_parser = subparsers.add_parser("migrate", help="Migrate to a target version")
    migrate_parser.add_argument(
        "target",
        nargs="?",
        default="head",
        help="Version, head/latest, base/first, prev, next, or a relative step like -1",
    )
    migrate_parser.add_argument("--dry-run", action="store_true", help="Print SQL instead of running it")

    execute_parser = subparsers.add_parser("execute", help="Apply or revert a single version")
    execute_parser.add_argument("version")
    direction = execute_parser.add_mutually_exclusive_group(required=True)
    direction.add_argument("--up", dest="direction", action="store_const", const=Direction.UP)
    direction.add_argument("--down", dest="direction", action="store_const", const=Direction.DOWN)
    execute_parser.add_argument("--dry-run", action="store_true", help="Print SQL instead of running it")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(get_settings().log_level)
    set_run_id()

    try:
        if args.command == "status":
            for row in commands.status(args.database_url):
                marker = "applied" if row.applied else "pending"
                print(f"{row.version}  {marker:<8} {row.description}")
        elif args.command == "current":
            print(commands.current(args.database_url) or "base")
        elif args.command == "latest":
            print(latest_version() or "base")
        elif args.command == "up-to-date":
            if not commands.is_up_to_date(args.database_url):
                print("Migrations pending")
                return 1
            print("Up to date")
        elif args.command == "migrate":
            commands.migrate(args.target, database_url=args.database_url, dry_run=args.dry_run)
        elif args.command == "execute":
            commands.execute(
                args.version,
                args.direction,
                database_url=args.database_url,
                dry_run=args.dry_run,
            )
    except AppError as exc:
        logger.error(
            "command_failed",
            extra={"command": args.command, "code": exc.detail.code, "extra": exc.detail.extra},
        )
        print(f"{exc.detail.code}: {exc.detail.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
