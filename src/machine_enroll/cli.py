"""Operator console for machine enrollment.

Usage:
    machine-enroll check HOST [USER]
    machine-enroll list
"""

import argparse
import logging
import sys
from typing import Optional

from machine_enroll.config import Settings
from machine_enroll.exceptions import RegistryException
from machine_enroll.interfaces import NoticeSink
from machine_enroll.models import NoticeChoice, NoticeKind
from machine_enroll.Plugins.loader import load_registry
from machine_enroll.validation import NoticeGate, validate

logger = logging.getLogger(__name__)


class ConsoleNoticeSink(NoticeSink):
    """Prints notices; yes/no questions are answered on stdin."""

    def notify(
        self, kind: NoticeKind, title: str, message: str, ask: bool = False
    ) -> Optional[NoticeChoice]:
        print(f"[{kind.value.upper()}] {title}: {message}")
        if not ask:
            return None
        answer = input("Continue? [y/N] ").strip().lower()
        return NoticeChoice.YES if answer in ("y", "yes") else NoticeChoice.NO


def check(settings: Settings, registry, host: str, user: str) -> int:
    """Print the validation verdict for host and user text.

    :return: Exit code (0 = both valid, 1 = invalid)
    """
    if not host.strip():
        print("host: a host name or IPv4 address is required")
        return 1

    result = validate(host, user, registry, local_host_names=settings.local_host_names)
    NoticeGate(ConsoleNoticeSink()).observe(result, host)

    print(f"host: {host!r} -> {'valid' if result.host_valid else 'INVALID'} "
          f"({result.host_reason.value})")
    if user:
        print(f"user: {user!r} -> {'valid' if result.user_valid else 'INVALID'} "
              f"({result.user_reason.value})")

    return 0 if result.host_valid and result.user_valid else 1


def list_machines(registry) -> int:
    entries = registry.entries()
    if not entries:
        print("No machines registered")
        return 0

    for entry in entries:
        print(
            f"  - {entry.host} (user: {entry.user}, auto test every "
            f"{entry.auto_test_interval_value} {entry.auto_test_interval_unit.value})"
        )
    print(f"\nTotal: {len(entries)} machines")
    return 0


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        description="Validate and list remote machines registered for monitoring"
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    check_parser = subparsers.add_parser(
        "check", help="Check host and logon name text the way the enrollment form does"
    )
    check_parser.add_argument("host", help="Host name or IPv4 address")
    check_parser.add_argument(
        "user", nargs="?", default="", help="DOMAIN\\user or user@domain (optional)"
    )

    subparsers.add_parser("list", help="List registered machines")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    settings = Settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    try:
        registry = load_registry(settings)
        registry.validate()
    except (ValueError, RegistryException) as e:
        logger.error(f"Cannot open machine registry: {e}")
        sys.exit(2)

    if args.command == "check":
        sys.exit(check(settings, registry, args.host, args.user))
    elif args.command == "list":
        sys.exit(list_machines(registry))


if __name__ == "__main__":
    main()
