"""
Review Store - deterministic-address review records

CLI entry point acting as the execution host: it resolves identities,
signs for the caller, and persists the account ledger between runs.
"""

import argparse
import json
import logging
import sys

from src.models.address import Address, CallerIdentity
from src.models.errors import ReviewError
from src.processor import ReviewProcessor
from src.registry.account_ledger import AccountLedger
from src.registry.allocator import StorageAllocator
import config.settings as settings

logger = logging.getLogger(__name__)


def setup_logging(log_level: str = "INFO", log_file: str = settings.LOG_FILE):
    """Configure logging for the entire application."""
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=handlers
    )


def resolve_identity(value: str) -> Address:
    """A 64-character hex string is used as-is, anything else is a seed phrase."""
    if len(value) == 64:
        try:
            return Address.from_hex(value)
        except ValueError:
            pass
    return Address.from_seed_phrase(value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Review Store - reviews addressed by owner and title",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Give an identity enough balance to pay for storage
  python main.py fund --owner alice

  # Create a review
  python main.py add --owner alice --title Cafe --rating 8 \\
                 --description "Great coffee" --location Downtown

  # Update it (the title only locates the record)
  python main.py update --owner alice --title Cafe --rating 9 \\
                 --description "Still great" --location Downtown

  # Inspect it
  python main.py show --owner alice --title Cafe
        """
    )

    parser.add_argument(
        "--ledger-path",
        default=str(settings.LEDGER_PATH),
        help=f"Ledger JSON file (default: {settings.LEDGER_PATH})"
    )

    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )

    parser.add_argument(
        "--log-file",
        default=settings.LOG_FILE,
        help=f"Log file, empty to disable (default: {settings.LOG_FILE})"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    fund = subparsers.add_parser("fund", help="Credit an identity balance")
    fund.add_argument("--owner", required=True, help="Seed phrase or hex address")
    fund.add_argument(
        "--amount",
        type=int,
        default=settings.DEFAULT_FUNDING,
        help=f"Lamports to credit (default: {settings.DEFAULT_FUNDING})"
    )

    derive = subparsers.add_parser("derive", help="Print the address of (owner, title)")
    derive.add_argument("--owner", required=True, help="Seed phrase or hex address")
    derive.add_argument("--title", required=True, help="Review title")

    for name, help_text in (("add", "Create a review"), ("update", "Update a review")):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--owner", required=True, help="Seed phrase or hex address")
        sub.add_argument("--title", required=True, help="Review title")
        sub.add_argument("--rating", type=int, required=True, help="Rating (1-10)")
        sub.add_argument("--description", default="", help="Review text")
        sub.add_argument("--location", default="", help="Where the reviewed place is")

    show = subparsers.add_parser("show", help="Decode the review at (owner, title)")
    show.add_argument("--owner", required=True, help="Seed phrase or hex address")
    show.add_argument("--title", required=True, help="Review title")

    return parser


def run(args: argparse.Namespace) -> int:
    """Execute one CLI command. Returns the process exit code."""
    ledger = AccountLedger(args.ledger_path)
    processor = ReviewProcessor(Address.from_hex(settings.PROGRAM_ID), ledger)
    owner = resolve_identity(args.owner)

    if args.command == "fund":
        balance = ledger.credit(owner, args.amount)
        ledger.save()
        print(f"{owner}: {balance} lamports")
        return 0

    target = processor.derive_review_address(owner, args.title)

    if args.command == "derive":
        print(target)
        return 0

    if args.command == "show":
        print(json.dumps(processor.read_review(target).to_dict(), indent=2))
        return 0

    caller = CallerIdentity(address=owner, is_signer=True)
    if args.command == "add":
        review = processor.add_review(
            caller,
            target,
            StorageAllocator(ledger),
            args.title,
            args.rating,
            args.description,
            args.location
        )
    else:
        review = processor.update_review(
            caller,
            target,
            args.rating,
            args.description,
            args.location
        )

    ledger.save()
    print(f"Review stored at {target}")
    print(json.dumps(review.to_dict(), indent=2))
    return 0


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    try:
        exit_code = run(args)
    except ReviewError as e:
        logger.error(f"{type(e).__name__} (code {e.code}): {e}")
        print(f"Error: {type(e).__name__}: {e}", file=sys.stderr)
        exit_code = 1
    except ValueError as e:
        logger.error(f"Invalid input: {e}")
        print(f"Error: {e}", file=sys.stderr)
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()


# Design Rationale and Trade-offs:
#
# 1. Why seed phrases as identities?
#    - Readable names on the command line map to fixed 32-byte addresses
#    - Trade-off: Anyone who knows the phrase can act as that identity;
#      the CLI signs for every caller
#
# 2. Why log to stderr and print results to stdout?
#    - `show` and `derive` output can be piped without log lines mixed in
#    - Trade-off: Two streams to capture when debugging
#
# 3. Why save the ledger only after a successful command?
#    - A failed add or update leaves the file as it was
#    - Trade-off: A crash between the operation and the save loses that operation
