#!/usr/bin/env python3

import argparse
from datetime import date, datetime, timezone

from errors import NotFoundError
from logger import get_logger

logger = get_logger()


def _parse_date(value: str) -> date:
    """argparse type for YYYY-MM-DD dates."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}', expected YYYY-MM-DD")


def cmd_list(args, services):
    """List transactions, newest first."""
    listings = services.transactions.list_enriched(
        args.user,
        args.start_date,
        args.end_date,
        type=args.type,
        account_id=args.account,
    )

    if not listings:
        logger.info("No transactions found.")
        return

    for listing in listings:
        t = listing.transaction
        sign = "+" if t.type == "income" else "-"
        logger.info(
            f"{t.date.date().isoformat()}  {sign}{t.amount:>12}  "
            f"{listing.category_name:<20} {t.account_id}  {t.id}"
            + (f"  {t.comment}" if t.comment else "")
        )

    logger.info(f"\nTotal transactions: {len(listings)}")


def cmd_add(args, services):
    """Record a new transaction."""
    transaction = services.transactions.create(
        args.user,
        args.type,
        args.amount,
        args.category_id,
        args.account_id,
        args.date or datetime.now(timezone.utc),
        args.comment,
    )
    logger.info(f"✓ Transaction created with ID: {transaction.id}")


def cmd_update(args, services):
    """Change fields of a transaction; unspecified fields keep their value."""
    current = services.transactions.find(args.user, args.transaction_id)
    if current is None:
        raise NotFoundError(f"Transaction with ID {args.transaction_id} not found")

    transaction = services.transactions.update(
        args.user,
        current.id,
        args.type or current.type,
        args.amount or current.amount,
        args.category_id or current.category_id,
        args.account_id or current.account_id,
        args.date or current.date,
        args.comment if args.comment is not None else current.comment,
    )
    logger.info(f"✓ Transaction {transaction.id} updated")


def cmd_delete(args, services):
    """Delete a transaction."""
    services.transactions.delete(args.user, args.transaction_id)
    logger.info(f"✓ Transaction {args.transaction_id} deleted")


def setup_parser(subparsers):
    """Setup transactions subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "transactions",
        help="Record and manage transactions",
        description="Record, edit, delete and list transactions",
    )

    transactions_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available transaction commands",
        dest="subcommand",
        required=True,
    )

    # transactions list
    list_parser = transactions_subparsers.add_parser(
        "list",
        help="List transactions",
        epilog="""
Examples:
  python -m cli transactions list --start-date 2025-10-01 --end-date 2025-10-31
  python -m cli transactions list --type expense --account acc_0f1e2d3c4b5a
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    list_parser.add_argument("--start-date", type=_parse_date)
    list_parser.add_argument("--end-date", type=_parse_date)
    list_parser.add_argument("--type", choices=["income", "expense"])
    list_parser.add_argument("--account", help="Account ID to filter by")
    list_parser.set_defaults(func=cmd_list)

    # transactions add
    add_parser = transactions_subparsers.add_parser("add", help="Record a transaction")
    add_parser.add_argument("type", choices=["income", "expense"])
    add_parser.add_argument("amount", help="Positive amount (e.g., 12.50)")
    add_parser.add_argument("category_id", help="Category ID of the same type")
    add_parser.add_argument("account_id", help="Account ID")
    add_parser.add_argument("--date", type=_parse_date, help="YYYY-MM-DD (default: now)")
    add_parser.add_argument("--comment", default="")
    add_parser.set_defaults(func=cmd_add)

    # transactions update
    update_parser = transactions_subparsers.add_parser(
        "update", help="Edit a transaction"
    )
    update_parser.add_argument("transaction_id")
    update_parser.add_argument("--type", choices=["income", "expense"])
    update_parser.add_argument("--amount")
    update_parser.add_argument("--category-id")
    update_parser.add_argument("--account-id")
    update_parser.add_argument("--date", type=_parse_date)
    update_parser.add_argument("--comment")
    update_parser.set_defaults(func=cmd_update)

    # transactions delete
    delete_parser = transactions_subparsers.add_parser(
        "delete", help="Delete a transaction"
    )
    delete_parser.add_argument("transaction_id")
    delete_parser.set_defaults(func=cmd_delete)
