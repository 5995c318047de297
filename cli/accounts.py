#!/usr/bin/env python3

from logger import get_logger

logger = get_logger()


def cmd_list(args, services):
    """List all accounts of the user."""
    accounts = services.accounts.find_all(args.user)

    if not accounts:
        logger.info("No accounts found.")
        return

    logger.info("\nAccounts:")
    logger.info("=" * 80)
    for account in accounts:
        logger.info(f"ID: {account.id}")
        logger.info(f"Name: {account.name}")
        logger.info(f"Initial balance: {account.initial_balance}")
        logger.info(f"Balance: {account.balance}")
        logger.info("-" * 80)

    logger.info(f"\nTotal accounts: {len(accounts)}")


def cmd_create(args, services):
    """Create a new account."""
    account = services.accounts.create(args.user, args.name, args.initial_balance)
    logger.info(f"\n✓ Account created successfully with ID: {account.id}")
    logger.info(f"  Name: {account.name}")
    logger.info(f"  Balance: {account.balance}")


def cmd_update(args, services):
    """Rename an account or correct its balance."""
    account = services.accounts.update(
        args.user,
        args.account_id,
        name=args.name,
        balance_adjustment=args.adjust,
        initial_balance=args.initial_balance,
    )
    logger.info(f"✓ Account {account.id} updated")
    logger.info(f"  Name: {account.name}")
    logger.info(f"  Initial balance: {account.initial_balance}")
    logger.info(f"  Balance: {account.balance}")


def cmd_delete(args, services):
    """Delete an unused account."""
    services.accounts.delete(args.user, args.account_id)
    logger.info(f"✓ Account {args.account_id} deleted")


def cmd_reconcile(args, services):
    """Recompute balances from transaction history."""
    drifts = services.accounts.reconcile(args.user)
    if not drifts:
        logger.info("All balances match their transaction history.")
        return
    for drift in drifts:
        logger.info(
            f"{drift.account_name}: {drift.stored} -> {drift.expected} "
            f"({drift.difference:+})"
        )
    logger.info(f"\nCorrected accounts: {len(drifts)}")


def setup_parser(subparsers):
    """Setup accounts subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "accounts",
        help="Manage accounts",
        description="Create, edit and list accounts",
    )

    accounts_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available account commands",
        dest="subcommand",
        required=True,
    )

    list_parser = accounts_subparsers.add_parser("list", help="List all accounts")
    list_parser.set_defaults(func=cmd_list)

    create_parser = accounts_subparsers.add_parser("create", help="Create an account")
    create_parser.add_argument("name", help="Account name (e.g., Cash)")
    create_parser.add_argument(
        "--initial-balance", default="0", help="Opening balance (default 0)"
    )
    create_parser.set_defaults(func=cmd_create)

    update_parser = accounts_subparsers.add_parser("update", help="Edit an account")
    update_parser.add_argument("account_id", help="Account ID")
    update_parser.add_argument("--name", help="New account name")
    update_parser.add_argument(
        "--adjust", help="Shift the balance by this amount (e.g., -50.25)"
    )
    update_parser.add_argument(
        "--initial-balance",
        help="New opening balance; the balance is recomputed from history",
    )
    update_parser.set_defaults(func=cmd_update)

    delete_parser = accounts_subparsers.add_parser(
        "delete", help="Delete an account without transactions"
    )
    delete_parser.add_argument("account_id", help="Account ID")
    delete_parser.set_defaults(func=cmd_delete)

    reconcile_parser = accounts_subparsers.add_parser(
        "reconcile", help="Recompute all balances from transaction history"
    )
    reconcile_parser.set_defaults(func=cmd_reconcile)
