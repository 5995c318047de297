#!/usr/bin/env python3
"""
Purse CLI - Command-line interface for accounts, categories and transactions.

Usage:
    python -m cli [--user USER] <command> <subcommand> [options]

Commands:
    accounts     Manage accounts
    categories   Manage income and expense categories
    transactions Record and manage transactions
    stats        Period statistics and dashboard
    migrate      Database migrations

Examples:
    python -m cli migrate apply
    python -m cli accounts create Cash --initial-balance 1000
    python -m cli categories quick-add expense Groceries
    python -m cli transactions add expense 200 cat_exp_1a2b3c4d acc_0f1e2d3c4b5a
    python -m cli --user alice stats summary --period year
"""

import sys
import argparse
from cli import accounts, categories, migrate, stats, transactions
from config import load_config
from errors import PurseError
from services.base import Services
from db.manager import DatabaseManager
from logger import setup_logging


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Purse - Personal finance tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--user",
        help="User whose ledger to operate on (defaults to ledger.default_user)",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    accounts.setup_parser(subparsers)
    categories.setup_parser(subparsers)
    transactions.setup_parser(subparsers)
    stats.setup_parser(subparsers)
    migrate.setup_parser(subparsers)

    args = parser.parse_args()

    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    try:
        config = load_config()
        setup_logging(config)

        if args.command == "migrate":
            # Migrate commands need db_manager for raw database operations
            args.func(args, DatabaseManager(config))
        else:
            args.user = args.user or config.default_user
            args.func(args, Services(config))
    except PurseError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
