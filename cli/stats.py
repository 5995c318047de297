#!/usr/bin/env python3

from cli.transactions import _parse_date
from logger import get_logger

logger = get_logger()


def cmd_summary(args, services):
    """Show income, expense and category breakdown for a period."""
    summary = services.stats.summary(
        args.user, args.period, start=args.start_date, end=args.end_date
    )
    currency = services.config.currency

    logger.info(f"\nPeriod: {summary.start.isoformat()} .. {summary.end.isoformat()}")
    logger.info("=" * 80)
    logger.info(f"Income:  {summary.total_income} {currency}")
    logger.info(f"Expense: {summary.total_expense} {currency}")
    logger.info(f"Net:     {summary.net} {currency}")

    if summary.expense_by_category:
        logger.info("\nExpenses by category:")
        for entry in summary.expense_by_category:
            logger.info(f"  {entry.name:<24} {entry.amount:>12}  {entry.percent:>5}%")


def cmd_dashboard(args, services):
    """Show balances, this month's totals and recent transactions."""
    dashboard = services.stats.dashboard(args.user)
    currency = services.config.currency

    logger.info(f"\nTotal balance: {dashboard.total_balance} {currency}")
    for account in dashboard.accounts:
        logger.info(f"  {account.name:<24} {account.balance:>12}")
    logger.info(f"\nThis month: +{dashboard.month_income} / -{dashboard.month_expense}")

    if dashboard.recent:
        logger.info("\nRecent transactions:")
        for listing in dashboard.recent:
            t = listing.transaction
            sign = "+" if t.type == "income" else "-"
            logger.info(
                f"  {t.date.date().isoformat()}  {sign}{t.amount:>12}  {listing.category_name}"
            )


def setup_parser(subparsers):
    """Setup stats subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "stats",
        help="Statistics and dashboard",
        description="Summaries of income, expenses and balances",
    )

    stats_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available stats commands",
        dest="subcommand",
        required=True,
    )

    summary_parser = stats_subparsers.add_parser("summary", help="Period summary")
    summary_parser.add_argument(
        "--period", choices=["week", "month", "year", "custom"], default="month"
    )
    summary_parser.add_argument("--start-date", type=_parse_date)
    summary_parser.add_argument("--end-date", type=_parse_date)
    summary_parser.set_defaults(func=cmd_summary)

    dashboard_parser = stats_subparsers.add_parser("dashboard", help="Dashboard")
    dashboard_parser.set_defaults(func=cmd_dashboard)
