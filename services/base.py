"""Base services container for dependency injection."""

from config import Config
from db.manager import DatabaseManager
from db.store import LedgerStore


class Services:
    """Container for all application services.

    Every service takes the acting user's ID on each call; the user is
    authenticated elsewhere.

    Args:
        config: Application configuration object.
        db_manager: Optional database manager for testing. If provided, config is ignored.
    """

    def __init__(self, config: Config, db_manager=None):
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)
        self.store = LedgerStore(self.db_manager)

        # Lazy import to avoid circular dependencies
        from services.accounts import AccountService
        from services.categories import CategoryService
        from services.reconciliation import BalanceReconciler
        from services.stats import StatsService
        from services.transactions import TransactionService

        self.reconciler = BalanceReconciler()
        self.accounts = AccountService(self.store, self.reconciler)
        self.categories = CategoryService(self.store)
        self.transactions = TransactionService(
            self.store, self.reconciler, self.categories
        )
        self.stats = StatsService(self.accounts, self.transactions, self.categories)
