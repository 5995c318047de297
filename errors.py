"""Error taxonomy shared by the services.

Every error carries a stable ``kind`` so a transport layer can map it to a
response without inspecting messages.
"""


class PurseError(Exception):
    """Base class for all ledger errors."""

    kind = "error"


class ValidationError(PurseError):
    """Missing or malformed input; nothing was changed."""

    kind = "validation_error"


class InvalidCategory(PurseError):
    """Referenced category is absent or of the wrong type."""

    kind = "invalid_category"


class InvalidAccount(PurseError):
    """Referenced account does not exist."""

    kind = "invalid_account"


class NotFoundError(PurseError):
    """Target entity of an update or delete does not exist."""

    kind = "not_found"


class DuplicateCategory(PurseError):
    kind = "duplicate_category"


class DuplicateAccountName(PurseError):
    kind = "duplicate_account_name"


class CategoryInUse(PurseError):
    kind = "category_in_use"


class AccountInUse(PurseError):
    kind = "account_in_use"


class ReconciliationFailure(PurseError):
    """Balances could not be brought in line with a transaction change.

    Raised only after any partially persisted change has been rolled back.
    """

    kind = "reconciliation_failure"


class AccountNotFound(PurseError):
    """Raised by the balance engine when a transaction names an unknown account."""

    kind = "account_not_found"

    def __init__(self, account_id: str):
        super().__init__(f"Account with ID {account_id} not found")
        self.account_id = account_id


class ConfigError(PurseError):
    """The config file holds a value Purse cannot use."""

    kind = "config_error"
